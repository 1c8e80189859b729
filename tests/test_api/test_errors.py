"""Tests for the JSON error contract and the health endpoint."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from staykasa.api.errors import register_exception_handlers
from staykasa.booking.errors import (
    BookingError,
    CapacityExceeded,
    DateConflict,
    Forbidden,
    InvalidRange,
    InvalidTransition,
    NotFound,
    PersistenceError,
    PropertyUnavailable,
)
from staykasa.main import app

pytestmark = pytest.mark.asyncio


def _app_raising(exc: Exception) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    async def boom():
        raise exc

    return app


async def _get(app: FastAPI):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        return await ac.get("/boom")


class TestBookingErrorKinds:
    @pytest.mark.parametrize(
        "error_cls,status_code,code",
        [
            (InvalidRange, 422, "invalid_range"),
            (CapacityExceeded, 422, "capacity_exceeded"),
            (PropertyUnavailable, 409, "property_unavailable"),
            (DateConflict, 409, "date_conflict"),
            (NotFound, 404, "not_found"),
            (Forbidden, 403, "forbidden"),
            (InvalidTransition, 409, "invalid_transition"),
            (PersistenceError, 500, "internal_error"),
        ],
    )
    async def test_rendered_with_status_and_code(self, error_cls, status_code, code):
        response = await _get(_app_raising(error_cls()))
        assert response.status_code == status_code
        assert response.json() == {"detail": error_cls.default_message, "code": code}

    async def test_custom_message(self):
        response = await _get(_app_raising(CapacityExceeded("Property can only accommodate up to 4 guests")))
        assert response.json()["detail"] == "Property can only accommodate up to 4 guests"

    def test_all_kinds_are_booking_errors(self):
        for cls in (InvalidRange, CapacityExceeded, PropertyUnavailable, DateConflict, NotFound, Forbidden):
            assert issubclass(cls, BookingError)


class TestDatabaseErrors:
    async def test_generic_internal_error(self):
        exc = OperationalError("SELECT 1", {}, Exception("connection refused"))
        response = await _get(_app_raising(exc))
        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error", "code": "internal_error"}
        assert "connection refused" not in response.text


class TestHealth:
    async def test_health(self):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            response = await ac.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "StayKasa"}
