"""Tests for property endpoints, availability and price quotes."""

import uuid

import pytest
from httpx import AsyncClient

from staykasa.models.property import Property

pytestmark = pytest.mark.asyncio


# ---------------------------------------------------------------------------
# Catalog CRUD
# ---------------------------------------------------------------------------


class TestPropertyCatalog:
    async def test_host_creates_property(self, client: AsyncClient, host_headers: dict) -> None:
        response = await client.post(
            "/api/v1/properties",
            json={"title": "Kokrobite Cabin", "location": "Kokrobite, Ghana", "price": "450.00", "max_guests": 3},
            headers=host_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Kokrobite Cabin"
        assert data["max_guests"] == 3
        assert data["is_active"] is True

    async def test_guest_cannot_create_property(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.post(
            "/api/v1/properties",
            json={"title": "Nope", "price": "100.00", "max_guests": 1},
            headers=auth_headers,
        )
        assert response.status_code == 403

    async def test_invalid_price_rejected(self, client: AsyncClient, host_headers: dict) -> None:
        response = await client.post(
            "/api/v1/properties",
            json={"title": "Free Stay", "price": "0", "max_guests": 1},
            headers=host_headers,
        )
        assert response.status_code == 422

    async def test_public_list_and_filters(self, client: AsyncClient, test_property: Property) -> None:
        response = await client.get("/api/v1/properties", params={"location": "accra", "min_guests": 4})
        assert response.status_code == 200
        ids = [p["id"] for p in response.json()["items"]]
        assert str(test_property.id) in ids

        too_big = await client.get("/api/v1/properties", params={"location": "accra", "min_guests": 5})
        assert str(test_property.id) not in [p["id"] for p in too_big.json()["items"]]

    async def test_get_unknown_property(self, client: AsyncClient) -> None:
        response = await client.get(f"/api/v1/properties/{uuid.uuid4()}")
        assert response.status_code == 404

    async def test_owner_deactivates(self, client: AsyncClient, host_headers: dict, test_property: Property) -> None:
        response = await client.put(
            f"/api/v1/properties/{test_property.id}", json={"is_active": False}, headers=host_headers
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    async def test_non_owner_cannot_update(
        self, client: AsyncClient, auth_headers: dict, test_property: Property
    ) -> None:
        response = await client.put(
            f"/api/v1/properties/{test_property.id}", json={"title": "Mine now"}, headers=auth_headers
        )
        assert response.status_code == 404


# ---------------------------------------------------------------------------
# GET /api/v1/properties/{id}/availability
# ---------------------------------------------------------------------------


class TestAvailability:
    async def test_reports_each_day(
        self, client: AsyncClient, auth_headers: dict, test_property: Property
    ) -> None:
        await client.post(
            "/api/v1/bookings",
            json={"property_id": str(test_property.id), "check_in": "2030-03-02", "check_out": "2030-03-04", "guests": 4},
            headers=auth_headers,
        )

        response = await client.get(
            f"/api/v1/properties/{test_property.id}/availability",
            params={"start_date": "2030-03-01", "end_date": "2030-03-05"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["max_guests"] == 4
        days = {d["date"]: d for d in data["days"]}
        assert list(days) == ["2030-03-01", "2030-03-02", "2030-03-03", "2030-03-04"]
        assert days["2030-03-01"]["available_guests"] == 4
        assert days["2030-03-02"]["is_fully_booked"] is True
        assert days["2030-03-03"]["is_available"] is False
        assert days["2030-03-04"]["committed_guests"] == 0
        assert data["booked_ranges"] == [
            {"check_in": "2030-03-02", "check_out": "2030-03-04", "guests": 4, "status": "confirmed"}
        ]

    async def test_cancelled_bookings_free_capacity(
        self, client: AsyncClient, auth_headers: dict, test_property: Property
    ) -> None:
        created = await client.post(
            "/api/v1/bookings",
            json={"property_id": str(test_property.id), "check_in": "2030-03-02", "check_out": "2030-03-04", "guests": 2},
            headers=auth_headers,
        )
        await client.patch(
            f"/api/v1/bookings/{created.json()['id']}/status", json={"status": "cancelled"}, headers=auth_headers
        )

        response = await client.get(
            f"/api/v1/properties/{test_property.id}/availability",
            params={"start_date": "2030-03-01", "end_date": "2030-03-05"},
        )
        assert all(d["committed_guests"] == 0 for d in response.json()["days"])

    async def test_inactive_property_still_reported(
        self, client: AsyncClient, test_property: Property, db_session
    ) -> None:
        test_property.is_active = False
        await db_session.flush()

        response = await client.get(
            f"/api/v1/properties/{test_property.id}/availability",
            params={"start_date": "2030-03-01", "end_date": "2030-03-02"},
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    async def test_invalid_window(self, client: AsyncClient, test_property: Property) -> None:
        response = await client.get(
            f"/api/v1/properties/{test_property.id}/availability",
            params={"start_date": "2030-03-05", "end_date": "2030-03-01"},
        )
        assert response.status_code == 422
        assert response.json()["code"] == "invalid_range"

    async def test_unknown_property(self, client: AsyncClient) -> None:
        response = await client.get(
            f"/api/v1/properties/{uuid.uuid4()}/availability",
            params={"start_date": "2030-03-01", "end_date": "2030-03-02"},
        )
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    async def test_default_window_near_end_of_calendar(self, client: AsyncClient, test_property: Property) -> None:
        response = await client.get(
            f"/api/v1/properties/{test_property.id}/availability", params={"start_date": "9999-12-30"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["end_date"] == "9999-12-31"
        assert [d["date"] for d in data["days"]] == ["9999-12-30"]

    async def test_default_window_near_end_of_calendar_unknown_property(self, client: AsyncClient) -> None:
        response = await client.get(
            f"/api/v1/properties/{uuid.uuid4()}/availability", params={"start_date": "9999-12-30"}
        )
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    async def test_window_too_long(self, client: AsyncClient, test_property: Property) -> None:
        response = await client.get(
            f"/api/v1/properties/{test_property.id}/availability",
            params={"start_date": "0001-01-01", "end_date": "9999-12-31"},
        )
        assert response.status_code == 422
        assert response.json()["code"] == "invalid_range"

    async def test_default_window(self, client: AsyncClient, test_property: Property) -> None:
        response = await client.get(f"/api/v1/properties/{test_property.id}/availability")
        assert response.status_code == 200
        assert len(response.json()["days"]) == 365


# ---------------------------------------------------------------------------
# GET /api/v1/properties/{id}/quote
# ---------------------------------------------------------------------------


class TestQuote:
    async def test_quote(self, client: AsyncClient, test_property: Property) -> None:
        response = await client.get(
            f"/api/v1/properties/{test_property.id}/quote",
            params={"check_in": "2030-03-01", "check_out": "2030-03-04"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["nights"] == 3
        assert float(data["total_price"]) == 3000.0

    async def test_quote_invalid_range(self, client: AsyncClient, test_property: Property) -> None:
        response = await client.get(
            f"/api/v1/properties/{test_property.id}/quote",
            params={"check_in": "2030-03-04", "check_out": "2030-03-04"},
        )
        assert response.status_code == 422
        assert response.json()["code"] == "invalid_range"
