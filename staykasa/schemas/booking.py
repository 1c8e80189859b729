"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from staykasa.schemas.property import PropertyResponse

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """Schema for a guest's booking request.

    The date order is checked by the engine so the caller gets the same
    ``invalid_range`` error whichever way the request arrives.
    """

    property_id: uuid.UUID
    check_in: date
    check_out: date
    guests: int = Field(..., ge=1)
    special_requests: str | None = Field(None, max_length=2000)


class BookingStatusUpdate(BaseModel):
    """Schema for a status transition request."""

    status: str = Field(..., pattern="^(pending|confirmed|cancelled|completed)$")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    """Standard booking response."""

    id: uuid.UUID
    property_id: uuid.UUID
    guest_id: uuid.UUID
    check_in: date
    check_out: date
    guests: int
    total_price: Decimal
    status: str
    special_requests: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingGuestResponse(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    phone: str | None = None

    model_config = ConfigDict(from_attributes=True)


class BookingDetailResponse(BookingResponse):
    """Booking with nested property and guest, for detail and dashboard views."""

    property: PropertyResponse | None = None
    guest: BookingGuestResponse | None = None


class BookingListResponse(BaseModel):
    """Paginated list of bookings."""

    items: list[BookingDetailResponse]
    total: int


class CompletionSweepResponse(BaseModel):
    completed: int
