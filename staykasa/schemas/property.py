"""Pydantic v2 request/response schemas for property endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyCreate(BaseModel):
    """Schema for listing a new property."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    location: str | None = Field(None, max_length=255)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    max_guests: int = Field(..., ge=1)
    is_active: bool = True


class PropertyUpdate(BaseModel):
    """Schema for partially updating a property. All fields optional.

    Rating fields are not editable here; review aggregation owns them.
    """

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    location: str | None = Field(None, max_length=255)
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    max_guests: int | None = Field(None, ge=1)
    is_active: bool | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertyResponse(BaseModel):
    """Public property information returned from the API."""

    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    description: str | None = None
    location: str | None = None
    price: Decimal
    max_guests: int
    is_active: bool
    rating: Decimal | None = None
    review_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PropertyListResponse(BaseModel):
    """Paginated list of properties."""

    items: list[PropertyResponse]
    total: int


class DayAvailabilityResponse(BaseModel):
    """Capacity of a single calendar day."""

    date: date
    committed_guests: int
    available_guests: int
    is_fully_booked: bool
    is_available: bool

    model_config = ConfigDict(from_attributes=True)


class BookedRangeResponse(BaseModel):
    check_in: date
    check_out: date
    guests: int
    status: str

    model_config = ConfigDict(from_attributes=True)


class AvailabilityResponse(BaseModel):
    """Per-day availability of a property over ``[start_date, end_date)``."""

    property_id: uuid.UUID
    max_guests: int
    is_active: bool
    start_date: date
    end_date: date
    days: list[DayAvailabilityResponse]
    booked_ranges: list[BookedRangeResponse]

    model_config = ConfigDict(from_attributes=True)


class PriceQuoteResponse(BaseModel):
    property_id: uuid.UUID
    check_in: date
    check_out: date
    nights: int
    nightly_price: Decimal
    total_price: Decimal
