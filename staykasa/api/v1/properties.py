"""Property catalog routes, plus the public availability and price-quote lookups."""

import uuid
from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from staykasa.api.deps import get_current_active_user, get_db, require_role
from staykasa.booking.availability import check_availability
from staykasa.booking.pricing import quote
from staykasa.config import settings
from staykasa.models.property import Property
from staykasa.models.user import User
from staykasa.schemas.property import (
    AvailabilityResponse,
    PriceQuoteResponse,
    PropertyCreate,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
)

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


async def _get_property_or_404(db: AsyncSession, property_id: uuid.UUID) -> Property:
    prop = await db.get(Property, property_id)
    if prop is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )
    return prop


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="List a new property",
)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_role("host", "admin")),
) -> PropertyResponse:
    """Create a property owned by the authenticated host."""
    prop = Property(owner_id=current_user.id, **body.model_dump())
    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    return PropertyResponse.model_validate(prop)


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="Browse active properties",
)
async def list_properties(
    location: str | None = Query(None, description="Case-insensitive location match"),
    min_guests: int | None = Query(None, ge=1, description="Properties that fit at least this many guests"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> PropertyListResponse:
    """Return a page of bookable properties, newest first."""
    filters = [Property.is_active.is_(True)]
    if location:
        filters.append(Property.location.ilike(f"%{location}%"))
    if min_guests is not None:
        filters.append(Property.max_guests >= min_guests)

    total_result = await db.execute(select(func.count()).select_from(Property).where(*filters))
    total = total_result.scalar_one()

    result = await db.execute(
        select(Property).where(*filters).order_by(Property.created_at.desc()).offset(skip).limit(limit)
    )
    items = list(result.scalars().all())

    return PropertyListResponse(
        items=[PropertyResponse.model_validate(p) for p in items],
        total=total,
    )


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Get a property by ID",
)
async def get_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> PropertyResponse:
    return PropertyResponse.model_validate(await _get_property_or_404(db, property_id))


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update a property",
)
async def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PropertyResponse:
    """Partially update a property. Owners and admins only; others get 404."""
    prop = await _get_property_or_404(db, property_id)
    if prop.owner_id != current_user.id and current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(prop, field, value)

    await db.flush()
    await db.refresh(prop)
    return PropertyResponse.model_validate(prop)


@router.get(
    "/{property_id}/availability",
    response_model=AvailabilityResponse,
    summary="Per-day availability of a property",
)
async def get_availability(
    property_id: uuid.UUID,
    start_date: date | None = Query(None, description="First day (inclusive), defaults to today"),
    end_date: date | None = Query(None, description="Last day (exclusive), defaults to a year ahead"),
    db: AsyncSession = Depends(get_db),
) -> AvailabilityResponse:
    """Committed guests and remaining capacity for each day in ``[start_date, end_date)``."""
    start = start_date or date.today()
    if end_date is not None:
        end = end_date
    else:
        try:
            end = start + timedelta(days=settings.availability_default_days)
        except OverflowError:
            end = date.max
    report = await check_availability(db, property_id, start, end)
    return AvailabilityResponse.model_validate(report)


@router.get(
    "/{property_id}/quote",
    response_model=PriceQuoteResponse,
    summary="Price a stay without booking it",
)
async def get_quote(
    property_id: uuid.UUID,
    check_in: date = Query(...),
    check_out: date = Query(...),
    db: AsyncSession = Depends(get_db),
) -> PriceQuoteResponse:
    prop = await _get_property_or_404(db, property_id)
    price = quote(prop.price, check_in, check_out)
    return PriceQuoteResponse(
        property_id=prop.id,
        check_in=check_in,
        check_out=check_out,
        nights=price.nights,
        nightly_price=price.nightly_price,
        total_price=price.total_price,
    )
