"""Host dashboard booking routes — bookings on the host's own properties."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from staykasa.api.deps import get_db, require_role
from staykasa.models.user import User
from staykasa.schemas.booking import BookingListResponse
from staykasa.services import booking_service

router = APIRouter(prefix="/api/v1/host", tags=["host"])


@router.get(
    "/bookings",
    response_model=BookingListResponse,
    summary="List bookings on the current host's properties",
)
async def list_host_bookings(
    status_filter: str | None = Query(None, alias="status", description="Filter by booking status"),
    property_id: uuid.UUID | None = Query(None, description="Filter by property"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_role("host", "admin")),
) -> dict:
    """Pending bookings awaiting approval show up here with ``status=pending``."""
    items, total = await booking_service.list_host_bookings(
        db,
        current_user.id,
        status_filter=status_filter,
        property_id=property_id,
        skip=skip,
        limit=limit,
    )
    return {"items": items, "total": total}
