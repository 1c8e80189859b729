"""Admin booking routes — platform-wide listing and the completion sweep."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from staykasa.api.deps import get_db, get_notifier, require_role
from staykasa.models.user import User
from staykasa.notifications.dispatcher import Notifier
from staykasa.schemas.booking import BookingListResponse, CompletionSweepResponse
from staykasa.services import booking_service

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get(
    "/bookings",
    response_model=BookingListResponse,
    summary="List all bookings",
)
async def list_all_bookings(
    search: str | None = Query(None, description="Guest name/email or property title/location"),
    status_filter: str | None = Query(None, alias="status", description="Filter by booking status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_role("admin")),
) -> dict:
    items, total = await booking_service.list_all_bookings(
        db, status_filter=status_filter, search=search, skip=skip, limit=limit
    )
    return {"items": items, "total": total}


@router.post(
    "/bookings/complete-past",
    response_model=CompletionSweepResponse,
    summary="Complete confirmed bookings whose check-out date has arrived",
)
async def complete_past_bookings(
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_role("admin")),
    notifier: Notifier = Depends(get_notifier),
) -> CompletionSweepResponse:
    completed = await booking_service.complete_past_bookings(db, notifier=notifier)
    return CompletionSweepResponse(completed=completed)
