"""Guest-facing booking routes: request a stay, list and view bookings, change status.

Business rejections raise ``BookingError`` subclasses from the service layer;
the handler in ``staykasa.api.errors`` renders them with their status code.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from staykasa.api.deps import get_current_active_user, get_db, get_notifier
from staykasa.models.booking import Booking
from staykasa.models.user import User
from staykasa.notifications.dispatcher import Notifier
from staykasa.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from staykasa.services import booking_service

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book a property",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    notifier: Notifier = Depends(get_notifier),
) -> Booking:
    """Book a property as the authenticated user.

    Rejections: 404 unknown property, 409 ``property_unavailable`` or
    ``date_conflict``, 422 ``capacity_exceeded`` or ``invalid_range``.
    """
    return await booking_service.create_booking(
        db,
        property_id=body.property_id,
        guest_id=current_user.id,
        check_in=body.check_in,
        check_out=body.check_out,
        guests=body.guests,
        special_requests=body.special_requests,
        notifier=notifier,
    )


@router.get(
    "",
    response_model=BookingListResponse,
    summary="List the current user's bookings",
)
async def list_my_bookings(
    status_filter: str | None = Query(None, alias="status", description="Filter by booking status"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(10, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> dict:
    items, total = await booking_service.list_guest_bookings(
        db, current_user.id, status_filter=status_filter, skip=skip, limit=limit
    )
    return {"items": items, "total": total}


@router.get(
    "/{booking_id}",
    response_model=BookingDetailResponse,
    summary="Get booking detail with nested property and guest",
)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Booking:
    """Visible to the guest, the property's host, and admins; 404 for everyone else."""
    return await booking_service.get_booking_for_actor(db, booking_id, current_user.id, current_user.role)


@router.patch(
    "/{booking_id}/status",
    response_model=BookingResponse,
    summary="Confirm, cancel, or complete a booking",
)
async def update_booking_status(
    booking_id: uuid.UUID,
    body: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    notifier: Notifier = Depends(get_notifier),
) -> Booking:
    """Apply a status transition as the authenticated user.

    Rejections: 404 unknown booking, 403 ``forbidden`` when the user has no
    right to this transition, 409 ``invalid_transition`` for terminal bookings
    or transitions outside the lifecycle.
    """
    return await booking_service.transition_booking(
        db,
        booking_id,
        actor_id=current_user.id,
        actor_role=current_user.role,
        target_status=body.status,
        notifier=notifier,
    )
