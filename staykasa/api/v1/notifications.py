"""In-app notification routes for the current user."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from staykasa.api.deps import get_current_active_user, get_db
from staykasa.models.user import User
from staykasa.notifications import service
from staykasa.schemas.notification import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
)

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse, summary="List my notifications")
async def list_notifications(
    unread: bool = Query(False, description="Only unread notifications"),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationListResponse:
    items = await service.list_notifications(db, current_user.id, unread_only=unread, limit=limit)
    return NotificationListResponse(items=[NotificationResponse.model_validate(n) for n in items])


@router.patch("", response_model=MarkReadResponse, summary="Mark notifications as read")
async def mark_notifications_read(
    body: MarkReadRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MarkReadResponse:
    updated = await service.mark_read(db, current_user.id, body.notification_ids)
    return MarkReadResponse(updated=updated)
