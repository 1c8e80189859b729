"""Reading and acknowledging a user's notifications."""

import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from staykasa.models.notification import Notification


async def list_notifications(
    db: AsyncSession,
    user_id: uuid.UUID,
    unread_only: bool = False,
    limit: int = 20,
) -> list[Notification]:
    """Newest first, only the user's own."""
    query = select(Notification).where(Notification.user_id == user_id)
    if unread_only:
        query = query.where(Notification.is_read.is_(False))
    query = query.order_by(Notification.created_at.desc()).limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def mark_read(db: AsyncSession, user_id: uuid.UUID, notification_ids: list[uuid.UUID]) -> int:
    """Mark the given notifications read. Ids belonging to other users are ignored."""
    if not notification_ids:
        return 0
    result = await db.execute(
        update(Notification)
        .where(Notification.id.in_(notification_ids), Notification.user_id == user_id)
        .values(is_read=True)
    )
    await db.flush()
    return result.rowcount or 0
