"""Tests for notification delivery and the notifier adapters."""

import uuid
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staykasa.models.notification import Notification
from staykasa.models.user import User
from staykasa.notifications import service
from staykasa.notifications.dispatcher import BackgroundNotifier, DeferredNotifier, NotificationDispatcher

pytestmark = pytest.mark.asyncio

PAYLOAD = {
    "booking_id": "b-1",
    "property_title": "Labadi Beach House",
    "check_in": "2030-03-01",
    "check_out": "2030-03-04",
}


def _factory_for(db_session: AsyncSession):
    """Session factory that hands out the test session; commit becomes flush."""

    @asynccontextmanager
    async def factory():
        original_commit = db_session.commit
        db_session.commit = db_session.flush  # type: ignore[method-assign]
        try:
            yield db_session
        finally:
            db_session.commit = original_commit  # type: ignore[method-assign]

    return factory


class TestNotificationDispatcher:
    async def test_one_row_per_distinct_recipient(self, db_session: AsyncSession, test_user: User, host_user: User):
        dispatcher = NotificationDispatcher(_factory_for(db_session))

        delivered = await dispatcher.deliver([test_user.id, host_user.id, test_user.id], "booking_confirmed", PAYLOAD)

        assert delivered == 2
        result = await db_session.execute(
            select(Notification).where(Notification.user_id.in_([test_user.id, host_user.id]))
        )
        rows = list(result.scalars().all())
        assert len(rows) == 2
        assert all(r.title == "Booking confirmed: Labadi Beach House" for r in rows)
        assert all(r.is_read is False for r in rows)

    async def test_no_recipients(self):
        factory = MagicMock()
        dispatcher = NotificationDispatcher(factory)
        assert await dispatcher.deliver([], "booking_confirmed", PAYLOAD) == 0
        factory.assert_not_called()

    async def test_storage_failure_is_swallowed(self):
        def broken_factory():
            raise RuntimeError("database unreachable")

        dispatcher = NotificationDispatcher(broken_factory)  # type: ignore[arg-type]
        assert await dispatcher.deliver([uuid.uuid4()], "booking_confirmed", PAYLOAD) == 0


class TestBackgroundNotifier:
    def test_schedules_delivery(self):
        background_tasks = MagicMock()
        dispatcher = MagicMock()
        notifier = BackgroundNotifier(background_tasks, dispatcher)
        recipient = uuid.uuid4()

        notifier.notify({recipient}, "booking_cancelled", PAYLOAD)

        background_tasks.add_task.assert_called_once_with(
            dispatcher.deliver, [recipient], "booking_cancelled", PAYLOAD
        )


class TestDeferredNotifier:
    async def test_flush_delivers_queued_events_once(self):
        dispatcher = MagicMock()
        dispatcher.deliver = AsyncMock(return_value=1)
        notifier = DeferredNotifier(dispatcher)
        recipient = uuid.uuid4()

        notifier.notify([recipient], "booking_completed", PAYLOAD)
        notifier.notify([recipient], "booking_completed", PAYLOAD)
        dispatcher.deliver.assert_not_called()

        assert await notifier.flush() == 2
        assert dispatcher.deliver.await_count == 2
        assert await notifier.flush() == 0


class TestNotificationService:
    async def test_list_and_mark_read(self, db_session: AsyncSession, test_user: User, host_user: User):
        dispatcher = NotificationDispatcher(_factory_for(db_session))
        await dispatcher.deliver([test_user.id, host_user.id], "booking_created", PAYLOAD)

        mine = await service.list_notifications(db_session, test_user.id)
        assert len(mine) == 1

        theirs = await service.list_notifications(db_session, host_user.id)
        # Marking someone else's notification is a no-op.
        assert await service.mark_read(db_session, test_user.id, [theirs[0].id]) == 0
        assert await service.mark_read(db_session, test_user.id, [mine[0].id]) == 1

        unread = await service.list_notifications(db_session, test_user.id, unread_only=True)
        assert unread == []
