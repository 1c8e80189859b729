"""Best-effort notification fan-out.

The booking engine only knows the ``Notifier`` protocol: a non-blocking
``notify`` call. ``BackgroundNotifier`` hands each event to FastAPI's
``BackgroundTasks`` so delivery runs after the response is sent, and
``NotificationDispatcher.deliver`` stores one in-app notification per
recipient in its own session. Failures are logged and never reach the
booking request.
"""

import logging
import uuid
from collections.abc import Iterable
from typing import Protocol

from fastapi import BackgroundTasks
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from staykasa.models.notification import Notification
from staykasa.notifications.templates import render

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, recipient_ids: Iterable[uuid.UUID], event_type: str, payload: dict) -> None: ...


class NotificationDispatcher:
    """Persists notifications for a set of recipients."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def deliver(self, recipient_ids: list[uuid.UUID], event_type: str, payload: dict) -> int:
        """Write one notification per distinct recipient; return how many were stored."""
        recipients = list(dict.fromkeys(recipient_ids))
        if not recipients:
            return 0

        title, message = render(event_type, payload)
        try:
            async with self._session_factory() as session:
                for user_id in recipients:
                    session.add(
                        Notification(
                            user_id=user_id,
                            event_type=event_type,
                            title=title,
                            message=message,
                            payload=payload,
                        )
                    )
                await session.commit()
        except Exception:
            logger.exception("Failed to deliver %s notification to %d recipient(s)", event_type, len(recipients))
            return 0

        logger.info("Delivered %s notification to %d recipient(s)", event_type, len(recipients))
        return len(recipients)


class BackgroundNotifier:
    """Notifier that defers delivery to FastAPI background tasks."""

    def __init__(self, background_tasks: BackgroundTasks, dispatcher: NotificationDispatcher) -> None:
        self._background_tasks = background_tasks
        self._dispatcher = dispatcher

    def notify(self, recipient_ids: Iterable[uuid.UUID], event_type: str, payload: dict) -> None:
        self._background_tasks.add_task(self._dispatcher.deliver, list(recipient_ids), event_type, payload)


class DeferredNotifier:
    """Collects events and delivers them when ``flush`` is awaited, typically after a commit."""

    def __init__(self, dispatcher: NotificationDispatcher) -> None:
        self._dispatcher = dispatcher
        self._pending: list[tuple[list[uuid.UUID], str, dict]] = []

    def notify(self, recipient_ids: Iterable[uuid.UUID], event_type: str, payload: dict) -> None:
        self._pending.append((list(recipient_ids), event_type, payload))

    async def flush(self) -> int:
        pending, self._pending = self._pending, []
        delivered = 0
        for recipient_ids, event_type, payload in pending:
            delivered += await self._dispatcher.deliver(recipient_ids, event_type, payload)
        return delivered
