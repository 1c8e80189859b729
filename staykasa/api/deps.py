"""Shared API dependencies — single import point for all routers.

Re-exports database session, authentication, and notification dependencies
so that router modules can import everything they need from one place::

    from staykasa.api.deps import get_db, get_current_active_user
"""

from fastapi import BackgroundTasks, Depends

from staykasa.auth.dependencies import (
    get_current_active_user,
    get_current_user,
    require_role,
)
from staykasa.database import async_session_factory, get_db
from staykasa.notifications.dispatcher import BackgroundNotifier, NotificationDispatcher

_dispatcher = NotificationDispatcher(async_session_factory)


def get_dispatcher() -> NotificationDispatcher:
    """Return the process-wide dispatcher (overridden in tests)."""
    return _dispatcher


def get_notifier(
    background_tasks: BackgroundTasks,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> BackgroundNotifier:
    """Notifier that delivers after the response has been sent."""
    return BackgroundNotifier(background_tasks, dispatcher)


__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "get_dispatcher",
    "get_notifier",
    "require_role",
]
