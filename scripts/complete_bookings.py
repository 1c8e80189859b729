"""Complete confirmed bookings whose check-out date has arrived.

Meant for a daily cron job; acts as the ``system`` actor.

Run:
    python -m scripts.complete_bookings
"""

import asyncio
import logging

from staykasa.database import async_session_factory, engine
from staykasa.notifications.dispatcher import DeferredNotifier, NotificationDispatcher
from staykasa.services.booking_service import complete_past_bookings

logger = logging.getLogger("scripts.complete_bookings")


async def main() -> None:
    notifier = DeferredNotifier(NotificationDispatcher(async_session_factory))
    async with async_session_factory() as session:
        completed = await complete_past_bookings(session, notifier=notifier)
        await session.commit()

    delivered = await notifier.flush()
    logger.info("Completed %d booking(s), sent %d notification(s)", completed, delivered)
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(main())
