"""Seed the database with StayKasa demo accounts, listings, and bookings.

Demo logins (all with password ``demo1234``):
- admin@staykasa.com (admin)
- host@staykasa.com (host, owns the three listings)
- guest@staykasa.com (guest)

Bookings are created through the booking service, so they go through the
same capacity, overlap, and pricing rules as API requests.

Run:
    python -m scripts.seed_data
"""

import asyncio
import logging
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import delete

from staykasa.auth.passwords import hash_password
from staykasa.booking.errors import BookingError
from staykasa.database import Base, async_session_factory, engine
from staykasa.models.booking import Booking
from staykasa.models.notification import Notification
from staykasa.models.property import Property
from staykasa.models.user import User
from staykasa.services.booking_service import create_booking, transition_booking

logger = logging.getLogger("scripts.seed_data")

DEMO_PASSWORD = "demo1234"

USERS = [
    {"email": "admin@staykasa.com", "first_name": "Admin", "last_name": "User", "role": "admin"},
    {"email": "host@staykasa.com", "first_name": "Kwame", "last_name": "Mensah", "role": "host"},
    {"email": "guest@staykasa.com", "first_name": "Ama", "last_name": "Owusu", "role": "guest"},
]

PROPERTIES = [
    {
        "title": "Luxury Villa in Accra",
        "description": "Four-bedroom villa with pool and garden in a quiet East Legon street.",
        "location": "East Legon, Accra",
        "price": Decimal("2500.00"),
        "max_guests": 4,
    },
    {
        "title": "Beachfront Apartment",
        "description": "Open-plan apartment a short walk from Kokrobite beach.",
        "location": "Kokrobite Beach",
        "price": Decimal("1800.00"),
        "max_guests": 6,
    },
    {
        "title": "City Center Studio",
        "description": "Compact studio in Osu, close to Oxford Street restaurants.",
        "location": "Osu, Accra",
        "price": Decimal("1200.00"),
        "max_guests": 2,
    },
]

# (property index, days from today, nights, guests, cancel afterwards)
BOOKINGS = [
    (0, 7, 3, 2, False),
    (0, 10, 2, 4, False),
    (1, 14, 5, 3, False),
    (1, 21, 4, 6, True),
    (2, 3, 1, 1, False),
]


async def seed() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as session:
        for model in (Notification, Booking, Property, User):
            await session.execute(delete(model))

        users: dict[str, User] = {}
        for data in USERS:
            user = User(hashed_password=hash_password(DEMO_PASSWORD), **data)
            session.add(user)
            users[data["role"]] = user
        await session.flush()

        properties = []
        for data in PROPERTIES:
            prop = Property(owner_id=users["host"].id, **data)
            session.add(prop)
            properties.append(prop)
        await session.flush()

        today = date.today()
        created = 0
        for index, offset, nights, guests, cancel in BOOKINGS:
            check_in = today + timedelta(days=offset)
            try:
                booking = await create_booking(
                    session,
                    property_id=properties[index].id,
                    guest_id=users["guest"].id,
                    check_in=check_in,
                    check_out=check_in + timedelta(days=nights),
                    guests=guests,
                )
            except BookingError as exc:
                logger.warning("Skipped demo booking on %s: %s", properties[index].title, exc.message)
                continue
            if cancel:
                await transition_booking(session, booking.id, users["guest"].id, "guest", "cancelled")
            created += 1

        await session.commit()

    logger.info("Seeded %d users, %d properties, %d bookings", len(users), len(properties), created)
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    asyncio.run(seed())
