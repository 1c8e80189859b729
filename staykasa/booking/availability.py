"""Per-day availability of a property.

``build_availability`` is the pure core: given the bookings that touch a
window it reports, for every calendar day, how many guests are already
committed and how much capacity is left. ``check_availability`` loads those
bookings from the database on every call; nothing is cached.
"""

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staykasa.booking.errors import InvalidRange, NotFound
from staykasa.booking.lifecycle import BLOCKING_STATUSES, BookingStatus
from staykasa.config import settings
from staykasa.models.booking import Booking
from staykasa.models.property import Property

logger = logging.getLogger(__name__)


class StayLike(Protocol):
    check_in: date
    check_out: date
    guests: int
    status: str


@dataclass(frozen=True)
class DayAvailability:
    date: date
    committed_guests: int
    available_guests: int
    is_fully_booked: bool

    @property
    def is_available(self) -> bool:
        return self.available_guests > 0


@dataclass(frozen=True)
class BookedRange:
    check_in: date
    check_out: date
    guests: int
    status: str


@dataclass(frozen=True)
class AvailabilityReport:
    property_id: uuid.UUID
    max_guests: int
    is_active: bool
    start_date: date
    end_date: date
    days: list[DayAvailability]
    booked_ranges: list[BookedRange]


def _is_blocking(status: str) -> bool:
    try:
        return BookingStatus(status) in BLOCKING_STATUSES
    except ValueError:
        return False


def iter_days(start: date, end: date) -> Iterable[date]:
    """Yield each day of ``[start, end)``."""
    day = start
    while day < end:
        yield day
        day += timedelta(days=1)


def build_availability(
    start: date,
    end: date,
    bookings: Iterable[StayLike],
    max_guests: int,
) -> list[DayAvailability]:
    """Compute per-day capacity for ``[start, end)``.

    Only pending/confirmed bookings count. A booking occupies the nights
    ``check_in <= day < check_out``.
    """
    if start >= end:
        raise InvalidRange("start_date must be before end_date")

    committed: dict[date, int] = {}
    for booking in bookings:
        if not _is_blocking(booking.status):
            continue
        first = max(booking.check_in, start)
        last = min(booking.check_out, end)
        for day in iter_days(first, last):
            committed[day] = committed.get(day, 0) + booking.guests

    days = []
    for day in iter_days(start, end):
        taken = committed.get(day, 0)
        days.append(
            DayAvailability(
                date=day,
                committed_guests=taken,
                available_guests=max_guests - taken,
                is_fully_booked=taken >= max_guests,
            )
        )
    return days


async def check_availability(
    db: AsyncSession,
    property_id: uuid.UUID,
    start: date,
    end: date,
) -> AvailabilityReport:
    """Build the availability report for one property and window."""
    if start >= end:
        raise InvalidRange("start_date must be before end_date")
    if (end - start).days > settings.availability_max_days:
        raise InvalidRange(f"Availability window cannot exceed {settings.availability_max_days} days")

    prop = await db.get(Property, property_id)
    if prop is None:
        raise NotFound("Property not found")

    result = await db.execute(
        select(Booking)
        .where(
            Booking.property_id == property_id,
            Booking.status.in_([s.value for s in BLOCKING_STATUSES]),
            Booking.check_in < end,
            Booking.check_out > start,
        )
        .order_by(Booking.check_in)
    )
    bookings = list(result.scalars().all())

    logger.debug("Availability for %s %s..%s: %d blocking bookings", property_id, start, end, len(bookings))

    return AvailabilityReport(
        property_id=prop.id,
        max_guests=prop.max_guests,
        is_active=prop.is_active,
        start_date=start,
        end_date=end,
        days=build_availability(start, end, bookings, prop.max_guests),
        booked_ranges=[
            BookedRange(check_in=b.check_in, check_out=b.check_out, guests=b.guests, status=b.status)
            for b in bookings
        ],
    )
