"""Decide whether a requested stay may be accepted for a property."""

import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staykasa.booking.errors import CapacityExceeded, DateConflict, InvalidRange, PropertyUnavailable
from staykasa.booking.lifecycle import BLOCKING_STATUSES
from staykasa.models.booking import Booking
from staykasa.models.property import Property


def ranges_overlap(a_in: date, a_out: date, b_in: date, b_out: date) -> bool:
    """Half-open overlap: a stay ending on a day does not clash with one starting that day."""
    return a_in < b_out and a_out > b_in


def validate_request(prop: Property, check_in: date, check_out: date, guests: int) -> None:
    """Checks that need no other bookings, in the order callers report them."""
    if not prop.is_active:
        raise PropertyUnavailable()
    if guests < 1:
        raise CapacityExceeded("At least one guest is required")
    if guests > prop.max_guests:
        raise CapacityExceeded(f"Property can only accommodate up to {prop.max_guests} guests")
    if check_out <= check_in:
        raise InvalidRange()


async def find_conflicts(
    db: AsyncSession,
    property_id: uuid.UUID,
    check_in: date,
    check_out: date,
    exclude_booking_id: uuid.UUID | None = None,
) -> list[Booking]:
    """Return pending/confirmed bookings of the property overlapping ``[check_in, check_out)``."""
    query = select(Booking).where(
        Booking.property_id == property_id,
        Booking.status.in_([s.value for s in BLOCKING_STATUSES]),
        Booking.check_in < check_out,
        Booking.check_out > check_in,
    )
    if exclude_booking_id is not None:
        query = query.where(Booking.id != exclude_booking_id)

    result = await db.execute(query)
    return list(result.scalars().all())


async def ensure_bookable(
    db: AsyncSession,
    prop: Property,
    check_in: date,
    check_out: date,
    guests: int,
) -> None:
    """Raise the first applicable rejection, or return if the stay can be inserted.

    This read only produces a friendly early answer. Two concurrent requests
    can both pass it; the exclusion constraint on ``bookings`` settles the race.
    """
    validate_request(prop, check_in, check_out, guests)
    if await find_conflicts(db, prop.id, check_in, check_out):
        raise DateConflict()
