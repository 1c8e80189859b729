"""Booking lifecycle service — create, transition, complete, and list bookings.

All functions take an ``AsyncSession`` and leave committing to the caller
(``get_db`` for API requests). The acting user is always passed explicitly.
"""

import logging
import uuid
from collections.abc import Iterable
from datetime import date

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from staykasa.booking.conflicts import ensure_bookable
from staykasa.booking.errors import DateConflict, InvalidTransition, NotFound, PersistenceError
from staykasa.booking.lifecycle import (
    BookingStatus,
    Capacity,
    actor_capacities,
    authorize_transition,
    initial_status,
)
from staykasa.booking.pricing import calculate_total_price
from staykasa.config import settings
from staykasa.models.booking import OVERLAP_CONSTRAINT_NAME, Booking
from staykasa.models.property import Property
from staykasa.models.user import User
from staykasa.notifications.dispatcher import Notifier

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for exclusion_violation.
EXCLUSION_VIOLATION = "23P01"

_TRANSITION_EVENTS = {
    BookingStatus.CONFIRMED: "booking_confirmed",
    BookingStatus.CANCELLED: "booking_cancelled",
    BookingStatus.COMPLETED: "booking_completed",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_overlap_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code == EXCLUSION_VIOLATION or OVERLAP_CONSTRAINT_NAME in str(orig)


def _booking_payload(booking: Booking, prop: Property, guest: User | None) -> dict:
    """JSON-safe summary of a booking for notifications."""
    return {
        "booking_id": str(booking.id),
        "property_id": str(prop.id),
        "property_title": prop.title,
        "guest_name": guest.full_name if guest else "A guest",
        "check_in": booking.check_in.isoformat(),
        "check_out": booking.check_out.isoformat(),
        "guests": booking.guests,
        "total_price": str(booking.total_price),
        "status": booking.status,
    }


def _dispatch(
    notifier: Notifier | None,
    recipient_ids: Iterable[uuid.UUID],
    event_type: str,
    payload: dict,
) -> None:
    """Hand an event to the notifier; a failing notifier never fails the booking."""
    if notifier is None:
        return
    recipients = [r for r in recipient_ids if r is not None]
    if not recipients:
        return
    try:
        notifier.notify(recipients, event_type, payload)
    except Exception:
        logger.exception("Failed to dispatch %s notification for booking %s", event_type, payload.get("booking_id"))


async def _admin_ids(db: AsyncSession) -> list[uuid.UUID]:
    try:
        async with db.begin_nested():
            result = await db.execute(select(User.id).where(User.role == "admin", User.is_active.is_(True)))
            return list(result.scalars().all())
    except SQLAlchemyError:
        logger.exception("Failed to look up admin recipients")
        return []


async def _paginate(db: AsyncSession, query: Select, skip: int, limit: int) -> tuple[list[Booking], int]:
    total_result = await db.execute(select(func.count()).select_from(query.order_by(None).subquery()))
    total = total_result.scalar_one()

    result = await db.execute(query.order_by(Booking.created_at.desc()).offset(skip).limit(limit))
    return list(result.scalars().all()), total


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


async def create_booking(
    db: AsyncSession,
    property_id: uuid.UUID,
    guest_id: uuid.UUID,
    check_in: date,
    check_out: date,
    guests: int,
    special_requests: str | None = None,
    notifier: Notifier | None = None,
) -> Booking:
    """Accept a guest's booking request or raise the reason it was rejected.

    Raises:
        NotFound: Property or guest does not exist.
        PropertyUnavailable, CapacityExceeded, InvalidRange, DateConflict:
            The request fails a booking rule.
        PersistenceError: The database failed for an unrelated reason.
    """
    prop = await db.get(Property, property_id)
    if prop is None:
        raise NotFound("Property not found")

    guest = await db.get(User, guest_id)
    if guest is None:
        raise NotFound("Guest not found")

    await ensure_bookable(db, prop, check_in, check_out, guests)

    booking = Booking(
        property_id=prop.id,
        guest_id=guest.id,
        check_in=check_in,
        check_out=check_out,
        guests=guests,
        total_price=calculate_total_price(prop.price, check_in, check_out),
        status=initial_status(settings.booking_auto_confirm).value,
        special_requests=special_requests or None,
    )

    # The exclusion constraint is the final word on overlaps: a concurrent
    # request that slipped past ensure_bookable fails here.
    try:
        async with db.begin_nested():
            db.add(booking)
            await db.flush()
    except IntegrityError as exc:
        if _is_overlap_violation(exc):
            logger.info("Overlap rejected by constraint for property %s %s..%s", prop.id, check_in, check_out)
            raise DateConflict() from None
        logger.exception("Integrity error while inserting booking for property %s", prop.id)
        raise PersistenceError() from exc
    except SQLAlchemyError as exc:
        logger.exception("Database error while inserting booking for property %s", prop.id)
        raise PersistenceError() from exc

    await db.refresh(booking)
    logger.info(
        "Booking %s created: property=%s guest=%s %s..%s guests=%d total=%s status=%s",
        booking.id,
        prop.id,
        guest.id,
        check_in,
        check_out,
        guests,
        booking.total_price,
        booking.status,
    )

    if notifier is not None:
        payload = _booking_payload(booking, prop, guest)
        admins = await _admin_ids(db)
        _dispatch(notifier, [prop.owner_id, *admins], "booking_created", payload)
        _dispatch(notifier, [guest.id], "booking_confirmation", payload)

    return booking


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


async def transition_booking(
    db: AsyncSession,
    booking_id: uuid.UUID,
    actor_id: uuid.UUID | None,
    actor_role: str,
    target_status: BookingStatus | str,
    today: date | None = None,
    notifier: Notifier | None = None,
) -> Booking:
    """Move a booking to ``target_status`` on behalf of an actor.

    The booking row is locked for the rest of the transaction so two
    concurrent transitions are applied one after the other.
    """
    try:
        target = BookingStatus(target_status)
    except ValueError:
        raise InvalidTransition(f"Unknown booking status {target_status!r}") from None

    # populate_existing: an already-loaded row must be re-read once the lock is held.
    result = await db.execute(
        select(Booking)
        .where(Booking.id == booking_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if booking is None:
        raise NotFound("Booking not found")

    prop = booking.property
    guest = booking.guest
    capacities = actor_capacities(actor_id, actor_role, booking.guest_id, prop.owner_id)
    authorize_transition(booking.status, target, capacities, booking.check_out, today or date.today())

    previous = booking.status
    booking.status = target.value
    await db.flush()
    await db.refresh(booking)
    logger.info("Booking %s: %s -> %s by %s (%s)", booking.id, previous, target.value, actor_id, actor_role)

    if notifier is not None:
        recipients = {booking.guest_id, prop.owner_id}
        recipients.discard(actor_id)
        if target is not BookingStatus.CANCELLED:
            recipients.discard(prop.owner_id)
        _dispatch(notifier, recipients, _TRANSITION_EVENTS[target], _booking_payload(booking, prop, guest))

    return booking


async def complete_past_bookings(
    db: AsyncSession,
    today: date | None = None,
    notifier: Notifier | None = None,
) -> int:
    """Complete every confirmed booking whose check-out date has arrived.

    Rows locked by another transaction are skipped and picked up next run.
    """
    today = today or date.today()
    result = await db.execute(
        select(Booking)
        .where(Booking.status == BookingStatus.CONFIRMED.value, Booking.check_out <= today)
        .with_for_update(skip_locked=True)
    )
    bookings = list(result.scalars().all())

    system = frozenset({Capacity.SYSTEM})
    for booking in bookings:
        authorize_transition(booking.status, BookingStatus.COMPLETED, system, booking.check_out, today)
        booking.status = BookingStatus.COMPLETED.value
    await db.flush()

    for booking in bookings:
        payload = _booking_payload(booking, booking.property, booking.guest)
        _dispatch(notifier, [booking.guest_id], "booking_completed", payload)

    if bookings:
        logger.info("Completed %d booking(s) with check-out on or before %s", len(bookings), today)
    return len(bookings)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_booking_for_actor(
    db: AsyncSession,
    booking_id: uuid.UUID,
    actor_id: uuid.UUID,
    actor_role: str,
) -> Booking:
    """Return a booking the actor may see: their own stay, a stay at their property, or anything for admins.

    Bookings the actor may not see are reported as missing.
    """
    booking = await db.get(Booking, booking_id)
    if booking is None:
        raise NotFound("Booking not found")
    if actor_role != "admin" and actor_id not in (booking.guest_id, booking.property.owner_id):
        raise NotFound("Booking not found")
    return booking


async def list_guest_bookings(
    db: AsyncSession,
    guest_id: uuid.UUID,
    status_filter: str | None = None,
    skip: int = 0,
    limit: int = 10,
) -> tuple[list[Booking], int]:
    """A guest's own bookings, newest first."""
    query = select(Booking).where(Booking.guest_id == guest_id)
    if status_filter is not None:
        query = query.where(Booking.status == status_filter)
    return await _paginate(db, query, skip, limit)


async def list_host_bookings(
    db: AsyncSession,
    owner_id: uuid.UUID,
    status_filter: str | None = None,
    property_id: uuid.UUID | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Booking], int]:
    """Bookings on properties the host owns."""
    query = (
        select(Booking).join(Property, Booking.property_id == Property.id).where(Property.owner_id == owner_id)
    )
    if status_filter is not None:
        query = query.where(Booking.status == status_filter)
    if property_id is not None:
        query = query.where(Booking.property_id == property_id)
    return await _paginate(db, query, skip, limit)


async def list_all_bookings(
    db: AsyncSession,
    status_filter: str | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 10,
) -> tuple[list[Booking], int]:
    """Every booking, for admins. ``search`` matches guest name/email and property title/location."""
    query = (
        select(Booking)
        .join(Property, Booking.property_id == Property.id)
        .join(User, Booking.guest_id == User.id)
    )
    if status_filter is not None:
        query = query.where(Booking.status == status_filter)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.email.ilike(pattern),
                Property.title.ilike(pattern),
                Property.location.ilike(pattern),
            )
        )
    return await _paginate(db, query, skip, limit)
