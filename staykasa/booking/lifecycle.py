"""Booking state machine: statuses, the transition table, and who may fire it.

Pure functions only. The actor is passed in explicitly so permission checks
can be tested without a request context.
"""

import enum
import uuid
from dataclasses import dataclass
from datetime import date

from staykasa.booking.errors import Forbidden, InvalidTransition


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Statuses that hold the dates and count against capacity.
BLOCKING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})
TERMINAL_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED})


class Capacity(str, enum.Enum):
    """The relationship an actor has to a particular booking."""

    GUEST = "guest"  # the user who made the booking
    HOST = "host"  # the owner of the booked property
    ADMIN = "admin"
    SYSTEM = "system"  # scheduled jobs, not a user


@dataclass(frozen=True)
class TransitionRule:
    allowed: frozenset[Capacity]
    requires_checkout_passed: bool = False


TRANSITIONS: dict[tuple[BookingStatus, BookingStatus], TransitionRule] = {
    (BookingStatus.PENDING, BookingStatus.CONFIRMED): TransitionRule(
        allowed=frozenset({Capacity.HOST, Capacity.ADMIN}),
    ),
    (BookingStatus.PENDING, BookingStatus.CANCELLED): TransitionRule(
        allowed=frozenset({Capacity.GUEST, Capacity.HOST, Capacity.ADMIN}),
    ),
    (BookingStatus.CONFIRMED, BookingStatus.CANCELLED): TransitionRule(
        allowed=frozenset({Capacity.GUEST, Capacity.HOST, Capacity.ADMIN}),
    ),
    (BookingStatus.CONFIRMED, BookingStatus.COMPLETED): TransitionRule(
        allowed=frozenset({Capacity.SYSTEM, Capacity.ADMIN}),
        requires_checkout_passed=True,
    ),
}


def initial_status(auto_confirm: bool) -> BookingStatus:
    """Status a freshly accepted guest booking starts in."""
    return BookingStatus.CONFIRMED if auto_confirm else BookingStatus.PENDING


def actor_capacities(
    actor_id: uuid.UUID | None,
    actor_role: str,
    booking_guest_id: uuid.UUID,
    property_owner_id: uuid.UUID,
) -> frozenset[Capacity]:
    """Work out every capacity the actor holds for one booking.

    A host only counts as HOST on their own property, and anyone counts as
    GUEST on a booking they made, whatever their role.
    """
    capacities: set[Capacity] = set()
    if actor_role == "system":
        capacities.add(Capacity.SYSTEM)
    if actor_role == "admin":
        capacities.add(Capacity.ADMIN)
    if actor_id is not None:
        if actor_id == booking_guest_id:
            capacities.add(Capacity.GUEST)
        if actor_role in ("host", "admin") and actor_id == property_owner_id:
            capacities.add(Capacity.HOST)
    return frozenset(capacities)


def authorize_transition(
    current: BookingStatus | str,
    target: BookingStatus | str,
    capacities: frozenset[Capacity],
    check_out: date,
    today: date,
) -> TransitionRule:
    """Validate a status change, raising the specific rejection on failure.

    Checked in order: terminal source status, pair missing from the table,
    actor lacks an allowed capacity, checkout precondition.
    """
    current = BookingStatus(current)
    target = BookingStatus(target)

    if current in TERMINAL_STATUSES:
        raise InvalidTransition(f"Booking is {current.value}; no further transitions are allowed")

    rule = TRANSITIONS.get((current, target))
    if rule is None:
        raise InvalidTransition(f"Cannot move a booking from {current.value} to {target.value}")

    if not capacities & rule.allowed:
        raise Forbidden(f"You are not allowed to mark this booking {target.value}")

    if rule.requires_checkout_passed and today < check_out:
        raise InvalidTransition("Booking cannot be completed before its check-out date")

    return rule
