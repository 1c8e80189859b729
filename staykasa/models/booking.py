"""Booking model — guest reservations of a property for a date range."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    DDL,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    event,
    func,
)
from sqlalchemy.dialects.postgresql import ExcludeConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staykasa.booking.lifecycle import BLOCKING_STATUSES, BookingStatus
from staykasa.database import Base, UUIDPrimaryKeyMixin

OVERLAP_CONSTRAINT_NAME = "excl_bookings_property_active_overlap"


class Booking(UUIDPrimaryKeyMixin, Base):
    """A reservation linking a guest to a property for ``[check_in, check_out)``."""

    __tablename__ = "bookings"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    guest_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    guests: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=BookingStatus.PENDING.value,
        nullable=False,
        index=True,
    )  # pending, confirmed, cancelled, completed
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    property: Mapped["Property"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    guest: Mapped["User"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (
        CheckConstraint("check_out > check_in", name="ck_bookings_date_order"),
        CheckConstraint("guests > 0", name="ck_bookings_guests_positive"),
        CheckConstraint("total_price >= 0", name="ck_bookings_total_price_non_negative"),
        Index("ix_bookings_check_in", "check_in"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, property_id={self.property_id}, guest_id={self.guest_id}, status={self.status})>"
        )


# Two pending/confirmed bookings of one property may never share a night.
# Half-open ranges let a check-out day be the next check-in day.
_table = Booking.__table__
_table.append_constraint(
    ExcludeConstraint(
        (_table.c.property_id, "="),
        (func.daterange(_table.c.check_in, _table.c.check_out, "[)"), "&&"),
        name=OVERLAP_CONSTRAINT_NAME,
        using="gist",
        where=_table.c.status.in_([s.value for s in BLOCKING_STATUSES]),
    )
)

# btree_gist provides the gist "=" operator class for the UUID column.
event.listen(
    Base.metadata,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
