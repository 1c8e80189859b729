"""Price calculation for candidate bookings."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from staykasa.booking.errors import InvalidRange

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PriceQuote:
    nights: int
    nightly_price: Decimal
    total_price: Decimal


def count_nights(check_in: date, check_out: date) -> int:
    """Whole nights between two calendar dates."""
    nights = (check_out - check_in).days
    if nights < 1:
        raise InvalidRange()
    return nights


def calculate_total_price(nightly_price: Decimal, check_in: date, check_out: date) -> Decimal:
    """Return ``nights * nightly_price``; no currency conversion or formatting."""
    nights = count_nights(check_in, check_out)
    return (Decimal(nightly_price) * nights).quantize(_CENTS)


def quote(nightly_price: Decimal, check_in: date, check_out: date) -> PriceQuote:
    nights = count_nights(check_in, check_out)
    return PriceQuote(
        nights=nights,
        nightly_price=Decimal(nightly_price),
        total_price=calculate_total_price(nightly_price, check_in, check_out),
    )
