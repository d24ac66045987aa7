"""Stay pricing rules"""

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from app.config import settings

SECONDS_PER_NIGHT = 24 * 60 * 60


def round_half_up(value: float) -> float:
    """Round to whole currency units, halves away from zero"""
    return float(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def count_nights(check_in: datetime, check_out: datetime) -> int:
    return math.ceil((check_out - check_in).total_seconds() / SECONDS_PER_NIGHT)


def nightly_rate(base_price: float, discount: float) -> float:
    """Nightly price after the room type's percentage discount"""
    if discount and discount > 0:
        return round_half_up(base_price * (1 - discount / 100))
    return base_price


def quote_total(subtotal: float) -> Tuple[float, float]:
    """Return (tax, total) for a subtotal"""
    tax = round_half_up(subtotal * settings.tax_rate)
    return tax, subtotal + tax


@dataclass
class StayQuote:
    price_per_night: float
    nights: int
    subtotal: float
    tax: float
    total: float


def quote_stay(base_price: float, discount: float, check_in: datetime, check_out: datetime) -> StayQuote:
    nights = count_nights(check_in, check_out)
    price_per_night = nightly_rate(base_price, discount)
    subtotal = price_per_night * nights
    tax, total = quote_total(subtotal)
    return StayQuote(
        price_per_night=price_per_night,
        nights=nights,
        subtotal=subtotal,
        tax=tax,
        total=total,
    )


def sum_line_subtotals(lines: Iterable) -> float:
    return sum(line.subtotal for line in lines)
