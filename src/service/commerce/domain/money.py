from decimal import ROUND_HALF_UP, Decimal
from typing import Any


CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def to_money(value: Any) -> Decimal:
    """Normalize a price coming from the database, a request or a processor to cents."""
    if value is None:
        raise ValueError('Amount is required')
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    return int((to_money(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))
