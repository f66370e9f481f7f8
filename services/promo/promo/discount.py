"""
Discount arithmetic shared by the promo service and cart pricing
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]


def compute_discount_amount(subtotal: Number, discount_percentage: Number) -> int:
    """
    Discount in whole currency units, rounded half-up.

    compute_discount_amount(1000, 20) == 200
    compute_discount_amount(333, 10) == 33
    """
    raw = Decimal(str(subtotal)) * Decimal(str(discount_percentage)) / Decimal(100)
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
