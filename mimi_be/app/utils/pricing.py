from decimal import Decimal
from typing import Iterable, Optional, Tuple

ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert a price-like value to Decimal; None becomes zero.

    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def normalize_quantity(quantity: Optional[int]) -> int:
    """Missing or non-positive quantities count as a single unit."""
    if quantity is None or quantity <= 0:
        return 1
    return int(quantity)


def line_total(price, quantity: int) -> Decimal:
    return to_decimal(price) * int(quantity)


def compute_order_totals(
    lines: Iterable[Tuple[Decimal, int]],
    shipping_fee=None,
    discount_amount=None,
) -> Tuple[Decimal, Decimal, Decimal, Decimal]:
    """Return (subtotal, shipping_fee, discount_amount, final_amount).

    final_amount = subtotal + shipping_fee - discount_amount, floored at zero.
    """
    subtotal = sum((line_total(price, qty) for price, qty in lines), ZERO)
    shipping = to_decimal(shipping_fee)
    discount = to_decimal(discount_amount)
    final = subtotal + shipping - discount
    if final < ZERO:
        final = ZERO
    return subtotal, shipping, discount, final
