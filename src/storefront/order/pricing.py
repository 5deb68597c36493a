"""Money arithmetic for carts and orders.

Amounts are computed with ``Decimal`` and rounded half-up to cents, then
handed back as floats for storage and JSON.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def _decimal(value) -> Decimal:
    return Decimal(str(value or 0))


def to_amount(value: Decimal) -> float:
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


def subtotal(lines) -> float:
    """Sum of ``price * quantity`` over ``(price, quantity)`` pairs."""
    total = sum((_decimal(price) * int(quantity) for price, quantity in lines), Decimal("0"))
    return to_amount(total)


def discounted_total(amount, percentage) -> float:
    """``amount * (1 - percentage / 100)`` rounded to cents."""
    factor = Decimal("1") - _decimal(percentage) / Decimal("100")
    return to_amount(_decimal(amount) * factor)


def amounts_match(expected, actual) -> bool:
    """Totals agree when they differ by no more than one cent."""
    return abs(_decimal(expected) - _decimal(actual)) <= CENT
