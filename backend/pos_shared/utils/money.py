"""
Money helpers.

Amounts are integer cents everywhere; rates are Decimals. Percentage
surcharges are rounded half-up to the cent so that a preview and the charged
amount are identical for identical inputs.
"""

from decimal import ROUND_HALF_UP, Decimal

_ONE = Decimal("1")


def apply_rate(amount_cents: int, rate: Decimal) -> int:
    """Return ``amount_cents * (1 + rate)`` rounded half-up to the cent."""
    scaled = Decimal(amount_cents) * (_ONE + Decimal(rate))
    return int(scaled.quantize(_ONE, rounding=ROUND_HALF_UP))


def surcharge(amount_cents: int, rate: Decimal) -> int:
    """The surcharge portion alone: ``apply_rate(amount) - amount``."""
    return apply_rate(amount_cents, rate) - amount_cents


def to_cents(amount: Decimal | int | float | str) -> int:
    """Convert a currency amount (e.g. ``"12.50"``) to integer cents."""
    value = Decimal(str(amount)) * 100
    return int(value.quantize(_ONE, rounding=ROUND_HALF_UP))


def format_cents(amount_cents: int, symbol: str = "") -> str:
    """Format cents for receipts and logs, e.g. ``format_cents(27600, "₱") -> "₱276.00"``."""
    sign = "-" if amount_cents < 0 else ""
    whole, frac = divmod(abs(amount_cents), 100)
    return f"{sign}{symbol}{whole:,}.{frac:02d}"
