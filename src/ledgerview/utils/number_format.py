"""Currency formatting and numeric coercion for report cells."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from ledgerview.utils.amount_parser import parse_amount

CENT = Decimal("0.01")
ZERO = Decimal("0")


@dataclass(frozen=True)
class NumberPolicy:
    """How a report displays missing, zero and negative values.

    Reports disagree on zero and missing display, so every report carries
    its own policy instead of sharing a hard-coded rule.
    """

    missing: str = "0.00"
    zero: str = "0.00"
    thousands: bool = True
    parentheses: bool = True


ACCOUNTING = NumberPolicy()
DASH_MISSING = NumberPolicy(missing="-")
DASH_ZERO = NumberPolicy(missing="-", zero="-")
NOT_AVAILABLE = NumberPolicy(missing="N/A")
BLANK_ZERO = NumberPolicy(missing="", zero="")
# Spreadsheet-friendly CSV cells: no separators, leading minus sign.
PLAIN = NumberPolicy(thousands=False, parentheses=False)


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a raw cell value to a finite Decimal.

    Returns None for missing, NaN, infinite or unparseable input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        # str() keeps the shortest repr, avoiding binary float artifacts
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = parse_amount(value)
        except ValueError:
            return None
    else:
        return None

    if amount.is_nan() or amount.is_infinite():
        return None
    return amount


def coerce_amount(value: Any) -> Decimal:
    """Coerce a raw measure to a Decimal, treating dirty input as zero."""
    amount = to_decimal(value)
    return ZERO if amount is None else amount


def format_amount(value: Any, policy: NumberPolicy = ACCOUNTING) -> str:
    """Format a signed amount for display.

    Rules, in order:
    1. missing / NaN / infinite -> ``policy.missing``
    2. exact zero -> ``policy.zero``
    3. ``|value|`` rounded half-up to 2 places with thousands separators,
       wrapped in parentheses when negative.

    Args:
        value: Number, Decimal, numeric string or None
        policy: Display policy of the report

    Returns:
        Formatted string
    """
    amount = to_decimal(value)
    if amount is None:
        return policy.missing
    if amount == 0:
        return policy.zero

    rounded = abs(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    text = f"{rounded:,.2f}" if policy.thousands else f"{rounded:.2f}"
    if amount < 0:
        return f"({text})" if policy.parentheses else f"-{text}"
    return text


def percent_of(numerator: Any, denominator: Any) -> str:
    """Return ``numerator / denominator * 100`` with 2 decimals.

    A zero or missing denominator yields ``"0.00"`` rather than an
    infinite or NaN value.
    """
    den = coerce_amount(denominator)
    if den == 0:
        return "0.00"
    ratio = (coerce_amount(numerator) / den * 100).quantize(
        CENT, rounding=ROUND_HALF_UP
    )
    if ratio == 0:
        return "0.00"
    return f"{ratio:.2f}"
