"""
Input Normalization

Calculator inputs arrive as raw form values. Invalid values are never
reported as errors: they are replaced by a default or clamped to a bound
before they reach the calculation engines.
"""

import math
from typing import Any, Optional

# Mortgage form defaults and minimums
MORTGAGE_DEFAULTS = {
    "home_price": 400000.0,
    "down_payment": 80000.0,
    "interest_rate_percent": 6.5,
    "term_years": 30,
    "property_tax_annual": 4800.0,
    "insurance_annual": 1200.0,
    "one_time_payment_month": 12,
}

MORTGAGE_MINIMUMS = {
    "home_price": 1000.0,
    "interest_rate_percent": 0.01,
}

MAX_RATE_PERCENT = 100.0
MAX_TERM_YEARS = 50
MAX_GROWTH_YEARS = 100


def parse_number(value: Any, default: float = 0.0) -> float:
    """
    Parse a raw input into a finite float.

    Accepts numbers and numeric strings; anything else (None, blanks,
    NaN, infinities, booleans) yields the default.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def validate_number(
    value: Any,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
    default: float = 0.0,
) -> float:
    """
    Normalize a numeric input.

    Unparseable values or values below min_value become the default;
    values above max_value are capped at max_value.
    """
    number = parse_number(value, default=math.nan)
    if math.isnan(number):
        return default
    if min_value is not None and number < min_value:
        return default
    if max_value is not None and number > max_value:
        return max_value
    return number


def validate_percentage(value: Any, default: float = 0.0) -> float:
    """Normalize a 0-100 percentage."""
    return validate_number(value, 0.0, 100.0, default)


def validate_positive_number(value: Any, default: float = 0.0) -> float:
    return validate_number(value, 0.0, None, default)


def validate_integer(value: Any, min_value: int, max_value: int, default: int) -> int:
    """Normalize an integer input, truncating any fractional part."""
    number = parse_number(value, default=math.nan)
    if math.isnan(number):
        return default
    integer = int(number)
    if integer < min_value:
        return default
    if integer > max_value:
        return max_value
    return integer


def validate_down_payment(value: Any, home_price: float) -> float:
    """Floor the down payment at 0 and cap it at the home price."""
    down_payment = parse_number(value, default=math.nan)
    if math.isnan(down_payment) or down_payment < 0:
        return 0.0
    return min(down_payment, home_price)


def validate_one_time_payment_month(value: Any, term_years: int) -> int:
    """Keep the lump-sum month within the loan term."""
    max_month = max(1, term_years * 12)
    return validate_integer(
        value, 1, max_month, min(MORTGAGE_DEFAULTS["one_time_payment_month"], max_month)
    )


def percent_to_rate(percent: float) -> float:
    """Convert a percentage (6.5) to a decimal rate (0.065)."""
    return percent / 100
