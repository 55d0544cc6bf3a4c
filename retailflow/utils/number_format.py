"""Number and date parsing utilities for JSON request payloads."""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

CENT = Decimal('0.01')


def parse_money(value, field='amount', allow_negative=False) -> Decimal:
    """
    Parse a JSON number or numeric string into a 2-decimal Decimal.

    Floats are converted through str() so 0.1 stays 0.10 instead of
    inheriting binary rounding noise.

    Raises:
        ValueError: if the value is missing, not numeric or negative.
    """
    if value is None or isinstance(value, bool) or value == '':
        raise ValueError(f'{field} is required')

    try:
        decimal_value = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f'{field} must be a number')

    if not decimal_value.is_finite():
        raise ValueError(f'{field} must be a number')

    if decimal_value < 0 and not allow_negative:
        raise ValueError(f'{field} must be a non-negative number')

    return decimal_value.quantize(CENT)


def parse_optional_money(value, field='amount', default=None):
    """Like parse_money, but returns default for missing values."""
    if value is None or value == '':
        return default
    return parse_money(value, field)


def parse_int(value, field='quantity', minimum=None) -> int:
    """
    Parse a JSON integer (or integral string/float) into int.

    Raises:
        ValueError: if the value is missing, fractional, or below minimum.
    """
    if value is None or isinstance(value, bool) or value == '':
        raise ValueError(f'{field} is required')

    try:
        decimal_value = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f'{field} must be a whole number')

    if not decimal_value.is_finite() or decimal_value != decimal_value.to_integral_value():
        raise ValueError(f'{field} must be a whole number')

    result = int(decimal_value)
    if minimum is not None and result < minimum:
        raise ValueError(f'{field} must be at least {minimum}')
    return result


def parse_date(value, field='date', default=None):
    """Parse an ISO date (YYYY-MM-DD, or a datetime string) into a date."""
    if value is None or value == '':
        return default
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        raise ValueError(f'{field} must be a date in YYYY-MM-DD format')
