"""
Utility functions for Flow Backend

Common helpers used across selectors, services and report formatting.
"""
import math
import re
from decimal import Decimal

from .constants import AP_MULTIPLIER, FALLBACK_AGENT_NAME

_NON_NUMERIC = re.compile(r'[^0-9.]')
_NON_DIGIT = re.compile(r'\D')


def format_full_name(first_name: str | None, last_name: str | None) -> str:
    """
    Format first and last name into a full name string.

    Args:
        first_name: The first name (can be None)
        last_name: The last name (can be None)

    Returns:
        Formatted full name with whitespace trimmed
    """
    return f"{first_name or ''} {last_name or ''}".strip()


def display_name(first_name: str | None, last_name: str | None, email: str | None = None) -> str:
    """Full name, falling back to email, then 'Agent'."""
    return format_full_name(first_name, last_name) or (email or '').strip() or FALLBACK_AGENT_NAME


def short_name(first_name: str | None, last_name: str | None, email: str | None = None) -> str:
    """
    Scoreboard name: "First L.".

    Falls back to the local part of the email, then 'Agent'.
    """
    first = (first_name or '').strip()
    last = (last_name or '').strip()
    if first or last:
        initial = f" {last[0].upper()}." if last else ''
        return f"{first}{initial}".strip()
    local_part = (email or '').split('@')[0].strip()
    return local_part or FALLBACK_AGENT_NAME


def parse_premium(value) -> float:
    """
    Coerce a loosely typed premium to a float.

    Numbers pass through, strings keep only digits and dots, everything
    else (None, malformed strings, NaN/inf) becomes 0.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        cleaned = _NON_NUMERIC.sub('', value)
        if not cleaned:
            return 0.0
        try:
            number = float(cleaned)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def annualize(premium) -> float:
    """Annual premium (AP) for a monthly premium."""
    return parse_premium(premium) * AP_MULTIPLIER


def parse_amount(value) -> Decimal | None:
    """
    Parse an optional money/number form field.

    Unlike parse_premium, blank input stays None so optional columns are
    left empty. Raises ValueError for input with no usable number.
    """
    if value is None:
        return None
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return Decimal(str(value))
    text = str(value).strip()
    if not text:
        return None
    cleaned = _NON_NUMERIC.sub('', text)
    if not cleaned or cleaned.count('.') > 1:
        raise ValueError(f'Not a number: {value}')
    amount = Decimal(cleaned)
    return -amount if text.startswith('-') else amount


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_money(value) -> str:
    """Whole-dollar amount with thousands separators: 12,345."""
    return f"{round_half_up(parse_premium(value)):,}"


def format_money_cents(value) -> str:
    """Amount with up to two decimals: 1,200.5 / 1,200."""
    text = f"{parse_premium(value):,.2f}"
    return text.rstrip('0').rstrip('.')


def format_phone(value: str | None) -> str | None:
    """Format a 10 digit US number as (888)888-8888; anything else is dropped."""
    digits = _NON_DIGIT.sub('', value or '')
    if len(digits) == 11 and digits.startswith('1'):
        digits = digits[1:]
    if len(digits) != 10:
        return None
    return f"({digits[:3]}){digits[3:6]}-{digits[6:]}"
