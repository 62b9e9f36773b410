"""
Field cleaning helpers shared by the CRUD services.

Each helper takes the raw request value and returns the cleaned Python value
or raises ValidationError naming the field.
"""
from datetime import date, datetime
from decimal import Decimal

from django.utils.dateparse import parse_datetime

from .exceptions import ValidationError
from .utils import format_phone, parse_amount


def clean_text(value, field: str, required: bool = False, max_length: int = 255) -> str | None:
    text = str(value).strip() if value is not None else ''
    if not text:
        if required:
            raise ValidationError(f'{field} is required', details={field: 'required'})
        return None
    if len(text) > max_length:
        raise ValidationError(f'{field} is too long', details={field: f'max {max_length} characters'})
    return text


def clean_date(value, field: str) -> date | None:
    if value in (None, ''):
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip()[:10], '%Y-%m-%d').date()
    except ValueError as err:
        raise ValidationError(f'{field} must be a YYYY-MM-DD date', details={field: 'invalid date'}) from err


def clean_datetime(value, field: str, required: bool = False) -> datetime | None:
    if value in (None, ''):
        if required:
            raise ValidationError(f'{field} is required', details={field: 'required'})
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = parse_datetime(str(value).strip())
    if parsed is None or parsed.tzinfo is None:
        raise ValidationError(
            f'{field} must be an ISO timestamp with offset',
            details={field: 'invalid timestamp'},
        )
    return parsed


def clean_amount(value, field: str, required: bool = False, min_value: Decimal | None = None,
                 message: str | None = None) -> Decimal | None:
    try:
        amount = parse_amount(value)
    except ValueError as err:
        raise ValidationError(message or f'{field} must be a number', details={field: 'invalid number'}) from err
    if amount is None:
        if required:
            raise ValidationError(message or f'{field} is required', details={field: 'required'})
        return None
    if min_value is not None and amount < min_value:
        raise ValidationError(message or f'{field} must be at least {min_value}', details={field: 'too small'})
    return amount


def clean_int(value, field: str, min_value: int | None = None, max_value: int | None = None) -> int | None:
    if value in (None, ''):
        return None
    try:
        number = int(str(value).strip())
    except ValueError as err:
        raise ValidationError(f'{field} must be a whole number', details={field: 'invalid number'}) from err
    if min_value is not None and number < min_value:
        raise ValidationError(f'{field} must be at least {min_value}', details={field: 'too small'})
    if max_value is not None and number > max_value:
        raise ValidationError(f'{field} must be at most {max_value}', details={field: 'too large'})
    return number


def clean_choice(value, field: str, choices: list[str], default: str | None = None) -> str | None:
    if value in (None, ''):
        return default
    text = str(value).strip()
    if text not in choices:
        raise ValidationError(
            f'{field} must be one of: {", ".join(choices)}',
            details={field: 'invalid choice'},
        )
    return text


def clean_phone(value, field: str = 'phone') -> str | None:
    """Formatted (888)888-8888, or None when the input is not a US number."""
    if value in (None, ''):
        return None
    return format_phone(str(value))
