"""
Debt Case Services

Validation and writes for the debt-management workflow.
"""
import logging
import re
from decimal import Decimal
from uuid import UUID

from apps.core.authentication import AuthenticatedUser
from apps.core.constants import DEBT_CASE_SOURCES, DEBT_CASE_STATUSES
from apps.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from apps.core.models import DebtCase
from apps.core.permissions import can_access_agent
from apps.core.validators import clean_amount, clean_choice, clean_phone, clean_text

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = [
    'full_name', 'phone', 'creditor', 'account_last4', 'balance',
    'monthly_payment', 'interest_rate', 'status', 'source', 'note',
]


def _clean_last4(value) -> str | None:
    if value in (None, ''):
        return None
    digits = re.sub(r'\D', '', str(value))
    if len(digits) != 4:
        raise ValidationError('Account last 4 must be 4 digits', details={'account_last4': 'invalid'})
    return digits


def parse_debt_case_input(data: dict, partial: bool = False) -> dict:
    """
    Clean request data into model field values.

    Only fields present in the request are returned on partial updates.
    """
    if hasattr(data, 'dict'):
        data = data.dict()

    cleaners = {
        'full_name': lambda v: clean_text(v, 'full_name'),
        'phone': lambda v: clean_phone(v),
        'creditor': lambda v: clean_text(v, 'creditor'),
        'account_last4': _clean_last4,
        'balance': lambda v: clean_amount(
            v, 'balance', min_value=Decimal('0'), message='Balance must be a valid number',
        ),
        'monthly_payment': lambda v: clean_amount(
            v, 'monthly_payment', min_value=Decimal('0'), message='Monthly payment must be a valid number',
        ),
        'interest_rate': lambda v: clean_amount(
            v, 'interest_rate', min_value=Decimal('0'), message='Interest rate must be a valid number',
        ),
        'status': lambda v: clean_choice(v, 'status', DEBT_CASE_STATUSES, default='open'),
        'source': lambda v: clean_choice(v, 'source', DEBT_CASE_SOURCES),
        'note': lambda v: clean_text(v, 'note', max_length=5000),
    }

    names = [name for name in EDITABLE_FIELDS if name in data] if partial else EDITABLE_FIELDS
    values = {name: cleaners[name](data.get(name)) for name in names}

    if 'full_name' in values and not values['full_name']:
        raise ValidationError('Client name is required', details={'full_name': 'required'})
    if 'creditor' in values and not values['creditor']:
        raise ValidationError('Creditor is required', details={'creditor': 'required'})
    if 'balance' in values and values['balance'] is None:
        raise ValidationError('Balance must be a valid number', details={'balance': 'required'})

    return values


def create_debt_case(user: AuthenticatedUser, values: dict) -> DebtCase:
    debt_case = DebtCase.objects.create(agent_id=user.id, **values)
    logger.info(f'Debt case {debt_case.id} created by {user.id}')
    return debt_case


def _get_debt_case_for_write(case_id: UUID, user: AuthenticatedUser) -> DebtCase:
    debt_case = DebtCase.objects.filter(id=case_id).first()
    if not debt_case:
        raise NotFoundError('Debt case not found')
    if not can_access_agent(user, debt_case.agent_id):
        raise PermissionDeniedError('You cannot modify this debt case')
    return debt_case


def update_debt_case(case_id: UUID, user: AuthenticatedUser, values: dict) -> DebtCase:
    debt_case = _get_debt_case_for_write(case_id, user)
    if values.get('status') is None:
        values.pop('status', None)
    for name, value in values.items():
        setattr(debt_case, name, value)
    if values:
        debt_case.save(update_fields=[*values, 'updated_at'])
        logger.info(f'Debt case {debt_case.id} updated by {user.id}: {sorted(values)}')
    return debt_case


def delete_debt_case(case_id: UUID, user: AuthenticatedUser) -> None:
    debt_case = _get_debt_case_for_write(case_id, user)
    debt_case.delete()
    logger.info(f'Debt case {case_id} deleted by {user.id}')
