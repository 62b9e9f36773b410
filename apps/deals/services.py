"""
Deals Services

Business logic for deal creation, updates, deletion and status transitions.
"""
import logging
from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from uuid import UUID

from django.db import transaction

from apps.core.authentication import AuthenticatedUser
from apps.core.constants import (
    BENEFICIARY_RELATIONSHIPS,
    DEAL_SOURCES,
    DEAL_STATUS_TRANSITIONS,
    DEAL_STATUSES,
)
from apps.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from apps.core.models import Deal
from apps.core.permissions import can_access_agent
from apps.core.validators import (
    clean_amount,
    clean_choice,
    clean_date,
    clean_int,
    clean_phone,
    clean_text,
)

logger = logging.getLogger(__name__)


@dataclass
class DealInput:
    """Cleaned deal fields. None means "not provided" on updates."""
    full_name: str | None = None
    phone: str | None = None
    client_dob: date | None = None
    beneficiary_name: str | None = None
    beneficiary_relationship: str | None = None
    beneficiary_dob: date | None = None
    company: str | None = None
    premium: Decimal | None = None
    coverage: Decimal | None = None
    policy_number: str | None = None
    note: str | None = None
    product_name: str | None = None
    effective_date: date | None = None
    source: str | None = None
    referrals: int | None = None


class DealValidationError(ValidationError):
    """Raised when deal input is rejected."""
    def __init__(self, message: str, code: str = 'validation_error', details: dict | None = None):
        super().__init__(message, details=details)
        self.code = code


class InvalidStatusTransitionError(ConflictError):
    """Raised when a status change is not allowed from the current status."""
    def __init__(self, current: str, target: str):
        allowed = DEAL_STATUS_TRANSITIONS.get(current, [])
        super().__init__(
            f"Cannot move a deal from '{current}' to '{target}'",
            details={'current': current, 'target': target, 'allowed': allowed},
        )


def parse_deal_input(data: dict, partial: bool = False) -> tuple[DealInput, set[str]]:
    """
    Clean request data into a DealInput.

    Returns the input plus the set of field names present in the request, so
    partial updates can tell "cleared" from "not sent". `notes` is accepted
    as an alias for `note`.
    """
    if hasattr(data, 'dict'):
        data = data.dict()
    if 'notes' in data and 'note' not in data:
        data = {**data, 'note': data.get('notes')}

    present = {f.name for f in fields(DealInput) if f.name in data}

    if not partial or 'full_name' in present:
        clean_text(data.get('full_name'), 'full_name', required=True)
    if not partial or 'premium' in present:
        clean_amount(data.get('premium'), 'premium', required=True, min_value=Decimal('0'),
                     message='Premium must be a number of 0 or more')

    input_data = DealInput(
        full_name=clean_text(data.get('full_name'), 'full_name'),
        phone=clean_phone(data.get('phone')),
        client_dob=clean_date(data.get('client_dob'), 'client_dob'),
        beneficiary_name=clean_text(data.get('beneficiary_name'), 'beneficiary_name'),
        beneficiary_relationship=clean_choice(
            data.get('beneficiary_relationship'), 'beneficiary_relationship', BENEFICIARY_RELATIONSHIPS,
        ),
        beneficiary_dob=clean_date(data.get('beneficiary_dob'), 'beneficiary_dob'),
        company=clean_text(data.get('company'), 'company'),
        premium=clean_amount(data.get('premium'), 'premium', min_value=Decimal('0')),
        coverage=clean_amount(data.get('coverage'), 'coverage', min_value=Decimal('0')),
        policy_number=clean_text(data.get('policy_number'), 'policy_number'),
        note=clean_text(data.get('note'), 'note', max_length=5000),
        product_name=clean_text(data.get('product_name'), 'product_name'),
        effective_date=clean_date(data.get('effective_date'), 'effective_date'),
        source=clean_choice(data.get('source'), 'source', DEAL_SOURCES),
        referrals=clean_int(data.get('referrals'), 'referrals', min_value=0),
    )
    return input_data, present


def create_deal(user: AuthenticatedUser, input_data: DealInput) -> Deal:
    """
    Create a deal owned by the caller. New deals start as pending.
    """
    if not input_data.full_name:
        raise DealValidationError('Client full name is required', code='missing_name')

    deal = Deal.objects.create(
        agent_id=user.id,
        full_name=input_data.full_name,
        phone=input_data.phone,
        client_dob=input_data.client_dob,
        beneficiary_name=input_data.beneficiary_name,
        beneficiary_relationship=input_data.beneficiary_relationship,
        beneficiary_dob=input_data.beneficiary_dob,
        company=input_data.company,
        premium=input_data.premium or Decimal('0'),
        coverage=input_data.coverage,
        policy_number=input_data.policy_number,
        note=input_data.note,
        product_name=input_data.product_name,
        effective_date=input_data.effective_date,
        source=input_data.source,
        referrals=input_data.referrals,
        status='pending',
    )
    logger.info(f'Deal {deal.id} created by agent {user.id} (premium {deal.premium})')
    return deal


def _get_deal_for_write(deal_id: UUID, user: AuthenticatedUser) -> Deal:
    deal = Deal.objects.filter(id=deal_id).first()
    if not deal:
        raise NotFoundError('Deal not found')
    if not can_access_agent(user, deal.agent_id):
        raise PermissionDeniedError('You cannot modify this deal')
    return deal


@transaction.atomic
def update_deal(deal_id: UUID, user: AuthenticatedUser, input_data: DealInput, present: set[str]) -> Deal:
    """Apply the provided fields to a deal the caller may edit."""
    deal = _get_deal_for_write(deal_id, user)

    for name in present:
        value = getattr(input_data, name)
        if name == 'full_name' and not value:
            raise DealValidationError('Client full name is required', code='missing_name')
        if name == 'premium' and value is None:
            value = Decimal('0')
        setattr(deal, name, value)

    if present:
        deal.save(update_fields=sorted(present))
        logger.info(f'Deal {deal.id} updated by {user.id}: {sorted(present)}')
    return deal


def delete_deal(deal_id: UUID, user: AuthenticatedUser) -> None:
    deal = _get_deal_for_write(deal_id, user)
    deal.delete()
    logger.info(f'Deal {deal_id} deleted by {user.id}')


def validate_status_transition(current: str, target: str) -> None:
    """Raise unless target is a known status reachable from current."""
    if target not in DEAL_STATUSES:
        raise DealValidationError(
            f'status must be one of: {", ".join(DEAL_STATUSES)}', code='invalid_status',
        )
    if target == current:
        return
    if target not in DEAL_STATUS_TRANSITIONS.get(current, []):
        raise InvalidStatusTransitionError(current, target)


@transaction.atomic
def update_deal_status(deal_id: UUID, user: AuthenticatedUser, target: str) -> Deal:
    deal = _get_deal_for_write(deal_id, user)
    validate_status_transition(deal.status, target)

    if deal.status != target:
        previous = deal.status
        deal.status = target
        deal.save(update_fields=['status'])
        logger.info(f'Deal {deal.id} status {previous} -> {target} by {user.id}')
    return deal
