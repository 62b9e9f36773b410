"""
Follow-Up Services

Creating, rescheduling and closing follow-up reminders, including turning
a follow-up into a pending deal.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from uuid import UUID
from zoneinfo import ZoneInfo

from django.db import transaction
from django.utils import timezone

from apps.core.authentication import AuthenticatedUser
from apps.core.constants import DEFAULT_FOLLOW_UP_TIME, FOLLOW_UP_PRESETS, FOLLOW_UP_TRANSITIONS
from apps.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from apps.core.models import Deal, FollowUp
from apps.core.permissions import can_access_agent
from apps.core.validators import clean_amount, clean_date, clean_datetime, clean_phone, clean_text

logger = logging.getLogger(__name__)

PRESET_OFFSETS = {
    '24hrs': timedelta(hours=24),
    '48hrs': timedelta(hours=48),
    'next_week': timedelta(days=7),
}


@dataclass
class FollowUpInput:
    """Cleaned follow-up fields."""
    full_name: str
    follow_up_at: datetime
    phone: str | None = None
    client_dob: date | None = None
    beneficiary_name: str | None = None
    beneficiary_dob: date | None = None
    coverage: Decimal | None = None
    premium: Decimal | None = None
    company: str | None = None
    notes: str | None = None


def _parse_clock(value: str | None) -> time:
    text = (value or DEFAULT_FOLLOW_UP_TIME).strip()
    try:
        hours, minutes = text.split(':')[:2]
        return time(int(hours), int(minutes))
    except (ValueError, TypeError):
        return time(9, 0)


def compute_follow_up_at(
    preset: str,
    tz: ZoneInfo,
    custom_date: date | None = None,
    custom_time: str | None = None,
    now: datetime | None = None,
) -> datetime:
    """
    Resolve a scheduling preset to an aware timestamp.

    24hrs/48hrs/next_week are offsets from now; custom is a local date plus
    a HH:MM time (09:00 when missing or unreadable) in the caller's zone.
    """
    now = now or timezone.now()
    if preset in PRESET_OFFSETS:
        return now + PRESET_OFFSETS[preset]
    if preset == 'custom':
        if not custom_date:
            raise ValidationError('Pick a date for a custom follow up', details={'date': 'required'})
        return datetime.combine(custom_date, _parse_clock(custom_time), tzinfo=tz)
    raise ValidationError(
        f'preset must be one of: {", ".join(FOLLOW_UP_PRESETS)}', details={'preset': 'invalid choice'},
    )


def resolve_follow_up_at(data: dict, tz: ZoneInfo, now: datetime | None = None) -> datetime | None:
    """Explicit follow_up_at wins; otherwise a preset is applied."""
    if data.get('follow_up_at'):
        return clean_datetime(data.get('follow_up_at'), 'follow_up_at')
    if data.get('preset'):
        return compute_follow_up_at(
            data['preset'],
            tz,
            custom_date=clean_date(data.get('date'), 'date'),
            custom_time=data.get('time'),
            now=now,
        )
    return None


def parse_follow_up_input(data: dict, tz: ZoneInfo) -> FollowUpInput:
    if hasattr(data, 'dict'):
        data = data.dict()

    full_name = clean_text(data.get('full_name'), 'full_name')
    follow_up_at = resolve_follow_up_at(data, tz)
    if not full_name or not follow_up_at:
        raise ValidationError('Full name + follow up time required.')

    return FollowUpInput(
        full_name=full_name,
        follow_up_at=follow_up_at,
        phone=clean_phone(data.get('phone')),
        client_dob=clean_date(data.get('client_dob'), 'client_dob'),
        beneficiary_name=clean_text(data.get('beneficiary_name'), 'beneficiary_name'),
        beneficiary_dob=clean_date(data.get('beneficiary_dob'), 'beneficiary_dob'),
        coverage=clean_amount(data.get('coverage'), 'coverage', min_value=Decimal('0')),
        premium=clean_amount(data.get('premium'), 'premium', min_value=Decimal('0')),
        company=clean_text(data.get('company'), 'company'),
        notes=clean_text(data.get('notes'), 'notes', max_length=5000),
    )


def create_follow_up(user: AuthenticatedUser, input_data: FollowUpInput) -> FollowUp:
    follow_up = FollowUp.objects.create(
        agent_id=user.id,
        status='open',
        **input_data.__dict__,
    )
    logger.info(f'Follow up {follow_up.id} scheduled by {user.id} for {follow_up.follow_up_at.isoformat()}')
    return follow_up


def _get_follow_up_for_write(follow_up_id: UUID, user: AuthenticatedUser) -> FollowUp:
    follow_up = FollowUp.objects.filter(id=follow_up_id).first()
    if not follow_up:
        raise NotFoundError('Follow up not found')
    if not can_access_agent(user, follow_up.agent_id):
        raise PermissionDeniedError('You cannot modify this follow up')
    return follow_up


def _transition(follow_up: FollowUp, target: str) -> None:
    if target not in FOLLOW_UP_TRANSITIONS.get(follow_up.status, []):
        raise ConflictError(
            f"Follow up is already {follow_up.status}",
            details={'current': follow_up.status, 'target': target},
        )
    follow_up.status = target


def reschedule_follow_up(follow_up_id: UUID, user: AuthenticatedUser, follow_up_at: datetime) -> FollowUp:
    follow_up = _get_follow_up_for_write(follow_up_id, user)
    if follow_up.status != 'open':
        raise ConflictError(f'Cannot reschedule a follow up that is {follow_up.status}')

    follow_up.follow_up_at = follow_up_at
    follow_up.save(update_fields=['follow_up_at'])
    logger.info(f'Follow up {follow_up.id} rescheduled to {follow_up_at.isoformat()}')
    return follow_up


def close_follow_up(follow_up_id: UUID, user: AuthenticatedUser, outcome: str = 'completed') -> FollowUp:
    """Mark an open follow-up done, recording whether it was completed or denied."""
    follow_up = _get_follow_up_for_write(follow_up_id, user)
    _transition(follow_up, 'done')
    follow_up.outcome = outcome
    follow_up.closed_at = timezone.now()
    follow_up.save(update_fields=['status', 'outcome', 'closed_at'])
    logger.info(f'Follow up {follow_up.id} closed ({outcome}) by {user.id}')
    return follow_up


@transaction.atomic
def convert_follow_up(follow_up_id: UUID, user: AuthenticatedUser) -> Deal:
    """Create a pending deal from a follow-up and mark it converted."""
    follow_up = _get_follow_up_for_write(follow_up_id, user)
    _transition(follow_up, 'converted')

    deal = Deal.objects.create(
        agent_id=follow_up.agent_id,
        full_name=follow_up.full_name,
        phone=follow_up.phone,
        client_dob=follow_up.client_dob,
        beneficiary_name=follow_up.beneficiary_name,
        beneficiary_dob=follow_up.beneficiary_dob,
        coverage=follow_up.coverage,
        premium=follow_up.premium or Decimal('0'),
        company=follow_up.company,
        note=follow_up.notes,
        status='pending',
    )

    follow_up.outcome = 'converted'
    follow_up.closed_at = timezone.now()
    follow_up.deal = deal
    follow_up.save(update_fields=['status', 'outcome', 'closed_at', 'deal'])
    logger.info(f'Follow up {follow_up.id} converted to deal {deal.id}')
    return deal


def delete_follow_up(follow_up_id: UUID, user: AuthenticatedUser) -> None:
    follow_up = _get_follow_up_for_write(follow_up_id, user)
    follow_up.delete()
    logger.info(f'Follow up {follow_up_id} deleted by {user.id}')
