"""
Follow-Up Selectors
"""
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from django.utils import timezone

from apps.core.authentication import AuthenticatedUser
from apps.core.dates import day_bounds, local_now
from apps.core.models import FollowUp
from apps.core.permissions import get_record_scope, scope_queryset

FOLLOW_UP_FIELDS = [
    'id', 'agent_id', 'full_name', 'phone', 'client_dob', 'beneficiary_name',
    'beneficiary_dob', 'coverage', 'premium', 'company', 'notes', 'follow_up_at',
    'status', 'outcome', 'closed_at', 'deal_id', 'created_at',
]


def serialize_follow_up(row: dict, now: datetime | None = None) -> dict:
    now = now or timezone.now()
    data = {}
    for key, value in row.items():
        if hasattr(value, 'isoformat'):
            data[key] = value.isoformat()
        elif key in ('id', 'agent_id', 'deal_id') and value is not None:
            data[key] = str(value)
        elif key in ('coverage', 'premium') and value is not None:
            data[key] = float(value)
        else:
            data[key] = value
    data['is_due'] = row.get('status') == 'open' and row['follow_up_at'] <= now
    return data


def follow_up_to_dict(follow_up: FollowUp) -> dict:
    return serialize_follow_up({field: getattr(follow_up, field) for field in FOLLOW_UP_FIELDS})


def get_follow_ups(
    user: AuthenticatedUser,
    filter_name: str,
    tz: ZoneInfo,
    now: datetime | None = None,
) -> list[dict]:
    """
    Follow-ups for one list tab.

    due_now: open and at or before now. today: open within the local day.
    next_7_days: open from local midnight through the next seven days.
    all: every open one. completed: done or converted, newest first.
    """
    now = now or timezone.now()
    queryset = scope_queryset(FollowUp.objects.all(), get_record_scope(user))
    today_start, today_end = day_bounds(local_now(tz, now).date(), tz)

    if filter_name == 'completed':
        queryset = queryset.exclude(status='open').order_by('-follow_up_at')
    else:
        queryset = queryset.filter(status='open')
        if filter_name == 'due_now':
            queryset = queryset.filter(follow_up_at__lte=now)
        elif filter_name == 'today':
            queryset = queryset.filter(follow_up_at__gte=today_start, follow_up_at__lt=today_end)
        elif filter_name == 'next_7_days':
            week_end = today_start + timedelta(days=7)
            queryset = queryset.filter(follow_up_at__gte=today_start, follow_up_at__lt=week_end)
        queryset = queryset.order_by('follow_up_at')

    return [serialize_follow_up(row, now) for row in queryset.values(*FOLLOW_UP_FIELDS)]


def get_due_follow_ups(user: AuthenticatedUser, limit: int = 50, now: datetime | None = None) -> list[dict]:
    """The caller's own open follow-ups that are due, for reminder polling."""
    now = now or timezone.now()
    rows = (
        FollowUp.objects
        .filter(agent_id=user.id, status='open', follow_up_at__lte=now)
        .order_by('follow_up_at')
        .values(*FOLLOW_UP_FIELDS)[:limit]
    )
    return [serialize_follow_up(row, now) for row in rows]
