"""
Deals Selectors

Read-side queries for the deal house and deal detail views.
"""
import logging
from uuid import UUID

from django.db.models import Q

from apps.core.authentication import AuthenticatedUser
from apps.core.constants import AP_MULTIPLIER, MAX_DEAL_HOUSE_ROWS
from apps.core.hierarchy import load_directory
from apps.core.models import Deal
from apps.core.permissions import get_visible_agent_ids, scope_queryset
from apps.core.utils import display_name, parse_premium

from .notes import parse_date_loose, resolve_structured_fields

logger = logging.getLogger(__name__)

DEAL_FIELDS = [
    'id', 'agent_id', 'created_at', 'full_name', 'phone', 'client_dob',
    'beneficiary_name', 'beneficiary_relationship', 'beneficiary_dob',
    'company', 'premium', 'coverage', 'policy_number', 'status', 'note',
    'product_name', 'effective_date', 'source', 'referrals',
]


def _agent_names(directory: list[dict]) -> dict:
    return {
        p['id']: display_name(p.get('first_name'), p.get('last_name'), p.get('email'))
        for p in directory
    }


def serialize_deal(row: dict, names: dict | None = None) -> dict:
    """JSON-ready deal with legacy note fields resolved and AP attached."""
    row = resolve_structured_fields(dict(row))
    premium = parse_premium(row.get('premium'))
    coverage = row.get('coverage')

    data = {
        'id': str(row['id']),
        'agent_id': str(row['agent_id']) if row.get('agent_id') else None,
        'created_at': row['created_at'].isoformat() if row.get('created_at') else None,
        'full_name': row.get('full_name'),
        'phone': row.get('phone'),
        'client_dob': row['client_dob'].isoformat() if row.get('client_dob') else None,
        'beneficiary_name': row.get('beneficiary_name'),
        'beneficiary_relationship': row.get('beneficiary_relationship'),
        'beneficiary_dob': row['beneficiary_dob'].isoformat() if row.get('beneficiary_dob') else None,
        'company': row.get('company'),
        'premium': premium,
        'ap': premium * AP_MULTIPLIER,
        'coverage': float(coverage) if coverage is not None else None,
        'policy_number': row.get('policy_number'),
        'status': row.get('status'),
        'note': row.get('note'),
        'product_name': row.get('product_name'),
        'effective_date': row['effective_date'].isoformat() if row.get('effective_date') else None,
        'source': row.get('source'),
        'referrals': row.get('referrals'),
    }
    if names is not None:
        data['agent_name'] = names.get(row.get('agent_id'), '—') if row.get('agent_id') else '—'
    return data


def deal_to_dict(deal: Deal) -> dict:
    return serialize_deal({field: getattr(deal, field) for field in DEAL_FIELDS})


def get_deal_house(
    user: AuthenticatedUser,
    search: str | None = None,
    agent_id: UUID | None = None,
    status: str | None = None,
    limit: int = MAX_DEAL_HOUSE_ROWS,
) -> dict:
    """
    Deals visible to the caller, newest first, with optional text search.

    Search matches client name, carrier, policy number, beneficiary, note or
    an exact client date of birth.
    """
    directory = load_directory()
    visible = get_visible_agent_ids(user, directory)

    queryset = scope_queryset(Deal.objects.all(), visible)
    if agent_id:
        queryset = queryset.filter(agent_id=agent_id)
    if status:
        queryset = queryset.filter(status=status)

    term = (search or '').strip()
    if term:
        condition = (
            Q(full_name__icontains=term)
            | Q(company__icontains=term)
            | Q(policy_number__icontains=term)
            | Q(beneficiary_name__icontains=term)
            | Q(note__icontains=term)
        )
        dob = parse_date_loose(term)
        if dob:
            condition |= Q(client_dob=dob)
        queryset = queryset.filter(condition)

    limit = max(1, min(limit, MAX_DEAL_HOUSE_ROWS))
    rows = list(queryset.order_by('-created_at').values(*DEAL_FIELDS)[:limit])
    names = _agent_names(directory)

    return {
        'deals': [serialize_deal(row, names) for row in rows],
        'count': len(rows),
        'truncated': len(rows) == limit,
    }


def get_deal_by_id(deal_id: UUID, user: AuthenticatedUser) -> dict | None:
    """Single deal if it is visible to the caller."""
    row = Deal.objects.filter(id=deal_id).values(*DEAL_FIELDS).first()
    if not row:
        return None
    if not user.is_admin and row['agent_id'] != user.id:
        visible = get_visible_agent_ids(user)
        if visible is not None and row['agent_id'] not in visible:
            return None
    return serialize_deal(row)
