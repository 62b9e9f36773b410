"""
Debt Case Selectors
"""
from django.db.models import Q, Sum

from apps.core.authentication import AuthenticatedUser
from apps.core.models import DebtCase
from apps.core.permissions import get_record_scope, scope_queryset

DEBT_CASE_FIELDS = [
    'id', 'agent_id', 'full_name', 'phone', 'creditor', 'account_last4', 'balance',
    'monthly_payment', 'interest_rate', 'status', 'source', 'note', 'created_at', 'updated_at',
]


def serialize_debt_case(row: dict) -> dict:
    data = dict(row)
    data['id'] = str(row['id'])
    data['agent_id'] = str(row['agent_id']) if row.get('agent_id') else None
    for key in ('balance', 'monthly_payment', 'interest_rate'):
        data[key] = float(row[key]) if row.get(key) is not None else None
    for key in ('created_at', 'updated_at'):
        data[key] = row[key].isoformat() if row.get(key) else None
    return data


def debt_case_to_dict(debt_case: DebtCase) -> dict:
    return serialize_debt_case({field: getattr(debt_case, field) for field in DEBT_CASE_FIELDS})


def get_debt_cases(
    user: AuthenticatedUser,
    search: str | None = None,
    status: str | None = None,
    source: str | None = None,
) -> dict:
    """Cases in the caller's scope, filtered, with balance and payment totals."""
    queryset = scope_queryset(DebtCase.objects.all(), get_record_scope(user))

    term = (search or '').strip()
    if term:
        queryset = queryset.filter(
            Q(full_name__icontains=term) | Q(phone__icontains=term) | Q(creditor__icontains=term)
        )
    if status:
        queryset = queryset.filter(status=status)
    if source:
        queryset = queryset.filter(source=source)

    totals = queryset.aggregate(balance=Sum('balance'), monthly_payment=Sum('monthly_payment'))
    rows = [serialize_debt_case(row) for row in queryset.order_by('-created_at').values(*DEBT_CASE_FIELDS)]

    return {
        'cases': rows,
        'count': len(rows),
        'totals': {
            'balance': float(totals['balance'] or 0),
            'monthly_payment': float(totals['monthly_payment'] or 0),
        },
    }
