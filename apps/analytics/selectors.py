"""
Analytics Selectors

Loads the scoped deal rows and directory that the pure reducers in
apps.analytics.reports consume.
"""
import logging
from uuid import UUID

from apps.core.authentication import AuthenticatedUser
from apps.core.dates import DateRange
from apps.core.exceptions import PermissionDeniedError
from apps.core.hierarchy import load_directory
from apps.core.models import Deal
from apps.core.permissions import get_visible_agent_ids, scope_queryset
from apps.deals.notes import resolve_structured_fields

from .reports import build_analytics_report

logger = logging.getLogger(__name__)

ANALYTICS_DEAL_FIELDS = [
    'id', 'agent_id', 'premium', 'company', 'created_at', 'status',
    'note', 'product_name', 'effective_date', 'source', 'referrals',
]


def get_deals_in_window(
    agent_ids: list[UUID] | None,
    start,
    end,
    fields: list[str] | None = None,
) -> list[dict]:
    """Deal rows with created_at in [start, end) for the given agents (None = all)."""
    queryset = Deal.objects.filter(created_at__gte=start, created_at__lt=end)
    queryset = scope_queryset(queryset, agent_ids)
    return list(queryset.order_by('created_at').values(*(fields or ANALYTICS_DEAL_FIELDS)))


def get_analytics(
    user: AuthenticatedUser,
    date_range: DateRange,
    agent_id: UUID | None = None,
) -> dict:
    """
    Analytics report for the caller's team over one range.

    agent_id narrows the report to a single visible agent.
    """
    directory = load_directory()
    visible = get_visible_agent_ids(user, directory)

    if visible is not None:
        visible_set = set(visible)
        directory = [p for p in directory if p['id'] in visible_set]

    agent_ids = visible
    if agent_id is not None:
        if visible is not None and agent_id not in visible:
            raise PermissionDeniedError('You do not have access to this agent')
        agent_ids = [agent_id]
        directory = [p for p in directory if p['id'] == agent_id]

    deals = [
        resolve_structured_fields(row)
        for row in get_deals_in_window(agent_ids, date_range.start, date_range.end)
    ]
    logger.debug(f'Analytics for {user.id}: {len(deals)} deals, {len(directory)} agents')

    report = build_analytics_report(deals, directory, date_range)
    report['scope'] = 'all' if visible is None and agent_id is None else 'team'
    return report
