"""
Dashboard Services

Read models for the dashboard, the agency leaderboard and the my-agency
page. Windows are local midnights in the viewer's zone.
"""
import logging
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from apps.analytics.selectors import get_deals_in_window
from apps.core.authentication import AuthenticatedUser
from apps.core.constants import AP_MULTIPLIER
from apps.core.dates import day_bounds, local_midnight, local_now, month_start, week_start
from apps.core.hierarchy import build_children_map, closure_from_children, load_directory
from apps.core.utils import display_name, parse_premium

logger = logging.getLogger(__name__)

LEADERBOARD_DAYS = 7
TOP_PRODUCERS = 5
_WINDOW_FIELDS = ['agent_id', 'premium', 'created_at']


def get_dashboard_summary(user: AuthenticatedUser, tz: ZoneInfo, now: datetime | None = None) -> dict:
    """
    Deal counts and premium for the caller today, this week (Monday start)
    and this month.
    """
    today = local_now(tz, now).date()
    starts = {
        'today': local_midnight(today, tz),
        'week': local_midnight(week_start(today), tz),
        'month': local_midnight(month_start(today), tz),
    }
    earliest = min(starts.values())
    _, end = day_bounds(today, tz)

    deals = get_deals_in_window([user.id], earliest, end, fields=_WINDOW_FIELDS)
    metrics = {key: {'count': 0, 'premium': 0.0, 'ap': 0.0} for key in starts}

    for deal in deals:
        premium = parse_premium(deal['premium'])
        for key, start in starts.items():
            if deal['created_at'] >= start:
                metrics[key]['count'] += 1
                metrics[key]['premium'] += premium
                metrics[key]['ap'] += premium * AP_MULTIPLIER

    return {
        'name': user.full_name,
        'date': today.isoformat(),
        'timezone': tz.key,
        **metrics,
    }


def get_leaderboard(tz: ZoneInfo, now: datetime | None = None) -> dict:
    """
    Agency-wide month-to-date premium and AP per agent, plus each agent's
    premium for the last seven local days (oldest first).
    """
    today = local_now(tz, now).date()
    first_day = today - timedelta(days=LEADERBOARD_DAYS - 1)
    month_begin = month_start(today)
    window_start = local_midnight(min(first_day, month_begin), tz)
    month_begin_at = local_midnight(month_begin, tz)
    _, end = day_bounds(today, tz)

    days = [first_day + timedelta(days=i) for i in range(LEADERBOARD_DAYS)]
    directory = {p['id']: p for p in load_directory()}
    rows: dict = {}

    for deal in get_deals_in_window(None, window_start, end, fields=_WINDOW_FIELDS):
        agent_id = deal['agent_id']
        row = rows.get(agent_id)
        if row is None:
            profile = directory.get(agent_id) or {}
            row = rows[agent_id] = {
                'agent_id': str(agent_id) if agent_id else None,
                'name': display_name(profile.get('first_name'), profile.get('last_name'), profile.get('email')),
                'month_premium': 0.0,
                'month_ap': 0.0,
                'month_deals': 0,
                'daily': {day.isoformat(): 0.0 for day in days},
            }
        premium = parse_premium(deal['premium'])
        if deal['created_at'] >= month_begin_at:
            row['month_premium'] += premium
            row['month_ap'] += premium * AP_MULTIPLIER
            row['month_deals'] += 1
        key = deal['created_at'].astimezone(tz).date().isoformat()
        if key in row['daily']:
            row['daily'][key] += premium

    out = []
    for row in rows.values():
        row['daily'] = [{'date': day, 'premium': value} for day, value in row['daily'].items()]
        out.append(row)
    out.sort(key=lambda r: r['month_premium'], reverse=True)

    return {
        'month_start': month_begin.isoformat(),
        'days': [
            {'date': day.isoformat(), 'label': f'{day.month}/{day.day}', 'is_sunday': day.weekday() == 6}
            for day in days
        ],
        'rows': out,
        'top3': out[:3],
    }


def get_my_agency(user: AuthenticatedUser, tz: ZoneInfo, now: datetime | None = None) -> dict:
    """
    Weekly and monthly AP for the caller's tree (owners and admins) or just
    the caller (agents), ranked by monthly then weekly AP.
    """
    today = local_now(tz, now).date()
    month_begin_at = local_midnight(month_start(today), tz)
    week_begin_at = local_midnight(week_start(today), tz)
    _, end = day_bounds(today, tz)

    directory = load_directory()
    by_id = {p['id']: p for p in directory}
    children = build_children_map(directory)
    can_see_tree = user.is_privileged
    ids = closure_from_children(user.id, children) if can_see_tree else [user.id]

    agents: dict = {}
    for agent_id in ids:
        profile = by_id.get(agent_id) or {}
        agents[agent_id] = {
            'id': str(agent_id),
            'name': display_name(profile.get('first_name'), profile.get('last_name'), profile.get('email')),
            'email': profile.get('email') or '',
            'role': profile.get('role') or 'agent',
            'weekly_ap': 0.0,
            'monthly_ap': 0.0,
            'deals_count': 0,
            'has_downlines': bool(children.get(agent_id)),
        }

    window_start = min(month_begin_at, week_begin_at)
    for deal in get_deals_in_window(ids, window_start, end, fields=_WINDOW_FIELDS):
        row = agents.get(deal['agent_id'])
        if row is None:
            continue
        ap = parse_premium(deal['premium']) * AP_MULTIPLIER
        if deal['created_at'] >= month_begin_at:
            row['monthly_ap'] += ap
            row['deals_count'] += 1
        if deal['created_at'] >= week_begin_at:
            row['weekly_ap'] += ap

    rows = sorted(agents.values(), key=lambda r: (r['monthly_ap'], r['weekly_ap']), reverse=True)
    mine = agents.get(user.id) or {'weekly_ap': 0.0, 'monthly_ap': 0.0, 'deals_count': 0}

    return {
        'can_see_tree': can_see_tree,
        'is_empty_agency': not children.get(user.id),
        'totals': {
            'weekly_ap': sum(r['weekly_ap'] for r in rows),
            'monthly_ap': sum(r['monthly_ap'] for r in rows),
            'deals_count': sum(r['deals_count'] for r in rows),
        },
        'me': {key: mine[key] for key in ('weekly_ap', 'monthly_ap', 'deals_count')},
        'agents': rows,
        'top_producers': rows[:TOP_PRODUCERS],
    }
