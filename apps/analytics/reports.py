"""
Analytics reducers

Pure functions over deal-like rows (dicts with `premium`, `agent_id`,
`company`, `created_at` and optionally `source`). Nothing here touches the
database; selectors load rows and views pass them in. Empty input always
yields zeroed or empty output.
"""
from collections import OrderedDict
from collections.abc import Iterable
from datetime import datetime, timedelta

from apps.core.constants import (
    AP_MULTIPLIER,
    DEAL_SOURCES,
    OTHER_CARRIER,
    UNKNOWN_AGENT_KEY,
    UNKNOWN_AGENT_NAME,
    WEEKLY_UNDER_AP,
)
from apps.core.dates import DateRange, series_days
from apps.core.utils import display_name, parse_premium, round_half_up


def carrier_label(company: str | None) -> str:
    return (company or '').strip() or OTHER_CARRIER


def human_gap(seconds: float) -> str:
    """Render a duration as whole minutes, hours or days ('—' when empty)."""
    if not seconds or seconds <= 0:
        return '—'
    minutes = round_half_up(seconds / 60)
    if minutes < 60:
        return f'{minutes}m'
    hours = round_half_up(minutes / 60)
    if hours < 24:
        return f'{hours}h'
    return f'{round_half_up(hours / 24)}d'


def _directory_index(directory: Iterable[dict]) -> dict:
    return {row['id']: row for row in directory}


def _agent_name(agent_id, index: dict) -> str:
    if agent_id is None:
        return UNKNOWN_AGENT_NAME
    profile = index.get(agent_id)
    if not profile:
        return display_name(None, None, None)
    return display_name(profile.get('first_name'), profile.get('last_name'), profile.get('email'))


def summarize_deals(deals: list[dict]) -> dict:
    """
    Headline totals.

    total_ap is annualized; avg_premium_per_deal deliberately is not.
    """
    total_premium = sum(parse_premium(d.get('premium')) for d in deals)
    count = len(deals)
    return {
        'total_premium': total_premium,
        'total_ap': total_premium * AP_MULTIPLIER,
        'deals_count': count,
        'avg_premium_per_deal': total_premium / count if count else 0.0,
        'avg_ap_per_deal': total_premium * AP_MULTIPLIER / count if count else 0.0,
    }


def per_agent_rollups(deals: list[dict], directory: Iterable[dict] = ()) -> list[dict]:
    """
    AP, deal count, average AP and average gap between deals per agent.

    Deals without an agent are grouped under 'unknown'. Rows are sorted by
    AP, highest first.
    """
    index = _directory_index(directory)
    rows: dict = {}

    for deal in deals:
        agent_id = deal.get('agent_id')
        key = agent_id if agent_id is not None else UNKNOWN_AGENT_KEY
        row = rows.get(key)
        if row is None:
            row = rows[key] = {
                'agent_id': agent_id,
                'key': str(key),
                'name': _agent_name(agent_id, index),
                'premium': 0.0,
                'ap': 0.0,
                'deals': 0,
                '_stamps': [],
            }
        premium = parse_premium(deal.get('premium'))
        row['premium'] += premium
        row['ap'] += premium * AP_MULTIPLIER
        row['deals'] += 1
        if deal.get('created_at') is not None:
            row['_stamps'].append(deal['created_at'])

    out = []
    for row in rows.values():
        stamps = sorted(row.pop('_stamps'))
        gaps = [(b - a).total_seconds() for a, b in zip(stamps, stamps[1:])]
        avg_gap = sum(gaps) / len(gaps) if gaps else 0.0
        row['avg_ap'] = row['ap'] / row['deals'] if row['deals'] else 0.0
        row['avg_gap_seconds'] = avg_gap
        row['avg_gap_label'] = human_gap(avg_gap)
        out.append(row)

    out.sort(key=lambda r: r['ap'], reverse=True)
    return out


def agent_averages(rollups: list[dict]) -> dict:
    """
    Averages across agents.

    Average AP per agent uses every agent with deals; average time between
    deals only agents with at least two deals and a positive gap.
    """
    active = [r for r in rollups if r['deals'] > 0]
    repeat = [r for r in active if r['deals'] >= 2 and r['avg_gap_seconds'] > 0]

    avg_ap = sum(r['avg_ap'] for r in active) / len(active) if active else 0.0
    avg_gap = sum(r['avg_gap_seconds'] for r in repeat) / len(repeat) if repeat else 0.0

    return {
        'avg_ap_per_agent': avg_ap,
        'avg_gap_seconds': avg_gap,
        'avg_gap_label': human_gap(avg_gap),
    }


def agents_under_threshold(rollups: list[dict], threshold: float = WEEKLY_UNDER_AP) -> list[dict]:
    """Known agents whose AP is below threshold, lowest first."""
    rows = [r for r in rollups if r['key'] != UNKNOWN_AGENT_KEY and r['ap'] < threshold]
    return sorted(rows, key=lambda r: r['ap'])


def non_writers(rollups: list[dict], directory: Iterable[dict]) -> list[dict]:
    """Directory members with no deals in the window, sorted by name."""
    active = {r['agent_id'] for r in rollups if r['deals'] > 0}
    rows = [
        {
            'id': p['id'],
            'name': display_name(p.get('first_name'), p.get('last_name'), p.get('email')),
            'email': p.get('email') or '',
        }
        for p in directory
        if p['id'] not in active
    ]
    return sorted(rows, key=lambda r: r['name'].lower())


def carrier_breakdown(deals: list[dict]) -> list[dict]:
    """Premium, AP and count per carrier, largest premium first."""
    rows: dict = {}
    for deal in deals:
        label = carrier_label(deal.get('company'))
        row = rows.setdefault(label, {'carrier': label, 'premium': 0.0, 'ap': 0.0, 'deals': 0})
        premium = parse_premium(deal.get('premium'))
        row['premium'] += premium
        row['ap'] += premium * AP_MULTIPLIER
        row['deals'] += 1
    return sorted(rows.values(), key=lambda r: r['premium'], reverse=True)


def top_carrier(breakdown: list[dict]) -> str:
    """Carrier with the most premium, or '—' when nothing has premium."""
    best = max(breakdown, key=lambda r: r['premium'], default=None)
    if not best or best['premium'] <= 0:
        return UNKNOWN_AGENT_NAME
    return best['carrier']


def source_breakdown(deals: list[dict]) -> list[dict]:
    """Deal counts per lead source in display order; unlisted sources count as Other."""
    counts = OrderedDict((source, 0) for source in DEAL_SOURCES)
    counts[OTHER_CARRIER] = 0
    for deal in deals:
        source = (deal.get('source') or '').strip()
        counts[source if source in counts else OTHER_CARRIER] += 1
    total = sum(counts.values())
    return [
        {'source': source, 'deals': count, 'share': count / total if total else 0.0}
        for source, count in counts.items()
    ]


def daily_series(deals: list[dict], date_range: DateRange) -> list[dict]:
    """
    One bucket per local calendar day starting at the range start.

    The bucket count is the inclusive span of the range clamped to
    [1, 62]; deals outside the buckets are ignored.
    """
    days = series_days(date_range.start_date, date_range.end_date)
    buckets = OrderedDict()
    for offset in range(days):
        day = date_range.start_date + timedelta(days=offset)
        buckets[day] = {'date': day.isoformat(), 'premium': 0.0, 'ap': 0.0, 'deals': 0}

    for deal in deals:
        created_at: datetime | None = deal.get('created_at')
        if created_at is None:
            continue
        bucket = buckets.get(created_at.astimezone(date_range.tz).date())
        if bucket is None:
            continue
        premium = parse_premium(deal.get('premium'))
        bucket['premium'] += premium
        bucket['ap'] += premium * AP_MULTIPLIER
        bucket['deals'] += 1

    return list(buckets.values())


def build_analytics_report(deals: list[dict], directory: list[dict], date_range: DateRange) -> dict:
    """Everything the analytics page shows for one range."""
    rollups = per_agent_rollups(deals, directory)
    carriers = carrier_breakdown(deals)

    return {
        'range': date_range.as_dict(),
        'summary': summarize_deals(deals),
        'averages': agent_averages(rollups),
        'agents': rollups,
        'under_threshold': agents_under_threshold(rollups),
        'under_threshold_ap': WEEKLY_UNDER_AP,
        'non_writers': non_writers(rollups, directory),
        'carriers': carriers,
        'top_carrier': top_carrier(carriers),
        'sources': source_breakdown(deals),
        'daily': daily_series(deals, date_range),
    }
