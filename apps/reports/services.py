"""
Scheduled report jobs.

Each job computes "today" in the report zone (America/New_York by default),
aggregates AP over a half-open window, delivers the message and then
records a (local_date, slot) row so a repeated trigger does not post again.

The check and the insert are not wrapped in one transaction: two triggers
racing inside the same slot can both deliver, while the unique constraint
keeps a single record.
"""
import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from django.conf import settings
from django.db import IntegrityError, transaction

from apps.analytics.selectors import get_deals_in_window
from apps.core.constants import AP_MULTIPLIER, MAX_REPORT_PROFILES, REPORT_TOP_N
from apps.core.dates import day_bounds, local_midnight, local_now, week_start
from apps.core.exceptions import APIException, UpstreamError
from apps.core.hierarchy import build_children_map, closure_from_children
from apps.core.integrations import post_discord_webhook, send_email
from apps.core.models import LeaderboardPost, Profile
from apps.core.utils import format_full_name, parse_premium, short_name

from .formatting import (
    agency_email_subject,
    build_agency_email_html,
    build_agency_email_text,
    build_daily_message,
    build_weekly_message,
    date_label,
)

logger = logging.getLogger(__name__)

DAILY_SLOT = 'daily'
AGENCY_EMAIL_SLOT = 'agency-email'
ALREADY_POSTED = 'already posted'
_DEAL_FIELDS = ['agent_id', 'premium', 'created_at']
_NAME_FIELDS = ['id', 'first_name', 'last_name', 'email']


def report_timezone() -> ZoneInfo:
    return ZoneInfo(settings.FLOW_REPORT_TIMEZONE)


def weekly_slot(now_local: datetime) -> str:
    """One weekly post per local hour."""
    return f'weekly-{now_local.hour:02d}'


def already_posted(local_date: date, slot: str) -> bool:
    return LeaderboardPost.objects.filter(local_date=local_date, slot=slot).exists()


def record_post(local_date: date, slot: str) -> None:
    try:
        with transaction.atomic():
            LeaderboardPost.objects.create(local_date=local_date, slot=slot)
    except IntegrityError:
        logger.warning(f'Post record already exists for {local_date} {slot}')


def sum_ap_by_agent(deals: list[dict], agent_ids: set | None = None) -> list[tuple]:
    """(agent_id, ap) pairs, highest AP first."""
    sums: dict = {}
    for deal in deals:
        agent_id = deal.get('agent_id')
        if agent_ids is not None and agent_id not in agent_ids:
            continue
        sums[agent_id] = sums.get(agent_id, 0.0) + parse_premium(deal.get('premium')) * AP_MULTIPLIER
    return sorted(sums.items(), key=lambda item: item[1], reverse=True)


def _profiles_by_id(ids) -> dict:
    ids = [i for i in ids if i is not None]
    if not ids:
        return {}
    return {p['id']: p for p in Profile.objects.filter(id__in=ids).values(*_NAME_FIELDS)}


def _short(profile: dict | None) -> str:
    profile = profile or {}
    return short_name(profile.get('first_name'), profile.get('last_name'), profile.get('email'))


def _writer_name(profile: dict | None) -> str:
    """Full name, else the email's local part, else 'Agent'."""
    profile = profile or {}
    name = format_full_name(profile.get('first_name'), profile.get('last_name'))
    if name:
        return name
    email = profile.get('email')
    return email.split('@')[0] if email else 'Agent'


def _skipped(slot: str, local_date: date) -> dict:
    logger.info(f'Report {slot} for {local_date} already posted; skipping')
    return {'ok': True, 'posted': False, 'reason': ALREADY_POSTED, 'slot': slot}


def run_weekly_leaderboard(now: datetime | None = None) -> dict:
    """
    Week-to-date AP leaderboard (Monday 00:00 through now) posted to the
    agency Discord channel.
    """
    tz = report_timezone()
    now_local = local_now(tz, now)
    today = now_local.date()
    slot = weekly_slot(now_local)

    if already_posted(today, slot):
        return _skipped(slot, today)

    webhook_url = settings.DISCORD_WEBHOOK_URL
    if not webhook_url:
        raise APIException('Missing DISCORD_WEBHOOK_URL', status_code=500)

    start = local_midnight(week_start(today), tz)
    ranked = sum_ap_by_agent(get_deals_in_window(None, start, now_local, fields=_DEAL_FIELDS))
    total_ap = sum(ap for _, ap in ranked)

    top = ranked[:REPORT_TOP_N]
    profiles = _profiles_by_id(agent_id for agent_id, _ in top)
    rows = [(_short(profiles.get(agent_id)), ap) for agent_id, ap in top]

    message = build_weekly_message(date_label(today), rows, total_ap)
    post_discord_webhook(webhook_url, {'content': message})
    record_post(today, slot)

    logger.info(f'Weekly leaderboard posted: {len(ranked)} agents, total AP {total_ap:.2f}')
    return {'ok': True, 'posted': True, 'slot': slot, 'agents': len(ranked), 'total_ap': total_ap}


def run_daily_leaderboard(
    force: bool = False,
    manual: bool = False,
    dry: bool = False,
    now: datetime | None = None,
) -> dict:
    """
    Today's writers ranked by AP, posted at the scheduled hour.

    force/manual skip the hour check; dry returns the message without
    sending or recording anything.
    """
    tz = report_timezone()
    now_local = local_now(tz, now)
    today = now_local.date()

    if not (force or manual) and now_local.hour != settings.DAILY_LEADERBOARD_HOUR:
        return {'ok': True, 'posted': False, 'reason': 'not scheduled time', 'now_et': now_local.isoformat()}

    if not dry and already_posted(today, DAILY_SLOT):
        return _skipped(DAILY_SLOT, today)

    start, end = day_bounds(today, tz)
    writers = [
        (agent_id, ap)
        for agent_id, ap in sum_ap_by_agent(get_deals_in_window(None, start, end, fields=_DEAL_FIELDS))
        if agent_id is not None and ap > 0
    ]
    if not writers:
        return {'ok': True, 'posted': False, 'reason': 'no writers today'}

    profiles = _profiles_by_id(agent_id for agent_id, _ in writers)
    rows = [(_writer_name(profiles.get(agent_id)), ap) for agent_id, ap in writers]
    total_ap = sum(ap for _, ap in writers)
    message = build_daily_message(today, rows, total_ap)

    if dry:
        return {'ok': True, 'dry': True, 'writers': len(writers), 'total_ap': total_ap, 'preview': message}

    webhook_url = settings.DISCORD_WEBHOOK_URL
    if not webhook_url:
        return {'ok': True, 'posted': False, 'reason': 'DISCORD_WEBHOOK_URL not configured'}

    post_discord_webhook(webhook_url, {'content': message})
    record_post(today, DAILY_SLOT)

    logger.info(f'Daily leaderboard posted: {len(writers)} writers, total AP {total_ap:.2f}')
    return {'ok': True, 'posted': True, 'writers': len(writers), 'total_ap': total_ap}


def run_agency_emails(now: datetime | None = None) -> dict:
    """
    Email every agency owner today's AP for their own tree.

    A failed send is reported in the sample and does not stop the other
    owners. The day is recorded once at least one email went out.
    """
    tz = report_timezone()
    now_local = local_now(tz, now)
    today = now_local.date()

    if already_posted(today, AGENCY_EMAIL_SLOT):
        return _skipped(AGENCY_EMAIL_SLOT, today)

    if not settings.RESEND_API_KEY:
        raise APIException('Missing RESEND_API_KEY', status_code=500)

    profiles = list(
        Profile.objects.values('id', 'email', 'first_name', 'last_name', 'is_agency_owner', 'upline_id')
        [:MAX_REPORT_PROFILES]
    )
    by_id = {p['id']: p for p in profiles}
    children = build_children_map(profiles)
    owners = [p for p in profiles if p['is_agency_owner'] and p['email']]

    start, end = day_bounds(today, tz)
    label = date_label(today)
    deals = get_deals_in_window(None, start, end, fields=_DEAL_FIELDS)

    sent = 0
    skipped = 0
    results = []

    for owner in owners:
        owner_email = owner['email'].strip()
        if not owner_email:
            skipped += 1
            continue

        team_ids = closure_from_children(owner['id'], children)
        ranked = sum_ap_by_agent(deals, agent_ids=set(team_ids))
        total_ap = sum(ap for _, ap in ranked)
        rows = [(_short(by_id.get(agent_id)), ap) for agent_id, ap in ranked[:REPORT_TOP_N]]
        owner_name = _short(owner)

        try:
            send_email(
                to=owner_email,
                subject=agency_email_subject(label),
                text=build_agency_email_text(owner_name, label, rows, total_ap),
                html=build_agency_email_html(owner_name, label, rows, total_ap),
            )
        except UpstreamError as e:
            logger.error(f'Agency email to {owner_email} failed: {e.message}')
            results.append({'owner': owner_email, 'ok': False, 'error': e.message})
            continue

        sent += 1
        results.append({'owner': owner_email, 'ok': True, 'team_size': len(team_ids), 'deals': len(deals)})

    if sent:
        record_post(today, AGENCY_EMAIL_SLOT)

    logger.info(f'Agency emails: {sent} sent, {skipped} skipped, {len(owners)} owners')
    return {
        'ok': True,
        'owners': len(owners),
        'sent': sent,
        'skipped': skipped,
        'date_label': label,
        'window': {'start': start.isoformat(), 'end': end.isoformat()},
        'sample': results[:10],
    }
