"""
Report message builders.

Pure text/HTML rendering for the Discord leaderboards and the agency
scoreboard email. Rows are (name, ap) pairs already ranked.
"""
from datetime import date
from html import escape

from apps.core.utils import format_money, format_money_cents

WEEKLY_MEDALS = {0: ' :first_place:', 1: ' :second_place:', 2: ' :third_place:'}
DAILY_MEDALS = {1: '🥇', 2: '🥈', 3: '🥉'}
NO_PRODUCTION = 'No production today.'


def date_label(day: date) -> str:
    """Mar 04, 2026"""
    return day.strftime('%b %d, %Y')


def pretty_day(day: date) -> str:
    """Wednesday, Mar 04"""
    return day.strftime('%A, %b %d')


def build_weekly_message(label: str, rows: list[tuple[str, float]], total_ap: float) -> str:
    lines = [f'💰**LEADERBOARD · {label}** :trophy:', '']
    for idx, (name, ap) in enumerate(rows):
        lines.append(f'{idx + 1}. {name} - ${format_money(ap)}{WEEKLY_MEDALS.get(idx, "")}')
    lines.append('')
    lines.append(f'**TOTAL AP:** ${format_money(total_ap)}')
    return '\n'.join(lines)


def build_daily_message(day: date, rows: list[tuple[str, float]], total_ap: float) -> str:
    lines = ['🎖️DAILY LEADERBOARD🎖️', pretty_day(day), '']
    for rank, (name, ap) in enumerate(rows, start=1):
        medal = DAILY_MEDALS.get(rank)
        prefix = f'{medal} {rank}.' if medal else f'{rank}.'
        lines.append(f'{prefix} {name} — ${format_money_cents(ap)} AP')
    lines.append('')
    lines.append('—————————')
    lines.append(f'🔥 Total AP Today: ${format_money_cents(total_ap)}')
    return '\n'.join(lines)


def agency_email_subject(label: str) -> str:
    return f'My agency numbers · {label}'


def build_agency_email_text(owner_name: str, label: str, rows: list[tuple[str, float]], total_ap: float) -> str:
    lines = [
        f'Hey {owner_name}, here’s what your personal agency produced today:',
        '',
        f'🎖️SCOREBOARD · {label} 🎖️',
        '',
    ]
    if rows:
        for idx, (name, ap) in enumerate(rows, start=1):
            lines.append(f'{idx}\t{name} - ${format_money(ap)}')
    else:
        lines.append(NO_PRODUCTION)
    lines.append('')
    lines.append(f'TOTAL AP: ${format_money(total_ap)}')
    return '\n'.join(lines)


_CELL = 'padding:8px 10px;border-bottom:1px solid rgba(255,255,255,0.10);font-size:13px;'
_HEAD = 'padding:10px;color:rgba(255,255,255,0.70);font-size:12px;border-bottom:1px solid rgba(255,255,255,0.10);'


def build_agency_email_html(owner_name: str, label: str, rows: list[tuple[str, float]], total_ap: float) -> str:
    body_rows = ''.join(
        f'<tr>'
        f'<td style="{_CELL}color:rgba(255,255,255,0.85);">{idx}</td>'
        f'<td style="{_CELL}color:#fff;font-weight:600;">{escape(name)}</td>'
        f'<td style="{_CELL}color:#fff;text-align:right;">${format_money(ap)}</td>'
        f'</tr>'
        for idx, (name, ap) in enumerate(rows, start=1)
    )
    if not body_rows:
        body_rows = f'<tr><td colspan="3" style="padding:14px;color:rgba(255,255,255,0.70);">{NO_PRODUCTION}</td></tr>'

    return (
        '<div style="font-family:ui-sans-serif,system-ui,-apple-system,Segoe UI,Roboto,Helvetica,Arial;'
        'color:#fff;background:#0b0f1a;padding:24px;">'
        '<div style="max-width:720px;margin:0 auto;border:1px solid rgba(255,255,255,0.10);'
        'border-radius:18px;background:rgba(255,255,255,0.04);overflow:hidden;">'
        '<div style="padding:18px 20px;border-bottom:1px solid rgba(255,255,255,0.10);">'
        '<div style="font-size:14px;color:rgba(255,255,255,0.70);">Flow · My Agency Numbers</div>'
        f'<div style="font-size:20px;font-weight:800;margin-top:6px;">Hey {escape(owner_name)}, '
        'here’s what your personal agency produced today:</div>'
        f'<div style="margin-top:10px;font-size:13px;color:rgba(255,255,255,0.70);">'
        f'🎖️SCOREBOARD · {escape(label)} 🎖️</div>'
        '</div>'
        '<div style="padding:0 16px 14px;">'
        '<table style="width:100%;border-collapse:collapse;margin-top:12px;'
        'border:1px solid rgba(255,255,255,0.10);">'
        '<thead><tr>'
        f'<th style="text-align:left;{_HEAD}">#</th>'
        f'<th style="text-align:left;{_HEAD}">Agent</th>'
        f'<th style="text-align:right;{_HEAD}">AP</th>'
        '</tr></thead>'
        f'<tbody>{body_rows}</tbody>'
        '</table>'
        f'<div style="margin-top:12px;font-size:14px;font-weight:800;">TOTAL AP: ${format_money(total_ap)}</div>'
        '<div style="margin-top:10px;font-size:12px;color:rgba(255,255,255,0.55);">'
        'This report is isolated to your downline team so you can copy/paste cleanly into your own group chats.'
        '</div>'
        '</div></div></div>'
    )
