"""
Report Message Tests
"""
from datetime import date

from apps.reports.formatting import (
    NO_PRODUCTION,
    agency_email_subject,
    build_agency_email_html,
    build_agency_email_text,
    build_daily_message,
    build_weekly_message,
    date_label,
    pretty_day,
)

DAY = date(2026, 3, 4)
ROWS = [('Jane D.', 2400.0), ('Bob S.', 1200.5), ('Ann K.', 600.0), ('Tim R.', 120.0)]


def test_labels():
    assert date_label(DAY) == 'Mar 04, 2026'
    assert pretty_day(DAY) == 'Wednesday, Mar 04'
    assert agency_email_subject('Mar 04, 2026') == 'My agency numbers · Mar 04, 2026'


def test_weekly_message_medals_and_total():
    text = build_weekly_message('Mar 04, 2026', ROWS, 4320.5)
    lines = text.split('\n')
    assert lines[0] == '💰**LEADERBOARD · Mar 04, 2026** :trophy:'
    assert lines[2] == '1. Jane D. - $2,400 :first_place:'
    assert lines[5] == '4. Tim R. - $120'
    assert lines[-1] == '**TOTAL AP:** $4,321'


def test_daily_message_keeps_cents():
    text = build_daily_message(DAY, ROWS, 4320.5)
    assert 'Wednesday, Mar 04' in text
    assert '🥈 2. Bob S. — $1,200.5 AP' in text
    assert '4. Tim R. — $120 AP' in text
    assert text.endswith('🔥 Total AP Today: $4,320.5')


def test_agency_email_text():
    text = build_agency_email_text('Olivia Owner', 'Mar 04, 2026', ROWS[:1], 2400)
    assert text.startswith('Hey Olivia Owner,')
    assert '1\tJane D. - $2,400' in text
    assert text.endswith('TOTAL AP: $2,400')


def test_agency_email_without_production():
    assert NO_PRODUCTION in build_agency_email_text('Olivia', 'Mar 04, 2026', [], 0)
    assert NO_PRODUCTION in build_agency_email_html('Olivia', 'Mar 04, 2026', [], 0)


def test_agency_email_html_escapes_names():
    html = build_agency_email_html('<b>Owner</b>', 'Mar 04, 2026', [('<script>', 100.0)], 100)
    assert '<script>' not in html
    assert '&lt;script&gt;' in html
    assert '&lt;b&gt;Owner&lt;/b&gt;' in html
