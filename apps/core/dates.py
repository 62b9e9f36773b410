"""
Date and time-zone helpers.

All windows are half-open [start, end) in aware datetimes, built from local
midnights of a named zone so DST changes are handled by zoneinfo.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from django.utils import timezone

from .constants import DAILY_SERIES_MAX_DAYS, DAILY_SERIES_MIN_DAYS


@dataclass(frozen=True)
class DateRange:
    """Inclusive local date range plus the aware window that covers it."""
    preset: str
    start_date: date
    end_date: date
    tz: ZoneInfo

    @property
    def start(self) -> datetime:
        return local_midnight(self.start_date, self.tz)

    @property
    def end(self) -> datetime:
        return local_midnight(self.end_date + timedelta(days=1), self.tz)

    @property
    def span_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def as_dict(self) -> dict:
        return {
            'preset': self.preset,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'timezone': self.tz.key,
        }


def local_now(tz: ZoneInfo, now: datetime | None = None) -> datetime:
    return (now or timezone.now()).astimezone(tz)


def local_midnight(day: date, tz: ZoneInfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def day_bounds(day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """[00:00, next 00:00) of a local calendar day."""
    return local_midnight(day, tz), local_midnight(day + timedelta(days=1), tz)


def week_start(day: date) -> date:
    """Monday of the week containing day."""
    return day - timedelta(days=day.weekday())


def month_start(day: date) -> date:
    return day.replace(day=1)


def resolve_range(
    preset: str,
    tz: ZoneInfo,
    start_date: date | None = None,
    end_date: date | None = None,
    now: datetime | None = None,
) -> DateRange:
    """
    Turn a range preset into an inclusive local date range.

    this_week: Monday through today. last_7: today and the six days
    before. this_month: the 1st through today. custom: the given dates
    (swapped if reversed). Unknown presets raise ValueError.
    """
    today = local_now(tz, now).date()

    if preset == 'this_week':
        return DateRange(preset, week_start(today), today, tz)
    if preset == 'last_7':
        return DateRange(preset, today - timedelta(days=6), today, tz)
    if preset == 'this_month':
        return DateRange(preset, month_start(today), today, tz)
    if preset == 'custom':
        if not start_date or not end_date:
            raise ValueError('custom range needs start and end dates')
        if end_date < start_date:
            start_date, end_date = end_date, start_date
        return DateRange(preset, start_date, end_date, tz)

    raise ValueError(f'Unknown range preset: {preset}')


def series_days(start_date: date, end_date: date) -> int:
    """Number of daily buckets for an inclusive range, clamped to [1, 62]."""
    span = (end_date - start_date).days + 1
    return max(DAILY_SERIES_MIN_DAYS, min(DAILY_SERIES_MAX_DAYS, span))
