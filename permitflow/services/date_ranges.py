"""Created-at windows for permit queries: Today, ThisWeek, ThisMonth and Custom.

Bounds are inclusive on both ends and computed in the application time zone: the
start is 00:00:00 of the first day and the end is the last microsecond of the last day.
"""

import calendar
from datetime import date, datetime, time, timedelta, tzinfo

from permitflow.models.enums import DateRange
from permitflow.services.errors import ValidationError

DateBounds = tuple[datetime, datetime]


def day_bounds(start: date, end: date, tz: tzinfo) -> DateBounds:
    """Inclusive datetime bounds covering every instant of the days start..end."""
    if start > end:
        raise ValidationError("Start date must not be after end date.")
    return (
        datetime.combine(start, time.min, tzinfo=tz),
        datetime.combine(end, time.max, tzinfo=tz),
    )


def week_start(day: date) -> date:
    """Monday of the week containing day (a Sunday belongs to the week that began 6 days earlier)."""
    return day - timedelta(days=day.weekday())


def month_end(day: date) -> date:
    """Last calendar day of day's month."""
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def resolve_date_range(
    date_range: DateRange | None,
    now: datetime,
    start_date: date | None = None,
    end_date: date | None = None,
) -> DateBounds | None:
    """
    Resolve a named range against now (an aware datetime) into inclusive bounds.

    Returns None when no range is requested, meaning no date constraint applies.
    Custom uses the caller's start_date/end_date and requires both.
    """
    if date_range is None:
        return None
    tz = now.tzinfo
    if tz is None:
        raise ValueError("now must be timezone-aware")
    today = now.date()

    match date_range:
        case DateRange.TODAY:
            return day_bounds(today, today, tz)
        case DateRange.THIS_WEEK:
            monday = week_start(today)
            return day_bounds(monday, monday + timedelta(days=6), tz)
        case DateRange.THIS_MONTH:
            return day_bounds(today.replace(day=1), month_end(today), tz)
        case DateRange.CUSTOM:
            if start_date is None or end_date is None:
                raise ValidationError("Custom range requires both start and end dates.")
            return day_bounds(start_date, end_date, tz)
