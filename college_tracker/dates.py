"""Calendar-day arithmetic and ISO date helpers.

Every helper works on local calendar dates. Aware datetimes are converted to
the local zone (or the zone passed as ``tz``) before their day is taken, so a
timestamp stored in UTC lands on the day the user saw it happen.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta, tzinfo

from college_tracker.errors import InvalidArgument

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def local_date(value: date | datetime, tz: tzinfo | None = None) -> date:
    """Return the local calendar date of a date or datetime."""

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidArgument(f"expected a date or datetime, got {type(value).__name__}")


def local_today(tz: tzinfo | None = None) -> date:
    return datetime.now(tz).date() if tz is not None else date.today()


def iso_date(d: date | datetime) -> str:
    """Format a date as zero-padded YYYY-MM-DD."""

    day = local_date(d)
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_iso_date(value: str) -> date:
    """Parse a strict YYYY-MM-DD string."""

    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise InvalidArgument(f"malformed ISO date: {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidArgument(f"malformed ISO date: {value!r}") from exc


def start_of_month(d: date | datetime) -> date:
    return local_date(d).replace(day=1)


def end_of_month(d: date | datetime) -> date:
    day = local_date(d)
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def start_of_day(d: date | datetime) -> date:
    return local_date(d)


def add_days(d: date | datetime, days: int) -> date:
    """Shift by whole calendar days; negative values go back in time."""

    if isinstance(days, bool) or not isinstance(days, int):
        raise InvalidArgument(f"day offset must be an integer, got {days!r}")
    try:
        return local_date(d) + timedelta(days=days)
    except OverflowError as exc:
        raise InvalidArgument(f"date out of range: {d!r} + {days} days") from exc


def add_months(d: date | datetime, months: int) -> date:
    """Return the first day of the month ``months`` away from ``d``."""

    day = local_date(d)
    years, month_index = divmod(day.month - 1 + months, 12)
    try:
        return date(day.year + years, month_index + 1, 1)
    except ValueError as exc:
        raise InvalidArgument(f"date out of range: {d!r} + {months} months") from exc


def days_until(due_iso: str, today: date | datetime | None = None) -> int:
    """Signed number of days from today to ``due_iso``; negative is past."""

    due = parse_iso_date(due_iso)
    reference = local_today() if today is None else local_date(today)
    return (due - reference).days


def due_label(due_iso: str, today: date | datetime | None = None) -> str:
    n = days_until(due_iso, today)
    if n < 0:
        return f"{abs(n)}d overdue"
    if n == 0:
        return "due today"
    if n == 1:
        return "due tomorrow"
    return f"due in {n}d"


def week_start_iso(d: date | datetime, tz: tzinfo | None = None) -> str:
    """ISO date of the Monday on or before ``d``."""

    day = local_date(d, tz)
    return iso_date(day - timedelta(days=day.weekday()))


def sunday_on_or_before(d: date | datetime) -> date:
    day = local_date(d)
    # date.weekday() is Monday=0; shift so Sunday=0.
    return day - timedelta(days=(day.weekday() + 1) % 7)


def format_week_label(iso: str) -> str:
    """Render an ISO date as month/day without padding or year."""

    day = parse_iso_date(iso)
    return f"{day.month}/{day.day}"
