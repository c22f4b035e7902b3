"""Due-date urgency tiers and dashboard task buckets."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from college_tracker.dates import add_days, days_until, iso_date, local_date, local_today
from college_tracker.errors import InvalidArgument
from college_tracker.schema import DueBuckets, Task, UrgencyTier

SOON_DAYS = 7
WEEK_DAYS = 7
MONTH_DAYS = 30

_BUCKET_TITLES = {
    "overdue": "Overdue",
    "week": "Due in 7 days",
    "month": "Due in 30 days",
}


def urgency_for_due(due_iso: str, today: date | datetime | None = None) -> UrgencyTier:
    """Classify a due date as overdue, soon (within a week) or later."""

    n = days_until(due_iso, today)
    if n < 0:
        return "overdue"
    if n <= SOON_DAYS:
        return "soon"
    return "later"


def bucket_title(bucket: str) -> str:
    try:
        return _BUCKET_TITLES[bucket]
    except KeyError as exc:
        raise InvalidArgument(f"unknown due bucket '{bucket}'") from exc


def bucket_open_tasks(tasks: Iterable[Task], today: date | datetime | None = None) -> DueBuckets:
    """Split open, dated tasks into overdue / next 7 days / next 30 days.

    Done tasks, undated tasks and tasks due more than 30 days out are left out.
    """

    reference = local_today() if today is None else local_date(today)
    today_iso = iso_date(reference)
    week_iso = iso_date(add_days(reference, WEEK_DAYS))
    month_iso = iso_date(add_days(reference, MONTH_DAYS))

    dated = [task for task in tasks if not task.done and task.due_date is not None]
    dated.sort(key=lambda task: task.due_date)

    overdue: list[Task] = []
    week: list[Task] = []
    month: list[Task] = []
    for task in dated:
        due_iso = iso_date(task.due_date)
        if due_iso < today_iso:
            overdue.append(task)
        elif due_iso <= week_iso:
            week.append(task)
        elif due_iso <= month_iso:
            month.append(task)

    return DueBuckets(overdue=tuple(overdue), week=tuple(week), month=tuple(month))
