"""Selected-day agenda: open tasks and application deadlines on one date."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from college_tracker.dates import iso_date, local_date, parse_iso_date
from college_tracker.schema import Application, DayAgenda, Task


def _day(value: str | date | datetime) -> date:
    if isinstance(value, str):
        return parse_iso_date(value)
    return local_date(value)


def agenda_heading(day: str | date | datetime) -> str:
    """Long heading such as 'Friday, March 15'."""

    d = _day(day)
    return f"{d.strftime('%A')}, {d.strftime('%B')} {d.day}"


def task_context(task: Task) -> str:
    application = task.application
    college = (application.school_name if application else None) or "College"
    decision_type = (application.decision_type if application else None) or "—"
    platform = (application.platform if application else None) or "—"
    return f"{college} • {decision_type} · {platform}"


def select_day_agenda(
    day: str | date | datetime,
    tasks: Iterable[Task],
    applications: Iterable[Application],
) -> DayAgenda:
    """Pick the open tasks due on ``day`` and the applications due that day.

    Tasks keep their input order; applications are newest first by creation.
    """

    d = _day(day)
    day_tasks = tuple(task for task in tasks if not task.done and task.due_date == d)
    day_apps = [app for app in applications if app.deadline_date == d]

    # Stable two-pass sort: undated records last, then newest first.
    day_apps.sort(key=lambda app: app.created_at.timestamp() if app.created_at else 0.0, reverse=True)
    day_apps.sort(key=lambda app: app.created_at is None)

    return DayAgenda(day=iso_date(d), heading=agenda_heading(d), tasks=day_tasks, applications=tuple(day_apps))
