"""Dashboard composition over a record snapshot."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date, datetime, tzinfo
from typing import Any, Iterable, Optional

from college_tracker.agenda import select_day_agenda, task_context
from college_tracker.calendar_grid import build_calendar, calendar_cells, grid_title
from college_tracker.dates import due_label, iso_date, local_date
from college_tracker.progress import progress_totals, weekly_progress
from college_tracker.schema import Application, Task, ViewMode
from college_tracker.snapshot import DashboardSnapshot
from college_tracker.stats import overview_stats, status_chart_data
from college_tracker.urgency import bucket_open_tasks, bucket_title, urgency_for_due

logger = logging.getLogger(__name__)


def _task_row(task: Task, today: date) -> dict[str, Any]:
    due_iso = iso_date(task.due_date) if task.due_date else None
    return {
        "id": task.id,
        "title": task.title,
        "due_date": due_iso,
        "due_label": due_label(due_iso, today) if due_iso else None,
        "urgency": urgency_for_due(due_iso, today) if due_iso else None,
        "context": task_context(task),
        "application_id": task.application_id,
    }


def resolve_clock(
    today: Optional[date] = None,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> tuple[date, datetime]:
    """Fill in whichever of ``today``/``now`` is missing from the other."""

    if now is None:
        if today is None:
            now = datetime.now(tz)
        else:
            now = datetime.combine(local_date(today), datetime.now(tz).time(), tzinfo=tz)
    today = local_date(today) if today is not None else local_date(now, tz)
    return today, now


def calendar_panel(
    anchor: date,
    mode: ViewMode,
    tasks: Iterable[Task],
    applications: Iterable[Application],
    today: date,
    selected: str,
) -> dict[str, Any]:
    grid = build_calendar(anchor, mode, tasks, applications, today)
    return {
        "title": grid_title(grid),
        "mode": grid.mode,
        "start": iso_date(grid.start),
        "cells": [asdict(cell) for cell in calendar_cells(grid, today, selected)],
    }


def agenda_panel(
    selected: str,
    tasks: Iterable[Task],
    applications: Iterable[Application],
    today: date,
) -> dict[str, Any]:
    agenda = select_day_agenda(selected, tasks, applications)
    return {
        "day": agenda.day,
        "heading": agenda.heading,
        "count": agenda.count,
        "tasks": [_task_row(task, today) for task in agenda.tasks],
        "applications": [
            {
                "id": app.id,
                "college": app.school_name or "Unknown College",
                "decision_type": app.decision_type,
                "platform": app.platform,
                "status": app.status,
            }
            for app in agenda.applications
        ],
    }


def progress_panel(
    now: datetime,
    completed: Iterable[Optional[datetime]],
    submitted: Iterable[Optional[datetime]],
    tz: Optional[tzinfo] = None,
) -> dict[str, Any]:
    series = weekly_progress(now, completed, submitted, tz)
    return {
        "progress": [asdict(point) for point in series],
        "progress_totals": progress_totals(series),
    }


def build_dashboard(
    snapshot: DashboardSnapshot,
    anchor: date,
    mode: ViewMode = "month",
    selected: Optional[str] = None,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> dict[str, Any]:
    """Derive every dashboard panel from one snapshot."""

    today, now = resolve_clock(today, now, tz)
    selected = selected or iso_date(today)

    open_tasks = [task for task in snapshot.tasks if not task.done]

    stats = overview_stats(snapshot.my_schools, snapshot.applications, snapshot.tasks)
    buckets = bucket_open_tasks(open_tasks, today)

    logger.debug("Dashboard built for %s (%s view, selected %s)", iso_date(today), mode, selected)

    return {
        "stats": asdict(stats),
        "status_chart": status_chart_data(stats.apps_by_status),
        "buckets": {
            name: {
                "title": bucket_title(name),
                "tasks": [_task_row(task, today) for task in getattr(buckets, name)],
            }
            for name in ("overdue", "week", "month")
        },
        "calendar": calendar_panel(anchor, mode, open_tasks, snapshot.applications, today, selected),
        "agenda": agenda_panel(selected, open_tasks, snapshot.applications, today),
        **progress_panel(now, snapshot.completion_times(), snapshot.submission_times(), tz),
    }
