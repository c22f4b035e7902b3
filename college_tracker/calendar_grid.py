"""Six-week calendar grid with per-day due counts."""

from __future__ import annotations

import calendar
import logging
from datetime import date, datetime
from typing import Iterable, Optional

from college_tracker.dates import (
    add_days,
    iso_date,
    local_date,
    local_today,
    start_of_month,
    sunday_on_or_before,
)
from college_tracker.errors import InvalidArgument
from college_tracker.schema import (
    Application,
    CalendarCell,
    CalendarCounts,
    CalendarGrid,
    Task,
    ViewMode,
)

logger = logging.getLogger(__name__)

GRID_DAYS = 42
VIEW_MODES = ("month", "upcoming")


def _check_anchor(anchor) -> date:
    if anchor is None:
        raise InvalidArgument("calendar anchor date is required")
    if not isinstance(anchor, (date, datetime)):
        raise InvalidArgument(f"calendar anchor must be a date, got {type(anchor).__name__}")
    return local_date(anchor)


def _check_mode(mode: str) -> None:
    if mode not in VIEW_MODES:
        raise InvalidArgument(f"unknown calendar view mode '{mode}'")


def grid_start(anchor: date, mode: ViewMode = "month", today: date | None = None) -> date:
    """First (Sunday) cell of the grid for the given view mode."""

    anchor_day = _check_anchor(anchor)
    _check_mode(mode)
    if mode == "upcoming":
        reference = local_today() if today is None else local_date(today)
        return sunday_on_or_before(reference)
    return sunday_on_or_before(start_of_month(anchor_day))


def grid_span(anchor: date, mode: ViewMode = "month", today: date | None = None) -> tuple[date, date]:
    """Inclusive first and last day covered by the grid."""

    start = grid_start(anchor, mode, today)
    return start, add_days(start, GRID_DAYS - 1)


def build_calendar(
    anchor: date,
    mode: ViewMode,
    tasks: Iterable[Task],
    applications: Iterable[Application],
    today: date | None = None,
) -> CalendarGrid:
    """Build the 42-day grid and bucket task due dates and app deadlines per day."""

    start, end = grid_span(anchor, mode, today)
    days = tuple(add_days(start, offset) for offset in range(GRID_DAYS))
    first_iso, last_iso = iso_date(start), iso_date(end)

    counts: dict[str, CalendarCounts] = {}
    ignored = 0

    for task in tasks:
        if task.due_date is None:
            continue
        key = iso_date(task.due_date)
        if not first_iso <= key <= last_iso:
            ignored += 1
            continue
        counts.setdefault(key, CalendarCounts()).tasks_due += 1

    for application in applications:
        if application.deadline_date is None:
            continue
        key = iso_date(application.deadline_date)
        if not first_iso <= key <= last_iso:
            ignored += 1
            continue
        counts.setdefault(key, CalendarCounts()).apps_due += 1

    if ignored:
        logger.debug("Calendar %s..%s ignored %d out-of-range records", first_iso, last_iso, ignored)

    return CalendarGrid(mode=mode, anchor=start_of_month(anchor), start=start, days=days, counts=counts)


def calendar_cells(
    grid: CalendarGrid,
    today: date | None = None,
    selected: Optional[str] = None,
) -> list[CalendarCell]:
    """Attach display flags (focus, today, selected) to every grid day."""

    today_iso = iso_date(local_today() if today is None else today)
    cells = []
    for day in grid.days:
        key = iso_date(day)
        counts = grid.counts.get(key, CalendarCounts())
        in_focus = grid.mode == "upcoming" or (day.year, day.month) == (grid.anchor.year, grid.anchor.month)
        cells.append(
            CalendarCell(
                iso=key,
                day=day.day,
                in_focus=in_focus,
                is_today=key == today_iso,
                is_selected=key == selected,
                tasks_due=counts.tasks_due,
                apps_due=counts.apps_due,
            )
        )
    return cells


def grid_title(grid: CalendarGrid) -> str:
    if grid.mode == "upcoming":
        return "Upcoming 6 weeks"
    return f"{calendar.month_name[grid.anchor.month]} {grid.anchor.year}"
