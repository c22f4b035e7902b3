"""Trailing 12-week progress histogram."""

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Iterable, Optional

from college_tracker.dates import add_days, format_week_label, local_date, start_of_day, week_start_iso
from college_tracker.schema import ProgressPoint

logger = logging.getLogger(__name__)

WEEKS = 12


def progress_window_start(now: date | datetime, tz: tzinfo | None = None) -> date:
    """Day 11 weeks before ``now``; the first week key is derived from it."""

    return start_of_day(add_days(local_date(now, tz), -7 * (WEEKS - 1)))


def week_keys(now: date | datetime, tz: tzinfo | None = None) -> list[str]:
    cursor = progress_window_start(now, tz)
    keys = []
    for _ in range(WEEKS):
        keys.append(week_start_iso(cursor))
        cursor = add_days(cursor, 7)
    return keys


def _tally(
    counts: dict[str, list[int]],
    stamps: Iterable[Optional[datetime]],
    slot: int,
    tz: tzinfo | None,
) -> int:
    dropped = 0
    for stamp in stamps:
        if stamp is None:
            continue
        key = week_start_iso(stamp, tz)
        if key not in counts:
            dropped += 1
            continue
        counts[key][slot] += 1
    return dropped


def weekly_progress(
    now: date | datetime,
    completed: Iterable[Optional[datetime]],
    submitted: Iterable[Optional[datetime]],
    tz: tzinfo | None = None,
) -> list[ProgressPoint]:
    """Count task completions and application submissions per trailing week.

    The series always has 12 chronological weeks. Timestamps outside those
    weeks are dropped.
    """

    keys = week_keys(now, tz)
    counts = {key: [0, 0] for key in keys}

    dropped = _tally(counts, completed, 0, tz) + _tally(counts, submitted, 1, tz)
    if dropped:
        logger.debug("Progress chart dropped %d timestamps outside %s..", dropped, keys[0])

    return [
        ProgressPoint(
            week_start=key,
            week_label=format_week_label(key),
            tasks_completed=counts[key][0],
            applications_submitted=counts[key][1],
        )
        for key in keys
    ]


def progress_totals(series: list[ProgressPoint]) -> dict:
    return {
        "tasks_completed": sum(point.tasks_completed for point in series),
        "applications_submitted": sum(point.applications_submitted for point in series),
    }
