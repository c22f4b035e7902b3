"""Headline dashboard counts."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from college_tracker.schema import Application, MySchool, OverviewStats, Task

UNKNOWN_STATUS = "Unknown"


def overview_stats(
    my_schools: Iterable[MySchool],
    applications: Iterable[Application],
    tasks: Iterable[Task],
) -> OverviewStats:
    """Count colleges, applications, open tasks and applications per status."""

    applications = list(applications)
    by_status = Counter(app.status or UNKNOWN_STATUS for app in applications)
    return OverviewStats(
        college_count=sum(1 for _ in my_schools),
        application_count=len(applications),
        open_task_count=sum(1 for task in tasks if not task.done),
        apps_by_status=dict(by_status),
    )


def status_chart_data(apps_by_status: dict[str, int]) -> list[tuple[str, int]]:
    """Non-empty (status, count) pairs, largest first, ties by status name."""

    pairs = [(status, count) for status, count in apps_by_status.items() if count > 0]
    return sorted(pairs, key=lambda pair: (-pair[1], pair[0]))
