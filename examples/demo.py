"""Demo script for college-tracker."""

import sys
from datetime import date, datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from college_tracker.adapters.json_adapter import parse
from college_tracker.calendar_grid import build_calendar, calendar_cells, grid_title
from college_tracker.progress import weekly_progress
from college_tracker.urgency import bucket_open_tasks


def main() -> None:
    snapshot = parse("examples/sample_snapshot.json")
    today = date(2024, 3, 15)

    grid = build_calendar(today, "month", snapshot.tasks, snapshot.applications, today)
    print(grid_title(grid))
    for cell in calendar_cells(grid, today):
        if cell.has_any:
            print(f"  {cell.iso}: {cell.tasks_due} tasks, {cell.apps_due} deadlines")

    buckets = bucket_open_tasks(snapshot.tasks, today)
    print("Overdue:", [task.title for task in buckets.overdue])
    print("This week:", [task.title for task in buckets.week])
    print("This month:", [task.title for task in buckets.month])

    series = weekly_progress(datetime(2024, 3, 15, 12, 0), snapshot.completion_times(), snapshot.submission_times())
    print("Progress:", [(p.week_label, p.tasks_completed, p.applications_submitted) for p in series])


if __name__ == "__main__":
    main()
