"""CSV adapter for flat task exports."""

from __future__ import annotations

import csv

from college_tracker.adapters.rows import parse_task
from college_tracker.schema import Task

_REQUIRED_FIELDS = {"id", "title"}


def _parse_row(row: dict, row_number: int) -> Task:
    missing = sorted(field for field in _REQUIRED_FIELDS if not row.get(field))
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    item = {key: (value if value != "" else None) for key, value in row.items() if key}
    return parse_task(item, row_number)


def parse_tasks(file_path: str) -> list[Task]:
    """Parse a task CSV (id,title,due_date,done,completed_at,application_id)."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        tasks: list[Task] = []
        for row_number, row in enumerate(reader, start=2):
            tasks.append(_parse_row(row, row_number))
        return tasks
