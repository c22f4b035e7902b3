"""JSON adapter for dashboard snapshots."""

from __future__ import annotations

import json
import logging

from college_tracker.adapters.rows import parse_application, parse_my_school, parse_task
from college_tracker.snapshot import DashboardSnapshot

logger = logging.getLogger(__name__)

_SECTIONS = ("my_schools", "applications", "tasks")


def _section(payload: dict, name: str) -> list:
    items = payload.get(name) or []
    if not isinstance(items, list):
        raise ValueError(f"'{name}' must be a list of objects")
    return items


def parse_payload(payload: dict) -> DashboardSnapshot:
    """Build a snapshot from an already-decoded export object."""

    if not isinstance(payload, dict):
        raise ValueError("JSON payload must be an object with my_schools, applications and tasks")

    unknown = sorted(set(payload) - set(_SECTIONS))
    if unknown:
        logger.warning("Ignoring unknown snapshot sections %s", unknown)

    return DashboardSnapshot(
        my_schools=tuple(parse_my_school(item, i) for i, item in enumerate(_section(payload, "my_schools"), start=1)),
        applications=tuple(
            parse_application(item, i) for i, item in enumerate(_section(payload, "applications"), start=1)
        ),
        tasks=tuple(parse_task(item, i) for i, item in enumerate(_section(payload, "tasks"), start=1)),
    )


def parse(file_path: str) -> DashboardSnapshot:
    """Parse a JSON export file into a dashboard snapshot."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    snapshot = parse_payload(payload)
    logger.info(
        "Loaded %d schools, %d applications, %d tasks from %s",
        len(snapshot.my_schools),
        len(snapshot.applications),
        len(snapshot.tasks),
        file_path,
    )
    return snapshot
