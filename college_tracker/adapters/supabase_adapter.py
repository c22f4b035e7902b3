"""Supabase (PostgREST) adapter: owner-scoped queries and updates."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from supabase import Client, create_client

from college_tracker.adapters.rows import parse_application, parse_my_school, parse_task
from college_tracker.config import Settings
from college_tracker.dates import iso_date
from college_tracker.errors import InvalidArgument
from college_tracker.schema import Application, Task
from college_tracker.snapshot import DashboardSnapshot
from college_tracker.transitions import application_status_patch, task_completion_patch

logger = logging.getLogger(__name__)

SCHOOL_JOIN = "my_schools(id,schools(id,name))"
APP_COLUMNS = f"id,decision_type,platform,deadline_date,status,my_school_id,submitted_at,decided_at,created_at,{SCHOOL_JOIN}"
TASK_COLUMNS = f"id,title,due_date,done,completed_at,application_id,applications({APP_COLUMNS})"
MY_SCHOOL_COLUMNS = "id,ranking_bucket,rank,schools(id,name)"


def _serialize(patch: dict[str, Any]) -> dict[str, Any]:
    out = {}
    for key, value in patch.items():
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        out[key] = value
    return out


def create_store(settings: Settings) -> "SupabaseStore":
    if not settings.supabase_enabled:
        raise InvalidArgument("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
    if not settings.owner_id:
        raise InvalidArgument("TRACKER_OWNER_ID must be set")
    client = create_client(settings.supabase_url, settings.supabase_anon_key)
    return SupabaseStore(client, settings.owner_id)


class SupabaseStore:
    """Reads and writes one owner's rows through a supabase client."""

    def __init__(self, client: Client, owner_id: str):
        self.client = client
        self.owner_id = owner_id

    def _select(self, table: str, columns: str):
        return self.client.table(table).select(columns).eq("owner_id", self.owner_id)

    def load_snapshot(self) -> DashboardSnapshot:
        schools = self._select("my_schools", MY_SCHOOL_COLUMNS).order("rank").execute().data or []
        apps = self._select("applications", APP_COLUMNS).execute().data or []
        tasks = self._select("tasks", TASK_COLUMNS).order("due_date").execute().data or []
        logger.info("Fetched %d schools, %d applications, %d tasks", len(schools), len(apps), len(tasks))
        return DashboardSnapshot(
            my_schools=tuple(parse_my_school(row, i) for i, row in enumerate(schools, start=1)),
            applications=tuple(parse_application(row, i) for i, row in enumerate(apps, start=1)),
            tasks=tuple(parse_task(row, i) for i, row in enumerate(tasks, start=1)),
        )

    def load_calendar(self, start: date, end: date) -> tuple[list[Task], list[Application]]:
        """Open tasks due and application deadlines between start and end inclusive."""

        start_iso, end_iso = iso_date(start), iso_date(end)
        tasks = (
            self._select("tasks", "id,title,due_date,done")
            .eq("done", False)
            .not_.is_("due_date", "null")
            .gte("due_date", start_iso)
            .lte("due_date", end_iso)
            .execute()
            .data
            or []
        )
        apps = (
            self._select("applications", "id,deadline_date,status")
            .not_.is_("deadline_date", "null")
            .gte("deadline_date", start_iso)
            .lte("deadline_date", end_iso)
            .execute()
            .data
            or []
        )
        return (
            [parse_task(row, i) for i, row in enumerate(tasks, start=1)],
            [parse_application(row, i) for i, row in enumerate(apps, start=1)],
        )

    def load_day(self, day: date) -> tuple[list[Task], list[Application]]:
        day_iso = iso_date(day)
        tasks = self._select("tasks", TASK_COLUMNS).eq("done", False).eq("due_date", day_iso).execute().data or []
        apps = (
            self._select("applications", APP_COLUMNS)
            .eq("deadline_date", day_iso)
            .order("created_at", desc=True)
            .execute()
            .data
            or []
        )
        return (
            [parse_task(row, i) for i, row in enumerate(tasks, start=1)],
            [parse_application(row, i) for i, row in enumerate(apps, start=1)],
        )

    def load_progress(self, since: datetime) -> tuple[list[datetime], list[datetime]]:
        """Completion and submission timestamps at or after ``since``."""

        since_iso = since.isoformat()
        done = (
            self._select("tasks", "id,done,completed_at")
            .not_.is_("completed_at", "null")
            .gte("completed_at", since_iso)
            .execute()
            .data
            or []
        )
        submitted = (
            self._select("applications", "id,submitted_at")
            .not_.is_("submitted_at", "null")
            .gte("submitted_at", since_iso)
            .execute()
            .data
            or []
        )
        completions = [parse_task({**row, "done": True}, i).completed_at for i, row in enumerate(done, start=1)]
        submissions = [parse_application(row, i).submitted_at for i, row in enumerate(submitted, start=1)]
        return completions, submissions

    def set_task_done(self, task_id: str, done: bool, now: datetime) -> dict[str, Any]:
        patch = task_completion_patch(done, now)
        self.client.table("tasks").update(_serialize(patch)).eq("id", task_id).eq("owner_id", self.owner_id).execute()
        logger.info("Task %s marked %s", task_id, "done" if done else "open")
        return patch

    def save_application_status(self, application_id: str, status: str, now: datetime) -> dict[str, Any]:
        """Save a status, stamping submitted_at / decided_at on first entry only."""

        rows = (
            self._select("applications", "id,status,submitted_at,decided_at")
            .eq("id", application_id)
            .execute()
            .data
            or []
        )
        if not rows:
            raise InvalidArgument(f"application '{application_id}' not found")

        current = parse_application(rows[0], 1)
        patch = application_status_patch(current, status, now)
        (
            self.client.table("applications")
            .update(_serialize(patch))
            .eq("id", application_id)
            .eq("owner_id", self.owner_id)
            .execute()
        )
        logger.info("Application %s status set to %s", application_id, patch["status"])
        return patch
