"""Update patches for task completion and application status changes."""

from __future__ import annotations

from dataclasses import fields, replace
from datetime import datetime
from typing import Any, TypeVar

from college_tracker.errors import InvalidArgument
from college_tracker.schema import Application

SUBMITTED = "Submitted"
DECIDED = "Decided"

Record = TypeVar("Record")


def _check_now(now: datetime) -> None:
    if not isinstance(now, datetime):
        raise InvalidArgument(f"transition time must be a datetime, got {type(now).__name__}")


def task_completion_patch(done: bool, now: datetime) -> dict[str, Any]:
    """Patch that keeps completed_at in step with the done flag."""

    _check_now(now)
    return {"done": bool(done), "completed_at": now if done else None}


def application_status_patch(current: Application, status: str, now: datetime) -> dict[str, Any]:
    """Patch for a status save.

    submitted_at and decided_at are stamped only on the first move into
    Submitted / Decided and are never cleared by later moves.
    """

    _check_now(now)
    status = (status or "").strip()
    if not status:
        raise InvalidArgument("application status must not be empty")

    patch: dict[str, Any] = {"status": status}
    if status == SUBMITTED and current.submitted_at is None:
        patch["submitted_at"] = now
    if status == DECIDED and current.decided_at is None:
        patch["decided_at"] = now
    return patch


def apply_patch(record: Record, patch: dict[str, Any]) -> Record:
    """Return a copy of ``record`` with the patch applied."""

    known = {f.name for f in fields(record)}
    unknown = sorted(set(patch) - known)
    if unknown:
        raise InvalidArgument(f"patch has unknown fields {unknown}")
    return replace(record, **patch)
