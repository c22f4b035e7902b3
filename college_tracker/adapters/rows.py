"""Normalize raw store rows (with nested joins) into schema records."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from college_tracker.dates import parse_iso_date
from college_tracker.errors import InvalidArgument
from college_tracker.schema import Application, MySchool, MySchoolRef, SchoolRef, Task


def first_or_null(value: Any) -> Any:
    """Collapse a join that came back as a list or a single object."""

    if not value:
        return None
    if isinstance(value, list):
        return value[0]
    return value


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _date(item: dict, key: str, index: int) -> Optional[date]:
    raw = item.get(key)
    if raw in (None, ""):
        return None
    if isinstance(raw, date) and not isinstance(raw, datetime):
        return raw
    try:
        text = str(raw).strip()
        # Some exports carry a midnight timestamp for date columns.
        if len(text) > 10 and text[10] in "T ":
            text = text[:10]
        return parse_iso_date(text)
    except InvalidArgument as exc:
        raise InvalidArgument(f"Item {index}: malformed {key}") from exc


def _timestamp(item: dict, key: str, index: int) -> Optional[datetime]:
    raw = item.get(key)
    if raw in (None, ""):
        return None
    if isinstance(raw, datetime):
        return raw
    text = str(raw).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidArgument(f"Item {index}: malformed {key}") from exc


def _required_id(item: dict, index: int) -> str:
    ident = _text(item.get("id"))
    if ident is None:
        raise InvalidArgument(f"Item {index}: missing required field 'id'")
    return ident


def parse_school(raw: Any) -> Optional[SchoolRef]:
    school = first_or_null(raw)
    if not isinstance(school, dict) or _text(school.get("id")) is None:
        return None
    return SchoolRef(id=_text(school["id"]), name=_text(school.get("name")) or "")


def parse_my_school_ref(raw: Any) -> Optional[MySchoolRef]:
    link = first_or_null(raw)
    if not isinstance(link, dict) or _text(link.get("id")) is None:
        return None
    return MySchoolRef(id=_text(link["id"]), school=parse_school(link.get("schools")))


def parse_my_school(item: dict, index: int) -> MySchool:
    if not isinstance(item, dict):
        raise InvalidArgument(f"Item {index}: expected an object")

    rank_raw = item.get("rank")
    try:
        rank = int(rank_raw) if rank_raw not in (None, "") else 0
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"Item {index}: invalid rank") from exc

    return MySchool(
        id=_required_id(item, index),
        school=parse_school(item.get("schools")),
        ranking_bucket=_text(item.get("ranking_bucket")),
        rank=rank,
    )


def parse_application(item: dict, index: int) -> Application:
    if not isinstance(item, dict):
        raise InvalidArgument(f"Item {index}: expected an object")

    return Application(
        id=_required_id(item, index),
        platform=_text(item.get("platform")),
        decision_type=_text(item.get("decision_type")),
        deadline_date=_date(item, "deadline_date", index),
        status=_text(item.get("status")),
        my_school_id=_text(item.get("my_school_id")),
        my_school=parse_my_school_ref(item.get("my_schools")),
        submitted_at=_timestamp(item, "submitted_at", index),
        decided_at=_timestamp(item, "decided_at", index),
        created_at=_timestamp(item, "created_at", index),
    )


def parse_task(item: dict, index: int) -> Task:
    if not isinstance(item, dict):
        raise InvalidArgument(f"Item {index}: expected an object")

    done_raw = item.get("done", False)
    if isinstance(done_raw, str):
        done = done_raw.strip().lower() in ("1", "true", "yes")
    else:
        done = bool(done_raw)

    completed_at = _timestamp(item, "completed_at", index)
    if not done:
        completed_at = None

    application_raw = first_or_null(item.get("applications"))
    application = None
    if isinstance(application_raw, dict):
        application = parse_application(application_raw, index)

    return Task(
        id=_required_id(item, index),
        title=_text(item.get("title")) or "",
        due_date=_date(item, "due_date", index),
        done=done,
        completed_at=completed_at,
        application_id=_text(item.get("application_id")),
        application=application,
    )
