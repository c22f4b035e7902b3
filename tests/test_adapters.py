import json
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from college_tracker.adapters.csv_adapter import parse_tasks
from college_tracker.adapters.json_adapter import parse as parse_json
from college_tracker.adapters.rows import first_or_null, parse_application, parse_task
from college_tracker.errors import InvalidArgument

SAMPLE = Path(__file__).resolve().parents[1] / "examples" / "sample_snapshot.json"


def test_first_or_null():
    assert first_or_null(None) is None
    assert first_or_null([]) is None
    assert first_or_null([{"id": 1}, {"id": 2}]) == {"id": 1}
    assert first_or_null({"id": 3}) == {"id": 3}


def test_nested_joins_normalize_from_lists_or_objects():
    row = {
        "id": "t1",
        "title": "Essay",
        "due_date": "2024-03-10",
        "done": False,
        "application_id": "a1",
        "applications": [
            {
                "id": "a1",
                "decision_type": "EA",
                "platform": "Common App",
                "my_schools": {"id": "ms-1", "schools": [{"id": "s-1", "name": "Rice"}]},
            }
        ],
    }
    task = parse_task(row, 1)
    assert task.due_date == date(2024, 3, 10)
    assert task.application.id == "a1"
    assert task.application.my_school.id == "ms-1"
    assert task.application.school_name == "Rice"


def test_missing_optional_fields_default_to_none():
    app = parse_application({"id": 7}, 1)
    assert app.id == "7"
    assert app.deadline_date is None
    assert app.status is None
    assert app.my_school is None
    assert app.school_name is None


def test_timestamps_and_completion_invariant():
    done = parse_task({"id": "t1", "title": "x", "done": True, "completed_at": "2024-03-01T10:00:00Z"}, 1)
    assert done.completed_at == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)

    reopened = parse_task({"id": "t2", "title": "y", "done": False, "completed_at": "2024-03-01T10:00:00Z"}, 2)
    assert reopened.completed_at is None


def test_date_columns_accept_midnight_timestamps():
    app = parse_application({"id": "a1", "deadline_date": "2024-11-01T00:00:00"}, 1)
    assert app.deadline_date == date(2024, 11, 1)


def test_malformed_rows_name_the_item():
    with pytest.raises(ValueError, match="Item 2: malformed due_date"):
        parse_task({"id": "t1", "title": "x", "due_date": "03/10/2024"}, 2)
    with pytest.raises(InvalidArgument, match="missing required field"):
        parse_task({"title": "no id"}, 1)
    with pytest.raises(InvalidArgument):
        parse_application({"id": "a1", "submitted_at": "yesterday"}, 1)


def test_json_parse_success(tmp_path):
    path = tmp_path / "snapshot.json"
    payload = {
        "my_schools": [{"id": "ms-1", "rank": "2", "schools": {"id": "s-1", "name": "Rice"}}],
        "applications": [{"id": "a1", "deadline_date": "2024-03-10", "status": "Submitted"}],
        "tasks": [{"id": "t1", "title": "Essay", "due_date": "2024-03-10"}],
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    snapshot = parse_json(str(path))
    assert len(snapshot.my_schools) == 1
    assert snapshot.my_schools[0].rank == 2
    assert snapshot.my_schools[0].school.name == "Rice"
    assert snapshot.applications[0].deadline_date == date(2024, 3, 10)
    assert snapshot.tasks[0].title == "Essay"


def test_json_parse_malformed(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps([{"id": "t1"}]), encoding="utf-8")
    with pytest.raises(ValueError):
        parse_json(str(path))

    path.write_text(json.dumps({"tasks": [{"id": "t1", "due_date": "bad"}]}), encoding="utf-8")
    with pytest.raises(ValueError):
        parse_json(str(path))


def test_sample_snapshot_parses():
    snapshot = parse_json(str(SAMPLE))
    assert len(snapshot.my_schools) == 3
    assert len(snapshot.applications) == 3
    assert len(snapshot.tasks) == 5
    assert snapshot.tasks[1].application.school_name == "University of Michigan"


def test_csv_parse_success(tmp_path):
    path = tmp_path / "tasks.csv"
    path.write_text(
        "id,title,due_date,done,completed_at,application_id\n"
        "t1,Essay,2024-03-10,false,,a1\n"
        "t2,Scores,,true,2024-03-02T08:00:00,\n",
        encoding="utf-8",
    )
    tasks = parse_tasks(str(path))
    assert len(tasks) == 2
    assert tasks[0].due_date == date(2024, 3, 10)
    assert tasks[0].application_id == "a1"
    assert tasks[1].done
    assert tasks[1].due_date is None
    assert tasks[1].completed_at == datetime(2024, 3, 2, 8, 0)


def test_csv_parse_invalid_row(tmp_path):
    path = tmp_path / "tasks.csv"
    path.write_text("id,title,due_date\nt1,,2024-03-10\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Row 2"):
        parse_tasks(str(path))


def test_csv_parse_empty_file(tmp_path):
    path = tmp_path / "tasks.csv"
    path.write_text("", encoding="utf-8")
    assert parse_tasks(str(path)) == []
