from datetime import date, datetime
from types import SimpleNamespace

import pytest

from college_tracker.adapters.supabase_adapter import SupabaseStore, create_store
from college_tracker.config import Settings
from college_tracker.errors import InvalidArgument


class FakeQuery:
    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.calls = []

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return method

    @property
    def not_(self):
        self.calls.append(("not_", (), {}))
        return self

    def execute(self):
        self.client.executed.append(self)
        return SimpleNamespace(data=self.client.responses.get(self.table, []))


class FakeClient:
    def __init__(self, responses=None):
        self.responses = responses or {}
        self.executed = []

    def table(self, name):
        return FakeQuery(self, name)


def owner_scoped(query, owner="user-1"):
    return ("eq", ("owner_id", owner), {}) in query.calls


def test_load_snapshot_normalizes_rows():
    client = FakeClient(
        {
            "my_schools": [{"id": "ms-1", "rank": 1, "schools": [{"id": "s-1", "name": "Rice"}]}],
            "applications": [{"id": "a1", "deadline_date": "2024-03-10", "status": "Submitted"}],
            "tasks": [{"id": "t1", "title": "Essay", "due_date": "2024-03-10", "done": False}],
        }
    )
    snapshot = SupabaseStore(client, "user-1").load_snapshot()

    assert snapshot.my_schools[0].school.name == "Rice"
    assert snapshot.applications[0].deadline_date == date(2024, 3, 10)
    assert snapshot.tasks[0].title == "Essay"
    assert [q.table for q in client.executed] == ["my_schools", "applications", "tasks"]
    assert all(owner_scoped(q) for q in client.executed)


def test_load_calendar_queries_the_grid_range():
    client = FakeClient({"tasks": [{"id": "t1", "due_date": "2024-03-10", "done": False}]})
    tasks, apps = SupabaseStore(client, "user-1").load_calendar(date(2024, 2, 25), date(2024, 4, 6))

    assert tasks[0].due_date == date(2024, 3, 10)
    assert apps == []
    task_query = client.executed[0]
    assert ("gte", ("due_date", "2024-02-25"), {}) in task_query.calls
    assert ("lte", ("due_date", "2024-04-06"), {}) in task_query.calls
    assert ("eq", ("done", False), {}) in task_query.calls


def test_load_progress_returns_timestamps():
    client = FakeClient(
        {
            "tasks": [{"id": "t1", "completed_at": "2024-06-11T09:00:00"}],
            "applications": [{"id": "a1", "submitted_at": "2024-05-28T15:00:00"}],
        }
    )
    completions, submissions = SupabaseStore(client, "user-1").load_progress(datetime(2024, 3, 25))
    assert completions == [datetime(2024, 6, 11, 9, 0)]
    assert submissions == [datetime(2024, 5, 28, 15, 0)]


def test_save_application_status_stamps_first_submission():
    client = FakeClient({"applications": [{"id": "a1", "status": "In progress"}]})
    now = datetime(2024, 3, 15, 10, 30)
    patch = SupabaseStore(client, "user-1").save_application_status("a1", "Submitted", now)

    assert patch == {"status": "Submitted", "submitted_at": now}
    update = client.executed[-1]
    assert ("update", ({"status": "Submitted", "submitted_at": now.isoformat()},), {}) in update.calls
    assert owner_scoped(update)


def test_save_application_status_keeps_existing_timestamp():
    client = FakeClient({"applications": [{"id": "a1", "status": "Submitted", "submitted_at": "2024-02-01T09:00:00"}]})
    patch = SupabaseStore(client, "user-1").save_application_status("a1", "Submitted", datetime(2024, 3, 15))
    assert patch == {"status": "Submitted"}


def test_save_application_status_unknown_id():
    with pytest.raises(InvalidArgument):
        SupabaseStore(FakeClient(), "user-1").save_application_status("missing", "Submitted", datetime(2024, 3, 15))


def test_set_task_done_writes_completion_time():
    client = FakeClient()
    now = datetime(2024, 3, 15, 10, 30)
    SupabaseStore(client, "user-1").set_task_done("t1", True, now)
    update = client.executed[-1]
    assert ("update", ({"done": True, "completed_at": now.isoformat()},), {}) in update.calls
    assert ("eq", ("id", "t1"), {}) in update.calls


def test_create_store_requires_credentials():
    with pytest.raises(InvalidArgument):
        create_store(Settings(supabase_url=None, supabase_anon_key=None, _env_file=None))
    with pytest.raises(InvalidArgument):
        create_store(Settings(supabase_url="https://x.supabase.co", supabase_anon_key="key", owner_id=None, _env_file=None))
