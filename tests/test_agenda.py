from datetime import date, datetime

from college_tracker.agenda import agenda_heading, select_day_agenda, task_context
from college_tracker.schema import Application, MySchoolRef, SchoolRef, Task

STANFORD = MySchoolRef("ms-1", SchoolRef("s-1", "Stanford"))


def sample_records():
    tasks = [
        Task("t1", "Essay", due_date=date(2024, 3, 10)),
        Task("t2", "Done already", due_date=date(2024, 3, 10), done=True, completed_at=datetime(2024, 3, 9)),
        Task("t3", "Next day", due_date=date(2024, 3, 11)),
        Task("t4", "Portfolio", due_date=date(2024, 3, 10)),
    ]
    apps = [
        Application("a1", deadline_date=date(2024, 3, 10), created_at=datetime(2024, 1, 1)),
        Application("a2", deadline_date=date(2024, 3, 10), created_at=datetime(2024, 2, 1)),
        Application("a3", deadline_date=date(2024, 3, 10)),
        Application("a4", deadline_date=date(2024, 3, 11), created_at=datetime(2024, 3, 1)),
    ]
    return tasks, apps


def test_select_day_agenda():
    tasks, apps = sample_records()
    agenda = select_day_agenda("2024-03-10", tasks, apps)

    assert agenda.day == "2024-03-10"
    assert [t.id for t in agenda.tasks] == ["t1", "t4"]
    assert [a.id for a in agenda.applications] == ["a2", "a1", "a3"]
    assert agenda.count == 5


def test_empty_day():
    tasks, apps = sample_records()
    agenda = select_day_agenda(date(2024, 3, 12), tasks, apps)
    assert agenda.count == 0
    assert agenda.tasks == ()
    assert agenda.applications == ()


def test_agenda_heading():
    assert agenda_heading("2024-03-15") == "Friday, March 15"
    assert agenda_heading(date(2024, 12, 1)) == "Sunday, December 1"


def test_task_context():
    app = Application("a1", platform="Common App", decision_type="REA", my_school=STANFORD)
    assert task_context(Task("t1", "Essay", application=app)) == "Stanford • REA · Common App"
    assert task_context(Task("t2", "Loose task")) == "College • — · —"
