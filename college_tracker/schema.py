"""Core data schema for schools, applications and tasks."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal, Optional

APPLICATION_STATUSES = ("Not started", "In progress", "Submitted", "Decided")

UrgencyTier = Literal["overdue", "soon", "later"]
ViewMode = Literal["month", "upcoming"]


@dataclass(frozen=True)
class SchoolRef:
    """School display reference reached through a my-school link."""

    id: str
    name: str


@dataclass(frozen=True)
class MySchoolRef:
    """The user's link to a school, as embedded in joins."""

    id: str
    school: Optional[SchoolRef] = None


@dataclass(frozen=True)
class MySchool:
    """A school catalogued by the user."""

    id: str
    school: Optional[SchoolRef] = None
    ranking_bucket: Optional[str] = None
    rank: int = 0


@dataclass(frozen=True)
class Application:
    """Normalized application record."""

    id: str
    platform: Optional[str] = None
    decision_type: Optional[str] = None
    deadline_date: Optional[date] = None
    status: Optional[str] = None
    my_school_id: Optional[str] = None
    my_school: Optional[MySchoolRef] = None
    submitted_at: Optional[datetime] = None
    decided_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def school_name(self) -> Optional[str]:
        if self.my_school is None or self.my_school.school is None:
            return None
        return self.my_school.school.name


@dataclass(frozen=True)
class Task:
    """Normalized task record."""

    id: str
    title: str
    due_date: Optional[date] = None
    done: bool = False
    completed_at: Optional[datetime] = None
    application_id: Optional[str] = None
    application: Optional[Application] = None


@dataclass
class CalendarCounts:
    """Per-day tally of task due dates and application deadlines."""

    tasks_due: int = 0
    apps_due: int = 0


@dataclass(frozen=True)
class CalendarCell:
    """One day of the visible grid with its display flags."""

    iso: str
    day: int
    in_focus: bool
    is_today: bool
    is_selected: bool
    tasks_due: int
    apps_due: int

    @property
    def has_any(self) -> bool:
        return self.tasks_due > 0 or self.apps_due > 0


@dataclass(frozen=True)
class CalendarGrid:
    """42-day grid plus the sparse per-day count map."""

    mode: ViewMode
    anchor: date
    start: date
    days: tuple[date, ...]
    counts: dict[str, CalendarCounts] = field(default_factory=dict)


@dataclass(frozen=True)
class ProgressPoint:
    """One week of the trailing progress histogram."""

    week_start: str
    week_label: str
    tasks_completed: int
    applications_submitted: int


@dataclass(frozen=True)
class DueBuckets:
    """Open tasks split by how soon they are due."""

    overdue: tuple[Task, ...] = ()
    week: tuple[Task, ...] = ()
    month: tuple[Task, ...] = ()


@dataclass(frozen=True)
class DayAgenda:
    """Tasks and application deadlines falling on one selected day."""

    day: str
    heading: str
    tasks: tuple[Task, ...]
    applications: tuple[Application, ...]

    @property
    def count(self) -> int:
        return len(self.tasks) + len(self.applications)


@dataclass(frozen=True)
class OverviewStats:
    """Headline counts for the dashboard."""

    college_count: int
    application_count: int
    open_task_count: int
    apps_by_status: dict[str, int]
