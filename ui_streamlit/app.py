"""Streamlit dashboard for the college application tracker."""

from __future__ import annotations

import random
from datetime import date, datetime, time, tzinfo
from typing import Any, Optional

import pandas as pd

from college_tracker.adapters import json_adapter
from college_tracker.adapters.supabase_adapter import SupabaseStore, create_store
from college_tracker.calendar_grid import grid_span
from college_tracker.config import Settings, configure_logging, load_settings
from college_tracker.dashboard import agenda_panel, build_dashboard, calendar_panel, progress_panel, resolve_clock
from college_tracker.dates import add_months, iso_date, local_today, parse_iso_date, start_of_month
from college_tracker.progress import progress_window_start
from college_tracker.schema import APPLICATION_STATUSES, ViewMode
from college_tracker.snapshot import DashboardSnapshot, RequestGate

FUN_MESSAGES = [
    "Nice work! You're on a roll 🎉",
    "Boom. Task crushed 💥",
    "That's progress. Keep going 🚀",
    "You just made future-you happier 😄",
]

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
READ_ONLY_NOTICE = "Updates need a Supabase connection; the JSON snapshot is read-only."


def load_snapshot(settings: Settings, gate: RequestGate) -> DashboardSnapshot | None:
    """Fetch a snapshot; returns None if a newer fetch superseded this one."""

    token = gate.begin("snapshot")
    if settings.supabase_enabled:
        snapshot = create_store(settings).load_snapshot()
    else:
        snapshot = json_adapter.parse(str(settings.data_file))
    return gate.accept(token, snapshot)


def apply_store_panels(
    view: dict[str, Any],
    store: SupabaseStore,
    gate: RequestGate,
    anchor: date,
    mode: ViewMode,
    today: date,
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> dict[str, Any]:
    """Replace the calendar, agenda and progress panels with range-scoped reads."""

    selected = view["agenda"]["day"]

    token = gate.begin("calendar")
    rows = gate.accept(token, store.load_calendar(*grid_span(anchor, mode, today)))
    if rows is not None:
        view["calendar"] = calendar_panel(anchor, mode, rows[0], rows[1], today, selected)

    token = gate.begin("agenda")
    rows = gate.accept(token, store.load_day(parse_iso_date(selected)))
    if rows is not None:
        view["agenda"] = agenda_panel(selected, rows[0], rows[1], today)

    since = datetime.combine(progress_window_start(now, tz), time.min, tzinfo=tz)
    token = gate.begin("progress")
    times = gate.accept(token, store.load_progress(since))
    if times is not None:
        view.update(progress_panel(now, times[0], times[1], tz))
    return view


def complete_task(st, settings: Settings, task_id: str, title: str, key: str) -> None:
    """Checkbox callback: mark the task done and drop the cached snapshot."""

    state = st.session_state
    if not settings.supabase_enabled:
        state[key] = False
        state["flash"] = READ_ONLY_NOTICE
        return
    create_store(settings).set_task_done(task_id, True, datetime.now(settings.tzinfo))
    state.pop("snapshot", None)
    state["flash"] = f'✅ "{title}" — {random.choice(FUN_MESSAGES)}'


def save_status(st, settings: Settings, application_id: str, key: str) -> None:
    """Selectbox callback: persist a new application status."""

    state = st.session_state
    patch = create_store(settings).save_application_status(
        application_id, state[key], datetime.now(settings.tzinfo)
    )
    state.pop("snapshot", None)
    state["flash"] = f"Status saved: {patch['status']}"


def progress_frame(progress: list[dict[str, Any]]) -> pd.DataFrame:
    frame = pd.DataFrame(progress, columns=["week_label", "tasks_completed", "applications_submitted"])
    return frame.rename(
        columns={
            "week_label": "Week",
            "tasks_completed": "Tasks completed",
            "applications_submitted": "Applications submitted",
        }
    ).set_index("Week")


def status_frame(status_chart: list[tuple[str, int]]) -> pd.DataFrame:
    return pd.DataFrame(status_chart, columns=["Status", "Applications"]).set_index("Status")


def calendar_weeks(cells: list[dict[str, Any]]) -> list[list[dict[str, Any]]]:
    return [cells[i : i + 7] for i in range(0, len(cells), 7)]


def cell_text(cell: dict[str, Any]) -> str:
    parts = [str(cell["day"])]
    if cell["tasks_due"]:
        parts.append(f"🧩{cell['tasks_due']}")
    if cell["apps_due"]:
        parts.append(f"🎓{cell['apps_due']}")
    return " ".join(parts)


def _render_tasks(st, rows: list[dict[str, Any]], settings: Settings, key_prefix: str) -> None:
    for row in rows:
        key = f"{key_prefix}-{row['id']}"
        st.checkbox(
            f"{row['title']} · {row['due_label']} · {row['context']}",
            key=key,
            on_change=complete_task,
            args=(st, settings, row["id"], row["title"], key),
        )


def _render_statuses(st, snapshot: DashboardSnapshot, settings: Settings) -> None:
    for app in snapshot.applications:
        label = f"{app.school_name or 'Unknown College'} · {app.decision_type or '—'}"
        if not settings.supabase_enabled:
            st.write(f"🎓 {label}: {app.status or '—'}")
            continue
        key = f"status-{app.id}"
        st.selectbox(
            label,
            options=APPLICATION_STATUSES,
            index=APPLICATION_STATUSES.index(app.status) if app.status in APPLICATION_STATUSES else None,
            key=key,
            on_change=save_status,
            args=(st, settings, app.id, key),
        )


def main() -> None:
    import streamlit as st

    settings = load_settings()
    configure_logging(settings.log_level)
    tz = settings.tzinfo

    st.set_page_config(page_title="College Tracker", layout="wide")
    st.title("College Application Dashboard")

    state = st.session_state
    state.setdefault("gate", RequestGate())
    state.setdefault("month", start_of_month(local_today(tz)))
    state.setdefault("selected", iso_date(local_today(tz)))

    flash = state.pop("flash", None)
    if flash:
        st.toast(flash)

    with st.sidebar:
        st.header("Calendar")
        mode = st.radio("View", options=["month", "upcoming"], horizontal=True)
        prev_col, next_col = st.columns(2)
        if prev_col.button("← Prev", disabled=mode == "upcoming"):
            state["month"] = add_months(state["month"], -1)
        if next_col.button("Next →", disabled=mode == "upcoming"):
            state["month"] = add_months(state["month"], 1)
        if st.button("Reload data"):
            state.pop("snapshot", None)

    try:
        if "snapshot" not in state:
            snapshot = load_snapshot(settings, state["gate"])
            if snapshot is not None:
                state["snapshot"] = snapshot
        snapshot = state.get("snapshot")
        if snapshot is None:
            st.warning("Data is still loading.")
            return

        anchor: date = state["month"]
        today, now = resolve_clock(tz=tz)
        view = build_dashboard(snapshot, anchor, mode=mode, selected=state["selected"], today=today, now=now, tz=tz)
        if settings.supabase_enabled:
            view = apply_store_panels(view, create_store(settings), state["gate"], anchor, mode, today, now, tz)
    except ValueError as exc:
        st.error(f"Input error: {exc}")
        return

    stats = view["stats"]
    c1, c2, c3 = st.columns(3)
    c1.metric("Colleges", stats["college_count"])
    c2.metric("Applications", stats["application_count"])
    c3.metric("Open tasks", stats["open_task_count"])

    left, right = st.columns([3, 2])

    with left:
        start, end = grid_span(anchor, mode, today)
        st.subheader(view["calendar"]["title"])
        st.caption(f"{iso_date(start)} → {iso_date(end)} · 🧩 tasks due · 🎓 application deadlines")
        header = st.columns(7)
        for col, name in zip(header, WEEKDAYS):
            col.markdown(f"**{name}**")
        for week in calendar_weeks(view["calendar"]["cells"]):
            cols = st.columns(7)
            for col, cell in zip(cols, week):
                label = cell_text(cell)
                if cell["is_today"]:
                    label = f"[{label}]"
                idle = not cell["in_focus"] and not (cell["tasks_due"] or cell["apps_due"])
                if col.button(label, key=f"day-{cell['iso']}", disabled=idle):
                    state["selected"] = cell["iso"]
                    st.rerun()

    with right:
        agenda = view["agenda"]
        st.subheader(agenda["heading"])
        if agenda["count"] == 0:
            st.write("🌤️ Nothing due on this day. Use the time to relax or get ahead.")
        _render_tasks(st, agenda["tasks"], settings, "agenda")
        for app in agenda["applications"]:
            st.write(f"🎓 **{app['college']}** · {app['decision_type'] or '—'} · {app['platform'] or '—'} ({app['status'] or '—'})")

    bucket_cols = st.columns(3)
    for col, name in zip(bucket_cols, ("overdue", "week", "month")):
        bucket = view["buckets"][name]
        with col:
            st.subheader(f"{bucket['title']} ({len(bucket['tasks'])})")
            _render_tasks(st, bucket["tasks"], settings, name)

    chart_left, chart_right = st.columns(2)
    with chart_left:
        totals = view["progress_totals"]
        st.subheader("Weekly progress")
        st.caption(f"{totals['tasks_completed']} tasks completed · {totals['applications_submitted']} applications submitted")
        st.line_chart(progress_frame(view["progress"]))
    with chart_right:
        st.subheader("Applications by status")
        if view["status_chart"]:
            st.bar_chart(status_frame(view["status_chart"]))
        else:
            st.write("No applications yet")

    with st.expander("Application status"):
        _render_statuses(st, snapshot, settings)


if __name__ == "__main__":
    main()
