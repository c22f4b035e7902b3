from datetime import date, datetime, timedelta, timezone

from college_tracker.progress import progress_totals, progress_window_start, weekly_progress


def test_window_start_is_eleven_weeks_back():
    assert progress_window_start(date(2024, 6, 10)) == date(2024, 3, 25)
    assert progress_window_start(datetime(2024, 6, 10, 18, 30)) == date(2024, 3, 25)


def test_weekly_histogram_example():
    series = weekly_progress(
        datetime(2024, 6, 10, 12, 0),
        completed=[datetime(2024, 6, 11, 9, 0)],
        submitted=[datetime(2024, 5, 28, 15, 0)],
    )

    assert len(series) == 12
    assert series[0].week_start == "2024-03-25"
    assert series[0].week_label == "3/25"
    assert series[-1].week_start == "2024-06-10"
    assert series[-1].week_label == "6/10"

    by_week = {point.week_start: point for point in series}
    assert by_week["2024-06-10"].tasks_completed == 1
    assert by_week["2024-06-10"].applications_submitted == 0
    assert by_week["2024-05-27"].tasks_completed == 0
    assert by_week["2024-05-27"].applications_submitted == 1

    others = [p for p in series if p.week_start not in ("2024-06-10", "2024-05-27")]
    assert len(others) == 10
    assert all(p.tasks_completed == 0 and p.applications_submitted == 0 for p in others)


def test_series_always_has_twelve_ordered_weeks():
    start = date(2024, 1, 1)
    for offset in range(0, 60, 3):
        now = start + timedelta(days=offset)
        series = weekly_progress(now, [], [])
        keys = [point.week_start for point in series]
        assert len(series) == 12
        assert keys == sorted(keys)
        assert len(set(keys)) == 12
        assert all(p.tasks_completed == 0 and p.applications_submitted == 0 for p in series)


def test_stray_and_missing_timestamps_are_dropped():
    series = weekly_progress(
        date(2024, 6, 10),
        completed=[datetime(2023, 1, 1), None, datetime(2024, 7, 1), datetime(2024, 3, 25, 0, 1)],
        submitted=[None, datetime(2024, 3, 24, 23, 59)],
    )
    assert len(series) == 12
    assert progress_totals(series) == {"tasks_completed": 1, "applications_submitted": 0}
    assert series[0].tasks_completed == 1


def test_aware_timestamps_bucket_by_local_day():
    pacific = timezone(timedelta(hours=-7))
    series = weekly_progress(
        datetime(2024, 6, 10, 19, 0, tzinfo=timezone.utc),
        completed=[datetime(2024, 6, 10, 3, 0, tzinfo=timezone.utc)],
        submitted=[],
        tz=pacific,
    )
    by_week = {point.week_start: point for point in series}
    # 03:00 UTC Monday is still Sunday evening in the Pacific zone.
    assert by_week["2024-06-03"].tasks_completed == 1
    assert by_week["2024-06-10"].tasks_completed == 0


def test_reaggregation_is_idempotent():
    completed = [datetime(2024, 6, 11, 9, 0), datetime(2024, 4, 2, 9, 0)]
    submitted = [datetime(2024, 5, 28, 15, 0)]
    first = weekly_progress(date(2024, 6, 10), completed, submitted)
    second = weekly_progress(date(2024, 6, 10), completed, submitted)
    assert first == second
    assert completed == [datetime(2024, 6, 11, 9, 0), datetime(2024, 4, 2, 9, 0)]
