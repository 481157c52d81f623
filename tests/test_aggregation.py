import pytest

from core.aggregation import (
    UNKNOWN_COLOR,
    BreakdownItem,
    breakdown,
    breakdown_shares,
    chart_series,
    daily_history,
    task_color,
    task_stats,
    today_context,
    tracked_today,
    window_start,
)
from core.session_engine import effective_duration
from domain.models import Task

from helpers import closed, ms, running

NOW = ms(2026, 6, 10, 15, 0)


# ----- per task -----
def test_two_sessions_same_day():
    sessions = [
        closed("a", "task_x", ms(2026, 6, 10, 9, 0), 120),
        closed("b", "task_x", ms(2026, 6, 10, 11, 0), 300),
    ]
    st = task_stats("task_x", sessions, NOW)
    assert st.total_seconds == 420
    assert st.today_seconds == 420

    (day,) = daily_history(sessions, NOW, task_id="task_x")
    assert day.duration == 420
    assert day.is_today
    assert day.date == ms(2026, 6, 10)


def test_task_stats_splits_today_and_total():
    sessions = [
        closed("old", "task_1", ms(2026, 6, 8, 10, 0), 600),
        closed("today", "task_1", ms(2026, 6, 10, 8, 0), 60),
        closed("other", "task_2", ms(2026, 6, 10, 8, 0), 999),
    ]
    st = task_stats("task_1", sessions, NOW)
    assert st.total_seconds == 660
    assert st.today_seconds == 60


def test_task_stats_counts_running_session_live():
    sessions = [
        closed("a", "task_1", ms(2026, 6, 10, 9, 0), 100),
        running("b", "task_1", NOW - 90 * 1000),
    ]
    st = task_stats("task_1", sessions, NOW)
    assert st.total_seconds == 190
    assert st.today_seconds == 190


def test_task_stats_conservation():
    sessions = [
        closed("a", "task_1", ms(2026, 5, 1, 9, 0), 3600),
        closed("b", "task_1", ms(2026, 6, 9, 23, 59), 7200),
        closed("c", "task_2", ms(2026, 6, 10, 1, 0), 50),
        running("d", "task_1", NOW - 5000),
    ]
    for now in (NOW, NOW + 12345, NOW + 86400000):
        expected = sum(effective_duration(s, now) for s in sessions if s.task_id == "task_1")
        assert task_stats("task_1", sessions, now).total_seconds == expected


def test_empty_sessions_give_zero_stats():
    st = task_stats("task_1", [], NOW)
    assert (st.total_seconds, st.today_seconds) == (0, 0)
    assert daily_history([], NOW) == []


def test_today_context_adds_live_elapsed():
    active = running("live", "task_1", NOW - 30 * 1000)
    sessions = [
        closed("a", "task_1", ms(2026, 6, 10, 8, 0), 600),
        closed("y", "task_1", ms(2026, 6, 9, 8, 0), 600),
        active,
    ]
    assert tracked_today("task_1", sessions, NOW) == 600
    assert today_context("task_1", active, sessions, NOW) == 630
    assert today_context("task_2", active, sessions, NOW) == 0


# ----- history -----
def test_history_groups_by_day_descending():
    sessions = [
        closed("a", "task_1", ms(2026, 6, 8, 10, 0), 100),
        closed("b", "task_1", ms(2026, 6, 10, 10, 0), 200),
        closed("c", "task_1", ms(2026, 6, 8, 22, 0), 50),
        running("d", "task_1", NOW - 10 * 1000),
    ]
    days = daily_history(sessions, NOW)
    assert [d.date for d in days] == [ms(2026, 6, 10), ms(2026, 6, 8)]
    assert [d.duration for d in days] == [210, 150]
    assert [d.is_today for d in days] == [True, False]


def test_history_task_filter():
    sessions = [
        closed("a", "task_1", ms(2026, 6, 10, 10, 0), 100),
        closed("b", "task_2", ms(2026, 6, 9, 10, 0), 200),
    ]
    days = daily_history(sessions, NOW, task_id="task_2")
    assert len(days) == 1
    assert days[0].duration == 200
    assert not days[0].is_today


# ----- chart -----
TASKS = [Task("task_1", "cat_1", "Study"), Task("task_2", "cat_2", "Productivity")]


@pytest.mark.parametrize("window", [7, 30])
def test_chart_has_one_bucket_per_day(window):
    buckets = chart_series([], TASKS, window, NOW)
    assert len(buckets) == window
    dates = [b.date for b in buckets]
    assert dates == sorted(dates)
    assert dates[-1] == ms(2026, 6, 10)
    for b in buckets:
        assert b.hours == {"task_1": 0.0, "task_2": 0.0}


def test_chart_first_bucket_of_week():
    buckets = chart_series([], TASKS, 7, NOW)
    assert buckets[0].date == ms(2026, 6, 4)


def test_chart_rejects_other_windows():
    with pytest.raises(ValueError):
        chart_series([], TASKS, 14, NOW)


def test_chart_adds_fractional_hours_to_start_day():
    sessions = [
        closed("a", "task_1", ms(2026, 6, 9, 10, 0), 5400),
        closed("b", "task_1", ms(2026, 6, 9, 20, 0), 1800),
        closed("c", "task_2", ms(2026, 6, 10, 8, 0), 900),
    ]
    buckets = chart_series(sessions, TASKS, 7, NOW)
    by_day = {b.date: b.hours for b in buckets}
    assert by_day[ms(2026, 6, 9)]["task_1"] == pytest.approx(2.0)
    assert by_day[ms(2026, 6, 10)]["task_2"] == pytest.approx(0.25)
    assert by_day[ms(2026, 6, 10)]["task_1"] == 0.0


def test_chart_counts_running_session():
    sessions = [running("r", "task_1", NOW - 1800 * 1000)]
    buckets = chart_series(sessions, TASKS, 7, NOW)
    assert buckets[-1].hours["task_1"] == pytest.approx(0.5)


def test_chart_keeps_time_of_deleted_tasks():
    sessions = [closed("a", "gone", ms(2026, 6, 10, 8, 0), 3600)]
    buckets = chart_series(sessions, TASKS, 7, NOW)
    assert buckets[-1].hours["gone"] == pytest.approx(1.0)
    assert "gone" not in buckets[0].hours


def test_chart_ignores_sessions_outside_window():
    sessions = [closed("a", "task_1", ms(2026, 5, 1, 8, 0), 3600)]
    buckets = chart_series(sessions, TASKS, 7, NOW)
    assert all(v == 0.0 for b in buckets for v in b.hours.values())


def test_chart_task_filter():
    sessions = [
        closed("a", "task_1", ms(2026, 6, 10, 8, 0), 3600),
        closed("b", "task_2", ms(2026, 6, 10, 9, 0), 3600),
    ]
    buckets = chart_series(sessions, TASKS, 7, NOW, task_id="task_2")
    assert buckets[-1].hours["task_1"] == 0.0
    assert buckets[-1].hours["task_2"] == pytest.approx(1.0)


def test_chart_labels():
    week = chart_series([], TASKS, 7, NOW)
    month = chart_series([], TASKS, 30, NOW)
    assert week[-1].label == "Wed 6/10"
    assert month[-1].label == "6/10"


def test_chart_does_not_mutate_inputs():
    sessions = (closed("a", "task_1", ms(2026, 6, 10, 8, 0), 3600),)
    tasks = tuple(TASKS)
    chart_series(sessions, tasks, 7, NOW)
    assert sessions[0].duration_seconds == 3600
    assert tasks == tuple(TASKS)


# ----- breakdown -----
def test_empty_breakdown():
    assert breakdown([], window_start(7, NOW), NOW) == []
    assert breakdown_shares([]) == []


def test_breakdown_sorted_descending():
    since = window_start(7, NOW)
    sessions = [
        closed("a", "task_1", ms(2026, 6, 9, 8, 0), 100),
        closed("b", "task_2", ms(2026, 6, 9, 9, 0), 500),
        closed("c", "task_1", ms(2026, 6, 10, 8, 0), 100),
        closed("old", "task_1", ms(2026, 5, 1, 8, 0), 9999),
    ]
    items = breakdown(sessions, since, NOW)
    assert items == [BreakdownItem("task_2", 500), BreakdownItem("task_1", 200)]


def test_breakdown_ties_keep_encounter_order():
    since = window_start(7, NOW)
    sessions = [
        closed("a", "task_b", ms(2026, 6, 9, 8, 0), 300),
        closed("b", "task_a", ms(2026, 6, 9, 9, 0), 300),
        closed("c", "task_c", ms(2026, 6, 9, 10, 0), 300),
    ]
    items = breakdown(sessions, since, NOW)
    assert [it.task_id for it in items] == ["task_b", "task_a", "task_c"]


def test_breakdown_filter_and_live_session():
    since = window_start(30, NOW)
    sessions = [
        closed("a", "task_1", ms(2026, 6, 1, 8, 0), 100),
        running("r", "task_1", NOW - 20 * 1000),
        closed("b", "task_2", ms(2026, 6, 2, 8, 0), 1000),
    ]
    items = breakdown(sessions, since, NOW, task_id="task_1")
    assert items == [BreakdownItem("task_1", 120)]


def test_window_start():
    assert window_start(7, NOW) == ms(2026, 6, 3)
    assert window_start(30, NOW) == ms(2026, 5, 11)


def test_breakdown_shares_relative_to_top():
    items = [BreakdownItem("a", 400), BreakdownItem("b", 100), BreakdownItem("c", 0)]
    assert breakdown_shares(items) == [100.0, 25.0, 0.0]


# ----- lookups -----
def test_task_color_falls_back_for_missing_refs(seed):
    assert task_color(seed, "task_1") == "#3b82f6"
    assert task_color(seed, "missing") == UNKNOWN_COLOR
    orphan = seed.__class__(
        categories=seed.categories,
        tasks=seed.tasks + (Task("task_9", "cat_gone", "Orphan"),),
        sessions=(),
    )
    assert task_color(orphan, "task_9") == UNKNOWN_COLOR
