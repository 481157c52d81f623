from dataclasses import replace

from core.aggregation import (
    BreakdownItem,
    HistoryDay,
    TaskStats,
    chart_series,
)
from domain.models import Task
from ui.report_renderer import ReportRenderer

from helpers import closed, ms

NOW = ms(2026, 6, 10, 15, 0)


def test_overview_markdown_lists_tasks_and_breakdown(seed):
    r = ReportRenderer()
    stats = {"task_1": TaskStats(total_seconds=5400, today_seconds=600)}
    items = [BreakdownItem("task_1", 5400), BreakdownItem("task_2", 1800)]
    md = r.overview(seed, stats, chart_series([], seed.tasks, 7, NOW), items, "weekly")

    assert "# Overall Performance" in md
    assert "| Study | General | 10m | 1h 30m |" in md
    assert "## Task Breakdown (Weekly)" in md
    assert "Productivity" in md
    assert "Wed 6/10" in md


def test_breakdown_tolerates_deleted_task(seed):
    md = ReportRenderer().breakdown_section(seed, [BreakdownItem("gone", 60)], "monthly")
    assert "(deleted task)" in md
    assert "#cccccc" in md


def test_empty_breakdown_and_history(seed):
    r = ReportRenderer()
    assert "No sessions recorded" in r.breakdown_section(seed, [], "weekly")
    assert "No sessions yet" in r.history_section([])


def test_history_section_labels_today():
    days = [
        HistoryDay(date=ms(2026, 6, 10), duration=3660, is_today=True),
        HistoryDay(date=ms(2026, 6, 8), duration=60, is_today=False),
    ]
    md = ReportRenderer().history_section(days)
    assert "| Today | 1h 1m |" in md
    assert "| Mon, Jun 8 | 0h 1m |" in md


def test_task_detail_only_charts_that_task(seed):
    sessions = [closed("a", "task_2", ms(2026, 6, 10, 8, 0), 5400, "cat_2")]
    buckets = chart_series(sessions, seed.tasks, 7, NOW, task_id="task_2")
    md = ReportRenderer().task_detail(
        seed, "task_2", TaskStats(5400, 5400), buckets, []
    )
    assert "# Productivity" in md
    assert "| Day | Productivity |" in md
    assert "| Wed 6/10 | 1.5h |" in md
    assert "Study" not in md


def test_user_text_is_escaped(seed):
    evil = replace(seed, tasks=(Task("task_1", "cat_1", "<b>a|b</b>"),))
    md = ReportRenderer().tasks_section(evil, {})
    assert "<b>" not in md
    assert "&lt;b&gt;a&#124;b&lt;/b&gt;" in md


def test_to_html_renders_tables(seed):
    r = ReportRenderer()
    html = r.to_html(r.history_section([HistoryDay(ms(2026, 6, 10), 60, True)]))
    assert "<table>" in html
    assert "<td>Today</td>" in html
    assert "<style>" in html
