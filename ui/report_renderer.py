# ui/report_renderer.py
# -*- coding: utf-8 -*-

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from markdown import markdown

from core.aggregation import (
    BreakdownItem,
    ChartBucket,
    HistoryDay,
    TaskStats,
    breakdown_shares,
    find_category,
    find_task,
    task_color,
)
from core.formatting import format_duration, format_hours, history_label
from domain.models import AppData

BAR_WIDTH = 20


@dataclass(frozen=True)
class ReportTheme:
    text: str = "#111827"
    muted: str = "#6B7280"
    border: str = "#E5E7EB"
    panel: str = "#FFFFFF"
    soft: str = "#F9FAFB"


def _swatch(color: str) -> str:
    return f'<span style="color:{html.escape(color)}">&#9632;</span>'


def _cell(text: str) -> str:
    # keep user text from breaking the table or injecting HTML
    return html.escape(text).replace("|", "&#124;")


def _bar(percent: float) -> str:
    filled = int(round(percent / 100 * BAR_WIDTH))
    return "█" * filled + "░" * (BAR_WIDTH - filled)


class ReportRenderer:
    """
    Single responsibility:
    - Turn aggregation results into a markdown report
    - Convert MD -> HTML (+ CSS) for tkinterweb

    tkhtml only understands simple HTML, so the report sticks to headings,
    tables and inline spans; charts are drawn as hour tables and text bars.
    """

    def __init__(self, theme: Optional[ReportTheme] = None):
        self.theme = theme or ReportTheme()

    # ---------- markdown sections ----------
    def tasks_section(self, data: AppData, stats: Dict[str, TaskStats]) -> str:
        lines = ["## Tasks", "", "| | Task | Category | Today | Total |", "|---|---|---|---|---|"]
        for t in data.tasks:
            st = stats.get(t.id, TaskStats(0, 0))
            cat = find_category(data, t.category_id)
            lines.append(
                f"| {_swatch(task_color(data, t.id))} | {_cell(t.name)} | "
                f"{_cell(cat.name) if cat else '-'} | "
                f"{format_duration(st.today_seconds)} | {format_duration(st.total_seconds)} |"
            )
        return "\n".join(lines)

    def chart_section(
        self, data: AppData, buckets: Sequence[ChartBucket], task_id: Optional[str] = None
    ) -> str:
        if task_id is not None:
            t = find_task(data, task_id)
            columns = [t] if t else []
        else:
            columns = list(data.tasks)

        head = "| Day | " + " | ".join(_cell(t.name) for t in columns) + " |"
        sep = "|---|" + "---|" * len(columns)
        lines = ["## Trend (hours)", "", head, sep]
        for b in buckets:
            cells = [format_hours(b.hours.get(t.id, 0.0)) for t in columns]
            lines.append(f"| {b.label} | " + " | ".join(cells) + " |")
        return "\n".join(lines)

    def breakdown_section(
        self, data: AppData, items: Sequence[BreakdownItem], view_mode: str
    ) -> str:
        title = f"## Task Breakdown ({view_mode.capitalize()})"
        if not items:
            return f"{title}\n\n_No sessions recorded in this period._"

        lines = [title, "", "| | Task | Time | |", "|---|---|---|---|"]
        for it, pct in zip(items, breakdown_shares(items)):
            t = find_task(data, it.task_id)
            name = _cell(t.name) if t else "(deleted task)"
            lines.append(
                f"| {_swatch(task_color(data, it.task_id))} | {name} | "
                f"{format_duration(it.total_seconds)} | `{_bar(pct)}` |"
            )
        return "\n".join(lines)

    def history_section(self, days: Sequence[HistoryDay]) -> str:
        if not days:
            return "## History\n\n_No sessions yet._"
        lines = ["## History", "", "| Day | Time |", "|---|---|"]
        for d in days:
            lines.append(
                f"| {history_label(d.date, d.is_today)} | "
                f"{format_duration(d.duration, always_hours=True)} |"
            )
        return "\n".join(lines)

    def overview(
        self,
        data: AppData,
        stats: Dict[str, TaskStats],
        buckets: Sequence[ChartBucket],
        items: Sequence[BreakdownItem],
        view_mode: str,
    ) -> str:
        return "\n\n".join(
            [
                "# Overall Performance",
                self.tasks_section(data, stats),
                self.chart_section(data, buckets),
                self.breakdown_section(data, items, view_mode),
            ]
        )

    def task_detail(
        self,
        data: AppData,
        task_id: str,
        stats: TaskStats,
        buckets: Sequence[ChartBucket],
        days: Sequence[HistoryDay],
    ) -> str:
        t = find_task(data, task_id)
        cat = find_category(data, t.category_id) if t else None
        title = _cell(t.name) if t else "(deleted task)"
        sub = f"{_swatch(cat.color)} {_cell(cat.name)}" if cat else ""
        return "\n\n".join(
            [
                f"# {title}",
                sub,
                f"**Total Time:** {format_duration(stats.total_seconds, always_hours=True)}",
                "# Task Trends",
                self.chart_section(data, buckets, task_id=task_id),
                self.history_section(days),
            ]
        )

    # ---------- extensions ----------
    def extensions(self) -> Tuple[List[str], Dict]:
        return ["extra", "tables", "sane_lists"], {}

    # ---------- CSS ----------
    def css(self) -> str:
        t = self.theme
        return f"""
        body {{
          font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif;
          margin: 14px;
          color: {t.text};
          background: {t.panel};
          font-size: 14px;
          line-height: 1.5;
        }}

        h1 {{ font-size: 1.30em; margin: 0.8em 0 0.4em; }}
        h2 {{ font-size: 1.10em; margin: 1.0em 0 0.4em; }}

        em {{ color: {t.muted}; }}

        table {{
          border-collapse: collapse;
          width: 100%;
          margin: 0.6em 0;
          font-size: 0.95em;
        }}
        th, td {{
          border: 1px solid {t.border};
          padding: 6px 8px;
        }}
        th {{
          background: {t.soft};
          font-weight: 700;
        }}

        code {{
          font-family: ui-monospace, Menlo, Consolas, "Liberation Mono", monospace;
          color: {t.muted};
        }}
        """

    # ---------- render ----------
    def to_html(self, md_text: str) -> str:
        exts, cfg = self.extensions()
        body = markdown(
            md_text or "",
            extensions=exts,
            extension_configs=cfg,
            output_format="html5",
        )
        return f"""
        <html>
          <head>
            <meta charset="utf-8"/>
            <style>{self.css()}</style>
          </head>
          <body>{body}</body>
        </html>
        """
