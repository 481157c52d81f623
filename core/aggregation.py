# -*- coding: utf-8 -*-

"""
Pure statistics over a session list.

Every function takes the evaluation time explicitly and uses the effective
duration of each session, so a running session is counted live.
Inputs are never mutated.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from core.formatting import chart_label
from core.session_engine import (
    day_to_ms,
    effective_duration,
    ms_to_day,
    start_of_day,
)
from domain.models import AppData, Category, Session, Task

WINDOW_DAYS = (7, 30)
UNKNOWN_COLOR = "#cccccc"


@dataclass(frozen=True)
class TaskStats:
    total_seconds: int
    today_seconds: int


@dataclass(frozen=True)
class HistoryDay:
    date: int
    duration: int
    is_today: bool


@dataclass(frozen=True)
class ChartBucket:
    date: int
    label: str
    hours: Dict[str, float]


@dataclass(frozen=True)
class BreakdownItem:
    task_id: str
    total_seconds: int


def _matching(sessions: Iterable[Session], task_id: Optional[str]) -> List[Session]:
    if task_id is None:
        return list(sessions)
    return [s for s in sessions if s.task_id == task_id]


def _shift_days(day_ms: int, days: int) -> int:
    # calendar arithmetic, so DST days still land on local midnight
    return day_to_ms(ms_to_day(day_ms) + dt.timedelta(days=days))


def window_start(window_days: int, now: int) -> int:
    return _shift_days(start_of_day(now), -window_days)


# ----- per task -----
def task_stats(task_id: str, sessions: Sequence[Session], now: int) -> TaskStats:
    today = start_of_day(now)
    total = 0
    today_sec = 0
    for s in _matching(sessions, task_id):
        dur = effective_duration(s, now)
        total += dur
        if s.start_time >= today:
            today_sec += dur
    return TaskStats(total_seconds=total, today_seconds=today_sec)


def tracked_today(task_id: str, sessions: Sequence[Session], now: int) -> int:
    """Closed time tracked today for task_id, running session excluded."""
    today = start_of_day(now)
    return sum(
        s.duration_seconds
        for s in sessions
        if s.task_id == task_id and not s.is_active and s.start_time >= today
    )


def today_context(
    task_id: str, active: Optional[Session], sessions: Sequence[Session], now: int
) -> int:
    """Closed time today plus the live elapsed time of the active session."""
    total = tracked_today(task_id, sessions, now)
    if active is not None and active.task_id == task_id:
        total += effective_duration(active, now)
    return total


# ----- history -----
def daily_history(
    sessions: Sequence[Session], now: int, task_id: Optional[str] = None
) -> List[HistoryDay]:
    today = start_of_day(now)
    totals: Dict[int, int] = {}
    for s in _matching(sessions, task_id):
        key = start_of_day(s.start_time)
        totals[key] = totals.get(key, 0) + effective_duration(s, now)

    days = [
        HistoryDay(date=k, duration=v, is_today=(k == today))
        for k, v in totals.items()
    ]
    days.sort(key=lambda d: d.date, reverse=True)
    return days


# ----- chart -----
def chart_series(
    sessions: Sequence[Session],
    tasks: Sequence[Task],
    window_days: int,
    now: int,
    task_id: Optional[str] = None,
) -> List[ChartBucket]:
    if window_days not in WINDOW_DAYS:
        raise ValueError(f"Unsupported window: {window_days} days.")

    today = start_of_day(now)
    buckets: Dict[int, Dict[str, float]] = {}
    for i in range(window_days - 1, -1, -1):
        day = _shift_days(today, -i)
        buckets[day] = {t.id: 0.0 for t in tasks}

    range_start = window_start(window_days, now)
    for s in _matching(sessions, task_id):
        if s.start_time < range_start:
            continue
        slot = buckets.get(start_of_day(s.start_time))
        if slot is None:
            continue
        # unknown task ids (deleted tasks) get a slot on demand
        slot[s.task_id] = slot.get(s.task_id, 0.0) + effective_duration(s, now) / 3600

    return [
        ChartBucket(date=day, label=chart_label(day, window_days), hours=hours)
        for day, hours in buckets.items()
    ]


# ----- breakdown -----
def breakdown(
    sessions: Sequence[Session],
    since: int,
    now: int,
    task_id: Optional[str] = None,
) -> List[BreakdownItem]:
    totals: Dict[str, int] = {}
    for s in _matching(sessions, task_id):
        if s.start_time < since:
            continue
        totals[s.task_id] = totals.get(s.task_id, 0) + effective_duration(s, now)

    items = [BreakdownItem(task_id=k, total_seconds=v) for k, v in totals.items()]
    # stable: equal totals keep first-encounter order
    items.sort(key=lambda it: it.total_seconds, reverse=True)
    return items


def breakdown_shares(items: Sequence[BreakdownItem]) -> List[float]:
    """Percent of each item relative to the largest total."""
    if not items:
        return []
    top = max(it.total_seconds for it in items)
    if top <= 0:
        return [0.0 for _ in items]
    return [it.total_seconds / top * 100 for it in items]


# ----- lookups (weak references) -----
def find_task(data: AppData, task_id: str) -> Optional[Task]:
    return next((t for t in data.tasks if t.id == task_id), None)


def find_category(data: AppData, category_id: str) -> Optional[Category]:
    return next((c for c in data.categories if c.id == category_id), None)


def task_color(data: AppData, task_id: str) -> str:
    task = find_task(data, task_id)
    if task is None:
        return UNKNOWN_COLOR
    cat = find_category(data, task.category_id)
    return cat.color if cat else UNKNOWN_COLOR
