# -*- coding: utf-8 -*-

from typing import Any, Callable, Dict, List, Optional

from core import aggregation
from core.aggregation import BreakdownItem, ChartBucket, HistoryDay, TaskStats
from core.session_engine import get_active_session, now_ms
from services.state_store import StateStore

VIEW_DAYS = {"weekly": 7, "monthly": 30}


def window_days(view_mode: str) -> int:
    try:
        return VIEW_DAYS[view_mode]
    except KeyError:
        raise ValueError("Invalid view. Use weekly/monthly.") from None


class StatsService:
    """Aggregations over the current snapshot, evaluated at clock()."""

    def __init__(self, store: StateStore, clock: Callable[[], int] = now_ms):
        self.store = store
        self.clock = clock

    def get_db_info(self) -> Dict[str, Any]:
        data = self.store.get_snapshot()
        active = get_active_session(data.sessions)
        return {
            "storage_key": self.store.repo.key,
            "categories_count": len(data.categories),
            "tasks_count": len(data.tasks),
            "sessions_count": len(data.sessions),
            "active_session_id": active.id if active else None,
            "now_ts": self.clock(),
        }

    def task_stats(self, task_id: str) -> TaskStats:
        data = self.store.get_snapshot()
        return aggregation.task_stats(task_id, data.sessions, self.clock())

    def all_task_stats(self) -> Dict[str, TaskStats]:
        data = self.store.get_snapshot()
        now = self.clock()
        return {t.id: aggregation.task_stats(t.id, data.sessions, now) for t in data.tasks}

    def today_context(self) -> int:
        """Today's total for the running task (0 when idle)."""
        data = self.store.get_snapshot()
        active = get_active_session(data.sessions)
        if active is None:
            return 0
        return aggregation.today_context(
            active.task_id, active, data.sessions, self.clock()
        )

    def history(self, task_id: Optional[str] = None) -> List[HistoryDay]:
        data = self.store.get_snapshot()
        return aggregation.daily_history(data.sessions, self.clock(), task_id=task_id)

    def chart(self, view_mode: str, task_id: Optional[str] = None) -> List[ChartBucket]:
        data = self.store.get_snapshot()
        return aggregation.chart_series(
            data.sessions,
            data.tasks,
            window_days(view_mode),
            self.clock(),
            task_id=task_id,
        )

    def breakdown(
        self, view_mode: str, task_id: Optional[str] = None
    ) -> List[BreakdownItem]:
        data = self.store.get_snapshot()
        now = self.clock()
        since = aggregation.window_start(window_days(view_mode), now)
        return aggregation.breakdown(data.sessions, since, now, task_id=task_id)
