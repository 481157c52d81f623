# -*- coding: utf-8 -*-

import logging
from dataclasses import replace
from typing import Callable, Optional

from core import aggregation
from core.session_engine import (
    close_active,
    get_active_session,
    now_ms,
    switch_sessions,
)
from core.timer_engine import EngineSnapshot, TimerEngine
from domain.models import AppData, Session
from services.state_store import StateStore

log = logging.getLogger(__name__)


class TimerService:
    """
    Orchestrates:
    - start / stop / switch of the single active session
    - TimerEngine state for the live display
    - Callbacks for UI
    """

    def __init__(self, store: StateStore, clock: Callable[[], int] = now_ms):
        self.store = store
        self.clock = clock
        self.engine = TimerEngine()

        self._on_tick: Optional[Callable[[EngineSnapshot], None]] = None
        self._on_state_change: Optional[Callable[[EngineSnapshot], None]] = None

        self._sync_engine(self.store.get_snapshot())
        self.store.subscribe(self._sync_engine)

    # ----- Callbacks -----
    def set_on_tick(self, fn: Callable[[EngineSnapshot], None]) -> None:
        self._on_tick = fn

    def set_on_state_change(self, fn: Callable[[EngineSnapshot], None]) -> None:
        self._on_state_change = fn

    def _emit_tick(self) -> None:
        if self._on_tick:
            self._on_tick(self.get_snapshot())

    def _emit_state_change(self) -> None:
        if self._on_state_change:
            self._on_state_change(self.get_snapshot())

    # ----- Public API -----
    def get_snapshot(self) -> EngineSnapshot:
        return self.engine.snapshot(self.clock(), self.store.get_snapshot().sessions)

    def get_active_session(self) -> Optional[Session]:
        return get_active_session(self.store.get_snapshot().sessions)

    def start_session(self, task_id: str) -> Session:
        """Start tracking task_id, stopping whatever was running first."""
        data = self.store.get_snapshot()
        task = aggregation.find_task(data, task_id)
        if task is None:
            raise ValueError("Selected task not found.")

        active = get_active_session(data.sessions)
        if active is not None and active.task_id == task_id:
            return active

        now = self.clock()

        def _switch(d: AppData) -> AppData:
            sessions = switch_sessions(d.sessions, task.id, task.category_id, now)
            return replace(d, sessions=tuple(sessions))

        new_data = self.store.mutate(_switch)
        started = get_active_session(new_data.sessions)
        if active is not None:
            log.info("Switched from session %s to %s", active.id, started.id)
        else:
            log.info("Started session %s for task %s", started.id, task_id)

        self._emit_state_change()
        self._emit_tick()
        return started

    def stop_session(self) -> Optional[Session]:
        data = self.store.get_snapshot()
        active = get_active_session(data.sessions)
        if active is None:
            return None

        now = self.clock()
        new_data = self.store.mutate(
            lambda d: replace(d, sessions=tuple(close_active(d.sessions, now)))
        )
        stopped = next(s for s in new_data.sessions if s.id == active.id)
        log.info(
            "Stopped session %s after %d sec", stopped.id, stopped.duration_seconds
        )

        self._emit_state_change()
        self._emit_tick()
        return stopped

    def tick(self) -> None:
        """
        Called about once per second by the UI loop.
        Only re-evaluates elapsed time; nothing is stored.
        """
        if not self.engine.is_running:
            return
        self._emit_tick()

    # ----- Engine sync -----
    def _sync_engine(self, data: AppData) -> None:
        self.engine.attach(get_active_session(data.sessions))
