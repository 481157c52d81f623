# -*- coding: utf-8 -*-

from dataclasses import dataclass
from typing import Optional, Sequence

from core.aggregation import today_context
from core.session_engine import effective_duration
from domain.models import Session


@dataclass
class EngineSnapshot:
    session_id: Optional[str]
    task_id: Optional[str]
    elapsed_sec: int
    today_sec: int
    is_running: bool

    def is_tracking(self, task_id: Optional[str]) -> bool:
        return self.is_running and task_id is not None and self.task_id == task_id


class TimerEngine:
    """
    Live elapsed-time engine (no Tkinter).
    Holds no counters: every snapshot is recomputed from the session list and
    the evaluation time, so missed ticks and midnight never drift.
    """

    def __init__(self):
        self.session: Optional[Session] = None

    def attach(self, session: Optional[Session]) -> None:
        if session is None or not session.is_active:
            self.detach()
            return
        self.session = session

    def detach(self) -> None:
        self.session = None

    @property
    def is_running(self) -> bool:
        return self.session is not None

    def snapshot(self, now: int, sessions: Sequence[Session] = ()) -> EngineSnapshot:
        if self.session is None:
            return EngineSnapshot(
                session_id=None,
                task_id=None,
                elapsed_sec=0,
                today_sec=0,
                is_running=False,
            )

        s = self.session
        return EngineSnapshot(
            session_id=s.id,
            task_id=s.task_id,
            elapsed_sec=effective_duration(s, now),
            today_sec=today_context(s.task_id, s, sessions, now),
            is_running=True,
        )
