# -*- coding: utf-8 -*-

import datetime as dt
import logging
import time
import uuid
from dataclasses import replace
from typing import List, Optional, Sequence

from domain.models import Session

log = logging.getLogger(__name__)

# sessions whose clock skew was already reported at warning level
_skew_reported = set()


def now_ms() -> int:
    return int(time.time() * 1000)


def start_of_day(ts_ms: int) -> int:
    """Local midnight of ts_ms, in epoch ms."""
    d = dt.datetime.fromtimestamp(ts_ms / 1000).date()
    return day_to_ms(d)


def day_to_ms(d: dt.date) -> int:
    midnight = dt.datetime(d.year, d.month, d.day)
    return int(midnight.timestamp() * 1000)


def ms_to_day(ts_ms: int) -> dt.date:
    return dt.datetime.fromtimestamp(ts_ms / 1000).date()


def _elapsed_sec(start_ms: int, end_ms: int, session_id: str) -> int:
    sec = (end_ms - start_ms) // 1000
    if sec < 0:
        # clock went backwards
        level = logging.DEBUG if session_id in _skew_reported else logging.WARNING
        _skew_reported.add(session_id)
        log.log(
            level,
            "Session %s: end %d is before start %d, clamping duration to 0",
            session_id,
            end_ms,
            start_ms,
        )
        return 0
    return sec


def start_session(task_id: str, category_id: str, now: int) -> Session:
    """
    Pure constructor for a running session.
    The caller stops any other active session before inserting this one.
    """
    return Session(
        id=f"sess_{now}_{uuid.uuid4().hex[:9]}",
        task_id=task_id,
        category_id=category_id,
        start_time=now,
        end_time=None,
        duration_seconds=0,
        date=start_of_day(now),
    )


def stop_session(session: Session, now: int) -> Session:
    if not session.is_active:
        # closed sessions are immutable
        return session
    return replace(
        session,
        end_time=now,
        duration_seconds=_elapsed_sec(session.start_time, now, session.id),
    )


def effective_duration(session: Session, now: int) -> int:
    if session.is_active:
        return _elapsed_sec(session.start_time, now, session.id)
    return session.duration_seconds


def get_active_session(sessions: Sequence[Session]) -> Optional[Session]:
    active = [s for s in sessions if s.is_active]
    if len(active) > 1:
        log.warning(
            "Found %d active sessions (%s), using the first one",
            len(active),
            ", ".join(s.id for s in active),
        )
    return active[0] if active else None


def close_active(sessions: Sequence[Session], now: int) -> List[Session]:
    """
    Stop protocol: replace the active entry with its stopped copy.
    Extra active entries left by a corrupt store are closed as well.
    """
    if get_active_session(sessions) is None:
        return list(sessions)
    return [stop_session(s, now) for s in sessions]


def switch_sessions(
    sessions: Sequence[Session], task_id: str, category_id: str, now: int
) -> List[Session]:
    """
    Switch protocol: stop the current active session (if any), replace it in
    place and append a new active session for task_id.
    """
    out = close_active(sessions, now)
    out.append(start_session(task_id, category_id, now))
    return out
