import datetime as dt

from core.session_engine import start_of_day
from domain.models import Session


def ms(year, month, day, hour=0, minute=0, second=0):
    """Local wall-clock time as epoch ms."""
    return int(dt.datetime(year, month, day, hour, minute, second).timestamp() * 1000)


def closed(sid, task_id, start, seconds, category_id="cat_1"):
    return Session(
        id=sid,
        task_id=task_id,
        category_id=category_id,
        start_time=start,
        end_time=start + seconds * 1000,
        duration_seconds=seconds,
        date=start_of_day(start),
    )


def running(sid, task_id, start, category_id="cat_1"):
    return Session(
        id=sid,
        task_id=task_id,
        category_id=category_id,
        start_time=start,
        end_time=None,
        duration_seconds=0,
        date=start_of_day(start),
    )


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds * 1000


class FakeScheduler:
    """Stands in for widget.after / widget.after_cancel."""

    def __init__(self):
        self.jobs = {}
        self._next = 0

    def after(self, delay_ms, fn):
        self._next += 1
        job = f"after#{self._next}"
        self.jobs[job] = (delay_ms, fn)
        return job

    def after_cancel(self, job):
        self.jobs.pop(job, None)

    def run_pending(self):
        pending = list(self.jobs.items())
        self.jobs.clear()
        for _, (_, fn) in pending:
            fn()
