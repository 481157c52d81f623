# -*- coding: utf-8 -*-

import logging
from typing import Any, Callable, Optional

log = logging.getLogger(__name__)


class Ticker:
    """
    Cancellable periodic callback on top of an event-loop scheduler.

    schedule(delay_ms, fn) -> handle and cancel(handle) match tkinter's
    widget.after / widget.after_cancel. The callback only re-reads state;
    stopping the ticker never touches stored data.
    """

    def __init__(
        self,
        schedule: Callable[[int, Callable[[], None]], Any],
        cancel: Callable[[Any], None],
        callback: Callable[[], None],
        interval_ms: int = 1000,
    ):
        if interval_ms <= 0:
            raise ValueError("Tick interval must be positive.")
        self._schedule = schedule
        self._cancel = cancel
        self._callback = callback
        self.interval_ms = int(interval_ms)
        self._job: Optional[Any] = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._job = self._schedule(self.interval_ms, self._fire)

    def stop(self) -> None:
        self._running = False
        if self._job is not None:
            try:
                self._cancel(self._job)
            except Exception:
                # scheduler already torn down (window destroyed)
                log.debug("Tick job cancel failed", exc_info=True)
            self._job = None

    def _fire(self) -> None:
        self._job = None
        if not self._running:
            return
        try:
            self._callback()
        finally:
            # callback may have stopped us
            if self._running:
                self._job = self._schedule(self.interval_ms, self._fire)
