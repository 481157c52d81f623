# -*- coding: utf-8 -*-

import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional

from core.formatting import format_clock, format_duration
from core.ticker import Ticker
from core.timer_engine import EngineSnapshot
from services.task_service import TaskService
from services.timer_service import TimerService


class TimerWidget(ttk.Frame):
    def __init__(
        self,
        master,
        timer_service: TimerService,
        task_service: TaskService,
        get_selected_task_id: Callable[[], Optional[str]],
        on_request_refresh: Callable[[], None],
        tick_ms: int = 1000,
        on_live_tick: Optional[Callable[[EngineSnapshot], None]] = None,
    ):
        super().__init__(master)

        self.timer_service = timer_service
        self.task_service = task_service
        self.get_selected_task_id = get_selected_task_id
        self.on_request_refresh = on_request_refresh
        self.on_live_tick = on_live_tick

        self.ticker = Ticker(
            schedule=self.after,
            cancel=self.after_cancel,
            callback=self.timer_service.tick,
            interval_ms=tick_ms,
        )

        self._build_ui()

        # wire callbacks from service -> widget UI
        self.timer_service.set_on_tick(self._on_tick)
        self.timer_service.set_on_state_change(self._on_state_change)

        # view teardown cancels the tick; stored data is untouched
        self.bind("<Destroy>", lambda e: self.ticker.stop() if e.widget is self else None)

        # a session may still be running from the last launch
        self._on_state_change(self.timer_service.get_snapshot())

    def _build_ui(self):
        self.columnconfigure(0, weight=1)

        self.task_var = tk.StringVar(value="No active session")
        self.time_var = tk.StringVar(value="00:00")
        self.info_var = tk.StringVar(value="Select a task to start")

        title = ttk.Label(self, text="Focus Session", font=("Sans", 12, "bold"))
        title.grid(row=0, column=0, sticky="w", pady=(0, 6))

        self.task_label = ttk.Label(self, textvariable=self.task_var)
        self.task_label.grid(row=1, column=0, sticky="w")

        self.time_label = ttk.Label(
            self, textvariable=self.time_var, font=("Sans", 32, "bold")
        )
        self.time_label.grid(row=2, column=0, sticky="w", pady=(8, 4))

        self.info_label = ttk.Label(self, textvariable=self.info_var)
        self.info_label.grid(row=3, column=0, sticky="w", pady=(0, 10))

        btns = ttk.Frame(self)
        btns.grid(row=4, column=0, sticky="w")

        self.start_btn = ttk.Button(btns, text="Start", command=self._start)
        self.stop_btn = ttk.Button(btns, text="Stop", command=self._stop)

        self.start_btn.grid(row=0, column=0, padx=(0, 6))
        self.stop_btn.grid(row=0, column=1)

    def update_buttons(self):
        snap = self.timer_service.get_snapshot()
        selected = self.get_selected_task_id()

        # Start is enabled for a selected task that is not already running
        if not selected or (snap.is_running and snap.task_id == selected):
            self.start_btn.state(["disabled"])
        else:
            self.start_btn.state(["!disabled"])

        if snap.is_running:
            self.stop_btn.state(["!disabled"])
        else:
            self.stop_btn.state(["disabled"])

    def _start(self):
        task_id = self.get_selected_task_id()
        if not task_id:
            self.info_var.set("Pick a task first.")
            self.update_buttons()
            return

        try:
            self.timer_service.start_session(task_id)
        except ValueError as e:
            self.info_var.set(str(e))
            return
        self.on_request_refresh()

    def _stop(self):
        self.timer_service.stop_session()
        self.on_request_refresh()

    # ---- Service callbacks ----
    def _on_tick(self, snap: EngineSnapshot):
        self._render(snap)
        if self.on_live_tick:
            self.on_live_tick(snap)

    def _on_state_change(self, snap: EngineSnapshot):
        if snap.is_running:
            self.ticker.start()
        else:
            self.ticker.stop()
        self._render(snap)
        self.update_buttons()

    def _render(self, snap: EngineSnapshot):
        if not snap.is_running:
            self.task_var.set("No active session")
            self.time_var.set(format_clock(0))
            if self.get_selected_task_id():
                self.info_var.set("Ready")
            else:
                self.info_var.set("Select a task to start")
            return

        self.task_var.set(self.task_service.task_name(snap.task_id))
        self.time_var.set(format_clock(snap.elapsed_sec))
        self.info_var.set(f"Today: {format_duration(snap.today_sec)}")
