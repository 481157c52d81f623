# -*- coding: utf-8 -*-

import tkinter as tk
from tkinter import ttk
from typing import Dict, Optional

from tkinterweb import HtmlFrame

from core.timer_engine import EngineSnapshot
from services.stats_service import StatsService
from services.task_service import TaskService
from services.timer_service import TimerService
from ui.report_renderer import ReportRenderer
from ui.timer_widget import TimerWidget


class MainWindow:
    def __init__(
        self,
        task_service: TaskService,
        timer_service: TimerService,
        stats_service: StatsService,
        default_view: str = "weekly",
        tick_ms: int = 1000,
    ):
        self.task_service = task_service
        self.timer_service = timer_service
        self.stats_service = stats_service
        self.renderer = ReportRenderer()

        self.root = tk.Tk()
        self.root.title("StudyFlow")
        self.root.geometry("1100x640")

        self.selected_task_id: Optional[str] = None
        self._list_index_to_task_id: Dict[int, str] = {}
        self._category_ids: Dict[str, str] = {}

        self.view_var = tk.StringVar(value=default_view)

        self._build_ui(tick_ms)
        self._refresh_all()

        # every persisted change re-renders lists and report
        self._unsubscribe = self.task_service.store.subscribe(
            lambda data: self._refresh_all()
        )
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

    def _build_ui(self, tick_ms: int):
        root = self.root

        outer = ttk.Frame(root, padding=10)
        outer.pack(fill="both", expand=True)

        outer.columnconfigure(0, weight=1)
        outer.columnconfigure(1, weight=2)
        outer.rowconfigure(0, weight=1)

        # LEFT: Tasks panel
        left = ttk.Labelframe(outer, text="Tasks", padding=10)
        left.grid(row=0, column=0, sticky="nsew", padx=(0, 10))
        left.columnconfigure(0, weight=1)
        left.rowconfigure(2, weight=1)

        # add task row
        add_row = ttk.Frame(left)
        add_row.grid(row=0, column=0, sticky="ew")
        add_row.columnconfigure(0, weight=1)

        self.new_task_var = tk.StringVar()
        self.new_task_entry = ttk.Entry(add_row, textvariable=self.new_task_var)
        self.new_task_entry.grid(row=0, column=0, sticky="ew")

        self.category_var = tk.StringVar()
        self.category_box = ttk.Combobox(
            add_row, textvariable=self.category_var, state="readonly", width=12
        )
        self.category_box.grid(row=0, column=1, padx=(6, 0))
        ttk.Button(add_row, text="Add", command=self._add_task).grid(
            row=0, column=2, padx=(6, 0)
        )

        self.err_var = tk.StringVar(value="")
        ttk.Label(left, textvariable=self.err_var, foreground="red").grid(
            row=1, column=0, sticky="w", pady=(6, 6)
        )

        # listbox
        self.task_list = tk.Listbox(left, height=12, exportselection=False)
        self.task_list.grid(row=2, column=0, sticky="nsew")
        self.task_list.bind("<<ListboxSelect>>", self._on_select_task)

        # rename row
        rename_row = ttk.Frame(left)
        rename_row.grid(row=3, column=0, sticky="ew", pady=(8, 0))
        rename_row.columnconfigure(0, weight=1)

        self.rename_var = tk.StringVar()
        ttk.Entry(rename_row, textvariable=self.rename_var).grid(
            row=0, column=0, sticky="ew"
        )
        ttk.Button(rename_row, text="Rename", command=self._rename_task).grid(
            row=0, column=1, padx=(6, 0)
        )
        ttk.Button(rename_row, text="Overview", command=self._clear_selection).grid(
            row=0, column=2, padx=(6, 0)
        )

        # RIGHT: timer + report
        right = ttk.Frame(outer)
        right.grid(row=0, column=1, sticky="nsew")
        right.columnconfigure(0, weight=1)
        right.rowconfigure(2, weight=1)

        self.timer = TimerWidget(
            right,
            timer_service=self.timer_service,
            task_service=self.task_service,
            get_selected_task_id=self.get_selected_task_id,
            on_request_refresh=self._refresh_report,
            tick_ms=tick_ms,
            on_live_tick=self._on_live_tick,
        )
        self.timer.grid(row=0, column=0, sticky="ew")

        toggle = ttk.Frame(right)
        toggle.grid(row=1, column=0, sticky="w", pady=(10, 4))
        ttk.Radiobutton(
            toggle, text="Week", value="weekly", variable=self.view_var,
            command=self._refresh_report,
        ).pack(side="left")
        ttk.Radiobutton(
            toggle, text="Month", value="monthly", variable=self.view_var,
            command=self._refresh_report,
        ).pack(side="left", padx=(6, 0))

        self.report_view = HtmlFrame(right, horizontal_scrollbar="auto")
        self.report_view.grid(row=2, column=0, sticky="nsew")

    def run(self):
        self.root.mainloop()

    def _on_close(self):
        self.timer.ticker.stop()
        self._unsubscribe()
        self.root.destroy()

    # ----- Selection helpers -----
    def get_selected_task_id(self) -> Optional[str]:
        return self.selected_task_id

    def _on_select_task(self, event=None):
        sel = self.task_list.curselection()
        if sel:
            self.selected_task_id = self._list_index_to_task_id.get(int(sel[0]))
            task = self.task_service.get_task(self.selected_task_id)
            self.rename_var.set(task.name if task else "")
        self.timer.update_buttons()
        self._refresh_report()

    def _on_live_tick(self, snap: EngineSnapshot):
        # detail view of the running task shows live totals
        if snap.is_tracking(self.selected_task_id):
            self._refresh_report()

    def _clear_selection(self):
        self.selected_task_id = None
        self.task_list.selection_clear(0, tk.END)
        self.rename_var.set("")
        self.timer.update_buttons()
        self._refresh_report()

    # ----- UI actions -----
    def _add_task(self):
        name = self.new_task_var.get()
        category_id = self._category_ids.get(self.category_var.get(), "")
        try:
            self.task_service.add_task(name, category_id)
        except ValueError as e:
            self.err_var.set(str(e))
            return
        self.new_task_var.set("")
        self.err_var.set("")

    def _rename_task(self):
        if not self.selected_task_id:
            self.err_var.set("Select a task to rename.")
            return
        try:
            self.task_service.rename_task(self.selected_task_id, self.rename_var.get())
        except ValueError as e:
            self.err_var.set(str(e))
            return
        self.err_var.set("")

    # ----- Refresh -----
    def _refresh_all(self):
        self._refresh_categories()
        self._refresh_tasks_only()
        self._refresh_report()

    def _refresh_categories(self):
        cats = self.task_service.list_categories()
        self._category_ids = {c.name: c.id for c in cats}
        self.category_box["values"] = [c.name for c in cats]
        if cats and self.category_var.get() not in self._category_ids:
            self.category_var.set(cats[0].name)

    def _refresh_tasks_only(self):
        tasks = self.task_service.list_tasks()
        stats = self.stats_service.all_task_stats()
        running = self.timer_service.get_snapshot().task_id

        self.task_list.delete(0, tk.END)
        self._list_index_to_task_id.clear()

        selected_index = None
        for i, t in enumerate(tasks):
            cat = self.task_service.get_category(t.category_id)
            marker = "▶ " if t.id == running else ""
            label = f"{marker}[{cat.name if cat else '?'}] {t.name}"
            st = stats.get(t.id)
            if st:
                label += f"  ({st.today_seconds // 60}m today)"
            self.task_list.insert(tk.END, label)
            self.task_list.itemconfig(i, foreground=self.task_service.task_color(t.id))
            self._list_index_to_task_id[i] = t.id
            if t.id == self.selected_task_id:
                selected_index = i

        if selected_index is not None:
            self.task_list.selection_set(selected_index)
            self.task_list.activate(selected_index)

        self.timer.update_buttons()

    def _refresh_report(self):
        view = self.view_var.get()
        data = self.task_service.data
        if self.selected_task_id:
            md = self.renderer.task_detail(
                data,
                self.selected_task_id,
                self.stats_service.task_stats(self.selected_task_id),
                self.stats_service.chart(view, task_id=self.selected_task_id),
                self.stats_service.history(task_id=self.selected_task_id),
            )
        else:
            md = self.renderer.overview(
                data,
                self.stats_service.all_task_stats(),
                self.stats_service.chart(view),
                self.stats_service.breakdown(view),
                view,
            )
        self.report_view.load_html(self.renderer.to_html(md))
