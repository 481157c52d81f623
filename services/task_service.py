# services/task_service.py
#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Callable, List, Optional

from core import aggregation
from core.session_engine import now_ms
from domain.models import AppData, Category, Task
from services.state_store import StateStore

log = logging.getLogger(__name__)


class TaskService:
    def __init__(self, store: StateStore, clock: Callable[[], int] = now_ms):
        self.store = store
        self.clock = clock

    @property
    def data(self) -> AppData:
        return self.store.get_snapshot()

    # ---- tasks ----
    def list_tasks(self) -> List[Task]:
        return list(self.data.tasks)

    def get_task(self, task_id: str) -> Optional[Task]:
        return aggregation.find_task(self.data, task_id)

    def add_task(self, name: str, category_id: str) -> Task:
        name = (name or "").strip()
        if not name:
            raise ValueError("Task name cannot be empty.")
        if not self.get_category(category_id):
            raise ValueError("Category not found.")

        task = Task(
            id=f"task_{self.clock()}_{uuid.uuid4().hex[:6]}",
            category_id=category_id,
            name=name,
        )
        self.store.mutate(lambda d: replace(d, tasks=d.tasks + (task,)))
        log.info("Added task %s (%s)", task.id, name)
        return task

    def rename_task(self, task_id: str, new_name: str) -> Task:
        new_name = (new_name or "").strip()
        if not new_name:
            raise ValueError("Name cannot be empty.")
        if not self.get_task(task_id):
            raise ValueError("Task not found.")

        def _rename(d: AppData) -> AppData:
            tasks = tuple(
                replace(t, name=new_name) if t.id == task_id else t for t in d.tasks
            )
            return replace(d, tasks=tasks)

        self.store.mutate(_rename)
        log.info("Renamed task %s to %s", task_id, new_name)
        return self.get_task(task_id)

    # ---- categories ----
    def list_categories(self) -> List[Category]:
        return list(self.data.categories)

    def get_category(self, category_id: str) -> Optional[Category]:
        return aggregation.find_category(self.data, category_id)

    def task_color(self, task_id: str) -> str:
        return aggregation.task_color(self.data, task_id)

    def task_name(self, task_id: str) -> str:
        # sessions may outlive their task
        t = self.get_task(task_id)
        return t.name if t else "(unknown)"
