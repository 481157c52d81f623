# -*- coding: utf-8 -*-

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Category":
        return cls(id=d["id"], name=d["name"], color=d["color"])


@dataclass(frozen=True)
class Task:
    id: str
    category_id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "categoryId": self.category_id, "name": self.name}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Task":
        return cls(id=d["id"], category_id=d["categoryId"], name=d["name"])


@dataclass(frozen=True)
class Session:
    id: str
    task_id: str
    category_id: str  # snapshot of the task's category at start
    start_time: int  # epoch ms
    end_time: Optional[int]  # None while running
    duration_seconds: int
    date: int  # local midnight of start_time, epoch ms

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "taskId": self.task_id,
            "categoryId": self.category_id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "durationSeconds": self.duration_seconds,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Session":
        return cls(
            id=d["id"],
            task_id=d["taskId"],
            category_id=d["categoryId"],
            start_time=d["startTime"],
            end_time=d["endTime"],
            duration_seconds=d["durationSeconds"],
            date=d["date"],
        )


@dataclass(frozen=True)
class AppData:
    categories: Tuple[Category, ...] = field(default_factory=tuple)
    tasks: Tuple[Task, ...] = field(default_factory=tuple)
    sessions: Tuple[Session, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categories": [c.to_dict() for c in self.categories],
            "tasks": [t.to_dict() for t in self.tasks],
            "sessions": [s.to_dict() for s in self.sessions],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AppData":
        return cls(
            categories=tuple(Category.from_dict(c) for c in d["categories"]),
            tasks=tuple(Task.from_dict(t) for t in d["tasks"]),
            sessions=tuple(Session.from_dict(s) for s in d["sessions"]),
        )


def seed_data() -> AppData:
    """Snapshot used on first launch and after a corrupt store is reset."""
    return AppData(
        categories=(
            Category(id="cat_1", name="General", color="#3b82f6"),
            Category(id="cat_2", name="Priority", color="#ef4444"),
        ),
        tasks=(
            Task(id="task_1", category_id="cat_1", name="Study"),
            Task(id="task_2", category_id="cat_2", name="Productivity"),
        ),
        sessions=(),
    )
