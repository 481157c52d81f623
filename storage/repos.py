# storage/repos.py
#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import json
import logging
from typing import Any, Dict, List, Optional

from domain.models import AppData, seed_data
from storage.db import Database

log = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "studyflow_data_v1"

_FIELDS = {
    "categories": {"id": str, "name": str, "color": str},
    "tasks": {"id": str, "categoryId": str, "name": str},
    "sessions": {
        "id": str,
        "taskId": str,
        "categoryId": str,
        "startTime": int,
        "endTime": (int, type(None)),
        "durationSeconds": int,
        "date": int,
    },
}


class SnapshotError(ValueError):
    """Persisted snapshot is not valid JSON or does not match the AppData shape."""


class AppStateRepo:
    def __init__(self, db: Database):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.conn.execute(
            "SELECT value FROM app_state WHERE key=?",
            (key,),
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        self.db.conn.execute(
            """
            INSERT INTO app_state(key, value) VALUES(?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value
            """,
            (key, value),
        )
        self.db.conn.commit()

    def delete(self, key: str) -> None:
        self.db.conn.execute("DELETE FROM app_state WHERE key=?", (key,))
        self.db.conn.commit()


def _check_items(section: str, items: Any) -> None:
    if not isinstance(items, list):
        raise SnapshotError(f"'{section}' must be a list.")
    fields = _FIELDS[section]
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise SnapshotError(f"{section}[{i}] must be an object.")
        for name, typ in fields.items():
            if name not in item:
                raise SnapshotError(f"{section}[{i}] is missing '{name}'.")
            value = item[name]
            # bool is an int subclass, never a valid timestamp
            if isinstance(value, bool) or not isinstance(value, typ):
                raise SnapshotError(f"{section}[{i}].{name} has the wrong type.")


def validate_snapshot(raw: Any) -> Dict[str, List[Dict[str, Any]]]:
    if not isinstance(raw, dict):
        raise SnapshotError("Snapshot must be an object.")
    for section in _FIELDS:
        if section not in raw:
            raise SnapshotError(f"Snapshot is missing '{section}'.")
        _check_items(section, raw[section])
    return raw


class AppDataRepo:
    """
    Data Store: the whole AppData snapshot as one JSON blob in app_state.
    save() always overwrites; there is no merge.
    """

    def __init__(self, db: Database, key: str = DEFAULT_STORAGE_KEY):
        self.state = AppStateRepo(db)
        self.key = key

    @property
    def backup_key(self) -> str:
        return f"{self.key}.corrupt"

    def load_raw(self) -> Optional[str]:
        return self.state.get(self.key)

    def load(self) -> AppData:
        raw = self.load_raw()
        if raw is None:
            log.info("No stored snapshot under %r, using seed data", self.key)
            return seed_data()
        try:
            parsed = json.loads(raw)
        except ValueError as e:
            raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
        return AppData.from_dict(validate_snapshot(parsed))

    def save(self, data: AppData) -> None:
        self.state.set(self.key, json.dumps(data.to_dict()))

    def backup_raw(self, raw: str) -> None:
        self.state.set(self.backup_key, raw)
