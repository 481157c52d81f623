# -*- coding: utf-8 -*-

import logging
import threading
from typing import Callable, List

from domain.models import AppData, seed_data
from storage.repos import AppDataRepo, SnapshotError

log = logging.getLogger(__name__)

Listener = Callable[[AppData], None]


class StateStore:
    """
    Single-writer container for the AppData snapshot.

    mutate() runs read -> transform -> persist -> publish under one lock, so
    readers only ever see a snapshot that has already been saved.
    """

    def __init__(self, repo: AppDataRepo, data: AppData):
        self.repo = repo
        self._data = data
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

    @classmethod
    def open(cls, repo: AppDataRepo) -> "StateStore":
        try:
            data = repo.load()
        except SnapshotError as e:
            log.error("Stored snapshot is corrupt (%s), resetting to defaults", e)
            raw = repo.load_raw()
            if raw is not None:
                repo.backup_raw(raw)
                log.info("Corrupt snapshot kept under %r", repo.backup_key)
            data = seed_data()
            repo.save(data)
        return cls(repo, data)

    def get_snapshot(self) -> AppData:
        return self._data

    def subscribe(self, fn: Listener) -> Callable[[], None]:
        self._listeners.append(fn)

        def _unsubscribe() -> None:
            if fn in self._listeners:
                self._listeners.remove(fn)

        return _unsubscribe

    def mutate(self, fn: Callable[[AppData], AppData]) -> AppData:
        with self._lock:
            current = self._data
            new = fn(current)
            if new is current:
                return current
            # persist first: a failed save leaves the old snapshot in place
            self.repo.save(new)
            self._data = new
            listeners = list(self._listeners)

        for listener in listeners:
            listener(new)
        return new
