#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import sqlite3

log = logging.getLogger(__name__)


class Database:
    def __init__(self, db_path: str = "studyflow.db"):
        self.db_path = db_path
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row

    def _table_exists(self, name: str) -> bool:
        r = self.conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (name,),
        ).fetchone()
        return bool(r)

    def init_schema(self):
        # whole app state lives in one key/value table (JSON blobs)
        if not self._table_exists("app_state"):
            log.info("Creating app_state table in %s", self.db_path)
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS app_state (
                key TEXT PRIMARY KEY,
                value TEXT
            );
        """)
        self.conn.commit()

    def close(self):
        try:
            self.conn.close()
        except sqlite3.Error:
            log.warning("Failed to close %s", self.db_path, exc_info=True)
