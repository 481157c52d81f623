#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import os

from logger import CrashHandler
from services.state_store import StateStore
from services.stats_service import StatsService
from services.task_service import TaskService
from services.timer_service import TimerService
from storage.db import Database
from storage.repos import AppDataRepo
from storage.settings import load_config
from ui.main_window import MainWindow

SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".studyflow", "settings.json")


def main():
    cfg = load_config(SETTINGS_PATH)
    CrashHandler(log_dir=cfg.log_dir)
    logging.getLogger(__name__).info("Starting StudyFlow with %s", cfg.db_path)

    db = Database(db_path=cfg.db_path)
    db.init_schema()

    store = StateStore.open(AppDataRepo(db, key=cfg.storage_key))

    # subscription order matters: timer engine syncs before the window redraws
    timer_service = TimerService(store)
    task_service = TaskService(store)
    stats_service = StatsService(store)

    app = MainWindow(
        task_service,
        timer_service,
        stats_service,
        default_view=cfg.default_view,
        tick_ms=cfg.tick_ms,
    )
    try:
        app.run()
    finally:
        db.close()


if __name__ == "__main__":
    main()
