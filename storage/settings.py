# -*- coding: utf-8 -*-

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Union

log = logging.getLogger(__name__)

VIEW_MODES = ("weekly", "monthly")


@dataclass(frozen=True)
class AppConfig:
    db_path: str = "studyflow.db"
    storage_key: str = "studyflow_data_v1"
    tick_ms: int = 1000
    default_view: str = "weekly"
    log_dir: str = os.path.join(os.path.expanduser("~"), ".studyflow", "logs")


def _coerce(name: str, value, default):
    if name == "tick_ms":
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError("tick_ms must be a positive integer")
        return value
    if name == "default_view":
        if value not in VIEW_MODES:
            raise ValueError(f"default_view must be one of {', '.join(VIEW_MODES)}")
        return value
    if not isinstance(value, type(default)) or not value:
        raise ValueError(f"{name} must be a non-empty string")
    return value


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """
    Defaults, updated from an optional JSON settings file.
    Bad keys/values are logged and skipped; the app always gets a usable config.
    """
    cfg = AppConfig()
    if path is None:
        return cfg

    path = Path(path)
    if not path.exists():
        return cfg

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as exc:
        log.error("Failed to read settings %s: %s", path, exc)
        return cfg

    if not isinstance(raw, dict):
        log.error("Settings %s must contain a JSON object", path)
        return cfg

    known = {f.name: getattr(cfg, f.name) for f in fields(AppConfig)}
    updates = {}
    for key, value in raw.items():
        if key not in known:
            log.warning("Ignoring unknown setting %r", key)
            continue
        try:
            updates[key] = _coerce(key, value, known[key])
        except ValueError as exc:
            log.warning("Ignoring setting %r: %s", key, exc)

    return replace(cfg, **updates)
