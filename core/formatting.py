# -*- coding: utf-8 -*-

import datetime as dt


def format_duration(sec: int, always_hours: bool = False) -> str:
    sec = max(0, int(sec))
    h = sec // 3600
    m = (sec % 3600) // 60
    if h == 0 and not always_hours:
        return f"{m}m"
    return f"{h}h {m}m"


def format_clock(sec: int) -> str:
    sec = max(0, int(sec))
    h = sec // 3600
    m = (sec % 3600) // 60
    s = sec % 60
    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


def format_hours(hours: float) -> str:
    return f"{hours:.1f}h"


def chart_label(day_ms: int, window_days: int) -> str:
    # weekly: "Mon 3/9", monthly: "3/9"
    d = dt.datetime.fromtimestamp(day_ms / 1000)
    md = f"{d.month}/{d.day}"
    if window_days == 7:
        return f"{d.strftime('%a')} {md}"
    return md


def history_label(day_ms: int, is_today: bool) -> str:
    if is_today:
        return "Today"
    d = dt.datetime.fromtimestamp(day_ms / 1000)
    return f"{d.strftime('%a')}, {d.strftime('%b')} {d.day}"
