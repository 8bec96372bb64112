"""Structured key=value logging for maze generation.

Generation stages report degradations (collectibles that did not fit, a
forced start/exit corridor, a fallback exit) as single log lines rather than
exceptions. Lines look like::

    level=warn ts=1760000000 logger=labyrinth.maze event=collectibles_short placed=3 requested=5

Set ``LABYRINTH_LOG_JSON=1`` for JSON lines instead and
``LABYRINTH_LOG_LEVEL`` (debug/info/warn/error) to change the threshold.
The level is read on every call so tests can monkeypatch the environment.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}


def _threshold() -> int:
    return LEVELS.get(os.getenv("LABYRINTH_LOG_LEVEL", "info").lower(), 20)


def _json_mode() -> bool:
    return os.getenv("LABYRINTH_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def format_record(level: str, **fields) -> str:
    ts = int(time.time())
    if _json_mode():
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = ts
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={ts}"]
    for key, val in fields.items():
        if val is None:
            continue
        if isinstance(val, (int, float)):
            parts.append(f"{key}={val}")
        else:
            parts.append(f"{key}={str(val).replace(' ', '_')}")
    return " ".join(parts)


class StructuredLogger:
    def __init__(self, name: str):
        self.name = name

    def _emit(self, level: str, fields: dict) -> None:
        if LEVELS[level] < _threshold():
            return
        fields.setdefault("logger", self.name)
        # logger key first keeps grep output aligned
        ordered = {"logger": fields.pop("logger"), **fields}
        stream = sys.stderr if level == "error" else sys.stdout
        print(format_record(level, **ordered), file=stream)

    def debug(self, **fields) -> None:
        self._emit("debug", fields)

    def info(self, **fields) -> None:
        self._emit("info", fields)

    def warn(self, **fields) -> None:
        self._emit("warn", fields)

    def error(self, **fields) -> None:
        self._emit("error", fields)


_LOGGERS: dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    if name not in _LOGGERS:
        _LOGGERS[name] = StructuredLogger(name)
    return _LOGGERS[name]


log = get_logger("labyrinth")

__all__ = ["get_logger", "log", "format_record", "StructuredLogger", "LEVELS"]
