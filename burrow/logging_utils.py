"""Minimal structured logging helper.

Emits key=value lines with a timestamp and level so generation traces stay
greppable without configuring handlers. Set ``BURROW_LOG_JSON=1`` for one JSON
object per line instead.

Usage:
    from burrow.logging_utils import get_logger
    log = get_logger("terrain.lakes")
    log.info(event="lake_rejected", size=12)

    # stamp every line of one generation with its seed
    run_log = log.bind(seed="moss")
    run_log.warn(event="level_rejected", attempt=2)

Non-numeric values are str()'d with spaces replaced. Reserved keys: level, ts.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("BURROW_LOG_LEVEL", "info").lower(), 20)
JSON_MODE = os.getenv("BURROW_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


def set_level(name: str) -> None:
    """Change the process-wide threshold (``debug|info|warn|error``)."""
    global CURRENT_LEVEL
    try:
        CURRENT_LEVEL = LEVELS[name.lower()]
    except KeyError:
        raise ValueError(f"unknown log level {name!r}; expected one of {list(LEVELS)}") from None


def _format(level: str, **fields):
    if JSON_MODE:
        rec = {"level": level, "ts": int(time.time())}
        rec.update((k, v) for k, v in fields.items() if v is not None)
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            parts.append(f"{k}={v}")
        else:
            parts.append(f"{k}={str(v).replace(' ', '_')}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None, context: dict | None = None):
        self.name = name or "burrow"
        self.context = dict(context or {})

    def bind(self, **fields) -> "_Logger":
        """Child logger that adds ``fields`` to every line it emits."""
        return _Logger(self.name, {**self.context, **fields})

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        rec = {"logger": self.name, **self.context, **fields}
        print(_format(lvl, **rec), file=sys.stderr if lvl == "error" else sys.stdout)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE: dict = {}


def get_logger(name: str) -> _Logger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("burrow")
