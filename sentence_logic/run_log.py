# sentence_logic/run_log.py
"""Structured JSONL audit log of per-record failures."""

from __future__ import annotations

import datetime as dt
import json
import threading
from pathlib import Path
from typing import Any

JsonDict = dict[str, Any]


def now_utc_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds")


def elapsed_ms(t0: float, t1: float) -> int:
    return round((t1 - t0) * 1000.0)


class JsonlLogger:
    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.Lock()
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def log(self, event: JsonDict) -> None:
        line = json.dumps({"ts_utc": now_utc_iso(), **event}, ensure_ascii=False, sort_keys=True)
        with self._lock, self._path.open("a", encoding="utf-8", errors="backslashreplace") as f:
            f.write(line + "\n")


def read_events(path: Path, event: str | None = None) -> list[JsonDict]:
    """Load events from a run log, optionally only those named ``event``."""
    if not path.exists():
        return []
    out: list[JsonDict] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            rec = json.loads(line)
        except (json.JSONDecodeError, ValueError):
            continue
        if event is None or rec.get("event") == event:
            out.append(rec)
    return out
