"""
Structured JSON audit log: append-only, one object per line (.jsonl), one
file per trip.

Usage:
    from modules.observability.logger import StructuredLogger, ITINERARY_BUILT

    audit = StructuredLogger()
    audit.log("trip_abc123", ITINERARY_BUILT, {"city": "Jaipur", "version": 1})
    records = audit.read("trip_abc123")

Logs are written to  <config.AUDIT_LOG_DIR>/<trip_id>.jsonl  (default:
backend/logs/).  The engine core never writes here; the HTTP adapter and the
CLI do.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import IO

import config

# Event types written to the audit trail
ITINERARY_BUILT = "ITINERARY_BUILT"
ITINERARY_EDITED = "ITINERARY_EDITED"
PERFORMANCE = "PERFORMANCE"


class StructuredLogger:
    """Thread-safe, append-only JSONL logger keyed by trip id."""

    def __init__(self, logs_dir: Path | str | None = None) -> None:
        self._logs_dir = Path(logs_dir) if logs_dir else config.AUDIT_LOG_DIR
        self._lock = threading.Lock()
        self._handles: dict[str, IO[str]] = {}  # trip_id -> open append handle

    @property
    def logs_dir(self) -> Path:
        return self._logs_dir

    def path_for(self, trip_id: str) -> Path:
        return self._logs_dir / f"{trip_id}.jsonl"

    # ── write side ────────────────────────────────────────────────────────

    def log(self, trip_id: str, event_type: str, payload: dict) -> None:
        """Append one record to ``<trip_id>.jsonl``."""
        record = {
            "timestamp":  datetime.now(timezone.utc).isoformat(),
            "trip_id":    trip_id,
            "event_type": event_type,
            "payload":    payload,
        }
        line = json.dumps(record, default=str, ensure_ascii=False) + "\n"

        with self._lock:
            fh = self._handles.get(trip_id)
            if fh is None:
                fh = self._open(trip_id)
            fh.write(line)
            fh.flush()

    def close(self, trip_id: str | None = None) -> None:
        """Close one trip's handle, or all of them."""
        with self._lock:
            if trip_id:
                fh = self._handles.pop(trip_id, None)
                if fh:
                    fh.close()
            else:
                for fh in self._handles.values():
                    fh.close()
                self._handles.clear()

    # ── read side ─────────────────────────────────────────────────────────

    def read(self, trip_id: str) -> list[dict]:
        """
        All records of a trip in write order.

        Raises:
            FileNotFoundError: nothing was ever logged for *trip_id*.
        """
        path = self.path_for(trip_id)
        if not path.exists():
            raise FileNotFoundError(f"Log file not found: {path}")
        with self._lock:
            fh = self._handles.get(trip_id)
            if fh is not None:
                fh.flush()
        with open(path, "r", encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]

    # ── internals ─────────────────────────────────────────────────────────

    def _open(self, trip_id: str) -> IO[str]:
        os.makedirs(self._logs_dir, exist_ok=True)
        fh = open(self.path_for(trip_id), "a", encoding="utf-8")  # noqa: SIM115
        self._handles[trip_id] = fh
        return fh
