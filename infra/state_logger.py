from __future__ import annotations

import json
import os
import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Dict, List

if TYPE_CHECKING:
    from toaster.state_machine import ToasterState


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def print_state(state: "ToasterState") -> None:
    print(state.value)


class CollectingStateLogger:
    """Keeps every reported state in memory, in order."""

    def __init__(self) -> None:
        self.states: List["ToasterState"] = []

    def __call__(self, state: "ToasterState") -> None:
        self.states.append(state)


class StateLogger:
    """
    Logs:
      1) reported states (append-only file, one JSON line per state)
      2) free-form events (append-only file)
      3) reported states in SQLite (queryable for results tables)
    """

    def __init__(self, db_path: str, state_log_path: str, event_log_path: str, echo: bool = False) -> None:
        self.db_path = db_path
        self.state_log_path = state_log_path
        self.event_log_path = event_log_path
        self.echo = echo
        self._seq: Dict[str, int] = {}  # toaster_id -> records written

        for path in (db_path, state_log_path, event_log_path):
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)

        self._init_db()

    def _init_db(self) -> None:
        with closing(sqlite3.connect(self.db_path)) as con, con:
            con.execute("""
            CREATE TABLE IF NOT EXISTS state_log (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp_utc TEXT NOT NULL,
                toaster_id TEXT NOT NULL,
                seq INTEGER NOT NULL,
                state TEXT NOT NULL
            )
            """)

    def for_toaster(self, toaster_id: str) -> Callable[["ToasterState"], None]:
        """Bind a toaster id, giving the one-argument sink a Toaster expects."""
        def _record(state: "ToasterState") -> None:
            self.log_state(toaster_id, state)
        return _record

    def log_state(self, toaster_id: str, state: "ToasterState") -> None:
        seq = self._seq.get(toaster_id, 0)

        record = {
            "timestamp_utc": _now_iso(),
            "toaster_id": toaster_id,
            "seq": seq,
            "state": state.value,
        }

        # sqlite log first; a failed insert writes nothing to the file log
        with closing(sqlite3.connect(self.db_path)) as con, con:
            con.execute(
                """
                INSERT INTO state_log (timestamp_utc, toaster_id, seq, state)
                VALUES (?, ?, ?, ?)
                """,
                (record["timestamp_utc"], toaster_id, seq, state.value),
            )

        # file log
        with open(self.state_log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(record) + "\n")

        self._seq[toaster_id] = seq + 1

        if self.echo:
            print(f"[{toaster_id}] {state.value}")

    def log_event(self, event: Dict[str, Any]) -> None:
        record = {"timestamp_utc": _now_iso(), **event}
        with open(self.event_log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(record) + "\n")
