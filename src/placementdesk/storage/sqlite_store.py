"""SQLite-backed store: one table per collection, JSON payload per row."""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Generic

from placementdesk.exceptions import NotFoundError
from placementdesk.models import utcnow
from placementdesk.storage.base import COLLECTIONS, E, merge_changes, stamp_created
from placementdesk.storage.codec import from_jsonable, to_jsonable

logger = logging.getLogger(__name__)

_SCHEMA = "\n".join(
    f"CREATE TABLE IF NOT EXISTS {name} (\n"
    "    id       INTEGER PRIMARY KEY,\n"
    "    payload  TEXT NOT NULL\n"
    ");"
    for name in COLLECTIONS
)


class SqliteRepository(Generic[E]):
    """Repository over a single table of the shared connection."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        table: str,
        entity_cls: type,
        label: str,
        lock: threading.RLock,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._conn = conn
        self._table = table
        self._cls = entity_cls
        self._label = label
        self._lock = lock
        self._clock = clock

    def _decode(self, row: sqlite3.Row) -> E:
        return from_jsonable(self._cls, json.loads(row["payload"]))

    def _encode(self, entity: E) -> str:
        return json.dumps(to_jsonable(entity))

    def get_all(self) -> list[E]:
        with self._lock:
            cur = self._conn.execute(f"SELECT payload FROM {self._table} ORDER BY id")
            return [self._decode(r) for r in cur.fetchall()]

    def get_by_id(self, entity_id: int) -> E:
        try:
            key = int(entity_id)
        except (TypeError, ValueError):
            raise NotFoundError(f"{self._label} not found") from None
        with self._lock:
            cur = self._conn.execute(
                f"SELECT payload FROM {self._table} WHERE id=?", (key,)
            )
            row = cur.fetchone()
        if row is None:
            raise NotFoundError(f"{self._label} not found")
        return self._decode(row)

    def create(self, entity: E) -> E:
        with self._lock:
            cur = self._conn.execute(f"SELECT COALESCE(MAX(id), 0) FROM {self._table}")
            new_id = cur.fetchone()[0] + 1
            stored = stamp_created(entity, new_id, self._clock())
            self._conn.execute(
                f"INSERT INTO {self._table} (id, payload) VALUES (?, ?)",
                (new_id, self._encode(stored)),
            )
            return stored

    def update(self, entity_id: int, **changes: Any) -> E:
        with self._lock:
            current = self.get_by_id(entity_id)
            stored = merge_changes(current, changes, self._clock())
            self._conn.execute(
                f"UPDATE {self._table} SET payload=? WHERE id=?",
                (self._encode(stored), stored.id),  # type: ignore[attr-defined]
            )
            return stored


class SqliteStore:
    """Persistent placement records stored in SQLite."""

    def __init__(self, db_path: str | Path, clock: Callable[[], datetime] = utcnow) -> None:
        db_path = Path(db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        # autocommit; atomic() issues BEGIN/COMMIT explicitly
        self._conn = sqlite3.connect(
            str(db_path), isolation_level=None, check_same_thread=False
        )
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._lock = threading.RLock()
        self._depth = 0
        repos = {
            name: SqliteRepository(self._conn, name, cls, label, self._lock, clock)
            for name, (cls, label) in COLLECTIONS.items()
        }
        self.students = repos["students"]
        self.employers = repos["employers"]
        self.jobs = repos["jobs"]
        self.applications = repos["applications"]
        self.notifications = repos["notifications"]
        logger.info("Placement database ready at %s.", db_path)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            self._conn.execute("BEGIN")
            self._depth = 1
            try:
                yield
            except BaseException:
                self._conn.execute("ROLLBACK")
                logger.debug("Rolled back SQLite unit of work.")
                raise
            else:
                self._conn.execute("COMMIT")
            finally:
                self._depth = 0

    def close(self) -> None:
        self._conn.close()
