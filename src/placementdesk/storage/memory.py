"""In-memory store, used by tests and the ``memory`` storage backend."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Generic

from placementdesk.exceptions import NotFoundError
from placementdesk.models import utcnow
from placementdesk.storage.base import COLLECTIONS, E, merge_changes, stamp_created

logger = logging.getLogger(__name__)


class MemoryRepository(Generic[E]):
    """Dict-backed repository. Entities are frozen, so copies are shallow."""

    def __init__(
        self,
        label: str,
        lock: threading.RLock,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._label = label
        self._lock = lock
        self._clock = clock
        self._rows: dict[int, E] = {}

    def get_all(self) -> list[E]:
        with self._lock:
            return [self._rows[k] for k in sorted(self._rows)]

    def get_by_id(self, entity_id: int) -> E:
        with self._lock:
            try:
                return self._rows[int(entity_id)]
            except (KeyError, TypeError, ValueError):
                raise NotFoundError(f"{self._label} not found") from None

    def create(self, entity: E) -> E:
        with self._lock:
            new_id = max(self._rows, default=0) + 1
            stored = stamp_created(entity, new_id, self._clock())
            self._rows[new_id] = stored
            return stored

    def update(self, entity_id: int, **changes: Any) -> E:
        with self._lock:
            current = self.get_by_id(entity_id)
            stored = merge_changes(current, changes, self._clock())
            self._rows[stored.id] = stored  # type: ignore[attr-defined]
            return stored

    # ---- snapshot support for MemoryStore.atomic ----

    def _snapshot(self) -> dict[int, E]:
        return dict(self._rows)

    def _restore(self, rows: dict[int, E]) -> None:
        self._rows = rows


class MemoryStore:
    """All five collections held in process memory."""

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._lock = threading.RLock()
        self._depth = 0
        self._repos: dict[str, MemoryRepository[Any]] = {
            name: MemoryRepository(label, self._lock, clock)
            for name, (_cls, label) in COLLECTIONS.items()
        }
        self.students = self._repos["students"]
        self.employers = self._repos["employers"]
        self.jobs = self._repos["jobs"]
        self.applications = self._repos["applications"]
        self.notifications = self._repos["notifications"]

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

            snapshot = {name: repo._snapshot() for name, repo in self._repos.items()}
            self._depth = 1
            try:
                yield
            except BaseException:
                for name, rows in snapshot.items():
                    self._repos[name]._restore(rows)
                logger.debug("Rolled back in-memory unit of work.")
                raise
            finally:
                self._depth = 0

    def close(self) -> None:
        pass
