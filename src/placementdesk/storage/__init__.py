"""Persistence backends for placement records."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from placementdesk.exceptions import ConfigurationError
from placementdesk.models import utcnow
from placementdesk.settings import AppSettings
from placementdesk.storage.base import Repository, Store
from placementdesk.storage.memory import MemoryStore
from placementdesk.storage.sqlite_store import SqliteStore

__all__ = ["MemoryStore", "Repository", "SqliteStore", "Store", "open_store"]


def open_store(settings: AppSettings, clock: Callable[[], datetime] = utcnow) -> Store:
    """Build the store selected by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        return MemoryStore(clock)
    if settings.storage_backend == "sqlite":
        return SqliteStore(Path(settings.state_dir) / settings.database_name, clock)
    raise ConfigurationError(f"Unknown storage backend: {settings.storage_backend}")
