"""Protocol definitions for the persistence collaborators."""

from __future__ import annotations

import dataclasses
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any, Protocol, TypeVar, runtime_checkable

from placementdesk.exceptions import ValidationError
from placementdesk.models import Application, Employer, Job, Notification, Student

E = TypeVar("E")

# collection name -> (entity class, label used in error messages)
COLLECTIONS: dict[str, tuple[type, str]] = {
    "students": (Student, "Student"),
    "employers": (Employer, "Employer"),
    "jobs": (Job, "Job"),
    "applications": (Application, "Application"),
    "notifications": (Notification, "Notification"),
}


@runtime_checkable
class Repository(Protocol[E]):
    """Key-value record store for one entity collection.

    Ids are positive integers assigned as ``max(existing ids) + 1``.
    """

    def get_all(self) -> list[E]:
        """Return every entity in id order."""
        ...

    def get_by_id(self, entity_id: int) -> E:
        """Return the entity with *entity_id* or raise ``NotFoundError``."""
        ...

    def create(self, entity: E) -> E:
        """Insert *entity* under a freshly generated id and return it."""
        ...

    def update(self, entity_id: int, **changes: Any) -> E:
        """Shallow-merge *changes* into the stored entity and return it."""
        ...


@runtime_checkable
class Store(Protocol):
    """The five repositories plus a unit-of-work boundary."""

    students: Repository[Student]
    employers: Repository[Employer]
    jobs: Repository[Job]
    applications: Repository[Application]
    notifications: Repository[Notification]

    def atomic(self) -> AbstractContextManager[None]:
        """Run the enclosed writes as one unit; undo them all on error."""
        ...

    def close(self) -> None:
        ...


def _has_field(entity: Any, name: str) -> bool:
    return any(f.name == name for f in dataclasses.fields(entity))


def stamp_created(entity: E, entity_id: int, now: datetime) -> E:
    """Assign the id and the creation/update timestamps where applicable."""
    changes: dict[str, Any] = {"id": entity_id}
    if _has_field(entity, "created_at"):
        changes["created_at"] = now
    if _has_field(entity, "updated_at"):
        changes["updated_at"] = now
    return dataclasses.replace(entity, **changes)  # type: ignore[type-var]


def merge_changes(entity: E, changes: dict[str, Any], now: datetime) -> E:
    """Apply *changes* to *entity*, stamping ``updated_at`` where applicable."""
    changes = {k: v for k, v in changes.items() if k != "id"}
    unknown = [k for k in changes if not _has_field(entity, k)]
    if unknown:
        raise ValidationError(f"Unknown field: {unknown[0]}", field=unknown[0])
    if _has_field(entity, "updated_at"):
        changes["updated_at"] = now
    return dataclasses.replace(entity, **changes)  # type: ignore[type-var]
