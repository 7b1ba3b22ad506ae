"""JSON encoding of entities through pydantic type adapters."""

from __future__ import annotations

import dataclasses
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter


@lru_cache(maxsize=None)
def _adapter(cls: type) -> TypeAdapter[Any]:
    return TypeAdapter(cls)


def _order_sets(value: Any, dumped: Any) -> Any:
    """Replace dumped frozensets (hash-ordered lists) with sorted lists."""
    if isinstance(value, frozenset):
        return sorted(dumped)
    if dataclasses.is_dataclass(value) and isinstance(dumped, dict):
        return {
            f.name: _order_sets(getattr(value, f.name), dumped[f.name])
            for f in dataclasses.fields(value)
        }
    return dumped


def to_jsonable(entity: Any) -> Any:
    """Return *entity* as JSON-compatible builtins (dicts, lists, strings)."""
    if isinstance(entity, (list, tuple)):
        return [to_jsonable(e) for e in entity]
    if isinstance(entity, dict):
        return {k: to_jsonable(v) for k, v in entity.items()}
    if dataclasses.is_dataclass(entity) and not isinstance(entity, type):
        dumped = _adapter(type(entity)).dump_python(entity, mode="json")
        return _order_sets(entity, dumped)
    return _adapter(type(entity)).dump_python(entity, mode="json")


def from_jsonable(cls: type, data: dict[str, Any]) -> Any:
    """Rebuild an instance of *cls* from the output of :func:`to_jsonable`."""
    return _adapter(cls).validate_python(data)
