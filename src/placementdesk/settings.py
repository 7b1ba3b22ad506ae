"""Pydantic-based settings loaded from YAML with env-var overrides."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import field_validator
from pydantic_settings import BaseSettings

from placementdesk.exceptions import ConfigurationError

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

_SEED_COLLECTIONS = ("students", "employers")


class AppSettings(BaseSettings):
    """Application configuration with YAML + env var support.

    Env vars are prefixed with ``PLACEMENTDESK_``.
    Example: ``PLACEMENTDESK_STORAGE_BACKEND=memory``
    """

    model_config = {"env_prefix": "PLACEMENTDESK_"}

    # --- storage ---
    state_dir: str = ".state"
    database_name: str = "placement.db"
    storage_backend: str = "sqlite"  # sqlite or memory
    seed_file: str = ""

    # --- matching ---
    deadline_window_days: int = 3
    recommendation_limit: int = 5

    # --- workflow ---
    enforce_status_transitions: bool = False

    # --- http api ---
    api_host: str = "127.0.0.1"
    api_port: int = 8787

    @field_validator("storage_backend")
    @classmethod
    def _normalise_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("sqlite", "memory"):
            raise ValueError(f"storage_backend must be 'sqlite' or 'memory', got {v!r}")
        return v

    @field_validator("deadline_window_days", "recommendation_limit")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    # ---- factory ----

    @classmethod
    def from_yaml(cls, path: str | Path | None = None) -> "AppSettings":
        """Load settings from a YAML file, then overlay env vars.

        Env vars (``PLACEMENTDESK_*``) take priority over YAML values.
        """
        import os

        if path is None:
            path = _PROJECT_ROOT / "settings.yaml"
        path = Path(path)
        raw: dict[str, Any] = {}
        if path.exists():
            with open(path) as fh:
                raw = yaml.safe_load(fh) or {}

        # Let env vars override YAML: remove YAML keys that have an env override
        prefix = "PLACEMENTDESK_"
        for key in list(raw.keys()):
            env_key = f"{prefix}{key.upper()}"
            if env_key in os.environ:
                del raw[key]

        return cls(**raw)


def load_seed_data(path: str | Path) -> dict[str, list[dict[str, Any]]]:
    """Load initial students and employers from a YAML seed file.

    Employer entries may carry ``verified: true`` and a nested ``jobs`` list;
    those jobs are posted on the employer's behalf once it is verified.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Seed file not found: {path}")
    with open(path) as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Seed file must be a mapping: {path}")
    seed: dict[str, list[dict[str, Any]]] = {}
    for name in _SEED_COLLECTIONS:
        entries = data.get(name) or []
        if not isinstance(entries, list):
            raise ConfigurationError(f"'{name}' in {path} must be a list")
        seed[name] = [dict(e) for e in entries]
    return seed
