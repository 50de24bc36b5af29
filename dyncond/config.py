"""Environment-driven configuration for dyncond."""

from __future__ import annotations

import os
from collections.abc import Mapping
from enum import Enum

# Environment variable to control debug mode
DEBUG_CONDITIONS = os.environ.get("DYNCOND_DEBUG", "").lower() in ("1", "true", "yes")

STORAGE_ENV_KEY = "DYNCOND_STORAGE"


class SlotBackend(str, Enum):
    """Storage backend holding the per-context handler slots."""

    CONTEXTVAR = "contextvar"
    THREAD = "thread"
    MEMORY = "memory"


def configured_backend(environ: Mapping[str, str] | None = None) -> SlotBackend:
    """Resolve the backend named by ``DYNCOND_STORAGE`` (contextvar when unset)."""
    source = os.environ if environ is None else environ
    raw = source.get(STORAGE_ENV_KEY, "").strip().lower()
    if not raw:
        return SlotBackend.CONTEXTVAR
    try:
        return SlotBackend(raw)
    except ValueError as exc:
        choices = ", ".join(backend.value for backend in SlotBackend)
        raise ValueError(
            f"Unknown {STORAGE_ENV_KEY} value {raw!r}; expected one of: {choices}"
        ) from exc


__all__ = [
    "DEBUG_CONDITIONS",
    "STORAGE_ENV_KEY",
    "SlotBackend",
    "configured_backend",
]
