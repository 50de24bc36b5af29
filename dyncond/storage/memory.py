"""
In-memory slot storage for a single execution context.

Every caller shares the same slots, so this backend must not be used from
more than one thread or task at a time. Use ContextVarStorage for that.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dyncond.conditions import HandlerFrame


class InMemoryStorage:
    """
    Slot storage backed by a plain dict.

    Example:
        storage = InMemoryStorage()
        storage.set(key, frame)
        storage.get(key)  # frame
    """

    def __init__(self) -> None:
        """Initialize with every slot empty."""
        self._data: dict[Hashable, HandlerFrame[Any, Any]] = {}

    def get(self, key: Hashable) -> HandlerFrame[Any, Any] | None:
        return self._data.get(key)

    def set(self, key: Hashable, frame: HandlerFrame[Any, Any]) -> None:
        self._data[key] = frame

    def pop(self, key: Hashable) -> HandlerFrame[Any, Any] | None:
        return self._data.pop(key, None)

    def clear(self, key: Hashable) -> None:
        self._data.pop(key, None)

    def __len__(self) -> int:
        """Return number of occupied slots."""
        return len(self._data)

    def __repr__(self) -> str:
        return f"InMemoryStorage({len(self._data)} slots)"
