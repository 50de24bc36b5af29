"""
Thread-local slot storage.

Slots are strictly per thread: a new thread always starts with every slot
empty, and asyncio tasks running on the same thread share slots.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dyncond.conditions import HandlerFrame


class ThreadLocalStorage:
    """Slot storage backed by a ``threading.local`` namespace."""

    def __init__(self) -> None:
        self._local = threading.local()

    def _slots(self) -> dict[Hashable, HandlerFrame[Any, Any]]:
        """Get this thread's slot table."""
        if not hasattr(self._local, "slots"):
            self._local.slots = {}
        return self._local.slots

    def get(self, key: Hashable) -> HandlerFrame[Any, Any] | None:
        return self._slots().get(key)

    def set(self, key: Hashable, frame: HandlerFrame[Any, Any]) -> None:
        self._slots()[key] = frame

    def pop(self, key: Hashable) -> HandlerFrame[Any, Any] | None:
        return self._slots().pop(key, None)

    def clear(self, key: Hashable) -> None:
        self._slots().pop(key, None)

    def __repr__(self) -> str:
        return "ThreadLocalStorage()"
