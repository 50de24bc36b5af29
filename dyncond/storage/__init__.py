"""
Context-local storage for condition handler slots.

Every Condition owns one slot per execution context. A slot holds the head of
that condition's handler chain (a ``HandlerFrame``) or nothing. The storage
layer decides what an "execution context" is.

Public API:
- ContextLocalStorage: Protocol for slot backends
- ContextVarStorage: one slot per thread and per asyncio task (default)
- ThreadLocalStorage: one slot per thread
- InMemoryStorage: a single context, for tests and embedding

Example usage:
    from dyncond import Condition
    from dyncond.storage import ThreadLocalStorage

    overflow = Condition("overflow", storage=ThreadLocalStorage())
"""

from __future__ import annotations

import threading
from collections.abc import Hashable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from dyncond.config import SlotBackend, configured_backend

if TYPE_CHECKING:
    from dyncond.conditions import HandlerFrame


@runtime_checkable
class ContextLocalStorage(Protocol):
    """
    Protocol for per-context slot backends.

    Implementations never share slot state between execution contexts, so
    callers need no synchronization of their own.

    Methods:
        get: Read the slot without clearing it. Returns None if empty.
        set: Replace the slot.
        pop: Read and clear the slot in one step. Returns None if empty.
        clear: Empty the slot.
    """

    def get(self, key: Hashable) -> HandlerFrame[Any, Any] | None:
        """Read the slot without clearing it. Returns None if empty."""
        ...

    def set(self, key: Hashable, frame: HandlerFrame[Any, Any]) -> None:
        """Replace the slot."""
        ...

    def pop(self, key: Hashable) -> HandlerFrame[Any, Any] | None:
        """Read and clear the slot in one step. Returns None if empty."""
        ...

    def clear(self, key: Hashable) -> None:
        """Empty the slot."""
        ...


# Import implementations for convenience
from dyncond.storage.contextvar import ContextVarStorage
from dyncond.storage.memory import InMemoryStorage
from dyncond.storage.thread_local import ThreadLocalStorage

_default_storage: ContextLocalStorage | None = None
_default_lock = threading.Lock()


def create_storage(backend: SlotBackend | str) -> ContextLocalStorage:
    """Build a fresh storage instance for ``backend``."""
    backend = SlotBackend(backend)
    if backend is SlotBackend.CONTEXTVAR:
        return ContextVarStorage()
    if backend is SlotBackend.THREAD:
        return ThreadLocalStorage()
    return InMemoryStorage()


def default_storage() -> ContextLocalStorage:
    """Return the process-wide storage selected by ``DYNCOND_STORAGE``."""
    global _default_storage
    if _default_storage is None:
        with _default_lock:
            if _default_storage is None:
                _default_storage = create_storage(configured_backend())
    return _default_storage


__all__ = [
    "ContextLocalStorage",
    "ContextVarStorage",
    "InMemoryStorage",
    "ThreadLocalStorage",
    "create_storage",
    "default_storage",
]
