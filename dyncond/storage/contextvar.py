"""
ContextVar-backed slot storage.

Each thread and each asyncio task sees its own slot values. A task created
while a handler is active starts from a copy of its creator's slots; whatever
it installs afterwards stays inside the task.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dyncond.conditions import HandlerFrame

SlotTable = Mapping[Hashable, "HandlerFrame[Any, Any]"]

_EMPTY: SlotTable = {}


class ContextVarStorage:
    """
    Slot storage holding every occupied slot in a single ``ContextVar``.

    The variable holds a slot table that is replaced on every write and never
    mutated, since contexts copied into other tasks share it. Emptied slots
    are dropped from the table, so keys of discarded conditions are not kept.

    Example:
        storage = ContextVarStorage()
        storage.set(key, frame)
        storage.pop(key)  # frame; the slot is now empty
    """

    def __init__(self) -> None:
        self._slots: ContextVar[SlotTable] = ContextVar(
            f"dyncond_slots_{id(self):x}", default=_EMPTY
        )

    def get(self, key: Hashable) -> HandlerFrame[Any, Any] | None:
        return self._slots.get().get(key)

    def set(self, key: Hashable, frame: HandlerFrame[Any, Any]) -> None:
        table = dict(self._slots.get())
        table[key] = frame
        self._slots.set(table)

    def pop(self, key: Hashable) -> HandlerFrame[Any, Any] | None:
        table = self._slots.get()
        frame = table.get(key)
        if frame is not None:
            self._slots.set({k: v for k, v in table.items() if k != key})
        return frame

    def clear(self, key: Hashable) -> None:
        self.pop(key)

    def __len__(self) -> int:
        """Return number of occupied slots in the current context."""
        return len(self._slots.get())

    def __repr__(self) -> str:
        return f"ContextVarStorage({len(self)} slots)"
