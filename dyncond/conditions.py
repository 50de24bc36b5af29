"""
Conditions, handler frames, traps and guards.

A Condition is a named signal. ``cond.trap(handler)`` prepares a handler for
an upcoming scope; ``Trap.run(body)`` (or ``with cond.trap(handler):``)
installs it for the duration of that scope. Inside the scope, and in anything
it calls, ``cond.raise_(value)`` calls the innermost active handler and
returns its result at the raise site. Nothing is unwound.

While a handler runs, its own frame is out of the slot, so a handler that
raises the same condition again reaches the next enclosing handler.

Example:
    >>> sadness = Condition("sadness")
    >>> def trouble(i):
    ...     return sadness.raise_(i) + 1
    >>> sadness.trap(lambda i: i * 10).run(trouble, 4)
    41
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Generic, TypeVar

from dyncond.errors import TrapConsumedError, fail
from dyncond.storage import ContextLocalStorage, default_storage
from dyncond.utils import capture_raise_site, safe_repr

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")

_key_serial = itertools.count(1)


@dataclass(frozen=True)
class SlotKey:
    """Opaque storage key; unique per declared Condition."""

    name: str
    serial: int = field(default_factory=lambda: next(_key_serial))

    def __str__(self) -> str:
        return f"{self.name}#{self.serial}"


@dataclass(frozen=True, eq=False)
class HandlerFrame(Generic[T, U]):
    """One handler in a condition's chain, linked to the enclosing one."""

    handler: Callable[[T], U]
    prev: HandlerFrame[T, U] | None = field(default=None, repr=False)

    def chain(self) -> Iterator[HandlerFrame[T, U]]:
        """Iterate this frame and every enclosing frame, innermost first."""
        frame: HandlerFrame[T, U] | None = self
        while frame is not None:
            yield frame
            frame = frame.prev


@dataclass(frozen=True, eq=False)
class Condition(Generic[T, U]):
    """
    A named signal raising values of type T and resolved to values of type U.

    Declare once, typically at module level, and share:

        overflow: Condition[int, int] = Condition("overflow")

    Attributes:
        name: Human-readable name, used in diagnostics only.
        storage: Slot backend; defaults to the process-wide one.
        describe: Optional formatter for raised values in diagnostics.
        key: Slot key, fresh for every declaration.
    """

    name: str
    storage: ContextLocalStorage | None = field(default=None, repr=False)
    describe: Callable[[T], str] | None = field(default=None, repr=False)
    key: SlotKey = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Condition name must be a non-empty string")
        if self.storage is None:
            object.__setattr__(self, "storage", default_storage())
        object.__setattr__(self, "key", SlotKey(self.name))

    def trap(self, handler: Callable[[T], U]) -> Trap[T, U]:
        """Bind ``handler`` to this condition for an upcoming scope.

        The new frame links to whichever frame is active now; the slot itself
        is left untouched until the Trap is activated.
        """
        if not callable(handler):
            raise TypeError(f"handler must be callable, got {type(handler).__name__}")
        return Trap(self, HandlerFrame(handler, self.storage.get(self.key)))

    def raise_(self, value: T) -> U:
        """Signal ``value`` to the innermost handler and return its result.

        Raises:
            UnhandledConditionError: No handler is active in this context.
        """
        return self.raise_default(value, lambda: self._unhandled(value))

    def raise_default(self, value: T, default: Callable[[], U]) -> U:
        """Signal ``value``; call ``default()`` instead if no handler is active."""
        frame = self.storage.pop(self.key)
        if frame is None:
            logger.debug("Condition %s: found no handler", self.name)
            return default()

        logger.debug("Condition %s: found handler", self.name)
        if frame.prev is not None:
            self.storage.set(self.key, frame.prev)
        try:
            return frame.handler(value)
        finally:
            # Anything the handler installed has been released by now.
            self.storage.set(self.key, frame)

    def current(self) -> HandlerFrame[T, U] | None:
        """Return the innermost active frame in this context, if any."""
        return self.storage.get(self.key)

    def handlers(self) -> list[Callable[[T], U]]:
        """Return the active handlers, innermost first."""
        frame = self.current()
        if frame is None:
            return []
        return [f.handler for f in frame.chain()]

    def is_handled(self) -> bool:
        return self.current() is not None

    def _unhandled(self, value: T) -> U:
        diagnostic = safe_repr(value)
        if self.describe is not None:
            try:
                diagnostic = self.describe(value)
            except Exception as describe_error:
                diagnostic = f"{diagnostic} (describe failed: {describe_error!r})"
        fail(self.name, value, diagnostic=diagnostic, raised_at=capture_raise_site())


class Trap(Generic[T, U]):
    """A handler frame ready to be installed. Activate it once."""

    def __init__(self, condition: Condition[T, U], frame: HandlerFrame[T, U]) -> None:
        self.condition = condition
        self.frame = frame
        self._guard: Guard | None = None

    def activate(self) -> Guard:
        """Install the frame and return the Guard that will remove it."""
        if self._guard is not None:
            raise TrapConsumedError(
                f"Trap for condition {self.condition.name!r} has already been activated"
            )
        logger.debug("Trap: pushing handler for %s", self.condition.name)
        self.condition.storage.set(self.condition.key, self.frame)
        self._guard = Guard(self.condition)
        return self._guard

    def run(self, body: Callable[..., V], *args: Any, **kwargs: Any) -> V:
        """Call ``body(*args, **kwargs)`` with the handler installed."""
        guard = self.activate()
        try:
            return body(*args, **kwargs)
        finally:
            guard.release()

    def __enter__(self) -> Guard:
        return self.activate()

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._guard is not None:
            self._guard.release()

    def __repr__(self) -> str:
        state = "active" if self._guard is not None else "ready"
        return f"Trap({self.condition.name!r}, {state})"


class GuardState(Enum):
    """Lifecycle state of a Guard."""
    ARMED = auto()     # Frame installed, restoration pending
    RELEASED = auto()  # Prior frame restored


class Guard:
    """Restores a condition's slot when the scope that installed a frame ends.

    Release pops whatever frame is on top and reinstalls its ``prev``. Only
    the first release does anything.
    """

    def __init__(self, condition: Condition[Any, Any]) -> None:
        self.condition = condition
        self.state = GuardState.ARMED

    @property
    def released(self) -> bool:
        return self.state is GuardState.RELEASED

    def release(self) -> None:
        if self.state is GuardState.RELEASED:
            return
        self.state = GuardState.RELEASED

        logger.debug("Guard: popping handler for %s", self.condition.name)
        storage = self.condition.storage
        frame = storage.pop(self.condition.key)
        if frame is not None and frame.prev is not None:
            storage.set(self.condition.key, frame.prev)

    def __enter__(self) -> Guard:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"Guard({self.condition.name!r}, {self.state.name.lower()})"


def condition(
    name: str,
    *,
    storage: ContextLocalStorage | None = None,
    describe: Callable[[Any], str] | None = None,
) -> Condition[Any, Any]:
    """Declare a new condition with a fresh slot key."""
    return Condition(name, storage=storage, describe=describe)


__all__ = [
    "Condition",
    "Guard",
    "GuardState",
    "HandlerFrame",
    "SlotKey",
    "Trap",
    "condition",
]
