"""
dyncond - dynamically scoped conditions and handlers for Python.

A condition is a named signal whose handler is found by dynamic scope, not by
unwinding the stack. The handler's return value becomes the result of the
raise call, so the code that raised simply carries on.

Example:
    >>> from dyncond import Condition
    >>>
    >>> parse_error = Condition("parse_error")
    >>>
    >>> def parse_all(lines):
    ...     return [int(line) if line.isdigit() else parse_error.raise_(line) for line in lines]
    >>>
    >>> parse_error.trap(lambda line: 0).run(parse_all, ["1", "x", "3"])
    [1, 0, 3]
"""

from dyncond.conditions import (
    Condition,
    Guard,
    GuardState,
    HandlerFrame,
    SlotKey,
    Trap,
    condition,
)
from dyncond.config import SlotBackend
from dyncond.errors import (
    ConditionError,
    TrapConsumedError,
    UnhandledConditionError,
)
from dyncond.storage import (
    ContextLocalStorage,
    ContextVarStorage,
    InMemoryStorage,
    ThreadLocalStorage,
    create_storage,
    default_storage,
)
from dyncond.utils import RaiseSite

__version__ = "0.1.0"

__all__ = [
    # Core
    "Condition",
    "HandlerFrame",
    "SlotKey",
    "Trap",
    "Guard",
    "GuardState",
    "condition",
    # Errors
    "ConditionError",
    "TrapConsumedError",
    "UnhandledConditionError",
    "RaiseSite",
    # Storage
    "ContextLocalStorage",
    "ContextVarStorage",
    "InMemoryStorage",
    "ThreadLocalStorage",
    "SlotBackend",
    "create_storage",
    "default_storage",
]
