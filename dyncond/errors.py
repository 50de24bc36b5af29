"""Error types raised by the condition system."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, NoReturn

if TYPE_CHECKING:
    from dyncond.utils import RaiseSite

logger = logging.getLogger(__name__)


class ConditionError(Exception):
    """Base class for errors raised by dyncond itself."""


class UnhandledConditionError(ConditionError):
    """Raised when a condition is raised with no handler and no default.

    An unhandled condition is a programming error: either install a handler
    with ``cond.trap(...)`` around the code that raises, or use
    ``cond.raise_default(value, default)`` to supply a fallback.

    Attributes:
        condition_name: Name of the condition that went unhandled.
        value: The raised value.
        raised_at: Source location of the ``raise_`` call, when available.
    """

    def __init__(
        self,
        condition_name: str,
        value: Any,
        *,
        diagnostic: str,
        raised_at: RaiseSite | None = None,
    ) -> None:
        self.condition_name = condition_name
        self.value = value
        self.raised_at = raised_at
        message = f"Unhandled condition: {condition_name}: {diagnostic}"
        if raised_at is not None:
            message += f"\n  raised at {raised_at}"
            if raised_at.code:
                message += f"\n    {raised_at.code}"
            for filename, line, function in raised_at.stack:
                message += f"\n  called from {filename}:{line} in {function}"
        super().__init__(message)


class TrapConsumedError(ConditionError, RuntimeError):
    """Raised when the same Trap is activated a second time."""


def fail(
    condition_name: str,
    value: Any,
    *,
    diagnostic: str,
    raised_at: RaiseSite | None = None,
) -> NoReturn:
    """Report an unhandled condition by raising ``UnhandledConditionError``."""
    logger.debug("Unhandled condition %s raised at %s", condition_name, raised_at)
    raise UnhandledConditionError(
        condition_name,
        value,
        diagnostic=diagnostic,
        raised_at=raised_at,
    )


__all__ = [
    "ConditionError",
    "TrapConsumedError",
    "UnhandledConditionError",
    "fail",
]
