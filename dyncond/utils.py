"""
Utility functions for the dyncond library.
"""

from __future__ import annotations

import linecache
import os
import sys
from dataclasses import dataclass
from typing import Any

from dyncond import config

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def _is_dyncond_internal(path: str) -> bool:
    if path.startswith("<"):
        return False
    return os.path.abspath(path).startswith(_PACKAGE_DIR + os.sep)


def safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception as repr_error:
        return f"<repr failed: {repr_error!r}>"


@dataclass(frozen=True)
class RaiseSite:
    """Source location of a raise call, plus the frames leading to it."""

    filename: str
    line: int
    function: str
    code: str | None = None
    stack: tuple[tuple[str, int, str], ...] = ()

    def __str__(self) -> str:
        return f"{self.filename}:{self.line} in {self.function}"


def capture_raise_site() -> RaiseSite | None:
    """
    Capture the first stack frame outside this package.

    Returns:
        RaiseSite for the user code that raised, or None if frame
        introspection is unavailable.
    """
    try:
        frame = sys._getframe(1)
    except (AttributeError, ValueError):  # pragma: no cover - non-CPython
        return None

    while frame is not None and _is_dyncond_internal(frame.f_code.co_filename):
        frame = frame.f_back
    if frame is None:
        return None

    filename = frame.f_code.co_filename
    line = frame.f_lineno
    code = linecache.getline(filename, line).strip() or None

    # Callers of the raise site, innermost first; only kept in debug mode.
    stack: list[tuple[str, int, str]] = []
    max_depth = 12 if config.DEBUG_CONDITIONS else 0
    current = frame.f_back
    while current is not None and len(stack) < max_depth:
        stack.append((current.f_code.co_filename, current.f_lineno, current.f_code.co_name))
        current = current.f_back

    return RaiseSite(
        filename=filename,
        line=line,
        function=frame.f_code.co_name,
        code=code,
        stack=tuple(stack),
    )


__all__ = [
    "RaiseSite",
    "capture_raise_site",
    "safe_repr",
]
