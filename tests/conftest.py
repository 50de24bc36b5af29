"""
Pytest configuration for dyncond tests.

Provides a ``storage`` fixture parameterized over every slot backend so the
core tests run against each of them.
"""

from __future__ import annotations

import pytest

from dyncond import Condition, ContextVarStorage, InMemoryStorage, ThreadLocalStorage
from dyncond.storage import ContextLocalStorage


@pytest.fixture(
    params=[ContextVarStorage, ThreadLocalStorage, InMemoryStorage],
    ids=["contextvar", "thread", "memory"],
)
def storage(request) -> ContextLocalStorage:
    return request.param()


@pytest.fixture
def sadness(storage: ContextLocalStorage) -> Condition[int, int]:
    return Condition("sadness", storage=storage)
