"""Environment configuration parsing."""

from __future__ import annotations

import pytest

from dyncond import ContextLocalStorage, default_storage
from dyncond.config import STORAGE_ENV_KEY, SlotBackend, configured_backend
from dyncond.utils import RaiseSite, safe_repr


class TestConfiguredBackend:
    def test_unset_defaults_to_contextvar(self) -> None:
        assert configured_backend({}) is SlotBackend.CONTEXTVAR

    def test_blank_defaults_to_contextvar(self) -> None:
        assert configured_backend({STORAGE_ENV_KEY: "  "}) is SlotBackend.CONTEXTVAR

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("thread", SlotBackend.THREAD),
            ("Memory", SlotBackend.MEMORY),
            (" contextvar ", SlotBackend.CONTEXTVAR),
        ],
    )
    def test_named_backends(self, raw, expected) -> None:
        assert configured_backend({STORAGE_ENV_KEY: raw}) is expected

    def test_unknown_backend_lists_choices(self) -> None:
        with pytest.raises(ValueError, match="contextvar, thread, memory"):
            configured_backend({STORAGE_ENV_KEY: "redis"})

    def test_reads_process_environment(self, monkeypatch) -> None:
        monkeypatch.setenv(STORAGE_ENV_KEY, "thread")
        assert configured_backend() is SlotBackend.THREAD


def test_default_storage_is_shared() -> None:
    storage = default_storage()
    assert storage is default_storage()
    assert isinstance(storage, ContextLocalStorage)


class TestDiagnostics:
    def test_safe_repr_plain_value(self) -> None:
        assert safe_repr([1, "a"]) == "[1, 'a']"

    def test_raise_site_str(self) -> None:
        site = RaiseSite(filename="app.py", line=12, function="load")
        assert str(site) == "app.py:12 in load"
