"""Guard lifecycle and Trap activation rules."""

from __future__ import annotations

import pytest

from dyncond import GuardState, TrapConsumedError


class TestGuard:
    def test_guard_armed_until_release(self, sadness) -> None:
        guard = sadness.trap(lambda i: i).activate()
        assert guard.state is GuardState.ARMED
        assert sadness.is_handled()

        guard.release()
        assert guard.released
        assert not sadness.is_handled()

    def test_release_is_idempotent(self, sadness) -> None:
        with sadness.trap(lambda i: 0):
            outer = sadness.current()
            guard = sadness.trap(lambda i: 1).activate()

            guard.release()
            guard.release()

            assert sadness.current() is outer
            assert sadness.raise_(0) == 0

    def test_explicit_release_inside_with_block(self, sadness) -> None:
        with sadness.trap(lambda i: 0):
            with sadness.trap(lambda i: 1) as guard:
                guard.release()
                assert sadness.raise_(0) == 0
            # Exiting the block must not pop the outer handler.
            assert sadness.raise_(0) == 0
        assert sadness.current() is None

    def test_guard_context_manager(self, sadness) -> None:
        with sadness.trap(lambda i: i + 1).activate() as guard:
            assert sadness.raise_(1) == 2
        assert guard.state is GuardState.RELEASED

    def test_repr_shows_state(self, sadness) -> None:
        guard = sadness.trap(lambda i: i).activate()
        assert repr(guard) == "Guard('sadness', armed)"
        guard.release()
        assert repr(guard) == "Guard('sadness', released)"


class TestTrapActivation:
    def test_trap_activates_once(self, sadness) -> None:
        trap = sadness.trap(lambda i: i)
        trap.run(lambda: None)

        with pytest.raises(TrapConsumedError):
            trap.run(lambda: None)
        assert sadness.current() is None

    def test_trap_does_not_touch_slot_before_activation(self, sadness) -> None:
        trap = sadness.trap(lambda i: i)
        assert sadness.current() is None
        assert repr(trap) == "Trap('sadness', ready)"

    def test_consumed_error_is_runtime_error(self, sadness) -> None:
        trap = sadness.trap(lambda i: i)
        with trap:
            pass
        with pytest.raises(RuntimeError):
            trap.activate()
