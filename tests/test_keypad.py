"""Tests for keypad helpers and the key-wait resolver."""

import pytest
from chip8vm import keypad_press, execute_word as execute, tick, load_program
from chip8vm.keypad import keys_to_mask, pressed_edges, lowest_set_bit, KeypadTracker, QWERTY_LAYOUT


class TestMasks:
    """Test mask helpers."""

    def test_keys_to_mask(self):
        assert keys_to_mask([]) == 0
        assert keys_to_mask([0, 5, 0xF]) == 0b1000_0000_0010_0001

    @pytest.mark.parametrize("key", [-1, 16, 99])
    def test_keys_to_mask_rejects_unknown_keys(self, key):
        with pytest.raises(ValueError):
            keys_to_mask([key])

    def test_pressed_edges(self):
        assert pressed_edges(0b0110, 0b1100) == 0b1000
        assert pressed_edges(0xFFFF, 0xFFFF) == 0
        assert pressed_edges(0, 0x8001) == 0x8001

    def test_lowest_set_bit(self):
        assert lowest_set_bit(0) is None
        assert lowest_set_bit(0b1010_0000) == 5
        assert lowest_set_bit(0x8000) == 15
        assert lowest_set_bit(0xFFFF) == 0

    def test_tracker_reports_edges_once(self):
        tracker = KeypadTracker()
        assert tracker.update(0b0001) == 0b0001
        assert tracker.update(0b0001) == 0
        assert tracker.update(0b0011) == 0b0010
        assert tracker.update(0) == 0
        assert tracker.update(0b0001) == 0b0001

    def test_layout_covers_every_key(self):
        assert sorted(QWERTY_LAYOUT.values()) == list(range(16))
        assert QWERTY_LAYOUT["x"] == 0x0
        assert QWERTY_LAYOUT["4"] == 0xC


class TestKeyWaitResolution:
    """Test the resolver against the FX0A latch."""

    def test_resolves_lowest_bit(self, fresh_state):
        state = execute(fresh_state, 0xF70A)  # Wait for key -> V7

        state = keypad_press(state, 1 << 5)

        assert state.V[7] == 5
        assert not bool(state.keypad_waiting)

    def test_tie_break_lowest_key_wins(self, fresh_state):
        state = execute(fresh_state, 0xF20A)

        state = keypad_press(state, (1 << 0xC) | (1 << 3) | (1 << 9))

        assert state.V[2] == 3

    def test_empty_mask_keeps_waiting(self, fresh_state):
        state = execute(fresh_state, 0xF20A)

        state = keypad_press(state, 0)

        assert bool(state.keypad_waiting)
        assert state.V[2] == 0

    def test_noop_without_wait(self, fresh_state):
        state = keypad_press(fresh_state, 1 << 4)
        assert (state.V == fresh_state.V).all()
        assert not bool(state.keypad_waiting)

    def test_key_zero_resolves(self, fresh_state):
        state = execute(fresh_state, 0xF40A)
        state = state.replace(V=state.V.at[4].set(0x99))

        state = keypad_press(state, 1)

        assert state.V[4] == 0
        assert not bool(state.keypad_waiting)

    def test_program_resumes_after_wait(self, fresh_state):
        """Execution continues after FX0A once a key resolves the wait."""
        state = load_program(fresh_state, bytes([
            0xF3, 0x0A,  # LD V3, K
            0x73, 0x10,  # ADD V3, 0x10
        ]))
        state = tick(state)
        state = tick(state)  # stalled
        assert state.V[3] == 0

        state = keypad_press(state, 1 << 0xA)
        state = tick(state)

        assert state.V[3] == 0x1A
        assert state.pc == 0x204
