"""Tests for miscellaneous instructions (Fxxx)."""

import pytest
from chip8vm import execute_word as execute, BadOperationError, FONT_START, FONT_DATA
from conftest import set_registers, as_bytes


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = fresh_state

        state = execute(state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestBCD:
    """Test BCD conversion."""

    @pytest.mark.parametrize("value,digits", [(123, [1, 2, 3]), (0, [0, 0, 0]), (255, [2, 5, 5]), (156, [1, 5, 6]), (7, [0, 0, 7]), (40, [0, 4, 0])])
    def test_bcd_conversion(self, fresh_state, value, digits):
        """FX33 - Hundreds, tens and ones at I, I+1, I+2."""
        state = set_registers(fresh_state, V4=value)
        state = execute(state, 0xA300)
        state = execute(state, 0xF433)

        assert [int(state.memory[0x300 + i]) for i in range(3)] == digits
        assert state.I == 0x300

    def test_bcd_wraps_memory(self, fresh_state):
        """FX33 at the end of memory wraps to address 0."""
        state = set_registers(fresh_state, V0=219)
        state = execute(state, 0xAFFE)
        state = execute(state, 0xF033)

        assert state.memory[0xFFE] == 2
        assert state.memory[0xFFF] == 1
        assert state.memory[0x000] == 9


class TestFont:
    """Test font character addressing."""

    def test_font_all_characters(self, fresh_state):
        """FX29 - I points at 5-byte glyphs at the base of memory."""
        state = fresh_state

        for digit in range(16):
            state = execute(state, 0x6000 | digit)  # V0 = digit
            state = execute(state, 0xF029)

            expected = FONT_START + digit * 5
            assert state.I == expected, f"Font address wrong for digit {digit:X}"

    def test_font_uses_low_nibble(self, fresh_state):
        """FX29 - Only the low nibble of VX selects the glyph."""
        state = set_registers(fresh_state, V3=0xAB)
        state = execute(state, 0xF329)
        assert state.I == 0xB * 5

    def test_font_loaded_at_base(self, fresh_state):
        """The glyph table is present in a fresh state."""
        assert [int(b) for b in fresh_state.memory[:len(FONT_DATA)]] == FONT_DATA


class TestIndexArithmetic:
    """Test FX1E."""

    def test_add_to_index(self, fresh_state):
        """FX1E - Add VX to I register."""
        state = set_registers(fresh_state, V0=0x10, VF=0x55)
        state = execute(state, 0xA300)
        state = execute(state, 0xF01E)

        assert state.I == 0x310
        assert state.V[15] == 0x55  # VF untouched

    def test_add_to_index_past_twelve_bits(self, fresh_state):
        """FX1E - I is a 16-bit register; no 12-bit wrap or flag."""
        state = set_registers(fresh_state, V0=0xFF)
        state = execute(state, 0xAF80)
        state = execute(state, 0xF01E)

        assert state.I == 0x107F
        assert state.V[15] == 0


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_inclusive_of_x(self, fresh_state):
        """FX55 - Stores V0 through VX inclusive, nothing past it."""
        state = set_registers(fresh_state, V0=1, V1=2, V2=3, V3=4)
        state = execute(state, 0xA400)
        state = execute(state, 0xF255)  # Store V0-V2

        assert [int(state.memory[0x400 + i]) for i in range(4)] == [1, 2, 3, 0]
        assert state.I == 0x400  # I unchanged without the quirk

    def test_load_inclusive_of_x(self, fresh_state):
        """FX65 - Loads V0 through VX inclusive, nothing past it."""
        state = fresh_state.replace(memory=fresh_state.memory.at[0x400:0x404].set(as_bytes([9, 8, 7, 6])))
        state = execute(state, 0xA400)
        state = execute(state, 0xF265)  # Load V0-V2

        assert [int(state.V[i]) for i in range(4)] == [9, 8, 7, 0]
        assert state.I == 0x400

    def test_store_all_registers(self, fresh_state):
        """FX55 with X=F transfers all sixteen registers."""
        state = fresh_state.replace(V=as_bytes(range(0x10, 0x20)))
        state = execute(state, 0xA500)
        state = execute(state, 0xFF55)

        assert [int(b) for b in state.memory[0x500:0x510]] == list(range(0x10, 0x20))

    def test_store_load_round_trip(self, fresh_state):
        state = set_registers(fresh_state, V0=1, V1=2, V2=3)
        state = execute(state, 0xA300)
        state = execute(state, 0xF255)

        state = set_registers(state, V0=0, V1=0, V2=0)
        state = execute(state, 0xF265)

        assert [int(state.V[i]) for i in range(3)] == [1, 2, 3]

    def test_store_load_quirk(self, load_store_quirk_state):
        """With the load/store quirk, I advances by X + 1."""
        state = set_registers(load_store_quirk_state, V0=1, V1=2)
        state = execute(state, 0xA400)

        state = execute(state, 0xF155)  # Store V0-V1
        assert state.I == 0x400 + 2

        state = execute(state, 0xA400)
        state = set_registers(state, V0=0, V1=0)
        state = execute(state, 0xF165)  # Load V0-V1
        assert state.V[0] == 1
        assert state.V[1] == 2
        assert state.I == 0x400 + 2


class TestKeyWait:
    """Test FX0A latching; resolution lives in test_keypad."""

    def test_wait_latches_and_advances(self, fresh_state):
        state = execute(fresh_state, 0xF30A)

        assert bool(state.keypad_waiting)
        assert state.keypad_register == 3
        assert state.pc == fresh_state.pc + 2


@pytest.mark.parametrize("instruction", [0xF000, 0xF008, 0xF01F, 0xF030, 0xF056, 0xF0FF])
def test_undefined_misc_instructions(fresh_state, instruction):
    """Unknown FXNN sub-codes are fatal."""
    with pytest.raises(BadOperationError):
        execute(fresh_state, instruction)
