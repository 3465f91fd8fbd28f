"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import FONT_START, GLYPH_SIZE, MEMORY_SIZE, ADDRESS_MASK
from chip8vm.control import ControlDirective, ADVANCE
from chip8vm.errors import BadOperationError


def memory_span(start: int, length: int) -> jnp.ndarray:
    """Addresses start..start+length-1, wrapped into memory."""
    return (start + jnp.arange(length)) % MEMORY_SIZE


def execute_get_delay_timer(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer)), ADVANCE


def execute_wait_for_key(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """FX0A - Latch a key wait into VX; the keypad resolver releases it."""
    return state.replace(
        keypad_waiting=jnp.asarray(True),
        keypad_register=jnp.asarray(instruction.x, dtype=jnp.uint8),
    ), ADVANCE


def execute_set_delay_timer(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x]), ADVANCE


def execute_set_sound_timer(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x]), ADVANCE


def execute_add_to_index(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """FX1E - Add VX to I register, VF untouched."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & ADDRESS_MASK
    return state.replace(I=jnp.asarray(new_i, dtype=jnp.uint16)), ADVANCE


def execute_font_character(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + (int(state.V[instruction.x]) & 0xF) * GLYPH_SIZE
    return state.replace(I=jnp.asarray(font_address, dtype=jnp.uint16)), ADVANCE


def execute_bcd_conversion(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = jnp.array([value // 100, (value // 10) % 10, value % 10], dtype=jnp.uint8)
    new_memory = state.memory.at[memory_span(int(state.I), 3)].set(digits)
    return state.replace(memory=new_memory), ADVANCE


def execute_store_registers(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """FX55 - Store V0 through VX inclusive in memory starting at I."""
    count = instruction.x + 1
    new_memory = state.memory.at[memory_span(int(state.I), count)].set(state.V[:count])

    if state.quirks.load_store:
        return state.replace(memory=new_memory, I=state.I + count), ADVANCE
    return state.replace(memory=new_memory), ADVANCE


def execute_load_registers(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """FX65 - Load V0 through VX inclusive from memory starting at I."""
    count = instruction.x + 1
    new_V = state.V.at[:count].set(state.memory[memory_span(int(state.I), count)])

    if state.quirks.load_store:
        return state.replace(V=new_V, I=state.I + count), ADVANCE
    return state.replace(V=new_V), ADVANCE


MISC_INSTRUCTIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}


def execute_misc_instruction(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """Dispatch misc instructions on the low byte."""
    handler = MISC_INSTRUCTIONS.get(instruction.nn)
    if handler is None:
        raise BadOperationError(instruction.b1, instruction.b2)
    return handler(state, instruction, keys)
