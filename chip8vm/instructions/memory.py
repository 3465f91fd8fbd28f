"""CHIP-8 memory and register operations."""

import jax
import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import DecodedInstruction
from chip8vm.control import ControlDirective, ADVANCE


def execute_set(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """6XNN - Set VX = NN."""
    return state.replace(V=state.V.at[instruction.x].set(instruction.nn)), ADVANCE


def execute_add(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """7XNN - Add NN to VX, no carry flag."""
    result = (int(state.V[instruction.x]) + instruction.nn) & 0xFF
    return state.replace(V=state.V.at[instruction.x].set(result)), ADVANCE


def execute_set_index(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.asarray(instruction.nnn, dtype=jnp.uint16)), ADVANCE


def random_byte(rng: jax.Array) -> tuple[jax.Array, int]:
    """Draw one byte from the state's PRNG key, returning the advanced key."""
    key, subkey = jax.random.split(rng)
    return key, int(jax.random.bits(subkey, shape=(), dtype=jnp.uint8))


def execute_random(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """CXNN - Set VX = random & NN."""
    key, value = random_byte(state.rng)
    return state.replace(V=state.V.at[instruction.x].set(value & instruction.nn), rng=key), ADVANCE
