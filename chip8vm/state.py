"""CHIP-8 machine state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8vm.constants import (
    MEMORY_SIZE, REGISTER_COUNT, STACK_SIZE, PROGRAM_START, FONT_START, FONT_DATA, FRAMEBUFFER_SIZE
)


@dataclass(frozen=True)
class Quirks:
    """Host-owned toggles for the two ambiguous opcode families.

    Attributes:
        shift: 8XY6/8XYE shift VY into VX instead of shifting VX in place
        load_store: FX55/FX65 advance I by X + 1 after the transfer
    """
    shift: bool = field(pytree_node=False, default=False)
    load_store: bool = field(pytree_node=False, default=False)


class StackState(PyTreeNode):
    """Return address stack for subroutine calls."""
    data: jnp.ndarray
    pointer: jnp.ndarray


class MachineState(PyTreeNode):
    """Main CHIP-8 machine state."""
    rng: jax.Array
    memory: jnp.ndarray
    V: jnp.ndarray
    I: jnp.ndarray
    pc: jnp.ndarray
    stack: StackState
    delay_timer: jnp.ndarray
    sound_timer: jnp.ndarray
    framebuffer: jnp.ndarray
    display_changed: jnp.ndarray
    sound_active: jnp.ndarray
    keypad_waiting: jnp.ndarray
    keypad_register: jnp.ndarray
    quirks: Quirks = field(pytree_node=False, default=Quirks())


def create_stack() -> StackState:
    """Create an empty stack."""
    return StackState(
        data=jnp.zeros(STACK_SIZE, dtype=jnp.uint16),
        pointer=jnp.zeros((), dtype=jnp.uint8),
    )


def create_state(rng: jax.Array = None, quirks: Quirks = Quirks()) -> MachineState:
    """Create initial machine state with font data loaded and PC at the program offset."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    memory = jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8)
    memory = memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(jnp.array(FONT_DATA, dtype=jnp.uint8))
    return MachineState(
        rng=rng,
        memory=memory,
        V=jnp.zeros(REGISTER_COUNT, dtype=jnp.uint8),
        I=jnp.zeros((), dtype=jnp.uint16),
        pc=jnp.asarray(PROGRAM_START, dtype=jnp.uint16),
        stack=create_stack(),
        delay_timer=jnp.zeros((), dtype=jnp.uint8),
        sound_timer=jnp.zeros((), dtype=jnp.uint8),
        framebuffer=jnp.zeros(FRAMEBUFFER_SIZE, dtype=jnp.uint8),
        display_changed=jnp.zeros((), dtype=jnp.bool_),
        sound_active=jnp.zeros((), dtype=jnp.bool_),
        keypad_waiting=jnp.zeros((), dtype=jnp.bool_),
        keypad_register=jnp.zeros((), dtype=jnp.uint8),
        quirks=quirks,
    )
