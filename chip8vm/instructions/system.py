"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import DecodedInstruction
from chip8vm.control import ControlDirective, ADVANCE, jump_to
from chip8vm.errors import BadOperationError
from chip8vm.stack import pop


def execute_clear_screen(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """00E0 - Clear display."""
    return state.replace(framebuffer=jnp.zeros_like(state.framebuffer)), ADVANCE


def execute_return(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack)
    return state.replace(stack=stack), jump_to(address)


SYSTEM_INSTRUCTIONS = {
    0xE0: execute_clear_screen,
    0xEE: execute_return,
}


def execute_system_instruction(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """Dispatch system instructions on the low byte."""
    handler = SYSTEM_INSTRUCTIONS.get(instruction.nn)
    if handler is None:
        raise BadOperationError(instruction.b1, instruction.b2)
    return handler(state, instruction, keys)
