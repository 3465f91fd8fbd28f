"""CHIP-8 control flow instructions."""

from chip8vm.state import MachineState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import INSTRUCTION_SIZE
from chip8vm.control import ControlDirective, jump_to, skip_if
from chip8vm.errors import BadOperationError
from chip8vm.stack import push


def execute_jump(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """1NNN - Jump to address NNN."""
    return state, jump_to(instruction.nnn)


def execute_call(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """2NNN - Call subroutine at NNN."""
    state = state.replace(stack=push(state.stack, int(state.pc) + INSTRUCTION_SIZE))
    return execute_jump(state, instruction, keys)


def make_skip_instruction(condition_fn, register_form: bool = False):
    """Factory for skip instructions.

    Register forms (5XY0, 9XY0) only define a zero low nibble.
    """
    def skip_instruction(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
        if register_form and instruction.n != 0:
            raise BadOperationError(instruction.b1, instruction.b2)
        return state, skip_if(condition_fn(state, instruction, keys))
    return skip_instruction


def key_down(keys: int, key: int) -> bool:
    """Test one key in a 16-bit level mask; register values above 0xF never match."""
    return key < 16 and bool(keys & (1 << key))


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst, keys: int(state.V[inst.x]) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst, keys: int(state.V[inst.x]) != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst, keys: int(state.V[inst.x]) == int(state.V[inst.y]),
    register_form=True,
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst, keys: int(state.V[inst.x]) != int(state.V[inst.y]),
    register_form=True,
)

execute_skip_if_key_pressed = make_skip_instruction(
    lambda state, inst, keys: key_down(keys, int(state.V[inst.x]))
)

execute_skip_if_key_not_pressed = make_skip_instruction(
    lambda state, inst, keys: not key_down(keys, int(state.V[inst.x]))
)


def execute_jump_with_offset(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """BNNN - Jump to address NNN + V0."""
    return state, jump_to(instruction.nnn + int(state.V[0]))


KEY_INSTRUCTIONS = {
    0x9E: execute_skip_if_key_pressed,
    0xA1: execute_skip_if_key_not_pressed,
}


def execute_skip_if_key(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """EX9E/EXA1 - Skip if key VX pressed/not pressed."""
    handler = KEY_INSTRUCTIONS.get(instruction.nn)
    if handler is None:
        raise BadOperationError(instruction.b1, instruction.b2)
    return handler(state, instruction, keys)
