"""Main CHIP-8 execution engine."""

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import decode
from chip8vm.constants import PROGRAM_START, MEMORY_SIZE, INSTRUCTION_SIZE, KEY_MASK
from chip8vm.control import ControlDirective, ControlKind
from chip8vm.errors import MemoryOverflowError, ProgramCounterError
from chip8vm.instructions.system import execute_system_instruction
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chip8vm.instructions.alu import execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import execute_misc_instruction


# Indexed by the instruction's high nibble
INSTRUCTION_TABLE = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]


def execute(state: MachineState, b1: int, b2: int, keys: int = 0) -> tuple[MachineState, ControlDirective]:
    """Execute one instruction, returning the new state and how to move the PC.

    Raises:
        BadOperationError: if the bytes match no defined opcode
        EmptyStackError, FullStackError: on stack misuse
    """
    instruction = decode(b1, b2)
    handler = INSTRUCTION_TABLE[instruction.opcode]
    return handler(state, instruction, keys & KEY_MASK)


def execute_word(state: MachineState, instruction: int, keys: int = 0) -> MachineState:
    """Execute a 16-bit instruction word and apply its directive to the PC."""
    state, directive = execute(state, (instruction >> 8) & 0xFF, instruction & 0xFF, keys)
    return apply_control(state, directive)


def apply_control(state: MachineState, directive: ControlDirective) -> MachineState:
    """Move the program counter as the directive says."""
    if directive.kind == ControlKind.JUMP:
        new_pc = directive.address
    elif directive.kind == ControlKind.SKIP:
        new_pc = int(state.pc) + 2 * INSTRUCTION_SIZE
    else:
        new_pc = int(state.pc) + INSTRUCTION_SIZE
    return state.replace(pc=jnp.asarray(new_pc, dtype=jnp.uint16))


def fetch(state: MachineState) -> tuple[int, int]:
    """Fetch the two instruction bytes at PC."""
    pc = int(state.pc)
    if pc > MEMORY_SIZE - INSTRUCTION_SIZE:
        raise ProgramCounterError(pc)
    b1, b2 = state.memory[pc:pc + INSTRUCTION_SIZE].tolist()
    return b1, b2


def tick(state: MachineState, keys: int = 0) -> MachineState:
    """Run one fetch-decode-execute-advance cycle.

    `keys` is the 16-bit mask of keys currently held. While a key wait is
    latched the machine stalls: nothing is fetched and the PC stays put.
    """
    if bool(state.keypad_waiting):
        return state
    b1, b2 = fetch(state)
    state, directive = execute(state, b1, b2, keys)
    return apply_control(state, directive)


def load_program(state: MachineState, program: bytes, offset: int = PROGRAM_START) -> MachineState:
    """Write a program image into memory; nothing is written if it does not fit."""
    data = bytes(program)
    capacity = MEMORY_SIZE - offset
    if len(data) > capacity:
        raise MemoryOverflowError(len(data), capacity)
    if not data:
        return state
    rom_array = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[offset:offset + len(data)].set(rom_array)
    return state.replace(memory=new_memory)


def read_rom(filename: str) -> bytes:
    """Read a ROM image from disk."""
    with open(filename, 'rb') as f:
        return f.read()


def load_rom(state: MachineState, filename: str) -> MachineState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    return load_program(state, read_rom(filename))
