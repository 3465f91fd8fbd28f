"""CHIP-8 virtual machine package."""

from chip8vm.state import MachineState, StackState, Quirks, create_state
from chip8vm.emulator import execute, execute_word, apply_control, fetch, tick, load_program, load_rom
from chip8vm.timers import frame
from chip8vm.keypad import keypad_press, keys_to_mask, pressed_edges, KeypadTracker
from chip8vm.decode import DecodedInstruction, decode, decode_word
from chip8vm.control import ControlDirective, ControlKind, ADVANCE, SKIP_NEXT, jump_to
from chip8vm.errors import (
    Chip8Error, BadOperationError, EmptyStackError, FullStackError,
    ProgramCounterError, MemoryOverflowError, MachineHaltedError,
)
from chip8vm.disassembler import translate, disassemble, listing
from chip8vm.machine import Machine
from chip8vm.rendering import framebuffer_to_rgb, framebuffer_to_text, create_color_scheme
from chip8vm.constants import *

__all__ = [
    "MachineState",
    "StackState",
    "Quirks",
    "create_state",
    "execute",
    "execute_word",
    "apply_control",
    "fetch",
    "tick",
    "frame",
    "keypad_press",
    "keys_to_mask",
    "pressed_edges",
    "KeypadTracker",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "decode_word",
    "ControlDirective",
    "ControlKind",
    "ADVANCE",
    "SKIP_NEXT",
    "jump_to",
    "Chip8Error",
    "BadOperationError",
    "EmptyStackError",
    "FullStackError",
    "ProgramCounterError",
    "MemoryOverflowError",
    "MachineHaltedError",
    "translate",
    "disassemble",
    "listing",
    "Machine",
    "framebuffer_to_rgb",
    "framebuffer_to_text",
    "create_color_scheme",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "FRAMEBUFFER_SIZE",
    "STACK_SIZE",
]
