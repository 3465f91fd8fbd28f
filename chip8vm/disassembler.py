"""CHIP-8 disassembler.

Mnemonics follow the dispatch table of the execution engine exactly, so any
instruction the engine rejects renders as ``XXXX hhhh``.
"""

from typing import Iterator

import numpy as np

from chip8vm.state import MachineState
from chip8vm.decode import decode
from chip8vm.constants import MEMORY_SIZE, INSTRUCTION_SIZE

ALU_MNEMONICS = {
    0x0: "LD   V{x:x},  V{y:x}",
    0x1: "OR   V{x:x},  V{y:x}",
    0x2: "AND  V{x:x},  V{y:x}",
    0x3: "XOR  V{x:x},  V{y:x}",
    0x4: "ADD  V{x:x},  V{y:x}",
    0x5: "SUB  V{x:x},  V{y:x}",
    0x6: "SHR  V{x:x},  <V{y:x}>",
    0x7: "SUBN V{x:x},  V{y:x}",
    0xE: "SHL  V{x:x},  <V{y:x}>",
}

MISC_MNEMONICS = {
    0x07: "LD   V{x:x},  DT",
    0x0A: "LD   V{x:x},  K",
    0x15: "LD   DT,  V{x:x}",
    0x18: "LD   ST,  V{x:x}",
    0x1E: "ADD  I,   V{x:x}",
    0x29: "LD   F,   V{x:x}",
    0x33: "LD   B,   V{x:x}",
    0x55: "LD   [I], V{x:x}",
    0x65: "LD   V{x:x},  [I]",
}

KEY_MNEMONICS = {
    0x9E: "SKP  V{x:x}",
    0xA1: "SKNP V{x:x}",
}

SYSTEM_MNEMONICS = {
    0xE0: "CLS",
    0xEE: "RET",
}

# High nibble -> mnemonic for the unambiguous groups
DIRECT_MNEMONICS = {
    0x1: "JP   0x{nnn:03x}",
    0x2: "CALL 0x{nnn:03x}",
    0x3: "SE   V{x:x},  0x{nn:02x}",
    0x4: "SNE  V{x:x},  0x{nn:02x}",
    0x6: "LD   V{x:x},  0x{nn:02x}",
    0x7: "ADD  V{x:x},  0x{nn:02x}",
    0xA: "LD   I,   0x{nnn:03x}",
    0xB: "JP   V0,  0x{nnn:03x}",
    0xC: "RND  V{x:x},  0x{nn:02x}",
    0xD: "DRW  V{x:x},  V{y:x},  0x{n:x}",
}


def translate(b1: int, b2: int) -> str:
    """Render one instruction as assembly text."""
    inst = decode(b1, b2)
    fields = dict(x=inst.x, y=inst.y, n=inst.n, nn=inst.nn, nnn=inst.nnn)

    if inst.opcode in DIRECT_MNEMONICS:
        template = DIRECT_MNEMONICS[inst.opcode]
    elif inst.opcode == 0x0:
        template = SYSTEM_MNEMONICS.get(inst.nn)
    elif inst.opcode == 0x5:
        template = "SE   V{x:x},  V{y:x}" if inst.n == 0 else None
    elif inst.opcode == 0x9:
        template = "SNE  V{x:x},  V{y:x}" if inst.n == 0 else None
    elif inst.opcode == 0x8:
        template = ALU_MNEMONICS.get(inst.n)
    elif inst.opcode == 0xE:
        template = KEY_MNEMONICS.get(inst.nn)
    else:
        template = MISC_MNEMONICS.get(inst.nn)

    if template is None:
        return f"XXXX {inst.b1:02x}{inst.b2:02x}"
    return template.format(**fields)


def disassemble(memory, start: int, count: int) -> Iterator[tuple[int, int, int, str]]:
    """Yield (address, b1, b2, text) for `count` instructions from `start`."""
    for i in range(count):
        address = start + i * INSTRUCTION_SIZE
        if address < 0 or address + INSTRUCTION_SIZE > MEMORY_SIZE:
            return
        b1, b2 = int(memory[address]), int(memory[address + 1])
        yield address, b1, b2, translate(b1, b2)


def listing(state: MachineState, radius: int = 3) -> list[str]:
    """Debugger view of the instructions around PC, current line marked with '>'."""
    pc = int(state.pc)
    memory = np.asarray(state.memory)
    lines = []
    for i in range(-radius, radius + 1):
        address = pc + i * INSTRUCTION_SIZE
        if address < 0 or address + INSTRUCTION_SIZE > MEMORY_SIZE:
            continue
        text = translate(int(memory[address]), int(memory[address + 1]))
        marker = ">" if i == 0 else " "
        lines.append(f"{marker} {address:03x} {text}")
    return lines
