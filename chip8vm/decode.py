"""CHIP-8 instruction decoding."""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    b1: int      # Byte at the lower address
    b2: int      # Byte at the higher address
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate, kk)
    nnn: int     # Last 12 bits (12-bit address)

    @property
    def raw(self) -> int:
        return (self.b1 << 8) | self.b2


def get_nnn(b1: int, b2: int) -> int:
    """Extract the 12-bit address from an instruction."""
    return ((b1 << 8) | b2) & 0x0FFF


def decode(b1: int, b2: int) -> DecodedInstruction:
    """Split two instruction bytes into nibbles and composite operands."""
    b1 = int(b1) & 0xFF
    b2 = int(b2) & 0xFF
    return DecodedInstruction(
        b1=b1,
        b2=b2,
        opcode=b1 >> 4,
        x=b1 & 0x0F,
        y=b2 >> 4,
        n=b2 & 0x0F,
        nn=b2,
        nnn=get_nnn(b1, b2),
    )


def decode_word(instruction: int) -> DecodedInstruction:
    """Decode a big-endian 16-bit instruction word."""
    return decode((instruction >> 8) & 0xFF, instruction & 0xFF)
