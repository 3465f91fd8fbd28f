"""Program counter control directives returned by instruction handlers."""

import enum
from typing import NamedTuple


class ControlKind(enum.IntEnum):
    ADVANCE = 0
    SKIP = 1
    JUMP = 2


class ControlDirective(NamedTuple):
    """How the tick cycle moves the program counter after an instruction."""
    kind: ControlKind
    address: int = 0


ADVANCE = ControlDirective(ControlKind.ADVANCE)
SKIP_NEXT = ControlDirective(ControlKind.SKIP)


def jump_to(address: int) -> ControlDirective:
    return ControlDirective(ControlKind.JUMP, int(address))


def skip_if(condition) -> ControlDirective:
    """SKIP_NEXT when condition holds, ADVANCE otherwise."""
    return SKIP_NEXT if bool(condition) else ADVANCE
