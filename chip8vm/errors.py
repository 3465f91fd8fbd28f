"""Fatal processor errors raised by the execution engine."""


class Chip8Error(Exception):
    """Base class for every fatal CHIP-8 processor error."""

    def __init__(self, detail: str):
        super().__init__(f"PROCESSOR ERROR: {detail}")
        self.detail = detail


class BadOperationError(Chip8Error):
    """Instruction bytes match no defined opcode."""

    def __init__(self, b1: int, b2: int):
        super().__init__(f"Bad operation with bytes 0x{b1:02X}{b2:02X}")
        self.b1 = b1
        self.b2 = b2


class EmptyStackError(Chip8Error):
    """Return executed with no matching call."""

    def __init__(self):
        super().__init__("Tried to pop off empty stack")


class FullStackError(Chip8Error):
    """Call nesting exceeds the stack capacity."""

    def __init__(self):
        super().__init__("Tried to push onto full stack")


class ProgramCounterError(Chip8Error):
    """Fetch would read past the end of memory."""

    def __init__(self, pc: int):
        super().__init__(f"Program counter out of bounds: 0x{pc:03X}")
        self.pc = pc


class MemoryOverflowError(Chip8Error):
    """Program image does not fit between the load offset and the end of memory."""

    def __init__(self, size: int, capacity: int):
        super().__init__(f"Memory overflowed: {size} bytes, room for {capacity}")
        self.size = size
        self.capacity = capacity


class MachineHaltedError(Chip8Error):
    """Machine already failed and must be reset or reloaded."""

    def __init__(self, cause: Chip8Error):
        super().__init__(f"Machine halted after fatal error ({cause.detail})")
        self.cause = cause
