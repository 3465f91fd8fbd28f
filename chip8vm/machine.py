"""Thread-safe host facade around the functional CHIP-8 engine."""

import threading
from typing import Optional

import jax

from chip8vm.state import MachineState, Quirks, create_state
from chip8vm.constants import PROGRAM_START
from chip8vm.errors import Chip8Error, MachineHaltedError
from chip8vm.emulator import tick, load_program, read_rom
from chip8vm.timers import frame
from chip8vm.keypad import keypad_press
from chip8vm.logging import EmulatorLogger


class Machine:
    """One CHIP-8 machine owned by a host loop.

    Every operation runs under a single lock around the whole state, and
    readers get the current immutable state from `snapshot()`. The first
    fatal error halts the machine: ticks, frame steps and key presses
    raise `MachineHaltedError` until `reset()` or `load()`.
    """

    def __init__(self, seed: int = 0, quirks: Quirks = Quirks(), logger: Optional[EmulatorLogger] = None):
        self.seed = seed
        self.logger = logger or EmulatorLogger(log_level="WARNING")
        self._lock = threading.Lock()
        self._program = b""
        self._quirks = quirks
        self._state = self._fresh_state()
        self.error: Optional[Chip8Error] = None

    def _fresh_state(self) -> MachineState:
        return create_state(jax.random.PRNGKey(self.seed), self._quirks)

    @property
    def halted(self) -> bool:
        return self.error is not None

    @property
    def quirks(self) -> Quirks:
        return self._quirks

    @quirks.setter
    def quirks(self, quirks: Quirks):
        with self._lock:
            self._quirks = quirks
            self._state = self._state.replace(quirks=quirks)

    def snapshot(self) -> MachineState:
        """Current state; immutable, so safe to hand to a renderer or debugger."""
        with self._lock:
            return self._state

    def load(self, program: bytes, source: Optional[str] = None):
        """Replace the machine with a fresh one running `program`.

        Raises:
            MemoryOverflowError: if the image does not fit; the machine is left unchanged
        """
        program = bytes(program)
        with self._lock:
            self._state = load_program(self._fresh_state(), program)
            self._program = program
            self.error = None
        self.logger.log_program_loaded(len(program), PROGRAM_START, source)

    def load_rom(self, filename: str):
        """Load a ROM file from disk."""
        self.load(read_rom(filename), source=filename)

    def reset(self):
        """Restart the last loaded program from a fresh state."""
        with self._lock:
            self._state = load_program(self._fresh_state(), self._program)
            self.error = None
            quirks = self._quirks
        self.logger.log_reset(quirks)

    def _run(self, step):
        with self._lock:
            if self.error is not None:
                raise MachineHaltedError(self.error)
            try:
                self._state = step(self._state)
            except Chip8Error as e:
                self.error = e
                self.logger.log_fatal(e, self._state)
                raise
            return self._state

    def tick(self, keys: int = 0) -> MachineState:
        """Run one instruction with `keys` held."""
        return self._run(lambda state: tick(state, keys))

    def frame(self) -> MachineState:
        """Run one frame step (timers and display hand-off)."""
        return self._run(frame)

    def keypad_press(self, edges: int) -> MachineState:
        """Report newly pressed keys to resolve a pending key wait."""
        return self._run(lambda state: keypad_press(state, edges))

    def run_frame(self, keys: int = 0, ticks: int = 11) -> MachineState:
        """Run `ticks` instructions, then one frame step."""
        for _ in range(ticks):
            self.tick(keys)
        return self.frame()
