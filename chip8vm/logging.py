"""Console logging utilities for the CHIP-8 machine and its hosts.

This module provides a small levelled console logger, an emulator-specific
logger for load/reset/fatal-error events, and a tqdm progress bar for long
headless runs.
"""

import time
import sys
from typing import Any, Optional

from tqdm import tqdm

from chip8vm.disassembler import listing

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
}
RESET_COLOR = "\033[0m"


class ConsoleLogger:
    """Levelled console logger with an elapsed-time prefix and optional colors.

    Colors are only used when stdout is a terminal.
    """

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        level = log_level.upper()
        if level not in LEVELS:
            raise ValueError(f"Unknown log level '{log_level}'. Available: {list(LEVELS)}")
        self.name = name
        self.threshold = LEVELS.index(level)
        self.use_colors = use_colors and sys.stdout.isatty()
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

    def _format_message(self, level: str, message: str) -> str:
        timestamp = f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        level_str = f"[{level:>8s}]"
        if self.use_colors:
            level_str = f"{LEVEL_COLORS[level]}{level_str}{RESET_COLOR}"
        return f"{timestamp}{level_str}[{self.name}] {message}"

    def log(self, level: str, message: str):
        """Print `message` if `level` is at or above the logger's threshold."""
        if LEVELS.index(level) >= self.threshold:
            print(self._format_message(level, message), flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)


class EmulatorLogger(ConsoleLogger):
    """Logger for machine lifecycle events."""

    def __init__(self, name: str = "chip8vm", **kwargs):
        super().__init__(name, **kwargs)

    def log_program_loaded(self, size: int, origin: int, source: Optional[str] = None):
        """Log a successful program image load."""
        where = f" from {source}" if source else ""
        self.info(f"Loaded {size} bytes at 0x{origin:03X}{where}")

    def log_reset(self, quirks: Any = None):
        self.info(f"Machine reset (quirks: {quirks})")

    def log_fatal(self, error: Exception, state: Any = None):
        """Log a fatal processor error with the registers needed to locate it."""
        self.error(str(error))
        if state is None:
            return
        self.error(f"  PC=0x{int(state.pc):03X} I=0x{int(state.I):03X} SP={int(state.stack.pointer)}")
        for line in listing(state, radius=1):
            self.error(f"  {line}")

    def log_run_summary(self, ticks: int, frames: int, elapsed: float):
        """Log throughput of a finished run."""
        rate = ticks / elapsed if elapsed > 0 else 0.0
        self.info("=" * 60)
        self.info(f"Ran {ticks:,} instructions over {frames:,} frames in {elapsed:.2f}s")
        self.info(f"  Effective speed: {rate:,.0f} Hz")
        self.info("=" * 60)

    def log_config(self, config: dict):
        """Log host configuration, one key per line."""
        self.info("Configuration:")
        for key, value in config.items():
            self.info(f"  {key}: {value}")


def progress_bar(n: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Build a tqdm progress bar counting frames of a headless run."""
    if desc is None:
        desc = f"Running ({n:,} frames)"

    for kwarg in ("total", "unit"):
        kwargs.pop(kwarg, None)

    return tqdm(total=n, desc=desc, unit="frame", **kwargs)
