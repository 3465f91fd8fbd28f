"""Headless host loop: drives a machine frame by frame without a window."""

import time
from typing import Callable, NamedTuple, Optional

from chip8vm.machine import Machine
from chip8vm.state import MachineState
from chip8vm.keypad import KeypadTracker
from chip8vm.logging import progress_bar


class RunStats(NamedTuple):
    frames: int
    ticks: int
    elapsed: float


def run_headless(
    machine: Machine,
    frames: int,
    ticks_per_frame: int,
    keys: Optional[Callable[[int], int]] = None,
    on_display: Optional[Callable[[MachineState], None]] = None,
    progress: bool = False,
) -> RunStats:
    """Run `frames` frames of `ticks_per_frame` instructions each.

    Args:
        machine: Loaded machine to drive
        frames: Number of frame steps to run
        ticks_per_frame: Instructions executed before each frame step
        keys: Maps the frame number to the 16-bit mask of keys held during it
        on_display: Called with the state when the frame drew to the screen
        progress: Show a tqdm progress bar

    Returns:
        RunStats with the frames and instructions actually run

    Raises:
        Chip8Error: the first fatal processor error, unchanged
    """
    tracker = KeypadTracker()
    bar = progress_bar(frames) if progress else None
    start = time.time()
    ticks = 0

    try:
        for frame_number in range(frames):
            held = keys(frame_number) if keys is not None else 0
            edges = tracker.update(held)
            if edges:
                machine.keypad_press(edges)

            for _ in range(ticks_per_frame):
                machine.tick(held)
                ticks += 1

            # The frame step clears the flag, so sample it first
            state = machine.snapshot()
            if on_display is not None and bool(state.display_changed):
                on_display(state)
            machine.frame()

            if bar is not None:
                bar.update(1)
    finally:
        if bar is not None:
            bar.close()

    elapsed = time.time() - start
    machine.logger.log_run_summary(ticks, frames, elapsed)
    return RunStats(frames=frames, ticks=ticks, elapsed=elapsed)
