"""Host configuration for running a CHIP-8 machine."""

import argparse
import dataclasses

from chip8vm.state import Quirks


@dataclasses.dataclass
class HostConfig:
    """Settings a host loop needs to drive the machine.

    Attributes:
        instruction_frequency: Target instructions per second (typically 500-1000)
        fps: Frame steps per second; timers count down at this rate
        scale: Upscaling factor for rendered frames
        color_scheme: Rendering color scheme name
        seed: Seed for the machine's random byte source
        quirks: Opcode quirk toggles
        tone_hz: Frequency of the tone played while sound is active
    """
    instruction_frequency: int = 700
    fps: int = 60
    scale: int = 10
    color_scheme: str = "classic"
    seed: int = 0
    quirks: Quirks = dataclasses.field(default_factory=Quirks)
    tone_hz: float = 440.0

    def __post_init__(self):
        if self.instruction_frequency <= 0:
            raise ValueError(f"instruction_frequency must be positive, got {self.instruction_frequency}")
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.scale < 1:
            raise ValueError(f"scale must be at least 1, got {self.scale}")

    @property
    def ticks_per_frame(self) -> int:
        """Number of instructions to run between two frame steps."""
        return max(1, self.instruction_frequency // self.fps)

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "HostConfig":
        """Build a config from parsed command line arguments."""
        return cls(
            instruction_frequency=args.frequency,
            fps=args.fps,
            scale=args.scale,
            color_scheme=args.color_scheme,
            seed=args.seed,
            quirks=Quirks(shift=args.shift_quirk, load_store=args.load_store_quirk),
            tone_hz=args.tone,
        )

    def as_dict(self) -> dict:
        return dataclasses.asdict(self) | {"ticks_per_frame": self.ticks_per_frame}


def build_parser() -> argparse.ArgumentParser:
    """Command line parser shared by the hosts."""
    parser = argparse.ArgumentParser(description="Run a CHIP-8 program")
    parser.add_argument("rom", type=str, help="Path to the CHIP-8 ROM file")
    parser.add_argument(
        "--frequency",
        type=int,
        default=700,
        help="Instructions per second (default: 700)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=60,
        help="Frame steps per second (default: 60)",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Window upscaling factor (default: 10)",
    )
    parser.add_argument(
        "--color_scheme",
        type=str,
        default="classic",
        help="Color scheme: classic, amber, white, blue, retro (default: classic)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for the RND instruction (default: 0)",
    )
    parser.add_argument(
        "--shift_quirk",
        action="store_true",
        help="8XY6/8XYE shift VY into VX",
    )
    parser.add_argument(
        "--load_store_quirk",
        action="store_true",
        help="FX55/FX65 advance I past the transferred registers",
    )
    parser.add_argument(
        "--tone",
        type=float,
        default=440.0,
        help="Beep frequency in Hz (default: 440)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Print frames to the console instead of opening a window",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=600,
        help="Frames to run in headless mode (default: 600)",
    )
    return parser
