"""Tests for host configuration."""

import pytest
from chip8vm import Quirks
from chip8vm.config import HostConfig, build_parser


def test_defaults():
    config = HostConfig()
    assert config.ticks_per_frame == 11
    assert config.quirks == Quirks()


def test_ticks_per_frame_at_least_one():
    assert HostConfig(instruction_frequency=30, fps=60).ticks_per_frame == 1


@pytest.mark.parametrize("kwargs", [
    {"instruction_frequency": 0},
    {"fps": -1},
    {"scale": 0},
])
def test_validation(kwargs):
    with pytest.raises(ValueError):
        HostConfig(**kwargs)


def test_from_args():
    args = build_parser().parse_args([
        "game.ch8", "--frequency", "1200", "--fps", "60", "--shift_quirk", "--seed", "3",
    ])

    config = HostConfig.from_args(args)

    assert args.rom == "game.ch8"
    assert config.ticks_per_frame == 20
    assert config.quirks == Quirks(shift=True, load_store=False)
    assert config.seed == 3
    assert not args.headless


def test_as_dict():
    config = HostConfig(instruction_frequency=600)
    data = config.as_dict()
    assert data["instruction_frequency"] == 600
    assert data["ticks_per_frame"] == 10
