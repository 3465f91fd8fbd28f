"""CHIP-8 keypad: edge detection helpers and the key-wait resolver."""

from typing import Iterable, Optional

import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.constants import KEY_COUNT, KEY_MASK

# Host keyboard characters -> hex keypad, the conventional 4x4 layout
#   1 2 3 4      1 2 3 C
#   Q W E R  ->  4 5 6 D
#   A S D F      7 8 9 E
#   Z X C V      A 0 B F
QWERTY_LAYOUT = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}


def keys_to_mask(keys: Iterable[int]) -> int:
    """Convert held key indices to a 16-bit level mask."""
    mask = 0
    for key in keys:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"Key {key} outside keypad range 0x0-0xF")
        mask |= 1 << key
    return mask


def pressed_edges(previous: int, current: int) -> int:
    """Keys down in `current` that were up in `previous`."""
    return current & ~previous & KEY_MASK


def lowest_set_bit(mask: int) -> Optional[int]:
    """Index of the lowest set bit of a 16-bit mask, or None if it is empty."""
    mask &= KEY_MASK
    if mask == 0:
        return None
    return (mask & -mask).bit_length() - 1


class KeypadTracker:
    """Turns consecutive level polls into newly-pressed edges."""

    def __init__(self):
        self.previous = 0

    def update(self, current: int) -> int:
        edges = pressed_edges(self.previous, current)
        self.previous = current & KEY_MASK
        return edges

    def reset(self):
        self.previous = 0


def keypad_press(state: MachineState, edges: int) -> MachineState:
    """Resolve a pending key wait with the lowest newly pressed key.

    A no-op when no wait is latched or when `edges` is empty.
    """
    if not bool(state.keypad_waiting):
        return state
    key = lowest_set_bit(edges)
    if key is None:
        return state
    return state.replace(
        V=state.V.at[int(state.keypad_register)].set(key),
        keypad_waiting=jnp.asarray(False),
    )
