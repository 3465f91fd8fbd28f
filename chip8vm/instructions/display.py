"""CHIP-8 display operations."""

import jax
import jax.numpy as jnp
from chip8vm.state import MachineState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE, VF
from chip8vm.control import ControlDirective, ADVANCE

# Pre-computed coordinate grids for display operations, indexed [row, column]
yy, xx = jnp.meshgrid(jnp.arange(SCREEN_HEIGHT), jnp.arange(SCREEN_WIDTH), indexing='ij')


def unpack_pixels(framebuffer: jnp.ndarray) -> jnp.ndarray:
    """Packed 1bpp framebuffer -> boolean (SCREEN_HEIGHT, SCREEN_WIDTH) pixel grid."""
    return jnp.unpackbits(framebuffer).reshape(SCREEN_HEIGHT, SCREEN_WIDTH).astype(jnp.bool_)


def pack_pixels(pixels: jnp.ndarray) -> jnp.ndarray:
    """Boolean pixel grid -> packed row-major framebuffer, MSB is the leftmost pixel."""
    return jnp.packbits(pixels.reshape(-1)).astype(jnp.uint8)


def sprite_mask(memory: jnp.ndarray, index, x, y, height) -> jnp.ndarray:
    """Screen-sized mask of the set sprite bits, wrapping toroidally at both edges."""
    row_offset = (yy - y) % SCREEN_HEIGHT
    col_offset = (xx - x) % SCREEN_WIDTH
    in_sprite = (row_offset < height) & (col_offset < 8)

    sprite_bytes = memory[(index + row_offset) % MEMORY_SIZE]
    bit = jnp.clip(7 - col_offset, 0, 7)
    return ((sprite_bytes >> bit) & 1).astype(jnp.bool_) & in_sprite


@jax.jit
def draw_sprite(framebuffer: jnp.ndarray, memory: jnp.ndarray, index, x, y, height):
    """XOR an N-row sprite from memory[index] onto the framebuffer at (x, y).

    All scalar arguments are traced, so one compilation serves every draw.

    Returns:
        (new framebuffer, collision flag as uint8)
    """
    index = jnp.asarray(index, dtype=jnp.int32)
    x = jnp.asarray(x, dtype=jnp.int32) % SCREEN_WIDTH
    y = jnp.asarray(y, dtype=jnp.int32) % SCREEN_HEIGHT

    pixels = unpack_pixels(framebuffer)
    sprite = sprite_mask(memory, index, x, y, height)
    collision = jnp.any(pixels & sprite)
    return pack_pixels(pixels ^ sprite), collision.astype(jnp.uint8)


def execute_display(state: MachineState, instruction: DecodedInstruction, keys: int) -> tuple[MachineState, ControlDirective]:
    """DXYN - Draw sprite at (VX, VY) with height N."""
    framebuffer, collision = draw_sprite(
        state.framebuffer,
        state.memory,
        state.I,
        state.V[instruction.x],
        state.V[instruction.y],
        instruction.n,
    )
    return state.replace(
        framebuffer=framebuffer,
        V=state.V.at[VF].set(collision),
        display_changed=jnp.asarray(True),
    ), ADVANCE
