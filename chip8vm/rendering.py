"""CHIP-8 rendering utilities for visualization."""

import numpy as np
from typing import Tuple

from PIL import Image

from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, FRAMEBUFFER_SIZE


def unpack_framebuffer(framebuffer) -> np.ndarray:
    """Unpack a 256-byte framebuffer into a (32, 64) boolean pixel grid.

    Args:
        framebuffer: Packed 1bpp framebuffer, row-major, MSB is the leftmost pixel

    Returns:
        Boolean array indexed [row, column]
    """
    packed = np.asarray(framebuffer, dtype=np.uint8)
    if packed.shape != (FRAMEBUFFER_SIZE,):
        raise ValueError(f"Expected framebuffer shape ({FRAMEBUFFER_SIZE},), got {packed.shape}")
    return np.unpackbits(packed).reshape(SCREEN_HEIGHT, SCREEN_WIDTH).astype(np.bool_)


def framebuffer_to_rgb(
    framebuffer,
    scale: int = 8,
    on_color: Tuple[int, int, int] = (0, 255, 0),
    off_color: Tuple[int, int, int] = (0, 0, 0),
) -> np.ndarray:
    """Convert a CHIP-8 framebuffer to an RGB array with optional upscaling.

    Args:
        framebuffer: Packed 256-byte framebuffer
        scale: Upscaling factor for better visibility (default: 8x)
        on_color: RGB color for "on" pixels (default: green)
        off_color: RGB color for "off" pixels (default: black)

    Returns:
        RGB array of shape (32*scale, 64*scale, 3) with uint8 values
    """
    pixels = unpack_framebuffer(framebuffer)
    height, width = pixels.shape

    rgb_frame = np.zeros((height, width, 3), dtype=np.uint8)

    rgb_frame[pixels] = on_color
    rgb_frame[~pixels] = off_color

    # Apply upscaling using nearest neighbor interpolation
    if scale > 1:
        rgb_frame = np.repeat(np.repeat(rgb_frame, scale, axis=0), scale, axis=1)

    return rgb_frame


def create_color_scheme(
    scheme: str = "classic",
) -> Tuple[Tuple[int, int, int], Tuple[int, int, int]]:
    """Get predefined color schemes for CHIP-8 rendering.

    Args:
        scheme: Color scheme name ("classic", "amber", "white", "blue", "retro")

    Returns:
        Tuple of (on_color, off_color) as RGB tuples
    """
    schemes = {
        "classic": ((0, 255, 0), (0, 0, 0)),  # Green on black
        "amber": ((255, 176, 0), (0, 0, 0)),  # Amber on black
        "white": ((255, 255, 255), (0, 0, 0)),  # White on black
        "blue": ((0, 255, 255), (0, 0, 64)),  # Cyan on dark blue
        "retro": ((255, 255, 0), (64, 0, 64)),  # Yellow on purple
    }

    if scheme not in schemes:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {list(schemes.keys())}"
        )

    return schemes[scheme]


def framebuffer_to_text(framebuffer, on: str = "@", off: str = ".") -> str:
    """Render the framebuffer as console text, one line per pixel row."""
    pixels = unpack_framebuffer(framebuffer)
    return "\n".join("".join(on if p else off for p in row) for row in pixels)


def save_screenshot(
    framebuffer,
    filename: str,
    scale: int = 8,
    color_scheme: str = "classic",
) -> None:
    """Save the framebuffer as an image file (format from the extension)."""
    on_color, off_color = create_color_scheme(color_scheme)
    rgb = framebuffer_to_rgb(framebuffer, scale, on_color, off_color)
    Image.fromarray(rgb).save(filename)
