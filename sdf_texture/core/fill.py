"""
RGB Fill Modes

The SDF value always goes into the alpha channel. The fill mode decides
what ends up in RGB:
- SOLID_WHITE:   grayscale distance (0 = black, 1 = white)
- SOLID_BLACK:   inverted grayscale distance
- SDF_GRAYSCALE: same mapping as SOLID_WHITE, kept as its own name
- SOURCE_RGB:    original color, distance lives only in alpha
"""

import numpy as np
from enum import Enum
from typing import Any, Sequence, Tuple


class FillMode(Enum):
    """Policy for the output RGB channels"""
    SOLID_WHITE = "solid_white"
    SOLID_BLACK = "solid_black"
    SDF_GRAYSCALE = "sdf"
    SOURCE_RGB = "source_rgb"

    @classmethod
    def parse(cls, value: Any) -> 'FillMode':
        """
        Resolve a fill mode from user input.

        Accepts a member, its value ('sdf'), its name ('SDF_GRAYSCALE'),
        or the ordinal used by the editor preferences (0-3).
        """
        if isinstance(value, cls):
            return value

        members = list(cls)
        if isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value < len(members):
                return members[value]
        elif isinstance(value, str):
            key = value.strip().lower()
            for mode in members:
                if key in (mode.value, mode.name.lower()):
                    return mode

        raise ValueError(f"Unknown fill mode: {value!r}")


def color_for(
    fill_mode: FillMode,
    sdf_value: float,
    source_color: Sequence[float]
) -> Tuple[float, float, float]:
    """
    Output RGB for a single pixel.

    Args:
        fill_mode: Fill policy (anything unrecognized maps like SOLID_WHITE)
        sdf_value: Normalized distance 0-1
        source_color: Original pixel (r, g, b[, a]) in 0-1

    Returns:
        (r, g, b) tuple in 0-1
    """
    if fill_mode is FillMode.SOLID_BLACK:
        inv = 1.0 - sdf_value
        return (inv, inv, inv)
    if fill_mode is FillMode.SOURCE_RGB:
        return (source_color[0], source_color[1], source_color[2])
    # SOLID_WHITE, SDF_GRAYSCALE and fallback
    return (sdf_value, sdf_value, sdf_value)


def apply_fill(fill_mode: FillMode, sdf: np.ndarray, pixels: np.ndarray) -> np.ndarray:
    """
    Vectorized color_for over a whole image.

    Args:
        fill_mode: Fill policy
        sdf: SDF field (H, W)
        pixels: Source RGBA (H, W, 4) in 0-1

    Returns:
        RGB array (H, W, 3) float32
    """
    if fill_mode is FillMode.SOURCE_RGB:
        return pixels[:, :, :3].astype(np.float32, copy=True)

    if fill_mode is FillMode.SOLID_BLACK:
        gray = 1.0 - sdf
    else:
        gray = sdf

    return np.repeat(gray[:, :, np.newaxis], 3, axis=2).astype(np.float32)
