"""
RGB to CMYK conversion with gray component replacement (GCR).

Black is generated first from the common gray component of the three
process inks, then cyan, magenta and yellow are renormalized against it.
This is an approximation, not an ICC transform.
"""

import math
from typing import Tuple

import numpy as np


def round_half_up(value: float) -> int:
    """Round to nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))


def rgb_to_cmyk(r: int, g: int, b: int, black_generation: float = 0.7) -> Tuple[int, int, int, int]:
    """
    Convert one RGB sample to CMYK coverage percentages.

    Args:
        r, g, b: Channel values 0-255
        black_generation: GCR amount, 0 (no black) to 1 (maximum black)

    Returns:
        (c, m, y, k) as integers 0-100
    """
    c = 1 - r / 255
    m = 1 - g / 255
    y = 1 - b / 255
    k = min(c, m, y) * black_generation

    if k == 1:
        return 0, 0, 0, 100

    c = (c - k) / (1 - k)
    m = (m - k) / (1 - k)
    y = (y - k) / (1 - k)

    return (
        round_half_up(c * 100),
        round_half_up(m * 100),
        round_half_up(y * 100),
        round_half_up(k * 100),
    )


def rgb_to_cmyk_array(rgb: np.ndarray, black_generation: float = 0.7) -> np.ndarray:
    """
    Vectorized rgb_to_cmyk over a block of pixels.

    Each pixel is rounded to integer percentages exactly as the scalar
    version does, so sums over this array match a per-pixel loop.

    Args:
        rgb: Array of shape (..., 3), values 0-255
        black_generation: GCR amount, 0 to 1

    Returns:
        int32 array of shape (..., 4) in C, M, Y, K order
    """
    cmy = 1.0 - rgb[..., :3].astype(np.float64) / 255.0
    k = cmy.min(axis=-1) * black_generation

    full_black = k == 1
    denom = np.where(full_black, 1.0, 1.0 - k)
    cmy = (cmy - k[..., None]) / denom[..., None]
    cmy[full_black] = 0.0

    cmyk = np.empty(rgb.shape[:-1] + (4,), dtype=np.float64)
    cmyk[..., :3] = cmy
    cmyk[..., 3] = k

    return np.floor(cmyk * 100 + 0.5).astype(np.int32)
