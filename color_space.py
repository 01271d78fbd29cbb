"""
Color space primitives for hue-based masking.

RGB (0-255) <-> HSL (0-1 turns), hex strings, and circular hue distance.
Scalar functions work on single colors; rgb_to_hue_array is the vectorized
counterpart used when scanning whole images.
"""

import math
from typing import Optional

import numpy as np


# =============================================================================
# Constants
# =============================================================================

HUE_CIRCLE = 360.0  # Degrees in a full turn of the hue wheel
HEX_DIGITS = set('0123456789abcdefABCDEF')


# =============================================================================
# Color Conversion
# =============================================================================

def _round_channel(value: float) -> int:
    """Round a 0-1 channel to 0-255, halves rounding up."""
    return min(255, max(0, math.floor(value * 255 + 0.5)))


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Convert RGB (0-255) to HSL with hue in turns [0, 1)."""
    r, g, b = r / 255, g / 255, b / 255
    max_c = max(r, g, b)
    min_c = min(r, g, b)
    l = (max_c + min_c) / 2

    if max_c == min_c:
        # Achromatic: hue is undefined, report 0
        return 0.0, 0.0, l

    d = max_c - min_c
    s = d / (2 - max_c - min_c) if l > 0.5 else d / (max_c + min_c)

    if max_c == r:
        h = (g - b) / d + (6 if g < b else 0)
    elif max_c == g:
        h = (b - r) / d + 2
    else:
        h = (r - g) / d + 4

    return h / 6, s, l


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[int, int, int]:
    """Convert HSL (hue in turns, s and l in 0-1) to RGB (0-255)."""
    if s == 0:
        channel = _round_channel(l)
        return channel, channel, channel

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q

    r = _hue_to_channel(p, q, h + 1 / 3)
    g = _hue_to_channel(p, q, h)
    b = _hue_to_channel(p, q, h - 1 / 3)

    return _round_channel(r), _round_channel(g), _round_channel(b)


def hex_to_rgb(hex_color: str) -> Optional[tuple[int, int, int]]:
    """
    Parse '#rgb' or '#rrggbb' (leading '#' optional).

    Returns None for any other length or non-hex characters; callers
    are expected to check for it.
    """
    cleaned = hex_color[1:] if hex_color.startswith('#') else hex_color
    if len(cleaned) not in (3, 6) or not set(cleaned) <= HEX_DIGITS:
        return None

    if len(cleaned) == 3:
        cleaned = ''.join(c * 2 for c in cleaned)

    return int(cleaned[0:2], 16), int(cleaned[2:4], 16), int(cleaned[4:6], 16)


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB (0-255) to a lowercase '#rrggbb' string."""
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def hex_to_hsl(hex_color: str) -> Optional[tuple[float, float, float]]:
    """Parse a hex color straight to HSL, None if the hex is invalid."""
    rgb = hex_to_rgb(hex_color)
    if rgb is None:
        return None
    return rgb_to_hsl(*rgb)


def hsl_to_hex(h: float, s: float, l: float) -> str:
    return rgb_to_hex(*hsl_to_rgb(h, s, l))


# =============================================================================
# Hue Utilities
# =============================================================================

def normalize_hue(degrees: float) -> float:
    """Wrap any angle into [0, 360)."""
    hue = degrees % HUE_CIRCLE
    # -1e-17 % 360 rounds to 360.0
    return 0.0 if hue >= HUE_CIRCLE else hue


def hue_distance(a: float, b: float) -> float:
    """Minimum angular distance between two hues in degrees (0-180)."""
    diff = abs(normalize_hue(a) - normalize_hue(b))
    return HUE_CIRCLE - diff if diff > HUE_CIRCLE / 2 else diff


def hue_of_hex(hex_color: str) -> Optional[float]:
    """Hue of a hex color in degrees, None if the hex is invalid."""
    hsl = hex_to_hsl(hex_color)
    if hsl is None:
        return None
    return hsl[0] * HUE_CIRCLE


def rgb_to_hue_array(rgb: np.ndarray) -> np.ndarray:
    """
    Convert an RGB array (..., 3) of 0-255 values to hue degrees.

    Follows rgb_to_hsl exactly: achromatic pixels get hue 0, and ties
    for the dominant channel resolve red, then green, then blue.
    """
    rgb_norm = rgb[..., :3].astype(np.float64) / 255
    r, g, b = rgb_norm[..., 0], rgb_norm[..., 1], rgb_norm[..., 2]

    max_c = rgb_norm.max(axis=-1)
    min_c = rgb_norm.min(axis=-1)
    d = max_c - min_c
    chromatic = d > 0
    safe_d = np.where(chromatic, d, 1.0)

    h = np.select(
        [max_c == r, max_c == g],
        [(g - b) / safe_d + np.where(g < b, 6, 0), (b - r) / safe_d + 2],
        default=(r - g) / safe_d + 4,
    )
    h = np.where(chromatic, h / 6, 0.0)

    return h * HUE_CIRCLE
