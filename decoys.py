"""
Place wrong answers around the hue wheel.

Decoys are walked outwards from the target hue in alternating steps of
`spacing = 2 * radius + margin` (+1, -1, +2, -2, ... multiples). The walk is
a greedy packing on a circle, so every candidate is checked against the hues
already placed and skipped when the two masking bands would overlap. When the
walk cannot fit enough decoys they are spread evenly around the wheel.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from color_space import (
    hex_to_hsl, hex_to_rgb, hsl_to_hex, hue_distance, normalize_hue, rgb_to_hex,
    HUE_CIRCLE,
)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_DECOY_COUNT = 4
DEFAULT_MARGIN = 10.0  # Extra degrees between neighbouring bands
PREVIEW_STEP = 5.0  # Degrees between preview swatches


class DecoyPlacementError(ValueError):
    """Raised when the requested decoys cannot be packed on the hue wheel."""


@dataclass
class AnswerChoice:
    """A single multiple-choice option."""
    hex: str
    is_correct: bool


# =============================================================================
# Decoy Placement
# =============================================================================

def _place_hues(base_hue: float, radius: float, margin: float,
                limit: Optional[int]) -> list[float]:
    spacing = 2 * radius + margin
    if spacing <= 0:
        return []

    min_separation = 2 * radius
    placed = [normalize_hue(base_hue)]
    hues = []

    def fits(hue):
        for other in placed:
            distance = hue_distance(hue, other)
            if distance == 0 or distance < min_separation:
                return False
        return True

    multiplier = 1
    while multiplier * spacing < HUE_CIRCLE:
        for sign in (1, -1):
            if limit is not None and len(hues) >= limit:
                return hues
            hue = normalize_hue(base_hue + sign * multiplier * spacing)
            if fits(hue):
                hues.append(hue)
                placed.append(hue)
        multiplier += 1

    return hues


def _even_hues(base_hue: float, radius: float, count: int) -> Optional[list[float]]:
    """Spread `count` hues evenly between the target and itself, None if too tight."""
    gap = HUE_CIRCLE / (count + 1)
    if gap < 2 * radius:
        return None
    return [normalize_hue(base_hue + i * gap) for i in range(1, count + 1)]


def max_decoys(radius: float, margin: float = DEFAULT_MARGIN) -> int:
    """
    Largest decoy count decoy_hues can place for this radius and margin.

    A zero radius has no real bound; only the walk's count is reported.
    """
    greedy = len(_place_hues(0.0, radius, margin, None))
    if radius <= 0:
        return greedy

    even = int(HUE_CIRCLE // (2 * radius)) - 1
    while even > 0 and _even_hues(0.0, radius, even) is None:
        even -= 1
    return max(greedy, even)


def decoy_hues(base_hue: float, radius: float, count: int = DEFAULT_DECOY_COUNT,
               margin: float = DEFAULT_MARGIN) -> list[float]:
    """
    Generate `count` decoy hues (degrees) around base_hue.

    The alternating walk is tried first; when it runs out of room the decoys
    are spread evenly around the wheel instead. Every pair among the target
    and the decoys ends up at least 2 * radius apart, so no two masking
    bands overlap.

    Raises:
        ValueError: On a negative radius, margin or count
        DecoyPlacementError: If fewer than `count` hues fit on the wheel
    """
    if radius < 0:
        raise ValueError(f"Radius must be non-negative, got {radius}")
    if margin < 0:
        raise ValueError(f"Margin must be non-negative, got {margin}")
    if count < 0:
        raise ValueError(f"Decoy count must be non-negative, got {count}")

    hues = _place_hues(base_hue, radius, margin, count)
    if len(hues) == count:
        return hues

    even = _even_hues(base_hue, radius, count)
    if even is None:
        raise DecoyPlacementError(
            f"Only {max_decoys(radius, margin)} decoys fit at radius {radius}° "
            f"with margin {margin}°, {count} requested"
        )
    return even


# =============================================================================
# Answer Choices
# =============================================================================

def generate_choices(target_hex: str, radius: float, count: int = DEFAULT_DECOY_COUNT,
                     margin: float = DEFAULT_MARGIN,
                     rng: Optional[np.random.Generator] = None) -> list[AnswerChoice]:
    """
    Build the shuffled answer set: the target plus `count` decoys.

    Decoys keep the target's saturation and lightness and differ only in hue.

    Raises:
        ValueError: If target_hex is invalid or achromatic (no hue to rotate)
        DecoyPlacementError: If the decoys cannot be spaced at this radius
    """
    hsl = hex_to_hsl(target_hex)
    if hsl is None:
        raise ValueError(f"Invalid hex color: {target_hex!r}")
    h, s, l = hsl
    if s == 0:
        raise ValueError(f"Target {target_hex} is achromatic; decoys would all be identical")

    base_hue = h * HUE_CIRCLE
    hues = decoy_hues(base_hue, radius, count=count, margin=margin)

    choices = [AnswerChoice(hex=rgb_to_hex(*hex_to_rgb(target_hex)), is_correct=True)]
    for hue in hues:
        choices.append(AnswerChoice(hex=hsl_to_hex(hue / HUE_CIRCLE, s, l), is_correct=False))

    if rng is None:
        rng = np.random.default_rng()
    rng.shuffle(choices)
    return choices


def preview_colors(hex_color: str, radius: float, step: float = PREVIEW_STEP) -> list[str]:
    """
    Swatches spanning hue - radius .. hue + radius in `step` increments.

    Shows a player which shades a choice would cover. Empty for an invalid hex.
    """
    hsl = hex_to_hsl(hex_color)
    if hsl is None or step <= 0:
        return []
    h, s, l = hsl
    base_hue = h * HUE_CIRCLE

    colors = []
    offset = -radius
    while offset <= radius:
        hue = normalize_hue(base_hue + offset)
        colors.append(hsl_to_hex(hue / HUE_CIRCLE, s, l))
        offset += step
    return colors
