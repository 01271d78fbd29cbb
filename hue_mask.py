"""
White out every pixel whose hue lies within a radius of a target hue.

Pixels are independent of each other, so the scan is vectorized with numpy
and can optionally be split into row bands processed on a thread pool.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from color_space import hue_of_hex, rgb_to_hue_array, HUE_CIRCLE


# =============================================================================
# Constants
# =============================================================================

MASK_COLOR = (255, 255, 255, 255)  # Opaque white


# =============================================================================
# Masking
# =============================================================================

def hue_mask(pixels: np.ndarray, target_hue: float, radius: float) -> np.ndarray:
    """
    Boolean (h, w) mask of pixels within radius degrees of target_hue.

    Achromatic pixels count as hue 0, the same convention rgb_to_hsl uses,
    so grays are caught when the target sits within radius of red.
    """
    hues = rgb_to_hue_array(pixels)
    diff = np.abs(hues - target_hue % HUE_CIRCLE)
    distance = np.where(diff > HUE_CIRCLE / 2, HUE_CIRCLE - diff, diff)
    return distance <= radius


def _mask_rows(pixels: np.ndarray, start: int, stop: int,
               target_hue: float, radius: float) -> int:
    band = pixels[start:stop]
    mask = hue_mask(band, target_hue, radius)
    band[mask] = MASK_COLOR
    return int(mask.sum())


def _row_bands(height: int, workers: int) -> list[tuple[int, int]]:
    """Split [0, height) into at most `workers` contiguous, disjoint bands."""
    workers = max(1, min(workers, height))
    edges = np.linspace(0, height, workers + 1).astype(int)
    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]


def apply_hue_mask(pixels: np.ndarray, target_hex: str, radius: float,
                   in_place: bool = False, workers: int = 1) -> np.ndarray:
    """
    Replace pixels within `radius` degrees of the target hue with opaque white.

    Args:
        pixels: RGBA uint8 buffer of shape (h, w, 4)
        target_hex: Target color as '#rrggbb' or '#rgb'
        radius: Tolerance in degrees (>= 0)
        in_place: Mutate `pixels` instead of returning a modified copy
        workers: Number of threads; rows are partitioned so writers never overlap

    Returns:
        Buffer of the same shape with the masked pixels whited out.

    Raises:
        ValueError: On an invalid hex, a negative radius or a non-RGBA buffer
    """
    if radius < 0:
        raise ValueError(f"Radius must be non-negative, got {radius}")
    target_hue = hue_of_hex(target_hex)
    if target_hue is None:
        raise ValueError(f"Invalid hex color: {target_hex!r}")
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected an (h, w, 4) RGBA buffer, got shape {pixels.shape}")

    out = pixels if in_place else pixels.copy()
    height = out.shape[0]
    if out.size == 0:
        return out

    bands = _row_bands(height, workers)
    if len(bands) == 1:
        _mask_rows(out, 0, height, target_hue, radius)
        return out

    with ThreadPoolExecutor(max_workers=len(bands)) as pool:
        futures = [
            pool.submit(_mask_rows, out, start, stop, target_hue, radius)
            for start, stop in bands
        ]
        for future in futures:
            future.result()

    return out


def masked_fraction(mask: np.ndarray) -> float:
    """Share of pixels covered by a boolean mask (0 for an empty mask)."""
    return float(mask.mean()) if mask.size else 0.0
