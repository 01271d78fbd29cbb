"""
Pick a round's target color from an image.

A handful of random pixels are probed; the first reasonably opaque one
supplies a hue, which is re-rendered at full saturation and mid lightness.
This is a best-effort heuristic with no coverage guarantee: on an image that
is mostly transparent the probes can all miss and the fallback color is
returned even though the image has visible content.
"""

from typing import Iterator, Optional, Union

import numpy as np
from PIL import Image

from color_space import hsl_to_hex, rgb_to_hsl


# =============================================================================
# Constants
# =============================================================================

FALLBACK_COLOR = "#2a7524"  # Used when there is no image or no usable pixel
MAX_TRIES = 50  # Pixels probed before giving up
MIN_ALPHA = 200  # Probes below this alpha count as transparent
VIVID_SATURATION = 1.0
VIVID_LIGHTNESS = 0.5

# Image size limits (security: prevent decompression bombs)
MAX_IMAGE_PIXELS = 50_000_000  # 50 megapixels
MAX_IMAGE_DIMENSION = 10_000  # 10k pixels per side


class DecodeError(ValueError):
    """Raised when an image cannot be decoded into RGBA pixels."""


DecodedImage = Union[Image.Image, np.ndarray]


# =============================================================================
# Image Loading
# =============================================================================

def _check_dimensions(width: int, height: int) -> None:
    if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
        raise DecodeError(
            f"Image dimensions {width}x{height} exceed maximum "
            f"{MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION}"
        )
    if width * height > MAX_IMAGE_PIXELS:
        raise DecodeError(
            f"Image has {width * height:,} pixels, exceeding maximum {MAX_IMAGE_PIXELS:,}"
        )


def load_image(image_path: str) -> np.ndarray:
    """
    Load an image file as an RGBA pixel buffer of shape (h, w, 4).

    Raises:
        FileNotFoundError: If image file doesn't exist
        DecodeError: If file is not a valid image or exceeds size limits
    """
    try:
        img = Image.open(image_path)
    except FileNotFoundError:
        raise FileNotFoundError(f"Image not found: {image_path}")
    except Exception as e:
        raise DecodeError(f"Could not open image: {e}") from e

    with img:
        _check_dimensions(*img.size)
        return to_pixel_buffer(img)


def to_pixel_buffer(image: DecodedImage) -> np.ndarray:
    """
    Rasterize an image into a fresh uint8 RGBA array of shape (h, w, 4).

    PIL images are converted to RGBA; numpy arrays must be uint8 (h, w, 3)
    or (h, w, 4) and get an opaque alpha channel when they have none.
    """
    if isinstance(image, Image.Image):
        try:
            return np.array(image.convert('RGBA'), dtype=np.uint8)
        except Exception as e:
            raise DecodeError(f"Could not rasterize image: {e}") from e

    if isinstance(image, np.ndarray):
        if image.ndim != 3 or image.shape[2] not in (3, 4):
            raise DecodeError(f"Expected an (h, w, 3|4) pixel array, got shape {image.shape}")
        if image.dtype != np.uint8:
            raise DecodeError(f"Expected uint8 pixel values, got dtype {image.dtype}")
        pixels = image
        if pixels.shape[2] == 3:
            alpha = np.full(pixels.shape[:2] + (1,), 255, dtype=np.uint8)
            return np.concatenate([pixels, alpha], axis=2)
        return pixels.copy()

    raise DecodeError(f"Unsupported image type: {type(image).__name__}")


# =============================================================================
# Sampling
# =============================================================================

def candidate_pixels(width: int, height: int, rng: np.random.Generator,
                     max_tries: int = MAX_TRIES) -> Iterator[tuple[int, int]]:
    """Yield up to max_tries uniformly random (x, y) coordinates."""
    if width <= 0 or height <= 0:
        return
    for _ in range(max_tries):
        x = int(rng.integers(0, width))
        y = int(rng.integers(0, height))
        yield x, y


def vivid_hex(r: int, g: int, b: int) -> str:
    """Keep only the hue of an RGB color and render it vivid."""
    h, _, _ = rgb_to_hsl(r, g, b)
    return hsl_to_hex(h, VIVID_SATURATION, VIVID_LIGHTNESS)


def sample_vivid_hue(image: Optional[DecodedImage] = None,
                     rng: Optional[np.random.Generator] = None,
                     max_tries: int = MAX_TRIES) -> str:
    """
    Sample a vivid target color from an image.

    Args:
        image: PIL image or RGBA/RGB pixel array, or None when nothing is loaded
        rng: Random generator; a fresh unseeded one is used if omitted
        max_tries: Number of pixels probed before falling back

    Returns:
        '#rrggbb' of the first opaque probe's hue at full saturation, or
        FALLBACK_COLOR when there is no image or every probe was rejected.

    Raises:
        DecodeError: If an image is given but cannot be rasterized
    """
    if image is None:
        return FALLBACK_COLOR

    return sample_pixels(to_pixel_buffer(image), rng=rng, max_tries=max_tries)


def sample_pixels(pixels: np.ndarray, rng: Optional[np.random.Generator] = None,
                  max_tries: int = MAX_TRIES) -> str:
    """Sample a vivid target color from an RGBA buffer already in memory."""
    height, width = pixels.shape[:2]
    if rng is None:
        rng = np.random.default_rng()

    for x, y in candidate_pixels(width, height, rng, max_tries):
        r, g, b, a = (int(v) for v in pixels[y, x])
        if a < MIN_ALPHA:
            continue
        return vivid_hex(r, g, b)

    return FALLBACK_COLOR
