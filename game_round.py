"""
One round of the color-guessing game.

Ties the engine together: sample a target from an image, mask it out,
build the answer set, then take exactly one guess.

    NO_IMAGE -> TARGET_SAMPLED -> READY -> SUBMITTED -> REVEALED
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

import numpy as np

from decoys import AnswerChoice, generate_choices, preview_colors, DEFAULT_DECOY_COUNT
from hue_mask import apply_hue_mask
from vivid_hue import DecodedImage, sample_pixels, to_pixel_buffer


# =============================================================================
# Constants
# =============================================================================

DIFFICULTIES = {
    'easy': 30,
    'medium': 20,
    'hard': 5,
    'extreme': 2,
}
DEFAULT_DIFFICULTY = 'medium'
IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp'}


def radius_for(difficulty: str) -> float:
    """Hue radius in degrees for a named difficulty."""
    try:
        return float(DIFFICULTIES[difficulty.lower()])
    except KeyError:
        names = ', '.join(DIFFICULTIES)
        raise ValueError(f"Unknown difficulty {difficulty!r} (expected one of: {names})")


# =============================================================================
# Image Assets
# =============================================================================

def find_images(directory: Path) -> list[Path]:
    """Find all image files in directory."""
    return sorted(
        p for p in Path(directory).iterdir()
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
    )


def random_image(directory: Path, rng: Optional[np.random.Generator] = None) -> Path:
    """Pick a random image from a directory."""
    images = find_images(directory)
    if not images:
        raise FileNotFoundError(f"No images found in {directory}")
    if rng is None:
        rng = np.random.default_rng()
    return images[int(rng.integers(0, len(images)))]


# =============================================================================
# Round
# =============================================================================

class RoundState(Enum):
    NO_IMAGE = 'no_image'
    TARGET_SAMPLED = 'target_sampled'
    READY = 'ready'  # Masked image and choices available
    SUBMITTED = 'submitted'
    REVEALED = 'revealed'


class RoundStateError(ValueError):
    """Raised when a round operation is used in the wrong state."""


@dataclass
class Round:
    """A single guess: one image, one target, one answer set."""
    radius: float = float(DIFFICULTIES[DEFAULT_DIFFICULTY])
    choice_count: int = DEFAULT_DECOY_COUNT
    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    workers: int = 1

    state: RoundState = RoundState.NO_IMAGE
    pixels: Optional[np.ndarray] = None
    target_hex: Optional[str] = None
    masked: Optional[np.ndarray] = None
    choices: list[AnswerChoice] = field(default_factory=list)
    selected_index: Optional[int] = None
    guessed_correctly: Optional[bool] = None

    def __post_init__(self):
        if self.radius < 0:
            raise ValueError(f"Radius must be non-negative, got {self.radius}")

    def load(self, image: DecodedImage) -> None:
        """Sample the target, mask the image and build the choices."""
        if self.state is not RoundState.NO_IMAGE:
            raise RoundStateError(f"Round already loaded (state: {self.state.value})")

        # Nothing is stored until every step succeeds; a failed load leaves NO_IMAGE
        pixels = to_pixel_buffer(image)
        target_hex = sample_pixels(pixels, rng=self.rng)
        masked = apply_hue_mask(pixels, target_hex, self.radius, workers=self.workers)
        choices = generate_choices(target_hex, self.radius,
                                   count=self.choice_count, rng=self.rng)

        self.pixels = pixels
        self.target_hex = target_hex
        self.state = RoundState.TARGET_SAMPLED
        self.masked = masked
        self.choices = choices
        self.state = RoundState.READY

    @property
    def correct_index(self) -> int:
        for i, choice in enumerate(self.choices):
            if choice.is_correct:
                return i
        raise RoundStateError("Round has no choices yet")

    def select(self, index: int) -> None:
        """Highlight a choice; ignored once the guess is submitted."""
        if self.state in (RoundState.SUBMITTED, RoundState.REVEALED):
            return
        self._require_ready()
        self._check_index(index)
        self.selected_index = index

    def selected_preview(self) -> list[str]:
        """Colors within radius of the selected choice."""
        if self.selected_index is None:
            return []
        return preview_colors(self.choices[self.selected_index].hex, self.radius)

    def submit(self, index: Optional[int] = None) -> Optional[bool]:
        """
        Score the guess. Only the first submission counts; later calls
        return the original result.
        """
        if self.state in (RoundState.SUBMITTED, RoundState.REVEALED):
            return self.guessed_correctly
        self._require_ready()

        if index is not None:
            self.select(index)
        if self.selected_index is None:
            raise RoundStateError("No choice selected")

        self.guessed_correctly = self.choices[self.selected_index].is_correct
        self.state = RoundState.SUBMITTED
        return self.guessed_correctly

    def reveal(self) -> int:
        """Index of the correct choice, whatever the outcome."""
        if self.state is RoundState.SUBMITTED:
            self.state = RoundState.REVEALED
        elif self.state is not RoundState.REVEALED:
            self._require_ready()
            self.state = RoundState.REVEALED
        return self.correct_index

    def _require_ready(self):
        if self.state is not RoundState.READY:
            raise RoundStateError(f"Round is not ready (state: {self.state.value})")

    def _check_index(self, index: int):
        if not 0 <= index < len(self.choices):
            raise IndexError(f"Choice {index} out of range (0-{len(self.choices) - 1})")
