"""Tests for decoy placement and answer choices."""

import itertools

import numpy as np
import pytest

from color_space import hex_to_hsl, hue_distance, hue_of_hex, normalize_hue
from decoys import (
    decoy_hues, generate_choices, max_decoys, preview_colors,
    AnswerChoice, DecoyPlacementError,
)


def test_reference_offsets():
    base = hue_of_hex("#629e2d")
    hues = decoy_hues(base, radius=20)

    expected = [normalize_hue(base + d) for d in (50, -50, 100, -100)]
    assert hues == pytest.approx(expected)


def test_offsets_wrap_into_range():
    hues = decoy_hues(10.0, radius=20)
    assert hues == pytest.approx([60, 320, 110, 270])
    assert all(0 <= h < 360 for h in hues)


@pytest.mark.parametrize("radius", [0.5, 2, 5, 20, 30])
def test_pairwise_separation(radius):
    count = max_decoys(radius)
    hues = [33.0] + decoy_hues(33.0, radius, count=count)
    for a, b in itertools.combinations(hues, 2):
        assert hue_distance(a, b) >= 2 * radius
        assert hue_distance(a, b) > 0


def test_max_decoys():
    assert max_decoys(20) == 8
    assert max_decoys(30) == 5
    assert max_decoys(35) == 4
    assert max_decoys(40) == 3


def test_too_many_decoys_raises():
    with pytest.raises(DecoyPlacementError):
        decoy_hues(0.0, radius=40, count=4)
    with pytest.raises(ValueError):
        decoy_hues(0.0, radius=20, count=9)


def test_negative_arguments_rejected():
    with pytest.raises(ValueError):
        decoy_hues(0.0, radius=-1)
    with pytest.raises(ValueError):
        decoy_hues(0.0, radius=20, margin=-1)
    with pytest.raises(ValueError):
        decoy_hues(0.0, radius=20, count=-1)


def test_zero_count():
    assert decoy_hues(0.0, radius=20, count=0) == []


def test_choices_contain_one_correct_answer():
    choices = generate_choices("#629e2d", radius=20, rng=np.random.default_rng(0))

    assert len(choices) == 5
    assert all(isinstance(c, AnswerChoice) for c in choices)
    correct = [c for c in choices if c.is_correct]
    assert len(correct) == 1
    assert correct[0].hex == "#629e2d"
    assert len({c.hex for c in choices}) == 5


def test_choices_are_normalized_hex():
    choices = generate_choices("#F00", radius=20, count=2, rng=np.random.default_rng(0))
    assert "#ff0000" in [c.hex for c in choices]
    assert all(c.hex == c.hex.lower() and len(c.hex) == 7 for c in choices)


def test_decoys_differ_only_in_hue():
    _, s, l = hex_to_hsl("#629e2d")
    choices = generate_choices("#629e2d", radius=20, rng=np.random.default_rng(1))

    for choice in choices:
        _, cs, cl = hex_to_hsl(choice.hex)
        assert cs == pytest.approx(s, abs=0.02)
        assert cl == pytest.approx(l, abs=0.01)


def test_rendered_choices_keep_bands_apart():
    for hex_color, radius in [("#629e2d", 20), ("#ff0000", 30), ("#3366cc", 5), ("#00ffff", 2), ("#ff0000", 35)]:
        choices = generate_choices(hex_color, radius, rng=np.random.default_rng(2))
        hues = [hue_of_hex(c.hex) for c in choices]
        for a, b in itertools.combinations(hues, 2):
            assert hue_distance(a, b) >= 2 * radius


def test_shuffle_moves_correct_answer():
    positions = set()
    for seed in range(40):
        choices = generate_choices("#629e2d", radius=20, rng=np.random.default_rng(seed))
        positions.add(next(i for i, c in enumerate(choices) if c.is_correct))
    assert len(positions) > 1


def test_shuffle_keeps_every_choice():
    choices = generate_choices("#629e2d", radius=20, rng=np.random.default_rng(3))
    unshuffled = generate_choices("#629e2d", radius=20, rng=np.random.default_rng(4))
    assert sorted(c.hex for c in choices) == sorted(c.hex for c in unshuffled)


def test_same_seed_same_choices():
    a = generate_choices("#629e2d", radius=20, rng=np.random.default_rng(9))
    b = generate_choices("#629e2d", radius=20, rng=np.random.default_rng(9))
    assert a == b


def test_invalid_targets():
    with pytest.raises(ValueError):
        generate_choices("#1234", radius=20)
    with pytest.raises(ValueError):
        generate_choices("#808080", radius=20)


def test_preview_colors():
    preview = preview_colors("#ff0000", radius=20)

    assert len(preview) == 9
    assert preview[4] == "#ff0000"
    assert preview[0] == "#ff0055"
    assert preview_colors("#12", radius=20) == []
    assert preview_colors("#ff0000", radius=0) == ["#ff0000"]


def test_even_spread_when_walk_falls_short():
    # The walk only fits 3 decoys at radius 35, but 72 degree steps fit 4
    hues = decoy_hues(0.0, radius=35)
    assert hues == pytest.approx([72, 144, 216, 288])

    choices = generate_choices("#629e2d", radius=35, rng=np.random.default_rng(0))
    assert len(choices) == 5
    assert sum(c.is_correct for c in choices) == 1
