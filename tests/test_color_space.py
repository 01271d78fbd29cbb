"""Tests for RGB/HSL/hex conversion and hue distance."""

import itertools

import numpy as np
import pytest

from color_space import (
    hex_to_hsl, hex_to_rgb, hsl_to_rgb, hue_distance, hue_of_hex, normalize_hue,
    rgb_to_hex, rgb_to_hsl, rgb_to_hue_array,
)


def test_primaries_to_hsl():
    assert rgb_to_hsl(255, 0, 0) == (0.0, 1.0, 0.5)
    h, s, l = rgb_to_hsl(0, 255, 0)
    assert h == pytest.approx(1 / 3)
    assert (s, l) == (1.0, 0.5)
    h, _, _ = rgb_to_hsl(0, 0, 255)
    assert h == pytest.approx(2 / 3)


def test_achromatic_has_zero_hue_and_saturation():
    for v in (0, 37, 128, 255):
        h, s, l = rgb_to_hsl(v, v, v)
        assert h == 0 and s == 0
        assert l == pytest.approx(v / 255)


def test_hsl_to_rgb_achromatic():
    assert hsl_to_rgb(0.7, 0, 0.5) == (128, 128, 128)
    assert hsl_to_rgb(0, 0, 1) == (255, 255, 255)


def test_hsl_round_trip_within_one():
    values = range(0, 256, 15)
    for r, g, b in itertools.product(values, values, values):
        rr, gg, bb = hsl_to_rgb(*rgb_to_hsl(r, g, b))
        assert abs(rr - r) <= 1 and abs(gg - g) <= 1 and abs(bb - b) <= 1, (r, g, b)


def test_hue_stays_below_one_turn():
    for r, g, b in [(255, 0, 1), (255, 1, 255), (200, 10, 11)]:
        h, _, _ = rgb_to_hsl(r, g, b)
        assert 0 <= h < 1


def test_hex_to_rgb():
    assert hex_to_rgb("#abc") == (170, 187, 204)
    assert hex_to_rgb("abc123") == (171, 193, 35)
    assert hex_to_rgb("#FFFFFF") == (255, 255, 255)


@pytest.mark.parametrize("bad", ["#12", "#1234", "", "#", "#12345", "#1234567", "#ggg", "#12345z"])
def test_hex_to_rgb_invalid_returns_none(bad):
    assert hex_to_rgb(bad) is None
    assert hex_to_hsl(bad) is None
    assert hue_of_hex(bad) is None


def test_rgb_to_hex_is_lowercase_and_padded():
    assert rgb_to_hex(0, 15, 255) == "#000fff"
    assert rgb_to_hex(171, 193, 35) == "#abc123"


def test_hex_round_trip():
    assert rgb_to_hex(*hex_to_rgb("#629E2D")) == "#629e2d"
    assert rgb_to_hex(*hex_to_rgb("#abc")) == "#aabbcc"
    assert rgb_to_hex(*hex_to_rgb("2a7524")) == "#2a7524"


def test_hue_distance_examples():
    assert hue_distance(10, 350) == 20
    assert hue_distance(0, 180) == 180
    assert hue_distance(90, 90) == 0
    assert hue_distance(-10, 10) == 20
    assert hue_distance(370, 10) == 0


def test_hue_distance_properties():
    rng = np.random.default_rng(7)
    for a, b in rng.uniform(0, 360, size=(200, 2)):
        d = hue_distance(a, b)
        assert 0 <= d <= 180
        assert d == hue_distance(b, a)
        assert hue_distance(a, a) == 0


def test_normalize_hue():
    assert normalize_hue(360) == 0
    assert normalize_hue(-50) == 310
    assert normalize_hue(725) == 5
    assert 0 <= normalize_hue(-1e-17) < 360


def test_hue_of_hex_in_degrees():
    assert hue_of_hex("#ff0000") == 0
    assert hue_of_hex("#00ff00") == pytest.approx(120)
    assert hue_of_hex("#629e2d") == pytest.approx(91.86, abs=0.05)


def test_hue_array_matches_scalar():
    rng = np.random.default_rng(3)
    pixels = rng.integers(0, 256, size=(40, 25, 3), dtype=np.uint8)
    pixels[0, :5] = [[0, 0, 0], [255, 255, 255], [90, 90, 90], [255, 255, 0], [0, 255, 255]]

    hues = rgb_to_hue_array(pixels)

    assert hues.shape == (40, 25)
    for y in range(pixels.shape[0]):
        for x in range(pixels.shape[1]):
            h, _, _ = rgb_to_hsl(*(int(v) for v in pixels[y, x]))
            assert hues[y, x] == pytest.approx(h * 360, abs=1e-9)


def test_hue_array_ignores_alpha():
    rgba = np.array([[[0, 0, 255, 0], [0, 0, 255, 255]]], dtype=np.uint8)
    np.testing.assert_allclose(rgb_to_hue_array(rgba), [[240, 240]])
