"""Tests for color parsing and lightness scaling."""

import random

import pytest

from delux.errors import DeluxError, InvalidColor
from delux.lights.color import RGB, darken, parse_color, random_rgb, scale_lightness


class TestParseColor:

    @pytest.mark.parametrize("spec", ["#FF0000", "#F00", "FF0000", "f00", " #ff0000 "])
    def test_hex_forms(self, spec):
        assert parse_color(spec) == RGB(255, 0, 0)

    def test_integer(self):
        assert parse_color(0x00FF80) == RGB(0, 255, 128)

    def test_triple_rounds_channels(self):
        assert parse_color((12.4, 12.5, 255)) == RGB(12, 13, 255)
        assert parse_color([0, 0, 0]) == RGB.black()

    def test_rgb_passes_through(self):
        color = RGB(1, 2, 3)
        assert parse_color(color) is color

    @pytest.mark.parametrize("spec", [
        "#GG0000",
        "#FFFF",
        "",
        0x1000000,
        -1,
        (256, 0, 0),
        (0, 0),
        ("a", 0, 0),
        True,
        None,
        1.5,
    ])
    def test_invalid(self, spec):
        with pytest.raises(InvalidColor):
            parse_color(spec)

    def test_invalid_color_is_value_error(self):
        with pytest.raises(ValueError) as exc_info:
            parse_color("nope")
        assert isinstance(exc_info.value, DeluxError)
        assert exc_info.value.spec == "nope"


class TestRGB:

    def test_hex(self):
        assert RGB(255, 107, 0).hex == "#FF6B00"

    def test_as_tuple(self):
        assert RGB(1, 2, 3).as_tuple() == (1, 2, 3)


class TestLightness:

    @pytest.mark.parametrize("spec", ["#F00", "#0F0", "#00F", "#FFF", "#000"])
    def test_full_brightness_keeps_primaries(self, spec):
        color = parse_color(spec)
        assert scale_lightness(color, 1.0) == color

    def test_half_brightness_halves_lightness(self):
        # Red is 50% lightness; 25% lightness is 127.5, rounded up
        assert scale_lightness(RGB(255, 0, 0), 0.5) == RGB(128, 0, 0)

    def test_zero_brightness_is_black(self):
        assert scale_lightness(RGB(12, 200, 99), 0.0) == RGB.black()

    def test_darken_halves_lightness(self):
        assert darken(RGB(0, 255, 0)) == RGB(0, 128, 0)

    def test_darken_white_is_grey(self):
        assert darken(RGB.white()) == RGB(128, 128, 128)


def test_random_rgb_uses_given_rng():
    first = random_rgb(random.Random(7))
    second = random_rgb(random.Random(7))
    assert first == second
    assert all(0 <= c <= 255 for c in first.as_tuple())
