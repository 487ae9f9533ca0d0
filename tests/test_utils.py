"""Tests for numeric and color helpers in utils.py.

Tests clamp with out-of-range, reversed and non-finite inputs, to_number parsing
of feature properties, color validation/normalization, RGB interpolation and
CSS conversion.
"""

import math

import pytest

from pyolchoropleth.utils import (
    clamp,
    color_to_css,
    interpolate_rgb,
    is_finite_number,
    is_valid_color,
    to_hex,
    to_number,
    to_rgb,
)


class TestClamp:
    """Tests for clamp function."""

    def test_inside_range(self):
        assert clamp(0.25) == 0.25

    def test_outside_range(self):
        assert clamp(-1.0) == 0.0
        assert clamp(2.0) == 1.0

    def test_reversed_bounds(self):
        """Test that swapped bounds are normalized."""
        assert clamp(5.0, 10.0, 0.0) == 5.0

    def test_non_finite_returns_lower_bound(self):
        assert clamp(float("nan")) == 0.0
        assert clamp(float("inf"), 1.0, 2.0) == 1.0

    def test_non_numeric_returns_lower_bound(self):
        assert clamp("abc", 3.0, 4.0) == 3.0


class TestToNumber:
    """Tests for to_number property parsing."""

    def test_numbers(self):
        assert to_number(3) == 3.0
        assert to_number(2.5) == 2.5

    def test_numeric_strings(self):
        assert to_number("42") == 42.0
        assert to_number(" 1.5 ") == 1.5

    def test_invalid_values_are_nan(self):
        for value in (None, "", "   ", "n/a", [], {}, True, False):
            assert math.isnan(to_number(value)), value

    def test_non_finite_is_nan(self):
        assert math.isnan(to_number(float("inf")))
        assert math.isnan(to_number("-inf"))
        assert math.isnan(to_number(float("nan")))

    def test_is_finite_number(self):
        assert is_finite_number(1)
        assert is_finite_number("2")
        assert not is_finite_number(float("nan"))
        assert not is_finite_number(True)
        assert not is_finite_number(None)


class TestColors:
    """Tests for color validation and conversion."""

    def test_valid_colors(self):
        assert is_valid_color("#ff0000")
        assert is_valid_color("steelblue")
        assert is_valid_color((1.0, 0.0, 0.0))

    def test_invalid_colors(self):
        assert not is_valid_color("not-a-color")
        assert not is_valid_color("#12345")
        assert not is_valid_color("")
        assert not is_valid_color(None)

    def test_to_hex_normalizes(self):
        assert to_hex("#FF0000") == "#ff0000"
        assert to_hex("red") == "#ff0000"

    def test_to_rgb(self):
        assert to_rgb("#ffffff") == (1.0, 1.0, 1.0)


class TestInterpolateRgb:
    """Tests for interpolate_rgb."""

    def test_endpoints(self):
        stops = [(0.0, 0.0, 0.0), (1.0, 1.0, 1.0)]
        assert interpolate_rgb(stops, 0.0) == (0.0, 0.0, 0.0)
        assert interpolate_rgb(stops, 1.0) == (1.0, 1.0, 1.0)

    def test_midpoint(self):
        stops = [(0.0, 0.0, 0.0), (1.0, 0.5, 0.0)]
        assert interpolate_rgb(stops, 0.5) == pytest.approx((0.5, 0.25, 0.0))

    def test_three_stops_center_is_middle_stop(self):
        stops = [(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)]
        assert interpolate_rgb(stops, 0.5) == pytest.approx((0.0, 1.0, 0.0))

    def test_position_is_clamped(self):
        stops = [(0.0, 0.0, 0.0), (1.0, 1.0, 1.0)]
        assert interpolate_rgb(stops, -3.0) == (0.0, 0.0, 0.0)
        assert interpolate_rgb(stops, 7.0) == (1.0, 1.0, 1.0)

    def test_single_stop(self):
        assert interpolate_rgb([(0.2, 0.3, 0.4)], 0.9) == (0.2, 0.3, 0.4)

    def test_empty_stops_raise(self):
        with pytest.raises(ValueError):
            interpolate_rgb([], 0.5)


class TestColorToCss:
    """Tests for color_to_css."""

    def test_hex_with_alpha(self):
        assert color_to_css("#ff0000", 0.8) == "rgba(255,0,0,0.8)"

    def test_string_without_alpha_is_passed_through(self):
        assert color_to_css("#ff0000") == "#ff0000"

    def test_rgb_tuple(self):
        assert color_to_css((10, 20, 30)) == "rgba(10,20,30,1.0)"

    def test_rgba_tuple_alpha_scaled(self):
        assert color_to_css((10, 20, 30, 255)) == "rgba(10,20,30,1.0)"
