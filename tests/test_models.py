"""Tests for configuration dataclasses in models.py and palettes in schemes.py."""

import pytest

from pyolchoropleth.models import (
    DEFAULT_BORDER_COLOR,
    BoundingBox,
    ChoroplethOptions,
    ColorScaleConfig,
    FeatureStyle,
    OverlayOptions,
    ViewportRequest,
)
from pyolchoropleth.schemes import SCHEMES, get_scheme, scheme_names


class TestColorScaleConfig:
    """Tests for ColorScaleConfig."""

    def test_usable_palette_truncates(self):
        config = ColorScaleConfig(kind="sequential", palette=["#000000", "#111111", "#222222"], step_count=2)
        assert config.usable_palette == ("#000000", "#111111")

    def test_usable_palette_defaults_to_full(self):
        config = ColorScaleConfig(palette=["#000000", "#111111"])
        assert config.usable_palette == ("#000000", "#111111")

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError):
            ColorScaleConfig(kind="rainbow", palette=["#000000"])

    def test_non_positive_step_count_raises(self):
        with pytest.raises(ValueError):
            ColorScaleConfig(palette=["#000000"], step_count=0)


class TestChoroplethOptions:
    """Tests for ChoroplethOptions."""

    def test_defaults(self):
        opts = ChoroplethOptions()
        assert opts.scale_kind == "sequential"
        assert opts.zoom_to_selection is False
        assert opts.overlay_trigger == "click"
        assert opts.selection_border_color == DEFAULT_BORDER_COLOR

    def test_from_dict_camel_case(self):
        opts = ChoroplethOptions.from_dict({
            "scaleKind": "diverging",
            "stepCount": 4,
            "zoomToSelection": True,
            "overlayTrigger": "hover",
            "selectionBorderColor": "#ff00ff",
        })
        assert opts == ChoroplethOptions("diverging", 4, True, "hover", "#ff00ff")

    def test_from_dict_snake_case_wins(self):
        opts = ChoroplethOptions.from_dict({"scale_kind": "categorical", "scaleKind": "diverging"})
        assert opts.scale_kind == "categorical"

    @pytest.mark.parametrize(
        "raw, expected",
        [("false", False), ("False", False), ("0", False), ("off", False), (0, False),
         ("true", True), ("YES", True), (" on ", True), (1, True), (True, True)],
    )
    def test_from_dict_parses_string_flags(self, raw, expected):
        opts = ChoroplethOptions.from_dict({"zoomToSelection": raw})
        assert opts.zoom_to_selection is expected

    @pytest.mark.parametrize("raw", ["maybe", "", 2, None, [True]])
    def test_from_dict_rejects_non_boolean_flag(self, raw):
        with pytest.raises(ValueError, match="zoom_to_selection"):
            ChoroplethOptions.from_dict({"zoom_to_selection": raw})

    def test_invalid_kind_and_trigger(self):
        with pytest.raises(ValueError):
            ChoroplethOptions(scale_kind="nope")
        with pytest.raises(ValueError):
            ChoroplethOptions(overlay_trigger="doubleclick")

    def test_invalid_border_color_falls_back(self, caplog):
        with caplog.at_level("WARNING", logger="pyolchoropleth.models"):
            opts = ChoroplethOptions(selection_border_color="not-a-color")
        assert opts.selection_border_color == DEFAULT_BORDER_COLOR
        assert "border color" in caplog.text

    @pytest.mark.parametrize(
        "requested, palette_length, expected",
        [
            (None, 6, 6),
            (1, 6, 3),
            (4, 6, 4),
            (10, 6, 6),
            (5, 2, 2),
            (None, 1, 1),
        ],
    )
    def test_step_count_clamping(self, requested, palette_length, expected):
        opts = ChoroplethOptions(step_count=requested)
        assert opts.resolve_step_count(palette_length) == expected

    def test_scale_config(self):
        opts = ChoroplethOptions(scale_kind="diverging", step_count=4)
        config = opts.scale_config(get_scheme("diverging", "RdBu"))
        assert config.kind == "diverging"
        assert len(config.usable_palette) == 4


class TestStylesAndGeometryModels:
    """Tests for FeatureStyle, OverlayOptions, BoundingBox and ViewportRequest."""

    def test_unselected_style(self):
        style = FeatureStyle.for_feature("#ff0000", False, "#0099ff").to_js()
        assert style == {
            "fill": "rgba(255,0,0,0.8)",
            "stroke": "rgba(61,61,61,1.0)",
            "stroke_width": 1.0,
        }

    def test_selected_style(self):
        style = FeatureStyle.for_feature("#ff0000", True, "#0099ff").to_js()
        assert style["stroke"] == "rgba(0,153,255,1.0)"
        assert style["stroke_width"] == 3.0

    def test_overlay_options_to_js(self):
        assert OverlayOptions().to_js() == {
            "positioning": "bottom-center",
            "offset": [0, -10],
            "auto_pan": True,
            "auto_pan_duration": 250,
        }

    def test_bounding_box(self):
        bbox = BoundingBox(0.0, 2.0, 4.0, 10.0)
        assert bbox.width == 4.0
        assert bbox.height == 8.0
        assert bbox.center == (2.0, 6.0)

    def test_viewport_request_to_js(self):
        req = ViewportRequest(center=(1, 2), zoom=5.5, duration_ms=500)
        assert req.to_js() == {"center": [1.0, 2.0], "zoom": 5.5, "duration": 500}


class TestSchemes:
    """Tests for the static palette tables."""

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            SCHEMES["sequential"]["Custom"] = ("#000000",)

    def test_get_scheme_defaults_to_first(self):
        assert get_scheme("sequential") == SCHEMES["sequential"]["Blues"]

    def test_get_scheme_truncates(self):
        assert len(get_scheme("categorical", "Set2", steps=3)) == 3

    def test_unknown_scheme(self):
        with pytest.raises(ValueError):
            get_scheme("sequential", "Viridis")
        with pytest.raises(ValueError):
            scheme_names("qualitative")
