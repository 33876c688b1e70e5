"""Tests for color parsing and blending."""

import numpy as np
import pytest

from color import BACKGROUND, PALETTE, Color, as_color, blend, blend_array


class TestColor:
    def test_from_hex_round_trips_through_hex(self) -> None:
        assert Color.from_hex("#d02e26") == Color(0xD0, 0x2E, 0x26)
        assert Color.from_hex("D02E26").hex == "#D02E26"

    @pytest.mark.parametrize("text", ["#FFF", "#GGGGGG", "", "#1234567"])
    def test_from_hex_rejects_malformed(self, text: str) -> None:
        with pytest.raises(ValueError):
            Color.from_hex(text)

    def test_of_rejects_out_of_range_channel(self) -> None:
        with pytest.raises(ValueError):
            Color.of(0, 256, 0)

    def test_as_color_accepts_palette_names_and_triples(self) -> None:
        assert as_color("Red") == PALETTE["Red"]
        assert as_color([1, 2, 3]) == Color(1, 2, 3)
        assert as_color("#000000") == Color(0, 0, 0)

    def test_background_is_off_white(self) -> None:
        assert BACKGROUND.hex == "#F9FFFE"
        assert len(PALETTE) == 16


class TestBlend:
    def test_full_opacity_is_overlay(self) -> None:
        for base in PALETTE.values():
            for overlay in PALETTE.values():
                assert blend(base, overlay, 1.0) == overlay

    def test_zero_opacity_is_base(self) -> None:
        base, overlay = PALETTE["Blue"], PALETTE["Yellow"]
        assert blend(base, overlay, 0.0) == base

    def test_half_opacity_rounds_midpoint_up(self) -> None:
        result = blend(Color(255, 255, 255), Color(0, 0, 0), 0.5)
        assert result.hex == "#808080"

    def test_rejects_opacity_outside_unit_interval(self) -> None:
        with pytest.raises(ValueError):
            blend(Color(0, 0, 0), Color(1, 1, 1), 1.5)

    def test_array_form_matches_scalar_form(self) -> None:
        bases = [PALETTE[name] for name in ("White", "Orange", "Cyan", "Black")]
        overlay = PALETTE["Purple"]
        for opacity in (0.25, 0.5, 0.75, 1.0):
            mixed = blend_array(np.array(bases, dtype=np.uint8), overlay, opacity)
            expected = [blend(base, overlay, opacity) for base in bases]
            assert [Color(*map(int, px)) for px in mixed] == expected
