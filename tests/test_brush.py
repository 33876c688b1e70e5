"""Tests for brush footprint resolution."""

import pytest

from brush import BRUSH_SIZES, InvalidPatternShape, MissingAnchor, resolve_footprint


class TestResolveFootprint:
    def test_tiny_brush_is_the_anchor_alone(self) -> None:
        footprint = resolve_footprint(BRUSH_SIZES["Tiny"])
        assert footprint.side == 1
        assert footprint.offsets == ((0, 0),)
        assert footprint.warning is None

    def test_small_brush_extends_right_and_down(self) -> None:
        footprint = resolve_footprint(BRUSH_SIZES["Small"])
        assert set(footprint.offsets) == {(0, 0), (1, 0), (0, 1), (1, 1)}

    def test_medium_brush_skips_blank_corners(self) -> None:
        footprint = resolve_footprint(BRUSH_SIZES["Medium"])
        offsets = set(footprint.offsets)
        assert footprint.side == 4
        assert len(offsets) == 12
        # Anchor sits at column 1, row 1, so the blank corners are these
        for corner in [(-1, -1), (2, -1), (-1, 2), (2, 2)]:
            assert corner not in offsets

    def test_large_brush_is_centered(self) -> None:
        offsets = set(resolve_footprint(BRUSH_SIZES["Large"]).offsets)
        assert len(offsets) == 21
        assert all(-2 <= dx <= 2 and -2 <= dy <= 2 for dx, dy in offsets)
        assert {(dx, dy) for dx, dy in offsets} == {(-dx, -dy) for dx, dy in offsets}

    def test_whitespace_is_insignificant(self) -> None:
        compact = resolve_footprint("_00_0X0000 00_00_")
        spread = resolve_footprint(BRUSH_SIZES["Medium"])
        assert set(compact.offsets) == set(spread.offsets)

    def test_same_pattern_resolves_identically(self) -> None:
        pattern = "0X\n00"
        first = resolve_footprint(pattern)
        resolve_footprint.cache_clear()
        second = resolve_footprint(pattern)
        assert first == second
        assert (0, 0) in second.offsets

    @pytest.mark.parametrize("pattern", ["X00", "X0000", "0 0 X 0 0 0 0 0 0 0"])
    def test_non_square_pattern_is_rejected(self, pattern: str) -> None:
        with pytest.raises(InvalidPatternShape):
            resolve_footprint(pattern)

    def test_missing_anchor_defaults_to_first_cell(self) -> None:
        footprint = resolve_footprint("00\n00")
        assert isinstance(footprint.warning, MissingAnchor)
        assert set(footprint.offsets) == {(0, 0), (1, 0), (0, 1), (1, 1)}

    def test_anchor_is_painted_even_on_a_blank_first_cell(self) -> None:
        footprint = resolve_footprint("_0\n00")
        assert footprint.warning is not None
        assert (0, 0) in footprint.offsets
        assert len(footprint.offsets) == 4

    def test_empty_pattern_is_single_cell(self) -> None:
        footprint = resolve_footprint("   ")
        assert footprint.offsets == ((0, 0),)
        assert footprint.warning is None

    def test_cells_at_translates_offsets(self) -> None:
        footprint = resolve_footprint("0X\n00")
        assert set(footprint.cells_at(5, 5)) == {(4, 5), (5, 5), (4, 6), (5, 6)}
