"""Brush footprints: turn a textual brush pattern into anchor-relative offsets.

A pattern is a square grid of characters. ``0`` paints, ``X`` paints and
marks the anchor (the cell under the pointer), ``_`` is a hole. Whitespace is
ignored, so patterns can be written across several indented lines.
"""

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional

FILL_CHARACTER = "0"
ANCHOR_CHARACTER = "X"
BLANK_CHARACTER = "_"

BRUSH_SIZES = {
    "Tiny": "X",
    "Small": """X0
                00""",
    "Medium": """_00_
                 0X00
                 0000
                 _00_""",
    "Large": """_000_
                00000
                00X00
                00000
                _000_""",
}


class InvalidPatternShape(ValueError):
    """The stripped pattern does not have a perfect-square character count."""

    def __init__(self, length: int):
        super().__init__(f"Brush pattern must be square, got {length} characters")
        self.length = length


@dataclass(frozen=True)
class MissingAnchor:
    """Non-fatal diagnostic: no anchor marker, the first cell was used."""

    pattern: str

    def __str__(self) -> str:
        return f"No '{ANCHOR_CHARACTER}' in brush pattern, anchoring at the first cell"


@dataclass(frozen=True)
class ResolvedFootprint:
    side: int
    offsets: tuple[tuple[int, int], ...]
    warning: Optional[MissingAnchor] = None

    def cells_at(self, col: int, row: int) -> Iterator[tuple[int, int]]:
        """Absolute cells covered when the anchor sits at (col, row)."""
        for dx, dy in self.offsets:
            yield col + dx, row + dy


def strip_pattern(pattern: str) -> str:
    return "".join(pattern.split())


@lru_cache(maxsize=64)
def resolve_footprint(pattern: str) -> ResolvedFootprint:
    """Resolve a brush pattern to its footprint.

    Raises InvalidPatternShape when the stripped length is not a perfect
    square. A missing anchor is reported through ``warning`` instead.
    """
    plain = strip_pattern(pattern)
    if not plain:
        return ResolvedFootprint(side=1, offsets=((0, 0),))

    side = math.isqrt(len(plain))
    if side * side != len(plain):
        raise InvalidPatternShape(len(plain))

    warning = None
    anchor_index = plain.find(ANCHOR_CHARACTER)
    if anchor_index == -1:
        anchor_index = 0
        warning = MissingAnchor(pattern)
    anchor_x, anchor_y = anchor_index % side, anchor_index // side

    # The anchor cell is always painted, even if the defaulted anchor is a hole
    offsets = [(0, 0)]
    for index, char in enumerate(plain):
        if index == anchor_index or char not in (FILL_CHARACTER, ANCHOR_CHARACTER):
            continue
        offsets.append((index % side - anchor_x, index // side - anchor_y))

    return ResolvedFootprint(side=side, offsets=tuple(offsets), warning=warning)
