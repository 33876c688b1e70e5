"""Color value type, palette, and alpha-blend compositing."""

import math
from typing import NamedTuple

import numpy as np


class Color(NamedTuple):
    r: int
    g: int
    b: int

    @classmethod
    def of(cls, r: int, g: int, b: int) -> "Color":
        """Build a Color, rejecting channels outside the 8-bit range."""
        for channel in (r, g, b):
            if not isinstance(channel, (int, np.integer)) or not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel!r}")
        return cls(int(r), int(g), int(b))

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        """Parse '#RRGGBB' or 'RRGGBB' (case-insensitive)."""
        raw = text.strip().lstrip("#")
        if len(raw) != 6:
            raise ValueError(f"Not a hex color: {text!r}")
        try:
            value = int(raw, 16)
        except ValueError:
            raise ValueError(f"Not a hex color: {text!r}") from None
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    @property
    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


def as_color(value) -> Color:
    """Coerce a hex string or an (r, g, b) sequence to a Color."""
    if isinstance(value, Color):
        return value
    if isinstance(value, str):
        return PALETTE.get(value) or Color.from_hex(value)
    r, g, b = value
    return Color.of(r, g, b)


def _check_opacity(opacity: float):
    if not 0.0 <= opacity <= 1.0:
        raise ValueError(f"Opacity must be within [0, 1], got {opacity}")


def blend(base: Color, overlay: Color, opacity: float) -> Color:
    """Composite overlay over base. opacity=1.0 is all overlay, 0.0 all base.

    Channels round half up, so mixing 255 and 0 at 0.5 gives 128.
    """
    _check_opacity(opacity)
    return Color(*(
        int(math.floor(o * opacity + b * (1.0 - opacity) + 0.5))
        for b, o in zip(base, overlay)
    ))


def blend_array(base: np.ndarray, overlay: Color, opacity: float) -> np.ndarray:
    """Vectorised blend of an (..., 3) uint8 array against a single color."""
    _check_opacity(opacity)
    top = np.asarray(overlay, dtype=np.float64)
    mixed = top * opacity + base.astype(np.float64) * (1.0 - opacity)
    return np.floor(mixed + 0.5).astype(np.uint8)


PALETTE = {
    "White": Color.from_hex("#F9FFFE"),
    "Orange": Color.from_hex("#F9801D"),
    "Magenta": Color.from_hex("#C74EBD"),
    "LightBlue": Color.from_hex("#3AB3DA"),
    "Yellow": Color.from_hex("#FED83D"),
    "Lime": Color.from_hex("#80C71F"),
    "Pink": Color.from_hex("#F38BAA"),
    "Gray": Color.from_hex("#474F52"),
    "LightGray": Color.from_hex("#9D9D97"),
    "Cyan": Color.from_hex("#169C9C"),
    "Purple": Color.from_hex("#8932B8"),
    "Blue": Color.from_hex("#3C44AA"),
    "Brown": Color.from_hex("#835432"),
    "Green": Color.from_hex("#5E7C16"),
    "Red": Color.from_hex("#D02E26"),
    "Black": Color.from_hex("#1D1D21"),
}

BACKGROUND = PALETTE["White"]
DEFAULT_BRUSH_COLOR = PALETTE["Red"]
