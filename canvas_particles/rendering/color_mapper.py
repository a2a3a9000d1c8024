"""
Colour parsing and the stroke style lookup table.

The connection pass picks one of 256 precomputed ``#rrggbbaa`` strings per
line instead of formatting a colour for every pair.
"""

from __future__ import annotations

import colorsys
import re
from dataclasses import dataclass
from functools import lru_cache

from matplotlib import colors as mcolors


# =============================================================================
# Parsing
# =============================================================================

_RGB_FUNC = re.compile(
    r"^rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+%?)\s*)?\)$",
    re.IGNORECASE,
)
_HSL_FUNC = re.compile(
    r"^hsla?\(\s*([\d.]+)(?:deg)?\s*,\s*([\d.]+)%\s*,\s*([\d.]+)%\s*(?:,\s*([\d.]+%?)\s*)?\)$",
    re.IGNORECASE,
)


def parse_color(value: str) -> tuple[int, int, int, int]:
    """
    Parse a colour string into an RGBA byte tuple.

    Accepts CSS ``rgb()``/``rgba()`` and ``hsl()``/``hsla()`` notation plus
    everything ``matplotlib.colors.to_rgba`` understands (named colours, ``#rgb``,
    ``#rgba``, ``#rrggbb``, ``#rrggbbaa``).

    Raises:
        ValueError: If the string is not a colour
    """
    text = str(value).strip()
    match = _RGB_FUNC.match(text)
    if match:
        r, g, b = (_channel(float(c)) for c in match.groups()[:3])
        return r, g, b, _alpha(match.group(4))

    match = _HSL_FUNC.match(text)
    if match:
        hue, sat, light = (float(c) for c in match.groups()[:3])
        rgb = colorsys.hls_to_rgb((hue % 360.0) / 360.0, min(light, 100.0) / 100.0, min(sat, 100.0) / 100.0)
        r, g, b = (_channel(c * 255.0) for c in rgb)
        return r, g, b, _alpha(match.group(4))

    try:
        rgba = mcolors.to_rgba(text)
    except ValueError as exc:
        raise ValueError(f"not a colour: {value!r}") from exc
    r, g, b, a = (_channel(c * 255.0) for c in rgba)
    return r, g, b, a


def _channel(value: float) -> int:
    return max(0, min(255, int(round(value))))


def _alpha(text: str | None) -> int:
    if text is None:
        return 255
    if text.endswith("%"):
        return _channel(float(text[:-1]) / 100.0 * 255.0)
    return _channel(float(text) * 255.0)


@lru_cache(maxsize=1024)
def hex_to_rgba(style: str) -> tuple[int, int, int, int]:
    """Decode a ``#rrggbbaa`` stroke style (as produced by the table)."""
    if len(style) != 9 or not style.startswith("#"):
        raise ValueError(f"expected #rrggbbaa, got {style!r}")
    raw = int(style[1:], 16)
    return (raw >> 24) & 0xFF, (raw >> 16) & 0xFF, (raw >> 8) & 0xFF, raw & 0xFF


# =============================================================================
# Stroke style table
# =============================================================================

@dataclass(frozen=True)
class StrokeStyleTable:
    """
    256 ``#rrggbbaa`` strings for one base colour, indexed by alpha byte.

    Attributes:
        rgb: Base colour channels
        opacity: Base opacity as an alpha byte (0-255)
        styles: One entry per alpha byte
    """
    rgb: tuple[int, int, int]
    opacity: int
    styles: tuple[str, ...]

    @classmethod
    def from_rgba(cls, r: int, g: int, b: int, a: int = 255) -> "StrokeStyleTable":
        base = f"#{r:02x}{g:02x}{b:02x}"
        styles = tuple(f"{base}{alpha:02x}" for alpha in range(256))
        return cls(rgb=(r, g, b), opacity=max(0, min(255, int(a))), styles=styles)

    @classmethod
    def from_color(cls, color: str) -> "StrokeStyleTable":
        return cls.from_rgba(*parse_color(color))

    def __getitem__(self, alpha: int) -> str:
        return self.styles[alpha]

    def __len__(self) -> int:
        return len(self.styles)

    @property
    def fill(self) -> str:
        """Style at full base opacity, used for particles and short lines."""
        return self.styles[self.opacity]

    def fade(self, factor: float) -> str:
        """Style at ``factor`` (clamped to 0..1) of the base opacity."""
        factor = max(0.0, min(1.0, factor))
        return self.styles[int(factor * self.opacity)]
