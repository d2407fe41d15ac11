"""
Color parsing and manipulation for device commands.

Colors travel through the engine as RGB values (0-255 per channel). Brightness
scaling happens in HSL space so that hue and saturation are preserved while
lightness is reduced.
"""

import colorsys
import math
import random
from dataclasses import dataclass
from typing import Sequence, Union

from ..errors import InvalidColor


@dataclass(frozen=True)
class RGB:
    """RGB color value."""
    r: int
    g: int
    b: int

    @classmethod
    def from_hex(cls, hex_color: str) -> "RGB":
        """
        Create RGB from a hex string.

        Args:
            hex_color: Hex string like "#FF6B00", "#F60", "FF6B00"

        Raises:
            InvalidColor: If hex format is invalid
        """
        hex_str = hex_color.strip().lstrip("#")

        # Expand shorthand (#RGB -> #RRGGBB)
        if len(hex_str) == 3:
            hex_str = "".join(c * 2 for c in hex_str)

        if len(hex_str) != 6:
            raise InvalidColor(hex_color)

        try:
            return cls(int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16))
        except ValueError:
            raise InvalidColor(hex_color) from None

    @classmethod
    def black(cls) -> "RGB":
        return cls(0, 0, 0)

    @classmethod
    def white(cls) -> "RGB":
        return cls(255, 255, 255)

    @property
    def hex(self) -> str:
        """Hex string like "#FF6B00"."""
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)


# Anything the engine accepts as a color before resolution
ColorSpec = Union[RGB, str, int, Sequence[float]]


def _round(value: float) -> int:
    """Round half up, so 127.5 becomes 128 rather than 128-or-127."""
    return int(math.floor(value + 0.5))


def _channel(value: object, spec: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidColor(spec)
    if not 0 <= value <= 255:
        raise InvalidColor(spec)
    return _round(value)


def parse_color(spec: object) -> RGB:
    """
    Parse a literal color (no preset lookup).

    Args:
        spec: RGB value, hex string, 0xRRGGBB integer or (r, g, b) sequence
            of numbers in 0-255

    Returns:
        Parsed RGB color

    Raises:
        InvalidColor: If the spec is not a recognizable color
    """
    if isinstance(spec, RGB):
        return spec
    if isinstance(spec, str):
        return RGB.from_hex(spec)
    if isinstance(spec, int) and not isinstance(spec, bool):
        if not 0 <= spec <= 0xFFFFFF:
            raise InvalidColor(spec)
        return RGB((spec >> 16) & 0xFF, (spec >> 8) & 0xFF, spec & 0xFF)
    if isinstance(spec, (tuple, list)) and len(spec) == 3:
        return RGB(*(_channel(c, spec) for c in spec))
    raise InvalidColor(spec)


def to_hsl(color: RGB) -> tuple[float, float, float]:
    """Convert to HSL as (hue 0-360, saturation 0-100, lightness 0-100)."""
    h, l, s = colorsys.rgb_to_hls(color.r / 255.0, color.g / 255.0, color.b / 255.0)
    return (h * 360.0, s * 100.0, l * 100.0)


def from_hsl(hue: float, saturation: float, lightness: float) -> RGB:
    """Convert HSL (hue 0-360, saturation/lightness 0-100) to RGB."""
    lightness = max(0.0, min(100.0, lightness))
    saturation = max(0.0, min(100.0, saturation))
    r, g, b = colorsys.hls_to_rgb((hue % 360.0) / 360.0, lightness / 100.0, saturation / 100.0)
    return RGB(_round(r * 255), _round(g * 255), _round(b * 255))


def scale_lightness(color: RGB, factor: float) -> RGB:
    """
    Scale a color's lightness, keeping hue and saturation.

    HSL components are rounded to whole degrees/percent before scaling so the
    same input always lands on the same device color.
    """
    hue, saturation, lightness = (_round(v) for v in to_hsl(color))
    return from_hsl(hue, saturation, lightness * factor)


def darken(color: RGB, ratio: float = 0.5) -> RGB:
    """Darken a color by reducing lightness by ratio (0.5 = half as light)."""
    hue, saturation, lightness = to_hsl(color)
    return from_hsl(hue, saturation, lightness * (1.0 - ratio))


def random_rgb(rng: random.Random | None = None) -> RGB:
    """Uniformly random color."""
    rng = rng or random
    return RGB(rng.randint(0, 255), rng.randint(0, 255), rng.randint(0, 255))
