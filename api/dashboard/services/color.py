"""
Color pipette conversions.

Converts a sampled RGB pixel into the HEX / CMYK / HSV / HSL notations shown
in the pipette panel. All functions are pure; channels are expected to be
integers in 0..255 and are not clamped here.
"""

import io
import math
from typing import NamedTuple

from PIL import Image


class Cmyk(NamedTuple):
    c: int
    m: int
    y: int
    k: int


class Hsv(NamedTuple):
    h: int
    s: int
    v: int


class Hsl(NamedTuple):
    h: int
    s: int
    l: int  # noqa: E741


def _round(value: float) -> int:
    """Round half up, like the browser's Math.round."""
    return int(math.floor(value + 0.5))


def _degrees(hue: float) -> int:
    # 0.9995 of a turn rounds to 360, which is 0
    return _round(hue * 360) % 360


def to_hex(r: int, g: int, b: int) -> str:
    """Encode as `#rrggbb` (lowercase)."""
    return f"#{r:02x}{g:02x}{b:02x}"


def from_hex(value: str) -> tuple[int, int, int]:
    """Decode `#rrggbb` or the `#rgb` shorthand."""
    digits = value.strip().lstrip("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6:
        raise ValueError(f"Invalid hex color: {value!r}")
    number = int(digits, 16)
    return (number >> 16) & 255, (number >> 8) & 255, number & 255


def to_cmyk(r: int, g: int, b: int) -> Cmyk:
    rr, gg, bb = r / 255, g / 255, b / 255
    k = 1 - max(rr, gg, bb)
    if k == 1:
        return Cmyk(0, 0, 0, 100)
    return Cmyk(
        c=_round((1 - rr - k) / (1 - k) * 100),
        m=_round((1 - gg - k) / (1 - k) * 100),
        y=_round((1 - bb - k) / (1 - k) * 100),
        k=_round(k * 100),
    )


def _hue(r: float, g: float, b: float, mx: float, d: float) -> float:
    """Hue as a fraction of a turn from the max/min channel spread."""
    if mx == r:
        h = (g - b) / d + (6 if g < b else 0)
    elif mx == g:
        h = (b - r) / d + 2
    else:
        h = (r - g) / d + 4
    return h / 6


def to_hsv(r: int, g: int, b: int) -> Hsv:
    rr, gg, bb = r / 255, g / 255, b / 255
    mx, mn = max(rr, gg, bb), min(rr, gg, bb)
    d = mx - mn
    s = 0 if mx == 0 else d / mx
    h = 0 if mx == mn else _hue(rr, gg, bb, mx, d)
    return Hsv(h=_degrees(h), s=_round(s * 100), v=_round(mx * 100))


def to_hsl(r: int, g: int, b: int) -> Hsl:
    rr, gg, bb = r / 255, g / 255, b / 255
    mx, mn = max(rr, gg, bb), min(rr, gg, bb)
    l = (mx + mn) / 2  # noqa: E741
    if mx == mn:
        return Hsl(h=0, s=0, l=_round(l * 100))
    d = mx - mn
    s = d / (2 - mx - mn) if l > 0.5 else d / (mx + mn)
    return Hsl(h=_degrees(_hue(rr, gg, bb, mx, d)), s=_round(s * 100), l=_round(l * 100))



def describe(r: int, g: int, b: int) -> dict[str, str]:
    """Build the pixel-query payload shown in the pipette inputs."""
    cmyk = to_cmyk(r, g, b)
    hsv = to_hsv(r, g, b)
    hsl = to_hsl(r, g, b)
    return {
        "hex": to_hex(r, g, b),
        "rgb": f"{r}, {g}, {b}",
        "cmyk": f"{cmyk.c}%, {cmyk.m}%, {cmyk.y}%, {cmyk.k}%",
        "hsv": f"{hsv.h}°, {hsv.s}%, {hsv.v}%",
        "hsl": f"{hsl.h}°, {hsl.s}%, {hsl.l}%",
    }


def sample_pixel(image_bytes: bytes, x: int, y: int) -> tuple[int, int, int, int]:
    """Read the RGBA sample at (x, y), clamping the point into the image.

    Raises:
        PIL.UnidentifiedImageError: If the bytes are not a readable image
    """
    with Image.open(io.BytesIO(image_bytes)) as img:
        rgba = img.convert("RGBA")
        x = min(max(x, 0), rgba.width - 1)
        y = min(max(y, 0), rgba.height - 1)
        return rgba.getpixel((x, y))
