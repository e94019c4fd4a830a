"""Per-character expansion of rainbow and gradient runs."""

from __future__ import annotations

import colorsys
import math
import re
from dataclasses import replace
from typing import TYPE_CHECKING

from minimessage_highlight.styles import Span, is_hex_color

if TYPE_CHECKING:
    from collections.abc import Iterator

    from minimessage_highlight.styles import Gradient, Rainbow, Style, StyledSpan

_HSL = re.compile(r"hsl\(\s*([-\d.]+)\s*,\s*([\d.]+)%\s*,\s*([\d.]+)%\s*\)")


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    """``#RRGGBB`` → ``(r, g, b)``."""
    return int(color[1:3], 16), int(color[3:5], 16), int(color[5:7], 16)


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Round each channel half up and encode as lowercase ``#rrggbb``."""
    return "#" + "".join(f"{math.floor(c + 0.5):02x}" for c in (r, g, b))


def hsl_color(hue: float) -> str:
    """CSS color string for a fully saturated, 50% lightness hue."""
    return f"hsl({hue:g}, 100%, 50%)"


def color_to_rgb(color: str) -> tuple[int, int, int] | None:
    """Parse a ``#RRGGBB`` or ``hsl(h, s%, l%)`` color, else None."""
    if is_hex_color(color):
        return hex_to_rgb(color)
    match = _HSL.fullmatch(color)
    if match is None:
        return None
    hue, saturation, lightness = (float(g) for g in match.groups())
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360, lightness / 100, saturation / 100)
    return round(r * 255), round(g * 255), round(b * 255)


def interpolate(color1: str, color2: str, t: float) -> str:
    """Component-wise linear interpolation between two hex colors."""
    start = hex_to_rgb(color1)
    end = hex_to_rgb(color2)
    r, g, b = (a + (z - a) * t for a, z in zip(start, end, strict=True))
    return rgb_to_hex(r, g, b)


def rainbow_hue(index: int, length: int, start_index: int = 0) -> float:
    """Hue in ``[0, 360)`` of the character at storage position ``index``."""
    return ((index - start_index) * 360 / length) % 360


def gradient_color(index: int, length: int, gradient: Gradient) -> str:
    """Hex color of the character at position ``index`` of a gradient run."""
    colors = gradient.colors
    count = len(colors)
    position = (index / length) * (count - 1)
    low = math.floor(position)
    high = min(low + 1, count - 1)
    t = position - low
    return interpolate(
        colors[(gradient.start_color_index + low) % count],
        colors[(gradient.start_color_index + high) % count],
        t,
    )


def _rainbow_colors(length: int, rainbow: Rainbow) -> Iterator[str]:
    for position in range(length):
        # Reversed runs read the hue sequence from the other end.
        index = length - 1 - position if rainbow.reverse else position
        yield hsl_color(rainbow_hue(index, length, rainbow.start_index))


def _gradient_colors(length: int, gradient: Gradient) -> Iterator[str]:
    for position in range(length):
        yield gradient_color(position, length, gradient)


def expand(span: Span, style: Style) -> Iterator[StyledSpan]:
    """Yield the run as-is, or one single-character span per character.

    Expanded styles equal ``style`` except for ``color``.  Rainbow wins over
    gradient when both are inherited.  Empty runs yield nothing.
    """
    length = span.length
    if length <= 0:
        return
    if style.rainbow is not None:
        colors = _rainbow_colors(length, style.rainbow)
    elif style.gradient is not None:
        colors = _gradient_colors(length, style.gradient)
    else:
        yield span, style
        return
    for offset, color in enumerate(colors):
        start = span.start + offset
        yield Span(start, start + 1), replace(style, color=color)
