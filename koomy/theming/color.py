"""Hex brand colour to HSL conversion used for white-label theming."""

from __future__ import annotations

import math
import re
from typing import NamedTuple

_HEX_RE = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)


class HSL(NamedTuple):
    h: int  # degrees, [0, 360)
    s: int  # percent
    l: int  # noqa: E741 - percent


def hex_to_hsl(hex_color: str) -> HSL | None:
    """Convert ``#RRGGBB`` (leading ``#`` optional) to integer HSL.

    Returns None for anything else, including ``#RGB`` shorthand, an alpha
    channel or named colours.
    """
    match = _HEX_RE.fullmatch(hex_color)
    if not match:
        return None

    r, g, b = (int(channel, 16) / 255 for channel in match.groups())

    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2
    hue = 0.0
    saturation = 0.0

    if high != low:
        delta = high - low
        saturation = delta / (2 - high - low) if lightness > 0.5 else delta / (high + low)
        if high == r:
            hue = ((g - b) / delta + (6 if g < b else 0)) / 6
        elif high == g:
            hue = ((b - r) / delta + 2) / 6
        else:
            hue = ((r - g) / delta + 4) / 6

    return HSL(
        h=_round_half_up(hue * 360) % 360,
        s=_round_half_up(saturation * 100),
        l=_round_half_up(lightness * 100),
    )


def _round_half_up(value: float) -> int:
    # round() sends halves to even; CSS tooling rounds them up.
    return math.floor(value + 0.5)
