"""Color themes and the escape-count to RGB mapping."""

from __future__ import annotations

import math
from enum import StrEnum

import numpy as np

from .config import COLOR_MAX_VALUE


class ColorTheme(StrEnum):
    BLACK_WHITE = "blackWhite"
    GREY_SCALE = "greyScale"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"
    YELLOW = "yellow"
    CYAN = "cyan"
    MAGENTA = "magenta"


BASE_COLORS: dict[ColorTheme, tuple[int, int, int]] = {
    ColorTheme.BLACK_WHITE: (255, 255, 255),
    ColorTheme.GREY_SCALE: (0, 0, 0),
    ColorTheme.RED: (255, 0, 0),
    ColorTheme.GREEN: (0, 255, 0),
    ColorTheme.BLUE: (0, 0, 255),
    ColorTheme.YELLOW: (255, 255, 0),
    ColorTheme.CYAN: (0, 255, 255),
    ColorTheme.MAGENTA: (255, 0, 255),
}

DEFAULT_THEME = ColorTheme.GREY_SCALE

_CYCLE = tuple(ColorTheme)


def next_theme(theme: ColorTheme) -> ColorTheme:
    """Return the theme after ``theme`` in declaration order, wrapping around."""

    index = _CYCLE.index(ColorTheme(theme))
    return _CYCLE[(index + 1) % len(_CYCLE)]


def color_scale_for(max_iterations: int) -> float:
    if max_iterations < 1:
        raise ValueError("max_iterations must be positive")
    return COLOR_MAX_VALUE / max_iterations


def scaled_value(iterations: int, color_scale: float) -> int:
    # Half-up rounding, matching the pixel writer the grids were tuned for.
    value = int(math.floor(iterations * color_scale + 0.5))
    return max(0, min(value, COLOR_MAX_VALUE))


def color_for(theme: ColorTheme, value: int, is_interior: bool) -> tuple[int, int, int]:
    """Map a scaled escape count to an RGB triple.

    Interior pixels are special-cased per theme; every other pixel is linear
    in ``value`` so the boundary stands out against a flat interior.
    """

    theme = ColorTheme(theme)
    if theme is ColorTheme.BLACK_WHITE:
        channel = COLOR_MAX_VALUE if is_interior else 0
        return channel, channel, channel
    if is_interior:
        return 0, 0, 0
    if theme is ColorTheme.GREY_SCALE:
        return value, value, value
    base = BASE_COLORS[theme]
    return tuple(value if component else 0 for component in base)


def colorize(grid: np.ndarray, theme: ColorTheme, max_iterations: int) -> np.ndarray:
    """Vectorised :func:`color_for` over a whole escape grid.

    Returns an ``(H, W, 3)`` ``uint8`` array ready for an image writer.
    """

    theme = ColorTheme(theme)
    scale = color_scale_for(max_iterations)
    counts = np.asarray(grid, dtype=np.float64)
    values = np.clip(np.floor(counts * scale + 0.5), 0, COLOR_MAX_VALUE).astype(np.uint8)
    interior = np.asarray(grid) >= max_iterations

    rgb = np.zeros(counts.shape + (3,), dtype=np.uint8)
    if theme is ColorTheme.BLACK_WHITE:
        rgb[interior] = COLOR_MAX_VALUE
        return rgb

    if theme is ColorTheme.GREY_SCALE:
        channels = (1, 1, 1)
    else:
        channels = BASE_COLORS[theme]
    for k, component in enumerate(channels):
        if component:
            rgb[..., k] = np.where(interior, 0, values)
    return rgb
