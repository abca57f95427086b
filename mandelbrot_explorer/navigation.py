"""Screen-space gestures to complex-plane bounds."""

from __future__ import annotations

import numpy as np

from .errors import DegenerateSelection
from .viewport import Bounds

Point = tuple[float, float]


def pixel_scale(bounds: Bounds, resolution: int) -> tuple[np.float64, np.float64]:
    return (
        np.float64(bounds.width) / np.float64(resolution),
        np.float64(bounds.height) / np.float64(resolution),
    )


def pixel_to_complex(bounds: Bounds, x: float, y: float, resolution: int) -> tuple[float, float]:
    """Map pixel ``(x, y)`` to the complex point sampled there."""

    re = np.float64(bounds.min_real) + np.float64(x) * np.float64(bounds.width) / np.float64(resolution)
    im = np.float64(bounds.min_imaginary) + np.float64(y) * np.float64(bounds.height) / np.float64(resolution)
    return float(re), float(im)


def pan_bounds(bounds: Bounds, press: Point, release: Point, resolution: int) -> Bounds:
    """Shift ``bounds`` by the drag from ``press`` to ``release``.

    The window keeps its size; both real bounds move by the same real
    offset and both imaginary bounds by the same imaginary offset.
    """

    dx = np.float64(release[0]) - np.float64(press[0])
    dy = np.float64(release[1]) - np.float64(press[1])
    x_scale, y_scale = pixel_scale(bounds, resolution)
    shift_re = x_scale * dx
    shift_im = y_scale * dy
    return Bounds(
        min_real=float(bounds.min_real + shift_re),
        max_real=float(bounds.max_real + shift_re),
        min_imaginary=float(bounds.min_imaginary + shift_im),
        max_imaginary=float(bounds.max_imaginary + shift_im),
    )


def selection_square(press: Point, release: Point, resolution: int) -> tuple[float, float, float]:
    """Square selected by a zoom drag, clamped to the pixel grid.

    Returns ``(x0, y0, side)``. The side is the longer drag extent; the
    origin is clamped into the grid first, then the side shrinks so the
    square stays inside on both axes.
    """

    side = max(abs(release[0] - press[0]), abs(release[1] - press[1]))
    x0 = min(max(min(press[0], release[0]), 0.0), float(resolution))
    y0 = min(max(min(press[1], release[1]), 0.0), float(resolution))
    side = min(side, resolution - x0, resolution - y0)
    return float(x0), float(y0), float(max(side, 0.0))


def zoom_bounds(bounds: Bounds, press: Point, release: Point, resolution: int) -> Bounds:
    """Bounds of the square selected between ``press`` and ``release``."""

    x0, y0, side = selection_square(press, release, resolution)
    if side <= 0:
        raise DegenerateSelection(f"empty zoom selection from {press} to {release}")

    min_re, min_im = pixel_to_complex(bounds, x0, y0, resolution)
    max_re, max_im = pixel_to_complex(bounds, x0 + side, y0 + side, resolution)
    zoomed = Bounds(min_re, max_re, min_im, max_im)
    if not zoomed.is_valid():
        # Selections narrower than one ulp of the current window.
        raise DegenerateSelection(f"zoom selection too small for the current window: {zoomed}")
    return zoomed
