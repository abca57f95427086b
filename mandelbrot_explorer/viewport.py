"""Viewport state: the complex-plane window plus iteration parameters."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from .colors import DEFAULT_THEME, ColorTheme, color_scale_for
from .config import (
    DEFAULT_RADIUS_SQUARED,
    INITIAL_MAX_IMAGINARY,
    INITIAL_MAX_ITERATIONS,
    INITIAL_MAX_REAL,
    INITIAL_MIN_IMAGINARY,
    INITIAL_MIN_REAL,
)


@dataclass(frozen=True)
class Bounds:
    """Rectangle in the complex plane mapped onto the pixel grid."""

    min_real: float
    max_real: float
    min_imaginary: float
    max_imaginary: float

    @property
    def width(self) -> float:
        return self.max_real - self.min_real

    @property
    def height(self) -> float:
        return self.max_imaginary - self.min_imaginary

    @property
    def area(self) -> float:
        return self.width * self.height

    def is_valid(self) -> bool:
        values = (self.min_real, self.max_real, self.min_imaginary, self.max_imaginary)
        if not all(math.isfinite(v) for v in values):
            return False
        return self.max_real > self.min_real and self.max_imaginary > self.min_imaginary

    def validate(self) -> "Bounds":
        if not self.is_valid():
            raise ValueError(f"invalid bounds {self}")
        return self

    def as_tuple(self) -> tuple[float, float, float, float]:
        return self.min_real, self.max_real, self.min_imaginary, self.max_imaginary


INITIAL_BOUNDS = Bounds(INITIAL_MIN_REAL, INITIAL_MAX_REAL, INITIAL_MIN_IMAGINARY, INITIAL_MAX_IMAGINARY)


def magnification(initial: Bounds, bounds: Bounds) -> float:
    """Cumulative zoom of ``bounds`` relative to ``initial``, as an area ratio."""

    return initial.area / bounds.area


@dataclass(frozen=True)
class Viewport:
    """Snapshot of everything needed to compute and color a grid."""

    bounds: Bounds = INITIAL_BOUNDS
    max_iterations: int = INITIAL_MAX_ITERATIONS
    radius_squared: float = DEFAULT_RADIUS_SQUARED
    color_theme: ColorTheme = DEFAULT_THEME
    magnification: float = 1.0

    @property
    def color_scale(self) -> float:
        return color_scale_for(self.max_iterations)

    def with_bounds(self, bounds: Bounds, initial: Bounds = INITIAL_BOUNDS) -> "Viewport":
        """Return a copy moved to ``bounds`` with the magnification refreshed."""

        return replace(self, bounds=bounds, magnification=magnification(initial, bounds))


def initial_viewport() -> Viewport:
    return Viewport()
