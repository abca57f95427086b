"""Escape-time computation for Mandelbrot grids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import tensorflow as tf

from .config import MAX_ITERATIONS_LIMIT
from .viewport import Bounds, Viewport


@dataclass(frozen=True)
class RenderRequest:
    """Everything the escape-time kernel needs for one grid."""

    width: int
    height: int
    bounds: Bounds
    max_iterations: int
    radius_squared: float

    @classmethod
    def for_viewport(cls, viewport: Viewport, resolution: int) -> "RenderRequest":
        return cls(
            width=resolution,
            height=resolution,
            bounds=viewport.bounds,
            max_iterations=viewport.max_iterations,
            radius_squared=viewport.radius_squared,
        )


@tf.function
def _escape_step(zs: tf.Tensor, cs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor, radius_squared: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every point that has not escaped by one iteration."""

    zs = tf.where(active, zs * zs + cs, zs)
    ns = ns + tf.cast(active, tf.int32)
    re = tf.math.real(zs)
    im = tf.math.imag(zs)
    new_active = tf.logical_and(active, re * re + im * im <= radius_squared)
    return zs, ns, new_active


@tf.function
def _escape_run(cs: tf.Tensor, max_iterations: tf.Tensor, radius_squared: tf.Tensor) -> tf.Tensor:
    """Iterate ``z <- z**2 + c`` from ``z = 0`` and return the escape counts."""

    i = tf.constant(0, dtype=tf.int32)
    zs = tf.zeros_like(cs)
    ns = tf.zeros(tf.shape(cs), dtype=tf.int32)
    active = tf.ones(tf.shape(cs), dtype=tf.bool)

    def cond(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tf.Tensor:
        return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

    def body(i: tf.Tensor, zs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor, tf.Tensor]:
        zs, ns, active = _escape_step(zs, cs, ns, active, radius_squared)
        return i + 1, zs, ns, active

    _, _, ns, _ = tf.while_loop(cond, body, (i, zs, ns, active))
    return ns


def sample_axes(width: int, height: int, bounds: Bounds) -> tuple[np.ndarray, np.ndarray]:
    """Real and imaginary coordinates of every column and row."""

    x = np.float64(bounds.min_real) + np.arange(width, dtype=np.float64) * np.float64(bounds.width) / np.float64(width)
    y = np.float64(bounds.min_imaginary) + np.arange(height, dtype=np.float64) * np.float64(bounds.height) / np.float64(height)
    return x, y


def compute_escape_grid(
    width: int,
    height: int,
    bounds: Bounds,
    max_iterations: int,
    radius_squared: float,
    *,
    device: Optional[str] = None,
) -> np.ndarray:
    """Compute the escape-time grid for ``bounds``.

    Cell ``[y, x]`` holds the iteration at which ``|z|**2`` first exceeded
    ``radius_squared``, or ``max_iterations`` for points that never escaped.
    The result is a fresh read-only ``int32`` array of shape
    ``(height, width)``; identical inputs always give identical grids.
    """

    if width <= 0 or height <= 0:
        raise ValueError("grid dimensions must be positive")
    if not bounds.is_valid():
        raise ValueError(f"invalid bounds {bounds}")
    if not 1 <= max_iterations <= MAX_ITERATIONS_LIMIT:
        raise ValueError(f"max_iterations must lie in [1, {MAX_ITERATIONS_LIMIT}]")
    if not radius_squared > 0:
        raise ValueError("radius_squared must be positive")

    x, y = sample_axes(width, height, bounds)

    with tf.device(device if device is not None else "/CPU:0"):
        x_tf = tf.convert_to_tensor(x, dtype=tf.float64)
        y_tf = tf.convert_to_tensor(y, dtype=tf.float64)
        X, Y = tf.meshgrid(x_tf, y_tf)
        cs = tf.complex(X, Y)
        ns = _escape_run(
            cs,
            tf.constant(max_iterations, dtype=tf.int32),
            tf.constant(radius_squared, dtype=tf.float64),
        )

    grid = np.array(ns.numpy(), dtype=np.int32)
    grid.setflags(write=False)
    return grid


def render_request(request: RenderRequest, *, device: Optional[str] = None) -> np.ndarray:
    return compute_escape_grid(
        request.width,
        request.height,
        request.bounds,
        request.max_iterations,
        request.radius_squared,
        device=device,
    )
