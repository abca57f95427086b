"""Line-oriented session files.

Layout, one value per line::

    resolution
    resolution
    min_real
    max_real
    min_imaginary
    max_imaginary
    max_iterations
    radius_squared
    color theme
    magnification
    grid values, row-major (resolution ** 2 lines)

Loading validates every field into local state and only then hands back a
:class:`SessionSnapshot`; a bad file never produces a partial session.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np

from .colors import ColorTheme
from .config import HEADER_LINES, MAX_ITERATIONS_LIMIT, SESSION_SUFFIX
from .errors import CorruptData, InvalidResolution, IOFailure
from .viewport import Bounds, Viewport

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class SessionSnapshot:
    viewport: Viewport
    grid: np.ndarray


def session_path(path: PathLike) -> Path:
    """``path`` with the session suffix appended when it has none."""

    path = Path(path).expanduser()
    if path.suffix.lower() != SESSION_SUFFIX:
        path = path.with_name(path.name + SESSION_SUFFIX)
    return path


def dump_session(viewport: Viewport, grid: np.ndarray, resolution: int) -> str:
    if grid.shape != (resolution, resolution):
        raise ValueError(f"grid shape {grid.shape} does not match resolution {resolution}")

    bounds = viewport.bounds
    header = [
        str(resolution),
        str(resolution),
        repr(float(bounds.min_real)),
        repr(float(bounds.max_real)),
        repr(float(bounds.min_imaginary)),
        repr(float(bounds.max_imaginary)),
        str(int(viewport.max_iterations)),
        repr(float(viewport.radius_squared)),
        str(ColorTheme(viewport.color_theme)),
        repr(float(viewport.magnification)),
    ]
    cells = np.asarray(grid, dtype=np.int64).ravel().astype(str)
    return "\n".join(header + cells.tolist()) + "\n"


def save_session(path: PathLike, viewport: Viewport, grid: np.ndarray, resolution: int) -> Path:
    """Write the session to ``path`` and return the path actually written."""

    target = session_path(path)
    text = dump_session(viewport, grid, resolution)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(text)
    except OSError as exc:
        raise IOFailure(str(exc), message="Cannot write data to the file") from exc
    logger.info("Session saved to %s", target)
    return target


def _parse_int(value: str, field: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise CorruptData(f"{field} is not an integer: {value!r}") from exc


def _parse_float(value: str, field: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise CorruptData(f"{field} is not a number: {value!r}") from exc
    if not math.isfinite(parsed):
        raise CorruptData(f"{field} is not finite: {value!r}")
    return parsed


def parse_session(text: str, resolution: int) -> SessionSnapshot:
    lines = text.splitlines()

    for index in (0, 1):
        if index >= len(lines):
            break
        if _parse_int(lines[index], "resolution") != resolution:
            raise InvalidResolution(f"file resolution {lines[index].strip()} differs from {resolution}")

    expected = HEADER_LINES + resolution * resolution
    if len(lines) != expected:
        raise CorruptData(f"expected {expected} lines, found {len(lines)}")

    bounds = Bounds(
        min_real=_parse_float(lines[2], "min_real"),
        max_real=_parse_float(lines[3], "max_real"),
        min_imaginary=_parse_float(lines[4], "min_imaginary"),
        max_imaginary=_parse_float(lines[5], "max_imaginary"),
    )
    if not bounds.is_valid():
        raise CorruptData(f"invalid bounds {bounds.as_tuple()}")

    max_iterations = _parse_int(lines[6], "max_iterations")
    if not 1 <= max_iterations <= MAX_ITERATIONS_LIMIT:
        raise CorruptData(f"max_iterations must lie in [1, {MAX_ITERATIONS_LIMIT}], found {max_iterations}")

    radius_squared = _parse_float(lines[7], "radius_squared")
    if radius_squared <= 0:
        raise CorruptData(f"radius_squared must be positive, found {radius_squared}")

    try:
        theme = ColorTheme(lines[8].strip())
    except ValueError as exc:
        raise CorruptData(f"unknown color theme {lines[8]!r}") from exc

    magnification = _parse_float(lines[9], "magnification")
    if magnification <= 0:
        raise CorruptData(f"magnification must be positive, found {magnification}")

    cells = lines[HEADER_LINES:]
    try:
        values = np.fromiter((int(cell) for cell in cells), dtype=np.int64, count=len(cells))
    except ValueError as exc:
        raise CorruptData("grid contains a non-integer value") from exc
    if values.size and (values.min() < 0 or values.max() > max_iterations):
        raise CorruptData(f"grid values must lie in [0, {max_iterations}]")

    grid = values.astype(np.int32).reshape(resolution, resolution)
    grid.setflags(write=False)

    viewport = Viewport(
        bounds=bounds,
        max_iterations=max_iterations,
        radius_squared=radius_squared,
        color_theme=theme,
        magnification=magnification,
    )
    return SessionSnapshot(viewport=viewport, grid=grid)


def load_session(path: PathLike, resolution: int) -> SessionSnapshot:
    path = Path(path).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise CorruptData("file is not valid UTF-8 text") from exc
    except OSError as exc:
        raise IOFailure(str(exc)) from exc
    snapshot = parse_session(text, resolution)
    logger.info("Session loaded from %s", path)
    return snapshot
