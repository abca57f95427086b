"""The explorer session: one viewport, one grid and its undo history.

Front ends drive an :class:`ExplorerSession` through plain calls (press and
release points for gestures, theme names, iteration counts, file paths) and
receive grids through a :class:`GridConsumer`. Nothing here draws.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional, Protocol

import numpy as np

from .colors import ColorTheme, next_theme
from .config import MAX_ITERATIONS_LIMIT, RESOLUTION
from .errors import DegenerateSelection, PersistenceError
from .history import ColorChange, Command, CommandHistory, IterationChange, Pan, ToggleOverlay, Zoom
from .navigation import Point, pan_bounds, zoom_bounds
from .persistence import PathLike, load_session, save_session
from .renderer import RenderRequest, render_request
from .viewport import Bounds, Viewport, initial_viewport
from .worker import RecomputeWorker

logger = logging.getLogger(__name__)


class GridConsumer(Protocol):
    def display(self, grid: np.ndarray, viewport: Viewport, overlay_visible: bool) -> None: ...


class ExplorerSession:
    """Mutable exploration state and the operations that change it.

    With ``background=True`` grids are recomputed on a worker thread; undo,
    redo, load and reset cancel any recompute still in flight before they
    touch the viewport.
    """

    def __init__(
        self,
        resolution: int = RESOLUTION,
        *,
        consumer: Optional[GridConsumer] = None,
        notify: Optional[Callable[[str], None]] = None,
        background: bool = False,
        compute: Callable[[RenderRequest], np.ndarray] = render_request,
    ) -> None:
        if resolution <= 0:
            raise ValueError("resolution must be positive")
        self._resolution = resolution
        self._consumer = consumer
        self._notify = notify
        self._compute = compute
        self._history = CommandHistory()
        self._viewport = initial_viewport()
        self._overlay_visible = False
        self._grid_request = RenderRequest.for_viewport(self._viewport, resolution)
        self._grid: np.ndarray = compute(self._grid_request)
        self._worker = RecomputeWorker(self._on_worker_result, compute) if background else None
        self._publish()

    # --- read-only views ---

    @property
    def resolution(self) -> int:
        return self._resolution

    @property
    def history(self) -> CommandHistory:
        return self._history

    @property
    def overlay_visible(self) -> bool:
        return self._overlay_visible

    def current_grid(self) -> np.ndarray:
        return self._grid

    def current_viewport(self) -> Viewport:
        return self._viewport

    # --- operations ---

    def reset_to_defaults(self) -> None:
        self._cancel_pending()
        self._viewport = initial_viewport()
        self._overlay_visible = False
        self._history.reset()
        logger.info("Session reset to defaults.")
        self._refresh_grid()

    def pan_by(self, press: Point, release: Point) -> bool:
        """Pan by the drag; a press and release on the same pixel is ignored."""

        if press[0] == release[0] and press[1] == release[1]:
            return False
        bounds = pan_bounds(self._viewport.bounds, press, release, self._resolution)
        self._move_to(bounds, Pan)
        return True

    def zoom_to(self, press: Point, release: Point) -> bool:
        try:
            bounds = zoom_bounds(self._viewport.bounds, press, release, self._resolution)
        except DegenerateSelection as exc:
            logger.info("Zoom ignored: %s", exc)
            return False
        self._move_to(bounds, Zoom)
        return True

    def apply_gesture(self, press: Point, release: Point, pan_mode: bool) -> bool:
        """Dispatch a press/release pair as a pan or a zoom selection."""

        if pan_mode:
            return self.pan_by(press, release)
        return self.zoom_to(press, release)

    def set_color_theme(self, theme: ColorTheme | str) -> bool:
        theme = ColorTheme(theme)
        old = self._viewport.color_theme
        if theme == old:
            return False
        self._viewport = replace(self._viewport, color_theme=theme)
        self._history.record(ColorChange(old_theme=old, new_theme=theme))
        self._publish()
        return True

    def cycle_color_theme(self) -> ColorTheme:
        theme = next_theme(self._viewport.color_theme)
        self.set_color_theme(theme)
        return theme

    def set_max_iterations(self, max_iterations: int) -> bool:
        if isinstance(max_iterations, bool) or not isinstance(max_iterations, (int, np.integer)):
            logger.warning("Rejected max iterations %r: not an integer", max_iterations)
            return False
        max_iterations = int(max_iterations)
        if not 1 <= max_iterations <= MAX_ITERATIONS_LIMIT:
            logger.warning("Rejected max iterations %d: must lie in [1, %d]", max_iterations, MAX_ITERATIONS_LIMIT)
            return False
        old = self._viewport.max_iterations
        if max_iterations == old:
            return False
        self._viewport = replace(self._viewport, max_iterations=max_iterations)
        self._history.record(IterationChange(old_max=old, new_max=max_iterations))
        self._refresh_grid()
        return True

    def toggle_overlay(self) -> bool:
        self._overlay_visible = not self._overlay_visible
        self._history.record(ToggleOverlay())
        self._publish()
        return self._overlay_visible

    def undo(self) -> Optional[Command]:
        if not self._history.can_undo:
            return None
        self._cancel_pending()
        return self._history.undo(self._apply)

    def redo(self) -> Optional[Command]:
        if not self._history.can_redo:
            return None
        self._cancel_pending()
        return self._history.redo(self._apply)

    def save_to(self, path: PathLike) -> bool:
        if self._worker is not None:
            self._worker.wait()
        try:
            save_session(path, self._viewport, self._grid, self._resolution)
        except PersistenceError as exc:
            self._report(exc)
            return False
        return True

    def load_from(self, path: PathLike) -> bool:
        try:
            snapshot = load_session(path, self._resolution)
        except PersistenceError as exc:
            self._report(exc)
            return False
        self._cancel_pending()
        self._viewport = snapshot.viewport
        self._grid = snapshot.grid
        self._grid_request = RenderRequest.for_viewport(snapshot.viewport, self._resolution)
        self._history.reset()
        self._publish()
        return True

    def close(self) -> None:
        if self._worker is not None:
            self._worker.shutdown()
            self._worker = None

    def wait(self) -> None:
        """Block until a background recompute, if any, has been published."""

        if self._worker is not None:
            self._worker.wait()

    # --- internals ---

    def _move_to(self, bounds: Bounds, command_type: type[Pan] | type[Zoom]) -> None:
        old = self._viewport.bounds
        self._viewport = self._viewport.with_bounds(bounds)
        self._history.record(command_type(old_bounds=old, new_bounds=bounds))
        logger.debug("%s to %s (magnification %.6g)", command_type.__name__, bounds.as_tuple(), self._viewport.magnification)
        self._refresh_grid()

    def _apply(self, command: Command, forward: bool) -> None:
        if isinstance(command, (Pan, Zoom)):
            bounds = command.new_bounds if forward else command.old_bounds
            self._viewport = self._viewport.with_bounds(bounds)
        elif isinstance(command, ColorChange):
            theme = command.new_theme if forward else command.old_theme
            self._viewport = replace(self._viewport, color_theme=theme)
        elif isinstance(command, IterationChange):
            max_iterations = command.new_max if forward else command.old_max
            self._viewport = replace(self._viewport, max_iterations=max_iterations)
        elif isinstance(command, ToggleOverlay):
            self._overlay_visible = not self._overlay_visible
        else:
            raise TypeError(f"unknown command {command!r}")

        if command.affects_grid or self._grid_is_stale():
            self._refresh_grid()
        else:
            self._publish()

    def _refresh_grid(self) -> None:
        request = RenderRequest.for_viewport(self._viewport, self._resolution)
        if self._worker is not None:
            self._worker.submit(request)
            return
        self._grid = self._compute(request)
        self._grid_request = request
        self._publish()

    def _on_worker_result(self, token: int, request: RenderRequest, grid: np.ndarray) -> None:
        self._grid = grid
        self._grid_request = request
        self._publish()

    def _grid_is_stale(self) -> bool:
        # A cancelled background recompute can leave the grid behind the viewport.
        return self._grid_request != RenderRequest.for_viewport(self._viewport, self._resolution)

    def _cancel_pending(self) -> None:
        if self._worker is not None:
            self._worker.cancel()

    def _publish(self) -> None:
        if self._consumer is not None:
            self._consumer.display(self._grid, self._viewport, self._overlay_visible)

    def _report(self, exc: PersistenceError) -> None:
        logger.error("%s: %s", type(exc).__name__, exc)
        if self._notify is not None:
            self._notify(exc.message)
