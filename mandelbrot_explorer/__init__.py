"""Public API for the Mandelbrot explorer core."""

from .colors import ColorTheme, color_for, colorize, next_theme, scaled_value
from .errors import CorruptData, ExplorerError, InvalidResolution, IOFailure, PersistenceError
from .history import ColorChange, CommandHistory, IterationChange, Pan, ToggleOverlay, Zoom
from .navigation import pan_bounds, pixel_to_complex, selection_square, zoom_bounds
from .persistence import SessionSnapshot, load_session, parse_session, save_session
from .renderer import RenderRequest, compute_escape_grid
from .session import ExplorerSession, GridConsumer
from .viewport import INITIAL_BOUNDS, Bounds, Viewport, magnification
from .worker import RecomputeWorker

__all__ = [
    "Bounds",
    "ColorChange",
    "ColorTheme",
    "CommandHistory",
    "CorruptData",
    "ExplorerError",
    "ExplorerSession",
    "GridConsumer",
    "INITIAL_BOUNDS",
    "IOFailure",
    "InvalidResolution",
    "IterationChange",
    "Pan",
    "PersistenceError",
    "RecomputeWorker",
    "RenderRequest",
    "SessionSnapshot",
    "ToggleOverlay",
    "Viewport",
    "Zoom",
    "color_for",
    "colorize",
    "compute_escape_grid",
    "load_session",
    "magnification",
    "next_theme",
    "pan_bounds",
    "parse_session",
    "pixel_to_complex",
    "save_session",
    "scaled_value",
    "selection_square",
    "zoom_bounds",
]
