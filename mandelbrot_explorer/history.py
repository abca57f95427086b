"""Reversible commands and the undo/redo log."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, ClassVar, Optional, Union

from .colors import ColorTheme
from .viewport import Bounds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pan:
    old_bounds: Bounds
    new_bounds: Bounds

    affects_grid: ClassVar[bool] = True


@dataclass(frozen=True)
class Zoom:
    old_bounds: Bounds
    new_bounds: Bounds

    affects_grid: ClassVar[bool] = True


@dataclass(frozen=True)
class ColorChange:
    old_theme: ColorTheme
    new_theme: ColorTheme

    affects_grid: ClassVar[bool] = False


@dataclass(frozen=True)
class IterationChange:
    old_max: int
    new_max: int

    affects_grid: ClassVar[bool] = True


@dataclass(frozen=True)
class ToggleOverlay:
    affects_grid: ClassVar[bool] = False


Command = Union[Pan, Zoom, ColorChange, IterationChange, ToggleOverlay]

# apply(command, forward): forward=False restores the old values.
Applier = Callable[[Command, bool], None]


class CommandHistory:
    """Two stacks of commands plus the flags that decide when redo is lost.

    A fresh action after an undo discards the redo chain; undo and redo
    themselves only move commands between the stacks.
    """

    def __init__(self) -> None:
        self._undo: list[Command] = []
        self._redo: list[Command] = []
        self._undoing = False
        self._redoing = False
        self._override_armed = False

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def record(self, command: Command) -> None:
        if not (self._undoing or self._redoing) and self._override_armed:
            if self._redo:
                logger.debug("Discarding %d redo entries", len(self._redo))
            self._redo.clear()
        else:
            self._override_armed = True
        self._undo.append(command)

    def undo(self, apply: Applier) -> Optional[Command]:
        if not self._undo:
            return None
        self._undoing = True
        command = self._undo.pop()
        try:
            apply(command, False)
        except Exception:
            self._undo.append(command)
            raise
        finally:
            self._undoing = False
        self._redo.append(command)
        self._override_armed = True
        logger.debug("Undid %s", command)
        return command

    def redo(self, apply: Applier) -> Optional[Command]:
        if not self._redo:
            return None
        armed = self._override_armed
        self._redoing = True
        self._override_armed = False
        command = self._redo.pop()
        try:
            apply(command, True)
        except Exception:
            self._redo.append(command)
            self._override_armed = armed
            raise
        finally:
            self._redoing = False
        self._undo.append(command)
        self._override_armed = bool(self._redo)
        logger.debug("Redid %s", command)
        return command

    def reset(self) -> None:
        self._undo.clear()
        self._redo.clear()
        self._undoing = False
        self._redoing = False
        self._override_armed = False
