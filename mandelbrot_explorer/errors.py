"""Exceptions raised by the explorer core."""

from __future__ import annotations


class ExplorerError(Exception):
    """Base class for explorer failures.

    ``message`` is the short user-facing text for the failure category;
    ``detail`` says what exactly went wrong and only goes to the log.
    """

    default_message = "Explorer error"

    def __init__(self, detail: str | None = None, *, message: str | None = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(f"{self.message} ({detail})" if detail else self.message)


class PersistenceError(ExplorerError):
    """A session could not be saved or loaded."""


class InvalidResolution(PersistenceError):
    default_message = "Invalid draw sizes"


class CorruptData(PersistenceError):
    default_message = "Cannot read data from the file. File is corrupted/ invalid."


class IOFailure(PersistenceError):
    default_message = "Cannot read data from the file"


class DegenerateSelection(ValueError):
    """A zoom gesture selected an empty square."""
