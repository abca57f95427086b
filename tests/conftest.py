from __future__ import annotations

import os

os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "3")

import numpy as np
import pytest

from mandelbrot_explorer import ExplorerSession, RenderRequest
from mandelbrot_explorer.renderer import render_request

SMALL_RESOLUTION = 32


class CountingCompute:
    """Wraps the real kernel and remembers every request it served."""

    def __init__(self) -> None:
        self.requests: list[RenderRequest] = []

    def __call__(self, request: RenderRequest) -> np.ndarray:
        self.requests.append(request)
        return render_request(request)

    @property
    def calls(self) -> int:
        return len(self.requests)


class RecordingConsumer:
    def __init__(self) -> None:
        self.updates = []

    def display(self, grid, viewport, overlay_visible) -> None:
        self.updates.append((grid, viewport, overlay_visible))


@pytest.fixture
def compute() -> CountingCompute:
    return CountingCompute()


@pytest.fixture
def consumer() -> RecordingConsumer:
    return RecordingConsumer()


@pytest.fixture
def notifications() -> list[str]:
    return []


@pytest.fixture
def session(compute, consumer, notifications):
    explorer = ExplorerSession(
        SMALL_RESOLUTION,
        consumer=consumer,
        notify=notifications.append,
        compute=compute,
    )
    yield explorer
    explorer.close()
