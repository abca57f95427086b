"""Background grid recomputation.

Only the most recent request may publish its grid: every submission bumps a
sequence number and results tagged with an older number are dropped.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import Callable, Optional

import numpy as np

from .renderer import RenderRequest, render_request

logger = logging.getLogger(__name__)

ResultCallback = Callable[[int, RenderRequest, np.ndarray], None]


class RecomputeWorker:
    def __init__(
        self,
        on_result: ResultCallback,
        compute: Callable[[RenderRequest], np.ndarray] = render_request,
    ) -> None:
        self._on_result = on_result
        self._compute = compute
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mandelbrot-recompute")
        self._lock = threading.RLock()
        self._sequence = 0
        self._future: Optional[Future] = None

    @property
    def sequence(self) -> int:
        return self._sequence

    def submit(self, request: RenderRequest) -> int:
        """Queue ``request``, superseding whatever was requested before."""

        with self._lock:
            self._sequence += 1
            token = self._sequence
            if self._future is not None and not self._future.done():
                self._future.cancel()
            self._future = self._executor.submit(self._run, token, request)
        logger.debug("Submitted recompute #%d for %s", token, request.bounds)
        return token

    def _run(self, token: int, request: RenderRequest) -> Optional[np.ndarray]:
        if token != self._sequence:
            return None
        grid = self._compute(request)
        with self._lock:
            if token != self._sequence:
                logger.debug("Discarding stale recompute #%d", token)
                return None
            self._on_result(token, request, grid)
        return grid

    def wait(self) -> None:
        """Block until the latest request has finished."""

        future = self._future
        if future is None:
            return
        try:
            future.result()
        except CancelledError:
            pass

    def cancel(self) -> None:
        """Invalidate the pending request and wait for any running one."""

        with self._lock:
            self._sequence += 1
            future = self._future
            self._future = None
        if future is not None:
            future.cancel()
            try:
                future.result()
            except CancelledError:
                pass

    def shutdown(self) -> None:
        self.cancel()
        self._executor.shutdown(wait=True)
