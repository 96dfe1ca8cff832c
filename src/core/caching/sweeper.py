#!/usr/bin/env python3
"""
Periodic cache sweeper.

Runs ResponseCache.sweep on a daemon thread, independent of request
handling.
"""

import logging
import threading
from typing import Optional

from core.exceptions import ArticleAssistantError

logger = logging.getLogger(__name__)


class CacheSweeper:
    """Background thread deleting expired cache rows at a fixed interval."""

    def __init__(self, cache, interval_seconds: float = 3600):
        self.cache = cache
        self.interval_seconds = interval_seconds
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.runs = 0

    def start(self) -> None:
        if self.is_running():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="cache-sweeper", daemon=True)
        self._thread.start()
        logger.info(f"Cache sweeper started (interval: {self.interval_seconds}s)")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Cache sweeper stopped")

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        """
        Sweep once, logging instead of raising on failure.

        Returns:
            Rows removed, 0 when the sweep failed
        """
        self.runs += 1
        try:
            return self.cache.sweep()
        except ArticleAssistantError as e:
            logger.error(f"Cache sweep failed: {e}")
            return 0

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval_seconds):
            self.run_once()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
