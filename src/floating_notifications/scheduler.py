"""Floating Notification Pipeline - Ledger Trim Scheduler."""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TrimScheduler:
    """Invokes a callback on a fixed interval from a daemon thread.

    The thread only produces ticks; the callback is expected to hand them
    to the controller, which serialises them with every other event.
    ``stop()`` must be called on teardown.
    """

    def __init__(self, interval_seconds: float, callback: Callable[[], None], name: str = "ledger-trim") -> None:
        if interval_seconds <= 0:
            raise ValueError(f"Trim interval must be positive, got {interval_seconds}")
        self._interval = interval_seconds
        self._callback = callback
        self._name = name
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._ticks = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def ticks(self) -> int:
        return self._ticks

    def start(self) -> None:
        """Start ticking. Calling start on a running scheduler is a no-op."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name=self._name)
        self._thread.start()
        logger.info("Trim scheduler started (interval=%.1fs)", self._interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop ticking and wait for the thread to exit."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=timeout if timeout is not None else self._interval + 1)
        self._thread = None
        logger.info("Trim scheduler stopped after %d ticks", self._ticks)

    def _run(self) -> None:
        # wait() returns True once stop() is requested
        while not self._stop_event.wait(self._interval):
            self._ticks += 1
            try:
                self._callback()
            except Exception as exc:
                logger.error("Trim tick failed: %s", exc)
