"""Periodic timer running a callback on its own daemon thread."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Optional


class PeriodicTimer:
    """Calls ``callback`` every ``interval`` seconds until stopped.

    ``start`` and ``stop`` are idempotent; a stopped timer does not restart.
    """

    def __init__(self, interval: float, callback: Callable[[], None]) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self._callback = callback
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stopped.is_set()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None or self._stopped.is_set():
                return
            self._thread = threading.Thread(
                target=self._run, name="palette-timer", daemon=True
            )
            self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        with self._lock:
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            self._callback()
