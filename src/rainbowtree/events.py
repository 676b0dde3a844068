"""Thread-safe observer hooks for process lifecycle notifications."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class EventHook(Generic[T]):
    """Ordered list of handlers called with a single value.

    Subscribing a handler that is already present and unsubscribing one that
    is absent are both no-ops, so teardown paths can run more than once.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: list[Callable[[T], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, handler: Callable[[T], None]) -> None:
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)

    def unsubscribe(self, handler: Callable[[T], None]) -> bool:
        """Remove a handler; return whether it was subscribed."""
        with self._lock:
            try:
                self._handlers.remove(handler)
            except ValueError:
                return False
            return True

    def fire(self, value: T) -> None:
        """Call a snapshot of the current handlers on the calling thread."""
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            handler(value)

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)

    def __repr__(self) -> str:
        return f"EventHook({self.name!r}, handlers={len(self)})"
