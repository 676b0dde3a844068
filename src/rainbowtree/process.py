"""External program runner that announces its output one line at a time."""

from __future__ import annotations

import logging
import subprocess
import threading
from collections import deque
from collections.abc import Callable, Sequence
from typing import Any, Optional

from .errors import ProcessError
from .events import EventHook
from .host.state import HostState
from .logging_utils import log_event


class OutputQueue:
    """FIFO of output lines not yet displayed."""

    def __init__(self) -> None:
        self._lines: deque[str] = deque()
        self._lock = threading.Lock()

    def put(self, line: str) -> int:
        """Append a line and return the queue length after the append."""
        with self._lock:
            self._lines.append(line)
            return len(self._lines)

    def dequeue(self) -> Optional[str]:
        """Remove and return the oldest line, or None when empty."""
        with self._lock:
            if not self._lines:
                return None
            return self._lines.popleft()

    def snapshot(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)


class CommandProcess:
    """Runs a program on a reader thread and raises lifecycle events.

    Events fire on the reader thread, in this order: ``started`` once,
    ``new_output`` once per enqueued line, ``completed`` exactly once.
    ``completed`` carries True only for a zero exit that was not stopped.
    """

    def __init__(
        self,
        argv: Sequence[str],
        *,
        host_state: Optional[HostState] = None,
        cwd: Optional[str] = None,
        popen: Callable[..., Any] = subprocess.Popen,
    ) -> None:
        if not argv:
            raise ProcessError("Program arguments must not be empty")
        self.argv = list(argv)
        self.output = OutputQueue()
        self.started: EventHook[bool] = EventHook("started")
        self.new_output: EventHook[int] = EventHook("new_output")
        self.completed: EventHook[bool] = EventHook("completed")
        self.returncode: Optional[int] = None

        self._host_state = host_state
        self._cwd = cwd
        self._popen = popen
        # Re-entrant: stop() runs from the SIGINT handler on the main thread.
        self._lock = threading.RLock()
        self._proc: Any = None
        self._thread: Optional[threading.Thread] = None
        self._stop_requested = threading.Event()
        self._line_count = 0

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested.is_set()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                raise ProcessError("Process already started")
            self._thread = threading.Thread(
                target=self._run,
                name=f"process-reader:{self.argv[0]}",
                daemon=True,
            )
        self._thread.start()

    def stop(self) -> None:
        """Request termination; safe before start, after exit, and repeatedly."""
        self._stop_requested.set()
        with self._lock:
            proc = self._proc
        if proc is None or proc.poll() is not None:
            return
        try:
            proc.terminate()
        except OSError as e:
            # Already reaped between poll() and terminate().
            logging.debug("terminate() failed for %s: %s", self.argv[0], e)

    def wait_for_exit(self, timeout: Optional[float] = None) -> bool:
        """Block until the reader thread has fired ``completed``."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _enqueue(self, line: str) -> None:
        self._line_count += 1
        self.new_output.fire(self.output.put(line))

    def _spawn(self) -> Any:
        return self._popen(
            self.argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            cwd=self._cwd,
            text=True,
            errors="replace",
            bufsize=1,
        )

    def _run(self) -> None:
        success = False
        try:
            try:
                proc = self._spawn()
            except OSError as e:
                log_event(
                    "process_start_failed",
                    level=logging.WARNING,
                    argv=self.argv,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                self.started.fire(False)
                self._enqueue(f"{self.argv[0]}: {e.strerror or e}")
                return

            with self._lock:
                self._proc = proc
            if self._stop_requested.is_set():
                proc.terminate()
            log_event("process_start", argv=self.argv, pid=getattr(proc, "pid", None))
            self.started.fire(True)

            with proc.stdout:
                for raw in proc.stdout:
                    self._enqueue(raw.rstrip("\r\n"))

            self.returncode = proc.wait()
            success = self.returncode == 0 and not self._stop_requested.is_set()
            log_event(
                "process_exit",
                argv=self.argv,
                returncode=self.returncode,
                stopped=self._stop_requested.is_set(),
                lines=self._line_count,
            )
        except Exception as e:
            logging.error(
                "Unexpected error relaying %s: %s", self.argv[0], e, exc_info=True
            )
            with self._lock:
                proc = self._proc
            if proc is not None and proc.poll() is None:
                proc.kill()
                proc.wait()
        finally:
            self.completed.fire(success)
            if self._host_state is not None:
                self._host_state.command_running.clear()
