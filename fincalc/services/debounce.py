"""
Timer-based call coalescing.

A burst of calls within the wait window results in a single invocation
with the arguments of the last call.
"""

import threading
from typing import Any, Callable, Optional, Tuple, Dict


class Debouncer:
    """Delay a callback until calls stop arriving for `wait` seconds."""

    def __init__(self, wait: float, callback: Callable[..., Any]):
        self.wait = wait
        self.callback = callback
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Tuple[Tuple, Dict]] = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def call(self, *args, **kwargs) -> None:
        """Schedule the callback, replacing any call still waiting."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (args, kwargs)
            self._timer = threading.Timer(self.wait, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Run a waiting call now instead of at the end of the window."""
        self._fire()

    def cancel(self) -> None:
        """Drop a waiting call without running it."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None

    def _fire(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            pending, self._pending = self._pending, None

        if pending is None:
            return

        args, kwargs = pending
        self.callback(*args, **kwargs)
