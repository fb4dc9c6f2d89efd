"""Debounce utility: coalesce a burst of calls into one delayed call."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any


class Debouncer:
    """Buffers the latest arguments and invokes ``func`` once the burst settles.

    Each :meth:`call` replaces any pending arguments and restarts the delay,
    so only the most recent value is ever written. :meth:`flush` runs the
    pending call immediately; :meth:`cancel` drops it.
    """

    def __init__(self, delay: float, func: Callable[..., Any]):
        self.delay = delay
        self.func = func
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: tuple[tuple[Any, ...], dict[str, Any]] | None = None

    @property
    def pending(self) -> bool:
        """Whether a call is waiting to be flushed."""
        return self._pending is not None

    def call(self, *args: Any, **kwargs: Any) -> None:
        """Schedule ``func(*args, **kwargs)``, superseding any pending call."""
        with self._lock:
            self._cancel_timer()
            self._pending = (args, kwargs)
            if self.delay <= 0:
                immediate = True
            else:
                immediate = False
                self._timer = threading.Timer(self.delay, self.flush)
                self._timer.daemon = True
                self._timer.start()
        if immediate:
            self.flush()

    def flush(self) -> bool:
        """Run the pending call now.

        Returns:
            True if a pending call was executed
        """
        with self._lock:
            pending = self._pending
            self._pending = None
            self._cancel_timer()
        if pending is None:
            return False
        args, kwargs = pending
        self.func(*args, **kwargs)
        return True

    def cancel(self) -> None:
        """Drop the pending call without running it."""
        with self._lock:
            self._pending = None
            self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
