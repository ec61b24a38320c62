"""
Throttle — keyed interval gate for display updates and other rate-limited
side effects, so callers don't need to track time themselves.
"""
from __future__ import annotations
import time
from typing import Callable, Dict, Optional


class Throttle:
    """
    Per-key minimum-interval tracker (single event loop, no locking).

    Usage
    -----
    th = Throttle(default_interval=0.1)
    if th.ok("display"):
        ...  # push the sample to the UI
    """

    def __init__(
        self,
        default_interval: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default = default_interval
        self._clock = clock
        self._last: Dict[str, float] = {}

    def ok(self, name: str, interval: Optional[float] = None) -> bool:
        """
        Return True (and record the timestamp) if at least `interval` seconds
        have elapsed since the last accepted call for this name.
        """
        now = self._clock()
        threshold = interval if interval is not None else self._default
        last = self._last.get(name)
        if last is None or now - last >= threshold:
            self._last[name] = now
            return True
        return False

    def reset(self, name: str) -> None:
        """Force-reset a specific key (next call to ok() will succeed)."""
        self._last.pop(name, None)

    def reset_all(self) -> None:
        self._last.clear()
