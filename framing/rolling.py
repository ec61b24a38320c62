"""
RollingFraming — strict FIFO window over the most recent N samples.

Once the window is full every push reports ready; take() copies the window
without draining it, so consecutive Observations overlap.
"""
from __future__ import annotations
from collections import deque
from typing import Tuple

from domain.enums import Framing
from domain.models import Sample
from framing.base import FramingPolicy


class RollingFraming(FramingPolicy):
    NAME = Framing.ROLLING

    def __init__(self, capacity: int = 50) -> None:
        if capacity < 1:
            raise ValueError("window capacity must be at least 1")
        self._window: deque[Sample] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._window.maxlen

    @property
    def is_full(self) -> bool:
        return len(self._window) == self._window.maxlen

    def push(self, sample: Sample) -> bool:
        self._window.append(sample)
        return self.is_full

    def take(self) -> Tuple[Sample, ...]:
        return tuple(self._window)

    def reset(self) -> None:
        self._window.clear()

    @property
    def fill_level(self) -> int:
        return len(self._window)
