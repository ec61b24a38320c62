"""
BatchFraming — collect a fixed number of samples, hand them all over, start again.
"""
from __future__ import annotations
from typing import List, Tuple

from domain.enums import Framing
from domain.models import Sample
from framing.base import FramingPolicy


class BatchFraming(FramingPolicy):
    NAME = Framing.BATCH

    def __init__(self, target: int) -> None:
        if target < 1:
            raise ValueError("batch target must be at least 1")
        self._target = target
        self._buffer: List[Sample] = []

    @property
    def target(self) -> int:
        return self._target

    @target.setter
    def target(self, value: int) -> None:
        if value < 1:
            raise ValueError("batch target must be at least 1")
        self._target = value

    def push(self, sample: Sample) -> bool:
        self._buffer.append(sample)
        return len(self._buffer) >= self._target

    def take(self) -> Tuple[Sample, ...]:
        batch = tuple(self._buffer)
        self._buffer = []
        return batch

    def reset(self) -> None:
        self._buffer = []

    @property
    def fill_level(self) -> int:
        return len(self._buffer)
