"""
Abstract base class for all sample-framing policies.

Every policy must:
  - implement push(sample) → bool (True when an Observation's worth of
    samples is ready)
  - implement take() → the samples to submit
  - implement reset()
  - declare its NAME class attribute

FrameAccumulator only talks to this contract, so batch and rolling framing
are interchangeable.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Tuple

from domain.enums import Framing
from domain.models import Sample


class FramingPolicy(ABC):
    """Base class for all framing policies."""

    NAME: Framing

    @abstractmethod
    def push(self, sample: Sample) -> bool:
        """
        Add one sample.

        Returns
        -------
        bool
            True when take() would yield a complete Observation.
        """

    @abstractmethod
    def take(self) -> Tuple[Sample, ...]:
        """Return the samples for the next Observation."""

    @abstractmethod
    def reset(self) -> None:
        """Drop every buffered sample."""

    @property
    @abstractmethod
    def fill_level(self) -> int:
        """Number of samples currently buffered."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.NAME.value!r} fill={self.fill_level}>"
