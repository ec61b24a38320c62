"""
FrameAccumulator — decides when a complete Observation is ready and keeps
at most one classification in flight.

Batch framing  : SingleShot, or Continuous while the demo driver is in control.
Rolling framing: Continuous without a driver.

The in-flight flag is checked and set inside offer(), in the same
synchronous step that produces the Observation.
"""
from __future__ import annotations
from typing import Optional

from domain.enums import Framing
from domain.models import Observation, Sample
from framing.batch import BatchFraming
from framing.rolling import RollingFraming


class FrameAccumulator:
    """
    Parameters
    ----------
    window_size : int
        Rolling window capacity (samples).
    single_shot_batch : int
        Batch length for isolated single-letter capture.
    driven_batch : int
        Batch length for driver-paced continuous capture.
    """

    def __init__(
        self,
        window_size: int = 50,
        single_shot_batch: int = 200,
        driven_batch: int = 150,
    ) -> None:
        self._single_shot_batch = single_shot_batch
        self._driven_batch = driven_batch
        self._batch   = BatchFraming(single_shot_batch)
        self._rolling = RollingFraming(window_size)
        self._active  = self._batch
        self._in_flight = False

    # ------------------------------------------------------------------
    def offer(self, sample: Sample, framing: Framing, driven: bool = False) -> Optional[Observation]:
        """
        Feed one sample under the given framing policy.

        Returns an Observation (and marks a classification as in flight) when
        one should be dispatched now, otherwise None.
        """
        policy = self._select(framing, driven)

        if policy is self._batch and self._in_flight:
            # capture is paused until the pending batch comes back
            return None

        ready = policy.push(sample)
        if not ready or self._in_flight:
            return None

        self._in_flight = True
        return Observation(samples=policy.take(), framing=policy.NAME, driven=driven)

    def complete(self) -> None:
        """Clear the in-flight flag (success, failure, or timeout)."""
        self._in_flight = False

    def reset(self) -> None:
        self._batch.reset()
        self._rolling.reset()
        self._in_flight = False

    # ------------------------------------------------------------------
    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def fill_level(self) -> int:
        """Samples buffered under the policy that was used last."""
        return self._active.fill_level

    @property
    def window_size(self) -> int:
        return self._rolling.capacity

    def batch_target(self, driven: bool) -> int:
        return self._driven_batch if driven else self._single_shot_batch

    def _select(self, framing: Framing, driven: bool):
        if framing is Framing.ROLLING:
            self._active = self._rolling
        else:
            self._batch.target = self.batch_target(driven)
            self._active = self._batch
        return self._active
