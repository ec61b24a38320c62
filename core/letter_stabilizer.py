"""
LetterStabilizer — temporal filter that turns noisy per-observation
predictions into confirmed letters.

Two confirmation policies, picked by the framing that produced the
Observation:

  - immediate (batch framing): a single confident prediction is enough;
    driver-paced observations commit regardless of confidence.
  - consensus (rolling framing): the same letter must be seen
    `stability_threshold` times in a row, and a held sign commits once.
"""
from __future__ import annotations
import logging
from typing import Optional

from domain.enums import Framing
from domain.models import Prediction, StableLetterTracker

logger = logging.getLogger(__name__)


class LetterStabilizer:
    """
    Parameters
    ----------
    stability_threshold : int
        Consecutive agreeing rolling-window predictions required to commit.
    min_confidence : float
        Acceptance threshold in [0, 1]; may be changed at any time.
    """

    def __init__(self, stability_threshold: int = 4, min_confidence: float = 0.60) -> None:
        if stability_threshold < 1:
            raise ValueError("stability_threshold must be at least 1")
        self._stability_threshold = stability_threshold
        self._min_confidence = 0.0
        self.min_confidence = min_confidence
        self._tracker = StableLetterTracker()

    # ------------------------------------------------------------------
    def offer(self, prediction: Prediction, framing: Framing, driven: bool = False) -> Optional[str]:
        """
        Feed a new prediction.

        Returns the letter to append to the word, or None if nothing should
        be committed for this observation.
        """
        if framing is Framing.BATCH:
            return self._immediate(prediction, driven)
        return self._consensus(prediction)

    def reset(self) -> None:
        self._tracker.reset()

    # ------------------------------------------------------------------
    @property
    def min_confidence(self) -> float:
        return self._min_confidence

    @min_confidence.setter
    def min_confidence(self, value: float) -> None:
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"min_confidence must be within [0, 1], got {value}")
        self._min_confidence = float(value)

    @property
    def stability_threshold(self) -> int:
        return self._stability_threshold

    @property
    def tracker(self) -> StableLetterTracker:
        """Live tracker state (read-only by convention)."""
        return self._tracker

    # ------------------------------------------------------------------
    def _immediate(self, prediction: Prediction, driven: bool) -> Optional[str]:
        if driven or prediction.confidence >= self._min_confidence:
            return prediction.letter
        return None

    def _consensus(self, prediction: Prediction) -> Optional[str]:
        tracker = self._tracker
        if prediction.letter == tracker.last_letter:
            tracker.consecutive_count += 1
        else:
            # letter changed — unlock for the new one
            tracker.last_letter = prediction.letter
            tracker.consecutive_count = 1
            tracker.consumed = False

        if (tracker.consecutive_count >= self._stability_threshold
                and not tracker.consumed
                and prediction.confidence >= self._min_confidence):
            tracker.consumed = True
            logger.info(
                "[Stabilizer] Stable letter %r (%dx)", prediction.letter, tracker.consecutive_count
            )
            return prediction.letter
        return None
