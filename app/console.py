"""
ConsoleFeedback — prints recognition events instead of vibrating / speaking.
"""
from __future__ import annotations

from core.feedback import FeedbackSink
from domain.enums import HapticLevel
from domain.models import Prediction

_LEVEL_ICONS = {
    HapticLevel.SUCCESS: "✓",
    HapticLevel.WARNING: "~",
    HapticLevel.ERROR:   "✗",
}


class ConsoleFeedback(FeedbackSink):
    """Writes one tagged line per event to stdout."""

    def on_prediction(self, prediction: Prediction, level: HapticLevel) -> None:
        print(f"[PRED] {_LEVEL_ICONS[level]} {prediction.letter} "
              f"({prediction.confidence:.0%}, {prediction.model_name})")

    def on_letter_committed(self, letter: str, word: str) -> None:
        print(f"[LETTER] +{letter} → {word}")

    def on_letter_spoken(self, letter: str) -> None:
        print(f"[SAY] {letter}")

    def on_word_finalized(self, word: str) -> None:
        print(f"[WORD] {word}")

    def on_error(self, message: str) -> None:
        print(f"[ERROR] {message}")
