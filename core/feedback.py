"""
Feedback sinks — haptic/speech side effects delegated out of the core.

The controller never talks to a speaker or vibration motor directly; it
calls one of these hooks and the presentation layer decides what happens.
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod

from domain.enums import HapticLevel
from domain.models import Prediction
from utils.constants import HAPTIC_SUCCESS_CONFIDENCE, HAPTIC_WARNING_CONFIDENCE

logger = logging.getLogger(__name__)


def haptic_level(confidence: float) -> HapticLevel:
    if confidence >= HAPTIC_SUCCESS_CONFIDENCE:
        return HapticLevel.SUCCESS
    if confidence >= HAPTIC_WARNING_CONFIDENCE:
        return HapticLevel.WARNING
    return HapticLevel.ERROR


class FeedbackSink(ABC):
    """Base class for everything that reacts to recognition events."""

    @abstractmethod
    def on_prediction(self, prediction: Prediction, level: HapticLevel) -> None:
        """A batch observation was classified."""

    @abstractmethod
    def on_letter_committed(self, letter: str, word: str) -> None:
        """A letter was appended; `word` is the word after the append."""

    @abstractmethod
    def on_letter_spoken(self, letter: str) -> None:
        """Single-shot mode announces each new letter once."""

    @abstractmethod
    def on_word_finalized(self, word: str) -> None:
        """The word is complete and should be spoken."""

    @abstractmethod
    def on_error(self, message: str) -> None:
        """A classification failed."""


class LoggingFeedback(FeedbackSink):
    """Routes every event to the module logger."""

    def on_prediction(self, prediction: Prediction, level: HapticLevel) -> None:
        logger.info("[Feedback] %s %.2f → %s", prediction.letter, prediction.confidence, level.value)

    def on_letter_committed(self, letter: str, word: str) -> None:
        logger.info("[Feedback] +%s → %r", letter, word)

    def on_letter_spoken(self, letter: str) -> None:
        logger.info("[Feedback] speak %r", letter)

    def on_word_finalized(self, word: str) -> None:
        logger.info("[Feedback] word %r", word)

    def on_error(self, message: str) -> None:
        logger.warning("[Feedback] error: %s", message)
