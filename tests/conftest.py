from __future__ import annotations
import asyncio
from typing import Callable, List, Optional, Tuple

import pytest

from app.config import AppConfig
from core.feedback import FeedbackSink
from core.mode_controller import ModeController
from domain.enums import HapticLevel
from domain.errors import ClassificationError
from domain.models import Observation, Prediction


def make_prediction(letter: str, confidence: float = 0.9) -> Prediction:
    rest = (1.0 - confidence) / 2
    return Prediction(
        letter=letter,
        confidence=confidence,
        all_probabilities={letter: confidence, "?": rest, "!": rest},
        processing_time_ms=12.0,
        model_name="test-model",
        timestamp=1_700_000_000.0,
    )


async def settle(rounds: int = 5) -> None:
    """Let pending tasks and callbacks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeClassifier:
    """
    Holds every request open until the test resolves or fails it, and tracks
    how many calls are outstanding at once.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[Observation, str]] = []
        self._pending: List[asyncio.Future] = []
        self.concurrent = 0
        self.max_concurrent = 0

    async def classify(self, observation: Observation, device_id: str) -> Prediction:
        self.calls.append((observation, device_id))
        future = asyncio.get_running_loop().create_future()
        self._pending.append(future)
        self.concurrent += 1
        self.max_concurrent = max(self.max_concurrent, self.concurrent)
        try:
            return await future
        finally:
            self.concurrent -= 1

    @property
    def open_requests(self) -> int:
        return sum(1 for f in self._pending if not f.done())

    def _next(self) -> asyncio.Future:
        for future in self._pending:
            if not future.done():
                return future
        raise AssertionError("no open classification request")

    def resolve(self, prediction: Prediction) -> None:
        self._next().set_result(prediction)

    def fail(self, message: str = "boom") -> None:
        self._next().set_exception(ClassificationError(message))


class AutoClassifier:
    """Answers every request right away with `respond(observation)`."""

    def __init__(self, respond: Callable[[Observation], Optional[Prediction]]) -> None:
        self._respond = respond
        self.calls: List[Observation] = []

    async def classify(self, observation: Observation, device_id: str) -> Prediction:
        self.calls.append(observation)
        await asyncio.sleep(0)
        prediction = self._respond(observation)
        if prediction is None:
            raise ClassificationError("no answer")
        return prediction


class RecordingFeedback(FeedbackSink):
    def __init__(self) -> None:
        self.events: List[tuple] = []

    def of(self, kind: str) -> List[tuple]:
        return [e[1:] for e in self.events if e[0] == kind]

    def on_prediction(self, prediction: Prediction, level: HapticLevel) -> None:
        self.events.append(("prediction", prediction.letter, level))

    def on_letter_committed(self, letter: str, word: str) -> None:
        self.events.append(("letter", letter, word))

    def on_letter_spoken(self, letter: str) -> None:
        self.events.append(("spoken", letter))

    def on_word_finalized(self, word: str) -> None:
        self.events.append(("word", word))

    def on_error(self, message: str) -> None:
        self.events.append(("error", message))


# ---- fixtures --------------------------------------------------------------
@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        window_size=5,
        single_shot_batch=10,
        driven_batch=6,
        stability_threshold=4,
        min_confidence=0.6,
        idle_threshold=2.0,
        idle_check_delay=2.5,
        rearm_delay=0.01,
        history_limit=20,
        display_interval=0.1,
        calibration_samples=4,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def classifier() -> FakeClassifier:
    return FakeClassifier()


@pytest.fixture
def feedback() -> RecordingFeedback:
    return RecordingFeedback()


@pytest.fixture
async def controller(classifier, config, feedback, clock):
    ctrl = ModeController(classifier, config, feedback=feedback, clock=clock)
    yield ctrl
    ctrl.close()
    await settle()
