"""
ModeController — the single owned state object behind the recognizer.

Routes every sample and timer event through the pipeline:

    raw sample → normalize → FrameAccumulator → ClassificationGateway
              → LetterStabilizer → WordSession → snapshot / feedback

Design decisions:
  - Everything runs on one asyncio loop. Sample handlers and timer callbacks
    are synchronous; only the classifier call suspends.
  - Every reset bumps a generation counter. A classification that completes
    under an older generation is discarded without touching any state.
  - The demo driver owns continuation through a single pending-completion
    slot. While it is occupied, continuous auto re-arm and idle
    finalization are suppressed.
"""
from __future__ import annotations
import asyncio
import logging
import time
from collections import deque
from typing import Callable, Optional, Protocol, Set

from app.config import AppConfig, default_config
from core.calibration import CalibrationCapture
from core.feedback import FeedbackSink, LoggingFeedback, haptic_level
from core.frame_accumulator import FrameAccumulator
from core.letter_stabilizer import LetterStabilizer
from core.normalizer import looks_raw, normalize
from core.throttle import Throttle
from core.word_session import WordSession
from domain.enums import Framing, Mode
from domain.errors import ClassificationError
from domain.models import (
    Calibration,
    Observation,
    ObservationDebug,
    Prediction,
    PredictionRecord,
    RecognitionSnapshot,
    SampleLike,
)
from utils.constants import NUM_CHANNELS

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[], None]


class Classifier(Protocol):
    async def classify(self, observation: Observation, device_id: str) -> Prediction: ...


class ModeController:
    """
    The single entry point for sample processing.

    Usage
    -----
    controller = ModeController(gateway, config)
    controller.set_mode(Mode.CONTINUOUS)
    controller.on_sample(sample)        # from the glove or simulator
    controller.snapshot().word

    on_sample() arms timers and starts classification tasks, so it must be
    called from code running on an asyncio event loop (a coroutine, task or
    loop callback). Calling it with no running loop raises RuntimeError.

    Parameters
    ----------
    classifier : Classifier
        Anything with ``async classify(observation, device_id)``; normally a
        ClassificationGateway.
    config : AppConfig
        Framing sizes, thresholds and timer delays.
    feedback : FeedbackSink, optional
        Receives haptic/speech events; defaults to LoggingFeedback.
    clock : callable
        Monotonic time source (injected for tests).
    """

    def __init__(
        self,
        classifier: Classifier,
        config: AppConfig = default_config,
        feedback: Optional[FeedbackSink] = None,
        clock: Callable[[], float] = time.monotonic,
        mode: Mode = Mode.SINGLE_SHOT,
    ) -> None:
        self._classifier = classifier
        self._config = config
        self._feedback = feedback or LoggingFeedback()
        self._clock = clock
        self._mode = mode

        # ---- pipeline components ----------------------------------------
        self._accumulator = FrameAccumulator(
            window_size=config.window_size,
            single_shot_batch=config.single_shot_batch,
            driven_batch=config.driven_batch,
        )
        self._stabilizer = LetterStabilizer(
            stability_threshold=config.stability_threshold,
            min_confidence=config.min_confidence,
        )
        self._session  = WordSession(idle_threshold=config.idle_threshold)
        self._throttle = Throttle(default_interval=config.display_interval, clock=clock)

        # ---- device / calibration --------------------------------------
        self._device_id: Optional[str] = None
        self._calibration = Calibration.default()
        self._is_calibrated = False
        self._calibration_capture: Optional[CalibrationCapture] = None

        # ---- capture control -------------------------------------------
        self._capturing = True
        self._generation = 0
        self._pending_completion: Optional[CompletionCallback] = None
        self._tasks: Set[asyncio.Task] = set()
        self._idle_handle: Optional[asyncio.TimerHandle] = None
        self._rearm_handle: Optional[asyncio.TimerHandle] = None

        # ---- emitted state ---------------------------------------------
        self._last_prediction: Optional[Prediction] = None
        self._history: deque[PredictionRecord] = deque(maxlen=config.history_limit)
        self._error: Optional[str] = None
        self._display_sample = None
        self._last_debug: Optional[ObservationDebug] = None
        self._last_spoken = ""

    # ==================================================================
    # Samples
    # ==================================================================
    def on_sample(self, raw: SampleLike) -> None:
        """Handle one incoming sample (raw ADC or already normalized)."""
        if len(raw) != NUM_CHANNELS:
            logger.warning("[Controller] Dropping sample with %d channels", len(raw))
            return

        self._session.touch(self._clock())
        self._schedule_idle_check()

        is_raw = self._device_id is not None or looks_raw(raw)
        if is_raw and self._calibration_capture is not None:
            finished = self._calibration_capture.feed(raw)
            if finished is not None:
                self.set_calibration(finished)
                self._calibration_capture = None

        sample = normalize(raw, self._calibration) if is_raw else tuple(float(v) for v in raw)

        if self._throttle.ok("display"):
            self._display_sample = sample

        if not self._capturing:
            return

        framing = self.active_framing
        driven = framing is Framing.BATCH and self.driver_active
        observation = self._accumulator.offer(sample, framing, driven=driven)
        if observation is None:
            return

        if observation.framing is Framing.BATCH:
            # hold capture until the batch comes back (or the driver re-arms)
            self._capturing = False
        self._dispatch(observation)

    @property
    def active_framing(self) -> Framing:
        if self._mode is Mode.CONTINUOUS and not self.driver_active:
            return Framing.ROLLING
        return Framing.BATCH

    # ==================================================================
    # Classification
    # ==================================================================
    def _dispatch(self, observation: Observation) -> None:
        self._error = None
        self._last_debug = ObservationDebug(
            sample_count=len(observation),
            first_sample=observation.first_sample,
            last_sample=observation.last_sample,
            dispatched_at=self._clock(),
        )
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._classify(observation, self._generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _classify(self, observation: Observation, generation: int) -> None:
        device_id = self._device_id or self._config.device_id
        try:
            prediction = await self._classifier.classify(observation, device_id)
        except ClassificationError as exc:
            if self._is_stale(generation):
                logger.debug("[Controller] Discarding stale failure: %s", exc.message)
                return
            self._on_failure(observation, exc)
            return
        except Exception:
            if self._is_stale(generation):
                return
            logger.exception("[Controller] Classifier raised unexpectedly")
            self._on_failure(observation, ClassificationError("Prediction failed"))
            return
        finally:
            if not self._is_stale(generation):
                self._accumulator.complete()

        if self._is_stale(generation):
            logger.debug("[Controller] Discarding stale prediction %r", prediction.letter)
            return

        self._apply(prediction, observation)
        self._on_completed(observation)

    def _apply(self, prediction: Prediction, observation: Observation) -> None:
        self._last_prediction = prediction
        self._history.appendleft(PredictionRecord.from_prediction(prediction))
        if self._last_debug is not None:
            self._last_debug.responded_at = self._clock()
            self._last_debug.prediction = prediction

        letter = self._stabilizer.offer(prediction, observation.framing, driven=observation.driven)
        if letter is not None:
            self._session.append(letter)
            self._schedule_idle_check()
            self._feedback.on_letter_committed(letter, self._session.word)

        if observation.framing is Framing.BATCH:
            self._feedback.on_prediction(prediction, haptic_level(prediction.confidence))

        if self._mode is Mode.SINGLE_SHOT and prediction.letter != self._last_spoken:
            self._last_spoken = prediction.letter
            self._feedback.on_letter_spoken(prediction.letter)

    def _on_failure(self, observation: Observation, exc: ClassificationError) -> None:
        logger.warning("[Controller] Classification failed: %s", exc.message)
        # drop partial buffers so capture restarts cleanly; the word is untouched
        self._accumulator.reset()
        self._error = exc.message
        if self._last_debug is not None:
            self._last_debug.responded_at = self._clock()
            self._last_debug.error = exc.message
        self._feedback.on_error(exc.message)
        self._on_completed(observation)

    def _on_completed(self, observation: Observation) -> None:
        if observation.driven:
            self._fire_completion()
        # a driver that still holds the slot decides when capture resumes
        if (observation.framing is Framing.BATCH
                and self._mode is Mode.CONTINUOUS
                and not self.driver_active):
            self._schedule_rearm()

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    # ==================================================================
    # Timers
    # ==================================================================
    def _schedule_idle_check(self) -> None:
        if self._idle_handle is not None:
            self._idle_handle.cancel()
        loop = asyncio.get_running_loop()
        self._idle_handle = loop.call_later(self._config.idle_check_delay, self.check_idle)

    def check_idle(self) -> Optional[str]:
        """
        Finalize the word if the stream has been quiet long enough.
        Evaluated against the live last-sample timestamp, never timer order.
        """
        self._idle_handle = None
        word = self._session.finalize_if_idle(self._clock(), driver_active=self.driver_active)
        if word:
            logger.info("[Controller] No samples for %.1fs - finalizing %r",
                        self._config.idle_threshold, word)
            self._feedback.on_word_finalized(word)
        return word

    def _schedule_rearm(self) -> None:
        if self._rearm_handle is not None:
            self._rearm_handle.cancel()
        loop = asyncio.get_running_loop()
        self._rearm_handle = loop.call_later(
            self._config.rearm_delay, self._rearm, self._generation
        )

    def _rearm(self, generation: int) -> None:
        self._rearm_handle = None
        if self._is_stale(generation) or self.driver_active or self._mode is not Mode.CONTINUOUS:
            return
        logger.debug("[Controller] Restarting collection for next letter")
        self._capturing = True

    # ==================================================================
    # Mode / lifecycle
    # ==================================================================
    @property
    def mode(self) -> Mode:
        return self._mode

    def set_mode(self, mode: Mode, clear_word: bool = False) -> None:
        """Switch mode; resets capture state but keeps the word unless asked."""
        if mode is not self._mode:
            logger.info("[Controller] Mode %s → %s", self._mode.value, mode.value)
            self._mode = mode
            self._reset_pipeline()
            self._capturing = True
        if clear_word:
            self.clear_word()

    def toggle_mode(self, clear_word: bool = False) -> Mode:
        target = Mode.CONTINUOUS if self._mode is Mode.SINGLE_SHOT else Mode.SINGLE_SHOT
        self.set_mode(target, clear_word=clear_word)
        return self._mode

    def start_capture(self) -> bool:
        """
        Re-arm capture (single-shot re-trigger).
        Returns False while a classification is still in flight.
        """
        if self._accumulator.in_flight:
            return False
        self._capturing = True
        return True

    def stop(self) -> None:
        """Manual stop: drop everything in flight and pause capture."""
        self._reset_pipeline()
        self._capturing = False
        self._last_spoken = ""

    def connect(self, device_id: str) -> None:
        logger.info("[Controller] Device connected: %s", device_id)
        self._device_id = device_id
        self._reset_pipeline()
        self._capturing = True

    def disconnect(self) -> None:
        logger.info("[Controller] Device disconnected: %s", self._device_id)
        self._device_id = None
        self._reset_pipeline()
        self._last_spoken = ""
        self._calibration_capture = None
        if self._config.reset_calibration_on_disconnect:
            self.reset_calibration()

    def _reset_pipeline(self) -> None:
        self._generation += 1
        self._accumulator.reset()
        self._stabilizer.reset()
        if self._rearm_handle is not None:
            self._rearm_handle.cancel()
            self._rearm_handle = None
        current = asyncio.current_task() if _loop_running() else None
        for task in list(self._tasks):
            if task is not current:
                task.cancel()

    async def drain(self) -> None:
        """Wait for every outstanding classification task to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel timers and outstanding work."""
        self._reset_pipeline()
        if self._idle_handle is not None:
            self._idle_handle.cancel()
            self._idle_handle = None

    # ==================================================================
    # Demo driver protocol
    # ==================================================================
    @property
    def driver_active(self) -> bool:
        return self._pending_completion is not None

    def arm_completion(self, callback: CompletionCallback) -> None:
        """Install a one-shot callback fired when the next driven observation completes."""
        self._pending_completion = callback

    def clear_completion(self) -> None:
        self._pending_completion = None
        if _loop_running():
            self._schedule_idle_check()

    def begin_driven_capture(self) -> None:
        """Start a fresh driver-paced batch (switches to continuous mode)."""
        if self._mode is not Mode.CONTINUOUS:
            self.set_mode(Mode.CONTINUOUS)
        else:
            self._reset_pipeline()
        self._capturing = True
        self._display_sample = None

    def _fire_completion(self) -> None:
        callback = self._pending_completion
        if callback is None:
            return
        self._pending_completion = None
        callback()

    # ==================================================================
    # Word
    # ==================================================================
    @property
    def word(self) -> str:
        return self._session.word

    def clear_word(self) -> None:
        self._session.clear()
        self._last_prediction = None

    def delete_last_letter(self) -> None:
        self._session.delete_last()

    def finalize_word(self) -> Optional[str]:
        """Finalize now (end of a scripted demo). No-op if already finalized."""
        word = self._session.finalize()
        if word:
            self._feedback.on_word_finalized(word)
        return word

    # ==================================================================
    # Calibration
    # ==================================================================
    @property
    def calibration(self) -> Calibration:
        return self._calibration

    @property
    def is_calibrated(self) -> bool:
        return self._is_calibrated

    def set_calibration(self, calibration: Calibration) -> None:
        if (len(calibration.straight_baseline) != NUM_CHANNELS
                or len(calibration.bent_max) != NUM_CHANNELS):
            raise ValueError(f"calibration vectors must have {NUM_CHANNELS} channels")
        logger.info("[Controller] Calibrated: straight=%s bent=%s",
                    calibration.straight_baseline, calibration.bent_max)
        self._calibration = calibration
        self._is_calibrated = True

    def reset_calibration(self) -> None:
        self._calibration = Calibration.default()
        self._is_calibrated = False

    def start_calibration(self) -> CalibrationCapture:
        """Begin a two-pose capture fed from incoming raw samples."""
        capture = CalibrationCapture(samples_per_pose=self._config.calibration_samples)
        capture.start()
        self._calibration_capture = capture
        return capture

    def cancel_calibration(self) -> None:
        self._calibration_capture = None

    # ==================================================================
    # Settings / state
    # ==================================================================
    @property
    def min_confidence(self) -> float:
        return self._stabilizer.min_confidence

    @min_confidence.setter
    def min_confidence(self, value: float) -> None:
        self._stabilizer.min_confidence = value

    @property
    def is_analyzing(self) -> bool:
        return self._accumulator.in_flight

    @property
    def is_capturing(self) -> bool:
        return self._capturing

    @property
    def device_id(self) -> Optional[str]:
        return self._device_id

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def tracker(self):
        return self._stabilizer.tracker

    def snapshot(self) -> RecognitionSnapshot:
        return RecognitionSnapshot(
            mode=self._mode,
            word=self._session.word,
            finalized=self._session.finalized,
            last_prediction=self._last_prediction,
            history=tuple(self._history),
            error=self._error,
            is_analyzing=self._accumulator.in_flight,
            display_sample=self._display_sample,
            fill_level=self._accumulator.fill_level,
            device_id=self._device_id,
            is_calibrated=self._is_calibrated,
            last_debug=self._last_debug,
        )


def _loop_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True
