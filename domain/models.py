from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from domain.enums import Framing, Mode
from utils.constants import DEFAULT_BASELINES, DEFAULT_MAXBENDS

# Type aliases
Sample = Tuple[float, ...]            # five channels, thumb → pinky
SampleLike = Sequence[float]


@dataclass(frozen=True)
class Calibration:
    """
    Per-channel raw ADC readings for a straight and a fully bent hand.
    Higher values mean straighter fingers on the thermistor glove.
    """
    straight_baseline: Tuple[float, ...] = DEFAULT_BASELINES
    bent_max: Tuple[float, ...] = DEFAULT_MAXBENDS

    @classmethod
    def default(cls) -> "Calibration":
        return cls()

    @property
    def is_default(self) -> bool:
        return (tuple(self.straight_baseline) == DEFAULT_BASELINES
                and tuple(self.bent_max) == DEFAULT_MAXBENDS)


@dataclass(frozen=True)
class Observation:
    """
    One unit of samples submitted together for classification.
    """
    samples: Tuple[Sample, ...]
    framing: Framing
    driven: bool = False          # demo driver was in control at dispatch

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def first_sample(self) -> Optional[Sample]:
        return self.samples[0] if self.samples else None

    @property
    def last_sample(self) -> Optional[Sample]:
        return self.samples[-1] if self.samples else None


@dataclass(frozen=True)
class Prediction:
    """Result of classifying one Observation."""
    letter: str
    confidence: float
    all_probabilities: Dict[str, float]
    processing_time_ms: float
    model_name: str
    timestamp: float
    round_trip_ms: Optional[float] = None


@dataclass(frozen=True)
class PredictionRecord:
    """Compact history entry."""
    letter: str
    confidence: float
    timestamp: float

    @classmethod
    def from_prediction(cls, prediction: Prediction) -> "PredictionRecord":
        return cls(prediction.letter, prediction.confidence, prediction.timestamp)


@dataclass
class StableLetterTracker:
    """
    Consecutive-agreement counter for rolling-window predictions.
    `consumed` is set once the current streak has been committed.
    """
    last_letter: str = ""
    consecutive_count: int = 0
    consumed: bool = False

    def reset(self) -> None:
        self.last_letter = ""
        self.consecutive_count = 0
        self.consumed = False


@dataclass
class ObservationDebug:
    """Diagnostics for the most recent classification attempt."""
    sample_count: int
    first_sample: Optional[Sample]
    last_sample: Optional[Sample]
    dispatched_at: float
    responded_at: Optional[float] = None
    prediction: Optional[Prediction] = None
    error: Optional[str] = None

    @property
    def latency_ms(self) -> Optional[float]:
        if self.responded_at is None:
            return None
        return (self.responded_at - self.dispatched_at) * 1000.0


@dataclass(frozen=True)
class RecognitionSnapshot:
    """
    Everything the presentation layer reads from the core.
    Built on demand by ModeController.snapshot().
    """
    mode: Mode
    word: str
    finalized: bool
    last_prediction: Optional[Prediction]
    history: Tuple[PredictionRecord, ...]
    error: Optional[str]
    is_analyzing: bool
    display_sample: Optional[Sample]
    fill_level: int
    device_id: Optional[str]
    is_calibrated: bool
    last_debug: Optional[ObservationDebug] = None

    # ---- convenience accessors ----------------------------------------
    @property
    def letter_count(self) -> int:
        return len(self.word)

    @property
    def is_connected(self) -> bool:
        return self.device_id is not None
