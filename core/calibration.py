"""
CalibrationCapture — two-pose glove calibration.

Averages N raw samples with the hand held straight, then N with every finger
fully bent, and produces a Calibration from the two per-channel means.
"""
from __future__ import annotations
from typing import List, Optional, Tuple

import numpy as np

from domain.enums import CalibrationStep
from domain.models import Calibration, SampleLike
from utils.constants import NUM_CHANNELS


class CalibrationCapture:
    """
    Parameters
    ----------
    samples_per_pose : int
        Raw samples averaged for each pose (100 ≈ 2 s at 50 Hz).
    """

    def __init__(self, samples_per_pose: int = 100) -> None:
        if samples_per_pose < 1:
            raise ValueError("samples_per_pose must be at least 1")
        self._samples_per_pose = samples_per_pose
        self._step = CalibrationStep.IDLE
        self._buffer: List[Tuple[float, ...]] = []
        self._baselines: Optional[Tuple[int, ...]] = None

    # ------------------------------------------------------------------
    def start(self, step: CalibrationStep = CalibrationStep.STRAIGHT) -> None:
        """Begin capturing the given pose (STRAIGHT or BENT)."""
        if step not in (CalibrationStep.STRAIGHT, CalibrationStep.BENT):
            raise ValueError(f"cannot capture step {step.value}")
        if step is CalibrationStep.BENT and self._baselines is None:
            raise ValueError("capture the straight pose first")
        self._buffer = []
        self._step = step

    def feed(self, sample: SampleLike) -> Optional[Calibration]:
        """
        Add one raw sample.

        Returns the finished Calibration when the bent pose completes,
        otherwise None.
        """
        if not self.is_capturing or len(sample) != NUM_CHANNELS:
            return None

        self._buffer.append(tuple(float(v) for v in sample))
        if len(self._buffer) < self._samples_per_pose:
            return None

        means = np.rint(np.mean(np.asarray(self._buffer), axis=0)).astype(int)
        averaged = tuple(int(v) for v in means)
        self._buffer = []

        if self._step is CalibrationStep.STRAIGHT:
            self._baselines = averaged
            self._step = CalibrationStep.BENT
            return None

        calibration = Calibration(straight_baseline=self._baselines, bent_max=averaged)
        self._baselines = None
        self._step = CalibrationStep.DONE
        return calibration

    def reset(self) -> None:
        self._buffer = []
        self._baselines = None
        self._step = CalibrationStep.IDLE

    # ------------------------------------------------------------------
    @property
    def step(self) -> CalibrationStep:
        return self._step

    @property
    def is_capturing(self) -> bool:
        return self._step in (CalibrationStep.STRAIGHT, CalibrationStep.BENT)

    @property
    def progress(self) -> float:
        """Fraction of the current pose captured, 0..1."""
        return len(self._buffer) / self._samples_per_pose
