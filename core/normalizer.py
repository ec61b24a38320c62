"""
Normalizer — maps raw thermistor ADC readings onto the unit interval.

The glove outputs higher values for a straight finger and lower values for
a bent one. Normalized output follows the training data convention:
0 = fully straight (at baseline), 1 = fully bent (at maxbend).
"""
from __future__ import annotations

import numpy as np

from domain.models import Calibration, Sample, SampleLike
from utils.constants import DEGENERATE_RANGE, RAW_THRESHOLD


def looks_raw(sample: SampleLike, threshold: float = RAW_THRESHOLD) -> bool:
    """
    True if any channel is above `threshold`.

    Simulator output is already in [0, 1]; hardware sends ADC counts in the
    thousands. Low-magnitude raw data can be misread as normalized.
    """
    return bool(np.any(np.asarray(sample, dtype=float) > threshold))


def normalize(raw: SampleLike, calibration: Calibration) -> Sample:
    """
    Per channel: clamp((baseline - raw) / (baseline - maxbend), 0, 1).
    Channels with a degenerate range (|range| < 1) map to 0.
    """
    values = np.asarray(raw, dtype=float)
    base   = np.asarray(calibration.straight_baseline, dtype=float)
    bent   = np.asarray(calibration.bent_max, dtype=float)

    span = base - bent
    degenerate = np.abs(span) < DEGENERATE_RANGE
    safe_span = np.where(degenerate, 1.0, span)

    out = np.clip((base - values) / safe_span, 0.0, 1.0)
    out[degenerate] = 0.0
    return tuple(float(v) for v in out)
