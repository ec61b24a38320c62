"""
SyntheticGlove — fabricates normalized flex samples for a held letter.

Emits the letter's pattern plus uniform noise at a fixed rate from an asyncio
task, so it can stand in for the physical glove.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Callable, Mapping, Optional, Tuple

import numpy as np

from domain.models import Sample
from utils.constants import ASL_PATTERNS

logger = logging.getLogger(__name__)


class SyntheticGlove:
    """
    Parameters
    ----------
    sink : callable
        Receives every generated sample (typically ModeController.on_sample).
    rate_hz : float
        Samples per second.
    noise : float
        Half-width of the uniform noise added to each channel
        (±0.015 ≈ ±8 ADC counts on a ~500 count range).
    seed : int, optional
        Seed for reproducible noise.
    """

    def __init__(
        self,
        sink: Callable[[Sample], None],
        rate_hz: float = 50.0,
        noise: float = 0.015,
        seed: Optional[int] = None,
        patterns: Mapping[str, Tuple[float, ...]] = ASL_PATTERNS,
    ) -> None:
        self._sink = sink
        self._period = 1.0 / rate_hz
        self._noise = noise
        self._patterns = dict(patterns)
        self._rng = np.random.default_rng(seed)
        self._letter: Optional[str] = None
        self._running = False
        self.sample_count = 0

    # ------------------------------------------------------------------
    @property
    def letters(self) -> str:
        return "".join(sorted(self._patterns))

    @property
    def letter(self) -> Optional[str]:
        return self._letter

    @property
    def is_running(self) -> bool:
        return self._running

    def select(self, letter: str) -> None:
        """Start holding `letter`; samples flow on the next tick."""
        letter = letter.upper()
        if letter not in self._patterns:
            raise ValueError(f"no pattern for letter {letter!r}")
        if self._letter and self._letter != letter:
            logger.debug("[Simulator] Switching from %s to %s", self._letter, letter)
        self._letter = letter
        self.sample_count = 0

    def stop(self) -> None:
        """Stop emitting; run() returns on its next tick."""
        self._running = False
        self._letter = None

    def sample(self, letter: str) -> Sample:
        base = np.asarray(self._patterns[letter], dtype=float)
        jitter = self._rng.uniform(-self._noise, self._noise, size=base.shape)
        noisy = np.round(np.clip(base + jitter, 0.0, 1.0), 4)
        return tuple(float(v) for v in noisy)

    def start(self) -> asyncio.Task:
        """Mark the glove running and schedule run() on the current loop."""
        self._running = True
        return asyncio.get_running_loop().create_task(self.run())

    async def run(self) -> None:
        """
        Emit samples every period while running.

        Returns at once unless start() was called; a stop() issued before the
        first tick still wins.
        """
        try:
            while self._running:
                if self._letter is not None:
                    self._sink(self.sample(self._letter))
                    self.sample_count += 1
                await asyncio.sleep(self._period)
        except asyncio.CancelledError:
            self._running = False
            raise
