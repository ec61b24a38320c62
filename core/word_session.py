"""
WordSession — the growing letter sequence and its idle finalization.

Pure state: the caller supplies timestamps and owns the timer.
"""
from __future__ import annotations
from typing import List, Optional


class WordSession:
    """
    Parameters
    ----------
    idle_threshold : float
        Seconds without samples after which a non-empty word is finalized.
    """

    def __init__(self, idle_threshold: float = 2.0) -> None:
        self._idle_threshold = idle_threshold
        self._letters: List[str] = []
        self._finalized = False
        self._last_sample_at: Optional[float] = None

    # ---- mutations -----------------------------------------------------
    def append(self, letter: str) -> None:
        """Append a letter; a finalized word is replaced by a new one."""
        if self._finalized:
            self._letters = []
            self._finalized = False
        self._letters.append(letter)

    def delete_last(self) -> None:
        if self._letters:
            self._letters.pop()

    def clear(self) -> None:
        self._letters = []
        self._finalized = False

    def touch(self, now: float) -> None:
        """Record a sample arrival."""
        self._last_sample_at = now

    # ---- finalization --------------------------------------------------
    def finalize_if_idle(self, now: float, driver_active: bool = False) -> Optional[str]:
        """
        Finalize if no sample arrived for `idle_threshold` seconds.

        Returns the finished word the first time it is finalized, None on
        every other call.
        """
        if driver_active or self._last_sample_at is None:
            return None
        if now - self._last_sample_at < self._idle_threshold:
            return None
        return self.finalize()

    def finalize(self) -> Optional[str]:
        if self._finalized or not self._letters:
            return None
        self._finalized = True
        return self.word

    # ---- accessors -----------------------------------------------------
    @property
    def word(self) -> str:
        return "".join(self._letters)

    @property
    def letters(self) -> List[str]:
        return list(self._letters)

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def last_sample_at(self) -> Optional[float]:
        return self._last_sample_at

    @property
    def idle_threshold(self) -> float:
        return self._idle_threshold

    def __len__(self) -> int:
        return len(self._letters)
