"""
Error types raised by the recognition core.
"""
from __future__ import annotations
from typing import Iterable


class SignGloveError(Exception):
    """Base class for all recognition errors."""


class ClassificationError(SignGloveError):
    """The remote classifier could not produce a prediction."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnsupportedLettersError(SignGloveError, ValueError):
    """A demo word contained no letter the model can recognise."""

    def __init__(self, rejected: Iterable[str], supported: Iterable[str]) -> None:
        self.rejected  = list(rejected)
        self.supported = list(supported)
        super().__init__(
            "No valid letters to simulate "
            f"(not available in model: {', '.join(self.rejected) or '-'}; "
            f"available: {' '.join(self.supported)})"
        )
