"""
Pydantic schemas for the remote classifier's request/response bodies.
"""
from __future__ import annotations
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from domain.models import Prediction
from utils.constants import SUPPORTED_LETTERS


class PredictRequest(BaseModel):
    """Body sent to POST /predict."""
    flex_sensors: List[List[float]]
    device_id: Optional[str] = None


class PredictResponse(BaseModel):
    """Body returned by POST /predict."""
    letter: str = Field(min_length=1, max_length=1)
    confidence: float = Field(ge=0.0, le=1.0)
    all_probabilities: Dict[str, float]
    processing_time_ms: float
    model_name: str
    timestamp: float

    @field_validator("letter")
    @classmethod
    def letter_in_alphabet(cls, value: str) -> str:
        letter = value.upper()
        if letter not in SUPPORTED_LETTERS:
            raise ValueError(f"letter {value!r} is not in the supported alphabet")
        return letter

    def to_prediction(self, round_trip_ms: Optional[float] = None) -> Prediction:
        return Prediction(
            letter=self.letter,
            confidence=self.confidence,
            all_probabilities=dict(self.all_probabilities),
            processing_time_ms=self.processing_time_ms,
            model_name=self.model_name,
            timestamp=self.timestamp,
            round_trip_ms=round_trip_ms,
        )


class HealthStatus(BaseModel):
    """Body returned by GET /health."""
    status: str
    model_loaded: bool
    model_name: str
    database_connected: bool
    uptime_seconds: float
    authentication_enabled: Optional[bool] = None
