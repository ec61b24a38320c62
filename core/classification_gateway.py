"""
ClassificationGateway — wraps the remote letter classifier.

No buffer, no retries — just classify(). Every failure mode surfaces as a
ClassificationError carrying a message fit for display.
"""
from __future__ import annotations
import asyncio
import functools
import logging
import time
from typing import Optional

import requests
from pydantic import ValidationError

from domain.errors import ClassificationError
from domain.models import Observation, Prediction
from domain.schemas import HealthStatus, PredictRequest, PredictResponse

logger = logging.getLogger(__name__)

_STATUS_MESSAGES = {
    401: "Missing API key. Configure SIGNGLOVE_API_KEY",
    403: "Invalid API key. Check your configuration",
    429: "Rate limit exceeded. Please wait a moment",
}


class ClassificationGateway:
    """
    HTTP client for the classifier service.

    Parameters
    ----------
    base_url : str
        Service root, e.g. "http://localhost:8000".
    api_key : str
        Sent as the X-API-Key header.
    timeout : float
        Seconds allowed for one /predict round trip.
    health_timeout : float
        Seconds allowed for /health.
    session : requests.Session, optional
        Injected for tests; a private session is created otherwise.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 5.0,
        health_timeout: float = 3.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._health_timeout = health_timeout
        self._session = session or requests.Session()

    # ------------------------------------------------------------------
    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def is_configured(self) -> bool:
        """True when an API key other than the placeholder is set."""
        return bool(self._api_key) and self._api_key != "your-api-key-here"

    async def classify(self, observation: Observation, device_id: str) -> Prediction:
        """
        Submit one Observation and wait for the prediction.

        The blocking HTTP call runs on the loop's default executor; the result
        is handed back to the awaiting task on the loop thread.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, functools.partial(self.classify_sync, observation, device_id)
        )

    def classify_sync(self, observation: Observation, device_id: str) -> Prediction:
        body = PredictRequest(
            flex_sensors=[list(s) for s in observation.samples],
            device_id=device_id,
        )
        logger.debug(
            "[Gateway] Sending %d samples (device=%s) first=%s last=%s",
            len(observation), device_id, observation.first_sample, observation.last_sample,
        )

        started = time.perf_counter()
        try:
            response = self._session.post(
                f"{self._base_url}/predict",
                json=body.model_dump(),
                headers=self._headers(),
                timeout=self._timeout,
            )
        except requests.Timeout as exc:
            raise ClassificationError(f"Prediction timed out after {self._timeout:g}s") from exc
        except requests.RequestException as exc:
            raise ClassificationError(str(exc) or "Prediction failed") from exc

        round_trip_ms = (time.perf_counter() - started) * 1000.0

        if not response.ok:
            raise ClassificationError(self._error_message(response))

        try:
            parsed = PredictResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ClassificationError(f"Malformed prediction response: {exc}") from exc

        prediction = parsed.to_prediction(round_trip_ms=round_trip_ms)
        logger.info(
            "[Gateway] %s (%.0f%%) in %.0f ms",
            prediction.letter, prediction.confidence * 100, round_trip_ms,
        )
        return prediction

    async def check_health(self) -> HealthStatus:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.check_health_sync)

    def check_health_sync(self) -> HealthStatus:
        try:
            response = self._session.get(f"{self._base_url}/health", timeout=self._health_timeout)
            response.raise_for_status()
            return HealthStatus.model_validate(response.json())
        except (requests.RequestException, ValueError, ValidationError) as exc:
            raise ClassificationError("API health check failed") from exc

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    def _headers(self) -> dict:
        return {"Content-Type": "application/json", "X-API-Key": self._api_key}

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        if response.status_code in _STATUS_MESSAGES:
            return _STATUS_MESSAGES[response.status_code]
        try:
            detail = response.json().get("detail")
        except (ValueError, AttributeError):
            detail = None
        if detail:
            return str(detail)
        return f"Prediction failed (HTTP {response.status_code})"
