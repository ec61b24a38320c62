from unittest import mock

import pytest
import requests

from core.classification_gateway import ClassificationGateway
from domain.enums import Framing
from domain.errors import ClassificationError
from domain.models import Observation

GOOD_BODY = {
    "letter": "a",
    "confidence": 0.93,
    "all_probabilities": {"A": 0.93, "B": 0.07},
    "processing_time_ms": 8.5,
    "model_name": "flex-v2",
    "timestamp": 1_700_000_000.0,
}

HEALTH_BODY = {
    "status": "healthy",
    "model_loaded": True,
    "model_name": "flex-v2",
    "database_connected": True,
    "uptime_seconds": 120.0,
}


def make_response(status=200, body=None, json_error=False):
    response = mock.MagicMock()
    response.status_code = status
    response.ok = status < 400
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body if body is not None else {}
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"HTTP {status}")
    return response


def make_gateway(response=None, error=None, api_key="secret"):
    session = mock.MagicMock()
    if error is not None:
        session.post.side_effect = error
        session.get.side_effect = error
    else:
        session.post.return_value = response
        session.get.return_value = response
    gateway = ClassificationGateway("http://api.test/", api_key=api_key, timeout=5.0, session=session)
    return gateway, session


OBSERVATION = Observation(
    samples=((0.1, 0.2, 0.3, 0.4, 0.5), (0.5, 0.4, 0.3, 0.2, 0.1)),
    framing=Framing.BATCH,
)


def test_classify_posts_samples_and_parses_prediction():
    gateway, session = make_gateway(make_response(body=GOOD_BODY))
    prediction = gateway.classify_sync(OBSERVATION, "glove-1")

    url = session.post.call_args.args[0]
    kwargs = session.post.call_args.kwargs
    assert url == "http://api.test/predict"
    assert kwargs["json"] == {
        "flex_sensors": [[0.1, 0.2, 0.3, 0.4, 0.5], [0.5, 0.4, 0.3, 0.2, 0.1]],
        "device_id": "glove-1",
    }
    assert kwargs["headers"] == {"Content-Type": "application/json", "X-API-Key": "secret"}
    assert kwargs["timeout"] == 5.0

    assert prediction.letter == "A"
    assert prediction.confidence == pytest.approx(0.93)
    assert prediction.model_name == "flex-v2"
    assert prediction.round_trip_ms is not None and prediction.round_trip_ms >= 0


@pytest.mark.parametrize("status, message", [
    (401, "Missing API key. Configure SIGNGLOVE_API_KEY"),
    (403, "Invalid API key. Check your configuration"),
    (429, "Rate limit exceeded. Please wait a moment"),
])
def test_auth_and_rate_limit_statuses_map_to_messages(status, message):
    gateway, _ = make_gateway(make_response(status=status, body={"detail": "ignored"}))
    with pytest.raises(ClassificationError) as info:
        gateway.classify_sync(OBSERVATION, "glove-1")
    assert info.value.message == message


def test_server_error_uses_detail():
    gateway, _ = make_gateway(make_response(status=500, body={"detail": "model not loaded"}))
    with pytest.raises(ClassificationError, match="model not loaded"):
        gateway.classify_sync(OBSERVATION, "glove-1")


def test_server_error_without_detail_reports_status():
    gateway, _ = make_gateway(make_response(status=502, json_error=True))
    with pytest.raises(ClassificationError, match=r"HTTP 502"):
        gateway.classify_sync(OBSERVATION, "glove-1")


def test_timeout_is_reported():
    gateway, _ = make_gateway(error=requests.Timeout())
    with pytest.raises(ClassificationError, match="timed out after 5s"):
        gateway.classify_sync(OBSERVATION, "glove-1")


def test_transport_failure_is_reported():
    gateway, _ = make_gateway(error=requests.ConnectionError("connection refused"))
    with pytest.raises(ClassificationError, match="connection refused"):
        gateway.classify_sync(OBSERVATION, "glove-1")


@pytest.mark.parametrize("body", [
    {k: v for k, v in GOOD_BODY.items() if k != "letter"},
    dict(GOOD_BODY, confidence=1.4),
    dict(GOOD_BODY, letter="AB"),
    dict(GOOD_BODY, letter="Z"),
    dict(GOOD_BODY, letter="7"),
])
def test_malformed_body_is_rejected(body):
    gateway, _ = make_gateway(make_response(body=body))
    with pytest.raises(ClassificationError, match="Malformed prediction response"):
        gateway.classify_sync(OBSERVATION, "glove-1")


def test_non_json_body_is_rejected():
    gateway, _ = make_gateway(make_response(json_error=True))
    with pytest.raises(ClassificationError, match="Malformed prediction response"):
        gateway.classify_sync(OBSERVATION, "glove-1")


async def test_classify_runs_off_the_loop():
    gateway, session = make_gateway(make_response(body=GOOD_BODY))
    prediction = await gateway.classify(OBSERVATION, "glove-1")
    assert prediction.letter == "A"
    assert session.post.call_count == 1


async def test_health_check_parses_status():
    gateway, session = make_gateway(make_response(body=HEALTH_BODY))
    health = await gateway.check_health()
    assert health.status == "healthy"
    assert health.model_loaded
    assert session.get.call_args.args[0] == "http://api.test/health"


@pytest.mark.parametrize("response, error", [
    (make_response(status=503), None),
    (None, requests.ConnectionError("down")),
    (make_response(body={"status": "ok"}), None),
])
def test_health_check_failures(response, error):
    gateway, _ = make_gateway(response, error=error)
    with pytest.raises(ClassificationError, match="API health check failed"):
        gateway.check_health_sync()


def test_is_configured():
    assert make_gateway(api_key="secret")[0].is_configured
    assert not make_gateway(api_key="")[0].is_configured
    assert not make_gateway(api_key="your-api-key-here")[0].is_configured
