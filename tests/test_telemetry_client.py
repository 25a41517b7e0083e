from unittest.mock import Mock, patch

import pytest
import requests

from soil_sage.core.exceptions import ConfigurationError, EmptySnapshotError, SourceUnavailableError
from soil_sage.services.telemetry_client import TelemetryClient


def _response(payload=None, status_error=None):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.side_effect = status_error
    return response


@pytest.fixture
def client():
    return TelemetryClient("https://sensors.example.com/", "trial.json", timeout=10)


def test_fetch_latest_builds_url_and_applies_timeout(client):
    with patch("soil_sage.services.telemetry_client.requests.get") as mock_get:
        mock_get.return_value = _response({"lux": 1200, "temperature": 21.5})
        snapshot = client.fetch_latest()

    assert snapshot == {"lux": 1200, "temperature": 21.5}
    mock_get.assert_called_once_with("https://sensors.example.com/trial.json", timeout=10)


def test_missing_base_url_is_configuration_error():
    with pytest.raises(ConfigurationError):
        TelemetryClient("").fetch_latest()


def test_network_failure_is_source_unavailable(client):
    with patch("soil_sage.services.telemetry_client.requests.get", side_effect=requests.ConnectionError("down")):
        with pytest.raises(SourceUnavailableError):
            client.fetch_latest()


def test_non_success_status_is_source_unavailable(client):
    with patch("soil_sage.services.telemetry_client.requests.get") as mock_get:
        mock_get.return_value = _response(status_error=requests.HTTPError("503"))
        with pytest.raises(SourceUnavailableError):
            client.fetch_latest()


def test_empty_body_is_reported_separately(client):
    with patch("soil_sage.services.telemetry_client.requests.get") as mock_get:
        mock_get.return_value = _response(None)
        with pytest.raises(EmptySnapshotError):
            client.fetch_latest()
