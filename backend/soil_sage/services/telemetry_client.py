from typing import Any

import requests

from soil_sage.core.config import settings
from soil_sage.core.exceptions import ConfigurationError, EmptySnapshotError, SourceUnavailableError


class TelemetryClient:
    def __init__(self, base_url: str, path: str = "/trial.json", timeout: int = 10) -> None:
        self.base_url = base_url.rstrip("/")
        self.path = path if path.startswith("/") else f"/{path}"
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def fetch_latest(self) -> dict[str, Any]:
        """Fetch the latest snapshot as a flat mapping of named fields."""
        if not self.configured:
            raise ConfigurationError("TELEMETRY_BASE_URL not configured")

        try:
            response = requests.get(f"{self.base_url}{self.path}", timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise SourceUnavailableError(f"Failed to fetch telemetry: {exc}") from exc
        except ValueError as exc:
            raise SourceUnavailableError("Telemetry source returned an invalid body") from exc

        if not data:
            raise EmptySnapshotError("No data available from telemetry source")
        if not isinstance(data, dict):
            raise SourceUnavailableError(f"Unexpected telemetry payload type: {type(data).__name__}")
        return data


telemetry_client = TelemetryClient(settings.telemetry_base_url, settings.telemetry_path, settings.telemetry_timeout)
