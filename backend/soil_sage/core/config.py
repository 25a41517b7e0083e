import os
from dataclasses import dataclass


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


@dataclass(frozen=True)
class Settings:
    environment: str = os.getenv("ENVIRONMENT", "development")
    debug: bool = os.getenv("DEBUG", "true").lower() == "true"
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))
    cors_origins_raw: str = os.getenv("CORS_ORIGINS", "http://localhost:8501")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./soil_sage.db")
    database_timeout: int = int(os.getenv("DATABASE_TIMEOUT", "10"))
    telemetry_base_url: str = os.getenv("TELEMETRY_BASE_URL", "")
    telemetry_path: str = os.getenv("TELEMETRY_PATH", "/trial.json")
    telemetry_timeout: int = int(os.getenv("TELEMETRY_TIMEOUT", "10"))
    collection_interval_minutes: int = int(os.getenv("COLLECTION_INTERVAL_MINUTES", "10"))
    sensor_retention_hours: int = int(os.getenv("SENSOR_RETENTION_HOURS", "24"))
    sunlight_lux_threshold: float = float(os.getenv("SUNLIGHT_LUX_THRESHOLD", "1000"))
    uv_exposure_threshold: float = float(os.getenv("UV_EXPOSURE_THRESHOLD", "3.0"))
    enable_scheduler: bool = os.getenv("ENABLE_SCHEDULER", "true").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    target_sunlight_lux: float | None = _optional_float("TARGET_SUNLIGHT_LUX")
    target_moisture_percent: float | None = _optional_float("TARGET_MOISTURE_PERCENT")
    target_temperature_c: float | None = _optional_float("TARGET_TEMPERATURE_C")
    target_humidity_percent: float | None = _optional_float("TARGET_HUMIDITY_PERCENT")
    target_uv_index: float | None = _optional_float("TARGET_UV_INDEX")

    @property
    def cors_origins(self) -> list[str]:
        return [item.strip() for item in self.cors_origins_raw.split(",") if item.strip()]

    @property
    def default_targets(self) -> dict[str, float | None]:
        return {
            "sunlight_lux": self.target_sunlight_lux,
            "moisture_percent": self.target_moisture_percent,
            "temperature_c": self.target_temperature_c,
            "humidity_percent": self.target_humidity_percent,
            "uv_index": self.target_uv_index,
        }


settings = Settings()
