from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from soil_sage.models.calibration import Calibration


class CalibrationRequest(BaseModel):
    days: int = Field(default=7, ge=1, le=60, description="Trailing window in days")
    strategy: Literal["median", "avg"] = "median"
    fruit: str | None = None

    @field_validator("fruit")
    @classmethod
    def normalize_fruit(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip().lower()
        return value or None


class CalibrationTargets(BaseModel):
    sunlight_lux: float | None = None
    moisture_percent: float | None = None
    moisture_percent_2: float | None = None
    moisture_percent_3: float | None = None
    temperature_c: float | None = None
    humidity_percent: float | None = None
    uv_index: float | None = None


class CalibrationOut(BaseModel):
    id: int
    fruit: str | None
    source_days: int
    strategy: str
    calculated_at: datetime
    targets: CalibrationTargets

    @classmethod
    def from_row(cls, row: Calibration) -> "CalibrationOut":
        return cls(
            id=row.id,
            fruit=row.fruit,
            source_days=row.source_days,
            strategy=row.strategy,
            calculated_at=row.calculated_at,
            targets=CalibrationTargets(**row.targets),
        )
