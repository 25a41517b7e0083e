from datetime import datetime

from pydantic import BaseModel, ConfigDict


class SensorReadingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    timestamp: datetime
    battery_percent: float
    battery_voltage: float
    humidity: float
    irradiance: float
    lux: float
    moisture_percent: float
    moisture_percent_2: float | None = None
    moisture_percent_3: float | None = None
    moisture_raw: float
    temperature: float
    uv_index: float
    uv_intensity: float
    uv_raw: float
    uv_voltage: float


class SensorHistoryResponse(BaseModel):
    items: list[SensorReadingOut]
    count: int


class CurrentReadingsResponse(BaseModel):
    timestamp: datetime
    readings: dict


class BatteryStatus(BaseModel):
    battery_percent: float
    battery_voltage: float
    timestamp: datetime
