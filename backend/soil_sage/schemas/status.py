from datetime import datetime

from pydantic import BaseModel


class CollectionStatus(BaseModel):
    is_running: bool
    last_collection: datetime | None = None
    next_collection: datetime | None = None
    total_collections: int = 0


class DataStats(BaseModel):
    total_sensor_readings: int = 0
    total_daily_aggregates: int = 0
    oldest_data: datetime | None = None
    newest_data: datetime | None = None


class SystemStatus(BaseModel):
    data_collection: CollectionStatus
    data_stats: DataStats
    performance: dict[str, str]


class HourlyStat(BaseModel):
    hour: datetime
    count: int
    avg_temperature: float
    avg_humidity: float
    avg_moisture: float
    avg_uv: float
    avg_lux: float


class CollectionLogResponse(BaseModel):
    period_hours: int
    total_collections: int
    expected_collections: int
    collection_rate: float
    hourly_stats: list[HourlyStat]
