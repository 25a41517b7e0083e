from datetime import datetime

from pydantic import BaseModel

from soil_sage.schemas.aggregate import DailyAggregateOut
from soil_sage.schemas.sensor import SensorReadingOut


class ResolvedTargets(BaseModel):
    sunlight_lux: float | None = None
    moisture_percent: float | None = None
    temperature_c: float | None = None
    humidity_percent: float | None = None
    uv_index: float | None = None


class MetricAverages(BaseModel):
    lux: float | None = None
    moisture_percent: float | None = None
    temperature: float | None = None
    humidity: float | None = None
    uv_index: float | None = None


class BucketScore(BaseModel):
    start: datetime
    end: datetime
    readings: int
    averages: MetricAverages
    metric_scores: dict[str, int]
    score: float | None
    condition: str


class DayReport(BaseModel):
    day: datetime
    fruit: str | None
    targets: ResolvedTargets
    buckets: list[BucketScore]
    averages: MetricAverages
    total_readings: int
    score: float | None
    condition: str
    suggestions: list[str]


class ReportSummary(BaseModel):
    total_readings: int
    period_days: int
    avg_temperature: float
    avg_humidity: float
    avg_moisture: float
    avg_uv: float


class ReportDataResponse(BaseModel):
    sensor_data: list[SensorReadingOut]
    daily_aggregates: list[DailyAggregateOut]
    summary: ReportSummary
