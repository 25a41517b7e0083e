from datetime import datetime

from pydantic import BaseModel

from soil_sage.models.daily_aggregate import SUMMARY_METRICS, DailyAggregate


class MetricStats(BaseModel):
    min: float
    max: float
    avg: float


class DailyAggregateOut(BaseModel):
    day: datetime
    sunlight_hours: float
    uv_exposure_hours: float
    uv_threshold: float
    water_level_avg: float
    temperature: MetricStats
    humidity: MetricStats
    moisture_percent: MetricStats
    uv_index: MetricStats
    lux: MetricStats
    total_readings: int
    collection_start: datetime
    collection_end: datetime

    @classmethod
    def from_row(cls, row: DailyAggregate) -> "DailyAggregateOut":
        return cls(
            day=row.day,
            sunlight_hours=row.sunlight_hours,
            uv_exposure_hours=row.uv_exposure_hours,
            uv_threshold=row.uv_threshold,
            water_level_avg=row.water_level_avg,
            total_readings=row.total_readings,
            collection_start=row.collection_start,
            collection_end=row.collection_end,
            **{metric: MetricStats(**row.summary(metric)) for metric in SUMMARY_METRICS},
        )


class DailyAggregateListResponse(BaseModel):
    items: list[DailyAggregateOut]
    count: int


class AggregateRunResponse(BaseModel):
    created: bool
    day: datetime
    aggregate: DailyAggregateOut | None = None
