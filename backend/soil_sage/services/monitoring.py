from collections import defaultdict
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from soil_sage.crud import aggregate_crud, sensor_crud
from soil_sage.schemas.status import (
    CollectionLogResponse,
    CollectionStatus,
    DataStats,
    HourlyStat,
    SystemStatus,
)
from soil_sage.services.collector import Collector
from soil_sage.services.statistics import mean, metric_values
from soil_sage.utils.time import start_of_hour


def build_system_status(db: Session, collector: Collector) -> SystemStatus:
    total_readings = sensor_crud.count(db)
    stats = DataStats(
        total_sensor_readings=total_readings,
        total_daily_aggregates=aggregate_crud.count(db),
    )
    if total_readings:
        oldest = sensor_crud.get_oldest(db)
        newest = sensor_crud.get_latest(db)
        stats.oldest_data = oldest.timestamp if oldest else None
        stats.newest_data = newest.timestamp if newest else None

    return SystemStatus(
        data_collection=CollectionStatus(
            is_running=collector.is_running,
            last_collection=collector.last_collection_at,
            next_collection=collector.next_collection_at,
            total_collections=collector.total_collections,
        ),
        data_stats=stats,
        performance={
            "collection_interval": f"{collector.interval_minutes} minutes",
            "aggregation_schedule": "Daily at midnight",
            "ttl_expiration": f"{collector.retention_hours} hours",
        },
    )


def build_collection_logs(
    db: Session,
    hours: int = 24,
    interval_minutes: int = 10,
    now: Optional[datetime] = None,
) -> CollectionLogResponse:
    end = now or datetime.now()
    readings = sensor_crud.get_range(db, end - timedelta(hours=hours), end, include_end=True)

    grouped = defaultdict(list)
    for row in readings:
        grouped[start_of_hour(row.timestamp)].append(row)

    def _avg(rows, attribute: str, digits: int) -> float:
        return round(mean(metric_values(rows, attribute)) or 0.0, digits)

    hourly = [
        HourlyStat(
            hour=hour,
            count=len(rows),
            avg_temperature=_avg(rows, "temperature", 1),
            avg_humidity=_avg(rows, "humidity", 1),
            avg_moisture=_avg(rows, "moisture_percent", 2),
            avg_uv=_avg(rows, "uv_index", 2),
            avg_lux=_avg(rows, "lux", 0),
        )
        for hour, rows in sorted(grouped.items(), reverse=True)
    ]

    expected = hours * (60 // interval_minutes)
    rate = round(len(readings) / expected * 100, 1) if expected else 0.0
    return CollectionLogResponse(
        period_hours=hours,
        total_collections=len(readings),
        expected_collections=expected,
        collection_rate=rate,
        hourly_stats=hourly,
    )
