import math
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy.orm import Session

from soil_sage.core.exceptions import InvalidRequestError
from soil_sage.crud import aggregate_crud, sensor_crud
from soil_sage.schemas.aggregate import DailyAggregateOut
from soil_sage.schemas.report import ReportDataResponse, ReportSummary
from soil_sage.schemas.sensor import SensorReadingOut
from soil_sage.services.statistics import mean, metric_values
from soil_sage.utils.time import to_local_naive

READINGS_PER_DAY = 144  # one every 10 minutes


def _average_or_zero(rows, attribute: str) -> float:
    value = mean(metric_values(rows, attribute))
    return round(value, 2) if value is not None else 0.0


def get_report_data(db: Session, start: datetime, end: datetime) -> ReportDataResponse:
    """Readings, daily aggregates and a summary for a closed period."""
    start, end = to_local_naive(start), to_local_naive(end)
    if start >= end:
        raise InvalidRequestError("Start date must be before end date")

    readings = sensor_crud.get_range(db, start, end, include_end=True)
    aggregates = aggregate_crud.get_range(db, start, end)

    summary = ReportSummary(
        total_readings=len(readings),
        period_days=math.ceil((end - start).total_seconds() / 86400),
        avg_temperature=_average_or_zero(readings, "temperature"),
        avg_humidity=_average_or_zero(readings, "humidity"),
        avg_moisture=_average_or_zero(readings, "moisture_percent"),
        avg_uv=_average_or_zero(readings, "uv_index"),
    )
    return ReportDataResponse(
        sensor_data=[SensorReadingOut.model_validate(row) for row in readings],
        daily_aggregates=[DailyAggregateOut.from_row(row) for row in aggregates],
        summary=summary,
    )


def get_last_24_hours(db: Session, now: Optional[datetime] = None) -> dict[str, Any]:
    end = now or datetime.now()
    start = end - timedelta(hours=24)
    readings = sensor_crud.get_multi(db, limit=READINGS_PER_DAY, start_time=start, end_time=end)
    aggregates = aggregate_crud.get_range(db, start, end)

    return {
        "period": {"start_date": start, "end_date": end},
        "sensor_data": [SensorReadingOut.model_validate(row) for row in readings],
        "daily_aggregates": [DailyAggregateOut.from_row(row) for row in reversed(aggregates)],
    }
