import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from typing import Any

from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from soil_sage.core.exceptions import DuplicateAggregateError
from soil_sage.crud import aggregate_crud, sensor_crud
from soil_sage.models.daily_aggregate import SUMMARY_METRICS, DailyAggregate
from soil_sage.models.sensor_reading import SensorReading
from soil_sage.services.statistics import exposure_hours, mean, metric_values, summarize
from soil_sage.utils.time import DayLike, day_bounds

logger = logging.getLogger(__name__)

AGGREGATE_JOB_ID = "aggregate_daily_data"


def summarize_day(
    readings: Sequence[SensorReading],
    day: datetime,
    sunlight_threshold: float = 1000.0,
    uv_threshold: float = 3.0,
) -> dict[str, Any]:
    """Reduce one day of readings into the columns of a DailyAggregate."""
    ordered = sorted(readings, key=lambda row: row.timestamp)

    payload: dict[str, Any] = {
        "day": day,
        "sunlight_hours": exposure_hours(((row.timestamp, row.lux) for row in ordered), sunlight_threshold),
        "uv_exposure_hours": exposure_hours(((row.timestamp, row.uv_index) for row in ordered), uv_threshold),
        "uv_threshold": uv_threshold,
        "water_level_avg": mean(metric_values(ordered, "moisture_percent")) or 0.0,
        "total_readings": len(ordered),
        "collection_start": ordered[0].timestamp,
        "collection_end": ordered[-1].timestamp,
    }

    for metric in SUMMARY_METRICS:
        stats = summarize(metric_values(ordered, metric)) or {"min": 0.0, "max": 0.0, "avg": 0.0}
        payload[f"{metric}_min"] = stats["min"]
        payload[f"{metric}_max"] = stats["max"]
        payload[f"{metric}_avg"] = stats["avg"]

    return payload


class Aggregator:
    """Folds each calendar day of readings into one DailyAggregate."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        sunlight_threshold: float = 1000.0,
        uv_threshold: float = 3.0,
        scheduler_factory: Callable[[], BackgroundScheduler] = BackgroundScheduler,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.session_factory = session_factory
        self.sunlight_threshold = sunlight_threshold
        self.uv_threshold = uv_threshold
        self._scheduler_factory = scheduler_factory
        self._clock = clock
        self._scheduler: BackgroundScheduler | None = None

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    def aggregate_day(self, day: DayLike | None = None) -> DailyAggregate | None:
        """Aggregate the readings of ``day`` (default today).

        Returns the new aggregate, or None when the day has no readings or was
        already aggregated.
        """
        day_start, day_end = day_bounds(day if day is not None else self._clock())
        label = day_start.date().isoformat()

        try:
            with self.session_factory() as db:
                if aggregate_crud.get_by_day(db, day_start) is not None:
                    logger.info("Daily aggregate for %s already exists, skipping", label)
                    return None

                readings = sensor_crud.get_range(db, day_start, day_end)
                if not readings:
                    logger.info("No sensor data to aggregate for %s", label)
                    return None

                payload = summarize_day(readings, day_start, self.sunlight_threshold, self.uv_threshold)
                aggregate = aggregate_crud.create(db, payload)
        except DuplicateAggregateError:
            logger.info("Daily aggregate for %s was created concurrently, skipping", label)
            return None
        except SQLAlchemyError:
            logger.exception("Error aggregating daily data for %s", label)
            return None

        logger.info("Daily aggregate created for %s from %s readings", label, aggregate.total_readings)
        return aggregate

    def run_scheduled(self) -> DailyAggregate | None:
        # Fires at midnight, so the day to fold is the one that just ended.
        return self.aggregate_day(self._clock() - timedelta(days=1))

    def start(self) -> None:
        if self.is_running:
            logger.info("Daily aggregation is already scheduled")
            return

        scheduler = self._scheduler_factory()
        scheduler.add_job(
            self.run_scheduled,
            trigger="cron",
            hour=0,
            minute=0,
            id=AGGREGATE_JOB_ID,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=3600,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Daily aggregation scheduled at local midnight")

    def stop(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Daily aggregation stopped")
