import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from soil_sage.core.exceptions import SoilSageError
from soil_sage.crud import sensor_crud
from soil_sage.models.sensor_reading import OPTIONAL_FIELDS, REQUIRED_FIELDS, SensorReading
from soil_sage.services.telemetry_client import TelemetryClient

logger = logging.getLogger(__name__)

COLLECT_JOB_ID = "collect_sensor_data"


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def snapshot_to_reading(snapshot: dict[str, Any], timestamp: datetime) -> dict[str, Any]:
    """Map the known snapshot fields onto a reading row.

    Required metrics default to 0 when absent or non-numeric; the secondary
    moisture channels stay absent.
    """
    payload: dict[str, Any] = {"timestamp": timestamp}
    for field in REQUIRED_FIELDS:
        value = _as_number(snapshot.get(field))
        payload[field] = value if value is not None else 0.0
    for field in OPTIONAL_FIELDS:
        payload[field] = _as_number(snapshot.get(field))
    return payload


class Collector:
    """Pulls one telemetry snapshot per tick and appends it to the reading store."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        client: TelemetryClient,
        interval_minutes: int = 10,
        retention_hours: int = 24,
        scheduler_factory: Callable[[], BackgroundScheduler] = BackgroundScheduler,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.session_factory = session_factory
        self.client = client
        self.interval_minutes = interval_minutes
        self.retention_hours = retention_hours
        self._scheduler_factory = scheduler_factory
        self._clock = clock
        self._scheduler: BackgroundScheduler | None = None
        self.last_collection_at: datetime | None = None
        self.total_collections = 0

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    @property
    def next_collection_at(self) -> datetime | None:
        if not self.is_running:
            return None
        anchor = self.last_collection_at or self._clock()
        return anchor + timedelta(minutes=self.interval_minutes)

    def collect_once(self) -> SensorReading | None:
        try:
            snapshot = self.client.fetch_latest()
        except SoilSageError as exc:
            logger.error("Error collecting sensor data: %s", exc)
            return None

        now = self._clock()
        try:
            with self.session_factory() as db:
                reading = sensor_crud.create(db, snapshot_to_reading(snapshot, now))
        except SQLAlchemyError:
            logger.exception("Failed to store sensor reading")
            return None

        self.last_collection_at = now
        self.total_collections += 1
        logger.info("Sensor data collected at %s", now.isoformat())
        self.purge_expired(now)
        return reading

    def purge_expired(self, now: datetime) -> None:
        """Drop readings past the retention window; failures leave them for the next tick."""
        try:
            with self.session_factory() as db:
                sensor_crud.purge_expired(db, now, self.retention_hours)
        except SQLAlchemyError:
            logger.exception("Failed to purge expired sensor readings")

    def start(self) -> None:
        if self.is_running:
            logger.info("Data collection service is already running")
            return

        scheduler = self._scheduler_factory()
        scheduler.add_job(
            self.collect_once,
            trigger="interval",
            minutes=self.interval_minutes,
            id=COLLECT_JOB_ID,
            next_run_time=self._clock(),
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Data collection started, interval %s minutes", self.interval_minutes)

    def stop(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Data collection service stopped")
