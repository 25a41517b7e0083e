from datetime import timedelta
from unittest.mock import MagicMock, Mock

import pytest
from sqlalchemy.exc import OperationalError

from soil_sage.core.exceptions import ConfigurationError, SourceUnavailableError
from soil_sage.crud import sensor_crud
from soil_sage.services.collector import COLLECT_JOB_ID, Collector, snapshot_to_reading
from soil_sage.services.telemetry_client import TelemetryClient
from tests.factories import DAY

NOW = DAY.replace(hour=12, minute=5)

SNAPSHOT = {
    "battery_percent": 87,
    "battery_voltage": 3.95,
    "humidity": 55.2,
    "lux": 1430,
    "moisture_percent": 41.0,
    "temperature": 22.4,
    "uv_index": 2.1,
    "timestamp": "2020-01-01T00:00:00Z",
}


@pytest.fixture
def telemetry():
    client = Mock(spec=TelemetryClient)
    client.fetch_latest.return_value = dict(SNAPSHOT)
    return client


@pytest.fixture
def scheduler_factory():
    return MagicMock()


@pytest.fixture
def collector(session_factory, telemetry, scheduler_factory):
    return Collector(session_factory, telemetry, scheduler_factory=scheduler_factory, clock=lambda: NOW)


class TestSnapshotMapping:
    def test_missing_required_fields_default_to_zero(self):
        payload = snapshot_to_reading({"lux": 900}, NOW)
        assert payload["lux"] == 900.0
        assert payload["uv_voltage"] == 0.0
        assert payload["irradiance"] == 0.0

    def test_secondary_moisture_channels_stay_absent(self):
        payload = snapshot_to_reading({"moisture_percent_2": 33}, NOW)
        assert payload["moisture_percent_2"] == 33.0
        assert payload["moisture_percent_3"] is None

    def test_non_numeric_values_are_treated_as_missing(self):
        payload = snapshot_to_reading({"temperature": "n/a", "humidity": "48.5"}, NOW)
        assert payload["temperature"] == 0.0
        assert payload["humidity"] == 48.5

    def test_source_timestamp_is_ignored(self):
        payload = snapshot_to_reading(SNAPSHOT, NOW)
        assert payload["timestamp"] == NOW


class TestCollectOnce:
    def test_stores_reading_stamped_at_collection_time(self, collector, db, telemetry):
        reading = collector.collect_once()

        assert reading is not None
        assert reading.timestamp == NOW
        assert reading.lux == 1430
        assert sensor_crud.count(db) == 1
        telemetry.fetch_latest.assert_called_once_with()
        assert collector.last_collection_at == NOW
        assert collector.total_collections == 1

    def test_source_failure_is_swallowed(self, collector, db, telemetry):
        telemetry.fetch_latest.side_effect = SourceUnavailableError("timeout")

        assert collector.collect_once() is None
        assert sensor_crud.count(db) == 0
        assert collector.total_collections == 0

    def test_missing_configuration_is_swallowed(self, collector, db, telemetry):
        telemetry.fetch_latest.side_effect = ConfigurationError("TELEMETRY_BASE_URL not configured")

        assert collector.collect_once() is None
        assert sensor_crud.count(db) == 0

    def test_readings_past_retention_are_purged(self, collector, db, add_readings):
        add_readings(
            (NOW - timedelta(hours=25), {"lux": 10}),
            (NOW - timedelta(hours=23), {"lux": 20}),
        )

        collector.collect_once()

        remaining = sensor_crud.get_multi(db)
        assert [row.lux for row in remaining] == [1430, 20]

    def test_store_failure_is_swallowed(self, telemetry):
        broken = MagicMock()
        broken.return_value.__enter__.return_value.commit.side_effect = OperationalError(
            "INSERT", {}, Exception("database is locked")
        )
        collector = Collector(broken, telemetry, clock=lambda: NOW)

        assert collector.collect_once() is None
        assert collector.last_collection_at is None
        assert collector.total_collections == 0

    def test_purge_failure_keeps_the_stored_reading(self, collector, db, monkeypatch):
        def fail_purge(session, now, retention_hours):
            raise OperationalError("DELETE", {}, Exception("database is locked"))

        monkeypatch.setattr(sensor_crud, "purge_expired", fail_purge)

        reading = collector.collect_once()

        assert reading is not None
        assert reading.lux == 1430
        assert sensor_crud.count(db) == 1
        assert collector.last_collection_at == NOW
        assert collector.total_collections == 1


class TestLifecycle:
    def test_start_schedules_immediate_recurring_job(self, collector, scheduler_factory):
        collector.start()

        scheduler = scheduler_factory.return_value
        scheduler.add_job.assert_called_once()
        kwargs = scheduler.add_job.call_args.kwargs
        assert kwargs["trigger"] == "interval"
        assert kwargs["minutes"] == 10
        assert kwargs["next_run_time"] == NOW
        assert kwargs["id"] == COLLECT_JOB_ID
        scheduler.start.assert_called_once_with()
        assert collector.is_running

    def test_second_start_is_a_no_op(self, collector, scheduler_factory):
        collector.start()
        collector.start()

        scheduler_factory.assert_called_once_with()

    def test_stop_is_idempotent(self, collector, scheduler_factory):
        collector.stop()
        collector.start()
        collector.stop()
        collector.stop()

        scheduler_factory.return_value.shutdown.assert_called_once_with(wait=False)
        assert not collector.is_running

    def test_next_collection_follows_last_collection(self, collector):
        assert collector.next_collection_at is None
        collector.start()
        collector.collect_once()
        assert collector.next_collection_at == NOW + timedelta(minutes=10)
