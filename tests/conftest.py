"""
Shared test fixtures for the Soil Sage test suite.

Provides:
- In-memory SQLite database with all tables created per test
- A session factory for the timer-driven services
- Helpers for seeding sensor readings
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from soil_sage.core.database import Base
from soil_sage.crud import sensor_crud
from soil_sage.models import SensorReading  # noqa: F401  registers tables
from tests.factories import reading

logging.getLogger("soil_sage").setLevel(logging.WARNING)


@pytest.fixture()
def engine():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def add_readings(db):
    """Insert readings given as (timestamp, metrics) pairs."""

    def _add(*rows: tuple[datetime, dict[str, Any]]):
        return [sensor_crud.create(db, reading(timestamp, **metrics)) for timestamp, metrics in rows]

    return _add
