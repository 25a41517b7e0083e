from sqlalchemy import Column, DateTime, Float, Integer
from sqlalchemy.sql import func

from soil_sage.core.database import Base

SUMMARY_METRICS = ("temperature", "humidity", "moisture_percent", "uv_index", "lux")


class DailyAggregate(Base):
    __tablename__ = "daily_aggregates"

    id = Column(Integer, primary_key=True, index=True)
    day = Column(DateTime, nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    sunlight_hours = Column(Float, nullable=False, default=0.0)
    uv_exposure_hours = Column(Float, nullable=False, default=0.0)
    uv_threshold = Column(Float, nullable=False, default=3.0)
    water_level_avg = Column(Float, nullable=False, default=0.0)

    temperature_min = Column(Float, nullable=False)
    temperature_max = Column(Float, nullable=False)
    temperature_avg = Column(Float, nullable=False)
    humidity_min = Column(Float, nullable=False)
    humidity_max = Column(Float, nullable=False)
    humidity_avg = Column(Float, nullable=False)
    moisture_percent_min = Column(Float, nullable=False)
    moisture_percent_max = Column(Float, nullable=False)
    moisture_percent_avg = Column(Float, nullable=False)
    uv_index_min = Column(Float, nullable=False)
    uv_index_max = Column(Float, nullable=False)
    uv_index_avg = Column(Float, nullable=False)
    lux_min = Column(Float, nullable=False)
    lux_max = Column(Float, nullable=False)
    lux_avg = Column(Float, nullable=False)

    total_readings = Column(Integer, nullable=False, default=0)
    collection_start = Column(DateTime, nullable=False)
    collection_end = Column(DateTime, nullable=False)

    def summary(self, metric: str) -> dict[str, float]:
        return {
            "min": getattr(self, f"{metric}_min"),
            "max": getattr(self, f"{metric}_max"),
            "avg": getattr(self, f"{metric}_avg"),
        }

    def __repr__(self) -> str:
        return f"<DailyAggregate(day={self.day}, readings={self.total_readings})>"
