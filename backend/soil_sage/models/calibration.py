from sqlalchemy import Column, DateTime, Float, Index, Integer, String

from soil_sage.core.database import Base

TARGET_FIELDS = (
    "sunlight_lux",
    "moisture_percent",
    "moisture_percent_2",
    "moisture_percent_3",
    "temperature_c",
    "humidity_percent",
    "uv_index",
)


class Calibration(Base):
    __tablename__ = "calibrations"
    __table_args__ = (Index("ix_calibrations_fruit_calculated_at", "fruit", "calculated_at"),)

    id = Column(Integer, primary_key=True, index=True)
    fruit = Column(String, nullable=True, index=True)  # null = global
    source_days = Column(Integer, nullable=False, default=7)
    strategy = Column(String, nullable=False, default="median")
    calculated_at = Column(DateTime, nullable=False, index=True)

    sunlight_lux = Column(Float, nullable=True)
    moisture_percent = Column(Float, nullable=True)
    moisture_percent_2 = Column(Float, nullable=True)
    moisture_percent_3 = Column(Float, nullable=True)
    temperature_c = Column(Float, nullable=True)
    humidity_percent = Column(Float, nullable=True)
    uv_index = Column(Float, nullable=True)

    @property
    def targets(self) -> dict[str, float | None]:
        return {name: getattr(self, name) for name in TARGET_FIELDS}

    def __repr__(self) -> str:
        return f"<Calibration(fruit={self.fruit}, strategy={self.strategy}, at={self.calculated_at})>"
