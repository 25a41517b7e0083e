from sqlalchemy import Column, DateTime, Float, Integer

from soil_sage.core.database import Base

# Fields a snapshot may carry; missing ones are stored as 0.
REQUIRED_FIELDS = (
    "battery_percent",
    "battery_voltage",
    "humidity",
    "irradiance",
    "lux",
    "moisture_percent",
    "moisture_raw",
    "temperature",
    "uv_index",
    "uv_intensity",
    "uv_raw",
    "uv_voltage",
)
OPTIONAL_FIELDS = ("moisture_percent_2", "moisture_percent_3")


class SensorReading(Base):
    __tablename__ = "sensor_readings"

    id = Column(Integer, primary_key=True, index=True)
    timestamp = Column(DateTime, nullable=False, index=True)
    battery_percent = Column(Float, nullable=False, default=0.0)
    battery_voltage = Column(Float, nullable=False, default=0.0)
    humidity = Column(Float, nullable=False, default=0.0)
    irradiance = Column(Float, nullable=False, default=0.0)
    lux = Column(Float, nullable=False, default=0.0)
    moisture_percent = Column(Float, nullable=False, default=0.0)
    moisture_percent_2 = Column(Float, nullable=True)
    moisture_percent_3 = Column(Float, nullable=True)
    moisture_raw = Column(Float, nullable=False, default=0.0)
    temperature = Column(Float, nullable=False, default=0.0)
    uv_index = Column(Float, nullable=False, default=0.0)
    uv_intensity = Column(Float, nullable=False, default=0.0)
    uv_raw = Column(Float, nullable=False, default=0.0)
    uv_voltage = Column(Float, nullable=False, default=0.0)

    def __repr__(self) -> str:
        return f"<SensorReading(ts={self.timestamp}, temp={self.temperature}, moisture={self.moisture_percent})>"
