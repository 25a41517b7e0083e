from soil_sage.models.sensor_reading import SensorReading
from soil_sage.models.daily_aggregate import DailyAggregate
from soil_sage.models.calibration import Calibration
from soil_sage.models.plant_profile import GrowthStage, PlantProfile

__all__ = ["SensorReading", "DailyAggregate", "Calibration", "PlantProfile", "GrowthStage"]
