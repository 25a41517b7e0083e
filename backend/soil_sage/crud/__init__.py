from soil_sage.crud.crud_sensor import sensor_crud
from soil_sage.crud.crud_aggregate import aggregate_crud
from soil_sage.crud.crud_calibration import calibration_crud
from soil_sage.crud.crud_plant import plant_crud

__all__ = ["sensor_crud", "aggregate_crud", "calibration_crud", "plant_crud"]
