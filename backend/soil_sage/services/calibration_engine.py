import logging
from datetime import datetime, timedelta
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from soil_sage.core.exceptions import InvalidRequestError
from soil_sage.crud import calibration_crud, sensor_crud
from soil_sage.models.calibration import Calibration
from soil_sage.schemas.calibration import CalibrationRequest
from soil_sage.services.statistics import REDUCERS, metric_values

logger = logging.getLogger(__name__)

# calibration target -> reading attribute
TARGET_SOURCES = {
    "sunlight_lux": "lux",
    "moisture_percent": "moisture_percent",
    "moisture_percent_2": "moisture_percent_2",
    "moisture_percent_3": "moisture_percent_3",
    "temperature_c": "temperature",
    "humidity_percent": "humidity",
    "uv_index": "uv_index",
}


def parse_request(days: int = 7, strategy: str = "median", fruit: Optional[str] = None) -> CalibrationRequest:
    try:
        return CalibrationRequest(days=days, strategy=strategy, fruit=fruit)
    except ValidationError as exc:
        messages = "; ".join(f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors())
        raise InvalidRequestError(messages) from exc


def calibrate(
    db: Session,
    days: int = 7,
    strategy: str = "median",
    fruit: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Calibration:
    """Compute and store targets from the trailing ``days`` of readings."""
    request = parse_request(days, strategy, fruit)
    end = now or datetime.now()
    start = end - timedelta(days=request.days)

    readings = sensor_crud.get_range(db, start, end, include_end=True)
    reducer = REDUCERS[request.strategy]
    targets = {
        target: reducer(metric_values(readings, attribute))
        for target, attribute in TARGET_SOURCES.items()
    }

    calibration = calibration_crud.create(
        db,
        {
            "fruit": request.fruit,
            "source_days": request.days,
            "strategy": request.strategy,
            "calculated_at": end,
            **targets,
        },
    )
    logger.info(
        "Calibration %s created for %s from %s readings (%s, %s days)",
        calibration.id,
        request.fruit or "global",
        len(readings),
        request.strategy,
        request.days,
    )
    return calibration


def get_latest_calibration(db: Session, fruit: Optional[str] = None) -> Optional[Calibration]:
    if fruit is not None:
        fruit = fruit.strip().lower() or None
    return calibration_crud.get_latest(db, fruit)
