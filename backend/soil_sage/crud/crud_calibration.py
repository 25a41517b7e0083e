from typing import Any, Dict, Optional

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from soil_sage.models.calibration import Calibration


class CRUDCalibration:
    def create(self, db: Session, obj_in: Dict[str, Any]) -> Calibration:
        db_obj = Calibration(**obj_in)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_latest(self, db: Session, fruit: Optional[str] = None) -> Optional[Calibration]:
        if fruit is None:
            condition = Calibration.fruit.is_(None)
        else:
            condition = Calibration.fruit == fruit
        query = select(Calibration).where(condition).order_by(desc(Calibration.calculated_at), desc(Calibration.id)).limit(1)
        return db.execute(query).scalar_one_or_none()


calibration_crud = CRUDCalibration()
