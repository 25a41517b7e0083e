import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import asc, delete, desc, func, select
from sqlalchemy.orm import Session

from soil_sage.models.sensor_reading import SensorReading

logger = logging.getLogger(__name__)


class CRUDSensor:
    def create(self, db: Session, obj_in: Dict[str, Any]) -> SensorReading:
        db_obj = SensorReading(**obj_in)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_latest(self, db: Session) -> Optional[SensorReading]:
        result = db.execute(select(SensorReading).order_by(desc(SensorReading.timestamp)).limit(1))
        return result.scalar_one_or_none()

    def get_oldest(self, db: Session) -> Optional[SensorReading]:
        result = db.execute(select(SensorReading).order_by(asc(SensorReading.timestamp)).limit(1))
        return result.scalar_one_or_none()

    def get_multi(
        self,
        db: Session,
        skip: int = 0,
        limit: int = 100,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> List[SensorReading]:
        query = select(SensorReading).order_by(desc(SensorReading.timestamp))

        if start_time:
            query = query.where(SensorReading.timestamp >= start_time)
        if end_time:
            query = query.where(SensorReading.timestamp <= end_time)

        query = query.offset(skip).limit(limit)
        return list(db.execute(query).scalars().all())

    def get_range(
        self,
        db: Session,
        start_time: datetime,
        end_time: datetime,
        include_end: bool = False,
    ) -> List[SensorReading]:
        """Readings in [start_time, end_time) ordered oldest first.

        ``include_end`` closes the interval on the right.
        """
        upper = SensorReading.timestamp <= end_time if include_end else SensorReading.timestamp < end_time
        query = (
            select(SensorReading)
            .where(SensorReading.timestamp >= start_time, upper)
            .order_by(asc(SensorReading.timestamp))
        )
        return list(db.execute(query).scalars().all())

    def count(self, db: Session) -> int:
        return db.execute(select(func.count(SensorReading.id))).scalar_one() or 0

    def purge_expired(self, db: Session, now: datetime, retention_hours: int = 24) -> int:
        cutoff = now - timedelta(hours=retention_hours)
        result = db.execute(delete(SensorReading).where(SensorReading.timestamp < cutoff))
        db.commit()
        removed = result.rowcount or 0
        if removed:
            logger.info("Expired %s sensor readings older than %s", removed, cutoff.isoformat())
        return removed


sensor_crud = CRUDSensor()
