from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import asc, desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from soil_sage.core.exceptions import DuplicateAggregateError
from soil_sage.models.daily_aggregate import DailyAggregate


class CRUDAggregate:
    def create(self, db: Session, obj_in: Dict[str, Any]) -> DailyAggregate:
        db_obj = DailyAggregate(**obj_in)
        db.add(db_obj)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise DuplicateAggregateError(f"Daily aggregate for {obj_in.get('day')} already exists") from exc
        db.refresh(db_obj)
        return db_obj

    def get_by_day(self, db: Session, day: datetime) -> Optional[DailyAggregate]:
        result = db.execute(select(DailyAggregate).where(DailyAggregate.day == day))
        return result.scalar_one_or_none()

    def get_range(self, db: Session, start_time: datetime, end_time: datetime) -> List[DailyAggregate]:
        query = (
            select(DailyAggregate)
            .where(DailyAggregate.day >= start_time, DailyAggregate.day <= end_time)
            .order_by(asc(DailyAggregate.day))
        )
        return list(db.execute(query).scalars().all())

    def get_recent(self, db: Session, limit: int = 20) -> List[DailyAggregate]:
        query = select(DailyAggregate).order_by(desc(DailyAggregate.day)).limit(limit)
        return list(db.execute(query).scalars().all())

    def count(self, db: Session) -> int:
        return db.execute(select(func.count(DailyAggregate.id))).scalar_one() or 0


aggregate_crud = CRUDAggregate()
