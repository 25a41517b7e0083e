from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from soil_sage.models.plant_profile import GrowthStage, PlantProfile
from soil_sage.schemas.plant import PlantProfileIn


class CRUDPlant:
    def list_names(self, db: Session) -> List[str]:
        result = db.execute(select(PlantProfile.name).order_by(PlantProfile.name))
        return list(result.scalars().all())

    def get_by_name(self, db: Session, name: str) -> Optional[PlantProfile]:
        query = select(PlantProfile).where(func.lower(PlantProfile.name) == name.strip().lower())
        return db.execute(query).scalar_one_or_none()

    def get_stage(self, db: Session, name: str, stage: str) -> Optional[GrowthStage]:
        plant = self.get_by_name(db, name)
        if plant is None:
            return None
        wanted = stage.strip().lower()
        return next((item for item in plant.stages if item.name.lower() == wanted), None)

    def upsert(self, db: Session, obj_in: PlantProfileIn) -> PlantProfile:
        plant = self.get_by_name(db, obj_in.name)
        if plant is None:
            plant = PlantProfile(name=obj_in.name.strip())
            db.add(plant)
        plant.stages = [
            GrowthStage(position=index, **stage.model_dump())
            for index, stage in enumerate(obj_in.stages)
        ]
        db.commit()
        db.refresh(plant)
        return plant


plant_crud = CRUDPlant()
