from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from soil_sage.core.database import Base


class PlantProfile(Base):
    __tablename__ = "plant_profiles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True, index=True)

    stages = relationship(
        "GrowthStage",
        back_populates="plant",
        order_by="GrowthStage.position",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<PlantProfile(name={self.name}, stages={len(self.stages)})>"


class GrowthStage(Base):
    __tablename__ = "growth_stages"

    id = Column(Integer, primary_key=True, index=True)
    plant_id = Column(Integer, ForeignKey("plant_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)

    # Free-text descriptors, e.g. "60-70%" or "Full sun, 6-8 hours"
    moisture = Column(String, nullable=True)
    ph = Column(String, nullable=True)
    sunlight = Column(String, nullable=True)
    uv_light = Column(String, nullable=True)
    water_per_week = Column(String, nullable=True)
    temperature = Column(String, nullable=True)
    humidity = Column(String, nullable=True)

    plant = relationship("PlantProfile", back_populates="stages")

    def __repr__(self) -> str:
        return f"<GrowthStage(plant_id={self.plant_id}, name={self.name})>"
