from pydantic import BaseModel, ConfigDict, Field


class GrowthStageIn(BaseModel):
    """Stage descriptors as curated in the plant catalogue documents."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="Growth Stage")
    moisture: str | None = Field(default=None, alias="Moisture")
    ph: str | None = Field(default=None, alias="pH")
    sunlight: str | None = Field(default=None, alias="Sunlight")
    uv_light: str | None = Field(default=None, alias="UV Light")
    water_per_week: str | None = Field(default=None, alias="Water (per week)")
    temperature: str | None = Field(default=None, alias="Temperature")
    humidity: str | None = Field(default=None, alias="Humidity")


class PlantProfileIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, alias="Plant Name")
    stages: list[GrowthStageIn] = Field(default_factory=list, alias="Stages")


class GrowthStageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    moisture: str | None
    ph: str | None
    sunlight: str | None
    uv_light: str | None
    water_per_week: str | None
    temperature: str | None
    humidity: str | None


class PlantListResponse(BaseModel):
    total: int
    fruits: list[str]


class PlantStagesResponse(BaseModel):
    fruit: str
    stages: list[str]


class StageDetailResponse(BaseModel):
    fruit: str
    stage: GrowthStageOut
