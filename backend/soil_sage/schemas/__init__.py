from soil_sage.schemas.aggregate import (
    AggregateRunResponse,
    DailyAggregateListResponse,
    DailyAggregateOut,
    MetricStats,
)
from soil_sage.schemas.calibration import CalibrationOut, CalibrationRequest, CalibrationTargets
from soil_sage.schemas.plant import (
    GrowthStageIn,
    GrowthStageOut,
    PlantListResponse,
    PlantProfileIn,
    PlantStagesResponse,
    StageDetailResponse,
)
from soil_sage.schemas.report import (
    BucketScore,
    DayReport,
    MetricAverages,
    ReportDataResponse,
    ReportSummary,
    ResolvedTargets,
)
from soil_sage.schemas.sensor import (
    BatteryStatus,
    CurrentReadingsResponse,
    SensorHistoryResponse,
    SensorReadingOut,
)
from soil_sage.schemas.status import CollectionLogResponse, CollectionStatus, DataStats, HourlyStat, SystemStatus

__all__ = [
    "AggregateRunResponse",
    "BatteryStatus",
    "BucketScore",
    "CalibrationOut",
    "CalibrationRequest",
    "CalibrationTargets",
    "CollectionLogResponse",
    "CollectionStatus",
    "CurrentReadingsResponse",
    "DailyAggregateListResponse",
    "DailyAggregateOut",
    "DataStats",
    "DayReport",
    "GrowthStageIn",
    "GrowthStageOut",
    "HourlyStat",
    "MetricAverages",
    "MetricStats",
    "PlantListResponse",
    "PlantProfileIn",
    "PlantStagesResponse",
    "ReportDataResponse",
    "ReportSummary",
    "ResolvedTargets",
    "SensorHistoryResponse",
    "SensorReadingOut",
    "StageDetailResponse",
    "SystemStatus",
]
