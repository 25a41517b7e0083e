from datetime import date, datetime
from typing import Any, NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from soil_sage.core.database import get_db
from soil_sage.core.exceptions import (
    ConfigurationError,
    EmptySnapshotError,
    InvalidRequestError,
    SoilSageError,
    SourceUnavailableError,
)
from soil_sage.crud import aggregate_crud, plant_crud, sensor_crud
from soil_sage.schemas import (
    AggregateRunResponse,
    BatteryStatus,
    CalibrationOut,
    CalibrationRequest,
    CollectionLogResponse,
    CurrentReadingsResponse,
    DailyAggregateListResponse,
    DailyAggregateOut,
    DayReport,
    GrowthStageOut,
    PlantListResponse,
    PlantProfileIn,
    PlantStagesResponse,
    ReportDataResponse,
    ResolvedTargets,
    SensorHistoryResponse,
    SensorReadingOut,
    StageDetailResponse,
    SystemStatus,
)
from soil_sage.services import Aggregator, Collector, calibrate, get_latest_calibration, resolve_targets, score_day
from soil_sage.services.monitoring import build_collection_logs, build_system_status
from soil_sage.services.reporting import get_last_24_hours, get_report_data
from soil_sage.utils.time import start_of_day

router = APIRouter()


def get_collector(request: Request) -> Collector:
    return request.app.state.collector


def get_aggregator(request: Request) -> Aggregator:
    return request.app.state.aggregator


def _error_detail(exc: SoilSageError) -> dict[str, str]:
    return {"code": exc.code, "message": str(exc)}


def _raise_http(exc: SoilSageError) -> NoReturn:
    if isinstance(exc, InvalidRequestError):
        raise HTTPException(status_code=400, detail=_error_detail(exc)) from exc
    if isinstance(exc, EmptySnapshotError):
        raise HTTPException(status_code=404, detail=_error_detail(exc)) from exc
    if isinstance(exc, SourceUnavailableError):
        raise HTTPException(status_code=502, detail=_error_detail(exc)) from exc
    if isinstance(exc, ConfigurationError):
        raise HTTPException(status_code=500, detail=_error_detail(exc)) from exc
    raise HTTPException(status_code=500, detail=_error_detail(exc)) from exc


def _fetch_snapshot(collector: Collector) -> dict[str, Any]:
    try:
        return collector.client.fetch_latest()
    except SoilSageError as exc:
        _raise_http(exc)


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/sensors/current", response_model=CurrentReadingsResponse)
def get_current_readings(collector: Collector = Depends(get_collector)) -> CurrentReadingsResponse:
    readings = _fetch_snapshot(collector)
    return CurrentReadingsResponse(timestamp=datetime.now(), readings=readings)


@router.get("/sensors/battery", response_model=BatteryStatus)
def get_battery_status(collector: Collector = Depends(get_collector)) -> BatteryStatus:
    readings = _fetch_snapshot(collector)
    return BatteryStatus(
        battery_percent=float(readings.get("battery_percent") or 0),
        battery_voltage=float(readings.get("battery_voltage") or 0),
        timestamp=datetime.now(),
    )


@router.post("/sensors/collect", response_model=SensorReadingOut)
def collect_sensor_data(collector: Collector = Depends(get_collector)) -> SensorReadingOut:
    reading = collector.collect_once()
    if reading is None:
        raise HTTPException(status_code=502, detail="Collection failed, see server logs")
    return SensorReadingOut.model_validate(reading)


@router.get("/sensors/latest", response_model=SensorReadingOut)
def get_latest_reading(db: Session = Depends(get_db)) -> SensorReadingOut:
    reading = sensor_crud.get_latest(db)
    if reading is None:
        raise HTTPException(status_code=404, detail="No sensor data available")
    return SensorReadingOut.model_validate(reading)


@router.get("/sensors/history", response_model=SensorHistoryResponse)
def get_sensor_history(
    limit: int = Query(default=100, ge=1, le=2000),
    db: Session = Depends(get_db),
) -> SensorHistoryResponse:
    items = [SensorReadingOut.model_validate(item) for item in sensor_crud.get_multi(db, limit=limit)]
    return SensorHistoryResponse(items=items, count=len(items))


@router.get("/aggregates", response_model=DailyAggregateListResponse)
def list_daily_aggregates(
    limit: int = Query(default=20, ge=1, le=366),
    db: Session = Depends(get_db),
) -> DailyAggregateListResponse:
    items = [DailyAggregateOut.from_row(row) for row in aggregate_crud.get_recent(db, limit=limit)]
    return DailyAggregateListResponse(items=items, count=len(items))


@router.post("/aggregates/run", response_model=AggregateRunResponse)
def run_aggregation(
    day: date | None = Body(default=None, embed=True),
    aggregator: Aggregator = Depends(get_aggregator),
) -> AggregateRunResponse:
    target_day = start_of_day(day or datetime.now())
    aggregate = aggregator.aggregate_day(target_day)
    return AggregateRunResponse(
        created=aggregate is not None,
        day=target_day,
        aggregate=DailyAggregateOut.from_row(aggregate) if aggregate is not None else None,
    )


@router.post("/calibration", response_model=CalibrationOut, status_code=201)
def create_calibration(payload: CalibrationRequest, db: Session = Depends(get_db)) -> CalibrationOut:
    try:
        calibration = calibrate(db, days=payload.days, strategy=payload.strategy, fruit=payload.fruit)
    except SoilSageError as exc:
        _raise_http(exc)
    return CalibrationOut.from_row(calibration)


@router.get("/calibration/latest", response_model=CalibrationOut)
def read_latest_calibration(fruit: str | None = Query(default=None), db: Session = Depends(get_db)) -> CalibrationOut:
    calibration = get_latest_calibration(db, fruit)
    if calibration is None:
        raise HTTPException(status_code=404, detail={"code": "NOT_FOUND", "message": "No calibration found"})
    return CalibrationOut.from_row(calibration)


@router.get("/plants", response_model=PlantListResponse)
def list_plants(db: Session = Depends(get_db)) -> PlantListResponse:
    fruits = plant_crud.list_names(db)
    return PlantListResponse(total=len(fruits), fruits=fruits)


@router.put("/plants", response_model=PlantStagesResponse)
def upsert_plant(payload: PlantProfileIn, db: Session = Depends(get_db)) -> PlantStagesResponse:
    plant = plant_crud.upsert(db, payload)
    return PlantStagesResponse(fruit=plant.name, stages=[stage.name for stage in plant.stages])


@router.get("/plants/{name}/stages", response_model=PlantStagesResponse)
def get_plant_stages(name: str, db: Session = Depends(get_db)) -> PlantStagesResponse:
    plant = plant_crud.get_by_name(db, name)
    if plant is None:
        raise HTTPException(status_code=404, detail="Fruit not found")
    return PlantStagesResponse(fruit=plant.name, stages=[stage.name for stage in plant.stages])


@router.get("/plants/{name}/stages/{stage}", response_model=StageDetailResponse)
def get_stage_details(name: str, stage: str, db: Session = Depends(get_db)) -> StageDetailResponse:
    plant = plant_crud.get_by_name(db, name)
    if plant is None:
        raise HTTPException(status_code=404, detail="Fruit not found")
    details = plant_crud.get_stage(db, name, stage)
    if details is None:
        raise HTTPException(status_code=404, detail="Stage not found")
    return StageDetailResponse(fruit=plant.name, stage=GrowthStageOut.model_validate(details))


@router.get("/reports/targets", response_model=ResolvedTargets)
def read_resolved_targets(fruit: str | None = Query(default=None), db: Session = Depends(get_db)) -> ResolvedTargets:
    return resolve_targets(db, fruit)


@router.get("/reports/day", response_model=DayReport)
def read_day_report(
    day: date | None = Query(default=None),
    fruit: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> DayReport:
    return score_day(db, day, fruit)


@router.get("/reports/data", response_model=ReportDataResponse)
def read_report_data(
    start_date: datetime = Query(...),
    end_date: datetime = Query(...),
    db: Session = Depends(get_db),
) -> ReportDataResponse:
    try:
        return get_report_data(db, start_date, end_date)
    except SoilSageError as exc:
        _raise_http(exc)


@router.get("/reports/last24hours")
def read_last_24_hours(db: Session = Depends(get_db)) -> dict[str, Any]:
    return get_last_24_hours(db)


@router.get("/system/status", response_model=SystemStatus)
def read_system_status(
    collector: Collector = Depends(get_collector),
    db: Session = Depends(get_db),
) -> SystemStatus:
    return build_system_status(db, collector)


@router.get("/system/logs", response_model=CollectionLogResponse)
def read_collection_logs(
    hours: int = Query(default=24, ge=1, le=168),
    collector: Collector = Depends(get_collector),
    db: Session = Depends(get_db),
) -> CollectionLogResponse:
    return build_collection_logs(db, hours=hours, interval_minutes=collector.interval_minutes)
