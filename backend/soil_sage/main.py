import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from soil_sage.api import router
from soil_sage.core import Base, SessionLocal, settings
from soil_sage.models import Calibration, DailyAggregate, GrowthStage, PlantProfile, SensorReading  # noqa: F401
from soil_sage.services import Aggregator, Collector, TelemetryClient, telemetry_client
from soil_sage.utils.logger import setup_logging

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


def create_app(
    session_factory: sessionmaker = SessionLocal,
    client: TelemetryClient = telemetry_client,
    enable_scheduler: bool = settings.enable_scheduler,
) -> FastAPI:
    app = FastAPI(
        title="Soil Sage Monitor API",
        version="0.1.0",
        description="Collects plant sensor telemetry, rolls it up per day and scores growing conditions.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.collector = Collector(
        session_factory,
        client,
        interval_minutes=settings.collection_interval_minutes,
        retention_hours=settings.sensor_retention_hours,
    )
    app.state.aggregator = Aggregator(
        session_factory,
        sunlight_threshold=settings.sunlight_lux_threshold,
        uv_threshold=settings.uv_exposure_threshold,
    )

    app.include_router(router, prefix="/api")

    @app.on_event("startup")
    def on_startup() -> None:
        setup_logging()
        Base.metadata.create_all(bind=session_factory.kw["bind"])
        if enable_scheduler:
            app.state.collector.start()
            app.state.aggregator.start()
        else:
            logger.info("Scheduler disabled, collection runs on demand only")

    @app.on_event("shutdown")
    def on_shutdown() -> None:
        app.state.collector.stop()
        app.state.aggregator.stop()

    @app.get("/")
    def root() -> dict[str, str]:
        return {"message": "Soil Sage backend is running", "docs": "/docs"}

    return app


app = create_app()


def run() -> None:
    uvicorn.run("soil_sage.main:app", host=settings.host, port=settings.port, reload=settings.debug)
