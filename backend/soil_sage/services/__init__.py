from soil_sage.services.advisor import build_suggestions
from soil_sage.services.aggregator import Aggregator, summarize_day
from soil_sage.services.calibration_engine import calibrate, get_latest_calibration
from soil_sage.services.collector import Collector, snapshot_to_reading
from soil_sage.services.condition_scorer import resolve_targets, score_day
from soil_sage.services.telemetry_client import TelemetryClient, telemetry_client

__all__ = [
    "Aggregator",
    "Collector",
    "TelemetryClient",
    "build_suggestions",
    "calibrate",
    "get_latest_calibration",
    "resolve_targets",
    "score_day",
    "snapshot_to_reading",
    "summarize_day",
    "telemetry_client",
]
