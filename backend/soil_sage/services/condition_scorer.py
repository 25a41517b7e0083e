"""
Target resolution and condition scoring
=======================================

Targets are resolved lowest priority first:

1. environment defaults,
2. averages parsed from the plant profile's growth stages,
3. the latest calibration for the plant, else the latest global one.

Each level only overrides the fields it actually carries. Readings of a day
are then grouped into one-hour buckets and scored against the targets.
"""
import logging
import re
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from soil_sage.core.config import settings
from soil_sage.crud import aggregate_crud, calibration_crud, plant_crud, sensor_crud
from soil_sage.models.plant_profile import PlantProfile
from soil_sage.models.sensor_reading import SensorReading
from soil_sage.schemas.report import BucketScore, DayReport, MetricAverages, ResolvedTargets
from soil_sage.services.advisor import build_suggestions
from soil_sage.services.statistics import mean, metric_values
from soil_sage.utils.time import DayLike, day_bounds

logger = logging.getLogger(__name__)

TARGET_KEYS = ("sunlight_lux", "moisture_percent", "temperature_c", "humidity_percent", "uv_index")

# resolved target -> growth stage descriptor
STAGE_DESCRIPTORS = {
    "sunlight_lux": "sunlight",
    "moisture_percent": "moisture",
    "temperature_c": "temperature",
    "humidity_percent": "humidity",
    "uv_index": "uv_light",
}

# averaged reading attribute -> resolved target
SCORED_METRICS = {
    "lux": "sunlight_lux",
    "moisture_percent": "moisture_percent",
    "temperature": "temperature_c",
    "humidity": "humidity_percent",
    "uv_index": "uv_index",
}

# (deviation above, score), checked in order
SCORE_BANDS = ((0.5, 0), (0.3, 1), (0.2, 2), (0.1, 3))

CONDITION_LABELS = ((3.6, "Good"), (2.6, "Favourable"), (1.6, "Average"), (0.6, "Poor"))

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def leading_number(text: Optional[str]) -> Optional[float]:
    """First numeric token of a free-text descriptor, e.g. "60-70%" -> 60.0."""
    if not text:
        return None
    match = _NUMBER.search(text)
    return float(match.group()) if match else None


def profile_targets(profile: PlantProfile) -> dict[str, float]:
    """Average the parseable stage descriptors; unparseable fields are left out."""
    targets: dict[str, float] = {}
    for key, descriptor in STAGE_DESCRIPTORS.items():
        values = [leading_number(getattr(stage, descriptor)) for stage in profile.stages]
        average = mean([value for value in values if value is not None])
        if average is not None:
            targets[key] = average
    return targets


def resolve_targets(
    db: Session,
    fruit: Optional[str] = None,
    defaults: Optional[dict[str, Optional[float]]] = None,
) -> ResolvedTargets:
    resolved: dict[str, Optional[float]] = dict.fromkeys(TARGET_KEYS)
    base = settings.default_targets if defaults is None else defaults
    resolved.update({key: base.get(key) for key in TARGET_KEYS if base.get(key) is not None})

    fruit_key = fruit.strip().lower() if fruit else None

    if fruit_key:
        profile = plant_crud.get_by_name(db, fruit_key)
        if profile is not None:
            resolved.update(profile_targets(profile))
        else:
            logger.debug("No plant profile for %s", fruit_key)

    calibration = None
    if fruit_key:
        calibration = calibration_crud.get_latest(db, fruit_key)
    if calibration is None:
        calibration = calibration_crud.get_latest(db, None)
    if calibration is not None:
        resolved.update({key: value for key in TARGET_KEYS if (value := getattr(calibration, key)) is not None})

    return ResolvedTargets(**resolved)


def relative_deviation(observed: float, target: float) -> float:
    if target == 0:
        return abs(observed)
    return abs(observed - target) / abs(target)


def deviation_score(deviation: float) -> int:
    for limit, score in SCORE_BANDS:
        if deviation > limit:
            return score
    return 4


def condition_label(score: Optional[float]) -> str:
    if score is None:
        return "N/A"
    for floor, label in CONDITION_LABELS:
        if score >= floor:
            return label
    return "Worst"


def metric_averages(readings: Sequence[SensorReading]) -> MetricAverages:
    return MetricAverages(**{attribute: mean(metric_values(readings, attribute)) for attribute in SCORED_METRICS})


def score_averages(averages: MetricAverages, targets: ResolvedTargets) -> dict[str, int]:
    scores: dict[str, int] = {}
    for attribute, target_key in SCORED_METRICS.items():
        observed = getattr(averages, attribute)
        target = getattr(targets, target_key)
        if observed is None or target is None:
            continue
        scores[attribute] = deviation_score(relative_deviation(observed, target))
    return scores


def score_bucket(
    readings: Sequence[SensorReading],
    targets: ResolvedTargets,
    start: datetime,
    end: datetime,
) -> BucketScore:
    averages = metric_averages(readings)
    scores = score_averages(averages, targets)
    score = mean(list(scores.values()))
    return BucketScore(
        start=start,
        end=end,
        readings=len(readings),
        averages=averages,
        metric_scores=scores,
        score=score,
        condition=condition_label(score),
    )


def hourly_buckets(readings: Sequence[SensorReading], day_start: datetime) -> list[tuple[datetime, datetime, list]]:
    buckets = []
    for hour in range(24):
        start = day_start + timedelta(hours=hour)
        end = start + timedelta(hours=1)
        buckets.append((start, end, [row for row in readings if start <= row.timestamp < end]))
    return buckets


def score_day(
    db: Session,
    day: Optional[DayLike] = None,
    fruit: Optional[str] = None,
    defaults: Optional[dict[str, Optional[float]]] = None,
) -> DayReport:
    """Resolve targets and score a day of readings hour by hour."""
    day_start, day_end = day_bounds(day if day is not None else datetime.now())
    targets = resolve_targets(db, fruit, defaults)
    readings = sensor_crud.get_range(db, day_start, day_end)

    buckets = [score_bucket(rows, targets, start, end) for start, end, rows in hourly_buckets(readings, day_start)]
    day_score = mean([bucket.score for bucket in buckets if bucket.score is not None])

    if readings:
        averages = metric_averages(readings)
        total_readings = len(readings)
    else:
        # Raw readings expire after the retention window; fall back to the day's rollup.
        aggregate = aggregate_crud.get_by_day(db, day_start)
        if aggregate is not None:
            averages = MetricAverages(
                lux=aggregate.lux_avg,
                moisture_percent=aggregate.moisture_percent_avg,
                temperature=aggregate.temperature_avg,
                humidity=aggregate.humidity_avg,
                uv_index=aggregate.uv_index_avg,
            )
            total_readings = aggregate.total_readings
        else:
            averages = MetricAverages()
            total_readings = 0

    return DayReport(
        day=day_start,
        fruit=fruit.strip().lower() if fruit else None,
        targets=targets,
        buckets=buckets,
        averages=averages,
        total_readings=total_readings,
        score=day_score,
        condition=condition_label(day_score),
        suggestions=build_suggestions(averages, targets),
    )
