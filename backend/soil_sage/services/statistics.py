"""Reducers shared by the aggregator, calibration and scoring."""
import statistics
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any


def present(values: Iterable[float | None]) -> list[float]:
    """Drop missing values."""
    return [float(value) for value in values if value is not None]


def mean(values: Sequence[float]) -> float | None:
    if not values:
        return None
    return statistics.fmean(values)


def median(values: Sequence[float]) -> float | None:
    """Middle element, or the mean of the two middle elements for even counts."""
    if not values:
        return None
    return statistics.median(values)


REDUCERS = {
    "avg": mean,
    "median": median,
}


def summarize(values: Sequence[float]) -> dict[str, float] | None:
    if not values:
        return None
    return {"min": min(values), "max": max(values), "avg": statistics.fmean(values)}


def _above(value: float | None, threshold: float) -> bool:
    return value is not None and value > threshold


def exposure_hours(samples: Iterable[tuple[datetime, float | None]], threshold: float) -> float:
    """Time-weighted hours a metric spent above ``threshold``.

    Each interval between consecutive samples counts when the sample opening
    it is above the threshold; the last sample opens no interval.
    """
    ordered = sorted(samples, key=lambda sample: sample[0])
    seconds = 0.0
    for (current_ts, value), (next_ts, _) in zip(ordered, ordered[1:]):
        if _above(value, threshold):
            seconds += (next_ts - current_ts).total_seconds()
    return round(seconds / 3600, 2)


def metric_values(rows: Iterable[Any], attribute: str) -> list[float]:
    return present(getattr(row, attribute, None) for row in rows)
