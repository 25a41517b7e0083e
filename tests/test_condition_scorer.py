from datetime import timedelta

import pytest

from soil_sage.crud import aggregate_crud, calibration_crud, plant_crud
from soil_sage.schemas.plant import PlantProfileIn
from soil_sage.schemas.report import MetricAverages, ResolvedTargets
from soil_sage.services.advisor import build_suggestions
from soil_sage.services.condition_scorer import (
    condition_label,
    deviation_score,
    leading_number,
    relative_deviation,
    resolve_targets,
    score_day,
)
from tests.factories import DAY

DEFAULTS = {
    "sunlight_lux": 1000.0,
    "moisture_percent": 40.0,
    "temperature_c": 20.0,
    "humidity_percent": 50.0,
    "uv_index": 3.0,
}

ON_TARGET = {"lux": 1000.0, "moisture_percent": 40.0, "temperature": 20.0, "humidity": 50.0, "uv_index": 3.0}
SIXTY_PERCENT_OFF = {"lux": 1600.0, "moisture_percent": 64.0, "temperature": 32.0, "humidity": 80.0, "uv_index": 4.8}


@pytest.fixture
def tomato_profile(db):
    return plant_crud.upsert(
        db,
        PlantProfileIn.model_validate(
            {
                "Plant Name": "Tomato",
                "Stages": [
                    {"Growth Stage": "Seedling", "Sunlight": "2000 lux", "Moisture": "60-70%", "Temperature": "Warm", "UV Light": "4"},
                    {"Growth Stage": "Fruiting", "Sunlight": "3000 lux", "Moisture": "70%", "UV Light": "Moderate (6)"},
                ],
            }
        ),
    )


class TestScoringFunctions:
    @pytest.mark.parametrize(
        "deviation, score",
        [(0.0, 4), (0.1, 4), (0.15, 3), (0.25, 2), (0.35, 1), (0.5, 1), (0.6, 0)],
    )
    def test_deviation_bands(self, deviation, score):
        assert deviation_score(deviation) == score

    @pytest.mark.parametrize(
        "score, label",
        [(4, "Good"), (3.6, "Good"), (3.59, "Favourable"), (2.6, "Favourable"), (1.6, "Average"),
         (0.6, "Poor"), (0.59, "Worst"), (0, "Worst"), (None, "N/A")],
    )
    def test_condition_labels(self, score, label):
        assert condition_label(score) == label

    def test_relative_deviation(self):
        assert relative_deviation(60.0, 40.0) == pytest.approx(0.5)
        assert relative_deviation(-2.0, 0) == 2.0

    def test_zero_and_sixty_percent_deviation_labels(self):
        assert condition_label(deviation_score(relative_deviation(40.0, 40.0))) == "Good"
        assert condition_label(deviation_score(relative_deviation(64.0, 40.0))) == "Worst"

    @pytest.mark.parametrize(
        "text, expected",
        [("60-70%", 60.0), ("Full sun, 6-8 hours", 6.0), ("pH 6.5", 6.5), ("-2 C", -2.0), ("Moderate", None), (None, None)],
    )
    def test_leading_number(self, text, expected):
        assert leading_number(text) == expected


class TestResolveTargets:
    def test_defaults_only(self, db):
        targets = resolve_targets(db, None, DEFAULTS)
        assert targets.model_dump() == DEFAULTS

    def test_unset_defaults_stay_absent(self, db):
        targets = resolve_targets(db, None, {"uv_index": 2.0})
        assert targets.uv_index == 2.0
        assert targets.sunlight_lux is None

    def test_profile_averages_override_defaults(self, db, tomato_profile):
        targets = resolve_targets(db, "tomato", DEFAULTS)

        assert targets.sunlight_lux == 2500.0
        assert targets.moisture_percent == 65.0
        assert targets.uv_index == 5.0
        # "Warm" is not numeric, humidity is not described
        assert targets.temperature_c == 20.0
        assert targets.humidity_percent == 50.0

    def test_fruit_calibration_overrides_only_its_fields(self, db, tomato_profile):
        calibration_crud.create(db, {"fruit": None, "calculated_at": DAY + timedelta(days=2), "temperature_c": 30.0})
        calibration_crud.create(db, {"fruit": "tomato", "calculated_at": DAY, "moisture_percent": 55.0})

        targets = resolve_targets(db, "Tomato", DEFAULTS)

        assert targets.moisture_percent == 55.0
        assert targets.sunlight_lux == 2500.0
        assert targets.temperature_c == 20.0

    def test_falls_back_to_global_calibration(self, db):
        calibration_crud.create(db, {"fruit": None, "calculated_at": DAY, "temperature_c": 24.0, "uv_index": None})

        targets = resolve_targets(db, "basil", DEFAULTS)

        assert targets.temperature_c == 24.0
        assert targets.uv_index == 3.0


class TestScoreDay:
    def test_hourly_buckets_and_day_condition(self, db, add_readings):
        add_readings(
            (DAY + timedelta(minutes=10), ON_TARGET),
            (DAY + timedelta(minutes=40), ON_TARGET),
            (DAY + timedelta(hours=1, minutes=10), SIXTY_PERCENT_OFF),
        )

        report = score_day(db, DAY, None, DEFAULTS)

        assert len(report.buckets) == 24
        assert report.buckets[0].score == 4
        assert report.buckets[0].condition == "Good"
        assert report.buckets[0].readings == 2
        assert report.buckets[1].score == 0
        assert report.buckets[1].condition == "Worst"
        assert all(bucket.condition == "N/A" for bucket in report.buckets[2:])
        assert report.score == 2.0
        assert report.condition == "Average"
        assert report.total_readings == 3

    def test_metrics_without_target_are_not_scored(self, db, add_readings):
        add_readings((DAY + timedelta(hours=3), ON_TARGET))

        report = score_day(db, DAY, None, {"moisture_percent": 40.0})

        bucket = report.buckets[3]
        assert bucket.metric_scores == {"moisture_percent": 4}
        assert bucket.score == 4

    def test_no_targets_means_no_condition(self, db, add_readings):
        add_readings((DAY + timedelta(hours=3), ON_TARGET))

        report = score_day(db, DAY, None, {})

        assert report.score is None
        assert report.condition == "N/A"
        assert report.suggestions == []

    def test_expired_day_uses_daily_aggregate(self, db):
        aggregate_crud.create(
            db,
            {
                "day": DAY,
                "sunlight_hours": 5.0,
                "uv_exposure_hours": 1.0,
                "uv_threshold": 3.0,
                "water_level_avg": 25.0,
                "total_readings": 140,
                "collection_start": DAY,
                "collection_end": DAY + timedelta(hours=23, minutes=50),
                **{f"{metric}_{stat}": value for metric, value in ON_TARGET.items() for stat in ("min", "max", "avg")},
                "moisture_percent_avg": 25.0,
            },
        )

        report = score_day(db, DAY, None, DEFAULTS)

        assert report.total_readings == 140
        assert report.averages.moisture_percent == 25.0
        assert report.condition == "N/A"
        assert len(report.suggestions) == 1
        assert report.suggestions[0].startswith("Soil moisture is below target")


class TestSuggestions:
    def test_every_violated_band_is_reported(self):
        averages = MetricAverages(moisture_percent=30.0, lux=500.0, temperature=30.0, humidity=50.0, uv_index=6.0)
        targets = ResolvedTargets(**DEFAULTS)

        suggestions = build_suggestions(averages, targets)

        assert len(suggestions) == 4
        assert suggestions[0].startswith("Soil moisture is below target")
        assert suggestions[1].startswith("Sunlight is below target")
        assert suggestions[2].startswith("Temperature is above target")
        assert suggestions[3].startswith("UV index is above target")

    def test_values_on_band_edges_pass(self):
        averages = MetricAverages(moisture_percent=45.0, lux=1100.0, temperature=17.0, humidity=60.0, uv_index=4.0)
        assert build_suggestions(averages, ResolvedTargets(**DEFAULTS)) == []

    def test_low_uv_is_not_flagged(self):
        averages = MetricAverages(uv_index=0.0)
        assert build_suggestions(averages, ResolvedTargets(uv_index=3.0)) == []
