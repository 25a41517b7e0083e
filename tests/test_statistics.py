import random
from datetime import timedelta

import pytest

from soil_sage.services.statistics import exposure_hours, mean, median, present, summarize
from tests.factories import DAY


class TestReducers:
    def test_median_odd_count_takes_middle(self):
        assert median([5.0, 1.0, 3.0]) == 3.0

    def test_median_even_count_averages_middle_pair(self):
        assert median([4.0, 1.0, 3.0, 2.0]) == 2.5

    def test_mean(self):
        assert mean([1.0, 2.0, 6.0]) == pytest.approx(3.0)

    def test_empty_inputs_yield_none(self):
        assert median([]) is None
        assert mean([]) is None
        assert summarize([]) is None

    def test_reordering_does_not_change_result(self):
        values = [12.5, 3.0, 7.25, 99.0, 0.0, 41.0]
        shuffled = values[:]
        random.Random(7).shuffle(shuffled)
        assert median(values) == median(shuffled)
        assert mean(values) == pytest.approx(mean(shuffled))

    def test_present_drops_missing_values_but_keeps_zero(self):
        assert present([1, None, 0, 2.5]) == [1.0, 0.0, 2.5]

    def test_summarize_orders_min_avg_max(self):
        stats = summarize([3.0, 9.0, 6.0])
        assert stats == {"min": 3.0, "max": 9.0, "avg": 6.0}


class TestExposureHours:
    def test_half_hour_of_sun_within_an_hour(self):
        samples = [(DAY, 1200.0), (DAY + timedelta(minutes=30), 1200.0)]
        assert exposure_hours(samples, 1000) == 0.5

    def test_interval_is_credited_to_its_opening_sample(self):
        samples = [
            (DAY, 1200.0),
            (DAY + timedelta(minutes=30), 1200.0),
            (DAY + timedelta(hours=1), 500.0),
        ]
        assert exposure_hours(samples, 1000) == 1.0

    def test_bright_then_dark_pair_counts(self):
        samples = [(DAY, 1200.0), (DAY + timedelta(minutes=30), 500.0)]
        assert exposure_hours(samples, 1000) == 0.5

    def test_dark_then_bright_pair_does_not_count(self):
        samples = [(DAY, 500.0), (DAY + timedelta(minutes=30), 1200.0)]
        assert exposure_hours(samples, 1000) == 0.0

    def test_zero_when_nothing_exceeds_threshold(self):
        samples = [(DAY + timedelta(minutes=10 * i), 1000.0) for i in range(6)]
        assert exposure_hours(samples, 1000) == 0.0

    def test_single_sample_has_no_interval(self):
        assert exposure_hours([(DAY, 5000.0)], 1000) == 0.0

    def test_unsorted_samples_are_ordered_first(self):
        samples = [
            (DAY + timedelta(hours=1), 500.0),
            (DAY, 1200.0),
            (DAY + timedelta(minutes=30), 1200.0),
        ]
        assert exposure_hours(samples, 1000) == 1.0

    def test_non_decreasing_as_bright_intervals_are_added(self):
        previous = 0.0
        for count in range(1, 12):
            samples = [(DAY + timedelta(minutes=10 * i), 5000.0) for i in range(count)]
            samples.append((DAY + timedelta(minutes=10 * count), 0.0))
            current = exposure_hours(samples, 1000)
            assert current >= previous
            previous = current
        assert previous == pytest.approx(round(110 / 60, 2))

    def test_rounds_to_two_decimals(self):
        samples = [(DAY, 4.0), (DAY + timedelta(minutes=10), 5.0)]
        assert exposure_hours(samples, 3.0) == 0.17

    def test_missing_values_do_not_count(self):
        samples = [(DAY, None), (DAY + timedelta(hours=1), 9.0)]
        assert exposure_hours(samples, 3.0) == 0.0
