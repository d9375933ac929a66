"""Unit tests for the TimeSeries container."""

import math
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from stepseries.series import (
    RangeError,
    SeriesError,
    StepError,
    TimeSeries,
    new_time_series,
    new_time_series_of_data,
    new_time_series_of_length,
    new_time_series_of_time_range,
)


class TestConstruction:
    def test_no_values_fills_with_nan(self, t0, step):
        series = new_time_series("x", t0, t0 + 5 * step, step)
        assert len(series) == 5
        assert np.isnan(series.data()).all()
        assert math.isnan(series.filler)

    def test_single_value_fills_every_slot(self, t0, step):
        series = new_time_series("x", t0, t0 + 5 * step, step, 7.0)
        assert series.data().tolist() == [7.0] * 5
        assert series.filler == 7.0

    def test_single_value_without_end_gives_one_slot(self, t0, step):
        series = new_time_series("x", t0, None, step, 7.0)
        assert series.data().tolist() == [7.0]
        assert series.end == t0 + step

    def test_values_without_end_set_the_length(self, t0, step):
        series = new_time_series("x", t0, None, step, 1, 2, 3)
        assert series.data().tolist() == [1.0, 2.0, 3.0]
        assert series.end == t0 + 3 * step

    def test_values_with_longer_end_leave_trailing_zeros(self, t0, step):
        """Slots past the seeded values hold 0.0, not the NaN filler."""
        series = new_time_series("x", t0, t0 + 5 * step, step, 1, 2)
        assert series.data().tolist() == [1.0, 2.0, 0.0, 0.0, 0.0]
        assert math.isnan(series.filler)

    def test_values_with_shorter_end_are_truncated(self, t0, step):
        series = new_time_series("x", t0, t0 + 2 * step, step, 1, 2, 3)
        assert series.data().tolist() == [1.0, 2.0]

    def test_end_off_the_grid_is_truncated(self, t0, step):
        series = new_time_series("x", t0, t0 + 2 * step + step / 2, step, 0.0)
        assert len(series) == 2
        assert series.end == t0 + 2 * step

    def test_missing_start_defaults_to_now(self, step):
        before = datetime.now(timezone.utc)
        series = new_time_series("x", None, None, step, 1, 2)
        after = datetime.now(timezone.utc)
        assert before <= series.start <= after
        assert series.end == series.start + 2 * step

    def test_equal_bounds_give_empty_series(self, empty, t0):
        assert len(empty) == 0
        assert empty.start == empty.end == t0

    def test_zero_step_is_rejected(self, t0):
        with pytest.raises(StepError, match="step can't be 0"):
            new_time_series("x", t0, t0 + timedelta(hours=1), timedelta(0))

    def test_zero_step_with_equal_bounds_is_rejected(self, t0):
        with pytest.raises(StepError, match="step can't be 0"):
            new_time_series("x", t0, t0, timedelta(0), 1.0)

    def test_start_after_end_is_rejected(self, t0, step):
        with pytest.raises(RangeError, match="can't be after end"):
            new_time_series("x", t0, t0 - step, step)

    def test_negative_step_towards_later_end_is_rejected(self, t0, step):
        with pytest.raises(StepError, match="negative"):
            new_time_series("x", t0, t0 + step, -step)

    def test_negative_step_with_values_runs_end_before_start(self, t0, step):
        with pytest.raises(RangeError):
            new_time_series("x", t0, None, -step, 1, 2)

    def test_errors_share_a_value_error_base(self, t0):
        with pytest.raises(SeriesError):
            new_time_series("x", t0, None, timedelta(0))
        with pytest.raises(ValueError):
            new_time_series("x", t0, None, timedelta(0))

    def test_class_constructor_validates_step(self, t0):
        with pytest.raises(StepError):
            TimeSeries("x", t0, timedelta(0), [1.0])

    @pytest.mark.parametrize("data", [[1.0, 2.0], []])
    def test_class_constructor_rejects_negative_step(self, t0, step, data):
        with pytest.raises(StepError, match="negative"):
            TimeSeries("x", t0, -step, data)

    def test_negative_step_with_equal_bounds_is_rejected(self, t0, step):
        with pytest.raises(StepError, match="negative"):
            new_time_series("x", t0, t0, -step)

    def test_class_constructor_copies_input(self, t0, step):
        raw = np.array([1.0, 2.0])
        series = TimeSeries("x", t0, step, raw)
        raw[0] = 99.0
        assert series.get_at(t0) == (1.0, True)

    def test_two_dimensional_samples_are_rejected(self, t0, step):
        with pytest.raises(ValueError, match="1D"):
            TimeSeries.from_samples("x", t0, step, [[1.0, 2.0], [3.0, 4.0]])


class TestConvenienceConstructors:
    def test_time_range_includes_the_end(self, t0, step):
        series = new_time_series_of_time_range("x", t0, t0 + 4 * step, step, 0.5)
        assert series.data().tolist() == [0.5] * 5
        assert series.get_at(t0 + 4 * step) == (0.5, True)
        assert series.end == t0 + 5 * step

    def test_length(self, t0, step):
        series = new_time_series_of_length("x", t0, step, 3, 2.0)
        assert series.data().tolist() == [2.0, 2.0, 2.0]
        assert series.end == t0 + 3 * step

    def test_length_without_start(self, step):
        series = new_time_series_of_length("x", None, step, 3, 2.0)
        assert len(series) == 3
        assert series.start.tzinfo is timezone.utc

    def test_data(self, t0, step):
        series = new_time_series_of_data("x", t0, step, [4.0, 5.0, 6.0])
        assert series.data().tolist() == [4.0, 5.0, 6.0]
        assert math.isnan(series.filler)

    def test_data_accepts_generators(self, t0, step):
        series = new_time_series_of_data("x", t0, step, (float(v) for v in range(3)))
        assert series.data().tolist() == [0.0, 1.0, 2.0]

    def test_from_filler_and_from_samples(self, t0, step):
        filled = TimeSeries.from_filler("x", t0, t0 + 2 * step, step, 3.0)
        seeded = TimeSeries.from_samples("x", t0, step, [3.0, 3.0])
        assert filled.data().tolist() == seeded.data().tolist()
        assert filled.filler == 3.0
        assert math.isnan(seeded.filler)


class TestAccessors:
    def test_span_matches_length_times_step(self, seeded):
        assert seeded.end - seeded.start == len(seeded.data()) * seeded.step

    def test_key_is_mutable(self, seeded):
        seeded.key = "mem"
        assert seeded.key == "mem"

    def test_data_returns_a_copy(self, seeded, t0):
        data = seeded.data()
        data[0] = 100.0
        assert seeded.get_at(t0) == (1.0, True)

    def test_copy_is_equal_and_independent(self, seeded, t0):
        clone = seeded.copy()
        assert clone == seeded
        assert clone.set_at(t0, 42.0)
        assert seeded.get_at(t0) == (1.0, True)
        assert clone != seeded

    def test_nan_series_compare_equal(self, t0, step):
        first = new_time_series("x", t0, t0 + 2 * step, step)
        assert first == first.copy()

    def test_is_equal_step(self, seeded, t0, step):
        assert seeded.is_equal_step(new_time_series("y", t0, None, step, 1, 2))
        assert not seeded.is_equal_step(new_time_series("y", t0, None, 2 * step, 1, 2))

    def test_len_and_iteration(self, seeded):
        assert len(seeded) == 5
        assert list(seeded) == [1.0, 2.0, 3.0, 4.0, 5.0]

    def test_items_pair_timestamps_with_values(self, seeded, t0, step):
        pairs = list(seeded.items())
        assert pairs[0] == (t0, 1.0)
        assert pairs[-1] == (t0 + 4 * step, 5.0)
        assert seeded.timestamp_at(2) == t0 + 2 * step


class TestPointAccess:
    @pytest.mark.parametrize("index", range(5))
    def test_get_at_each_boundary(self, seeded, t0, step, index):
        assert seeded.get_at(t0 + index * step) == (seeded.data()[index], True)

    def test_before_start_is_not_found(self, seeded, t0):
        value, found = seeded.get_at(t0 - timedelta(seconds=1))
        assert not found
        assert math.isnan(value)

    def test_at_end_is_not_found(self, seeded):
        assert seeded.get_at(seeded.end)[1] is False

    def test_between_boundaries_snaps_to_earlier_sample(self, seeded, t0, step):
        assert seeded.get_at(t0 + step + timedelta(minutes=5)) == (2.0, True)

    def test_past_last_boundary_is_not_found(self, seeded, t0, step):
        assert seeded.get_at(t0 + 4 * step + timedelta(minutes=1))[1] is False

    def test_empty_series_finds_nothing(self, empty, t0):
        assert empty.get_at(t0)[1] is False

    def test_set_then_get(self, seeded, t0, step):
        assert seeded.set_at(t0 + 3 * step, -1.5) is True
        assert seeded.get_at(t0 + 3 * step) == (-1.5, True)

    def test_set_out_of_range_changes_nothing(self, seeded):
        before = seeded.data()
        assert seeded.set_at(seeded.end, 9.0) is False
        assert seeded.data().tolist() == before.tolist()

    def test_set_before_start_changes_nothing(self, seeded, t0):
        before = seeded.data()
        assert seeded.set_at(t0 - timedelta(seconds=1), 9.0) is False
        assert seeded.data().tolist() == before.tolist()


class TestExtension:
    def test_extend_by_whole_steps(self, seeded, step):
        seeded.extend_by(3 * step)
        data = seeded.data()
        assert len(data) == 8
        assert np.isnan(data[5:]).all()

    def test_extend_by_truncates(self, seeded, step):
        seeded.extend_by(2 * step + step / 2)
        assert len(seeded) == 7

    @pytest.mark.parametrize("duration", [timedelta(0), timedelta(minutes=-30)])
    def test_extend_by_non_positive_is_noop(self, seeded, duration):
        seeded.extend_by(duration)
        assert len(seeded) == 5

    def test_extend_by_uses_filler(self, t0, step):
        series = new_time_series("x", t0, t0 + step, step, 7.0)
        series.extend_by(2 * step)
        assert series.data().tolist() == [7.0, 7.0, 7.0]

    def test_extend_to_before_end_is_noop(self, seeded, t0):
        seeded.extend_to(t0)
        assert len(seeded) == 5

    def test_extend_to_end_adds_one_slot(self, seeded):
        end = seeded.end
        seeded.extend_to(end)
        assert len(seeded) == 6
        assert seeded.get_at(end)[1] is True

    def test_extend_to_covers_target(self, seeded, step):
        target = seeded.end + 2 * step
        seeded.extend_to(target)
        assert len(seeded) == 8
        value, found = seeded.get_at(target)
        assert found
        assert math.isnan(value)

    def test_extend_to_off_grid_target(self, seeded):
        seeded.extend_to(seeded.end + timedelta(seconds=30))
        assert len(seeded) == 6

    def test_extend_with_appends_verbatim(self, seeded, t0, step):
        seeded.extend_with(9.0, 10.0)
        assert seeded.data().tolist()[-3:] == [5.0, 9.0, 10.0]
        assert seeded.key == "cpu"
        assert seeded.start == t0
        assert seeded.step == step
        assert seeded.end == t0 + 7 * step

    def test_extend_with_nothing(self, seeded):
        seeded.extend_with()
        assert len(seeded) == 5


class TestRendering:
    def test_str(self, seeded):
        assert str(seeded) == (
            "cpu Start: 2024-01-01 00:00:00+00:00 End: 2024-01-01 01:15:00+00:00 "
            "Step: 0:15:00 Length: 5 1.00,2.00,3.00,4.00,5.00"
        )

    def test_str_of_empty_series_has_no_trailing_space(self, empty):
        assert str(empty) == (
            "empty Start: 2024-01-01 00:00:00+00:00 End: 2024-01-01 00:00:00+00:00 "
            "Step: 0:15:00 Length: 0"
        )

    def test_str_renders_nan(self, t0, step):
        series = new_time_series("gap", t0, t0 + 2 * step, step)
        assert str(series).endswith("Length: 2 nan,nan")
