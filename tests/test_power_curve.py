from __future__ import annotations

import numpy as np
import pytest

from zwobuilder.analysis.power_curve import best_average_power
from zwobuilder.analysis.series import materialize
from zwobuilder.workout.model import Cooldown, SteadyState, Warmup, Workout


def test_constant_series_is_flat() -> None:
    curve = best_average_power([250.0] * 600)
    assert curve
    assert all(point.power == 250.0 for point in curve)
    assert max(point.duration for point in curve) <= 600


def test_constant_series_reports_its_exact_power() -> None:
    watts = 0.884 * 263
    curve = best_average_power([watts] * 7200)
    assert [point.duration for point in curve][-1] == 7200
    assert [point.power for point in curve] == [watts] * len(curve)


def test_steady_workout_curve_matches_its_watts() -> None:
    workout = Workout(segments=[SteadyState(duration=3600, power=0.884)])
    watts = materialize(workout).per_second_watts(263)
    assert {point.power for point in best_average_power(watts)} == {float(watts[0])}


def test_empty_series_has_no_curve() -> None:
    assert best_average_power([]) == []


def test_window_maxima() -> None:
    curve = best_average_power([100.0, 300.0, 200.0], durations=(3, 1, 2, 2, 0, 4))
    assert [(p.duration, p.power) for p in curve] == [(1, 300.0), (2, 250.0), (3, 200.0)]


def test_true_maxima_may_rise_with_duration() -> None:
    curve = best_average_power(np.array([10.0, 0.0, 10.0]), durations=(2, 3))
    assert curve[0].power == pytest.approx(5.0)
    assert curve[1].power == pytest.approx(20.0 / 3)


def test_single_peak_workout_gives_non_increasing_curve() -> None:
    workout = Workout(
        segments=[
            Warmup(duration=600, start_power=0.4, end_power=0.9),
            SteadyState(duration=1200, power=1.0),
            Cooldown(duration=600, start_power=0.9, end_power=0.4),
        ]
    )
    powers = [point.power for point in best_average_power(materialize(workout).per_second_watts(250))]
    assert all(later <= earlier + 1e-9 for earlier, later in zip(powers, powers[1:]))
    assert powers[0] == pytest.approx(250.0)
