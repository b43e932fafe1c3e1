"""Analysis context: one workout, one FTP, one cached series."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

import numpy as np

from zwobuilder.analysis.metrics import (
    FuelEstimate,
    experience_points,
    fuel_estimate,
    normalized_fraction,
    training_stress_score,
)
from zwobuilder.analysis.power_curve import CurvePoint, best_average_power
from zwobuilder.analysis.series import MaterializedSeries, materialize
from zwobuilder.analysis.zones import ZoneTimes, zone_times
from zwobuilder.core.constants import FREE_RIDE_POWER, POWER_CURVE_DURATIONS
from zwobuilder.workout.model import Workout


@dataclass(frozen=True)
class WorkoutSummary:
    name: str
    ftp_watts: float
    duration_sec: int
    score: int
    xp: int
    intensity_factor: float
    zones: ZoneTimes
    fuel: FuelEstimate
    power_curve: tuple[CurvePoint, ...]


class AnalysisContext:
    """Materializes a workout once and serves every analytic from it.

    The series is computed on first use; edits made to the workout after
    that are not seen, so build a new context after editing.
    """

    def __init__(
        self,
        workout: Workout,
        ftp_watts: float,
        free_ride_power: float = FREE_RIDE_POWER,
    ) -> None:
        if ftp_watts <= 0:
            raise ValueError("FTP must be > 0")
        self.workout = workout
        self.ftp_watts = float(ftp_watts)
        self.free_ride_power = free_ride_power

    @cached_property
    def series(self) -> MaterializedSeries:
        return materialize(self.workout, self.free_ride_power)

    @cached_property
    def per_second_watts(self) -> np.ndarray:
        return self.series.per_second_watts(self.ftp_watts)

    def zone_times(self) -> ZoneTimes:
        return zone_times(self.series, self.ftp_watts)

    def score(self) -> int:
        return training_stress_score(self.series)

    def xp(self) -> int:
        return experience_points(self.series)

    def fuel(self) -> FuelEstimate:
        return fuel_estimate(self.series, self.ftp_watts)

    def power_curve(self, durations: tuple[int, ...] = POWER_CURVE_DURATIONS) -> list[CurvePoint]:
        return best_average_power(self.per_second_watts, durations)

    def summary(self) -> WorkoutSummary:
        return WorkoutSummary(
            name=self.workout.name,
            ftp_watts=self.ftp_watts,
            duration_sec=self.series.total_duration,
            score=self.score(),
            xp=self.xp(),
            intensity_factor=normalized_fraction(self.series),
            zones=self.zone_times(),
            fuel=self.fuel(),
            power_curve=tuple(self.power_curve()),
        )


def summarize_workout(workout: Workout, ftp_watts: float) -> WorkoutSummary:
    return AnalysisContext(workout, ftp_watts).summary()
