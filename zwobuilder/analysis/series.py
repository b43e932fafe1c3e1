"""Expand a workout into per-sample (power fraction, duration) series."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from zwobuilder.core.constants import FREE_RIDE_POWER
from zwobuilder.workout.model import (
    Cooldown,
    FreeRide,
    Intervals,
    Ramp,
    Segment,
    SteadyState,
    Warmup,
    Workout,
    unknown_segment,
)


@dataclass(frozen=True)
class MaterializedSeries:
    powers: tuple[float, ...]
    durations: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.powers)

    @property
    def total_duration(self) -> int:
        return sum(self.durations)

    def per_second_watts(self, ftp_watts: float) -> np.ndarray:
        """Absolute power, one value per second of the workout."""
        if not self.powers:
            return np.zeros(0, dtype=float)
        fractions = np.repeat(np.asarray(self.powers, dtype=float), self.durations)
        return fractions * float(ftp_watts)


def _ramp_samples(duration: int, start: float, end: float) -> list[tuple[float, int]]:
    # one sample per second, interpolated at the middle of that second
    step = (end - start) / duration
    return [(start + step * (second + 0.5), 1) for second in range(duration)]


def segment_samples(segment: Segment, free_ride_power: float = FREE_RIDE_POWER) -> list[tuple[float, int]]:
    if isinstance(segment, (Warmup, Cooldown, Ramp)):
        if segment.start_power == segment.end_power:
            return [(segment.start_power, segment.duration)]
        return _ramp_samples(segment.duration, segment.start_power, segment.end_power)
    if isinstance(segment, SteadyState):
        return [(segment.power, segment.duration)]
    if isinstance(segment, Intervals):
        pair = [(segment.on_power, segment.on_duration), (segment.off_power, segment.off_duration)]
        return pair * segment.repeat
    if isinstance(segment, FreeRide):
        return [(free_ride_power, segment.duration)]
    raise unknown_segment(segment)


def materialize(workout: Workout, free_ride_power: float = FREE_RIDE_POWER) -> MaterializedSeries:
    powers: list[float] = []
    durations: list[int] = []
    for segment in workout.segments:
        for power, duration in segment_samples(segment, free_ride_power):
            powers.append(power)
            durations.append(duration)
    return MaterializedSeries(powers=tuple(powers), durations=tuple(durations))
