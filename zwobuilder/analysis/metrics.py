"""Training load, experience and fuel estimates from a materialized series."""

from __future__ import annotations

import math
from dataclasses import dataclass

from zwobuilder.analysis.series import MaterializedSeries
from zwobuilder.core.constants import (
    CARB_GRAMS_PER_KCAL,
    GROSS_EFFICIENCY,
    KCAL_PER_KJ,
    WATER_ML_PER_KCAL,
    XP_BASE_PER_MINUTE,
    XP_INTENSITY_CAP,
    XP_INTENSITY_PER_MINUTE,
)


@dataclass(frozen=True)
class FuelEstimate:
    kilojoules: int
    kilocalories: int
    carbohydrate_g: int
    water_ml: int


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalized_fraction(series: MaterializedSeries) -> float:
    """Fourth root of the duration-weighted mean of power^4."""
    total = series.total_duration
    if total <= 0:
        return 0.0
    weighted = sum(d * p**4 for p, d in zip(series.powers, series.durations))
    return (weighted / total) ** 0.25


def training_stress_score(series: MaterializedSeries) -> int:
    total = series.total_duration
    if total <= 0:
        return 0
    nf = normalized_fraction(series)
    return round_half_up(total * nf**2 * 100 / 3600)


def experience_points(series: MaterializedSeries) -> int:
    """XP = sum over samples of minutes * (6 + 6 * min(power, 2.0)).

    Non-decreasing in both duration and intensity; one hour at threshold
    earns 720 XP.
    """
    xp = 0.0
    for power, duration in zip(series.powers, series.durations):
        intensity = min(power, XP_INTENSITY_CAP)
        xp += duration / 60 * (XP_BASE_PER_MINUTE + XP_INTENSITY_PER_MINUTE * intensity)
    return round_half_up(xp)


def total_kilojoules(series: MaterializedSeries, ftp_watts: float) -> float:
    return sum(p * ftp_watts * d for p, d in zip(series.powers, series.durations)) / 1000.0


def fuel_estimate(series: MaterializedSeries, ftp_watts: float) -> FuelEstimate:
    kj = total_kilojoules(series, ftp_watts)
    kcal = kj * KCAL_PER_KJ / GROSS_EFFICIENCY
    return FuelEstimate(
        kilojoules=round_half_up(kj),
        kilocalories=round_half_up(kcal),
        carbohydrate_g=round_half_up(kcal * CARB_GRAMS_PER_KCAL),
        water_ml=round_half_up(kcal * WATER_ML_PER_KCAL),
    )
