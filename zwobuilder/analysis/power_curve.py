"""Best average power for a fixed set of window lengths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from zwobuilder.core.constants import POWER_CURVE_DURATIONS


@dataclass(frozen=True)
class CurvePoint:
    duration: int
    power: float


def best_average_power(
    watts: Iterable[float] | np.ndarray,
    durations: Iterable[int] = POWER_CURVE_DURATIONS,
) -> list[CurvePoint]:
    """Max mean power over every contiguous window, per candidate duration.

    ``watts`` is sampled once per second. Candidates longer than the series
    are left out. Each window length costs one pass over a cumulative sum.
    The winning mean is clipped to its window's min and max, so a flat
    window reports its sample value exactly.
    """
    samples = np.asarray(watts if isinstance(watts, np.ndarray) else list(watts), dtype=float)
    n = samples.size
    if n == 0:
        return []
    cumulative = np.concatenate(([0.0], np.cumsum(samples)))
    out: list[CurvePoint] = []
    for duration in sorted(set(int(d) for d in durations)):
        if duration <= 0 or duration > n:
            continue
        window_sums = cumulative[duration:] - cumulative[:-duration]
        start = int(window_sums.argmax())
        window = samples[start:start + duration]
        mean = window_sums[start] / duration
        power = float(np.clip(mean, window.min(), window.max()))
        out.append(CurvePoint(duration=duration, power=power))
    return out
