"""Seven-zone power histogram.

Zone bounds keep the one-point gap at each lower edge (Z1 ends at 55 %,
Z2 starts at 56 %). Samples whose absolute power lands in a gap, or above
Z7, are counted as unclassified rather than pushed into a neighbour.
"""

from __future__ import annotations

from dataclasses import dataclass

from zwobuilder.analysis.series import MaterializedSeries


@dataclass(frozen=True)
class PowerZone:
    key: str
    name: str
    label: str
    min_watts: float
    max_watts: float

    def contains(self, watts: float) -> bool:
        return self.min_watts <= watts <= self.max_watts


@dataclass(frozen=True)
class ZoneTimes:
    zones: tuple[PowerZone, ...]
    seconds: tuple[float, ...]
    unclassified_seconds: float

    @property
    def total_seconds(self) -> float:
        return sum(self.seconds) + self.unclassified_seconds

    def minutes(self) -> tuple[float, ...]:
        return tuple(round(value / 60, 2) for value in self.seconds)

    def percentages(self) -> tuple[float, ...]:
        total = self.total_seconds
        if total <= 0:
            return tuple(0.0 for _ in self.seconds)
        return tuple(value * 100.0 / total for value in self.seconds)


def power_zones(ftp_watts: float) -> tuple[PowerZone, ...]:
    ftp = float(ftp_watts)
    return (
        PowerZone("Z1", "Active Recovery", f"0 - {round(0.55 * ftp)}", 0.0, 0.55 * ftp),
        PowerZone("Z2", "Endurance", f"{round(0.55 * ftp)} - {round(0.75 * ftp)}", 0.56 * ftp, 0.75 * ftp),
        PowerZone("Z3", "Tempo", f"{round(0.75 * ftp)} - {round(0.90 * ftp)}", 0.76 * ftp, 0.90 * ftp),
        PowerZone("Z4", "Threshold", f"{round(0.90 * ftp)} - {round(1.05 * ftp)}", 0.91 * ftp, 1.05 * ftp),
        PowerZone("Z5", "VO2 Max", f"{round(1.05 * ftp)} - {round(1.20 * ftp)}", 1.06 * ftp, 1.20 * ftp),
        PowerZone("Z6", "Anaerobic", f"{round(1.20 * ftp)} - {round(1.50 * ftp)}", 1.21 * ftp, 1.50 * ftp),
        PowerZone("Z7", "Neuromuscular", f"{round(1.50 * ftp)} - Destruction", 1.51 * ftp, 10.0 * ftp),
    )


def zone_times(series: MaterializedSeries, ftp_watts: float) -> ZoneTimes:
    if ftp_watts <= 0:
        raise ValueError("FTP must be > 0")
    zones = power_zones(ftp_watts)
    buckets = [0.0] * len(zones)
    unclassified = 0.0
    for power, duration in zip(series.powers, series.durations):
        watts = power * ftp_watts
        for i, zone in enumerate(zones):
            if zone.contains(watts):
                buckets[i] += duration
                break
        else:
            unclassified += duration
    return ZoneTimes(zones=zones, seconds=tuple(buckets), unclassified_seconds=unclassified)
