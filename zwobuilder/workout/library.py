"""Segment palette presets and built-in starter workouts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from zwobuilder.workout.model import (
    Cooldown,
    FreeRide,
    Intervals,
    Ramp,
    Segment,
    SteadyState,
    Warmup,
    Workout,
)


@dataclass(frozen=True)
class SegmentPreset:
    key: str
    label: str
    build: Callable[[], Segment]


SEGMENT_PRESETS: tuple[SegmentPreset, ...] = (
    SegmentPreset("warmup", "Warmup", lambda: Warmup(duration=600, start_power=0.25, end_power=0.75)),
    SegmentPreset("steady_z1", "Steady Z1", lambda: SteadyState(duration=300, power=0.50)),
    SegmentPreset("steady_z2", "Steady Z2", lambda: SteadyState(duration=300, power=0.65)),
    SegmentPreset("steady_z3", "Steady Z3", lambda: SteadyState(duration=300, power=0.81)),
    SegmentPreset("steady_z4", "Steady Z4", lambda: SteadyState(duration=300, power=0.95)),
    SegmentPreset("steady_z5", "Steady Z5", lambda: SteadyState(duration=300, power=1.10)),
    SegmentPreset("steady_z6", "Steady Z6", lambda: SteadyState(duration=300, power=1.25)),
    SegmentPreset("ramp_up", "Ramp up", lambda: Ramp(duration=300, start_power=0.50, end_power=1.00)),
    SegmentPreset("ramp_down", "Ramp down", lambda: Ramp(duration=300, start_power=1.00, end_power=0.50)),
    SegmentPreset(
        "intervals",
        "Intervals",
        lambda: Intervals(repeat=5, on_duration=60, on_power=1.20, off_duration=60, off_power=0.50),
    ),
    SegmentPreset("freeride", "Free ride", lambda: FreeRide(duration=600)),
    SegmentPreset("cooldown", "Cooldown", lambda: Cooldown(duration=600, start_power=0.75, end_power=0.25)),
)


def list_segment_presets() -> tuple[SegmentPreset, ...]:
    return SEGMENT_PRESETS


def new_segment(preset_key: str) -> Segment:
    preset = next((item for item in SEGMENT_PRESETS if item.key == preset_key), None)
    if preset is None:
        raise ValueError(f"Unknown segment preset '{preset_key}'")
    return preset.build()


@dataclass(frozen=True)
class WorkoutTemplate:
    key: str
    name: str
    category: str
    build: Callable[[], tuple[Segment, ...]]


def infer_cadence(intensity: float) -> int:
    """Cadence target matching the intensity of a block."""
    if intensity <= 0.60:
        return 86
    if intensity <= 0.78:
        return 90
    if intensity <= 0.95:
        return 93
    if intensity <= 1.05:
        return 87
    return 102


def _steady(duration: int, power: float) -> SteadyState:
    return SteadyState(duration=duration, power=power, cadence=infer_cadence(power))


def _intervals(repeat: int, on: tuple[int, float], off: tuple[int, float]) -> Intervals:
    return Intervals(
        repeat=repeat,
        on_duration=on[0],
        on_power=on[1],
        off_duration=off[0],
        off_power=off[1],
        cadence=infer_cadence(on[1]),
        cadence_resting=infer_cadence(off[1]),
    )


TEMPLATES: tuple[WorkoutTemplate, ...] = (
    WorkoutTemplate(
        key="wake_up_20",
        name="Wake Up 20",
        category="Openers",
        build=lambda: (
            Warmup(duration=300, start_power=0.40, end_power=0.60),
            _steady(180, 0.60),
            _steady(60, 0.80),
            _steady(120, 0.55),
            _steady(60, 0.90),
            Cooldown(duration=480, start_power=0.55, end_power=0.40),
        ),
    ),
    WorkoutTemplate(
        key="tempo_30",
        name="Tempo 30",
        category="Tempo",
        build=lambda: (
            Warmup(duration=420, start_power=0.45, end_power=0.65),
            _steady(1140, 0.78),
            Cooldown(duration=240, start_power=0.60, end_power=0.40),
        ),
    ),
    WorkoutTemplate(
        key="sweetspot_3x10",
        name="Sweet Spot 3x10",
        category="FTP",
        build=lambda: (
            Warmup(duration=600, start_power=0.45, end_power=0.70),
            _intervals(3, (600, 0.90), (240, 0.60)),
            Cooldown(duration=300, start_power=0.60, end_power=0.40),
        ),
    ),
    WorkoutTemplate(
        key="threshold_4x6",
        name="Threshold 4x6",
        category="FTP",
        build=lambda: (
            Warmup(duration=600, start_power=0.45, end_power=0.75),
            _intervals(4, (360, 1.03), (180, 0.60)),
            Cooldown(duration=420, start_power=0.60, end_power=0.40),
        ),
    ),
    WorkoutTemplate(
        key="vo2max_5x3",
        name="VO2max 5x3",
        category="VO2max",
        build=lambda: (
            Warmup(duration=600, start_power=0.45, end_power=0.75),
            _intervals(5, (180, 1.12), (180, 0.55)),
            Cooldown(duration=420, start_power=0.60, end_power=0.40),
        ),
    ),
    WorkoutTemplate(
        key="vo2_30_30",
        name="Power 30/30",
        category="Power",
        build=lambda: (
            Warmup(duration=480, start_power=0.45, end_power=0.70),
            _intervals(6, (30, 1.20), (30, 0.50)),
            FreeRide(duration=300),
            Cooldown(duration=420, start_power=0.55, end_power=0.40),
        ),
    ),
)


def list_templates() -> tuple[WorkoutTemplate, ...]:
    return TEMPLATES


def build_workout_from_template(template_key: str, author: str = "") -> Workout:
    template = next((item for item in TEMPLATES if item.key == template_key), None)
    if template is None:
        raise ValueError(f"Unknown workout template '{template_key}'")
    return Workout(
        name=template.name,
        author=author,
        tags=[template.category],
        segments=template.build(),
    )
