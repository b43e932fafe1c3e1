from __future__ import annotations

import pytest

from zwobuilder.workout.model import (
    Cooldown,
    FreeRide,
    Intervals,
    Ramp,
    SteadyState,
    TextEvent,
    Warmup,
    Workout,
)


@pytest.fixture
def full_workout() -> Workout:
    """One of every segment kind with every optional field exercised."""
    return Workout(
        name="Över & Under <30/30>",
        description='Line one\nLine "two" with tabs\tand ümlauts',
        author="Coach",
        tags=["VO2", "intervals", "VO2"],
        segments=[
            Warmup(
                duration=600,
                start_power=0.25,
                end_power=0.75,
                cadence=85,
                text_events=(TextEvent(text="Easy spin", offset=0), TextEvent(text="Build", offset=300)),
            ),
            SteadyState(duration=300, power=0.884, show_avg=True),
            SteadyState(duration=120, power=0.5, cadence=90, show_avg=False),
            Ramp(duration=240, start_power=0.5, end_power=1.1),
            Intervals(
                repeat=6,
                on_duration=30,
                on_power=1.2,
                off_duration=30,
                off_power=0.5,
                cadence=105,
                cadence_resting=85,
                text_events=(TextEvent(text="Hard!", offset=5),),
            ),
            Intervals(repeat=1, on_duration=60, on_power=0.95, off_duration=60, off_power=0.45),
            FreeRide(duration=600, disable_flat_road=True),
            FreeRide(duration=60, cadence=80, disable_flat_road=False),
            FreeRide(duration=30),
            Cooldown(
                duration=300,
                start_power=0.7,
                end_power=0.3,
                text_events=(TextEvent(text="Overshoot offset", offset=999),),
            ),
        ],
    )
