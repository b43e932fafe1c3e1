from __future__ import annotations

import pytest

from zwobuilder.workout.library import (
    build_workout_from_template,
    infer_cadence,
    list_segment_presets,
    list_templates,
    new_segment,
)
from zwobuilder.workout.model import Intervals, SteadyState, segment_duration


def test_vo2max_template_exists_and_builds() -> None:
    keys = {template.key for template in list_templates()}
    assert "vo2max_5x3" in keys

    workout = build_workout_from_template("vo2max_5x3", author="Coach")
    assert workout.name == "VO2max 5x3"
    assert workout.author == "Coach"
    assert workout.tags == ["VO2max"]
    main = workout.segments[1]
    assert isinstance(main, Intervals)
    assert (main.repeat, main.on_duration, main.on_power) == (5, 180, 1.12)
    assert main.cadence == 102
    assert main.cadence_resting == 86


def test_templates_build_fresh_segments() -> None:
    first = build_workout_from_template("tempo_30")
    second = build_workout_from_template("tempo_30")
    assert first == second
    assert first.segments[0].segment_id != second.segments[0].segment_id


@pytest.mark.parametrize("key", [template.key for template in list_templates()])
def test_every_template_builds(key: str) -> None:
    workout = build_workout_from_template(key)
    assert len(workout) > 0
    assert workout.calculate_duration() >= 1200


def test_unknown_template() -> None:
    with pytest.raises(ValueError):
        build_workout_from_template("nope")


def test_inferred_cadence_follows_intensity() -> None:
    workout = build_workout_from_template("tempo_30")
    main = workout.segments[1]
    assert isinstance(main, SteadyState)
    assert main.cadence == infer_cadence(0.78)
    assert infer_cadence(0.5) <= infer_cadence(0.78) <= infer_cadence(0.9)
    assert infer_cadence(1.2) > infer_cadence(0.9)


def test_segment_presets() -> None:
    presets = list_segment_presets()
    assert len({preset.key for preset in presets}) == len(presets)
    for preset in presets:
        segment = new_segment(preset.key)
        assert segment_duration(segment) > 0
    assert new_segment("steady_z2") == SteadyState(duration=300, power=0.65)
    with pytest.raises(ValueError):
        new_segment("steady_z9")
