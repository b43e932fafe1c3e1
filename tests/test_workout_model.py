from __future__ import annotations

import pytest

from zwobuilder.workout.errors import InvariantViolation
from zwobuilder.workout.model import (
    Cooldown,
    FreeRide,
    Intervals,
    Ramp,
    SegmentNotFound,
    SteadyState,
    TextEvent,
    TextEventNotFound,
    Warmup,
    Workout,
    segment_duration,
)


def _sample_workout() -> Workout:
    return Workout(
        name="Sample",
        segments=[
            Warmup(duration=600, start_power=0.4, end_power=0.75),
            SteadyState(duration=300, power=0.9),
            Intervals(repeat=3, on_duration=30, on_power=1.2, off_duration=15, off_power=0.5),
            Cooldown(duration=300, start_power=0.6, end_power=0.4),
        ],
    )


def test_segment_duration_per_kind() -> None:
    assert segment_duration(SteadyState(duration=300, power=0.8)) == 300
    assert (
        segment_duration(
            Intervals(repeat=3, on_duration=30, on_power=1.2, off_duration=15, off_power=0.5)
        )
        == 135
    )
    assert segment_duration(FreeRide(duration=120)) == 120
    assert segment_duration(Ramp(duration=90, start_power=0.5, end_power=1.0)) == 90


def test_segment_duration_rejects_unknown_kind() -> None:
    with pytest.raises(TypeError):
        segment_duration(object())  # type: ignore[arg-type]


def test_workout_duration_sums_segments() -> None:
    assert _sample_workout().calculate_duration() == 600 + 300 + 135 + 300
    assert Workout().calculate_duration() == 0


@pytest.mark.parametrize(
    "factory",
    [
        lambda: SteadyState(duration=0, power=0.8),
        lambda: SteadyState(duration=60, power=0.0),
        lambda: SteadyState(duration=60, power=-1.0),
        lambda: SteadyState(duration=60.5, power=0.8),
        lambda: Warmup(duration=60, start_power=0.5, end_power=float("nan")),
        lambda: Intervals(repeat=0, on_duration=30, on_power=1.2, off_duration=30, off_power=0.5),
        lambda: Intervals(repeat=2, on_duration=30, on_power=1.2, off_duration=0, off_power=0.5),
        lambda: FreeRide(duration=60, cadence=0),
        lambda: FreeRide(duration=60, cadence=True),
        lambda: SteadyState(duration=60, power=0.8, show_avg=1),
        lambda: SteadyState(duration=60, power=10**400),
        lambda: Ramp(duration=60, start_power=0.5, end_power=-(10**400)),
    ],
)
def test_invalid_segments_are_rejected(factory) -> None:
    with pytest.raises(InvariantViolation):
        factory()


def test_segment_ids_are_unique_and_not_part_of_equality() -> None:
    a = SteadyState(duration=60, power=0.8)
    b = SteadyState(duration=60, power=0.8)
    assert a.segment_id != b.segment_id
    assert a == b
    assert Warmup(duration=60, start_power=0.5, end_power=0.7) != Ramp(
        duration=60, start_power=0.5, end_power=0.7
    )


def test_set_tags_splits_on_whitespace_and_keeps_duplicates() -> None:
    workout = Workout()
    workout.set_tags("  endurance   base\tbase \n")
    assert workout.tags == ["endurance", "base", "base"]
    assert workout.tags_text == "endurance base base"


def test_tags_must_be_a_list_of_strings() -> None:
    with pytest.raises(InvariantViolation):
        Workout(tags="tempo")
    with pytest.raises(InvariantViolation):
        Workout(tags=["tempo", 3])  # type: ignore[list-item]
    assert Workout(tags=("tempo", "base")).tags == ["tempo", "base"]


def test_insert_remove_and_lookup_by_id() -> None:
    workout = _sample_workout()
    ids = [segment.segment_id for segment in workout.segments]

    inserted = workout.insert_segment(FreeRide(duration=60), before=ids[1])
    assert workout.index_of(inserted.segment_id) == 1
    assert workout.index_of(ids[1]) == 2

    removed = workout.remove_segment(ids[0])
    assert isinstance(removed, Warmup)
    assert workout.index_of(inserted.segment_id) == 0
    with pytest.raises(SegmentNotFound):
        workout.get_segment(ids[0])


def test_adding_same_segment_twice_is_rejected() -> None:
    segment = SteadyState(duration=60, power=0.8)
    workout = Workout(segments=[segment])
    with pytest.raises(InvariantViolation):
        workout.add_segment(segment)
    assert len(workout) == 1


def test_move_segment_clamps_at_the_ends() -> None:
    workout = _sample_workout()
    first, second, third, fourth = [segment.segment_id for segment in workout.segments]

    assert workout.move_segment(first, 1) == 1
    assert [s.segment_id for s in workout.segments] == [second, first, third, fourth]
    assert workout.move_segment(fourth, 5) == 3
    assert workout.move_segment(second, -1) == 0


def test_reorder_segments_requires_every_id() -> None:
    workout = _sample_workout()
    ids = [segment.segment_id for segment in workout.segments]

    workout.reorder_segments(list(reversed(ids)))
    assert [s.segment_id for s in workout.segments] == list(reversed(ids))
    assert workout.index_of(ids[0]) == 3

    with pytest.raises(InvariantViolation):
        workout.reorder_segments(ids[:2])
    assert [s.segment_id for s in workout.segments] == list(reversed(ids))


def test_duplicate_segment_copies_fields_with_fresh_ids() -> None:
    workout = _sample_workout()
    original = workout.segments[1]
    workout.add_text_event(original.segment_id, "Go!", 10)
    original = workout.get_segment(original.segment_id)

    copy = workout.duplicate_segment(original.segment_id)

    assert copy == original
    assert copy.segment_id != original.segment_id
    assert copy.text_events[0].event_id != original.text_events[0].event_id
    assert workout.segments[-1] is copy


def test_update_segment_is_validated_and_atomic() -> None:
    workout = _sample_workout()
    steady = workout.segments[1]

    updated = workout.update_segment(steady.segment_id, power=1.05, cadence=95)
    assert updated.segment_id == steady.segment_id
    assert workout.get_segment(steady.segment_id).power == 1.05

    with pytest.raises(InvariantViolation):
        workout.update_segment(steady.segment_id, duration=-5)
    assert workout.get_segment(steady.segment_id) == updated


def test_text_event_lifecycle() -> None:
    workout = _sample_workout()
    segment_id = workout.segments[0].segment_id

    first = workout.add_text_event(segment_id, "Spin easy", 0)
    second = workout.add_text_event(segment_id, "Past the end is fine", 900)
    assert [e.text for e in workout.get_segment(segment_id).text_events] == [
        "Spin easy",
        "Past the end is fine",
    ]

    workout.update_text_event(segment_id, first.event_id, text="Spin up")
    assert workout.get_segment(segment_id).text_events[0] == TextEvent(text="Spin up", offset=0)

    workout.remove_text_event(segment_id, second.event_id)
    assert len(workout.get_segment(segment_id).text_events) == 1
    with pytest.raises(TextEventNotFound):
        workout.remove_text_event(segment_id, second.event_id)


def test_insert_workout_appends_copies() -> None:
    target = Workout(segments=[SteadyState(duration=60, power=0.5)])
    source = _sample_workout()

    copies = target.insert_workout(source)

    assert len(target) == 5
    assert list(target.segments[1:]) == list(source.segments)
    assert {s.segment_id for s in copies}.isdisjoint({s.segment_id for s in source.segments})


def test_workout_equality_ignores_identifiers() -> None:
    assert _sample_workout() == _sample_workout()
    other = _sample_workout()
    other.author = "Someone"
    assert other != _sample_workout()


def test_score_for_an_hour_at_threshold_is_100() -> None:
    workout = Workout(segments=[SteadyState(duration=3600, power=1.0)])
    assert workout.calculate_score() == 100
    assert workout.calculate_xp() == 720


def test_score_rounds_half_up() -> None:
    workout = Workout(segments=[SteadyState(duration=1800, power=0.5)])
    assert workout.calculate_score() == 13
