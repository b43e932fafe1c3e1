"""Workout domain models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import ClassVar, Iterable, Union
from uuid import uuid4

from zwobuilder.workout.errors import InvariantViolation


class SegmentNotFound(KeyError):
    """Raised when no segment carries the requested identifier."""


class TextEventNotFound(KeyError):
    """Raised when a segment has no text event with the requested identifier."""


def new_id() -> str:
    return uuid4().hex


def _check_duration(value: object, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvariantViolation(f"{field_name} must be an integer number of seconds")
    if value <= 0:
        raise InvariantViolation(f"{field_name} must be > 0")


def _check_power(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvariantViolation(f"{field_name} must be a number")
    try:
        number = float(value)
    except OverflowError:
        raise InvariantViolation(f"{field_name} must be a finite number > 0") from None
    if not math.isfinite(number) or number <= 0:
        raise InvariantViolation(f"{field_name} must be a finite number > 0")
    return number


def _check_cadence(value: object, field_name: str) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvariantViolation(f"{field_name} must be an integer rpm")
    if value <= 0:
        raise InvariantViolation(f"{field_name} must be > 0")


def _check_flag(value: object, field_name: str) -> None:
    if value is not None and not isinstance(value, bool):
        raise InvariantViolation(f"{field_name} must be a boolean")


def _check_text_events(events: object) -> tuple[TextEvent, ...]:
    if not isinstance(events, (tuple, list)):
        raise InvariantViolation("text_events must be a sequence of TextEvent")
    for event in events:
        if not isinstance(event, TextEvent):
            raise InvariantViolation("text_events must only contain TextEvent items")
    ids = [event.event_id for event in events]
    if len(set(ids)) != len(ids):
        raise InvariantViolation("text event identifiers must be unique within a segment")
    return tuple(events)


@dataclass(frozen=True)
class TextEvent:
    text: str
    offset: int
    event_id: str = field(default_factory=new_id, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise InvariantViolation("text event message must be a string")
        if isinstance(self.offset, bool) or not isinstance(self.offset, int):
            raise InvariantViolation("text event offset must be an integer number of seconds")


@dataclass(frozen=True)
class _RampShape:
    duration: int
    start_power: float
    end_power: float
    cadence: int | None = None
    text_events: tuple[TextEvent, ...] = ()
    segment_id: str = field(default_factory=new_id, compare=False)

    def __post_init__(self) -> None:
        _check_duration(self.duration, "duration")
        object.__setattr__(self, "start_power", _check_power(self.start_power, "start_power"))
        object.__setattr__(self, "end_power", _check_power(self.end_power, "end_power"))
        _check_cadence(self.cadence, "cadence")
        object.__setattr__(self, "text_events", _check_text_events(self.text_events))


@dataclass(frozen=True)
class Warmup(_RampShape):
    kind: ClassVar[str] = "warmup"


@dataclass(frozen=True)
class Cooldown(_RampShape):
    kind: ClassVar[str] = "cooldown"


@dataclass(frozen=True)
class Ramp(_RampShape):
    kind: ClassVar[str] = "ramp"


@dataclass(frozen=True)
class SteadyState:
    duration: int
    power: float
    cadence: int | None = None
    show_avg: bool | None = None
    text_events: tuple[TextEvent, ...] = ()
    segment_id: str = field(default_factory=new_id, compare=False)

    kind: ClassVar[str] = "steady"

    def __post_init__(self) -> None:
        _check_duration(self.duration, "duration")
        object.__setattr__(self, "power", _check_power(self.power, "power"))
        _check_cadence(self.cadence, "cadence")
        _check_flag(self.show_avg, "show_avg")
        object.__setattr__(self, "text_events", _check_text_events(self.text_events))


@dataclass(frozen=True)
class Intervals:
    repeat: int
    on_duration: int
    on_power: float
    off_duration: int
    off_power: float
    cadence: int | None = None
    cadence_resting: int | None = None
    text_events: tuple[TextEvent, ...] = ()
    segment_id: str = field(default_factory=new_id, compare=False)

    kind: ClassVar[str] = "intervals"

    def __post_init__(self) -> None:
        if isinstance(self.repeat, bool) or not isinstance(self.repeat, int):
            raise InvariantViolation("repeat must be an integer")
        if self.repeat < 1:
            raise InvariantViolation("repeat must be >= 1")
        _check_duration(self.on_duration, "on_duration")
        _check_duration(self.off_duration, "off_duration")
        object.__setattr__(self, "on_power", _check_power(self.on_power, "on_power"))
        object.__setattr__(self, "off_power", _check_power(self.off_power, "off_power"))
        _check_cadence(self.cadence, "cadence")
        _check_cadence(self.cadence_resting, "cadence_resting")
        object.__setattr__(self, "text_events", _check_text_events(self.text_events))


@dataclass(frozen=True)
class FreeRide:
    duration: int
    cadence: int | None = None
    disable_flat_road: bool | None = None
    text_events: tuple[TextEvent, ...] = ()
    segment_id: str = field(default_factory=new_id, compare=False)

    kind: ClassVar[str] = "freeride"

    def __post_init__(self) -> None:
        _check_duration(self.duration, "duration")
        _check_cadence(self.cadence, "cadence")
        _check_flag(self.disable_flat_road, "disable_flat_road")
        object.__setattr__(self, "text_events", _check_text_events(self.text_events))


Segment = Union[Warmup, Cooldown, Ramp, SteadyState, Intervals, FreeRide]
SEGMENT_TYPES: tuple[type, ...] = (Warmup, Cooldown, Ramp, SteadyState, Intervals, FreeRide)


def unknown_segment(segment: object) -> TypeError:
    return TypeError(f"Unknown segment kind: {type(segment).__name__}")


def segment_duration(segment: Segment) -> int:
    if isinstance(segment, (Warmup, Cooldown, Ramp, SteadyState, FreeRide)):
        return segment.duration
    if isinstance(segment, Intervals):
        return segment.repeat * (segment.on_duration + segment.off_duration)
    raise unknown_segment(segment)


def duplicate_segment(segment: Segment) -> Segment:
    """Deep copy with a fresh identifier for the segment and each text event."""
    if not isinstance(segment, SEGMENT_TYPES):
        raise unknown_segment(segment)
    events = tuple(replace(event, event_id=new_id()) for event in segment.text_events)
    return replace(segment, segment_id=new_id(), text_events=events)


def parse_tags(text: str) -> list[str]:
    return [token for token in text.split() if token]


def _check_tags(tags: Iterable[str]) -> list[str]:
    if isinstance(tags, str):
        raise InvariantViolation("tags must be a list of strings; use set_tags for text")
    out = list(tags)
    if not all(isinstance(tag, str) for tag in out):
        raise InvariantViolation("tags must be a list of strings")
    return out


class Workout:
    """A named, ordered list of segments.

    Segments are immutable; every edit goes through a method that swaps in
    a validated replacement, so a failing edit leaves the workout untouched.
    """

    def __init__(
        self,
        name: str = "",
        description: str = "",
        author: str = "",
        tags: Iterable[str] = (),
        segments: Iterable[Segment] = (),
    ) -> None:
        self.name = name
        self.description = description
        self.author = author
        self.tags: list[str] = _check_tags(tags)
        self._segments: list[Segment] = []
        self._positions: dict[str, int] = {}
        for segment in segments:
            self.add_segment(segment)

    def __repr__(self) -> str:
        return (
            f"Workout(name={self.name!r}, author={self.author!r}, "
            f"tags={self.tags!r}, segments={len(self._segments)})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Workout):
            return NotImplemented
        return (
            self.name == other.name
            and self.description == other.description
            and self.author == other.author
            and self.tags == other.tags
            and self._segments == other._segments
        )

    __hash__ = None  # type: ignore[assignment]

    @property
    def segments(self) -> tuple[Segment, ...]:
        return tuple(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    # -- metadata -------------------------------------------------------

    def set_tags(self, text: str) -> None:
        self.tags = parse_tags(text)

    @property
    def tags_text(self) -> str:
        return " ".join(self.tags)

    # -- lookups --------------------------------------------------------

    def _reindex(self) -> None:
        self._positions = {seg.segment_id: i for i, seg in enumerate(self._segments)}

    def index_of(self, segment_id: str) -> int:
        try:
            return self._positions[segment_id]
        except KeyError:
            raise SegmentNotFound(segment_id) from None

    def get_segment(self, segment_id: str) -> Segment:
        return self._segments[self.index_of(segment_id)]

    # -- segment list edits ---------------------------------------------

    def _check_new(self, segment: Segment) -> None:
        if not isinstance(segment, SEGMENT_TYPES):
            raise unknown_segment(segment)
        if segment.segment_id in self._positions:
            raise InvariantViolation(f"Segment {segment.segment_id} is already in the workout")

    def add_segment(self, segment: Segment) -> Segment:
        self._check_new(segment)
        self._segments.append(segment)
        self._positions[segment.segment_id] = len(self._segments) - 1
        return segment

    def insert_segment(self, segment: Segment, before: str | None = None) -> Segment:
        """Insert ahead of the segment ``before``; append when it is None."""
        if before is None:
            return self.add_segment(segment)
        position = self.index_of(before)
        self._check_new(segment)
        self._segments.insert(position, segment)
        self._reindex()
        return segment

    def remove_segment(self, segment_id: str) -> Segment:
        position = self.index_of(segment_id)
        removed = self._segments.pop(position)
        self._reindex()
        return removed

    def move_segment(self, segment_id: str, offset: int) -> int:
        position = self.index_of(segment_id)
        target = max(0, min(len(self._segments) - 1, position + offset))
        if target != position:
            segment = self._segments.pop(position)
            self._segments.insert(target, segment)
            self._reindex()
        return target

    def reorder_segments(self, segment_ids: Iterable[str]) -> None:
        order = list(segment_ids)
        if sorted(order) != sorted(self._positions):
            raise InvariantViolation("Reorder must list every segment identifier exactly once")
        self._segments = [self._segments[self._positions[sid]] for sid in order]
        self._reindex()

    def duplicate_segment(self, segment_id: str) -> Segment:
        return self.add_segment(duplicate_segment(self.get_segment(segment_id)))

    def insert_workout(self, other: Workout) -> list[Segment]:
        copies = [duplicate_segment(segment) for segment in other.segments]
        for segment in copies:
            self.add_segment(segment)
        return copies

    def update_segment(self, segment_id: str, **changes: object) -> Segment:
        if "segment_id" in changes:
            raise InvariantViolation("Segment identifiers cannot be changed")
        position = self.index_of(segment_id)
        updated = replace(self._segments[position], **changes)
        self._segments[position] = updated
        return updated

    # -- text events ----------------------------------------------------

    def add_text_event(self, segment_id: str, text: str, offset: int) -> TextEvent:
        event = TextEvent(text=text, offset=offset)
        segment = self.get_segment(segment_id)
        self.update_segment(segment_id, text_events=segment.text_events + (event,))
        return event

    def update_text_event(
        self,
        segment_id: str,
        event_id: str,
        *,
        text: str | None = None,
        offset: int | None = None,
    ) -> TextEvent:
        segment = self.get_segment(segment_id)
        events = list(segment.text_events)
        position = _event_position(segment, event_id)
        changes: dict[str, object] = {}
        if text is not None:
            changes["text"] = text
        if offset is not None:
            changes["offset"] = offset
        events[position] = replace(events[position], **changes)
        self.update_segment(segment_id, text_events=tuple(events))
        return events[position]

    def remove_text_event(self, segment_id: str, event_id: str) -> TextEvent:
        segment = self.get_segment(segment_id)
        position = _event_position(segment, event_id)
        events = list(segment.text_events)
        removed = events.pop(position)
        self.update_segment(segment_id, text_events=tuple(events))
        return removed

    # -- derived values -------------------------------------------------

    def calculate_duration(self) -> int:
        return sum(segment_duration(segment) for segment in self._segments)

    def calculate_score(self) -> int:
        from zwobuilder.analysis.metrics import training_stress_score
        from zwobuilder.analysis.series import materialize

        return training_stress_score(materialize(self))

    def calculate_xp(self) -> int:
        from zwobuilder.analysis.metrics import experience_points
        from zwobuilder.analysis.series import materialize

        return experience_points(materialize(self))


def _event_position(segment: Segment, event_id: str) -> int:
    for i, event in enumerate(segment.text_events):
        if event.event_id == event_id:
            return i
    raise TextEventNotFound(event_id)
