"""Canonical workout XML (.zwo) encoder and decoder."""

from __future__ import annotations

import logging
import math
import xml.etree.ElementTree as ET

from zwobuilder.core.constants import ZWO_ROOT_TAG, ZWO_SPORT_TYPE
from zwobuilder.workout.errors import InvariantViolation, MalformedInput
from zwobuilder.workout.model import (
    Cooldown,
    FreeRide,
    Intervals,
    Ramp,
    Segment,
    SteadyState,
    TextEvent,
    Warmup,
    Workout,
    unknown_segment,
)

logger = logging.getLogger(__name__)

_RAMP_TAGS: dict[str, type] = {"warmup": Warmup, "cooldown": Cooldown, "ramp": Ramp}
_TAG_NAMES: dict[type, str] = {
    Warmup: "Warmup",
    Cooldown: "Cooldown",
    Ramp: "Ramp",
    SteadyState: "SteadyState",
    Intervals: "IntervalsT",
    FreeRide: "FreeRide",
}


def format_number(value: float | int) -> str:
    """Shortest decimal text that parses back to the same value."""
    if isinstance(value, int):
        return str(value)
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def _flag_text(value: bool) -> str:
    return "1" if value else "0"


# -- encode -------------------------------------------------------------


def to_zwo_xml(workout: Workout) -> str:
    root = ET.Element(ZWO_ROOT_TAG)
    ET.SubElement(root, "author").text = workout.author
    ET.SubElement(root, "name").text = workout.name
    ET.SubElement(root, "description").text = workout.description
    ET.SubElement(root, "sportType").text = ZWO_SPORT_TYPE
    tags = ET.SubElement(root, "tags")
    for tag in workout.tags:
        ET.SubElement(tags, "tag", {"name": tag})
    body = ET.SubElement(root, "workout")
    for segment in workout.segments:
        _encode_segment(body, segment)
    ET.indent(root, space="    ")
    # element text keeps raw carriage returns, which parsers fold into \n
    return ET.tostring(root, encoding="unicode").replace("\r", "&#13;") + "\n"


def _encode_segment(parent: ET.Element, segment: Segment) -> None:
    tag = _TAG_NAMES.get(type(segment))
    if tag is None:
        raise unknown_segment(segment)
    attrs: dict[str, str] = {}

    if isinstance(segment, (Warmup, Cooldown, Ramp)):
        attrs["Duration"] = format_number(segment.duration)
        attrs["PowerLow"] = format_number(segment.start_power)
        attrs["PowerHigh"] = format_number(segment.end_power)
        if segment.cadence is not None:
            attrs["Cadence"] = format_number(segment.cadence)
    elif isinstance(segment, SteadyState):
        attrs["Duration"] = format_number(segment.duration)
        attrs["Power"] = format_number(segment.power)
        if segment.cadence is not None:
            attrs["Cadence"] = format_number(segment.cadence)
        if segment.show_avg is not None:
            attrs["show_avg"] = _flag_text(segment.show_avg)
    elif isinstance(segment, Intervals):
        attrs["Repeat"] = format_number(segment.repeat)
        attrs["OnDuration"] = format_number(segment.on_duration)
        attrs["OffDuration"] = format_number(segment.off_duration)
        attrs["OnPower"] = format_number(segment.on_power)
        attrs["OffPower"] = format_number(segment.off_power)
        if segment.cadence is not None:
            attrs["Cadence"] = format_number(segment.cadence)
        if segment.cadence_resting is not None:
            attrs["CadenceResting"] = format_number(segment.cadence_resting)
    elif isinstance(segment, FreeRide):
        attrs["Duration"] = format_number(segment.duration)
        if segment.cadence is not None:
            attrs["Cadence"] = format_number(segment.cadence)
        if segment.disable_flat_road is not None:
            # FlatRoad="0" turns the flat-road behaviour off.
            attrs["FlatRoad"] = _flag_text(not segment.disable_flat_road)
    else:
        raise unknown_segment(segment)

    element = ET.SubElement(parent, tag, attrs)
    for event in segment.text_events:
        ET.SubElement(
            element,
            "textevent",
            {"timeoffset": format_number(event.offset), "message": event.text},
        )


# -- decode -------------------------------------------------------------


def from_zwo_xml(text: str) -> Workout:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise MalformedInput(f"Invalid workout XML: {exc}") from exc

    if root.tag != ZWO_ROOT_TAG:
        raise MalformedInput(f"Expected <{ZWO_ROOT_TAG}> root element, got <{root.tag}>")
    body = root.find("workout")
    if body is None:
        raise MalformedInput("Workout XML is missing a <workout> section")

    tags: list[str] = []
    tags_node = root.find("tags")
    if tags_node is not None:
        for node in tags_node.findall("tag"):
            name = node.get("name")
            if name is None:
                raise MalformedInput("<tag> element is missing its name attribute")
            tags.append(name)

    segments: list[Segment] = []
    for index, child in enumerate(body):
        try:
            segment = _decode_segment(child)
        except InvariantViolation as exc:
            raise MalformedInput(f"Segment {index + 1} <{child.tag}>: {exc}") from exc
        if segment is None:
            logger.warning("Skipping unsupported workout element <%s>", child.tag)
            continue
        segments.append(segment)

    return Workout(
        name=root.findtext("name") or "",
        description=root.findtext("description") or "",
        author=root.findtext("author") or "",
        tags=tags,
        segments=segments,
    )


def _attr(node: ET.Element, name: str) -> str | None:
    raw = node.attrib.get(name)
    if raw is None:
        raw = node.attrib.get(name.lower())
    return raw


def _required(node: ET.Element, name: str) -> str:
    raw = _attr(node, name)
    if raw is None:
        raise MalformedInput(f"<{node.tag}> is missing the {name} attribute")
    return raw


def _parse_int(node: ET.Element, name: str, raw: str) -> int:
    try:
        number = float(raw.strip())
    except ValueError as exc:
        raise MalformedInput(f"<{node.tag}> {name}: invalid number '{raw}'") from exc
    if not math.isfinite(number) or not number.is_integer():
        raise MalformedInput(f"<{node.tag}> {name}: expected a whole number, got '{raw}'")
    return int(number)


def _parse_float(node: ET.Element, name: str, raw: str) -> float:
    try:
        return float(raw.strip())
    except ValueError as exc:
        raise MalformedInput(f"<{node.tag}> {name}: invalid number '{raw}'") from exc


def _int(node: ET.Element, name: str) -> int:
    return _parse_int(node, name, _required(node, name))


def _float(node: ET.Element, name: str) -> float:
    return _parse_float(node, name, _required(node, name))


def _optional_int(node: ET.Element, name: str) -> int | None:
    raw = _attr(node, name)
    return None if raw is None else _parse_int(node, name, raw)


def _optional_flag(node: ET.Element, name: str) -> bool | None:
    raw = _attr(node, name)
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in ("1", "true"):
        return True
    if value in ("0", "false"):
        return False
    raise MalformedInput(f"<{node.tag}> {name}: expected 0 or 1, got '{raw}'")


def _text_events(node: ET.Element) -> tuple[TextEvent, ...]:
    events: list[TextEvent] = []
    for child in node:
        if child.tag.lower() != "textevent":
            continue
        events.append(
            TextEvent(
                text=child.get("message", ""),
                offset=_int(child, "timeoffset"),
            )
        )
    return tuple(events)


def _decode_segment(node: ET.Element) -> Segment | None:
    tag = node.tag.lower()
    if tag in _RAMP_TAGS:
        fallback = _attr(node, "Power")
        low = _attr(node, "PowerLow") or fallback
        high = _attr(node, "PowerHigh") or fallback
        if low is None or high is None:
            raise MalformedInput(f"<{node.tag}> needs PowerLow and PowerHigh")
        return _RAMP_TAGS[tag](
            duration=_int(node, "Duration"),
            start_power=_parse_float(node, "PowerLow", low),
            end_power=_parse_float(node, "PowerHigh", high),
            cadence=_optional_int(node, "Cadence"),
            text_events=_text_events(node),
        )
    if tag == "steadystate":
        return SteadyState(
            duration=_int(node, "Duration"),
            power=_float(node, "Power"),
            cadence=_optional_int(node, "Cadence"),
            show_avg=_optional_flag(node, "show_avg"),
            text_events=_text_events(node),
        )
    if tag == "intervalst":
        return Intervals(
            repeat=_int(node, "Repeat"),
            on_duration=_int(node, "OnDuration"),
            on_power=_float(node, "OnPower"),
            off_duration=_int(node, "OffDuration"),
            off_power=_float(node, "OffPower"),
            cadence=_optional_int(node, "Cadence"),
            cadence_resting=_optional_int(node, "CadenceResting"),
            text_events=_text_events(node),
        )
    if tag == "freeride":
        flat_road = _optional_flag(node, "FlatRoad")
        return FreeRide(
            duration=_int(node, "Duration"),
            cadence=_optional_int(node, "Cadence"),
            disable_flat_road=None if flat_road is None else not flat_road,
            text_events=_text_events(node),
        )
    return None
