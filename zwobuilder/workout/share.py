"""Compact share-link codec.

A workout is flattened into a positional JSON array, zlib-compressed and
written as unpadded URL-safe base64. The link carries two query
parameters: ``n`` holds the format tag, ``w`` the token.

Row layout per segment kind (``events`` is ``[[offset, text], ...]``)::

    ["w"|"c"|"r", duration, start_power, end_power, cadence, events]
    ["s", duration, power, cadence, show_avg, events]
    ["i", repeat, on_duration, on_power, off_duration, off_power, cadence, cadence_resting, events]
    ["f", duration, cadence, disable_flat_road, events]
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import math
import zlib
from typing import Any, Mapping
from urllib.parse import parse_qs, urlencode, urlsplit

from zwobuilder.core.constants import URL_FORMAT_PARAM, URL_FORMAT_TAG, URL_PAYLOAD_PARAM
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

_RAMP_CODES: dict[str, type] = {"w": Warmup, "c": Cooldown, "r": Ramp}
_RAMP_KINDS: dict[type, str] = {cls: code for code, cls in _RAMP_CODES.items()}


# -- encode -------------------------------------------------------------


def _events_row(segment: Segment) -> list[list[Any]]:
    return [[event.offset, event.text] for event in segment.text_events]


def _segment_row(segment: Segment) -> list[Any]:
    if isinstance(segment, (Warmup, Cooldown, Ramp)):
        return [
            _RAMP_KINDS[type(segment)],
            segment.duration,
            segment.start_power,
            segment.end_power,
            segment.cadence,
            _events_row(segment),
        ]
    if isinstance(segment, SteadyState):
        return ["s", segment.duration, segment.power, segment.cadence, segment.show_avg, _events_row(segment)]
    if isinstance(segment, Intervals):
        return [
            "i",
            segment.repeat,
            segment.on_duration,
            segment.on_power,
            segment.off_duration,
            segment.off_power,
            segment.cadence,
            segment.cadence_resting,
            _events_row(segment),
        ]
    if isinstance(segment, FreeRide):
        return ["f", segment.duration, segment.cadence, segment.disable_flat_road, _events_row(segment)]
    raise unknown_segment(segment)


def encode_token(workout: Workout) -> str:
    payload = [
        workout.name,
        workout.description,
        workout.author,
        list(workout.tags),
        [_segment_row(segment) for segment in workout.segments],
    ]
    raw = json.dumps(payload, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    packed = zlib.compress(raw.encode("utf-8"), 9)
    return base64.urlsafe_b64encode(packed).decode("ascii").rstrip("=")


def share_query(workout: Workout) -> dict[str, str]:
    return {URL_FORMAT_PARAM: URL_FORMAT_TAG, URL_PAYLOAD_PARAM: encode_token(workout)}


def share_url(workout: Workout, base_url: str) -> str:
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode(share_query(workout))}"


# -- decode -------------------------------------------------------------


def _expect(condition: bool, message: str) -> None:
    if not condition:
        raise MalformedInput(f"Invalid share token: {message}")


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: object) -> bool:
    if _is_int(value):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _check_types(row: list[Any], layout: str) -> None:
    """Validate ``row[1:]`` against a compact type string.

    ``i`` int, ``n`` number, ``I`` int or null, ``B`` bool or null,
    ``e`` text event list.
    """
    _expect(len(row) == len(layout) + 1, f"segment '{row[0]}' expects {len(layout) + 1} fields")
    for value, code in zip(row[1:], layout):
        if code == "i":
            ok = _is_int(value)
        elif code == "n":
            ok = _is_number(value)
        elif code == "I":
            ok = value is None or _is_int(value)
        elif code == "B":
            ok = value is None or isinstance(value, bool)
        else:
            ok = isinstance(value, list) and all(
                isinstance(item, list)
                and len(item) == 2
                and _is_int(item[0])
                and isinstance(item[1], str)
                for item in value
            )
        _expect(ok, f"segment '{row[0]}' has a field of the wrong type")


def _events(rows: list[list[Any]]) -> tuple[TextEvent, ...]:
    return tuple(TextEvent(text=text, offset=offset) for offset, text in rows)


def _segment_from_row(row: object) -> Segment:
    _expect(isinstance(row, list) and len(row) > 0 and isinstance(row[0], str), "segment row")
    code = row[0]
    if code in _RAMP_CODES:
        _check_types(row, "innIe")
        _, duration, start, end, cadence, events = row
        return _RAMP_CODES[code](
            duration=duration,
            start_power=start,
            end_power=end,
            cadence=cadence,
            text_events=_events(events),
        )
    if code == "s":
        _check_types(row, "inIBe")
        _, duration, power, cadence, show_avg, events = row
        return SteadyState(
            duration=duration,
            power=power,
            cadence=cadence,
            show_avg=show_avg,
            text_events=_events(events),
        )
    if code == "i":
        _check_types(row, "iininIIe")
        _, repeat, on_d, on_p, off_d, off_p, cadence, resting, events = row
        return Intervals(
            repeat=repeat,
            on_duration=on_d,
            on_power=on_p,
            off_duration=off_d,
            off_power=off_p,
            cadence=cadence,
            cadence_resting=resting,
            text_events=_events(events),
        )
    if code == "f":
        _check_types(row, "iIBe")
        _, duration, cadence, flat_road, events = row
        return FreeRide(
            duration=duration,
            cadence=cadence,
            disable_flat_road=flat_road,
            text_events=_events(events),
        )
    raise MalformedInput(f"Invalid share token: unknown segment kind '{code}'")


def decode_token(token: str) -> Workout:
    _expect(isinstance(token, str) and token != "", "empty token")
    padded = token + "=" * (-len(token) % 4)
    try:
        packed = base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
        raw = zlib.decompress(packed).decode("utf-8")
        payload = json.loads(raw)
    except (binascii.Error, UnicodeError, zlib.error, ValueError) as exc:
        raise MalformedInput(f"Invalid share token: {exc}") from exc

    _expect(isinstance(payload, list) and len(payload) == 5, "top-level layout")
    name, description, author, tags, rows = payload
    _expect(
        isinstance(name, str) and isinstance(description, str) and isinstance(author, str),
        "metadata must be strings",
    )
    _expect(isinstance(tags, list) and all(isinstance(tag, str) for tag in tags), "tags")
    _expect(isinstance(rows, list), "segment list")

    try:
        segments = [_segment_from_row(row) for row in rows]
    except InvariantViolation as exc:
        raise MalformedInput(f"Invalid share token: {exc}") from exc
    return Workout(name=name, description=description, author=author, tags=tags, segments=segments)


def workout_from_query(query: str | Mapping[str, str]) -> Workout | None:
    """Decode a shared workout from a query string, full URL or mapping.

    Returns None when either parameter is missing.
    """
    if isinstance(query, str):
        text = urlsplit(query).query if "://" in query else query.lstrip("?")
        parsed = parse_qs(text, keep_blank_values=True)
        params = {key: values[0] for key, values in parsed.items()}
    else:
        params = dict(query)

    tag = params.get(URL_FORMAT_PARAM)
    token = params.get(URL_PAYLOAD_PARAM)
    if tag is None or token is None:
        logger.debug("No shared workout in query")
        return None
    if tag != URL_FORMAT_TAG:
        raise MalformedInput(f"Unsupported share format '{tag}'")
    return decode_token(token)
