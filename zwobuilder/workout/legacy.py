"""Legacy .erg / .mrc course file decoders.

Both formats share a bracketed header followed by cumulative-time control
points (``<minutes> <value>``). ERG values are watts referenced to the
header ``FTP`` line, MRC values are percent of threshold.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass

from zwobuilder.core.constants import ERG_EXTENSION, MRC_EXTENSION
from zwobuilder.workout.errors import EmptyDecode, InvariantViolation, MalformedInput
from zwobuilder.workout.model import FreeRide, Ramp, Segment, SteadyState, Workout

logger = logging.getLogger(__name__)

_SECTION_RE = re.compile(r"^\[(?P<name>[^\]]+)\]$")
_HEADER_RE = re.compile(r"^(?P<key>[A-Za-z ]+?)\s*=\s*(?P<value>.*)$")


@dataclass(frozen=True)
class _ControlPoint:
    seconds: int
    power: float


@dataclass(frozen=True)
class _Header:
    values: dict[str, str]
    units: str | None


def load_erg(text: str) -> Workout:
    """Decode an .erg course (watts against the header FTP)."""
    header, points = _split(text, ERG_EXTENSION)
    raw_ftp = header.values.get("FTP")
    if raw_ftp is None:
        raise MalformedInput("ERG file has no FTP line in its course header")
    try:
        ftp = float(raw_ftp)
    except ValueError as exc:
        raise MalformedInput(f"ERG file has an invalid FTP value '{raw_ftp}'") from exc
    if not math.isfinite(ftp) or ftp <= 0:
        raise MalformedInput("ERG FTP must be > 0")
    if header.units is not None and header.units != "WATTS":
        raise MalformedInput(f"ERG data columns must be MINUTES WATTS, got {header.units}")
    return _build(header, [_ControlPoint(t, value / ftp) for t, value in points], ERG_EXTENSION)


def load_mrc(text: str) -> Workout:
    """Decode an .mrc course (percent of threshold)."""
    header, points = _split(text, MRC_EXTENSION)
    if header.units is not None and header.units != "PERCENT":
        raise MalformedInput(f"MRC data columns must be MINUTES PERCENT, got {header.units}")
    return _build(header, [_ControlPoint(t, value / 100.0) for t, value in points], MRC_EXTENSION)


def _split(text: str, kind: str) -> tuple[_Header, list[tuple[int, float]]]:
    values: dict[str, str] = {}
    units: str | None = None
    points: list[tuple[int, float]] = []
    section: str | None = None
    saw_data = False

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith(";"):
            continue
        match = _SECTION_RE.match(line)
        if match:
            section = match.group("name").strip().upper()
            saw_data = saw_data or section == "COURSE DATA"
            continue

        if section == "COURSE HEADER":
            header_match = _HEADER_RE.match(line)
            if header_match:
                values[header_match.group("key").strip().upper()] = header_match.group("value").strip()
                continue
            columns = line.upper().split()
            if len(columns) == 2 and columns[0] == "MINUTES":
                units = columns[1]
                continue
            logger.debug("%s line %d: ignoring header line %r", kind, line_no, line)
        elif section == "COURSE DATA":
            point = _parse_point(line)
            if point is None:
                logger.debug("%s line %d: skipping malformed data line %r", kind, line_no, line)
                continue
            points.append(point)
        else:
            logger.debug("%s line %d: ignoring line outside known sections", kind, line_no)

    if not saw_data:
        raise MalformedInput(f"{kind} file has no [COURSE DATA] section")
    return _Header(values=values, units=units), points


def _parse_point(line: str) -> tuple[int, float] | None:
    columns = line.replace(",", " ").split()
    if len(columns) < 2:
        return None
    try:
        minutes = float(columns[0])
        value = float(columns[1])
    except ValueError:
        return None
    if not math.isfinite(minutes) or not math.isfinite(value) or minutes < 0 or value < 0:
        return None
    return int(round(minutes * 60)), value


def _build(header: _Header, points: list[_ControlPoint], kind: str) -> Workout:
    segments = _segments_from_points(points)
    if not segments:
        raise EmptyDecode(f"{kind} file did not contain any usable workout segment")
    return Workout(
        name=header.values.get("FILE NAME", ""),
        description=header.values.get("DESCRIPTION", ""),
        segments=segments,
    )


def _segments_from_points(points: list[_ControlPoint]) -> list[Segment]:
    segments: list[Segment] = []
    for start, end in zip(points, points[1:]):
        duration = end.seconds - start.seconds
        if duration <= 0:
            # vertical step or out-of-order point
            continue
        try:
            if start.power == end.power == 0:
                _append_rest(segments, duration)
            elif start.power <= 0 or end.power <= 0:
                raise MalformedInput(f"Span at {start.seconds}s slopes to or from zero power")
            elif start.power == end.power:
                _append_steady(segments, duration, start.power)
            else:
                segments.append(
                    Ramp(duration=duration, start_power=start.power, end_power=end.power)
                )
        except InvariantViolation as exc:
            raise MalformedInput(f"Invalid span at {start.seconds}s: {exc}") from exc
    return segments


def _append_rest(segments: list[Segment], duration: int) -> None:
    previous = segments[-1] if segments else None
    if isinstance(previous, FreeRide):
        segments[-1] = FreeRide(duration=previous.duration + duration)
        return
    segments.append(FreeRide(duration=duration))


def _append_steady(segments: list[Segment], duration: int, power: float) -> None:
    previous = segments[-1] if segments else None
    if isinstance(previous, SteadyState) and previous.power == power:
        segments[-1] = SteadyState(duration=previous.duration + duration, power=power)
        return
    segments.append(SteadyState(duration=duration, power=power))
