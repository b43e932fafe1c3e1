"""Workout file loader/saver (.zwo, .erg, .mrc)."""

from __future__ import annotations

from pathlib import Path

from zwobuilder.core.constants import ERG_EXTENSION, MRC_EXTENSION, ZWO_EXTENSION
from zwobuilder.workout.errors import MalformedInput
from zwobuilder.workout.format import export_filename
from zwobuilder.workout.legacy import load_erg, load_mrc
from zwobuilder.workout.model import Workout
from zwobuilder.workout.zwo import from_zwo_xml, to_zwo_xml

SUPPORTED_EXTENSIONS = (ZWO_EXTENSION, ERG_EXTENSION, MRC_EXTENSION)


def load_workout(path: str | Path) -> Workout:
    file_path = Path(path)
    suffix = file_path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise MalformedInput(
            f"Unsupported workout format '{file_path.suffix}'. Use .zwo, .erg or .mrc"
        )
    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedInput(f"{file_path.name} is not UTF-8 text") from exc

    workout = load_workout_text(text, suffix)
    if not workout.name:
        workout.name = file_path.stem
    return workout


def load_workout_text(text: str, suffix: str) -> Workout:
    suffix = suffix.lower()
    if not suffix.startswith("."):
        suffix = f".{suffix}"
    if suffix == ZWO_EXTENSION:
        return from_zwo_xml(text)
    if suffix == ERG_EXTENSION:
        return load_erg(text)
    if suffix == MRC_EXTENSION:
        return load_mrc(text)
    raise MalformedInput(f"Unsupported workout format '{suffix}'. Use .zwo, .erg or .mrc")


def save_workout(workout: Workout, directory: str | Path) -> Path:
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    out = target_dir / export_filename(workout.name)
    out.write_text(to_zwo_xml(workout), encoding="utf-8")
    return out
