"""User-saved workouts stored as .zwo XML on the key-value store."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from zwobuilder.core.store import KeyValueStore
from zwobuilder.workout.errors import MalformedInput
from zwobuilder.workout.model import Workout
from zwobuilder.workout.zwo import from_zwo_xml, to_zwo_xml

logger = logging.getLogger(__name__)

WORKOUT_PREFIX = "workouts/"
EDITING_KEY = "editing/workout"


class WorkoutExists(ValueError):
    """Raised when saving would overwrite a workout without permission."""


@dataclass(frozen=True)
class SavedWorkout:
    name: str
    workout: Workout


def _key(name: str) -> str:
    return WORKOUT_PREFIX + name


def save_my_workout(store: KeyValueStore, workout: Workout, *, overwrite: bool = False) -> str:
    if not workout.name:
        raise ValueError("Workout needs a name before it can be saved")
    key = _key(workout.name)
    if not overwrite and store.get(key) is not None:
        raise WorkoutExists(f"You already have a workout named {workout.name}")
    store.set(key, to_zwo_xml(workout))
    return key


def get_my_workout(store: KeyValueStore, name: str) -> Workout | None:
    raw = store.get(_key(name))
    if raw is None:
        return None
    return from_zwo_xml(raw)


def list_my_workouts(store: KeyValueStore) -> list[SavedWorkout]:
    out: list[SavedWorkout] = []
    for key, raw in store.list(WORKOUT_PREFIX):
        try:
            workout = from_zwo_xml(raw)
        except MalformedInput as exc:
            logger.warning("Skipping unreadable saved workout %s: %s", key, exc)
            continue
        out.append(SavedWorkout(name=key[len(WORKOUT_PREFIX):], workout=workout))
    return sorted(out, key=lambda item: item.name)


def delete_my_workout(store: KeyValueStore, name: str) -> None:
    store.delete(_key(name))


def stash_workout_for_editing(store: KeyValueStore, workout: Workout) -> None:
    store.set(EDITING_KEY, to_zwo_xml(workout))


def take_workout_for_editing(store: KeyValueStore) -> Workout | None:
    """Return the stashed workout and clear the slot."""
    raw = store.get(EDITING_KEY)
    if raw is None:
        return None
    store.delete(EDITING_KEY)
    return from_zwo_xml(raw)
