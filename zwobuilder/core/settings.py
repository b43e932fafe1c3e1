"""User settings persisted on the key-value store."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace

from zwobuilder.core.constants import DEFAULT_FTP_WATTS
from zwobuilder.core.store import KeyValueStore

SETTINGS_PREFIX = "settings."


@dataclass(frozen=True)
class UserSettings:
    ftp_watts: int = DEFAULT_FTP_WATTS
    display_tss: bool = True
    display_xp: bool = False
    display_time_in_minutes: bool = True
    display_absolute_power: bool = True
    enable_workout_insertion: bool = False
    enable_url_creation: bool = False


def load_settings(store: KeyValueStore) -> UserSettings:
    defaults = UserSettings()
    values: dict[str, object] = {}
    for item in fields(UserSettings):
        default = getattr(defaults, item.name)
        raw = store.get(SETTINGS_PREFIX + item.name)
        if raw is None:
            continue
        if isinstance(default, bool):
            if isinstance(raw, bool):
                values[item.name] = raw
        elif isinstance(raw, (int, float, str)) and not isinstance(raw, bool):
            try:
                number = int(float(raw))
            except (ValueError, OverflowError):
                continue
            if number > 0:
                values[item.name] = number
    return replace(defaults, **values)


def save_settings(store: KeyValueStore, settings: UserSettings) -> None:
    for key, value in asdict(settings).items():
        store.set(SETTINGS_PREFIX + key, value)
