"""Key-value preference store used for settings and saved workouts."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol

from zwobuilder.core.constants import default_store_path

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...

    def list(self, prefix: str = "") -> list[tuple[str, Any]]: ...


class MemoryStore:
    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def list(self, prefix: str = "") -> list[tuple[str, Any]]:
        return sorted((k, v) for k, v in self._data.items() if k.startswith(prefix))


class JsonFileStore(MemoryStore):
    """MemoryStore persisted as one JSON document, rewritten on each change."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_store_path()
        super().__init__(self._read())

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable preference store %s", self.path)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring preference store %s: root is not an object", self.path)
            return {}
        return payload

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._data, ensure_ascii=True, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def set(self, key: str, value: Any) -> None:
        super().set(key, value)
        self._write()

    def delete(self, key: str) -> None:
        super().delete(key)
        self._write()
