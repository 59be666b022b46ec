"""Key-value stores used for word history and local score records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Protocol

from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

DEFAULT_STORE_PATH = Path("local_db/wordsearch_store.json")


class KeyValueStore(Protocol):
    """Minimal storage surface the engine depends on."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryStore:
    """Volatile store; the default when nothing needs to survive the process."""

    def __init__(self, initial: Dict[str, Any] | None = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Store backed by a single JSON document on disk.

    The whole document is rewritten on every ``set``. Read errors are logged
    and treated as an empty store, matching how a browser storage miss would
    behave.
    """

    def __init__(self, path: Path | str = DEFAULT_STORE_PATH) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            doc = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            LOGGER.warning("Store read error (%s): %s", self.path.name, exc)
            return {}
        if not isinstance(doc, dict):
            LOGGER.warning("Store %s is not a JSON object; ignoring", self.path.name)
            return {}
        return doc

    def _flush(self) -> None:
        try:
            self.path.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("Store write error (%s): %s", self.path.name, exc)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._flush()

    def delete(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()
