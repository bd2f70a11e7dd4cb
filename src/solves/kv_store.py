"""Key-value stores holding serialized solve history.

Both stores speak ``get(key) -> str | None`` and ``set(key, value)``.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

log = logging.getLogger("cubetimer.solves.kv_store")


class MemoryStore:
    """Process-local store, used for tests and session-only runs."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """All keys in one JSON object file.

    Writes go to a temporary file in the same directory followed by
    os.replace, so a crash never leaves a half-written file behind.
    A missing or unreadable file reads as empty.
    """

    def __init__(self, path):
        self.path = Path(path).expanduser()

    def _read_all(self) -> dict:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            log.warning("Store file %s unreadable (%s), treating as empty", self.path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Store file %s is not a JSON object, treating as empty", self.path)
            return {}
        return data

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
