# chuk_ai_credit_manager/storage/providers/file.py
"""
File-backed key/value store.

One UTF-8 file per key inside a directory. Changes written by other
processes are picked up by ``poll()``, which reports every key whose
content differs from what this instance last saw.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path

from chuk_ai_credit_manager.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")
_SUFFIX = ".txt"


class FileKeyValueStore(KeyValueStore):
    """Stores each value in ``<directory>/<key>.txt``."""

    def __init__(self, directory: str | os.PathLike[str]):
        super().__init__()
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)
        self._seen: dict[str, str] = {key: value for key in self.keys() if (value := self.get(key)) is not None}

    @property
    def directory(self) -> Path:
        return self._directory

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        # Write to a temp file and rename so readers never see half a value.
        fd, tmp = tempfile.mkstemp(dir=self._directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        self._seen[key] = value

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
        self._seen.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(p.name[: -len(_SUFFIX)] for p in self._directory.glob(f"*{_SUFFIX}") if not p.name.startswith("."))

    def poll(self) -> list[str]:
        """Report external changes to listeners; returns the changed keys."""
        current = {key: value for key in self.keys() if (value := self.get(key)) is not None}
        changes: list[tuple[str, str | None]] = [(k, v) for k, v in current.items() if self._seen.get(k) != v]
        changes.extend((k, None) for k in sorted(set(self._seen) - set(current)))
        self._seen = current
        changed = [key for key, _ in changes]
        for key, value in changes:
            self._emit_change(key, value)
        if changed:
            logger.debug(f"Detected external changes in {self._directory}: {changed}")
        return changed

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}{_SUFFIX}"
