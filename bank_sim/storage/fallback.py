"""
Fallback store (backend B) — synchronous key-value storage on local disk.

Interface:
    store.get_item(key)        -> str | None
    store.set_item(key, value) -> None

One file per key inside a directory. Writes go to a temporary file first and
are then renamed over the target, so a crash mid-write leaves the previous
snapshot intact. Disk errors (full disk, permissions) raise OSError; the
persistence gateway catches them.
"""

import os
import re
from pathlib import Path
from typing import Protocol


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


class FallbackStore(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class FileKeyValueStore:
    """Stores each key as `<directory>/<key>.json`."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        # Keys become file names, so they must not contain path separators
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f"{path.name}.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        os.replace(tmp_path, path)
