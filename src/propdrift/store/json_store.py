"""Filesystem JSON store.

Layout under ``cache_dir``::

    interface-cache.json     latest snapshot
    interface-history.json   bounded history

Each save writes a sibling temp file and renames it over the target, so a
reader never sees a half-written blob.  There is no locking: concurrent
writers race and the last rename wins.
"""

from __future__ import annotations

import contextlib
import json
import os
from pathlib import Path
from typing import Any

import structlog

from propdrift.config.constants import HISTORY_FILE_NAME, SNAPSHOT_FILE_NAME
from propdrift.core.errors import StoreError
from propdrift.store.base import InterfaceStore

log = structlog.get_logger(__name__)


class JsonFileStore(InterfaceStore):
    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = Path(cache_dir)

    @property
    def snapshot_path(self) -> Path:
        return self.cache_dir / SNAPSHOT_FILE_NAME

    @property
    def history_path(self) -> Path:
        return self.cache_dir / HISTORY_FILE_NAME

    def load_snapshot(self) -> dict[str, Any] | None:
        return self._read(self.snapshot_path)

    def save_snapshot(self, data: dict[str, Any]) -> None:
        self._write(self.snapshot_path, data)

    def load_history(self) -> dict[str, Any] | None:
        return self._read(self.history_path)

    def save_history(self, data: dict[str, Any]) -> None:
        self._write(self.history_path, data)

    def _read(self, path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise StoreError.read_failed(str(path), str(e)) from e
        except ValueError as e:  # JSONDecodeError, UnicodeDecodeError
            raise StoreError.corrupt(str(path), str(e)) from e
        if not isinstance(data, dict):
            raise StoreError.corrupt(str(path), f"expected object, got {type(data).__name__}")
        return data

    def _write(self, path: Path, data: dict[str, Any]) -> None:
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise StoreError.write_failed(str(path), str(e)) from e
        log.debug("store_written", path=str(path))
