"""Durable key-value stores backing categories, the custom list and used-word sets."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import orjson
import structlog

LOGGER = structlog.get_logger(__name__)


class KeyValueStore(Protocol):
    """Minimal get/set/delete contract shared by every store backend."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


@dataclass
class MemoryStore:
    """Process-local store, used by tests and throwaway sessions."""

    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str) -> Optional[Any]:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self.data.keys())


@dataclass
class JsonFileStore:
    """Store every key in a single JSON document on disk.

    The whole document is re-read on each access and rewritten on each
    mutation through a temporary file, so the file on disk is always either
    the old or the new version. An unreadable or non-object document is
    treated as empty; the next write replaces it.
    """

    path: Path

    def get(self, key: str) -> Optional[Any]:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def keys(self) -> list[str]:
        return sorted(self._read().keys())

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = orjson.loads(self.path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as exc:
            LOGGER.warning("store.corrupt", path=str(self.path), error=str(exc))
            return {}
        if not isinstance(data, dict):
            LOGGER.warning("store.corrupt", path=str(self.path), error="top-level value is not an object")
            return {}
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        """Replace the document on disk. A failed write is logged and the old file kept."""
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))
            os.replace(tmp_path, self.path)
        except OSError as exc:
            LOGGER.warning("store.write_failed", path=str(self.path), error=str(exc))
        finally:
            if tmp_path.exists():
                tmp_path.unlink()
