"""Pydantic contracts for persisted records."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, List, TypeVar

import structlog
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from .store import KeyValueStore

LOGGER = structlog.get_logger(__name__)

T = TypeVar("T")


class RecordKind(str, Enum):
    """Kinds of records kept in the store."""
    CATEGORIES = "categories"
    CUSTOM_WORDS = "custom_words"
    USED_WORDS = "used_words"


class Category(BaseModel):
    """A named word pool. ``id`` is fixed at creation and keys the pool's history."""
    id: str = Field(..., min_length=1)
    name: str
    words: List[str] = Field(default_factory=list)


CATEGORY_LIST = TypeAdapter(List[Category])
WORD_LIST = TypeAdapter(List[str])

_ADAPTERS = {
    RecordKind.CATEGORIES: CATEGORY_LIST,
    RecordKind.CUSTOM_WORDS: WORD_LIST,
    RecordKind.USED_WORDS: WORD_LIST,
}


class StorageError(Exception):
    """Raised when a stored record does not have the expected shape."""
    def __init__(self, kind: RecordKind, key: str, errors: list):
        self.kind = kind
        self.key = key
        self.errors = errors
        super().__init__(f"Malformed {kind.value} record at {key!r}: {errors}")


def validate_record(*, kind: RecordKind, key: str, payload: Any) -> Any:
    """Validate a raw stored value and return the typed record or raise StorageError."""
    adapter = _ADAPTERS[kind]
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise StorageError(kind, key, exc.errors()) from exc


def load_record(
    store: KeyValueStore,
    *,
    kind: RecordKind,
    key: str,
    default: Callable[[], T],
) -> T:
    """Load and validate ``key``; missing or malformed values yield ``default()``."""
    raw = store.get(key)
    if raw is None:
        return default()
    try:
        return validate_record(kind=kind, key=key, payload=raw)
    except StorageError as exc:
        LOGGER.warning("store.record_invalid", kind=kind.value, key=key, errors=len(exc.errors))
        return default()


def dump_categories(categories: List[Category]) -> List[dict]:
    """Convert categories to plain data for the store."""
    return [category.model_dump() for category in categories]
