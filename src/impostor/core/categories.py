"""Named word categories and the persisted custom word list."""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import structlog

from ..config.presets import get_default_categories
from ..config.settings import DEFAULT_KEY_PREFIX
from .schemas import CATEGORY_LIST, Category, RecordKind, dump_categories, load_record
from .store import KeyValueStore

LOGGER = structlog.get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")
_LINE_BREAK = re.compile(r"\r?\n")


class CategoryError(ValueError):
    """Raised when a category edit is rejected."""


def split_by_lines(text: str) -> List[str]:
    """Split pasted text into words, one per line, dropping blank lines."""
    return [line.strip() for line in _LINE_BREAK.split(text) if line.strip()]


def make_category_id(name: str) -> str:
    """Slug of ``name`` plus a short random suffix."""
    return f"{_WHITESPACE.sub('-', name.lower())}-{uuid.uuid4().hex[:7]}"


def _default_categories() -> List[Category]:
    return CATEGORY_LIST.validate_python(get_default_categories())


@dataclass
class CategoryManager:
    """Create, edit and delete categories.

    The collection is read from the store on every call and written back whole
    after each mutation. A missing or malformed collection is replaced by the
    built-in presets.
    """

    store: KeyValueStore
    key_prefix: str = DEFAULT_KEY_PREFIX
    id_factory: Callable[[str], str] = make_category_id

    @property
    def storage_key(self) -> str:
        return f"{self.key_prefix}categories_v3"

    def list_all(self) -> List[Category]:
        return load_record(
            self.store,
            kind=RecordKind.CATEGORIES,
            key=self.storage_key,
            default=_default_categories,
        )

    def get(self, category_id: str) -> Optional[Category]:
        return next((category for category in self.list_all() if category.id == category_id), None)

    def create(self, name: str, words: Sequence[str]) -> Category:
        name = name.strip()
        if not name:
            raise CategoryError("Category name must not be blank")
        if not words:
            raise CategoryError("A category needs at least one word")

        category = Category(id=self.id_factory(name), name=name, words=list(words))
        categories = self.list_all()
        categories.append(category)
        self._save(categories)
        LOGGER.info("category.created", category_id=category.id, words=len(category.words))
        return category

    def update(self, category_id: str, name: str, words: Sequence[str]) -> Category:
        """Rename and replace the words of a category. A blank name keeps the old one.

        The id is unchanged, so the category keeps its used-word history even
        when its words change.
        """
        categories = self.list_all()
        for index, category in enumerate(categories):
            if category.id == category_id:
                updated = Category(id=category.id, name=name.strip() or category.name, words=list(words))
                categories[index] = updated
                self._save(categories)
                LOGGER.info("category.updated", category_id=category_id, words=len(updated.words))
                return updated
        raise CategoryError(f"Unknown category {category_id!r}")

    def delete(self, category_id: str) -> None:
        categories = self.list_all()
        remaining = [category for category in categories if category.id != category_id]
        if len(remaining) == len(categories):
            raise CategoryError(f"Unknown category {category_id!r}")
        self._save(remaining)
        LOGGER.info("category.deleted", category_id=category_id)

    def _save(self, categories: List[Category]) -> None:
        self.store.set(self.storage_key, dump_categories(categories))


@dataclass
class CustomWordList:
    """The ad hoc word list typed in for a quick game."""

    store: KeyValueStore
    key_prefix: str = DEFAULT_KEY_PREFIX

    @property
    def storage_key(self) -> str:
        return f"{self.key_prefix}custom_words_list_v3"

    def load(self) -> List[str]:
        return load_record(
            self.store,
            kind=RecordKind.CUSTOM_WORDS,
            key=self.storage_key,
            default=list,
        )

    def save(self, words: Sequence[str]) -> None:
        self.store.set(self.storage_key, list(words))

    def clear(self) -> None:
        self.save([])
