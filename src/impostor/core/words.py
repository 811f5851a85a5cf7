"""Non-repeating word selection over persisted per-pool history."""

from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Set

import structlog

from ..config.settings import DEFAULT_KEY_PREFIX
from ..utils.rng import build_rng, pick_uniform
from .schemas import RecordKind, load_record
from .store import KeyValueStore

LOGGER = structlog.get_logger(__name__)

ResetConfirmer = Callable[[str], bool]


def category_pool_key(category_id: str) -> str:
    """Pool key for a named category; independent of the category's words."""
    return f"category_{category_id}"


def custom_pool_key(words: Sequence[str]) -> str:
    """Pool key for an ad hoc list, derived from its content in order.

    Matching is case-insensitive, so ``["Sol"]`` and ``["sol"]`` share history.
    """
    digest = hashlib.sha1("\n".join(words).lower().encode("utf-8")).hexdigest()
    return f"custom_{digest[:16]}"


def distinct_words(pool: Iterable[str]) -> List[str]:
    """Return the pool without duplicates, first occurrence order kept."""
    return list(dict.fromkeys(pool))


@dataclass
class WordPoolTracker:
    """Durable record of which words each pool has already shown."""

    store: KeyValueStore
    key_prefix: str = DEFAULT_KEY_PREFIX

    def storage_key(self, pool_key: str) -> str:
        return f"{self.key_prefix}used_{pool_key}"

    def load(self, pool_key: str) -> Set[str]:
        words = load_record(
            self.store,
            kind=RecordKind.USED_WORDS,
            key=self.storage_key(pool_key),
            default=list,
        )
        return set(words)

    def save(self, pool_key: str, used: Set[str]) -> None:
        self.store.set(self.storage_key(pool_key), sorted(used))

    def clear(self, pool_key: str) -> None:
        self.save(pool_key, set())
        LOGGER.info("pool.history_cleared", pool_key=pool_key)

    def remaining(self, pool: Sequence[str], pool_key: str) -> List[str]:
        """Distinct words of ``pool`` not yet shown, in pool order."""
        used = self.load(pool_key)
        return [word for word in distinct_words(pool) if word not in used]


@dataclass
class WordSelector:
    """Draws secret words so that no word repeats until its pool is spent."""

    tracker: WordPoolTracker
    rng: random.Random = field(default_factory=build_rng)

    def select_next(self, pool: Sequence[str], pool_key: str) -> Optional[str]:
        """Return an unused word from ``pool`` and record it, or None when exhausted.

        Stale history entries that are no longer in the pool are ignored.
        An empty pool is reported exactly like a spent one.
        """
        used = self.tracker.load(pool_key)
        available = [word for word in distinct_words(pool) if word not in used]
        if not available:
            LOGGER.info("pool.exhausted", pool_key=pool_key, pool_size=len(pool))
            return None

        word = pick_uniform(self.rng, available)
        used.add(word)
        self.tracker.save(pool_key, used)
        LOGGER.debug("pool.word_selected", pool_key=pool_key, remaining=len(available) - 1)
        return word

    def select_with_reset(
        self,
        pool: Sequence[str],
        pool_key: str,
        confirm_reset: Optional[ResetConfirmer] = None,
    ) -> Optional[str]:
        """Select a word, offering one history reset if the pool is spent.

        ``confirm_reset`` is asked at most once. When it declines, or when the
        pool is still exhausted after the reset (an empty pool), None is
        returned and the caller should abort.
        """
        resets_left = 1
        while True:
            word = self.select_next(pool, pool_key)
            if word is not None:
                return word
            if resets_left == 0 or confirm_reset is None or not confirm_reset(pool_key):
                return None
            resets_left -= 1
            self.tracker.clear(pool_key)
