"""Core game logic and data structures."""

from . import categories, fsm, roles, rulesets, schemas, store, words

__all__ = ["categories", "fsm", "roles", "rulesets", "schemas", "store", "words"]
