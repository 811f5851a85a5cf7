"""Round engine for The Impostor, a pass-the-device social deduction party game."""

from . import host
from .core import categories, fsm, roles, rulesets, schemas, store, words
from .core.fsm import (
    FSMError,
    GameValidationError,
    Phase,
    PoolExhaustedError,
    RoundState,
    SessionError,
    SessionServices,
    SessionStateMachine,
)

__all__ = [
    "categories",
    "fsm",
    "host",
    "roles",
    "rulesets",
    "schemas",
    "store",
    "words",
    "FSMError",
    "GameValidationError",
    "Phase",
    "PoolExhaustedError",
    "RoundState",
    "SessionError",
    "SessionServices",
    "SessionStateMachine",
]
