"""Finite state machine driving an impostor party session."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence

import structlog

from ..config.settings import EngineConfig
from ..utils.rng import build_rng
from .categories import CategoryError, CategoryManager, CustomWordList
from .roles import RoleCard, assign_impostors, impostor_indices, role_card
from .rulesets import RulesError, TableRules
from .schemas import Category
from .store import KeyValueStore
from .words import WordPoolTracker, WordSelector, category_pool_key, custom_pool_key

LOGGER = structlog.get_logger(__name__)


class Phase(str, Enum):
    """Session phases."""

    MENU = "menu"
    CATEGORIES = "categories"
    MANAGE = "manage"
    CUSTOM = "custom"
    PLAYERS = "players"
    REVEAL = "reveal"
    BETWEEN = "between"


TRANSITIONS: Dict[Phase, FrozenSet[Phase]] = {
    Phase.MENU: frozenset({Phase.CATEGORIES, Phase.CUSTOM}),
    Phase.CATEGORIES: frozenset({Phase.PLAYERS, Phase.MANAGE, Phase.MENU}),
    Phase.MANAGE: frozenset({Phase.CATEGORIES}),
    Phase.CUSTOM: frozenset({Phase.PLAYERS, Phase.MENU}),
    Phase.PLAYERS: frozenset({Phase.REVEAL, Phase.CATEGORIES, Phase.CUSTOM, Phase.MENU}),
    Phase.REVEAL: frozenset({Phase.REVEAL, Phase.BETWEEN, Phase.MENU}),
    Phase.BETWEEN: frozenset({Phase.REVEAL, Phase.MENU}),
}


class SessionError(RuntimeError):
    """Base class for rejected session actions. State is left unchanged."""


class FSMError(SessionError):
    """Raised when an action is not allowed in the current phase."""


class GameValidationError(SessionError):
    """Raised when counts or the word pool do not allow the requested action."""


class PoolExhaustedError(SessionError):
    """Raised when no fresh word could be drawn and the history was not reset."""

    def __init__(self, pool_key: str) -> None:
        self.pool_key = pool_key
        super().__init__(f"Every word in pool {pool_key!r} has been used")


ResetPrompt = Callable[[str], bool]


@dataclass
class SessionServices:
    """Callables the machine consults for user decisions."""

    confirm_reset: Optional[ResetPrompt] = None


@dataclass
class RoundState:
    """One dealt round: the secret word, who is an impostor, and whose turn it is."""

    round_num: int
    secret_word: str
    roles: List[bool]
    turn_index: int = 0
    revealed: bool = False

    @property
    def players(self) -> int:
        return len(self.roles)

    def is_last_turn(self) -> bool:
        return self.turn_index + 1 >= self.players

    def current_card(self) -> RoleCard:
        return role_card(self.turn_index, self.roles, self.secret_word)

    def impostors(self) -> List[int]:
        return impostor_indices(self.roles)


@dataclass
class SessionStateMachine:
    """Orchestrates phases, word selection and impostor assignment for one device.

    Every public action either completes or raises a :class:`SessionError`
    subclass without having changed the phase, the table rules or the round.
    """

    store: KeyValueStore
    config: EngineConfig = field(default_factory=EngineConfig)
    services: SessionServices = field(default_factory=SessionServices)
    rng: Optional[random.Random] = None

    phase: Phase = field(default=Phase.MENU, init=False)
    rules: TableRules = field(init=False)
    selected_category_id: Optional[str] = field(default=None, init=False)
    round: Optional[RoundState] = field(default=None, init=False)
    rounds_played: int = field(default=0, init=False)

    categories: CategoryManager = field(init=False)
    custom_words: CustomWordList = field(init=False)
    tracker: WordPoolTracker = field(init=False)
    selector: WordSelector = field(init=False)

    def __post_init__(self) -> None:
        if self.rng is None:
            self.rng = build_rng(seed=self.config.seed)
        prefix = self.config.key_prefix
        self.categories = CategoryManager(self.store, key_prefix=prefix)
        self.custom_words = CustomWordList(self.store, key_prefix=prefix)
        self.tracker = WordPoolTracker(self.store, key_prefix=prefix)
        self.selector = WordSelector(self.tracker, rng=self.rng)
        self.rules = self._default_rules()

    # ------------------------------------------------------------------
    # Pool
    # ------------------------------------------------------------------

    @property
    def selected_category(self) -> Optional[Category]:
        if self.selected_category_id is None:
            return None
        return self.categories.get(self.selected_category_id)

    @property
    def pool(self) -> List[str]:
        """Words of the selected category, or the custom list when none is selected."""
        category = self.selected_category
        if category is not None:
            return list(category.words)
        return self.custom_words.load()

    @property
    def pool_key(self) -> str:
        category = self.selected_category
        if category is not None:
            return category_pool_key(category.id)
        return custom_pool_key(self.pool)

    @property
    def pool_label(self) -> str:
        category = self.selected_category
        if category is not None:
            return category.name
        return f"Custom ({len(self.pool)})"

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def open_categories(self) -> None:
        self._transition(Phase.CATEGORIES, allowed_from={Phase.MENU})

    def open_custom(self) -> None:
        self._transition(Phase.CUSTOM, allowed_from={Phase.MENU})

    def open_manage(self) -> None:
        self._transition(Phase.MANAGE, allowed_from={Phase.CATEGORIES})

    def close_manage(self) -> None:
        self._transition(Phase.CATEGORIES, allowed_from={Phase.MANAGE})

    def back_to_menu(self) -> None:
        """Leave for the menu, discarding any round in progress but keeping settings."""
        self._transition(Phase.MENU, allowed_from={Phase.CATEGORIES, Phase.CUSTOM, Phase.PLAYERS, Phase.REVEAL})
        self.round = None

    def change_pool(self) -> None:
        """Go back to where the current pool was chosen."""
        target = Phase.CATEGORIES if self.selected_category is not None else Phase.CUSTOM
        self._transition(target, allowed_from={Phase.PLAYERS})

    def select_category(self, category_id: str) -> None:
        self._require(Phase.CATEGORIES)
        if self.categories.get(category_id) is None:
            raise GameValidationError(f"Unknown category {category_id!r}")
        self.selected_category_id = category_id
        self._transition(Phase.PLAYERS)

    def confirm_custom(self, words: Sequence[str]) -> None:
        """Adopt ``words`` as the custom pool and move on to table setup."""
        self._require(Phase.CUSTOM)
        if not words:
            raise GameValidationError("Add at least one word")
        self.custom_words.save(words)
        self.selected_category_id = None
        self._transition(Phase.PLAYERS)

    # ------------------------------------------------------------------
    # Category editing
    # ------------------------------------------------------------------

    def create_category(self, name: str, words: Sequence[str]) -> Category:
        self._require(Phase.MANAGE)
        return self._category_call(self.categories.create, name, words)

    def update_category(self, category_id: str, name: str, words: Sequence[str]) -> Category:
        self._require(Phase.MANAGE)
        return self._category_call(self.categories.update, category_id, name, words)

    def delete_category(self, category_id: str) -> None:
        self._require(Phase.MANAGE)
        self._category_call(self.categories.delete, category_id)
        if self.selected_category_id == category_id:
            self.selected_category_id = None

    def save_custom_as_category(self, name: str, words: Sequence[str]) -> Category:
        self._require(Phase.CUSTOM)
        return self._category_call(self.categories.create, name, words)

    # ------------------------------------------------------------------
    # Table setup
    # ------------------------------------------------------------------

    def set_players(self, players: int) -> TableRules:
        self._require(Phase.PLAYERS)
        self.rules = self.rules.with_players(players)
        return self.rules

    def set_impostors(self, impostors: int) -> TableRules:
        self._require(Phase.PLAYERS)
        self.rules = self.rules.with_impostors(impostors)
        return self.rules

    # ------------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------------

    def start_game(self) -> RoundState:
        """Validate the table and pool, then deal the first round."""
        self._require(Phase.PLAYERS)
        self.round = self._deal_round()
        self._transition(Phase.REVEAL)
        return self.round

    def toggle_reveal(self) -> bool:
        self._require(Phase.REVEAL)
        self.round.revealed = not self.round.revealed
        return self.round.revealed

    def next_player(self) -> None:
        """Hand the device to the next player, or end the reveal pass after the last one."""
        self._require(Phase.REVEAL)
        self.round.revealed = False
        if self.round.is_last_turn():
            self._transition(Phase.BETWEEN)
            LOGGER.info("round.reveal_complete", round_num=self.round.round_num)
        else:
            self.round.turn_index += 1
            self._transition(Phase.REVEAL)

    def next_round(self) -> RoundState:
        self._require(Phase.BETWEEN)
        self.round = self._deal_round()
        self._transition(Phase.REVEAL)
        return self.round

    def reset_all(self) -> None:
        """Return to the menu with default counts, no selection and an empty custom list."""
        self.round = None
        self.selected_category_id = None
        self.custom_words.clear()
        self.rules = self._default_rules()
        self.phase = Phase.MENU
        LOGGER.info("session.reset")

    def current_card(self) -> RoleCard:
        self._require(Phase.REVEAL)
        return self.round.current_card()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _deal_round(self) -> RoundState:
        """Check the table and pool, draw a word and assign impostors."""
        pool = self.pool
        self._validate_table(pool)
        pool_key = self.pool_key
        word = self.selector.select_with_reset(pool, pool_key, self.services.confirm_reset)
        if word is None:
            raise PoolExhaustedError(pool_key)

        roles = assign_impostors(
            self.rules.players,
            self.rules.impostors,
            rng=self.rng,
            first_player_weight=self.config.first_player_weight,
        )
        self.rounds_played += 1
        LOGGER.info(
            "round.started",
            round_num=self.rounds_played,
            pool_key=pool_key,
            players=self.rules.players,
            impostors=self.rules.impostors,
        )
        return RoundState(round_num=self.rounds_played, secret_word=word, roles=roles)

    def _validate_table(self, pool: Sequence[str]) -> None:
        try:
            self.rules.validate()
        except RulesError as exc:
            raise GameValidationError(str(exc)) from exc
        if not pool:
            raise GameValidationError("Load some words or pick a category first")

    def _default_rules(self) -> TableRules:
        base = TableRules(
            min_players=self.config.min_players,
            max_players=self.config.max_players,
            impostor_cap=self.config.max_impostors,
        )
        return base.with_players(self.config.default_players).with_impostors(self.config.default_impostors)

    def _category_call(self, func: Callable, *args):
        try:
            return func(*args)
        except CategoryError as exc:
            raise GameValidationError(str(exc)) from exc

    def _require(self, *phases: Phase) -> None:
        if self.phase not in phases:
            expected = ", ".join(phase.value for phase in phases)
            raise FSMError(f"Action requires phase {expected}; current phase is {self.phase.value}")

    def _transition(self, target: Phase, *, allowed_from: Optional[set] = None) -> None:
        if allowed_from is not None:
            self._require(*allowed_from)
        if target not in TRANSITIONS[self.phase]:
            raise FSMError(f"Illegal transition {self.phase.value} -> {target.value}")
        LOGGER.debug("session.transition", source=self.phase.value, target=target.value)
        self.phase = target
