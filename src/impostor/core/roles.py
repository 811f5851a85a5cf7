"""Impostor assignment and per-player role cards."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from ..utils.rng import build_rng, weighted_index

FIRST_PLAYER_WEIGHT = 0.75


class Role(str, Enum):
    """What a player is for the current round."""
    CIVILIAN = "Civilian"
    IMPOSTOR = "Impostor"


@dataclass(frozen=True)
class RoleCard:
    """What one player sees when they reveal. Impostors get no word."""
    player: int
    role: Role
    word: Optional[str] = None

    @property
    def is_impostor(self) -> bool:
        return self.role == Role.IMPOSTOR


def initial_weights(players: int, first_player_weight: float = FIRST_PLAYER_WEIGHT) -> List[float]:
    """Weight vector with the first player discounted."""
    return [first_player_weight if index == 0 else 1.0 for index in range(players)]


def assign_impostors(
    players: int,
    impostors: int,
    *,
    rng: Optional[random.Random] = None,
    first_player_weight: float = FIRST_PLAYER_WEIGHT,
) -> List[bool]:
    """Choose impostor seats by weighted sampling without replacement.

    Each draw picks an index with probability proportional to its remaining
    weight, then zeroes that weight. The first player starts at a reduced
    weight so they are slightly less likely to be an impostor.

    Callers are expected to have validated ``1 <= impostors < players``.

    Args:
        players: Number of players at the table
        impostors: Number of impostor seats to fill
        rng: Random number generator (a fresh unseeded one when omitted)
        first_player_weight: Starting weight of index 0

    Returns:
        One flag per player index, True for impostors
    """
    rng = rng or build_rng()
    weights = initial_weights(players, first_player_weight)
    chosen: List[int] = []

    for _ in range(impostors):
        pick = weighted_index(rng, weights)
        if pick is None:
            break
        chosen.append(pick)
        weights[pick] = 0.0

    return [index in chosen for index in range(players)]


def impostor_indices(role_vector: Sequence[bool]) -> List[int]:
    """Return the player indices flagged as impostors."""
    return [index for index, flag in enumerate(role_vector) if flag]


def role_card(player: int, role_vector: Sequence[bool], secret_word: str) -> RoleCard:
    """Build the card shown to ``player`` (zero-based) for this round."""
    if not 0 <= player < len(role_vector):
        raise ValueError(f"Player {player} is out of range (0-{len(role_vector) - 1})")
    if role_vector[player]:
        return RoleCard(player=player, role=Role.IMPOSTOR)
    return RoleCard(player=player, role=Role.CIVILIAN, word=secret_word)
