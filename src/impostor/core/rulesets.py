"""Table rules: how many players and impostors a round is dealt for.

Counts coming from the front end are clamped into range as they are entered;
``validate`` is the stricter check run right before a round is dealt.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

MIN_PLAYERS = 3
MAX_PLAYERS = 20
MAX_IMPOSTORS = 10
DEFAULT_PLAYERS = 6
DEFAULT_IMPOSTORS = 1


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class RulesError(ValueError):
    """Raised when the table cannot be dealt with the current counts."""


@dataclass(frozen=True)
class TableRules:
    """Player and impostor counts for the next round."""

    players: int = DEFAULT_PLAYERS
    impostors: int = DEFAULT_IMPOSTORS
    min_players: int = MIN_PLAYERS
    max_players: int = MAX_PLAYERS
    impostor_cap: int = MAX_IMPOSTORS

    @property
    def max_impostors(self) -> int:
        """Largest impostor count the entry field allows for this many players."""
        return clamp(self.players // 2, 1, self.impostor_cap)

    def with_players(self, players: int) -> "TableRules":
        """Return rules with ``players`` clamped and impostors re-clamped to match.

        The lower bound is 1, not ``min_players``: small tables can be entered
        and are rejected by :meth:`validate` when a round starts.
        """
        updated = replace(self, players=clamp(players, 1, self.max_players))
        return replace(updated, impostors=clamp(updated.impostors, 1, updated.max_impostors))

    def with_impostors(self, impostors: int) -> "TableRules":
        """Return rules with ``impostors`` clamped to ``1..max_impostors``."""
        return replace(self, impostors=clamp(impostors, 1, self.max_impostors))

    def validate(self) -> None:
        """Check the counts can be dealt.

        Raises:
            RulesError: If there are too few players or the impostor count is
                outside ``1..players // 2``
        """
        if self.players < self.min_players:
            raise RulesError(f"At least {self.min_players} players are required (got {self.players})")
        if not 1 <= self.impostors <= self.players // 2:
            raise RulesError(
                f"Impostors must be between 1 and {self.players // 2} for {self.players} players "
                f"(got {self.impostors})"
            )

    def describe(self) -> str:
        noun = "impostor" if self.impostors == 1 else "impostors"
        return f"{self.players} players, {self.impostors} {noun}"
