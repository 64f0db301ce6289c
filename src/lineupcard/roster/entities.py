from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from lineupcard.contracts import GameLineup, Player


@dataclass(slots=True)
class Team:
    team_id: str
    name: str
    description: str = ""


@dataclass(slots=True)
class GameRecord:
    """A game as the store keeps it: ids only, lineups in the persisted shape."""

    game_id: str
    team_id: str
    opponent: str
    game_date: str
    location: str = ""
    available_ids: list[str] = field(default_factory=list)
    pitcher_order: list[str] = field(default_factory=list)
    lineups: list[dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class GameDay:
    """In-memory working state for one game.

    Frozen so the runtime can keep the previous value as a rollback snapshot.
    """

    game_id: str
    team_id: str
    roster: tuple[Player, ...]
    available_ids: frozenset[str]
    batting_order: tuple[Player, ...]
    pitcher_order: tuple[Player, ...]
    lineup: GameLineup

    def player(self, player_id: str) -> Player:
        for p in self.roster:
            if p.player_id == player_id:
                return p
        raise KeyError(f"player {player_id} is not on the roster for game {self.game_id}")
