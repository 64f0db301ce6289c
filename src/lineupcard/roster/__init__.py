from .card import BENCH_MARK, LineupCard, LineupCardRow, build_lineup_card, innings_count
from .entities import GameDay, GameRecord, Team
from .pack import RosterPack, RosterPackLoader, RosterPackValidator
from .setup import (
    add_to_order,
    available_pitchers,
    batting_order_ranks,
    default_available_ids,
    initial_batting_order,
    initial_pitcher_order,
    make_available,
    make_unavailable,
    move_player,
    open_game_day,
    remove_from_order,
    set_pitcher_order,
)

__all__ = [
    "BENCH_MARK",
    "GameDay",
    "GameRecord",
    "LineupCard",
    "LineupCardRow",
    "RosterPack",
    "RosterPackLoader",
    "RosterPackValidator",
    "Team",
    "add_to_order",
    "available_pitchers",
    "batting_order_ranks",
    "build_lineup_card",
    "default_available_ids",
    "initial_batting_order",
    "initial_pitcher_order",
    "innings_count",
    "make_available",
    "make_unavailable",
    "move_player",
    "open_game_day",
    "remove_from_order",
    "set_pitcher_order",
]
