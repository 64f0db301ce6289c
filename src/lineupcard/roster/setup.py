"""Game-day preparation: availability, batting order and pitcher order.

These helpers turn what the store knows about a game (ids and ranks) into the
``Player`` sequences the engine consumes, and apply the roster edits a coach
makes before generating positions.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Collection, Iterable, Sequence

from lineupcard.contracts import Player, Position
from lineupcard.engine.editor import purge_player
from lineupcard.engine.serialization import lineup_from_payload
from lineupcard.roster.entities import GameDay, GameRecord


def default_available_ids(players: Iterable[Player]) -> list[str]:
    return [p.player_id for p in players]


def initial_batting_order(players: Sequence[Player], available_ids: Collection[str]) -> list[Player]:
    ranked = [p for p in players if p.batting_order]
    order = [p for p in ranked if p.player_id in available_ids]
    if not order:
        order = ranked
    return sorted(order, key=lambda p: p.batting_order or 0)


def available_pitchers(players: Iterable[Player], available_ids: Collection[str]) -> list[Player]:
    return [p for p in players if p.can_play(Position.P) and p.player_id in available_ids]


def initial_pitcher_order(
    pitcher_ids: Iterable[str],
    players: Iterable[Player],
    available_ids: Collection[str],
) -> list[Player]:
    eligible = {p.player_id: p for p in available_pitchers(players, available_ids)}
    order: list[Player] = []
    for pid in pitcher_ids:
        # first occurrence wins
        if pid in eligible:
            order.append(eligible.pop(pid))
    return order


def open_game_day(record: GameRecord, players: Sequence[Player], total_innings: int) -> GameDay:
    available = record.available_ids or default_available_ids(players)
    available_set = frozenset(available)
    return GameDay(
        game_id=record.game_id,
        team_id=record.team_id,
        roster=tuple(players),
        available_ids=available_set,
        batting_order=tuple(initial_batting_order(players, available_set)),
        pitcher_order=tuple(initial_pitcher_order(record.pitcher_order, players, available_set)),
        lineup=lineup_from_payload(record.lineups, players, total_innings),
    )


def make_unavailable(day: GameDay, player_id: str) -> GameDay:
    return replace(
        day,
        available_ids=day.available_ids - {player_id},
        batting_order=remove_from_order(day.batting_order, player_id),
        pitcher_order=remove_from_order(day.pitcher_order, player_id),
        lineup=purge_player(day.lineup, player_id),
    )


def make_available(day: GameDay, player_id: str) -> GameDay:
    player = day.player(player_id)
    return replace(
        day,
        available_ids=day.available_ids | {player_id},
        batting_order=add_to_order(day.batting_order, player),
    )


def add_to_order(order: Sequence[Player], player: Player) -> tuple[Player, ...]:
    if any(p.player_id == player.player_id for p in order):
        return tuple(order)
    return (*order, player)


def remove_from_order(order: Sequence[Player], player_id: str) -> tuple[Player, ...]:
    return tuple(p for p in order if p.player_id != player_id)


def move_player(order: Sequence[Player], player_id: str, target_id: str) -> tuple[Player, ...]:
    """Move ``player_id`` to where ``target_id`` sits, shifting the rest (drag-and-drop semantics)."""
    ids = [p.player_id for p in order]
    if player_id not in ids or target_id not in ids:
        raise KeyError(f"both {player_id} and {target_id} must be in the order")
    items = list(order)
    moved = items.pop(ids.index(player_id))
    items.insert(ids.index(target_id), moved)
    return tuple(items)


def batting_order_ranks(order: Sequence[Player]) -> list[tuple[str, int]]:
    return [(p.player_id, idx) for idx, p in enumerate(order, start=1)]


def set_pitcher_order(day: GameDay, pitcher_ids: Sequence[str]) -> GameDay:
    order = initial_pitcher_order(pitcher_ids, day.roster, day.available_ids)
    return replace(day, pitcher_order=tuple(order))
