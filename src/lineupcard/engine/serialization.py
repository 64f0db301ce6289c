from __future__ import annotations

from typing import Any, Iterable, Mapping

from lineupcard.contracts import (
    FIELD_POSITIONS,
    TOTAL_INNINGS,
    GameLineup,
    InningAssignment,
    Player,
    Position,
)


def player_from_payload(raw: Mapping[str, Any], team_id: str = "") -> Player:
    raw_id = raw.get("id") or raw.get("_id")
    if not raw_id:
        raise ValueError("player payload missing id")
    rank = raw.get("battingOrder")
    jersey = raw.get("jerseyNumber")
    return Player(
        player_id=str(raw_id),
        first_name=str(raw.get("firstName", "")),
        last_name=str(raw.get("lastName", "")),
        positions=tuple(Position.parse(code) for code in raw.get("positions", [])),
        batting_order=int(rank) if rank not in (None, "") else None,
        jersey_number=int(jersey) if jersey not in (None, "") else None,
        team_id=str(raw.get("team", team_id)),
    )


def player_to_payload(player: Player) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": player.player_id,
        "firstName": player.first_name,
        "lastName": player.last_name,
        "positions": [pos.value for pos in player.positions],
    }
    if player.batting_order is not None:
        payload["battingOrder"] = player.batting_order
    if player.jersey_number is not None:
        payload["jerseyNumber"] = player.jersey_number
    return payload


def inning_to_payload(assignment: InningAssignment) -> dict[str, Any]:
    entries = []
    for pos in FIELD_POSITIONS:
        occupant = assignment.positions.get(pos)
        entries.append({"position": pos.value, "playerId": occupant.player_id if occupant else None})
    return {"inning": assignment.inning, "positions": entries}


def lineup_to_payload(lineup: GameLineup) -> list[dict[str, Any]]:
    return [inning_to_payload(a) for a in lineup.innings]


def lineup_from_payload(
    records: Iterable[Mapping[str, Any]] | None,
    players: Iterable[Player],
    total_innings: int = TOTAL_INNINGS,
) -> GameLineup:
    """Rebuild a lineup from the persisted shape.

    Innings or positions that were never saved come back empty, as do
    references to players no longer on the roster.
    """
    by_id = {p.player_id: p for p in players}
    by_inning: dict[int, Mapping[str, Any]] = {}
    for record in records or []:
        inning = int(record.get("inning", 0))
        if 1 <= inning <= total_innings:
            by_inning[inning] = record

    innings: list[InningAssignment] = []
    for inning in range(1, total_innings + 1):
        positions: dict[Position, Player | None] = {pos: None for pos in FIELD_POSITIONS}
        for entry in (by_inning.get(inning) or {}).get("positions", []):
            try:
                pos = Position.parse(entry.get("position", ""))
            except ValueError:
                continue
            if pos not in positions:
                continue
            pid = entry.get("playerId")
            positions[pos] = by_id.get(str(pid)) if pid else None
        innings.append(InningAssignment(inning=inning, positions=positions))
    return GameLineup(innings=tuple(innings))
