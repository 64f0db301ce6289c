from __future__ import annotations

from lineupcard.contracts import FIELD_POSITIONS, GameLineup, InningAssignment, Player, Position
from lineupcard.core.errors import check_inning


def _field_position(position: Position | str) -> Position:
    pos = position if isinstance(position, Position) else Position.parse(position)
    if pos not in FIELD_POSITIONS:
        raise ValueError(f"{pos.value} is not a fielding position")
    return pos


def _with_inning(lineup: GameLineup, assignment: InningAssignment) -> GameLineup:
    innings = list(lineup.innings)
    innings[assignment.inning - 1] = assignment
    return GameLineup(innings=tuple(innings))


def assign_position(
    lineup: GameLineup,
    inning: int,
    position: Position | str,
    player: Player | None,
) -> GameLineup:
    """Put ``player`` at ``position`` for one inning, vacating any other slot they hold there."""
    check_inning(inning, lineup.total_innings)
    pos = _field_position(position)
    current = lineup.inning(inning)

    positions = {slot: current.positions.get(slot) for slot in FIELD_POSITIONS}
    if player is not None:
        for slot, occupant in positions.items():
            if slot != pos and occupant is not None and occupant.player_id == player.player_id:
                positions[slot] = None
    positions[pos] = player
    return _with_inning(lineup, InningAssignment(inning=inning, positions=positions))


def replace_inning(lineup: GameLineup, assignment: InningAssignment) -> GameLineup:
    check_inning(assignment.inning, lineup.total_innings)
    return _with_inning(lineup, assignment)


def purge_player(lineup: GameLineup, player_id: str) -> GameLineup:
    innings: list[InningAssignment] = []
    for current in lineup.innings:
        if current.position_of(player_id) is None:
            innings.append(current)
            continue
        positions = {
            slot: (None if occupant is not None and occupant.player_id == player_id else occupant)
            for slot, occupant in ((s, current.positions.get(s)) for s in FIELD_POSITIONS)
        }
        innings.append(InningAssignment(inning=current.inning, positions=positions))
    return GameLineup(innings=tuple(innings))
