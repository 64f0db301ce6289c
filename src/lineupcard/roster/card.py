from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from lineupcard.contracts import GameLineup, Player

BENCH_MARK = "-"


@dataclass(slots=True)
class LineupCardRow:
    player_id: str
    name: str
    positions: list[str]

    @property
    def innings_played(self) -> int:
        return sum(1 for code in self.positions if code != BENCH_MARK)


@dataclass(slots=True)
class LineupCard:
    title: str
    innings: int
    rows: list[LineupCardRow]

    def render_text(self) -> str:
        name_width = max([len("Player")] + [len(r.name) for r in self.rows])
        header = "Player".ljust(name_width) + "".join(f"  {i:>3}" for i in range(1, self.innings + 1)) + "   IP"
        lines = [self.title, header, "-" * len(header)]
        for row in self.rows:
            cells = "".join(f"  {code:>3}" for code in row.positions)
            lines.append(f"{row.name.ljust(name_width)}{cells}  {row.innings_played:>3}")
        return "\n".join(lines)


def innings_count(lineup: GameLineup, player_id: str) -> int:
    return sum(1 for a in lineup.innings if a.position_of(player_id) is not None)


def build_lineup_card(title: str, batting_order: Sequence[Player], lineup: GameLineup) -> LineupCard:
    rows = []
    for player in batting_order:
        codes = []
        for assignment in lineup.innings:
            pos = assignment.position_of(player.player_id)
            codes.append(pos.value if pos is not None else BENCH_MARK)
        rows.append(LineupCardRow(player_id=player.player_id, name=player.display_name, positions=codes))
    return LineupCard(title=title, innings=lineup.total_innings, rows=rows)
