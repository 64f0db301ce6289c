from __future__ import annotations

from typing import Collection, Sequence

from lineupcard.contracts import (
    FIELD_POSITIONS,
    GameLineup,
    InningAssignment,
    Player,
    PlayingTimeLedger,
    Position,
    RandomSource,
    TraceHandler,
)
from lineupcard.core.errors import check_inning
from lineupcard.core.events import emit
from lineupcard.core.rules import GameRules, default_rules
from lineupcard.engine.rotation import plan_rotation
from lineupcard.engine.solver import InningSolver, build_pool


class LineupGenerator:
    def __init__(
        self,
        random_source: RandomSource,
        rules: GameRules | None = None,
        trace: TraceHandler | None = None,
    ) -> None:
        self.rules = rules or default_rules()
        self.rules.validate()
        self._trace = trace
        self._solver = InningSolver(random_source, trace=trace)
        self.last_ledger: PlayingTimeLedger | None = None

    def generate_all(
        self,
        batting_order: Sequence[Player],
        pitcher_order: Sequence[Player],
        available_ids: Collection[str],
    ) -> GameLineup:
        available = frozenset(available_ids)
        pool = build_pool(batting_order, available)
        rotation = plan_rotation(pitcher_order, available, self.rules.total_innings, trace=self._trace)

        # Bookkeeping only: the solver does not weigh playing time when picking.
        ledger = PlayingTimeLedger()
        ledger.register([p.player_id for p in pool])

        innings: list[InningAssignment] = []
        for inning in range(1, self.rules.total_innings + 1):
            assignment = self._solve(inning, pool, rotation[inning - 1])
            ledger.record(assignment)
            innings.append(assignment)

        self.last_ledger = ledger
        emit(
            self._trace,
            "generator",
            "generated_all",
            innings_played=dict(ledger.innings_played),
            last_inning=dict(ledger.last_inning),
        )
        return GameLineup(innings=tuple(innings))

    def generate_one(
        self,
        batting_order: Sequence[Player],
        pitcher_order: Sequence[Player],
        inning: int,
        available_ids: Collection[str],
    ) -> InningAssignment:
        check_inning(inning, self.rules.total_innings)
        available = frozenset(available_ids)
        rotation = plan_rotation(pitcher_order, available, self.rules.total_innings, trace=self._trace)
        assignment = self._solve(inning, build_pool(batting_order, available), rotation[inning - 1])
        emit(self._trace, "generator", "generated_inning", inning=inning, assigned=assignment.assigned_ids())
        return assignment

    def _solve(self, inning: int, pool: Sequence[Player], pitcher: Player | None) -> InningAssignment:
        fielders = self._solver.solve(pool, pitcher)
        fielders[Position.P] = pitcher
        return InningAssignment(inning=inning, positions={pos: fielders[pos] for pos in FIELD_POSITIONS})
