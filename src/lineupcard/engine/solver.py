from __future__ import annotations

from typing import Collection, Sequence

from lineupcard.contracts import SOLVER_POSITIONS, Player, Position, RandomSource, TraceHandler
from lineupcard.core.events import emit


def build_pool(batting_order: Sequence[Player], available_ids: Collection[str] | None = None) -> tuple[Player, ...]:
    """Unique batting-order players, optionally limited to ``available_ids``."""
    seen: set[str] = set()
    pool: list[Player] = []
    for player in batting_order:
        if player.player_id in seen:
            continue
        if available_ids is not None and player.player_id not in available_ids:
            continue
        seen.add(player.player_id)
        pool.append(player)
    return tuple(pool)


def without(pool: tuple[Player, ...], player_id: str) -> tuple[Player, ...]:
    return tuple(p for p in pool if p.player_id != player_id)


class InningSolver:
    """Fills the eight non-pitcher positions for one inning.

    Positions are visited in a freshly shuffled order. Each one goes to the
    remaining player who ranks it highest on their eligibility list, ties broken
    at random; when nobody remaining is eligible any remaining player is taken.
    """

    def __init__(self, random_source: RandomSource, trace: TraceHandler | None = None) -> None:
        self._rand = random_source
        self._trace = trace

    def solve(
        self,
        batting_order: Sequence[Player],
        pitcher: Player | None,
        available_ids: Collection[str] | None = None,
    ) -> dict[Position, Player | None]:
        pool = build_pool(batting_order, available_ids)
        if pitcher is not None:
            pool = without(pool, pitcher.player_id)

        fill_order = list(SOLVER_POSITIONS)
        self._rand.shuffle(fill_order)
        emit(self._trace, "solver", "fill_order", order=[pos.value for pos in fill_order])

        assigned: dict[Position, Player | None] = {}
        for position in fill_order:
            chosen, reason = self._pick(pool, position)
            assigned[position] = chosen
            if chosen is not None:
                pool = without(pool, chosen.player_id)
            emit(
                self._trace,
                "solver",
                "assigned",
                position=position.value,
                player_id=chosen.player_id if chosen else None,
                reason=reason,
            )
        return {pos: assigned[pos] for pos in SOLVER_POSITIONS}

    def _pick(self, pool: tuple[Player, ...], position: Position) -> tuple[Player | None, str]:
        if not pool:
            return None, "empty_pool"
        ranked = [(p.preference_rank(position), p) for p in pool]
        eligible = [(rank, p) for rank, p in ranked if rank is not None]
        if not eligible:
            return self._rand.choice(pool), "fallback"
        best = min(rank for rank, _ in eligible)
        tied = [p for rank, p in eligible if rank == best]
        return self._rand.choice(tied), f"rank_{best}"


def solve_inning(
    batting_order: Sequence[Player],
    pitcher: Player | None,
    random_source: RandomSource,
    available_ids: Collection[str] | None = None,
    trace: TraceHandler | None = None,
) -> dict[Position, Player | None]:
    return InningSolver(random_source, trace=trace).solve(batting_order, pitcher, available_ids)
