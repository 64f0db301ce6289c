from __future__ import annotations

from typing import Collection, Sequence

from lineupcard.contracts import TOTAL_INNINGS, Player, TraceHandler
from lineupcard.core.events import emit

# Up to this many active pitchers split the game into equal consecutive blocks.
EVEN_SPLIT_MAX_PITCHERS = 3
LEAD_BLOCK_INNINGS = 2


def active_pitchers(pitcher_order: Sequence[Player], available_ids: Collection[str]) -> list[Player]:
    return [p for p in pitcher_order if p.player_id in available_ids]


def plan_rotation(
    pitcher_order: Sequence[Player],
    available_ids: Collection[str],
    total_innings: int = TOTAL_INNINGS,
    trace: TraceHandler | None = None,
) -> list[Player | None]:
    """Return the pitcher for each inning (index 0 = inning 1).

    With one to three active pitchers each throws ``total_innings // count``
    consecutive innings in order; leftover innings get no pitcher. With four or
    more, the first two throw two innings each and every later pitcher throws
    one, until the innings run out.
    """
    active = active_pitchers(pitcher_order, available_ids)
    slots: list[Player | None] = [None] * total_innings
    if not active:
        emit(trace, "rotation", "no_active_pitchers", total_innings=total_innings)
        return slots

    if len(active) <= EVEN_SPLIT_MAX_PITCHERS:
        per_pitcher = total_innings // len(active)
        for idx, pitcher in enumerate(active):
            start = idx * per_pitcher
            for offset in range(per_pitcher):
                slots[start + offset] = pitcher
    else:
        for idx, pitcher in enumerate(active[:2]):
            start = idx * LEAD_BLOCK_INNINGS
            for slot in range(start, min(start + LEAD_BLOCK_INNINGS, total_innings)):
                slots[slot] = pitcher
        for idx in range(2, len(active)):
            slot = idx + 2
            if slot < total_innings:
                slots[slot] = active[idx]

    emit(
        trace,
        "rotation",
        "planned",
        active=[p.player_id for p in active],
        slots=[p.player_id if p else None for p in slots],
    )
    return slots
