from __future__ import annotations

from collections import Counter
from typing import Collection

from lineupcard.contracts import (
    FIELD_POSITIONS,
    GameLineup,
    Player,
    ValidationIssue,
    ValidationResult,
)


class LineupValidator:
    """Checks a lineup against the per-inning invariants.

    Double-booked or unavailable players are blocking; empty slots are only
    warnings so a short-handed lineup can still be saved.
    """

    def validate(self, lineup: GameLineup, available_ids: Collection[str] | None = None) -> ValidationResult:
        issues: list[ValidationIssue] = []
        for assignment in lineup.innings:
            entity = f"inning_{assignment.inning}"
            counts = Counter(assignment.assigned_ids())
            for pid, count in sorted(counts.items()):
                if count > 1:
                    issues.append(
                        ValidationIssue(
                            code="DUPLICATE_PLAYER",
                            severity="blocking",
                            field_path=f"innings[{assignment.inning}]",
                            entity_id=entity,
                            message=f"player {pid} holds {count} positions",
                        )
                    )
            for pos in FIELD_POSITIONS:
                occupant: Player | None = assignment.positions.get(pos)
                if occupant is None:
                    issues.append(
                        ValidationIssue(
                            code="UNFILLED_POSITION",
                            severity="warning",
                            field_path=f"innings[{assignment.inning}].{pos.value}",
                            entity_id=entity,
                            message=f"{pos.value} is unassigned",
                        )
                    )
                    continue
                if available_ids is not None and occupant.player_id not in available_ids:
                    issues.append(
                        ValidationIssue(
                            code="UNAVAILABLE_PLAYER",
                            severity="blocking",
                            field_path=f"innings[{assignment.inning}].{pos.value}",
                            entity_id=entity,
                            message=f"player {occupant.player_id} is not available for this game",
                        )
                    )
        return ValidationResult(ok=not any(i.severity == "blocking" for i in issues), issues=issues)
