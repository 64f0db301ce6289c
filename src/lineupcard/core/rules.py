from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from lineupcard.contracts import TOTAL_INNINGS

MAX_INNINGS = 9


@dataclass(frozen=True, slots=True)
class GameRules:
    total_innings: int = TOTAL_INNINGS

    def validate(self) -> None:
        if isinstance(self.total_innings, bool) or not isinstance(self.total_innings, int):
            raise ValueError("total_innings must be an integer")
        if not 1 <= self.total_innings <= MAX_INNINGS:
            raise ValueError(f"total_innings must be in [1, {MAX_INNINGS}]")


def default_rules() -> GameRules:
    return GameRules()


def rules_from_mapping(config: Mapping[str, Any]) -> GameRules:
    known = {f.name for f in fields(GameRules)}
    unknown = sorted(set(config) - known)
    if unknown:
        raise ValueError(f"unknown game rule keys: {', '.join(unknown)}")
    rules = GameRules(**dict(config))
    rules.validate()
    return rules
