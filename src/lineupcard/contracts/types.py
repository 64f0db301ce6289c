from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Mapping, Protocol, Sequence

TOTAL_INNINGS = 6


class Position(str, Enum):
    P = "P"
    C = "C"
    FIRST_BASE = "1B"
    SECOND_BASE = "2B"
    THIRD_BASE = "3B"
    SS = "SS"
    LF = "LF"
    CF = "CF"
    RF = "RF"
    DH = "DH"

    @classmethod
    def parse(cls, raw: str) -> Position:
        code = str(raw).strip().upper()
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"unknown position code '{raw}'") from None


# Persisted order of the nine on-field slots.
FIELD_POSITIONS: tuple[Position, ...] = (
    Position.P,
    Position.C,
    Position.FIRST_BASE,
    Position.SECOND_BASE,
    Position.THIRD_BASE,
    Position.SS,
    Position.LF,
    Position.CF,
    Position.RF,
)

# Base order the solver shuffles before every inning; P is fixed by the rotation.
SOLVER_POSITIONS: tuple[Position, ...] = (
    Position.C,
    Position.SS,
    Position.SECOND_BASE,
    Position.THIRD_BASE,
    Position.FIRST_BASE,
    Position.LF,
    Position.CF,
    Position.RF,
)


class ActionType(str, Enum):
    LOAD_GAME = "load_game"
    GENERATE_ALL = "generate_all"
    GENERATE_INNING = "generate_inning"
    ASSIGN_POSITION = "assign_position"
    SET_AVAILABILITY = "set_availability"
    MOVE_BATTER = "move_batter"
    SET_PITCHER_ORDER = "set_pitcher_order"
    GET_LINEUP = "get_lineup"
    GET_LINEUP_CARD = "get_lineup_card"


class RandomSource(Protocol):
    def rand(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def choice(self, items: Sequence[Any]) -> Any: ...

    def shuffle(self, items: list[Any]) -> None: ...

    def spawn(self, substream_id: str) -> RandomSource: ...


@dataclass(frozen=True, slots=True)
class Player:
    player_id: str
    first_name: str
    last_name: str
    positions: tuple[Position, ...] = ()
    batting_order: int | None = None
    jersey_number: int | None = None
    team_id: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def can_play(self, position: Position) -> bool:
        return position in self.positions

    def preference_rank(self, position: Position) -> int | None:
        """Index of ``position`` in the eligibility list, ``None`` when ineligible."""
        try:
            return self.positions.index(position)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class InningAssignment:
    inning: int
    positions: Mapping[Position, Player | None]

    @classmethod
    def empty(cls, inning: int) -> InningAssignment:
        return cls(inning=inning, positions={pos: None for pos in FIELD_POSITIONS})

    def player_at(self, position: Position) -> Player | None:
        return self.positions.get(position)

    def position_of(self, player_id: str) -> Position | None:
        for pos in FIELD_POSITIONS:
            player = self.positions.get(pos)
            if player is not None and player.player_id == player_id:
                return pos
        return None

    def assigned_ids(self) -> list[str]:
        return [p.player_id for p in (self.positions.get(pos) for pos in FIELD_POSITIONS) if p is not None]

    def unfilled(self) -> list[Position]:
        return [pos for pos in FIELD_POSITIONS if self.positions.get(pos) is None]


@dataclass(frozen=True, slots=True)
class GameLineup:
    innings: tuple[InningAssignment, ...]

    def __post_init__(self) -> None:
        numbers = [a.inning for a in self.innings]
        if numbers != list(range(1, len(numbers) + 1)):
            raise ValueError(f"lineup innings must be numbered 1..{len(numbers)} in order, got {numbers}")

    @classmethod
    def empty(cls, total_innings: int = TOTAL_INNINGS) -> GameLineup:
        return cls(innings=tuple(InningAssignment.empty(i) for i in range(1, total_innings + 1)))

    @property
    def total_innings(self) -> int:
        return len(self.innings)

    def inning(self, number: int) -> InningAssignment:
        if number < 1 or number > len(self.innings):
            raise IndexError(f"inning {number} outside 1..{len(self.innings)}")
        return self.innings[number - 1]


@dataclass(slots=True)
class PlayingTimeLedger:
    innings_played: dict[str, int] = field(default_factory=dict)
    last_inning: dict[str, int] = field(default_factory=dict)

    def register(self, player_ids: Sequence[str]) -> None:
        for pid in player_ids:
            self.innings_played.setdefault(pid, 0)
            self.last_inning.setdefault(pid, -1)

    def record(self, assignment: InningAssignment) -> None:
        for pid in assignment.assigned_ids():
            self.innings_played[pid] = self.innings_played.get(pid, 0) + 1
            self.last_inning[pid] = assignment.inning


@dataclass(slots=True)
class TraceEvent:
    scope: str
    event_type: str
    data: dict[str, Any]
    time: datetime


TraceHandler = Callable[[TraceEvent], None]


@dataclass(slots=True)
class ActionRequest:
    request_id: str
    action_type: ActionType | str
    payload: dict[str, Any]
    game_id: str


@dataclass(slots=True)
class ActionResult:
    request_id: str
    success: bool
    message: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ValidationIssue:
    code: str
    severity: str
    field_path: str
    entity_id: str
    message: str


@dataclass(slots=True)
class ValidationResult:
    ok: bool
    issues: list[ValidationIssue]

    @property
    def blocking(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "blocking"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]


class ValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        message = "; ".join(f"{i.code}:{i.entity_id}:{i.message}" for i in issues)
        super().__init__(message)
        self.issues = issues


@dataclass(slots=True)
class ForensicArtifact:
    artifact_id: str
    timestamp: datetime
    engine_scope: str
    error_code: str
    message: str
    state_snapshot: dict[str, Any]
    context: dict[str, Any]
    identifiers: dict[str, str]
    causal_fragment: list[str]
