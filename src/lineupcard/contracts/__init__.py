from .types import (
    FIELD_POSITIONS,
    SOLVER_POSITIONS,
    TOTAL_INNINGS,
    ActionRequest,
    ActionResult,
    ActionType,
    ForensicArtifact,
    GameLineup,
    InningAssignment,
    Player,
    PlayingTimeLedger,
    Position,
    RandomSource,
    TraceEvent,
    TraceHandler,
    ValidationError,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "ActionRequest",
    "ActionResult",
    "ActionType",
    "FIELD_POSITIONS",
    "ForensicArtifact",
    "GameLineup",
    "InningAssignment",
    "Player",
    "PlayingTimeLedger",
    "Position",
    "RandomSource",
    "SOLVER_POSITIONS",
    "TOTAL_INNINGS",
    "TraceEvent",
    "TraceHandler",
    "ValidationError",
    "ValidationIssue",
    "ValidationResult",
]
