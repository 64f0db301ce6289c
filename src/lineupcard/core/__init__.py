from .errors import (
    InvalidInningError,
    PersistenceError,
    build_forensic_artifact,
    check_inning,
    persist_forensic_artifact,
)
from .events import EventBus, emit
from .ids import make_id, now_utc
from .randomness import PythonRandomSource, SequenceRandomSource, gameplay_random, seeded_random
from .rules import GameRules, default_rules, rules_from_mapping

__all__ = [
    "EventBus",
    "GameRules",
    "InvalidInningError",
    "PersistenceError",
    "PythonRandomSource",
    "SequenceRandomSource",
    "build_forensic_artifact",
    "check_inning",
    "default_rules",
    "emit",
    "gameplay_random",
    "make_id",
    "now_utc",
    "persist_forensic_artifact",
    "rules_from_mapping",
    "seeded_random",
]
