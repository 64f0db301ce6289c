from .editor import assign_position, purge_player, replace_inning
from .generator import LineupGenerator
from .rotation import active_pitchers, plan_rotation
from .serialization import (
    inning_to_payload,
    lineup_from_payload,
    lineup_to_payload,
    player_from_payload,
    player_to_payload,
)
from .solver import InningSolver, build_pool, solve_inning
from .validation import LineupValidator

__all__ = [
    "InningSolver",
    "LineupGenerator",
    "LineupValidator",
    "active_pitchers",
    "assign_position",
    "build_pool",
    "inning_to_payload",
    "lineup_from_payload",
    "lineup_to_payload",
    "plan_rotation",
    "player_from_payload",
    "player_to_payload",
    "purge_player",
    "replace_inning",
    "solve_inning",
]
