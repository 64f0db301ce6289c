from .duckdb_store import AnalyticsStore
from .etl import run_game_etl
from .migrations import MigrationRunner
from .sqlite_store import LineupStore

__all__ = [
    "AnalyticsStore",
    "LineupStore",
    "MigrationRunner",
    "run_game_etl",
]
