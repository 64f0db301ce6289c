from __future__ import annotations

from pathlib import Path

from lineupcard.persistence.duckdb_store import AnalyticsStore


def run_game_etl(sqlite_path: Path, duckdb_path: Path, game_id: str) -> int:
    store = AnalyticsStore(duckdb_path)
    return store.refresh_from_sqlite_for_game(sqlite_path, game_id)
