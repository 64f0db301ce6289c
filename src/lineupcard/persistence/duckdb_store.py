from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

import duckdb

logger = logging.getLogger(__name__)


class AnalyticsStore:
    """DuckDB marts of playing time, rebuilt per game from the sqlite store."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> Any:
        return duckdb.connect(str(self.db_path))

    def initialize_schema(self) -> None:
        with self.connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS mart_playing_time (
                    game_id VARCHAR,
                    team_id VARCHAR,
                    game_date VARCHAR,
                    player_id VARCHAR,
                    innings_played INTEGER,
                    innings_pitched INTEGER,
                    innings_benched INTEGER,
                    PRIMARY KEY(game_id, player_id)
                );

                CREATE TABLE IF NOT EXISTS mart_position_counts (
                    game_id VARCHAR,
                    team_id VARCHAR,
                    player_id VARCHAR,
                    position VARCHAR,
                    innings INTEGER,
                    PRIMARY KEY(game_id, player_id, position)
                );
                """
            )

    def refresh_from_sqlite_for_game(self, sqlite_path: Path, game_id: str) -> int:
        self.initialize_schema()
        with sqlite3.connect(sqlite_path) as sconn, self.connect() as dconn:
            game = sconn.execute(
                "SELECT team_id, game_date FROM games WHERE game_id = ?",
                (game_id,),
            ).fetchone()
            dconn.execute("DELETE FROM mart_playing_time WHERE game_id = ?", [game_id])
            dconn.execute("DELETE FROM mart_position_counts WHERE game_id = ?", [game_id])
            if game is None:
                return 0
            team_id, game_date = game

            slot_rows = sconn.execute(
                """
                SELECT player_id, position, COUNT(*)
                FROM lineup_slots
                WHERE game_id = ? AND player_id IS NOT NULL
                GROUP BY player_id, position
                """,
                (game_id,),
            ).fetchall()
            total_innings = sconn.execute(
                "SELECT COUNT(DISTINCT inning) FROM lineup_slots WHERE game_id = ?",
                (game_id,),
            ).fetchone()[0]

            played: dict[str, list[int]] = {}
            for player_id, position, innings in slot_rows:
                agg = played.setdefault(player_id, [0, 0])
                agg[0] += int(innings)
                if position == "P":
                    agg[1] += int(innings)

            if slot_rows:
                dconn.executemany(
                    "INSERT INTO mart_position_counts VALUES (?, ?, ?, ?, ?)",
                    [(game_id, team_id, pid, pos, int(n)) for pid, pos, n in slot_rows],
                )
            if played:
                dconn.executemany(
                    "INSERT INTO mart_playing_time VALUES (?, ?, ?, ?, ?, ?, ?)",
                    [
                        (game_id, team_id, game_date, pid, agg[0], agg[1], max(int(total_innings) - agg[0], 0))
                        for pid, agg in sorted(played.items())
                    ],
                )
        logger.debug("Refreshed analytics for game %s (%d players)", game_id, len(played))
        return len(played)

    def team_playing_time(self, team_id: str) -> list[tuple[str, int, int, int]]:
        """(player_id, games, innings_played, innings_pitched) across every game of a team."""
        self.initialize_schema()
        with self.connect() as conn:
            return conn.execute(
                """
                SELECT player_id, COUNT(*) AS games, SUM(innings_played), SUM(innings_pitched)
                FROM mart_playing_time
                WHERE team_id = ?
                GROUP BY player_id
                ORDER BY SUM(innings_played) DESC, player_id
                """,
                [team_id],
            ).fetchall()
