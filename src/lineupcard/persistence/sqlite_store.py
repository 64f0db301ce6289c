from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable, Sequence

from lineupcard.contracts import FIELD_POSITIONS, Player, Position
from lineupcard.core.errors import PersistenceError
from lineupcard.persistence.migrations import MigrationRunner
from lineupcard.roster.entities import GameRecord, Team

logger = logging.getLogger(__name__)


class LineupStore:
    """Authoritative sqlite store for teams, players, games and lineups."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def initialize_schema(self) -> None:
        with self.connect() as conn:
            applied = MigrationRunner(conn).apply()
        if applied:
            logger.info("Applied schema migrations %s to %s", applied, self.db_path)

    def save_team(self, team: Team, players: Iterable[Player] = ()) -> None:
        try:
            with self.connect() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO teams(team_id, name, description) VALUES (?, ?, ?)",
                    (team.team_id, team.name, team.description),
                )
                for player in players:
                    self._upsert_player(conn, player, team.team_id)
        except sqlite3.Error as exc:
            raise PersistenceError(f"failed to save team {team.team_id}: {exc}") from exc

    def get_team(self, team_id: str) -> Team:
        with self.connect() as conn:
            row = conn.execute("SELECT team_id, name, description FROM teams WHERE team_id = ?", (team_id,)).fetchone()
        if row is None:
            raise KeyError(f"unknown team {team_id}")
        return Team(team_id=row[0], name=row[1], description=row[2])

    def list_teams(self) -> list[Team]:
        with self.connect() as conn:
            rows = conn.execute("SELECT team_id, name, description FROM teams ORDER BY name").fetchall()
        return [Team(team_id=r[0], name=r[1], description=r[2]) for r in rows]

    def list_players(self, team_id: str) -> list[Player]:
        with self.connect() as conn:
            rows = conn.execute(
                """
                SELECT player_id, first_name, last_name, positions_json, batting_order, jersey_number, team_id
                FROM players
                WHERE team_id = ?
                ORDER BY batting_order IS NULL, batting_order, last_name, first_name
                """,
                (team_id,),
            ).fetchall()
        return [
            Player(
                player_id=r[0],
                first_name=r[1],
                last_name=r[2],
                positions=tuple(Position.parse(code) for code in json.loads(r[3])),
                batting_order=r[4],
                jersey_number=r[5],
                team_id=r[6],
            )
            for r in rows
        ]

    def update_batting_order(self, team_id: str, ranks: Sequence[tuple[str, int]]) -> None:
        """Persist 1-based ranks; team players missing from ``ranks`` lose theirs."""
        try:
            with self.connect() as conn:
                conn.execute("UPDATE players SET batting_order = NULL WHERE team_id = ?", (team_id,))
                conn.executemany(
                    "UPDATE players SET batting_order = ? WHERE player_id = ? AND team_id = ?",
                    [(rank, pid, team_id) for pid, rank in ranks],
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"failed to update batting order for {team_id}: {exc}") from exc

    def save_game(self, record: GameRecord) -> None:
        try:
            with self.connect() as conn:
                conn.execute(
                    """
                    INSERT INTO games(game_id, team_id, opponent, game_date, location, available_json, pitcher_order_json)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(game_id) DO UPDATE SET
                        opponent = excluded.opponent,
                        game_date = excluded.game_date,
                        location = excluded.location,
                        available_json = excluded.available_json,
                        pitcher_order_json = excluded.pitcher_order_json,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (
                        record.game_id,
                        record.team_id,
                        record.opponent,
                        record.game_date,
                        record.location,
                        json.dumps(list(record.available_ids)),
                        json.dumps(list(record.pitcher_order)),
                    ),
                )
                self._replace_slots(conn, record.game_id, record.lineups)
        except sqlite3.Error as exc:
            raise PersistenceError(f"failed to save game {record.game_id}: {exc}") from exc
        logger.debug("Saved game %s", record.game_id)

    def load_game(self, game_id: str) -> GameRecord:
        with self.connect() as conn:
            row = conn.execute(
                """
                SELECT game_id, team_id, opponent, game_date, location, available_json, pitcher_order_json
                FROM games WHERE game_id = ?
                """,
                (game_id,),
            ).fetchone()
            if row is None:
                raise KeyError(f"unknown game {game_id}")
            slots = conn.execute(
                "SELECT inning, position, player_id FROM lineup_slots WHERE game_id = ? ORDER BY inning",
                (game_id,),
            ).fetchall()
        return GameRecord(
            game_id=row[0],
            team_id=row[1],
            opponent=row[2],
            game_date=row[3],
            location=row[4],
            available_ids=list(json.loads(row[5])),
            pitcher_order=list(json.loads(row[6])),
            lineups=self._slots_to_payload(slots),
        )

    def list_games(self, team_id: str) -> list[GameRecord]:
        with self.connect() as conn:
            ids = [r[0] for r in conn.execute("SELECT game_id FROM games WHERE team_id = ? ORDER BY game_date", (team_id,))]
        return [self.load_game(gid) for gid in ids]

    def _upsert_player(self, conn: sqlite3.Connection, player: Player, team_id: str) -> None:
        conn.execute(
            """
            INSERT OR REPLACE INTO players(
                player_id, team_id, first_name, last_name, jersey_number, positions_json, batting_order
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                player.player_id,
                player.team_id or team_id,
                player.first_name,
                player.last_name,
                player.jersey_number,
                json.dumps([pos.value for pos in player.positions]),
                player.batting_order,
            ),
        )

    def _replace_slots(self, conn: sqlite3.Connection, game_id: str, lineups: Iterable[dict[str, Any]]) -> None:
        conn.execute("DELETE FROM lineup_slots WHERE game_id = ?", (game_id,))
        rows = []
        for record in lineups:
            for entry in record.get("positions", []):
                rows.append((game_id, int(record["inning"]), str(entry["position"]), entry.get("playerId")))
        conn.executemany(
            "INSERT INTO lineup_slots(game_id, inning, position, player_id) VALUES (?, ?, ?, ?)",
            rows,
        )

    @staticmethod
    def _slots_to_payload(slots: Iterable[tuple[int, str, str | None]]) -> list[dict[str, Any]]:
        by_inning: dict[int, dict[str, str | None]] = {}
        for inning, position, player_id in slots:
            by_inning.setdefault(int(inning), {})[position] = player_id
        order = [pos.value for pos in FIELD_POSITIONS]
        return [
            {
                "inning": inning,
                "positions": [
                    {"position": code, "playerId": by_inning[inning].get(code)}
                    for code in order
                    if code in by_inning[inning]
                ],
            }
            for inning in sorted(by_inning)
        ]
