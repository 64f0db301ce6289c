from __future__ import annotations

import csv
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lineupcard.contracts import Player, Position, ValidationError, ValidationIssue
from lineupcard.roster.entities import Team

logger = logging.getLogger(__name__)

POSITION_SEPARATOR = "|"


@dataclass(slots=True)
class RosterPack:
    team: Team
    players: list[Player]


class RosterPackValidator:
    REQUIRED_MANIFEST_KEYS = {"team_id", "team_name", "schema_version"}
    REQUIRED_COLUMNS = {"player_id", "first_name", "last_name", "positions"}

    def validate_manifest(self, manifest: dict[str, Any]) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        missing = sorted(self.REQUIRED_MANIFEST_KEYS - set(manifest.keys()))
        if missing:
            issues.append(self._issue("MANIFEST_MISSING_KEYS", "manifest", f"missing required keys: {', '.join(missing)}"))
        if manifest.get("schema_version") != "1.0":
            issues.append(self._issue("MANIFEST_SCHEMA", "manifest.schema_version", "schema_version must be '1.0'"))
        return issues

    def validate_players_csv(self, csv_path: Path) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        seen_ids: set[str] = set()
        seen_ranks: dict[int, str] = {}
        with csv_path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            missing = sorted(self.REQUIRED_COLUMNS - set(reader.fieldnames or []))
            if missing:
                issues.append(self._issue("PLAYERS_MISSING_COLUMNS", "players.csv", f"missing columns: {', '.join(missing)}"))
                return issues

            for row_idx, row in enumerate(reader, start=2):
                pid = (row.get("player_id") or "").strip()
                where = f"players.csv:{row_idx}"
                if not pid:
                    issues.append(self._issue("PLAYER_ID_MISSING", where, "player_id is required"))
                elif pid in seen_ids:
                    issues.append(self._issue("PLAYER_ID_DUPLICATE", where, f"player_id '{pid}' repeated", pid))
                seen_ids.add(pid)

                codes = [c for c in (row.get("positions") or "").split(POSITION_SEPARATOR) if c.strip()]
                for code in codes:
                    try:
                        Position.parse(code)
                    except ValueError:
                        issues.append(self._issue("UNKNOWN_POSITION", where, f"unknown position '{code}'", pid))
                if len({c.strip().upper() for c in codes}) != len(codes):
                    issues.append(self._issue("POSITION_DUPLICATE", where, "eligibility list repeats a position", pid))

                for column in ("batting_order", "jersey_number"):
                    raw = (row.get(column) or "").strip()
                    if raw and not raw.isdigit():
                        issues.append(self._issue("NOT_AN_INTEGER", where, f"{column} must be a positive integer", pid))
                rank = (row.get("batting_order") or "").strip()
                if rank.isdigit():
                    if int(rank) in seen_ranks:
                        issues.append(
                            self._issue("BATTING_ORDER_DUPLICATE", where, f"batting_order {rank} also used by {seen_ranks[int(rank)]}", pid)
                        )
                    seen_ranks[int(rank)] = pid
                if len(issues) >= 50:
                    issues.append(self._issue("TOO_MANY_ERRORS", "players.csv", "validation stopped after 50 errors"))
                    break
        return issues

    @staticmethod
    def _issue(code: str, field_path: str, message: str, entity_id: str = "") -> ValidationIssue:
        return ValidationIssue(code=code, severity="blocking", field_path=field_path, entity_id=entity_id, message=message)


class RosterPackLoader:
    """Reads a team directory holding ``manifest.json`` and ``players.csv``.

    ``positions`` is a ``|``-separated eligibility list, most preferred first.
    """

    def __init__(self) -> None:
        self.validator = RosterPackValidator()

    def load(self, pack_dir: Path) -> RosterPack:
        manifest_path = pack_dir / "manifest.json"
        players_path = pack_dir / "players.csv"
        if not manifest_path.exists():
            raise ValueError(f"roster pack {pack_dir} missing manifest.json")
        if not players_path.exists():
            raise ValueError(f"roster pack {pack_dir} missing players.csv")

        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        issues = self.validator.validate_manifest(manifest)
        issues.extend(self.validator.validate_players_csv(players_path))
        if issues:
            raise ValidationError(issues)

        team = Team(
            team_id=str(manifest["team_id"]),
            name=str(manifest["team_name"]),
            description=str(manifest.get("description", "")),
        )
        players = self._read_players(players_path, team.team_id)
        logger.info("Loaded roster pack %s: %d players", team.team_id, len(players))
        return RosterPack(team=team, players=players)

    @staticmethod
    def _read_players(csv_path: Path, team_id: str) -> list[Player]:
        players: list[Player] = []
        with csv_path.open("r", encoding="utf-8", newline="") as f:
            for row in csv.DictReader(f):
                rank = (row.get("batting_order") or "").strip()
                jersey = (row.get("jersey_number") or "").strip()
                players.append(
                    Player(
                        player_id=row["player_id"].strip(),
                        first_name=row["first_name"].strip(),
                        last_name=row["last_name"].strip(),
                        positions=tuple(
                            Position.parse(code) for code in row["positions"].split(POSITION_SEPARATOR) if code.strip()
                        ),
                        batting_order=int(rank) if rank else None,
                        jersey_number=int(jersey) if jersey else None,
                        team_id=team_id,
                    )
                )
        return players
