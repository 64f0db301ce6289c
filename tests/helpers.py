from __future__ import annotations

import csv
import json
from pathlib import Path

from lineupcard.contracts import SOLVER_POSITIONS, Player, Position
from lineupcard.roster import RosterPack, RosterPackLoader

TEAM_ID = "T_OWLS"

ROSTER_ROWS = [
    {"player_id": "p01", "first_name": "Ava", "last_name": "Adams", "positions": "P|SS|2B", "batting_order": "1", "jersey_number": "7"},
    {"player_id": "p02", "first_name": "Ben", "last_name": "Brooks", "positions": "C|1B", "batting_order": "2", "jersey_number": "12"},
    {"player_id": "p03", "first_name": "Cal", "last_name": "Chen", "positions": "SS|2B|3B", "batting_order": "3", "jersey_number": "3"},
    {"player_id": "p04", "first_name": "Dee", "last_name": "Diaz", "positions": "P|CF|LF", "batting_order": "4", "jersey_number": "21"},
    {"player_id": "p05", "first_name": "Eli", "last_name": "Evans", "positions": "1B|3B", "batting_order": "5", "jersey_number": "9"},
    {"player_id": "p06", "first_name": "Fay", "last_name": "Ford", "positions": "2B|SS", "batting_order": "6", "jersey_number": "4"},
    {"player_id": "p07", "first_name": "Gus", "last_name": "Gray", "positions": "LF|CF|RF", "batting_order": "7", "jersey_number": "18"},
    {"player_id": "p08", "first_name": "Hal", "last_name": "Hunt", "positions": "CF|LF", "batting_order": "8", "jersey_number": "2"},
    {"player_id": "p09", "first_name": "Ivy", "last_name": "Irwin", "positions": "RF|LF", "batting_order": "9", "jersey_number": "11"},
    {"player_id": "p10", "first_name": "Jo", "last_name": "Jones", "positions": "3B|P", "batting_order": "10", "jersey_number": "5"},
    {"player_id": "p11", "first_name": "Kit", "last_name": "Kim", "positions": "C|RF", "batting_order": "11", "jersey_number": "30"},
]

PITCHER_IDS = ["p01", "p04", "p10"]


def make_player(player_id: str, positions: tuple[Position, ...] = (), batting_order: int | None = None) -> Player:
    return Player(
        player_id=player_id,
        first_name=player_id.upper(),
        last_name="Test",
        positions=positions,
        batting_order=batting_order,
        team_id=TEAM_ID,
    )


def utility_players(count: int) -> list[Player]:
    """Players eligible everywhere in the field, all with the same preference order."""
    return [make_player(f"u{i:02d}", SOLVER_POSITIONS, i) for i in range(1, count + 1)]


def write_roster_pack(pack_dir: Path, rows: list[dict] | None = None, manifest: dict | None = None) -> Path:
    pack_dir.mkdir(parents=True, exist_ok=True)
    manifest = manifest if manifest is not None else {"team_id": TEAM_ID, "team_name": "Owls", "schema_version": "1.0"}
    (pack_dir / "manifest.json").write_text(json.dumps(manifest), encoding="utf-8")
    rows = ROSTER_ROWS if rows is None else rows
    columns = list(rows[0].keys()) if rows else ["player_id", "first_name", "last_name", "positions"]
    with (pack_dir / "players.csv").open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=columns)
        writer.writeheader()
        writer.writerows(rows)
    return pack_dir


def load_roster_pack(tmp_path: Path) -> RosterPack:
    return RosterPackLoader().load(write_roster_pack(tmp_path / "pack"))


def roster_players() -> list[Player]:
    return [
        Player(
            player_id=row["player_id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            positions=tuple(Position.parse(code) for code in row["positions"].split("|")),
            batting_order=int(row["batting_order"]),
            jersey_number=int(row["jersey_number"]),
            team_id=TEAM_ID,
        )
        for row in ROSTER_ROWS
    ]


def bootstrap_game(runtime, tmp_path: Path, game_id: str = "g1") -> str:
    runtime.import_roster(load_roster_pack(tmp_path))
    runtime.create_game(TEAM_ID, "Hawks", "2026-05-02", "Field 3", game_id=game_id)
    return game_id
