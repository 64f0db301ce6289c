from __future__ import annotations

import json
from pathlib import Path

from lineupcard.contracts import ActionRequest, ActionType, Position
from lineupcard.core import PersistenceError, make_id
from lineupcard.session import GameDayRuntime, ReplayHarness
from tests.helpers import PITCHER_IDS, TEAM_ID, bootstrap_game, load_roster_pack


def _act(runtime: GameDayRuntime, game_id: str, action: ActionType, payload: dict | None = None):
    return runtime.handle_action(ActionRequest(make_id("req"), action, payload or {}, game_id))


def _inning(result, number: int) -> dict:
    record = next(r for r in result.data["lineups"] if r["inning"] == number)
    return {e["position"]: e["playerId"] for e in record["positions"]}


def test_new_game_loads_with_everyone_available_and_empty_lineup(tmp_path: Path):
    runtime = GameDayRuntime(root=tmp_path, seed=1)
    game_id = bootstrap_game(runtime, tmp_path)

    loaded = _act(runtime, game_id, ActionType.LOAD_GAME)
    assert loaded.success
    assert len(loaded.data["available_ids"]) == 11
    assert loaded.data["pitcher_order"] == []
    assert len(loaded.data["lineups"]) == 6
    assert all(pid is None for pid in _inning(loaded, 1).values())
    assert len(loaded.data["warnings"]) == 6 * 9


def test_generate_and_edit_flow_persists(tmp_path: Path):
    runtime = GameDayRuntime(root=tmp_path, seed=2)
    game_id = bootstrap_game(runtime, tmp_path)
    assert _act(runtime, game_id, ActionType.SET_PITCHER_ORDER, {"pitcher_ids": PITCHER_IDS}).success

    generated = _act(runtime, game_id, ActionType.GENERATE_ALL)
    assert generated.success
    assert [_inning(generated, n)["P"] for n in range(1, 7)] == ["p01", "p01", "p04", "p04", "p10", "p10"]
    assert generated.data["warnings"] == []
    assert generated.data["blocking"] == []

    # move whoever plays short to second base in inning 2
    shortstop = _inning(generated, 2)["SS"]
    edited = _act(runtime, game_id, ActionType.ASSIGN_POSITION, {"inning": 2, "position": "2B", "player_id": shortstop})
    assert edited.success
    assert _inning(edited, 2)["2B"] == shortstop
    assert _inning(edited, 2)["SS"] is None
    for n in (1, 3, 4, 5, 6):
        assert _inning(edited, n) == _inning(generated, n)

    stored = runtime.store.load_game(game_id)
    assert stored.pitcher_order == PITCHER_IDS
    assert stored.lineups == edited.data["lineups"]


def test_generate_single_inning_keeps_the_rest(tmp_path: Path):
    runtime = GameDayRuntime(root=tmp_path, seed=3)
    game_id = bootstrap_game(runtime, tmp_path)
    before = _act(runtime, game_id, ActionType.GENERATE_ALL)

    after = _act(runtime, game_id, ActionType.GENERATE_INNING, {"inning": 5})
    assert after.success
    for n in (1, 2, 3, 4, 6):
        assert _inning(after, n) == _inning(before, n)

    rejected = _act(runtime, game_id, ActionType.GENERATE_INNING, {"inning": 9})
    assert not rejected.success
    assert rejected.message.startswith("invalid request")


def test_marking_unavailable_clears_player_everywhere(tmp_path: Path):
    runtime = GameDayRuntime(root=tmp_path, seed=4)
    game_id = bootstrap_game(runtime, tmp_path)
    _act(runtime, game_id, ActionType.SET_PITCHER_ORDER, {"pitcher_ids": PITCHER_IDS})
    _act(runtime, game_id, ActionType.GENERATE_ALL)

    result = _act(runtime, game_id, ActionType.SET_AVAILABILITY, {"player_id": "p01", "available": False})
    assert result.success
    assert "p01" not in result.data["available_ids"]
    assert "p01" not in result.data["batting_order"]
    assert result.data["pitcher_order"] == ["p04", "p10"]
    assert all("p01" not in _inning(result, n).values() for n in range(1, 7))
    assert result.data["blocking"] == []

    ranks = {p.player_id: p.batting_order for p in runtime.store.list_players(TEAM_ID)}
    assert ranks["p01"] is None
    assert ranks["p02"] == 1

    back = _act(runtime, game_id, ActionType.SET_AVAILABILITY, {"player_id": "p01", "available": True})
    assert back.data["batting_order"][-1] == "p01"


def test_move_batter_reorders_and_persists_ranks(tmp_path: Path):
    runtime = GameDayRuntime(root=tmp_path, seed=5)
    game_id = bootstrap_game(runtime, tmp_path)

    result = _act(runtime, game_id, ActionType.MOVE_BATTER, {"player_id": "p03", "target_id": "p01"})
    assert result.success
    assert result.data["batting_order"][:3] == ["p03", "p01", "p02"]
    assert [p.player_id for p in runtime.store.list_players(TEAM_ID)][:3] == ["p03", "p01", "p02"]


def test_lineup_card_action_renders_text(tmp_path: Path):
    runtime = GameDayRuntime(root=tmp_path, seed=6)
    game_id = bootstrap_game(runtime, tmp_path)
    _act(runtime, game_id, ActionType.GENERATE_ALL)

    card = _act(runtime, game_id, ActionType.GET_LINEUP_CARD)
    assert card.success
    assert card.data["text"].splitlines()[0] == "Owls vs Hawks (2026-05-02)"
    assert len(card.data["rows"]) == 11


def test_failed_save_reverts_in_memory_state(tmp_path: Path):
    def failing_saver(record):
        raise PersistenceError("database is locked")

    runtime = GameDayRuntime(root=tmp_path, seed=7, saver=failing_saver)
    game_id = bootstrap_game(runtime, tmp_path)
    before = runtime.day(game_id)

    result = _act(runtime, game_id, ActionType.GENERATE_ALL)
    assert not result.success
    assert "reverted" in result.message
    assert runtime.day(game_id) is before
    assert all(a.player_at(Position.C) is None for a in runtime.day(game_id).lineup.innings)


def test_failed_rank_save_restores_the_saved_game(tmp_path: Path):
    def failing_rank_saver(team_id, ranks):
        raise PersistenceError("database is locked")

    runtime = GameDayRuntime(root=tmp_path, seed=11, rank_saver=failing_rank_saver)
    game_id = bootstrap_game(runtime, tmp_path)

    result = _act(runtime, game_id, ActionType.SET_AVAILABILITY, {"player_id": "p05", "available": False})
    assert not result.success
    assert "reverted" in result.message
    assert "p05" in runtime.day(game_id).available_ids
    assert "p05" in runtime.store.load_game(game_id).available_ids


def test_assigning_an_unavailable_player_is_rejected(tmp_path: Path):
    runtime = GameDayRuntime(root=tmp_path, seed=12)
    game_id = bootstrap_game(runtime, tmp_path)
    assert _act(runtime, game_id, ActionType.SET_AVAILABILITY, {"player_id": "p05", "available": False}).success

    result = _act(runtime, game_id, ActionType.ASSIGN_POSITION, {"inning": 1, "position": "C", "player_id": "p05"})
    assert not result.success
    assert [i["code"] for i in result.data["issues"]] == ["UNAVAILABLE_PLAYER"]
    assert runtime.day(game_id).lineup.inning(1).player_at(Position.C) is None
    stored = runtime.store.load_game(game_id)
    assert all(e["playerId"] != "p05" for record in stored.lineups for e in record["positions"])


def test_unexpected_error_writes_forensic_artifact(tmp_path: Path):
    def broken_saver(record):
        raise RuntimeError("disk on fire")

    runtime = GameDayRuntime(root=tmp_path / "runtime", seed=8, saver=broken_saver)
    game_id = bootstrap_game(runtime, tmp_path)
    before = runtime.day(game_id)

    result = _act(runtime, game_id, ActionType.GENERATE_ALL)
    assert not result.success
    path = Path(result.data["forensic_path"])
    assert path.name.startswith(f"{game_id}_unhandled_runtime_exception_")
    artifact = json.loads(path.read_text(encoding="utf-8"))
    assert artifact["identifiers"]["game_id"] == game_id
    assert artifact["message"] == "disk on fire"
    assert runtime.day(game_id) is before


def test_unknown_ids_are_rejected(tmp_path: Path):
    runtime = GameDayRuntime(root=tmp_path, seed=9)
    game_id = bootstrap_game(runtime, tmp_path)

    missing_game = _act(runtime, "nope", ActionType.LOAD_GAME)
    assert not missing_game.success
    bad_player = _act(runtime, game_id, ActionType.ASSIGN_POSITION, {"inning": 1, "position": "C", "player_id": "ghost"})
    assert not bad_player.success
    bad_position = _act(runtime, game_id, ActionType.ASSIGN_POSITION, {"inning": 1, "position": "DH", "player_id": "p02"})
    assert not bad_position.success


def test_generation_events_reach_the_bus(tmp_path: Path):
    runtime = GameDayRuntime(root=tmp_path, seed=10)
    game_id = bootstrap_game(runtime, tmp_path)
    _act(runtime, game_id, ActionType.GENERATE_ALL)

    assert runtime.event_bus.emitted_count("solver") >= 6 * 9
    assert runtime.event_bus.emitted_count("generator") == 1


def test_replay_harness_determinism(tmp_path: Path):
    harness = ReplayHarness(seed=99, pack=load_roster_pack(tmp_path))
    harness.record(ActionType.SET_PITCHER_ORDER.value, {"pitcher_ids": PITCHER_IDS})
    harness.record(ActionType.GENERATE_ALL.value, {})
    harness.record(ActionType.SET_AVAILABILITY.value, {"player_id": "p05", "available": False})
    harness.record(ActionType.GENERATE_INNING.value, {"inning": 3})

    saved = tmp_path / "replay.json"
    harness.save(saved)
    reloaded = ReplayHarness.load(saved, harness.pack)
    assert [a.action_type for a in reloaded.actions] == [a.action_type for a in harness.actions]

    a, b = reloaded.replay(tmp_path / "runs")
    assert a == b
    assert any(entry["playerId"] for record in a["lineups"] for entry in record["positions"])
