from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from lineupcard.contracts import ActionRequest
from lineupcard.core import make_id
from lineupcard.roster import RosterPack
from lineupcard.session.runtime import GameDayRuntime

REPLAY_GAME_ID = "replay_game"


@dataclass(slots=True)
class ReplayAction:
    action_type: str
    payload: dict


class ReplayHarness:
    """Re-runs a recorded action list on two fresh runtimes sharing one seed."""

    def __init__(self, seed: int, pack: RosterPack, opponent: str = "Replay Opponent", game_date: str = "2026-01-01") -> None:
        self.seed = seed
        self.pack = pack
        self.opponent = opponent
        self.game_date = game_date
        self.actions: list[ReplayAction] = []

    def record(self, action_type: str, payload: dict | None = None) -> None:
        self.actions.append(ReplayAction(action_type=action_type, payload=dict(payload or {})))

    def save(self, path: Path) -> None:
        path.write_text(json.dumps({"seed": self.seed, "actions": self._iter_actions()}, indent=2), encoding="utf-8")

    @staticmethod
    def load(path: Path, pack: RosterPack) -> ReplayHarness:
        data = json.loads(path.read_text(encoding="utf-8"))
        harness = ReplayHarness(seed=int(data["seed"]), pack=pack)
        for raw in data["actions"]:
            harness.record(raw["action_type"], raw["payload"])
        return harness

    def replay(self, root: Path) -> tuple[dict, dict]:
        runtime_a = self._bootstrap_runtime(root / "replay_a")
        runtime_b = self._bootstrap_runtime(root / "replay_b")

        for action in self.actions:
            runtime_a.handle_action(ActionRequest(make_id("req"), action.action_type, action.payload, REPLAY_GAME_ID))
            runtime_b.handle_action(ActionRequest(make_id("req"), action.action_type, action.payload, REPLAY_GAME_ID))

        return self._fingerprint(runtime_a), self._fingerprint(runtime_b)

    def _iter_actions(self) -> list[dict]:
        return [{"action_type": a.action_type, "payload": a.payload} for a in self.actions]

    def _fingerprint(self, runtime: GameDayRuntime) -> dict:
        record = runtime.store.load_game(REPLAY_GAME_ID)
        day = runtime.day(REPLAY_GAME_ID)
        return {
            "available_ids": record.available_ids,
            "pitcher_order": record.pitcher_order,
            "batting_order": [p.player_id for p in day.batting_order],
            "lineups": record.lineups,
        }

    def _bootstrap_runtime(self, root: Path) -> GameDayRuntime:
        runtime = GameDayRuntime(root=root, seed=self.seed)
        runtime.import_roster(self.pack)
        runtime.create_game(self.pack.team.team_id, self.opponent, self.game_date, game_id=REPLAY_GAME_ID)
        return runtime
