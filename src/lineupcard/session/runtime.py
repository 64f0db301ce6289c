from __future__ import annotations

import logging
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any, Callable, Sequence

from lineupcard.contracts import (
    ActionRequest,
    ActionResult,
    ActionType,
    GameLineup,
    TraceEvent,
    ValidationError,
    ValidationIssue,
)
from lineupcard.core import (
    EventBus,
    GameRules,
    default_rules,
    PersistenceError,
    build_forensic_artifact,
    gameplay_random,
    make_id,
    persist_forensic_artifact,
    seeded_random,
)
from lineupcard.engine import (
    LineupGenerator,
    LineupValidator,
    assign_position,
    lineup_to_payload,
    replace_inning,
)
from lineupcard.export import ChartRenderer, ExportService, MatplotlibChartRenderer
from lineupcard.persistence import LineupStore, run_game_etl
from lineupcard.roster import (
    GameDay,
    GameRecord,
    RosterPack,
    batting_order_ranks,
    build_lineup_card,
    default_available_ids,
    innings_count,
    make_available,
    make_unavailable,
    move_player,
    open_game_day,
    set_pitcher_order,
)

logger = logging.getLogger(__name__)

GameSaver = Callable[[GameRecord], None]
RankSaver = Callable[[str, Sequence[tuple[str, int]]], None]


class RuntimePaths:
    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def sqlite_path(self) -> Path:
        return self.root / "data" / "lineups.sqlite3"

    @property
    def duckdb_path(self) -> Path:
        return self.root / "data" / "analytics.duckdb"

    @property
    def export_dir(self) -> Path:
        return self.root / "exports"

    @property
    def forensic_dir(self) -> Path:
        return self.root / "forensics"


class GameDayRuntime:
    """Holds the working state of open games and applies coach actions to it.

    Every mutation is applied to memory first and then saved; when the save
    fails the previous in-memory state is put back and the action reports
    failure.
    """

    def __init__(
        self,
        root: Path,
        seed: int | None = None,
        rules: GameRules | None = None,
        saver: GameSaver | None = None,
        rank_saver: RankSaver | None = None,
    ) -> None:
        self.paths = RuntimePaths(root)
        self.paths.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
        self.seed = seed
        self.rules = rules or default_rules()
        self.rules.validate()

        self.rand = seeded_random(seed) if seed is not None else gameplay_random()
        self.event_bus = EventBus()
        self.event_bus.subscribe(self._log_trace)
        self.store = LineupStore(self.paths.sqlite_path)
        self.store.initialize_schema()
        self.generator = LineupGenerator(self.rand.spawn("lineup"), rules=self.rules, trace=self.event_bus.publish)
        self.validator = LineupValidator()

        self.saver: GameSaver = saver or self.store.save_game
        self.rank_saver: RankSaver = rank_saver or self.store.update_batting_order
        self.records: dict[str, GameRecord] = {}
        self.days: dict[str, GameDay] = {}

    def import_roster(self, pack: RosterPack) -> None:
        self.store.save_team(pack.team, pack.players)
        logger.info("Imported team %s with %d players", pack.team.team_id, len(pack.players))

    def create_game(
        self,
        team_id: str,
        opponent: str,
        game_date: str,
        location: str = "",
        game_id: str | None = None,
    ) -> GameRecord:
        self.store.get_team(team_id)
        players = self.store.list_players(team_id)
        record = GameRecord(
            game_id=game_id or make_id("game", game_date),
            team_id=team_id,
            opponent=opponent,
            game_date=game_date,
            location=location,
            available_ids=default_available_ids(players),
            pitcher_order=[],
            lineups=lineup_to_payload(GameLineup.empty(self.rules.total_innings)),
        )
        self.store.save_game(record)
        logger.info("Created game %s: %s vs %s on %s", record.game_id, team_id, opponent, game_date)
        return record

    def day(self, game_id: str) -> GameDay:
        if game_id not in self.days:
            record = self.store.load_game(game_id)
            players = self.store.list_players(record.team_id)
            self.records[game_id] = record
            self.days[game_id] = open_game_day(record, players, self.rules.total_innings)
        return self.days[game_id]

    def handle_action(self, request: ActionRequest) -> ActionResult:
        try:
            return self._handle_action_core(request)
        except ValidationError as exc:
            return ActionResult(
                request.request_id,
                False,
                "action rejected by validation",
                data={"issues": [asdict(i) for i in exc.issues]},
            )
        except (KeyError, ValueError) as exc:
            return ActionResult(request.request_id, False, f"invalid request: {exc}")
        except Exception as exc:
            artifact = build_forensic_artifact(
                engine_scope="runtime",
                error_code="UNHANDLED_RUNTIME_EXCEPTION",
                message=str(exc),
                state_snapshot={"open_games": sorted(self.days)},
                context={"action_type": str(request.action_type), "payload": request.payload},
                game_id=request.game_id or "",
                request_id=request.request_id,
                causal_fragment=["runtime_dispatch"],
            )
            path = persist_forensic_artifact(artifact, self.paths.forensic_dir)
            logger.exception("Action %s failed; forensic artifact at %s", request.action_type, path)
            return ActionResult(
                request.request_id,
                False,
                f"runtime error: {exc}",
                {"forensic_path": str(path)},
            )

    def export(self, game_id: str) -> list[Path]:
        day = self.day(game_id)
        run_game_etl(self.paths.sqlite_path, self.paths.duckdb_path, game_id)
        outputs = ExportService(self.paths.duckdb_path).export_required_datasets(self.paths.export_dir)
        renderer: ChartRenderer = MatplotlibChartRenderer()
        card = build_lineup_card(self._title(game_id), day.batting_order, day.lineup)
        outputs.append(renderer.render_lineup_card(card, self.paths.export_dir / f"{game_id}_card.png"))
        outputs.append(
            renderer.render_playing_time(
                self._title(game_id),
                [row.name for row in card.rows],
                [row.innings_played for row in card.rows],
                self.paths.export_dir / f"{game_id}_playing_time.png",
            )
        )
        return outputs

    def _handle_action_core(self, request: ActionRequest) -> ActionResult:
        action = ActionType(request.action_type)
        payload = request.payload
        day = self.day(request.game_id)

        if action == ActionType.LOAD_GAME:
            return ActionResult(request.request_id, True, "game loaded", data=self._snapshot(day))

        if action == ActionType.GET_LINEUP:
            return ActionResult(request.request_id, True, "lineup", data=self._snapshot(day))

        if action == ActionType.GET_LINEUP_CARD:
            card = build_lineup_card(self._title(day.game_id), day.batting_order, day.lineup)
            return ActionResult(
                request.request_id,
                True,
                "lineup card",
                data={"text": card.render_text(), "rows": [asdict(r) for r in card.rows]},
            )

        if action == ActionType.GENERATE_ALL:
            lineup = self.generator.generate_all(day.batting_order, day.pitcher_order, day.available_ids)
            return self._commit(request, day, replace(day, lineup=lineup), "positions generated for all innings")

        if action == ActionType.GENERATE_INNING:
            inning = int(payload["inning"])
            assignment = self.generator.generate_one(day.batting_order, day.pitcher_order, inning, day.available_ids)
            updated = replace(day, lineup=replace_inning(day.lineup, assignment))
            return self._commit(request, day, updated, f"positions generated for inning {inning}")

        if action == ActionType.ASSIGN_POSITION:
            player_id = payload.get("player_id")
            player = day.player(str(player_id)) if player_id else None
            if player is not None and player.player_id not in day.available_ids:
                raise ValidationError(
                    [
                        ValidationIssue(
                            code="UNAVAILABLE_PLAYER",
                            severity="blocking",
                            field_path=f"innings[{payload['inning']}].{payload['position']}",
                            entity_id=player.player_id,
                            message=f"player {player.player_id} is not available for this game",
                        )
                    ]
                )
            lineup = assign_position(day.lineup, int(payload["inning"]), str(payload["position"]), player)
            return self._commit(request, day, replace(day, lineup=lineup), "position assigned")

        if action == ActionType.SET_AVAILABILITY:
            player_id = str(payload["player_id"])
            if bool(payload["available"]):
                updated = make_available(day, player_id)
            else:
                updated = make_unavailable(day, player_id)
            return self._commit(request, day, updated, f"availability updated for {player_id}", ranks_changed=True)

        if action == ActionType.MOVE_BATTER:
            order = move_player(day.batting_order, str(payload["player_id"]), str(payload["target_id"]))
            return self._commit(request, day, replace(day, batting_order=order), "batting order updated", ranks_changed=True)

        if action == ActionType.SET_PITCHER_ORDER:
            updated = set_pitcher_order(day, [str(pid) for pid in payload.get("pitcher_ids", [])])
            return self._commit(request, day, updated, "pitcher order updated")

        return ActionResult(request.request_id, False, f"unsupported action: {action.value}")

    def _commit(
        self,
        request: ActionRequest,
        previous: GameDay,
        updated: GameDay,
        message: str,
        ranks_changed: bool = False,
    ) -> ActionResult:
        self.days[updated.game_id] = updated
        record = self._to_record(updated)
        game_saved = False
        try:
            self.saver(record)
            game_saved = True
            if ranks_changed:
                self.rank_saver(updated.team_id, batting_order_ranks(updated.batting_order))
        except PersistenceError as exc:
            self._revert(previous, game_saved)
            logger.warning("Save failed for game %s, reverted in-memory state: %s", previous.game_id, exc)
            return ActionResult(request.request_id, False, f"save failed, changes reverted: {exc}")
        except Exception:
            self._revert(previous, game_saved)
            raise
        self.records[updated.game_id] = record
        return ActionResult(request.request_id, True, message, data=self._snapshot(updated))

    def _revert(self, previous: GameDay, game_saved: bool) -> None:
        self.days[previous.game_id] = previous
        # the game row went out before the rank save failed; put it back
        if game_saved:
            self.saver(self._to_record(previous))

    def _to_record(self, day: GameDay) -> GameRecord:
        base = self.records[day.game_id]
        return replace(
            base,
            available_ids=[p.player_id for p in day.roster if p.player_id in day.available_ids],
            pitcher_order=[p.player_id for p in day.pitcher_order],
            lineups=lineup_to_payload(day.lineup),
        )

    def _snapshot(self, day: GameDay) -> dict[str, Any]:
        report = self.validator.validate(day.lineup, day.available_ids)
        return {
            "game_id": day.game_id,
            "available_ids": sorted(day.available_ids),
            "batting_order": [p.player_id for p in day.batting_order],
            "pitcher_order": [p.player_id for p in day.pitcher_order],
            "lineups": lineup_to_payload(day.lineup),
            "innings_count": {p.player_id: innings_count(day.lineup, p.player_id) for p in day.batting_order},
            "warnings": [asdict(i) for i in report.warnings],
            "blocking": [asdict(i) for i in report.blocking],
        }

    def _title(self, game_id: str) -> str:
        record = self.records.get(game_id) or self.store.load_game(game_id)
        team = self.store.get_team(record.team_id)
        return f"{team.name} vs {record.opponent} ({record.game_date})"

    @staticmethod
    def _log_trace(event: TraceEvent) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s.%s %s", event.scope, event.event_type, event.data)
