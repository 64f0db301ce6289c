from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lineupcard.contracts import ActionRequest, ActionResult, ActionType
from lineupcard.core import make_id, rules_from_mapping
from lineupcard.roster import RosterPackLoader
from lineupcard.session import GameDayRuntime

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lineup card: per-inning fielding assignments for youth baseball")
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="runtime root directory")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible lineup generation")
    parser.add_argument("--innings", type=int, default=6, help="innings per game")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="logging level (DEBUG shows solver traces)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import-team", help="import a roster pack (manifest.json + players.csv)")
    imp.add_argument("pack_dir", type=Path)

    new = sub.add_parser("new-game", help="create a game with every rostered player available")
    new.add_argument("--team", required=True)
    new.add_argument("--opponent", required=True)
    new.add_argument("--date", required=True)
    new.add_argument("--location", default="")

    gen = sub.add_parser("generate", help="generate positions for every inning or one inning")
    gen.add_argument("game_id")
    gen.add_argument("--inning", type=int, default=None)

    assign = sub.add_parser("assign", help="manually place a player (omit --player to clear the slot)")
    assign.add_argument("game_id")
    assign.add_argument("--inning", type=int, required=True)
    assign.add_argument("--position", required=True)
    assign.add_argument("--player", default=None)

    avail = sub.add_parser("availability", help="mark a player available or unavailable")
    avail.add_argument("game_id")
    avail.add_argument("--player", required=True)
    avail.add_argument("--out", action="store_true", help="mark unavailable instead of available")

    pitchers = sub.add_parser("pitchers", help="set the pitcher order")
    pitchers.add_argument("game_id")
    pitchers.add_argument("player_ids", nargs="*")

    card = sub.add_parser("card", help="print the lineup card")
    card.add_argument("game_id")

    export = sub.add_parser("export", help="export playing-time marts and charts")
    export.add_argument("game_id")
    return parser


def _request(game_id: str, action: ActionType, payload: dict | None = None) -> ActionRequest:
    return ActionRequest(make_id("req"), action, payload or {}, game_id)


def _report(result: ActionResult) -> int:
    print(result.message)
    for warning in result.data.get("warnings", []):
        print(f"  warning: {warning['field_path']} {warning['message']}")
    for issue in result.data.get("issues", []):
        print(f"  issue: {issue['code']} {issue['message']}")
    return 0 if result.success else 1


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    runtime = GameDayRuntime(root=args.root, seed=args.seed, rules=rules_from_mapping({"total_innings": args.innings}))

    if args.command == "import-team":
        pack = RosterPackLoader().load(args.pack_dir)
        runtime.import_roster(pack)
        print(f"Imported {pack.team.name} ({len(pack.players)} players)")
        return 0

    if args.command == "new-game":
        record = runtime.create_game(args.team, args.opponent, args.date, args.location)
        print(record.game_id)
        return 0

    if args.command == "generate":
        if args.inning is None:
            return _report(runtime.handle_action(_request(args.game_id, ActionType.GENERATE_ALL)))
        return _report(runtime.handle_action(_request(args.game_id, ActionType.GENERATE_INNING, {"inning": args.inning})))

    if args.command == "assign":
        payload = {"inning": args.inning, "position": args.position, "player_id": args.player}
        return _report(runtime.handle_action(_request(args.game_id, ActionType.ASSIGN_POSITION, payload)))

    if args.command == "availability":
        payload = {"player_id": args.player, "available": not args.out}
        return _report(runtime.handle_action(_request(args.game_id, ActionType.SET_AVAILABILITY, payload)))

    if args.command == "pitchers":
        payload = {"pitcher_ids": args.player_ids}
        return _report(runtime.handle_action(_request(args.game_id, ActionType.SET_PITCHER_ORDER, payload)))

    if args.command == "card":
        result = runtime.handle_action(_request(args.game_id, ActionType.GET_LINEUP_CARD))
        if result.success:
            print(result.data["text"])
            return 0
        return _report(result)

    if args.command == "export":
        try:
            outputs = runtime.export(args.game_id)
        except KeyError as exc:
            print(f"Export unavailable: {exc}")
            return 1
        print("Exported:")
        for p in outputs:
            print(f"- {p}")
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
