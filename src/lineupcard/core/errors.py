from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from uuid import uuid4

from lineupcard.contracts import ForensicArtifact
from lineupcard.core.ids import now_utc


class InvalidInningError(ValueError):
    def __init__(self, inning: object, total_innings: int) -> None:
        super().__init__(f"inning {inning!r} outside 1..{total_innings}")
        self.inning = inning
        self.total_innings = total_innings


class PersistenceError(RuntimeError):
    """Raised by stores when a save or load cannot be completed."""


def check_inning(inning: object, total_innings: int) -> int:
    if isinstance(inning, bool) or not isinstance(inning, int) or inning < 1 or inning > total_innings:
        raise InvalidInningError(inning, total_innings)
    return inning


def build_forensic_artifact(
    engine_scope: str,
    error_code: str,
    message: str,
    state_snapshot: dict[str, object],
    *,
    game_id: str = "",
    request_id: str = "",
    context: dict[str, object] | None = None,
    causal_fragment: list[str] | None = None,
) -> ForensicArtifact:
    return ForensicArtifact(
        artifact_id=str(uuid4()),
        timestamp=now_utc(),
        engine_scope=engine_scope,
        error_code=error_code,
        message=message,
        state_snapshot=state_snapshot,
        context=dict(context or {}),
        identifiers={"game_id": game_id, "request_id": request_id},
        causal_fragment=list(causal_fragment or []),
    )


def persist_forensic_artifact(artifact: ForensicArtifact, output_dir: Path) -> Path:
    """Write ``<game>_<error_code>_<short id>.json`` so artifacts group by game in a listing."""
    output_dir.mkdir(parents=True, exist_ok=True)
    game = artifact.identifiers.get("game_id") or "no_game"
    path = output_dir / f"{game}_{artifact.error_code.lower()}_{artifact.artifact_id[:8]}.json"
    path.write_text(json.dumps(asdict(artifact), default=str, indent=2, sort_keys=True), encoding="utf-8")
    return path
