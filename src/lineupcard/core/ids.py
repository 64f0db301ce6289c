from __future__ import annotations

import re
from datetime import UTC, datetime
from uuid import uuid4

_UNSAFE = re.compile(r"[^A-Za-z0-9-]+")


def now_utc() -> datetime:
    return datetime.now(UTC)


def make_id(prefix: str, *parts: str) -> str:
    """``prefix[_part...]_<hex>``; parts are slugged so ids stay shell-friendly."""
    slugs = [s for s in (_UNSAFE.sub("-", str(p)).strip("-").lower() for p in parts) if s]
    return "_".join([prefix, *slugs, uuid4().hex[:8]])
