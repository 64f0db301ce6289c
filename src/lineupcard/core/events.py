from __future__ import annotations

from collections import defaultdict
from typing import Any, DefaultDict

from lineupcard.contracts import TraceEvent, TraceHandler
from lineupcard.core.ids import now_utc


class EventBus:
    def __init__(self) -> None:
        self._handlers: list[TraceHandler] = []
        self._counter: DefaultDict[str, int] = defaultdict(int)

    def subscribe(self, handler: TraceHandler) -> None:
        self._handlers.append(handler)

    def publish(self, event: TraceEvent) -> None:
        self._counter[event.scope] += 1
        for handler in self._handlers:
            handler(event)

    def emitted_count(self, scope: str | None = None) -> int:
        if scope is None:
            return sum(self._counter.values())
        return self._counter[scope]


def emit(trace: TraceHandler | None, scope: str, event_type: str, **data: Any) -> None:
    if trace is None:
        return
    trace(TraceEvent(scope=scope, event_type=event_type, data=data, time=now_utc()))
