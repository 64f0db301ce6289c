from __future__ import annotations

import hashlib
import random
from typing import Any, Sequence

from lineupcard.contracts import RandomSource


class PythonRandomSource(RandomSource):
    """Injected randomness source for lineup generation and test determinism."""

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    def rand(self) -> float:
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def choice(self, items: Sequence[Any]) -> Any:
        if not items:
            raise ValueError("choice items must not be empty")
        return self._rng.choice(items)

    def shuffle(self, items: list[Any]) -> None:
        self._rng.shuffle(items)

    def spawn(self, substream_id: str) -> RandomSource:
        seed = self._seed
        if seed is None:
            return PythonRandomSource(seed=None)
        digest = hashlib.sha256(f"{seed}:{substream_id}".encode("ascii", "ignore")).hexdigest()
        child_seed = int(digest[:16], 16)
        return PythonRandomSource(seed=child_seed)


class SequenceRandomSource(RandomSource):
    """Replays a fixed list of floats in [0, 1), cycling when exhausted.

    ``choice`` and ``shuffle`` are derived from ``rand`` (index = floor(r * n),
    Fisher-Yates from the back), so a test can script every draw the solver makes.
    """

    def __init__(self, values: Sequence[float]) -> None:
        if not values:
            raise ValueError("sequence random source needs at least one value")
        for v in values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"scripted value {v} outside [0, 1)")
        self._values = list(values)
        self._cursor = 0

    @property
    def draws(self) -> int:
        return self._cursor

    def rand(self) -> float:
        value = self._values[self._cursor % len(self._values)]
        self._cursor += 1
        return value

    def randint(self, a: int, b: int) -> int:
        return a + int(self.rand() * (b - a + 1))

    def choice(self, items: Sequence[Any]) -> Any:
        if not items:
            raise ValueError("choice items must not be empty")
        return items[int(self.rand() * len(items))]

    def shuffle(self, items: list[Any]) -> None:
        for i in range(len(items) - 1, 0, -1):
            j = int(self.rand() * (i + 1))
            items[i], items[j] = items[j], items[i]

    def spawn(self, substream_id: str) -> RandomSource:
        return SequenceRandomSource(self._values)


def gameplay_random() -> PythonRandomSource:
    return PythonRandomSource(seed=None)


def seeded_random(seed: int) -> PythonRandomSource:
    return PythonRandomSource(seed=seed)
