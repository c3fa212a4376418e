"""Politeness delays between requests and items."""

from __future__ import annotations

import random
from collections.abc import Callable
from time import sleep
from typing import Protocol


class Pacer(Protocol):
    """Blocking wait injected between external requests."""

    def wait(self) -> None:
        """Pause before the next request."""


class NoDelayPacer:
    """Pacer that never waits."""

    def wait(self) -> None:
        return None


class RandomDelayPacer:
    """Sleep for a uniformly random duration between two bounds in milliseconds."""

    def __init__(
        self,
        min_ms: int,
        max_ms: int,
        sleeper: Callable[[float], None] = sleep,
        rng: random.Random | None = None,
    ) -> None:
        if min_ms < 0 or max_ms < min_ms:
            raise ValueError("delay bounds must satisfy 0 <= min_ms <= max_ms")
        self.min_ms = min_ms
        self.max_ms = max_ms
        self.sleeper = sleeper
        self.rng = rng or random.Random()

    def next_delay_seconds(self) -> float:
        return self.rng.uniform(self.min_ms, self.max_ms) / 1000.0

    def wait(self) -> None:
        delay = self.next_delay_seconds()
        if delay > 0:
            self.sleeper(delay)


def build_pacer(min_ms: int, max_ms: int) -> Pacer:
    """Return a no-op pacer for zero bounds, otherwise a random-delay pacer."""
    if max_ms <= 0:
        return NoDelayPacer()
    return RandomDelayPacer(min_ms, max_ms)
