"""
Title: Stream Combinator Value Types
Author: Alex Cooke
Date Created: 2026-02-02
Last Modified: 2026-02-05
Version: 1.2

Purpose:
Provides small, reusable, tick-driven primitives used by both the sensor
driver and the peripheral simulation: a sticky flag, a saturating consecutive
counter, "held for n ticks" and "seen within n ticks" windows, an alternating
clock, and a sample-and-hold register.

Each primitive is an immutable value holding a single boolean or integer.
advance(...) is pure: it returns the value for the next tick and leaves the
receiver untouched, so callers can compute every next-state value from one
snapshot before committing any of them.

Scope and Limitations:
- One advance() call corresponds to exactly one tick.
- ConsecutiveCount saturates at COUNT_LIMIT rather than growing without bound.
- SeenWithin follows its counter literally: before n ticks have elapsed it
  reports True even if the input has never been seen. Callers that need
  "seen at least once" should combine it with a StickyOr.

Dependencies:
- Python 3.10+
- dataclasses (standard library)
"""

from dataclasses import dataclass, field

from sensor_protocol import TEMP_SENTINEL

COUNT_LIMIT = 2**32 - 1


@dataclass(frozen=True)
class StickyOr:
    latched: bool = False

    @property
    def value(self) -> bool:
        return self.latched

    def advance(self, i: bool) -> "StickyOr":
        if self.latched:
            return self
        return StickyOr(bool(i))


@dataclass(frozen=True)
class ConsecutiveCount:
    count: int = 0
    limit: int = COUNT_LIMIT

    @property
    def value(self) -> int:
        return self.count

    def advance(self, i: bool) -> "ConsecutiveCount":
        if not i:
            return ConsecutiveCount(0, self.limit)
        # Saturate instead of wrapping under long uptime.
        return ConsecutiveCount(min(self.count + 1, self.limit), self.limit)


@dataclass(frozen=True)
class HeldFor:
    """True once the input has been true for at least n consecutive ticks."""

    n: int
    counter: ConsecutiveCount = field(default_factory=ConsecutiveCount)

    def __post_init__(self):
        if self.n < 1:
            raise ValueError(f"HeldFor window must be >= 1 tick (got {self.n})")

    @property
    def value(self) -> bool:
        return self.counter.count >= self.n

    def advance(self, i: bool) -> "HeldFor":
        return HeldFor(self.n, self.counter.advance(i))


@dataclass(frozen=True)
class SeenWithin:
    """True iff the input was true at least once in the last n ticks."""

    n: int
    absent: ConsecutiveCount = field(default_factory=ConsecutiveCount)

    def __post_init__(self):
        if self.n < 1:
            raise ValueError(f"SeenWithin window must be >= 1 tick (got {self.n})")

    @property
    def value(self) -> bool:
        return self.absent.count < self.n

    def advance(self, i: bool) -> "SeenWithin":
        return SeenWithin(self.n, self.absent.advance(not i))


@dataclass(frozen=True)
class AlternatingClock:
    # phase is the output of the most recent tick. A new clock sits on the
    # pre-start phase so that the first advance() emits False.
    phase: bool = True

    @property
    def value(self) -> bool:
        return self.phase

    def advance(self) -> "AlternatingClock":
        return AlternatingClock(not self.phase)


@dataclass(frozen=True)
class SampleHold:
    held: int = TEMP_SENTINEL

    @property
    def value(self) -> int:
        return self.held

    def advance(self, value: int, clock: bool) -> "SampleHold":
        if clock:
            return SampleHold(int(value))
        return self
