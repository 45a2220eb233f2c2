"""
Title: Sensor Driver Configuration Model (DriverConfiguration)
Author: Alex Cooke
Date Created: 2026-02-03
Last Modified: 2026-02-05
Version: 1.1

Purpose:
Defines an immutable data model holding the tunable characteristics of the
sensor driver and its polling loop: tick period, the sentinel used for
undefined temperatures, staleness and stability windows, and the recovery
budget. The driver uses it to size its telemetry windows; the runner uses it
to check that the worst-case recovery time is within budget before starting.

Scope and Limitations:
- Recovery time is counted in ticks, not seconds; seconds are derived from
  tick_period_s.
- There is no retry counter or backoff to configure: a rejected command is
  retried on the very next tick.
- Configuration values are static and immutable once instantiated.

Dependencies:
- Python 3.10+
- dataclasses (standard library)
"""

from dataclasses import dataclass

from sensor_protocol import Command, TEMP_SENTINEL

# Commands that must each be accepted once before the driver polls.
INIT_SEQUENCE: tuple[Command, ...] = (Command.RESET, Command.SET_INT_ENABLE)


@dataclass(frozen=True)
class DriverConfiguration:
    # Immutable sensor driver configuration.
    name: str
    tick_period_s: float = 0.1
    temp_sentinel: int = TEMP_SENTINEL
    stale_after_ticks: int = 4
    stable_after_ticks: int = 4
    recovery_budget_ticks: int = 2

    def __post_init__(self):
        if self.tick_period_s <= 0:
            raise ValueError(f"tick_period_s must be > 0 (got {self.tick_period_s})")
        if self.stale_after_ticks < 1:
            raise ValueError(f"stale_after_ticks must be >= 1 (got {self.stale_after_ticks})")
        if self.stable_after_ticks < 1:
            raise ValueError(f"stable_after_ticks must be >= 1 (got {self.stable_after_ticks})")
        if self.recovery_budget_ticks < 0:
            raise ValueError(
                f"recovery_budget_ticks must be >= 0 (got {self.recovery_budget_ticks})"
            )

    def worst_case_recovery_ticks(self) -> int:
        # One tick per init command for its response to come back, with no
        # retries once the peripheral is healthy again.
        return len(INIT_SEQUENCE)

    def worst_case_recovery_s(self) -> float:
        return self.worst_case_recovery_ticks() * self.tick_period_s

    def meets_recovery_requirement(self) -> bool:
        return self.worst_case_recovery_ticks() <= self.recovery_budget_ticks
