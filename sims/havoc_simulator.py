"""
Title: Peripheral Fault-Injection (Havoc) Simulator
Author: Alex Cooke
Date Created: 2026-02-04
Last Modified: 2026-02-06
Version: 1.1

Purpose:
Generates the test-only havoc signal that forces the simulated peripheral
into a failed state. Faults start at random with a configurable per-tick
probability and last for a random burst of ticks. A forced value can be set
to override the random schedule, which is how the CLI and tests inject
deterministic faults.

Scope and Limitations:
- Fault onset is memoryless (Bernoulli per tick); bursts are uniform in length.
- The havoc signal is unavailable outside simulation and testing.

Dependencies:
- Python 3.10+
- random (standard library)
"""

import random


class HavocSimulator:
    def __init__(
        self,
        fault_probability=0.02,     # chance per healthy tick that a burst starts
        min_burst_ticks=1,
        max_burst_ticks=5,
        rng: random.Random | None = None,
    ):
        if not 0.0 <= float(fault_probability) <= 1.0:
            raise ValueError(f"fault_probability must be within [0, 1] (got {fault_probability})")
        if min_burst_ticks < 1 or max_burst_ticks < min_burst_ticks:
            raise ValueError(
                f"invalid burst range [{min_burst_ticks}, {max_burst_ticks}]"
            )

        self.fault_probability = float(fault_probability)
        self.min_burst_ticks = int(min_burst_ticks)
        self.max_burst_ticks = int(max_burst_ticks)
        self.rng = rng or random.Random()

        self._remaining = 0
        self._forced: bool | None = None
        self.bursts_started = 0

    def step(self) -> bool:
        # Advance one tick and return the havoc signal for it.
        if self._forced is not None:
            return self._forced

        if self._remaining == 0 and self.rng.random() < self.fault_probability:
            self._remaining = self.rng.randint(self.min_burst_ticks, self.max_burst_ticks)
            self.bursts_started += 1

        if self._remaining > 0:
            self._remaining -= 1
            return True
        return False

    def force(self, havoc: bool | None) -> None:
        # Pin the signal to a value; None returns to the random schedule.
        self._forced = None if havoc is None else bool(havoc)
        self._remaining = 0

    @property
    def forced(self) -> bool | None:
        return self._forced
