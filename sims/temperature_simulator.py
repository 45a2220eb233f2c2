"""
Title: Ground-Truth Temperature Simulator Utility
Author: Alex Cooke
Date Created: 2026-02-04
Last Modified: 2026-02-04
Version: 1.0

Purpose:
Provides a lightweight, stochastic model of the real-world temperature seen
by the simulated peripheral. The temperature drifts as a bounded random walk
with a limited rate of change and supports both fixed time-step and
injected-clock operation.

Scope and Limitations:
- Temperature behaviour is randomly generated and not based on a thermal model.
- Readings are rounded to whole degrees Celsius, matching the peripheral.
- Intended solely for test stimulation and simulation support.

Dependencies:
- Python 3.10+
- random (standard library)
"""

import random


class TemperatureSimulator:
    def __init__(
        self,
        min_temp=-10.0,         # deg C
        max_temp=45.0,          # deg C
        max_rate_cps=0.5,       # max drift rate, deg C per second
        max_accel_cps2=0.2,     # drift aggressiveness
        rng: random.Random | None = None,
        clock=None,
        start_temp: float | None = None,
    ):
        self.min_temp = float(min_temp)
        self.max_temp = float(max_temp)
        if self.min_temp > self.max_temp:
            raise ValueError(f"min_temp {self.min_temp} exceeds max_temp {self.max_temp}")

        self.rng = rng or random.Random()
        self.clock = clock

        if start_temp is None:
            self.temperature = self.rng.uniform(self.min_temp, self.max_temp)
        else:
            self.temperature = min(max(float(start_temp), self.min_temp), self.max_temp)
        self.rate = 0.0   # deg C per second
        self.max_rate = float(max_rate_cps)
        self.max_accel = float(max_accel_cps2)

        self._last_time = self.clock() if self.clock else None

    def step(self, dt: float) -> int:
        # Advance simulation by dt seconds and return the rounded temperature.
        if dt <= 0.0:
            return self.read_temperature_c()

        accel = self.rng.uniform(-self.max_accel, self.max_accel)
        self.rate += accel * dt

        self.rate = max(-self.max_rate, min(self.rate, self.max_rate))
        self.temperature += self.rate * dt

        if self.temperature <= self.min_temp:
            self.temperature = self.min_temp
            self.rate = abs(self.rate)
        elif self.temperature >= self.max_temp:
            self.temperature = self.max_temp
            self.rate = -abs(self.rate)

        return self.read_temperature_c()

    def update(self) -> int:
        # Advance simulation using the injected clock.
        if not self.clock:
            raise RuntimeError(
                "TemperatureSimulator.update() requires a clock; use step(dt) instead."
            )

        now = self.clock()
        dt = now - (self._last_time if self._last_time is not None else now)
        self._last_time = now
        return self.step(dt)

    def read_temperature_c(self) -> int:
        # Return temperature without advancing the simulation.
        return int(round(self.temperature))

    def set_temperature_c(self, temperature_c: float) -> None:
        # Force temperature to a specific value.
        self.temperature = float(temperature_c)
