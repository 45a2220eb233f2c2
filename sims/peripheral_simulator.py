"""
Title: Fault-Injecting Temperature Peripheral Simulation Model
Author: Alex Cooke
Date Created: 2026-02-03
Last Modified: 2026-02-06
Version: 1.2

Purpose:
Simulates the internal state of the polled temperature peripheral, including
spontaneous failure ("havoc"), so that the sensor driver's recovery behaviour
can be exercised without hardware. Each call to step() consumes one command,
the ground-truth temperature and the havoc signal for that tick, and returns
the response the peripheral would put on the bus.

Per-tick rules:
- havoc forces the device non-operational, overriding any command; otherwise
  RESET makes it operational; otherwise operational is retained.
- SET_INT_ENABLE / SET_INT_DISABLE set and clear interrupts_enabled.
- A conversion happens every other tick while operational; it samples the
  real-world temperature into sampled_temp.
- The fresh bit is set on a conversion tick while interrupts are enabled.
  Otherwise it is cleared exactly one tick after a READ was accepted, and
  otherwise retained.
- cmd_ok = operational and command != NONE; temp is only reported for an
  accepted READ.

Scope and Limitations:
- Only whole-command accept/reject is modeled; no bus corruption.
- Used by the simulation harness and tests only. The driver never observes
  PeripheralState directly.

Dependencies:
- Python 3.10+
- dataclasses (standard library)
- stream_combinators.py
- sensor_protocol.py
"""

from dataclasses import dataclass

from sensor_protocol import Command, Response, TEMP_SENTINEL
from stream_combinators import AlternatingClock, SampleHold


@dataclass(frozen=True)
class PeripheralState:
    operational: bool = False
    interrupts_enabled: bool = False
    fresh_bit: bool = False
    sampled_temp: int = TEMP_SENTINEL
    converted: bool = False  # a conversion happened on this tick


class PeripheralSimulator:
    def __init__(self, temp_sentinel: int = TEMP_SENTINEL):
        self._sentinel = int(temp_sentinel)
        self._state = PeripheralState(sampled_temp=self._sentinel)
        self._clock = AlternatingClock()
        self._sample = SampleHold(self._sentinel)
        self._read_accepted_last_tick = False

    @property
    def state(self) -> PeripheralState:
        return self._state

    def step(self, command: Command, real_world_temp: int, havoc: bool = False) -> Response:
        # Advances the peripheral by one tick and returns its response.
        if not isinstance(command, Command):
            raise TypeError(f"command must be a Command, got {type(command).__name__}")

        prev = self._state

        if havoc:
            operational = False
        elif command == Command.RESET:
            operational = True
        else:
            operational = prev.operational

        if command == Command.SET_INT_ENABLE:
            interrupts_enabled = True
        elif command == Command.SET_INT_DISABLE:
            interrupts_enabled = False
        else:
            interrupts_enabled = prev.interrupts_enabled

        clock = self._clock.advance()
        conversion = clock.value and operational
        sample = self._sample.advance(real_world_temp, conversion)

        if conversion and interrupts_enabled:
            fresh_bit = True
        elif self._read_accepted_last_tick:
            fresh_bit = False
        else:
            fresh_bit = prev.fresh_bit

        cmd_ok = operational and command != Command.NONE

        # Commit.
        self._clock = clock
        self._sample = sample
        self._read_accepted_last_tick = cmd_ok and command == Command.READ
        self._state = PeripheralState(
            operational=operational,
            interrupts_enabled=interrupts_enabled,
            fresh_bit=fresh_bit,
            sampled_temp=sample.value,
            converted=conversion,
        )

        temp = sample.value if (cmd_ok and command == Command.READ) else self._sentinel
        return Response(cmd_ok=cmd_ok, temp=temp, fresh=fresh_bit)
