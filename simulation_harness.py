"""
Title: Closed-Loop Driver/Peripheral Simulation Harness
Author: Alex Cooke
Date Created: 2026-02-04
Last Modified: 2026-02-08
Version: 1.2

Purpose:
Wires the sensor driver to the simulated peripheral through a one-tick
response register. The command the driver computes at tick t is answered by
the peripheral at tick t, but the driver only observes that response at tick
t+1. The ground-truth temperature and the havoc fault-injection signal are
supplied per tick by the caller and are unavailable outside simulation.

Every tick produces a TickRecord, kept in a bounded history, so tests and the
CLI can check validity, liveness, accuracy and recovery timing against what
the peripheral actually sampled.

Scope and Limitations:
- One step() call is one tick; there is no notion of wall time here.
- Each tick runs under an exclusive lock, so the harness may be stepped from
  a control thread and a CLI thread without interleaving half-ticks.

Dependencies:
- Python 3.10+
- collections, dataclasses, threading (standard library)
- sensor_driver.py
- sims/peripheral_simulator.py
- command_recorder.py (optional)
"""

import threading
from collections import deque
from dataclasses import dataclass
from typing import Iterable

from driver_states import DriverPhase
from sensor_driver import DriverTelemetry, SensorDriver
from sensor_protocol import Command, NO_RESPONSE, Response
from sims.peripheral_simulator import PeripheralSimulator, PeripheralState


@dataclass(frozen=True)
class TickRecord:
    tick: int
    observed: Response        # response the driver consumed this tick
    command: Command          # command the driver issued this tick
    response: Response        # peripheral's answer to `command`
    havoc: bool
    real_world_temp: int
    peripheral: PeripheralState
    telemetry: DriverTelemetry
    phase: DriverPhase


class SimulationHarness:
    def __init__(
        self,
        driver: SensorDriver,
        peripheral: PeripheralSimulator,
        command_recorder=None,
        history_limit: int | None = 10_000,
    ):
        self._driver = driver
        self._peripheral = peripheral
        self._command_recorder = command_recorder
        self._pending: Response = NO_RESPONSE
        self._history: deque[TickRecord] = deque(maxlen=history_limit)
        self._lock = threading.Lock()

    @property
    def driver(self) -> SensorDriver:
        return self._driver

    @property
    def peripheral(self) -> PeripheralSimulator:
        return self._peripheral

    @property
    def tick(self) -> int:
        return self._driver.tick

    @property
    def pending_response(self) -> Response:
        # Response the driver will observe on the next tick.
        return self._pending

    @property
    def history(self) -> list[TickRecord]:
        with self._lock:
            return list(self._history)

    def last_record(self) -> TickRecord | None:
        with self._lock:
            return self._history[-1] if self._history else None

    def step(self, real_world_temp: int, havoc: bool = False) -> TickRecord:
        # Runs one full tick: driver update, peripheral step, register latch.
        with self._lock:
            tick = self._driver.tick
            observed = self._pending

            command = self._driver.update(observed)
            response = self._peripheral.step(command, int(real_world_temp), bool(havoc))
            self._pending = response

            rec = TickRecord(
                tick=tick,
                observed=observed,
                command=command,
                response=response,
                havoc=bool(havoc),
                real_world_temp=int(real_world_temp),
                peripheral=self._peripheral.state,
                telemetry=self._driver.telemetry(),
                phase=self._driver.phase,
            )
            self._history.append(rec)

            if self._command_recorder is not None:
                self._command_recorder.record(
                    tick=tick,
                    command=command,
                    response=response,
                    havoc=rec.havoc,
                    real_temp=rec.real_world_temp,
                )

            return rec

    def run(
        self,
        temperatures: Iterable[int],
        havoc: Iterable[bool] | None = None,
    ) -> list[TickRecord]:
        # Runs one tick per temperature; havoc defaults to False throughout.
        if havoc is None:
            return [self.step(t) for t in temperatures]
        return [self.step(t, h) for t, h in zip(temperatures, havoc)]

    def cold_restart(self) -> None:
        # Driver process restart; the peripheral keeps its own state.
        with self._lock:
            self._driver.cold_restart()
            self._pending = NO_RESPONSE
