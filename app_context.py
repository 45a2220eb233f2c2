"""
Title: Application Context Container for the Sensor Driver Simulation
Author: Alex Cooke
Date Created: 2026-02-05
Last Modified: 2026-02-05
Version: 1.0

Purpose:
Defines a central application context object for the sensor driver
simulation. The AppContext aggregates the closed-loop harness, shared
configuration, simulation inputs, and lifecycle control primitives into a
single, explicit container to simplify wiring and controlled shutdown across
the CLI and headless runner.

Scope and Limitations:
- Intended for simulation and CLI-driven execution only.
- Acts purely as a dependency container; contains no recovery logic.

Dependencies:
- Python 3.10+
- dataclasses, threading, typing (standard library)
- driver_configuration.py
- simulation_harness.py
- cli_support.py
- fault_recorder.py
"""

from dataclasses import dataclass
from threading import Event
from typing import Callable

from cli_support import ControlLoop, MutableBool, MutableInt
from driver_configuration import DriverConfiguration
from fault_recorder import FaultRecorder
from simulation_harness import SimulationHarness


@dataclass
class AppContext:
    harness: SimulationHarness
    config: DriverConfiguration
    clock: Callable[[], float]
    shutdown_event: Event

    temperature: MutableInt
    havoc: MutableBool
    loop: ControlLoop

    fault_recorder: FaultRecorder | None = None

    def shutdown(self) -> None:
        self.shutdown_event.set()
        self.loop.stop()
