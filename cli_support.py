"""
Title: CLI Support Utilities and Control Loop Abstractions
Author: Alex Cooke
Date Created: 2026-02-05
Last Modified: 2026-02-08
Version: 1.1

Purpose:
Provides shared support utilities for the sensor driver CLI and headless
runner. This module defines mutable wrapper types for interactive inputs
(ground-truth temperature, forced havoc) and a lightweight control loop that
drives the SimulationHarness either step-wise or in a background thread.

Scope and Limitations:
- Intended for CLI-driven simulation and test support only.
- ControlLoop timing is approximate and not real-time deterministic.
- Tick serialization is provided by the harness lock, not by the loop.

Dependencies:
- Python 3.10+
- logging, threading, dataclasses, typing (standard library)
- simulation_harness.py
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from simulation_harness import SimulationHarness, TickRecord

logger = logging.getLogger(__name__)


@dataclass
class MutableBool:
    value: bool = False


@dataclass
class MutableInt:
    value: int = 0


class ControlLoop:
    def __init__(self,
                 harness: SimulationHarness,
                 temperature_provider: Callable[[], int],
                 havoc_provider: Callable[[], bool],
                 period_s: float = 0.1,
                 on_tick: Optional[Callable] = None,):
        self._harness = harness
        self._temperature_provider = temperature_provider
        self._havoc_provider = havoc_provider
        self._period_s = float(period_s)
        self._on_tick = on_tick
        self._running = False
        self._stop_evt = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def period_s(self) -> float:
        return self._period_s

    @property
    def running(self) -> bool:
        return self._running

    def set_period(self, period_s: float) -> None:
        self._period_s = max(0.01, float(period_s))

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._stop_evt.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if not self._running:
            return
        self._stop_evt.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
        self._running = False
        self._thread = None

    def step(self, n: int = 1) -> list[TickRecord]:
        return [self._tick() for _ in range(max(1, int(n)))]

    def _tick(self) -> TickRecord:
        rec = self._harness.step(
            int(self._temperature_provider()),
            bool(self._havoc_provider()),
        )
        if self._on_tick:
            self._on_tick(self._harness.driver)
        return rec

    def _run(self) -> None:
        while not self._stop_evt.is_set():
            try:
                self._tick()
            except Exception:
                logger.exception("Unhandled exception in control loop")
            self._stop_evt.wait(self._period_s)
