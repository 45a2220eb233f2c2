"""
Title: Self-Healing Sensor Driver State Machine
Author: Alex Cooke
Date Created: 2026-02-03
Last Modified: 2026-02-09
Version: 1.4

Purpose:
Implements the polling driver for an unreliable temperature peripheral. Once
per tick the driver consumes the response to the command it issued on the
previous tick, updates its confirmation flags and last known-good reading,
and emits exactly one new command. A rejected command, for whatever reason,
sends the driver back to RESETTING; the driver then re-runs the
RESET -> SET_INT_ENABLE sequence and resumes READ polling on its own.

Per-tick update (computed from a snapshot of the prior state and the new
response, then committed at once):
1. reset_confirmed   := response.cmd_ok
2. init_confirmed    := False if not reset_confirmed; True if the previous
                        command was SET_INT_ENABLE and it was accepted;
                        otherwise retained
3. last_read_success := previous command was READ, accepted, and fresh
4. temp_ever_valid   := sticky OR of last_read_success
5. last_good_temp    := response.temp on a successful read, else retained
6. next command      := RESET if not reset_confirmed, else SET_INT_ENABLE if
                        not init_confirmed, else READ

Scope and Limitations:
- No retry counter or backoff: a rejected command is retried on the very
  next tick.
- Any accepted command confirms that the peripheral is alive, not only an
  accepted RESET.
- Failures are never raised; they are represented by the RESETTING phase.
- Callers must check temp_ever_valid before trusting last_good_temp.
- Not thread-safe on its own; one tick's read-modify-write must be
  serialized by the caller (see SimulationHarness).

Safety Notice:
This software is for academic and illustrative purposes only.
It must not be used to supervise real equipment.
"""

# Change Log:
#
# 1.4 (2026-02-09)
#   - Recovery latency is now measured from the last rejected response rather
#     than from RESETTING entry, so a long fault burst no longer inflates it.
#
# 1.3 (2026-02-07)
#   - Added staleness telemetry (ticks_since_good_read, reading_recent) and
#     polling_stable, built on the stream combinators.
#   - Loss/recovery episodes recorded through an optional FaultRecorder.
#
# 1.2 (2026-02-05)
#   - Split the pure transition (next_state) out of SensorDriver so every
#     field is computed from the same snapshot.
#
# 1.1 (2026-02-04)
#   - Phase changes logged once per change instead of every tick.
#
# 1.0 (2026-02-03)
#   - Initial RESETTING -> INITIALIZING -> POLLING state machine.


import logging
from dataclasses import dataclass

from driver_configuration import DriverConfiguration
from driver_states import DriverPhase, phase_of
from sensor_protocol import Command, Response, TEMP_SENTINEL
from stream_combinators import ConsecutiveCount, HeldFor, SeenWithin, StickyOr

logger = logging.getLogger(__name__)

FAULT_PERIPHERAL_LOST = "PERIPHERAL_LOST"
FAULT_PERIPHERAL_RECOVERED = "PERIPHERAL_RECOVERED"


@dataclass(frozen=True)
class DriverState:
    reset_confirmed: bool = False
    init_confirmed: bool = False
    last_read_success: bool = False
    temp_ever_valid: bool = False
    last_good_temp: int = TEMP_SENTINEL
    # Command issued on the tick that produced this state.
    command: Command = Command.NONE


@dataclass(frozen=True)
class DriverTelemetry:
    last_read_success: bool
    temp_ever_valid: bool
    last_good_temp: int


def cold_start(temp_sentinel: int = TEMP_SENTINEL) -> DriverState:
    return DriverState(last_good_temp=int(temp_sentinel))


def next_command(reset_confirmed: bool, init_confirmed: bool) -> Command:
    if not reset_confirmed:
        return Command.RESET
    if not init_confirmed:
        return Command.SET_INT_ENABLE
    return Command.READ


def next_state(state: DriverState, response: Response) -> DriverState:
    # Pure transition: reads only `state` and `response`, never a value
    # already updated this tick.
    previous = state.command
    cmd_ok = bool(response.cmd_ok)

    reset_confirmed = cmd_ok

    if not reset_confirmed:
        init_confirmed = False
    elif previous == Command.SET_INT_ENABLE and cmd_ok:
        init_confirmed = True
    else:
        init_confirmed = state.init_confirmed

    last_read_success = previous == Command.READ and cmd_ok and bool(response.fresh)

    temp_ever_valid = StickyOr(state.temp_ever_valid).advance(last_read_success).value

    last_good_temp = int(response.temp) if last_read_success else state.last_good_temp

    return DriverState(
        reset_confirmed=reset_confirmed,
        init_confirmed=init_confirmed,
        last_read_success=last_read_success,
        temp_ever_valid=temp_ever_valid,
        last_good_temp=last_good_temp,
        command=next_command(reset_confirmed, init_confirmed),
    )


class SensorDriver:
    def __init__(self, config: DriverConfiguration, fault_recorder=None):
        self._config = config
        self._state = cold_start(config.temp_sentinel)
        self._tick = 0

        # Staleness / stability telemetry
        self._since_good_read = ConsecutiveCount()
        self._recent_read = SeenWithin(config.stale_after_ticks)
        self._polling_held = HeldFor(config.stable_after_ticks)

        # Counters
        self._rejection_count = 0
        self._loss_count = 0
        self._recovery_count = 0

        # Recovery latency instrumentation (ticks from the last rejected
        # response to the first READ issued afterwards)
        self._last_rejection_tick: int | None = None
        self._recovery_pending = False
        self._last_recovery_ticks: int | None = None
        self._worst_recovery_ticks: int | None = None  # latched worst case

        # Fault recorder
        self._fault_recorder = fault_recorder
        self._loss_episode_open = False

        # Remember last phase logged (to avoid per-tick spamming)
        self._last_logged_phase: DriverPhase | None = None

    # -------------------------
    # Properties / small helpers
    # -------------------------

    @property
    def config(self) -> DriverConfiguration:
        return self._config

    @property
    def state(self) -> DriverState:
        return self._state

    @property
    def phase(self) -> DriverPhase:
        return phase_of(self._state.reset_confirmed, self._state.init_confirmed)

    @property
    def tick(self) -> int:
        # Number of updates applied so far.
        return self._tick

    @property
    def command(self) -> Command:
        # Command issued on the most recent tick.
        return self._state.command

    @property
    def last_read_success(self) -> bool:
        return self._state.last_read_success

    @property
    def temp_ever_valid(self) -> bool:
        return self._state.temp_ever_valid

    @property
    def last_good_temp(self) -> int:
        return self._state.last_good_temp

    @property
    def fault_recorder(self):
        return self._fault_recorder

    @fault_recorder.setter
    def fault_recorder(self, recorder) -> None:
        self._fault_recorder = recorder

    def telemetry(self) -> DriverTelemetry:
        return DriverTelemetry(
            last_read_success=self._state.last_read_success,
            temp_ever_valid=self._state.temp_ever_valid,
            last_good_temp=self._state.last_good_temp,
        )

    def valid_temperature(self) -> int | None:
        # Last known-good temperature, or None until a read has ever succeeded.
        if not self._state.temp_ever_valid:
            return None
        return self._state.last_good_temp

    @property
    def ticks_since_good_read(self) -> int:
        return self._since_good_read.value

    @property
    def reading_recent(self) -> bool:
        # A good read happened within the configured staleness window.
        return self._state.temp_ever_valid and self._recent_read.value

    @property
    def polling_stable(self) -> bool:
        return self._polling_held.value

    @property
    def rejection_count(self) -> int:
        return self._rejection_count

    @property
    def loss_count(self) -> int:
        return self._loss_count

    @property
    def recovery_count(self) -> int:
        return self._recovery_count

    def log(self, msg: str, level: int = logging.INFO) -> None:
        logger.log(level, msg)

    # -------------------------
    # Recovery latency API
    # -------------------------

    def last_recovery_ticks(self) -> int | None:
        return self._last_recovery_ticks

    def worst_recovery_ticks(self) -> int | None:
        return self._worst_recovery_ticks

    def meets_recovery_budget(self, limit_ticks: int | None = None) -> bool:
        worst = self._worst_recovery_ticks
        if worst is None:
            return False
        if limit_ticks is None:
            limit_ticks = self._config.recovery_budget_ticks
        return worst <= int(limit_ticks)

    # -------------------------
    # Core update loop
    # -------------------------

    def update(self, response: Response) -> Command:
        # Advances the driver by one tick and returns the command to issue.
        tick = self._tick
        prev = self._state
        prev_phase = self.phase

        new = next_state(prev, response)
        new_phase = phase_of(new.reset_confirmed, new.init_confirmed)

        since_good_read = self._since_good_read.advance(not new.last_read_success)
        recent_read = self._recent_read.advance(new.last_read_success)
        polling_held = self._polling_held.advance(new_phase == DriverPhase.POLLING)

        # Commit.
        self._state = new
        self._since_good_read = since_good_read
        self._recent_read = recent_read
        self._polling_held = polling_held
        self._tick = tick + 1

        if not response.cmd_ok:
            self._rejection_count += 1
            self._last_rejection_tick = tick
            self._recovery_pending = True

        self._track_recovery_latency(tick, new.command)
        self._track_loss_episode(prev, new, new_phase)
        self._annunciate_phase(prev_phase, new_phase, prev.command)

        return new.command

    def cold_restart(self) -> None:
        # Process restart: forget everything, including the sticky flag.
        self.log("Cold restart: driver state cleared")
        self._state = cold_start(self._config.temp_sentinel)
        self._since_good_read = ConsecutiveCount()
        self._recent_read = SeenWithin(self._config.stale_after_ticks)
        self._polling_held = HeldFor(self._config.stable_after_ticks)
        self._recovery_pending = False
        self._loss_episode_open = False
        self._last_logged_phase = None

    # -------------------------
    # Instrumentation
    # -------------------------

    def _track_recovery_latency(self, tick: int, command: Command) -> None:
        if command != Command.READ or not self._recovery_pending:
            return

        latency = tick - self._last_rejection_tick
        self._last_recovery_ticks = latency
        if self._worst_recovery_ticks is None or latency > self._worst_recovery_ticks:
            self._worst_recovery_ticks = latency
        self._recovery_pending = False

        if latency > self._config.recovery_budget_ticks:
            self.log(
                f"Recovery took {latency} ticks (budget {self._config.recovery_budget_ticks})",
                logging.WARNING,
            )

    def _track_loss_episode(self, prev: DriverState, new: DriverState, new_phase: DriverPhase) -> None:
        if prev.reset_confirmed and not new.reset_confirmed and not self._loss_episode_open:
            # Peripheral rejected a command after having been confirmed alive.
            self._loss_episode_open = True
            self._loss_count += 1
            self._record_fault(FAULT_PERIPHERAL_LOST)
            return

        if self._loss_episode_open and new_phase == DriverPhase.POLLING:
            self._loss_episode_open = False
            self._recovery_count += 1
            self._record_fault(FAULT_PERIPHERAL_RECOVERED)

    def _record_fault(self, fault_code: str) -> None:
        if self._fault_recorder is None:
            # No recorder wired, nothing to persist
            return
        self._fault_recorder.record(fault_code)

    def _annunciate_phase(self, prev_phase: DriverPhase, new_phase: DriverPhase, prev_command: Command) -> None:
        if new_phase == self._last_logged_phase:
            return

        if new_phase == DriverPhase.RESETTING and prev_phase != DriverPhase.RESETTING:
            self.log(
                f"Peripheral rejected {prev_command.name}: {prev_phase.name} -> RESETTING",
                logging.WARNING,
            )
        else:
            self.log(f"Driver phase: {new_phase.name}")
        self._last_logged_phase = new_phase
