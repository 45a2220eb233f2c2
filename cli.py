#!/usr/bin/env python3

import time
from pathlib import Path
from threading import Event

from app_context import AppContext
from cli_support import ControlLoop, MutableBool, MutableInt
from command_recorder import CommandRecorder
from driver_configuration import DriverConfiguration
from driver_states import DriverPhase
from fault_recorder import FaultRecorder
from sensor_driver import SensorDriver
from simulation_harness import SimulationHarness, TickRecord
from sims.peripheral_simulator import PeripheralSimulator


class PhaseAnnunciator:
    # Prints the driver phase whenever it changes.
    def __init__(self):
        self._last: DriverPhase | None = None

    def __call__(self, driver: SensorDriver) -> None:
        phase = driver.phase
        if phase != self._last:
            print(f"PHASE: {phase.name}")
            self._last = phase


def _fmt_record(rec: TickRecord) -> str:
    resp = rec.response
    flags = []
    if rec.havoc:
        flags.append("HAVOC")
    if rec.peripheral.converted:
        flags.append("CONV")
    if rec.telemetry.last_read_success:
        flags.append("GOOD")
    return (
        f"{rec.tick:>6} {rec.command.name:<15} ok={resp.cmd_ok!s:<5} "
        f"temp={resp.temp:<4} fresh={resp.fresh!s:<5} real={rec.real_world_temp:<4} "
        f"{' '.join(flags)}"
    ).rstrip()


def _print_status(ctx: AppContext) -> None:
    driver = ctx.harness.driver
    periph = ctx.harness.peripheral.state

    print("\n=== STATUS ===")
    print(f"Tick: {driver.tick}")
    print(f"Phase: {driver.phase.name}")
    print(f"LastCommand: {driver.command.name}")
    print(f"LastReadSuccess: {driver.last_read_success}")
    print(f"TempEverValid: {driver.temp_ever_valid}")
    valid = driver.valid_temperature()
    print(f"LastGoodTempC: {valid if valid is not None else '--'}")
    print(f"TicksSinceGoodRead: {driver.ticks_since_good_read}")
    print(f"ReadingRecent: {driver.reading_recent}  PollingStable: {driver.polling_stable}")
    print(f"Rejections: {driver.rejection_count}  Losses: {driver.loss_count}  Recoveries: {driver.recovery_count}")
    print(f"LastRecoveryTicks: {driver.last_recovery_ticks()}  WorstRecoveryTicks: {driver.worst_recovery_ticks()}")
    print(f"RealWorldTempC: {ctx.temperature.value}  Havoc: {ctx.havoc.value}")
    print(
        f"Peripheral: operational={periph.operational} interrupts={periph.interrupts_enabled} "
        f"fresh={periph.fresh_bit} sampled={periph.sampled_temp}"
    )
    print(f"Loop: {'running' if ctx.loop.running else 'stopped'} @ {ctx.loop.period_s:.3f}s")
    print("=============\n")


def _print_help() -> None:
    print(
        """
Commands
  help                         Print help
  q                            Quit

Loop control
  run [period_s]               Start background tick loop (default period unchanged)
  stop                         Stop background loop
  step [n]                     Run n ticks (default 1)
  period <seconds>             Set background period (min 0.01)

Simulation inputs
  temp <C>                     Set real-world temperature (integer deg C)
  havoc 0|1                    Clear / force peripheral failure

State / diagnostics
  phase                        Print driver phase name
  status                       Print full status block
  trace [n]                    Print the last n ticks (default 10)
  faults                       Print recorded loss/recovery events
  restart                      Cold-restart the driver (clears all driver state)
"""
    )


def build_context(
    config: DriverConfiguration | None = None,
    clock=time.monotonic,
    fault_log_path: str | Path | None = None,
    trace_path: str | Path | None = None,
    start_temp_c: int = 20,
    annunciate: bool = True,
) -> AppContext:
    if config is None:
        config = DriverConfiguration(name="TSD-CLI")

    fault_recorder = None
    if fault_log_path is not None:
        fault_recorder = FaultRecorder(filepath=fault_log_path, clock=clock)

    command_recorder = None
    if trace_path is not None:
        command_recorder = CommandRecorder(Path(trace_path))

    driver = SensorDriver(config=config, fault_recorder=fault_recorder)
    peripheral = PeripheralSimulator(temp_sentinel=config.temp_sentinel)
    harness = SimulationHarness(driver, peripheral, command_recorder=command_recorder)

    temperature = MutableInt(int(start_temp_c))
    havoc = MutableBool(False)

    loop = ControlLoop(
        harness,
        temperature_provider=lambda: temperature.value,
        havoc_provider=lambda: havoc.value,
        period_s=config.tick_period_s,
        on_tick=PhaseAnnunciator() if annunciate else None,
    )

    return AppContext(
        harness=harness,
        config=config,
        clock=clock,
        shutdown_event=Event(),
        temperature=temperature,
        havoc=havoc,
        loop=loop,
        fault_recorder=fault_recorder,
    )


def execute(ctx: AppContext, cmd: str) -> bool:
    # Runs one CLI command; returns False when the session should end.
    parts = cmd.split()
    if not parts:
        return True

    op = parts[0].lower()

    if op in ("q", "quit", "exit"):
        return False

    if op in ("help", "?"):
        _print_help()
        return True

    if op == "run":
        if len(parts) >= 2:
            try:
                ctx.loop.set_period(float(parts[1]))
            except ValueError:
                print("Usage: run [period_s]")
                return True
        ctx.loop.start()
        print(f"Loop running @ {ctx.loop.period_s:.3f}s")
        return True

    if op == "stop":
        ctx.loop.stop()
        print("Loop stopped")
        return True

    if op == "period":
        if len(parts) != 2:
            print("Usage: period <seconds>")
            return True
        try:
            ctx.loop.set_period(float(parts[1]))
        except ValueError:
            print("Usage: period <seconds>")
            return True
        print(f"Loop period set to {ctx.loop.period_s:.3f}s")
        return True

    if op == "step":
        try:
            n = int(parts[1]) if len(parts) >= 2 else 1
        except ValueError:
            print("Usage: step [n]")
            return True
        records = ctx.loop.step(n)
        print(f"Stepped {len(records)} ticks")
        return True

    if op == "temp":
        if len(parts) != 2:
            print("Usage: temp <C>")
            return True
        try:
            ctx.temperature.value = int(parts[1])
        except ValueError:
            print("Invalid temperature.")
            return True
        print(f"Real-world temperature set to {ctx.temperature.value} C")
        return True

    if op == "havoc":
        if len(parts) != 2 or parts[1] not in ("0", "1"):
            print("Usage: havoc 0|1")
            return True
        ctx.havoc.value = (parts[1] == "1")
        print(f"Havoc set to {ctx.havoc.value}")
        return True

    if op == "phase":
        print(ctx.harness.driver.phase.name)
        return True

    if op == "status":
        _print_status(ctx)
        return True

    if op == "trace":
        try:
            n = int(parts[1]) if len(parts) >= 2 else 10
        except ValueError:
            print("Usage: trace [n]")
            return True
        for rec in ctx.harness.history[-max(1, n):]:
            print(_fmt_record(rec))
        return True

    if op == "faults":
        if ctx.fault_recorder is None:
            print("Fault recording disabled")
            return True
        for rec in ctx.fault_recorder.records:
            print(f"{rec.timestamp_s:.6f} {rec.fault_code}")
        return True

    if op == "restart":
        ctx.harness.cold_restart()
        print("Driver cold-restarted")
        return True

    print("Unknown command. Type 'help'.")
    return True


def main() -> int:
    ctx = build_context(fault_log_path=Path("fault_log.txt"))

    _print_help()
    while not ctx.shutdown_event.is_set():
        try:
            cmd = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if not execute(ctx, cmd):
            break

    ctx.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
