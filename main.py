#!/usr/bin/env python3
import logging
import random
import signal
import sys
import time

from app_context import AppContext
from cli import build_context
from driver_configuration import DriverConfiguration
from sims.havoc_simulator import HavocSimulator
from sims.temperature_simulator import TemperatureSimulator


def setup_logging():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def setup_signal_handlers(ctx: AppContext):
    def _handle_shutdown(signum, frame):
        logging.info("Shutdown signal received (%s)", signum)
        ctx.shutdown_event.set()

    signal.signal(signal.SIGINT, _handle_shutdown)
    signal.signal(signal.SIGTERM, _handle_shutdown)


def initialize(seed: int | None = None) -> tuple[AppContext, TemperatureSimulator, HavocSimulator]:
    logging.info("Initializing application")

    config = DriverConfiguration(
        name="TSD-1",
        tick_period_s=0.1,
        stale_after_ticks=4,
        stable_after_ticks=4,
        recovery_budget_ticks=2,
    )

    if not config.meets_recovery_requirement():
        raise ValueError(
            f"Recovery budget violated: worst_case={config.worst_case_recovery_ticks()} ticks "
            f"(budget {config.recovery_budget_ticks})"
        )

    rng = random.Random(seed)
    temp_sim = TemperatureSimulator(rng=rng, start_temp=20.0)
    havoc_sim = HavocSimulator(fault_probability=0.05, rng=rng)

    ctx = build_context(config=config, clock=time.monotonic,
                        start_temp_c=temp_sim.read_temperature_c(), annunciate=False)
    return ctx, temp_sim, havoc_sim


def control_loop(ctx: AppContext, temp_sim: TemperatureSimulator, havoc_sim: HavocSimulator,
                 max_ticks: int | None = None):
    period = ctx.config.tick_period_s
    logging.info("Starting control loop (tick=%.3fs)", period)

    driver = ctx.harness.driver
    last_valid = None

    while not ctx.shutdown_event.is_set():
        if max_ticks is not None and driver.tick >= max_ticks:
            break

        try:
            ctx.temperature.value = temp_sim.step(period)
            ctx.havoc.value = havoc_sim.step()
            ctx.loop.step()
        except Exception:
            logging.exception("Unhandled exception in control loop")

        valid = driver.valid_temperature()
        if valid is not None and valid != last_valid:
            logging.info("Temperature: %d C (tick %d)", valid, driver.tick)
            last_valid = valid

        ctx.shutdown_event.wait(period)

    logging.info(
        "Control loop terminated after %d ticks: losses=%d recoveries=%d worst_recovery_ticks=%s",
        driver.tick, driver.loss_count, driver.recovery_count, driver.worst_recovery_ticks(),
    )


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    max_ticks = int(argv[0]) if argv else None

    setup_logging()
    ctx, temp_sim, havoc_sim = initialize()
    setup_signal_handlers(ctx)

    control_loop(ctx, temp_sim, havoc_sim, max_ticks=max_ticks)

    logging.info("Main loop terminated")


if __name__ == "__main__":
    main()
