import logging

from main import control_loop, initialize


def test_initialize_builds_context_within_recovery_budget():
    ctx, temp_sim, havoc_sim = initialize(seed=3)

    assert ctx.config.meets_recovery_requirement() is True
    assert ctx.harness.tick == 0
    assert ctx.temperature.value == temp_sim.read_temperature_c() == 20
    assert havoc_sim.fault_probability > 0.0


def test_control_loop_runs_bounded_ticks_and_logs_summary(caplog):
    caplog.set_level(logging.INFO)
    ctx, temp_sim, havoc_sim = initialize(seed=3)

    control_loop(ctx, temp_sim, havoc_sim, max_ticks=5)

    assert ctx.harness.tick == 5
    assert any("Control loop terminated after 5 ticks" in r.getMessage() for r in caplog.records)


def test_control_loop_stops_on_shutdown():
    ctx, temp_sim, havoc_sim = initialize(seed=3)
    ctx.shutdown_event.set()

    control_loop(ctx, temp_sim, havoc_sim)

    assert ctx.harness.tick == 0
