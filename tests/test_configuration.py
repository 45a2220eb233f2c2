import dataclasses

import pytest

from driver_configuration import INIT_SEQUENCE, DriverConfiguration
from sensor_protocol import Command, TEMP_SENTINEL


def test_defaults():
    config = DriverConfiguration(name="TEST")
    assert config.tick_period_s == 0.1
    assert config.temp_sentinel == TEMP_SENTINEL
    assert config.stale_after_ticks == 4
    assert config.stable_after_ticks == 4
    assert config.recovery_budget_ticks == 2


def test_init_sequence():
    assert INIT_SEQUENCE == (Command.RESET, Command.SET_INT_ENABLE)


def test_worst_case_recovery():
    config = DriverConfiguration(name="TEST", tick_period_s=0.25)
    assert config.worst_case_recovery_ticks() == 2
    assert config.worst_case_recovery_s() == pytest.approx(0.5)


@pytest.mark.parametrize("budget, meets", [(1, False), (2, True), (5, True)])
def test_meets_recovery_requirement(budget, meets):
    config = DriverConfiguration(name="TEST", recovery_budget_ticks=budget)
    assert config.meets_recovery_requirement() is meets


@pytest.mark.parametrize(
    "kwargs",
    [
        {"tick_period_s": 0.0},
        {"tick_period_s": -0.1},
        {"stale_after_ticks": 0},
        {"stable_after_ticks": 0},
        {"recovery_budget_ticks": -1},
    ],
)
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        DriverConfiguration(name="TEST", **kwargs)


def test_is_immutable():
    config = DriverConfiguration(name="TEST")
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.recovery_budget_ticks = 10  # type: ignore[misc]
