"""
Title: Sensor Driver Phase Definitions
Author: Alex Cooke
Date Created: 2026-02-02
Last Modified: 2026-02-02
Version: 1.0

Purpose:
Defines the conceptual phases of the sensor driver recovery state machine.
Phases are derived from the driver's confirmation flags; they are not stored
separately, so they can never disagree with the flags.

Scope and Limitations:
- There is no FAULT phase: a failed peripheral is represented by staying in,
  or falling back to, RESETTING.
- No hierarchy or substates are modeled.

Dependencies:
- Python 3.10+
- enum (standard library)
"""

from enum import Enum, auto


class DriverPhase(Enum):
    RESETTING = auto()
    INITIALIZING = auto()
    POLLING = auto()


def phase_of(reset_confirmed: bool, init_confirmed: bool) -> DriverPhase:
    if not reset_confirmed:
        return DriverPhase.RESETTING
    if not init_confirmed:
        return DriverPhase.INITIALIZING
    return DriverPhase.POLLING
