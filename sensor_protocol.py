"""
Title: Peripheral Command/Response Vocabulary
Author: Alex Cooke
Date Created: 2026-02-02
Last Modified: 2026-02-04
Version: 1.1

Purpose:
Defines the only contract shared between the sensor driver and the peripheral
it polls: the set of commands the driver may issue (exactly one per tick) and
the response the peripheral returns for each of them. Any real transport
(I2C, SPI, UART) only has to carry this vocabulary.

Scope and Limitations:
- Models whole-command accept/reject only (cmd_ok); corrupted or partial frames
  are not representable.
- temp and fresh are meaningful only when cmd_ok is True.
- Temperatures are whole degrees Celsius.

Safety Notice:
This software is for academic and illustrative purposes only.
It must not be used to supervise real equipment.

Dependencies:
- Python 3.10+
- dataclasses (standard library)
- enum (standard library)
"""

from dataclasses import dataclass
from enum import Enum, auto

# Reported wherever a temperature is undefined (rejected command, non-Read
# command, or no reading captured yet).
TEMP_SENTINEL = 0


class Command(Enum):
    NONE = auto()
    RESET = auto()
    READ = auto()
    SET_INT_ENABLE = auto()
    SET_INT_DISABLE = auto()


@dataclass(frozen=True)
class Response:
    cmd_ok: bool
    temp: int = TEMP_SENTINEL
    fresh: bool = False


# Synthetic response observed by the driver on its very first tick.
NO_RESPONSE = Response(cmd_ok=False, temp=TEMP_SENTINEL, fresh=False)
