"""
Title: Fault Recorder Utility
Author: Alex Cooke
Date Created: 2026-02-05
Last Modified: 2026-02-07
Version: 1.1

Purpose:
Provides a simple, append-only fault recording mechanism for the sensor
driver. Peripheral loss and recovery events are timestamped using an injected
clock (wall time or tick number) and persisted to a text file for later
inspection, debugging, or analysis of recovery behaviour.

Scope and Limitations:
- Fault persistence is file-based and append-only, one "<timestamp>,<code>"
  line per event.
- No de-duplication, severity classification, or rollover handling; the
  driver already records once per loss episode.
- Assumes reliable filesystem access.

Dependencies:
- Python 3.10+
- dataclasses (standard library)
- pathlib (standard library)
- typing (standard library)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable


@dataclass(frozen=True)
class FaultRecord:
    timestamp_s: float
    fault_code: str


class FaultRecorder:
    def __init__(self, filepath: str | Path, clock: Callable[[], float]):
        self._path = Path(filepath)
        self._clock = clock
        self._records: list[FaultRecord] = []

        # Ensures directory exists for persistence target.
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def records(self) -> list[FaultRecord]:
        # Records written by this recorder instance, oldest first.
        return list(self._records)

    def record(self, fault_code: str) -> FaultRecord:
        # Records a fault code with timestamp to non-volatile storage (append-only).
        ts = float(self._clock())
        rec = FaultRecord(timestamp_s=ts, fault_code=str(fault_code))

        line = f"{rec.timestamp_s:.6f},{rec.fault_code}\n"
        with self._path.open("a", encoding="utf-8") as f:
            f.write(line)

        self._records.append(rec)
        return rec

    def read_records(self) -> list[FaultRecord]:
        # Reads back everything persisted at the path, including earlier runs.
        if not self._path.exists():
            return []

        out: list[FaultRecord] = []
        for line in self._path.read_text(encoding="utf-8").splitlines():
            if not line.strip():
                continue
            ts_str, code = line.split(",", maxsplit=1)
            out.append(FaultRecord(timestamp_s=float(ts_str), fault_code=code))
        return out
