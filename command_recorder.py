# command_recorder.py
from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path

from sensor_protocol import Command, Response

HEADER = "tick,command,cmd_ok,temp,fresh,havoc,real_temp\n"


@dataclass
class CommandRecorder:
    filepath: Path

    def __post_init__(self) -> None:
        self.filepath = Path(self.filepath)
        self._lock = threading.Lock()
        self.filepath.parent.mkdir(parents=True, exist_ok=True)

        # Header written once per file
        if not self.filepath.exists():
            with self.filepath.open("w", encoding="utf-8") as f:
                f.write(HEADER)

    def record(
        self,
        *,
        tick: int,
        command: Command,
        response: Response,
        havoc: bool,
        real_temp: int,
    ) -> None:
        line = (
            f"{tick},{command.name},{response.cmd_ok},{response.temp},"
            f"{response.fresh},{havoc},{real_temp}\n"
        )

        with self._lock:
            with self.filepath.open("a", encoding="utf-8") as f:
                f.write(line)
                f.flush()
