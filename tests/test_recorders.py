from command_recorder import HEADER, CommandRecorder
from driver_configuration import DriverConfiguration
from fault_recorder import FaultRecord, FaultRecorder
from sensor_driver import FAULT_PERIPHERAL_LOST, FAULT_PERIPHERAL_RECOVERED, SensorDriver
from sensor_protocol import Command, Response
from simulation_harness import SimulationHarness
from sims.peripheral_simulator import PeripheralSimulator


class FakeClock:
    def __init__(self, start: float = 0.0):
        self._t = float(start)

    def __call__(self) -> float:
        return self._t

    def advance(self, dt: float) -> None:
        self._t += float(dt)


class TestFaultRecorder:
    def test_records_timestamp_and_code(self, tmp_path):
        clock = FakeClock(1.234)
        rec = FaultRecorder(filepath=tmp_path / "fault_log.txt", clock=clock)

        out = rec.record(FAULT_PERIPHERAL_LOST)

        assert out == FaultRecord(timestamp_s=1.234, fault_code=FAULT_PERIPHERAL_LOST)
        text = (tmp_path / "fault_log.txt").read_text(encoding="utf-8")
        assert text == "1.234000,PERIPHERAL_LOST\n"

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "logs" / "nested" / "faults.txt"
        FaultRecorder(filepath=path, clock=FakeClock()).record("X")
        assert path.exists()

    def test_appends_across_instances(self, tmp_path):
        path = tmp_path / "fault_log.txt"
        clock = FakeClock()

        first = FaultRecorder(filepath=path, clock=clock)
        first.record("A")
        clock.advance(1.0)
        second = FaultRecorder(filepath=path, clock=clock)
        second.record("B")

        assert [r.fault_code for r in second.records] == ["B"]
        assert second.read_records() == [
            FaultRecord(0.0, "A"),
            FaultRecord(1.0, "B"),
        ]

    def test_read_records_missing_file(self, tmp_path):
        rec = FaultRecorder(filepath=tmp_path / "never_written.txt", clock=FakeClock())
        assert rec.read_records() == []

    def test_driver_records_loss_and_recovery_with_tick_clock(self, tmp_path):
        config = DriverConfiguration(name="TEST")
        driver = SensorDriver(config=config)
        driver.fault_recorder = FaultRecorder(tmp_path / "faults.txt", clock=lambda: driver.tick)
        harness = SimulationHarness(driver, PeripheralSimulator())

        havoc = [False] * 6 + [True] * 2 + [False] * 6
        harness.run([20] * len(havoc), havoc)

        records = driver.fault_recorder.read_records()
        assert [r.fault_code for r in records] == [FAULT_PERIPHERAL_LOST, FAULT_PERIPHERAL_RECOVERED]
        # Timestamps are tick counts taken after each update was applied.
        assert records[0].timestamp_s == 8.0
        assert records[1].timestamp_s == 11.0


class TestCommandRecorder:
    def test_writes_header_once(self, tmp_path):
        path = tmp_path / "trace.csv"
        CommandRecorder(path)
        CommandRecorder(path)
        assert path.read_text(encoding="utf-8") == HEADER

    def test_records_one_line_per_tick(self, tmp_path):
        path = tmp_path / "trace.csv"
        rec = CommandRecorder(path)
        rec.record(
            tick=3, command=Command.READ,
            response=Response(cmd_ok=True, temp=20, fresh=True),
            havoc=False, real_temp=20,
        )
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[1] == "3,READ,True,20,True,False,20"

    def test_harness_writes_trace(self, tmp_path):
        path = tmp_path / "trace.csv"
        harness = SimulationHarness(
            SensorDriver(config=DriverConfiguration(name="TEST")),
            PeripheralSimulator(),
            command_recorder=CommandRecorder(path),
        )
        harness.run([20] * 5)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 6
        assert [line.split(",")[1] for line in lines[1:]] == [
            "RESET", "SET_INT_ENABLE", "READ", "READ", "READ",
        ]
