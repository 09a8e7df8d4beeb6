"""Tests for the ModbusPoller scheduler."""

import asyncio

import pytest

from modbus_master import ModbusPoller, PollerState
from modbus_master.domain.entities import PollGroup, RegisterDefinition
from modbus_master.domain.exceptions import ConfigurationError
from modbus_master.domain.helpers import float64_to_bits, split_registers
from modbus_master.domain.value_objects import (
    ErrorEvent,
    ModbusDataType,
    ModbusValue,
    ReadingsEvent,
    RegisterType,
    StartedEvent,
    StoppedEvent,
    ValueChangedEvent,
)
from modbus_master.infrastructure.events import QueueEventSink


class SteppingClock:
    """Monotonic clock that advances by ``step`` on every call."""

    def __init__(self, step: float = 10.0):
        self.step = step
        self.now = -step

    def __call__(self) -> float:
        self.now += self.step
        return self.now


def stop_after(poller, reader, reads):
    """Wrap a reader so the poller is stopped once ``reads`` calls were made."""

    async def read(slave_id, register_type, start_address, count):
        try:
            return await reader.read(slave_id, register_type, start_address, count)
        finally:
            if len(reader.calls) >= reads:
                poller.stop()

    return read


async def run(poller, read_fn):
    await asyncio.wait_for(poller.start(read_fn), timeout=5)


@pytest.fixture
def poller(event_sink):
    return ModbusPoller(event_sink=event_sink, tick_interval=0, clock=SteppingClock())


class TestPollerConfiguration:
    """Test group and register management."""

    def test_add_group(self, poller, inverter_group):
        poller.add_group(inverter_group)
        assert [group.name for group in poller.groups()] == ["inverter"]

    def test_duplicate_group_rejected(self, poller, inverter_group):
        poller.add_group(inverter_group)
        with pytest.raises(ConfigurationError, match="Duplicate poll group name"):
            poller.add_group(PollGroup("inverter", slave_id=2))

    def test_remove_group(self, poller, inverter_group):
        poller.add_group(inverter_group)
        assert poller.remove_group("inverter") is True
        assert poller.remove_group("inverter") is False
        assert poller.groups() == []

    def test_set_group_enabled(self, poller, inverter_group):
        poller.add_group(inverter_group)
        assert poller.set_group_enabled("inverter", False) is True
        assert poller.get_group("inverter").enabled is False
        assert poller.set_group_enabled("missing", True) is False

    def test_add_register(self, poller, inverter_group):
        poller.add_group(inverter_group)
        poller.add_register("inverter", RegisterDefinition(0x0300, "pv_voltage"))
        assert poller.get_group("inverter").get_register("pv_voltage") is not None

    def test_add_register_unknown_group(self, poller):
        with pytest.raises(ConfigurationError, match="Unknown poll group"):
            poller.add_register("missing", RegisterDefinition(0, "a"))

    def test_add_register_duplicate_name(self, poller, inverter_group):
        poller.add_group(inverter_group)
        with pytest.raises(ConfigurationError):
            poller.add_register("inverter", RegisterDefinition(0x0300, "battery_voltage"))

    def test_remove_register(self, poller, inverter_group):
        poller.add_group(inverter_group)
        assert poller.remove_register("inverter", "grid_power") is True
        assert poller.remove_register("inverter", "grid_power") is False
        assert poller.remove_register("missing", "grid_power") is False
        assert len(poller.get_group("inverter")) == 3

    def test_groups_returns_snapshots(self, poller, inverter_group):
        poller.add_group(inverter_group)
        snapshot = poller.get_group("inverter")
        snapshot.add_register(RegisterDefinition(0x0400, "extra"))
        assert poller.get_group("inverter").get_register("extra") is None

    def test_get_group_missing(self, poller):
        assert poller.get_group("missing") is None

    def test_default_event_sink(self):
        assert isinstance(ModbusPoller().event_sink, QueueEventSink)


class TestPollerLifecycle:
    """Test start/stop and event ordering."""

    def test_initial_state(self, poller):
        assert poller.state is PollerState.STOPPED
        assert not poller.is_running

    def test_stop_when_stopped_is_noop(self, poller, event_sink):
        poller.stop()
        assert poller.state is PollerState.STOPPED
        assert event_sink.events == []

    @pytest.mark.asyncio
    async def test_started_first_stopped_last(
        self, poller, inverter_group, fake_reader, event_sink
    ):
        poller.add_group(inverter_group)

        await run(poller, stop_after(poller, fake_reader, 2))

        assert isinstance(event_sink.events[0], StartedEvent)
        assert isinstance(event_sink.events[-1], StoppedEvent)
        assert len(event_sink.of_type(StartedEvent)) == 1
        assert len(event_sink.of_type(StoppedEvent)) == 1
        assert poller.state is PollerState.STOPPED

    @pytest.mark.asyncio
    async def test_tick_completes_after_stop(self, poller, inverter_group, fake_reader, event_sink):
        poller.add_group(inverter_group)

        # stop during the first of the group's two reads
        await run(poller, stop_after(poller, fake_reader, 1))

        assert len(fake_reader.calls) == 2
        (readings,) = event_sink.of_type(ReadingsEvent)
        assert len(readings.readings) == 4
        assert event_sink.types()[-2:] == ["ReadingsEvent", "StoppedEvent"]

    @pytest.mark.asyncio
    async def test_start_while_running(self, event_sink):
        poller = ModbusPoller(event_sink=event_sink, tick_interval=0.001)

        async def read(slave_id, register_type, start_address, count):
            return [0] * count

        task = asyncio.create_task(poller.start(read))
        await asyncio.sleep(0)
        assert poller.state is PollerState.RUNNING

        with pytest.raises(RuntimeError, match="already running"):
            await poller.start(read)

        poller.stop()
        assert poller.state is PollerState.STOPPING
        await asyncio.wait_for(task, timeout=5)
        assert poller.state is PollerState.STOPPED
        assert event_sink.types() == ["StartedEvent", "StoppedEvent"]

    @pytest.mark.asyncio
    async def test_restart_after_stop(self, poller, inverter_group, fake_reader, event_sink):
        poller.add_group(inverter_group)

        await run(poller, stop_after(poller, fake_reader, 2))
        await run(poller, stop_after(poller, fake_reader, 4))

        assert event_sink.types().count("StartedEvent") == 2
        assert event_sink.types().count("StoppedEvent") == 2

    @pytest.mark.asyncio
    async def test_default_sink_queue(self, inverter_group, fake_reader):
        poller = ModbusPoller(tick_interval=0)
        poller.add_group(inverter_group)

        await run(poller, stop_after(poller, fake_reader, 2))

        queue = poller.event_sink.queue
        assert isinstance(queue.get_nowait(), StartedEvent)
        events = [queue.get_nowait() for _ in range(queue.qsize())]
        assert isinstance(events[-1], StoppedEvent)


class TestPollerScheduling:
    """Test which groups and registers get read."""

    @pytest.mark.asyncio
    async def test_disabled_group_never_read(self, poller, fake_reader, event_sink):
        poller.add_group(PollGroup("active", slave_id=1, registers=[RegisterDefinition(0, "a")]))
        poller.add_group(
            PollGroup("idle", slave_id=2, enabled=False, registers=[RegisterDefinition(0, "b")])
        )

        await run(poller, stop_after(poller, fake_reader, 3))

        assert fake_reader.reads_of(1) == 3
        assert fake_reader.reads_of(2) == 0
        assert {event.group for event in event_sink.of_type(ReadingsEvent)} == {"active"}

    @pytest.mark.asyncio
    async def test_failing_group_does_not_block_other(self, poller, fake_reader, event_sink):
        poller.add_group(PollGroup("a", slave_id=1, registers=[RegisterDefinition(0, "a1")]))
        poller.add_group(PollGroup("b", slave_id=2, registers=[RegisterDefinition(0, "b1")]))
        fake_reader.set_registers(2, RegisterType.HOLDING, 0, [42])
        fake_reader.fail_slave(1, "Timeout")

        await run(poller, stop_after(poller, fake_reader, 2))

        (error,) = event_sink.of_type(ErrorEvent)
        assert error.group == "a"
        assert error.message == "Timeout"
        readings = {event.group: event for event in event_sink.of_type(ReadingsEvent)}
        assert readings["b"].readings[0].value == ModbusValue.u64(42)
        assert readings["a"].readings[0].is_error
        assert event_sink.types().index("ErrorEvent") > 0

    @pytest.mark.asyncio
    async def test_group_interval_respected(self, event_sink, fake_reader):
        poller = ModbusPoller(event_sink=event_sink, tick_interval=0, clock=SteppingClock(1.0))
        poller.add_group(PollGroup("fast", slave_id=1, interval=1.0, registers=[RegisterDefinition(0, "f")]))
        poller.add_group(PollGroup("slow", slave_id=2, interval=5.0, registers=[RegisterDefinition(0, "s")]))

        await run(poller, stop_after(poller, fake_reader, 8))

        # fast read at t=0,1,...; slow at t=0 and t=5
        assert fake_reader.reads_of(1) == 6
        assert fake_reader.reads_of(2) == 2

    @pytest.mark.asyncio
    async def test_register_poll_interval_override(self, event_sink, fake_reader):
        clock = SteppingClock(1.0)
        poller = ModbusPoller(event_sink=event_sink, tick_interval=0, clock=clock)
        group = PollGroup("g", interval=10.0)
        group.add_register(RegisterDefinition(0, "slow"))
        group.add_register(RegisterDefinition(100, "fast", poll_interval=1.0))
        poller.add_group(group)

        async def read(slave_id, register_type, start_address, count):
            try:
                return await fake_reader.read(slave_id, register_type, start_address, count)
            finally:
                if clock.now >= 10:
                    poller.stop()

        await run(poller, read)

        addresses = [call[2] for call in fake_reader.calls]
        assert addresses.count(0) == 2
        assert addresses.count(100) == 11

    @pytest.mark.asyncio
    async def test_float_change_detection(self, poller, fake_reader, event_sink):
        poller.add_group(
            PollGroup(
                "pressure",
                registers=[
                    RegisterDefinition(
                        0, "line_pressure", data_type=ModbusDataType.F64BE, detect_change=True
                    )
                ],
            )
        )
        fake_reader.script(
            1,
            RegisterType.HOLDING,
            0,
            [split_registers(float64_to_bits(value), 4) for value in (10.0, 10.0, 10.0001)],
        )

        await run(poller, stop_after(poller, fake_reader, 3))

        changes = event_sink.of_type(ValueChangedEvent)
        assert len(changes) == 1
        assert changes[0].new_value == ModbusValue.f64(10.0)
        assert changes[0].old_value is None

    @pytest.mark.asyncio
    async def test_group_added_while_running(self, poller, fake_reader, event_sink):
        poller.add_group(PollGroup("a", slave_id=1, registers=[RegisterDefinition(0, "a1")]))

        async def read(slave_id, register_type, start_address, count):
            values = await fake_reader.read(slave_id, register_type, start_address, count)
            if slave_id == 1 and poller.get_group("b") is None:
                poller.add_group(
                    PollGroup("b", slave_id=2, registers=[RegisterDefinition(0, "b1")])
                )
            if slave_id == 2:
                poller.stop()
            return values

        await run(poller, read)

        assert fake_reader.reads_of(2) == 1
        assert "b" in {event.group for event in event_sink.of_type(ReadingsEvent)}

    @pytest.mark.asyncio
    async def test_readings_available(self, poller, inverter_group, fake_reader):
        fake_reader.set_registers(1, RegisterType.HOLDING, 0x0100, [486])
        poller.add_group(inverter_group)

        await run(poller, stop_after(poller, fake_reader, 2))

        assert set(poller.get_readings()) == {
            "battery_voltage",
            "battery_current",
            "inverter_temperature",
            "grid_power",
        }
        assert poller.get_reading("battery_voltage").scaled_value == pytest.approx(48.6)
        assert poller.get_reading("missing") is None

    @pytest.mark.asyncio
    async def test_removed_group_readings_forgotten(self, poller, inverter_group, fake_reader):
        poller.add_group(inverter_group)
        await run(poller, stop_after(poller, fake_reader, 2))
        assert poller.get_reading("battery_voltage") is not None

        poller.remove_group("inverter")

        assert poller.get_readings() == {}
        assert poller.get_reading("battery_voltage") is None

    @pytest.mark.asyncio
    async def test_removed_register_reading_forgotten(self, poller, inverter_group, fake_reader):
        poller.add_group(inverter_group)
        await run(poller, stop_after(poller, fake_reader, 2))

        poller.remove_register("inverter", "grid_power")

        assert poller.get_reading("grid_power") is None
        assert poller.get_reading("battery_voltage") is not None

    @pytest.mark.asyncio
    async def test_reading_shared_with_remaining_group_kept(self, poller, fake_reader):
        first = PollGroup("first", slave_id=1)
        first.add_register(RegisterDefinition(0x0100, "shared"))
        second = PollGroup("second", slave_id=2)
        second.add_register(RegisterDefinition(0x0100, "shared"))
        poller.add_group(first)
        poller.add_group(second)
        await run(poller, stop_after(poller, fake_reader, 2))

        poller.remove_group("first")

        assert poller.get_reading("shared") is not None
