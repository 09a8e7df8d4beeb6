"""Tests for the transport error logging decorator."""

import asyncio
import logging

import pytest

from modbus_master.domain.exceptions import (
    CRCMismatchError,
    ModbusDeviceError,
    TransportError,
)
from modbus_master.domain.value_objects import ExceptionCode
from modbus_master.infrastructure.decorators.error_handler import (
    handle_transport_errors,
)


class _Link:
    """Minimal object carrying a per-instance timeout."""

    def __init__(self, timeout):
        self._timeout = timeout

    @handle_transport_errors("Link exchange")
    async def exchange(self):
        raise asyncio.TimeoutError()


class TestHandleTransportErrors:
    """Test logging and re-raise behaviour."""

    @pytest.mark.asyncio
    async def test_result_passed_through(self):
        @handle_transport_errors("Modbus read")
        async def read():
            return [1, 2, 3]

        assert await read() == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_timeout_logged_with_kwarg(self, caplog):
        @handle_transport_errors("Modbus read")
        async def read(timeout=1.0):
            raise asyncio.TimeoutError("no reply")

        with pytest.raises(asyncio.TimeoutError):
            await read(timeout=0.5)

        assert "Modbus read timed out after 0.5s" in caplog.text
        assert caplog.records[-1].levelno == logging.WARNING

    @pytest.mark.asyncio
    async def test_timeout_logged_with_instance_setting(self, caplog):
        with pytest.raises(asyncio.TimeoutError):
            await _Link(2.5).exchange()

        assert "Link exchange timed out after 2.5s" in caplog.text

    @pytest.mark.asyncio
    async def test_timeout_substituted(self):
        @handle_transport_errors("Modbus read", reraise=False, default_return=[])
        async def read():
            raise asyncio.TimeoutError()

        assert await read() == []

    @pytest.mark.asyncio
    async def test_device_error_has_no_traceback(self, caplog):
        @handle_transport_errors("Modbus read", reraise=False)
        async def read():
            raise ModbusDeviceError(1, 0x03, ExceptionCode.SLAVE_DEVICE_BUSY)

        with caplog.at_level(logging.ERROR):
            await read()

        assert "Modbus read device error" in caplog.text
        assert "Slave Device Busy" in caplog.text
        assert caplog.records[-1].exc_info is None

    @pytest.mark.asyncio
    async def test_frame_error(self, caplog):
        @handle_transport_errors("Modbus read", reraise=False)
        async def read():
            raise CRCMismatchError(0x1234, 0x4321)

        await read()

        assert "Modbus read frame error" in caplog.text
        assert caplog.records[-1].exc_info is None

    @pytest.mark.asyncio
    async def test_transport_error_reraised(self, caplog):
        @handle_transport_errors("Modbus read")
        async def read():
            raise TransportError("port closed")

        with pytest.raises(TransportError):
            await read()

        assert "Modbus read transport error: port closed" in caplog.text

    @pytest.mark.asyncio
    async def test_unexpected_error_has_traceback(self, caplog):
        @handle_transport_errors("Modbus read", reraise=False)
        async def read():
            raise KeyError("register")

        with caplog.at_level(logging.ERROR):
            await read()

        assert "Modbus read unexpected error" in caplog.text
        assert caplog.records[-1].exc_info is not None

    @pytest.mark.asyncio
    async def test_custom_logger(self, caplog):
        logger = logging.getLogger("plant.bus")

        @handle_transport_errors("Modbus read", logger=logger, reraise=False)
        async def read():
            raise TransportError("boom")

        await read()

        assert caplog.records[-1].name == "plant.bus"

    def test_sync_function(self, caplog):
        @handle_transport_errors("Frame decode", reraise=False, default_return=None)
        def decode():
            raise CRCMismatchError(1, 2)

        assert decode() is None
        assert "Frame decode frame error" in caplog.text

    def test_sync_reraise(self):
        @handle_transport_errors("Frame decode")
        def decode():
            raise ValueError("bad")

        with pytest.raises(ValueError, match="bad"):
            decode()

    def test_wraps_metadata(self):
        @handle_transport_errors("Modbus read")
        async def read_registers():
            """Read registers."""

        assert read_registers.__name__ == "read_registers"
        assert read_registers.__doc__ == "Read registers."
