"""Tests for the connection guard decorator."""

import pytest

from modbus_master.domain.exceptions import TransportError
from modbus_master.infrastructure.decorators import require_connection
from tests.doubles import FakeTransport


class _Client:
    def __init__(self, transport):
        self._transport = transport
        self.calls = 0

    @require_connection()
    async def exchange(self, value):
        self.calls += 1
        return value * 2


class TestRequireConnection:
    """Test require_connection decorator."""

    @pytest.mark.asyncio
    async def test_runs_when_connected(self):
        client = _Client(FakeTransport(connected=True))

        assert await client.exchange(21) == 42
        assert client.calls == 1

    @pytest.mark.asyncio
    async def test_raises_when_disconnected(self):
        client = _Client(FakeTransport())

        with pytest.raises(TransportError, match="not connected"):
            await client.exchange(21)
        assert client.calls == 0

    @pytest.mark.asyncio
    async def test_custom_transport_attribute(self):
        class _Other:
            def __init__(self):
                self.link = FakeTransport()

            @require_connection(transport_attr="link")
            async def ping(self):
                return "pong"

        other = _Other()
        with pytest.raises(TransportError):
            await other.ping()

        await other.link.connect("127.0.0.1:502")
        assert await other.ping() == "pong"
