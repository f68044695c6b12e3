from __future__ import annotations

import asyncio

import pytest
from socketio.exceptions import ConnectionError as SocketConnectionError

from swiftlink.client.connection import RelayConnection, RelayConnectionError


class FakeAsyncClient:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.connected = False
        self.connect_calls = []
        self.emitted = []
        self.handlers = {}

    async def connect(self, url, auth=None):
        self.connect_calls.append(url)
        if self.fail:
            raise SocketConnectionError("refused")
        self.connected = True

    async def disconnect(self):
        self.connected = False

    async def emit(self, event, data=None):
        self.emitted.append((event, data))

    def on(self, event, handler=None):
        self.handlers[event] = handler


def test_connection_is_deferred() -> None:
    client = FakeAsyncClient()
    conn = RelayConnection("http://relay.test", client=client)
    assert client.connect_calls == []
    assert not conn.connected

    asyncio.run(conn.open())
    assert client.connect_calls == ["http://relay.test"]
    assert conn.connected


def test_open_twice_connects_once() -> None:
    client = FakeAsyncClient()
    conn = RelayConnection("http://relay.test", client=client)

    async def scenario():
        await conn.open()
        await conn.open()

    asyncio.run(scenario())
    assert len(client.connect_calls) == 1


def test_emit_on_closed_handle_raises() -> None:
    conn = RelayConnection("http://relay.test", client=FakeAsyncClient())
    with pytest.raises(RelayConnectionError):
        asyncio.run(conn.emit("joinRoom", "u1"))


def test_connect_failure_is_wrapped() -> None:
    conn = RelayConnection("http://relay.test", client=FakeAsyncClient(fail=True))
    with pytest.raises(RelayConnectionError):
        asyncio.run(conn.open())


def test_close_disconnects() -> None:
    client = FakeAsyncClient()
    conn = RelayConnection("http://relay.test", client=client)

    async def scenario():
        await conn.open()
        await conn.emit("leaveRoom", "u1")
        await conn.close()

    asyncio.run(scenario())
    assert client.emitted == [("leaveRoom", "u1")]
    assert not conn.connected


def test_off_stops_delivery_and_on_rewires_once() -> None:
    client = FakeAsyncClient()
    conn = RelayConnection("http://relay.test", client=client)
    got = []

    conn.on("usersList", got.append)
    dispatch = client.handlers["usersList"]
    asyncio.run(dispatch([1]))

    conn.off("usersList")
    asyncio.run(dispatch([2]))

    async def async_handler(data):
        got.append(("async", data))

    conn.on("usersList", async_handler)
    assert client.handlers["usersList"] is dispatch
    asyncio.run(dispatch([3]))

    assert got == [[1], ("async", [3])]
