"""Unit tests for the WebSocketManager using an in-memory socket."""

import json

import pytest

from models.canvas import build_canvas_config
from models.geometry import Size
from core.exceptions import ClientError
from core.reducer import create_reducer
from core.store import Store
from core.websocket_manager import WebSocketManager


class FakeWebSocket:
    def __init__(self):
        self.accepted = False
        self.sent = []

    async def accept(self):
        self.accepted = True

    async def send_text(self, text):
        self.sent.append(json.loads(text))


class BrokenWebSocket(FakeWebSocket):
    async def send_text(self, text):
        raise RuntimeError("socket closed")


@pytest.fixture
def manager(reducer):
    return WebSocketManager(Store(reducer))


@pytest.mark.asyncio
async def test_connect_registers_client(manager):
    socket = FakeWebSocket()
    await manager.connect(socket, "1", Size(100, 100))

    assert socket.accepted
    assert "1" in manager.store.get_state().clients
    assert socket.sent[-1]['type'] == "state"
    assert socket.sent[-1]['client']['id'] == "1"


@pytest.mark.asyncio
async def test_swipe_messages_pair_clients(manager, clock):
    one, two = FakeWebSocket(), FakeWebSocket()
    await manager.connect(one, "1", Size(100, 100))
    await manager.connect(two, "2", Size(100, 100))

    await manager.handle_message("1", json.dumps({'type': 'swipe', 'direction': 'RIGHT', 'position': {'x': 50, 'y': 50}}))
    clock.advance(100)
    await manager.handle_message("2", json.dumps({'type': 'swipe', 'direction': 'LEFT', 'position': {'x': 50, 'y': 50}}))

    view = two.sent[-1]
    assert sorted(client['id'] for client in view['clients']) == ["1", "2"]
    assert view['cluster']['id'] == view['client']['cluster_id']


@pytest.mark.asyncio
async def test_leave_message(manager):
    await manager.connect(FakeWebSocket(), "1", Size(1, 1))
    await manager.handle_message("1", json.dumps({'type': 'leave'}))

    assert manager.store.get_state().clients["1"].cluster_id is None


@pytest.mark.asyncio
async def test_disconnect_removes_client(manager):
    socket = FakeWebSocket()
    await manager.connect(socket, "1", Size(1, 1))
    await manager.disconnect("1", socket)

    assert manager.connections == {}
    assert manager.store.get_state().clients == {}


@pytest.mark.asyncio
async def test_stale_socket_does_not_disconnect_new_one(manager):
    old, new = FakeWebSocket(), FakeWebSocket()
    await manager.connect(old, "1", Size(1, 1))
    await manager.connect(new, "1", Size(1, 1))
    await manager.disconnect("1", old)

    assert manager.connections["1"] is new
    assert "1" in manager.store.get_state().clients


@pytest.mark.asyncio
@pytest.mark.parametrize("message", [
    "not json",
    json.dumps([1, 2]),
    json.dumps({'type': 'dance'}),
    json.dumps({'type': 'swipe', 'direction': 'UP'}),
    json.dumps({'type': 'swipe', 'direction': 'NOWHERE', 'position': {'x': 0, 'y': 0}}),
    json.dumps({'type': 'swipe', 'direction': 'RIGHT', 'position': {'x': 'a', 'y': 'b'}}),
    json.dumps({'type': 'swipe', 'direction': 'RIGHT', 'position': {'x': None, 'y': 0}}),
    json.dumps({'type': 'swipe', 'direction': 'RIGHT', 'position': 'here'}),
    json.dumps({'type': 'event', 'event': 'unregistered'}),
])
async def test_bad_messages_raise_client_error(manager, message):
    await manager.connect(FakeWebSocket(), "1", Size(1, 1))
    with pytest.raises(ClientError):
        await manager.handle_message("1", message)


@pytest.mark.asyncio
async def test_broadcast_survives_broken_socket(manager):
    good = FakeWebSocket()
    await manager.connect(BrokenWebSocket(), "broken", Size(1, 1))
    await manager.connect(good, "good", Size(1, 1))

    await manager.broadcast()

    assert good.sent[-1]['client']['id'] == "good"


@pytest.mark.asyncio
async def test_rejected_swipe_is_not_queued(manager, clock):
    one, two = FakeWebSocket(), FakeWebSocket()
    await manager.connect(one, "1", Size(100, 100))
    await manager.connect(two, "2", Size(100, 100))

    with pytest.raises(ClientError):
        await manager.handle_message("1", json.dumps({'type': 'swipe', 'direction': 'RIGHT', 'position': {'x': "a", 'y': "b"}}))
    assert manager.store.get_state().swipes == ()

    await manager.handle_message("2", json.dumps({'type': 'swipe', 'direction': 'LEFT', 'position': {'x': 0, 'y': 0}}))
    clock.advance(50)
    await manager.handle_message("1", json.dumps({'type': 'swipe', 'direction': 'RIGHT', 'position': {'x': 0, 'y': 0}}))

    state = manager.store.get_state()
    assert state.clients["1"].cluster_id == state.clients["2"].cluster_id


@pytest.fixture
def canvas_manager(clock):
    return WebSocketManager(Store(create_reducer(build_canvas_config(clock=clock))))


@pytest.mark.asyncio
@pytest.mark.parametrize("message", [
    json.dumps({'type': 'event', 'event': 'tap'}),
    json.dumps({'type': 'event', 'event': 'tap', 'data': {'y': 3}}),
    json.dumps({'type': 'event', 'event': 'tap', 'data': {'x': "left", 'y': 3}}),
    json.dumps({'type': 'event', 'event': 'tap', 'data': [1, 2]}),
])
async def test_bad_tap_payloads_raise_client_error(canvas_manager, message):
    await canvas_manager.connect(FakeWebSocket(), "1", Size(1, 1))
    before = canvas_manager.store.get_state()

    with pytest.raises(ClientError):
        await canvas_manager.handle_message("1", message)

    assert canvas_manager.store.get_state() is before
