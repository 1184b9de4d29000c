"""Unit tests for the Store and the tick scheduler."""

import asyncio

import pytest

from models import action as actions
from models.geometry import Size
from core.exceptions import UnhandledEventType
from core.store import Store
from core.ticker import Ticker


@pytest.fixture
def store(reducer):
    """Store instance for testing."""
    return Store(reducer)


@pytest.mark.asyncio
async def test_store_initialization(store):
    """Test store initialization."""
    assert store.get_state().clients == {}
    assert store.get_version() == 1


@pytest.mark.asyncio
async def test_dispatch_applies_action(store):
    state = await store.dispatch(actions.connect("1", Size(10, 10)))

    assert "1" in state.clients
    assert store.get_state() is state
    assert store.get_version() == 2


@pytest.mark.asyncio
async def test_noop_does_not_bump_version(store):
    await store.dispatch(actions.disconnect("ghost"))
    assert store.get_version() == 1


@pytest.mark.asyncio
async def test_protocol_error_keeps_state(store):
    await store.dispatch(actions.connect("1", Size(10, 10)))
    before = store.get_state()

    with pytest.raises(UnhandledEventType):
        await store.dispatch(actions.client_action("1", "wave"))

    assert store.get_state() is before
    assert store.get_version() == 2


@pytest.mark.asyncio
async def test_concurrent_dispatches_are_serialized(store):
    await asyncio.gather(*(store.dispatch(actions.connect(str(i), Size(1, 1))) for i in range(10)))

    assert len(store.get_state().clients) == 10
    assert store.get_version() == 11


@pytest.mark.asyncio
async def test_subscribers_receive_snapshots(reducer):
    store = Store(reducer, queue_size=2)
    queue = store.subscribe()

    for i in range(3):
        await store.dispatch(actions.connect(str(i), Size(1, 1)))

    first = queue.get_nowait()
    second = queue.get_nowait()
    assert set(first.clients) == {"0", "1"}
    assert set(second.clients) == {"0", "1", "2"}

    store.unsubscribe(queue)
    await store.dispatch(actions.disconnect("0"))
    assert queue.empty()


@pytest.mark.asyncio
async def test_ticker_tick_dispatches_next_state(config, store):
    config.cluster.update = lambda view: {'ticked': True}
    seen = []

    async def on_tick(state):
        seen.append(state)

    await store.dispatch(actions.connect("1", Size(1, 1)))
    ticker = Ticker(store, interval=0.01, on_tick=on_tick)
    state = await ticker.tick()

    cluster_id = state.clients["1"].cluster_id
    assert state.clusters[cluster_id].data['ticked'] is True
    assert seen == [state]


@pytest.mark.asyncio
async def test_ticker_start_and_stop(store):
    ticker = Ticker(store, interval=0.01)
    ticker.start()
    assert ticker.running
    await asyncio.sleep(0.03)
    await ticker.stop()
    assert not ticker.running
