"""Shared fixtures: a controllable clock and predictable ids."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from core.config import ClientHooks, ClusterHooks, ReducerConfig
from core.reducer import StateReducer


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self):
        self.now = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, milliseconds: float) -> None:
        self.now += timedelta(milliseconds=milliseconds)


def counting_ids(prefix: str = "cluster"):
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def id_factory():
    return counting_ids()


@pytest.fixture
def config(clock, id_factory):
    """Config whose hooks record what they were called with."""
    return ReducerConfig(
        client=ClientHooks(init=lambda client, cluster=None: {
            'id': client.id,
            'members': [c.id for c in cluster.clients] if cluster else []
        }),
        cluster=ClusterHooks(init=lambda members: {'members': [c.id for c in members]}),
        clock=clock,
        id_factory=id_factory
    )


@pytest.fixture
def reducer(config):
    return StateReducer(config)
