"""Hooks and settings supplied by the embedding application."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Generic, Mapping, Optional, Sequence, TypeVar
import uuid

ClientDataT = TypeVar('ClientDataT')
ClusterDataT = TypeVar('ClusterDataT')

# Hooks receive read-only views from core.views.
UpdateHook = Callable[[Any], Any]
EventHandler = Callable[[Any, Any], Any]

SWIPE_DELAY_TOLERANCE = timedelta(milliseconds=500)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class ClientHooks(Generic[ClientDataT]):
    """
    Client-side hooks.

    Args:
        init: ``init(client, cluster_view)`` returns the client's data.
            ``cluster_view`` is None for a freshly connected client.
        update: optional ``update(client_view)`` returning partial data,
            called on every tick for clustered clients.
        events: handlers keyed by event type,
            ``handler(client_view, payload) -> {cluster?, client?}``.
    """

    init: Callable[..., ClientDataT]
    update: Optional[UpdateHook] = None
    events: Mapping[str, EventHandler] = field(default_factory=dict)


@dataclass
class ClusterHooks(Generic[ClusterDataT]):
    """Cluster-side hooks: ``init(members)`` and optional ``update(cluster_view)``."""

    init: Callable[[Sequence[Any]], ClusterDataT]
    update: Optional[UpdateHook] = None


@dataclass
class SwipeSettings:
    """
    Swipe matching settings.

    Args:
        tolerance: two swipes match when received less than this apart
        prune_expired: drop expired swipes from the queue whenever a new
            swipe is queued; when False they linger until the next match
    """

    tolerance: timedelta = SWIPE_DELAY_TOLERANCE
    prune_expired: bool = True


@dataclass
class ReducerConfig(Generic[ClientDataT, ClusterDataT]):
    """Everything the reducer needs from its embedder."""

    client: ClientHooks[ClientDataT]
    cluster: ClusterHooks[ClusterDataT]
    swipe: SwipeSettings = field(default_factory=SwipeSettings)
    clock: Callable[[], datetime] = utc_now
    id_factory: Callable[[], str] = new_id

    @classmethod
    def bare(cls) -> 'ReducerConfig':
        """A configuration whose hooks produce no data."""
        return cls(
            client=ClientHooks(init=lambda client, cluster=None: None),
            cluster=ClusterHooks(init=lambda members: None)
        )

    def describe(self) -> Dict[str, Any]:
        return {
            'client_events': sorted(self.client.events),
            'client_update': self.client.update is not None,
            'cluster_update': self.cluster.update is not None,
            'swipe_tolerance_ms': self.swipe.tolerance / timedelta(milliseconds=1),
            'prune_expired_swipes': self.swipe.prune_expired
        }
