"""Immutable snapshot of every client, cluster and pending swipe."""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from models.client import Client, Cluster
from models.swipe import Swipe


def _frozen(mapping: Optional[Mapping]) -> Mapping:
    if isinstance(mapping, MappingProxyType):
        return mapping
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class State:
    """
    Snapshot handed back by the reducer after every action.

    Snapshots are never mutated. Every change builds a new State through
    the ``with_*``/``without_*`` builders, which copy only the mapping that
    changes and share the rest.
    """

    clients: Mapping[str, Client] = field(default_factory=dict)
    clusters: Mapping[str, Cluster] = field(default_factory=dict)
    swipes: Tuple[Swipe, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'clients', _frozen(self.clients))
        object.__setattr__(self, 'clusters', _frozen(self.clusters))
        object.__setattr__(self, 'swipes', tuple(self.swipes))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        return (dict(self.clients) == dict(other.clients)
                and dict(self.clusters) == dict(other.clusters)
                and self.swipes == other.swipes)

    def with_clients(self, *clients: Client) -> 'State':
        updated = dict(self.clients)
        for client in clients:
            updated[client.id] = client
        return replace(self, clients=updated)

    def without_clients(self, ids: Iterable[str]) -> 'State':
        ids = set(ids)
        return replace(self, clients={k: v for k, v in self.clients.items() if k not in ids})

    def with_clusters(self, *clusters: Cluster) -> 'State':
        updated = dict(self.clusters)
        for cluster in clusters:
            updated[cluster.id] = cluster
        return replace(self, clusters=updated)

    def without_clusters(self, ids: Iterable[str]) -> 'State':
        ids = set(ids)
        return replace(self, clusters={k: v for k, v in self.clusters.items() if k not in ids})

    def with_swipes(self, swipes: Iterable[Swipe]) -> 'State':
        return replace(self, swipes=tuple(swipes))

    def to_dict(self) -> Dict[str, Any]:
        """Convert the snapshot to a JSON-friendly dictionary."""
        return {
            'clients': {key: client.to_dict() for key, client in self.clients.items()},
            'clusters': {key: cluster.to_dict() for key, cluster in self.clusters.items()},
            'swipes': [swipe.to_dict() for swipe in self.swipes]
        }


INITIAL_STATE = State()
