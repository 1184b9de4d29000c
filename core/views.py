"""Read-only projections of the state handed to embedder hooks."""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from models.client import Client, Cluster
from models.state import State


@dataclass(frozen=True)
class ClusterView:
    """A cluster together with every client that belongs to it."""

    cluster: Optional[Cluster]
    clients: Tuple[Client, ...]

    @property
    def data(self) -> Any:
        return self.cluster.data if self.cluster else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cluster': self.cluster.to_dict() if self.cluster else None,
            'clients': [client.to_dict() for client in self.clients]
        }


@dataclass(frozen=True)
class ClientView(ClusterView):
    """A client, its cluster, and every client sharing that cluster."""

    client: Optional[Client] = None

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['client'] = self.client.to_dict() if self.client else None
        return result


def get_clients_in_cluster(clients: Mapping[str, Client], cluster_id: Optional[str]) -> Tuple[Client, ...]:
    """Clients referencing ``cluster_id``, in insertion order."""
    if cluster_id is None:
        return ()
    return tuple(client for client in clients.values() if client.cluster_id == cluster_id)


def get_cluster_state(state: State, cluster_id: str) -> ClusterView:
    return ClusterView(
        cluster=state.clusters.get(cluster_id),
        clients=get_clients_in_cluster(state.clients, cluster_id)
    )


def get_client_state(state: State, client_id: str) -> ClientView:
    """
    Project the state from one client's point of view.

    Unknown ids yield an empty view rather than an error.
    """
    client = state.clients.get(client_id)
    cluster_id = client.cluster_id if client else None
    return ClientView(
        cluster=state.clusters.get(cluster_id) if cluster_id else None,
        clients=get_clients_in_cluster(state.clients, cluster_id),
        client=client
    )
