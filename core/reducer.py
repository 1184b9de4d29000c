"""State reducer for clients, clusters and swipe pairing."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, Optional

from models.action import Action, ActionType, ClientEvent, ClientRef, ConnectData
from models.client import Client, Cluster
from models.state import INITIAL_STATE, State
from models.swipe import Swipe
from core.config import ReducerConfig
from core.exceptions import UnhandledEventType
from core.patch import EventResult, merge_data, patch_client, patch_cluster
from core.transform import get_transform, parse_direction
from core.views import ClusterView, get_client_state, get_cluster_state, get_clients_in_cluster

logger = logging.getLogger(__name__)


class StateReducer:
    """
    Pure ``(state, action) -> state`` transition function.

    Every operation returns a new snapshot and never touches the one it was
    given. Protocol errors propagate to the caller with the input state left
    as it was; actions about unknown or unclustered clients are no-ops.
    """

    def __init__(self, config: ReducerConfig):
        self.config = config
        self._handlers: Dict[ActionType, Callable[[State, object], State]] = {
            ActionType.NEXT_STATE: lambda state, _data: self.next_state(state),
            ActionType.CLIENT_ACTION: self.client_action,
            ActionType.CONNECT: self.connect,
            ActionType.SWIPE: self.swipe,
            ActionType.LEAVE_CLUSTER: self.leave_cluster,
            ActionType.DISCONNECT: self.disconnect,
        }

    def __call__(self, state: Optional[State], action: Action) -> State:
        if state is None:
            state = INITIAL_STATE
        handler = self._handlers.get(action.type)
        if handler is None:
            return state
        return handler(state, action.data)

    # Tick -----------------------------------------------------------------

    def next_state(self, state: State) -> State:
        """Recompute cluster and client data through the update hooks."""
        client_update = self.config.client.update
        cluster_update = self.config.cluster.update

        if client_update is None and cluster_update is None:
            return state

        clusters = state.clusters
        clients = state.clients

        if cluster_update is not None:
            clusters = {
                cluster_id: replace(cluster, data=merge_data(cluster.data, cluster_update(get_cluster_state(state, cluster_id))))
                for cluster_id, cluster in state.clusters.items()
            }

        if client_update is not None:
            clients = {
                client_id: (
                    replace(client, data=merge_data(client.data, client_update(get_client_state(state, client_id))))
                    if client.has_cluster else client
                )
                for client_id, client in state.clients.items()
            }

        return replace(state, clusters=clusters, clients=clients)

    # Client events --------------------------------------------------------

    def client_action(self, state: State, event: ClientEvent) -> State:
        """
        Route a named client event to its registered handler.

        Raises:
            UnhandledEventType: If no handler is registered for the event type
        """
        handler = self.config.client.events.get(event.type)

        if not callable(handler):
            raise UnhandledEventType(event.type)

        client = state.clients.get(event.id)

        if client is None or not client.has_cluster:
            return state

        result = EventResult.coerce(handler(get_client_state(state, client.id), event.data))
        updated = state

        if result.cluster:
            updated = updated.with_clusters(patch_cluster(state.clusters[client.cluster_id], result.cluster))

        if result.client:
            updated = updated.with_clients(patch_client(client, result.client))

        return updated

    # Connections ----------------------------------------------------------

    def connect(self, state: State, data: ConnectData) -> State:
        """Register a client together with its own solo cluster."""
        if data.id in state.clients:
            state = self.disconnect(state, ClientRef(data.id))

        cluster_id = self.config.id_factory()
        client = Client(id=data.id, size=data.size, cluster_id=cluster_id)

        client_data = self.config.client.init(client, None)
        cluster_data = self.config.cluster.init((client,))

        return (state
                .with_clusters(Cluster(cluster_id, cluster_data))
                .with_clients(replace(client, data=client_data)))

    # Swipes ---------------------------------------------------------------

    def swipe(self, state: State, swipe: Swipe) -> State:
        """
        Pair ``swipe`` with the oldest coincident pending swipe, or queue it.

        Raises:
            InvalidDirection: If the swipe direction is unknown
        """
        if swipe.id not in state.clients:
            return state

        now = self.config.clock()
        swipe = replace(swipe, direction=parse_direction(swipe.direction)).received_at(now)
        coincident = [pending for pending in state.swipes if self._is_coincident(pending, now)]
        candidates = [
            pending for pending in coincident
            if pending.id != swipe.id and pending.id in state.clients
        ]

        if not candidates:
            kept = coincident if self.config.swipe.prune_expired else state.swipes
            queue = [pending for pending in kept if pending.id != swipe.id]
            return state.with_swipes(queue + [swipe])

        partner = candidates[0]
        logger.debug(f"Matched swipe from {swipe.id} with pending swipe from {partner.id}")

        return self._cluster_clients(state.with_swipes(()), swipe, partner)

    def _is_coincident(self, swipe: Swipe, now: datetime) -> bool:
        return now - swipe.timestamp < self.config.swipe.tolerance

    def _is_shared(self, state: State, client: Client) -> bool:
        return client.has_cluster and len(get_clients_in_cluster(state.clients, client.cluster_id)) > 1

    def _cluster_clients(self, state: State, swipe_a: Swipe, swipe_b: Swipe) -> State:
        client_a = state.clients[swipe_a.id]
        client_b = state.clients[swipe_b.id]

        if self._is_shared(state, client_a):
            return self._join_cluster(state, client_a, swipe_a, client_b, swipe_b)

        if self._is_shared(state, client_b):
            return self._join_cluster(state, client_b, swipe_b, client_a, swipe_a)

        return self._create_cluster(state, client_a, swipe_a, client_b, swipe_b)

    def _join_cluster(self, state: State, host: Client, host_swipe: Swipe,
                      joiner: Client, joiner_swipe: Swipe) -> State:
        """Move ``joiner`` into the host's cluster, placed next to the host."""
        cluster_id = host.cluster_id
        transform = get_transform(host, host_swipe, joiner, joiner_swipe)

        if joiner.cluster_id != cluster_id:
            state = self._vacate(state, joiner.id, joiner.cluster_id)

        host = replace(state.clients[host.id], connections=host.connections + (joiner.id,))
        joiner = replace(
            state.clients[joiner.id],
            cluster_id=cluster_id,
            transform=transform,
            connections=joiner.connections + (host.id,)
        )
        state = state.with_clients(host, joiner)

        members = get_clients_in_cluster(state.clients, cluster_id)
        cluster = replace(state.clusters[cluster_id], data=self.config.cluster.init(members))
        joiner = replace(joiner, data=self.config.client.init(joiner, ClusterView(cluster, members)))

        logger.debug(f"Client {joiner.id} joined cluster {cluster_id} at {transform}")
        return state.with_clusters(cluster).with_clients(joiner)

    def _create_cluster(self, state: State, client_a: Client, swipe_a: Swipe,
                        client_b: Client, swipe_b: Swipe) -> State:
        """Build a new two-client cluster anchored on ``client_a``."""
        transform = get_transform(client_a, swipe_a, client_b, swipe_b)

        for client in (client_a, client_b):
            if client.has_cluster:
                state = self._vacate(state, client.id, client.cluster_id)

        cluster_id = self.config.id_factory()
        client_a = replace(
            state.clients[client_a.id],
            cluster_id=cluster_id,
            connections=client_a.connections + (client_b.id,)
        )
        client_b = replace(
            state.clients[client_b.id],
            cluster_id=cluster_id,
            transform=transform,
            connections=client_b.connections + (client_a.id,)
        )

        members = (client_a, client_b)
        cluster = Cluster(cluster_id, self.config.cluster.init(members))
        view = ClusterView(cluster, members)
        client_a = replace(client_a, data=self.config.client.init(client_a, view))
        client_b = replace(client_b, data=self.config.client.init(client_b, view))

        logger.debug(f"Created cluster {cluster_id} from {client_a.id} and {client_b.id}")
        return state.with_clusters(cluster).with_clients(client_a, client_b)

    # Departures -----------------------------------------------------------

    def _vacate(self, state: State, client_id: str, cluster_id: Optional[str]) -> State:
        """Delete ``cluster_id`` if at most one member remains once ``client_id`` is gone."""
        if cluster_id is None:
            return state

        remaining = [
            client for client in get_clients_in_cluster(state.clients, cluster_id)
            if client.id != client_id
        ]

        if len(remaining) > 1:
            return state

        state = state.without_clusters([cluster_id])
        return state.with_clients(*(replace(client, cluster_id=None) for client in remaining))

    def leave_cluster(self, state: State, ref: ClientRef) -> State:
        client = state.clients.get(ref.id)

        if client is None or not client.has_cluster:
            return state

        state = self._vacate(state, client.id, client.cluster_id)
        return state.with_clients(replace(client, cluster_id=None))

    def disconnect(self, state: State, ref: ClientRef) -> State:
        client = state.clients.get(ref.id)

        if client is None:
            return state

        state = self._vacate(state, client.id, client.cluster_id).without_clients([client.id])

        if any(pending.id == client.id for pending in state.swipes):
            state = state.with_swipes(pending for pending in state.swipes if pending.id != client.id)

        return state


def create_reducer(config: ReducerConfig) -> StateReducer:
    """Build a reducer bound to the embedder's hooks and settings."""
    return StateReducer(config)
