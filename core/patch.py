"""Partial updates produced by embedder hooks."""

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from models.client import Client, Cluster
from models.geometry import Point, Size
from core.exceptions import InvalidPatch

CLIENT_FIELDS = {'data', 'transform', 'size'}
CLUSTER_FIELDS = {'data'}


@dataclass(frozen=True)
class EventResult:
    """What a client event handler asks the reducer to change."""

    cluster: Optional[Mapping[str, Any]] = None
    client: Optional[Mapping[str, Any]] = None

    @classmethod
    def coerce(cls, result: Any) -> 'EventResult':
        if isinstance(result, EventResult):
            return result
        if result is None:
            return cls()
        if not isinstance(result, Mapping):
            raise InvalidPatch(f"Event handlers must return a mapping, got {type(result).__name__}")
        return cls(cluster=result.get('cluster'), client=result.get('client'))


def merge_data(current: Any, partial: Any) -> Any:
    """Shallow-merge mappings; any other partial replaces the data."""
    if isinstance(current, Mapping) and isinstance(partial, Mapping):
        return {**current, **partial}
    return partial


def _check_fields(changes: Mapping[str, Any], allowed: set, kind: str) -> None:
    unknown = set(changes) - allowed
    if unknown:
        raise InvalidPatch(f"Cannot update {kind} fields: {', '.join(sorted(unknown))}")


def patch_client(client: Client, changes: Mapping[str, Any]) -> Client:
    _check_fields(changes, CLIENT_FIELDS, 'client')
    updates = {}
    if 'data' in changes:
        updates['data'] = merge_data(client.data, changes['data'])
    try:
        if 'transform' in changes:
            transform = changes['transform']
            updates['transform'] = transform if isinstance(transform, Point) else Point.from_dict(transform)
        if 'size' in changes:
            size = changes['size']
            updates['size'] = size if isinstance(size, Size) else Size.from_dict(size)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidPatch(f"Invalid client geometry: {str(e)}") from e
    return replace(client, **updates)


def patch_cluster(cluster: Cluster, changes: Mapping[str, Any]) -> Cluster:
    _check_fields(changes, CLUSTER_FIELDS, 'cluster')
    if 'data' not in changes:
        return cluster
    return replace(cluster, data=merge_data(cluster.data, changes['data']))
