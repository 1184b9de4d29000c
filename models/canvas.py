"""
Sample embedder hooks: each cluster tracks the bounds of its shared canvas
and the points clients have tapped on it.
"""

from typing import Any, Dict, Mapping, Optional, Sequence

from models.client import Client
from models.geometry import Point
from core.config import ClientHooks, ClusterHooks, ReducerConfig
from core.exceptions import InvalidPatch

MAX_TAPS = 50


def viewport(client: Client) -> Dict[str, Any]:
    """The client's screen rectangle in canvas coordinates."""
    return {
        'x': client.transform.x,
        'y': client.transform.y,
        'width': client.size.width,
        'height': client.size.height
    }


def bounds(clients: Sequence[Client]) -> Dict[str, Any]:
    """Smallest rectangle covering every client's viewport."""
    if not clients:
        return {'x': 0, 'y': 0, 'width': 0, 'height': 0}
    left = min(client.transform.x for client in clients)
    top = min(client.transform.y for client in clients)
    right = max(client.transform.x + client.size.width for client in clients)
    bottom = max(client.transform.y + client.size.height for client in clients)
    return {'x': left, 'y': top, 'width': right - left, 'height': bottom - top}


def init_client(client: Client, cluster: Optional[Any] = None) -> Dict[str, Any]:
    return {'viewport': viewport(client)}


def init_cluster(members: Sequence[Client]) -> Dict[str, Any]:
    return {'bounds': bounds(members), 'taps': [], 'ticks': 0}


def update_client(view) -> Dict[str, Any]:
    return {'viewport': viewport(view.client)}


def update_cluster(view) -> Dict[str, Any]:
    ticks = view.data.get('ticks', 0) if isinstance(view.data, dict) else 0
    return {'bounds': bounds(view.clients), 'ticks': ticks + 1}


def on_tap(view, payload: Dict[str, Any]) -> Dict[str, Any]:
    """Record a tap, translated from screen to canvas coordinates."""
    if not isinstance(payload, Mapping):
        raise InvalidPatch("tap needs an {x, y} payload")
    try:
        point = Point.from_dict(payload)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidPatch(f"Invalid tap position: {str(e)}") from e

    client = view.client
    tap = {
        'client': client.id,
        'x': client.transform.x + point.x,
        'y': client.transform.y + point.y
    }
    taps = list(view.data.get('taps', [])) if isinstance(view.data, dict) else []
    return {'cluster': {'data': {'taps': (taps + [tap])[-MAX_TAPS:]}}}


def on_clear(view, payload: Any) -> Dict[str, Any]:
    return {'cluster': {'data': {'taps': []}}}


def build_canvas_config(**settings):
    """ReducerConfig wired to the canvas hooks; extra settings pass through."""
    return ReducerConfig(
        client=ClientHooks(
            init=init_client,
            update=update_client,
            events={'tap': on_tap, 'clear': on_clear}
        ),
        cluster=ClusterHooks(init=init_cluster, update=update_cluster),
        **settings
    )
