"""Action models delivered to the reducer."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Union

from models.geometry import Direction, Point, Size
from models.swipe import Swipe


class ActionType(Enum):
    """Types of actions the reducer understands."""
    NEXT_STATE = "NEXT_STATE"
    CLIENT_ACTION = "CLIENT_ACTION"
    CONNECT = "CONNECT"
    SWIPE = "SWIPE"
    LEAVE_CLUSTER = "LEAVE_CLUSTER"
    DISCONNECT = "DISCONNECT"


@dataclass(frozen=True)
class ConnectData:
    id: str
    size: Size

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'size': self.size.to_dict()}


@dataclass(frozen=True)
class ClientEvent:
    """A named event sent by a client, routed to an embedder handler."""
    id: str
    type: str
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'type': self.type, 'data': self.data}


@dataclass(frozen=True)
class ClientRef:
    id: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id}


@dataclass(frozen=True)
class Action:
    """A single state transition request."""

    type: ActionType
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert action to dictionary representation."""
        data = self.data.to_dict() if self.data is not None else None
        return {'type': self.type.value, 'data': data}

    def __repr__(self) -> str:
        return f"Action(type={self.type.name}, data={self.data!r})"


def _size(size: Union[Size, Mapping[str, Any]]) -> Size:
    return size if isinstance(size, Size) else Size.from_dict(size)


def _point(point: Union[Point, Mapping[str, Any]]) -> Point:
    return point if isinstance(point, Point) else Point.from_dict(point)


def _direction(direction: Union[Direction, str]) -> Union[Direction, str]:
    # Unknown values are passed through; the reducer rejects them.
    try:
        return Direction(direction)
    except ValueError:
        return direction


def next_state() -> Action:
    return Action(ActionType.NEXT_STATE)


def client_action(id: str, type: str, data: Any = None) -> Action:
    return Action(ActionType.CLIENT_ACTION, ClientEvent(id, type, data))


def connect(id: str, size: Union[Size, Mapping[str, Any]]) -> Action:
    return Action(ActionType.CONNECT, ConnectData(id, _size(size)))


def swipe(id: str, direction: Union[Direction, str], position: Union[Point, Mapping[str, Any]]) -> Action:
    return Action(ActionType.SWIPE, Swipe(id, _direction(direction), _point(position)))


def leave_cluster(id: str) -> Action:
    return Action(ActionType.LEAVE_CLUSTER, ClientRef(id))


def disconnect(id: str) -> Action:
    return Action(ActionType.DISCONNECT, ClientRef(id))
