"""Swipe gestures waiting to be paired."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional

from models.geometry import Direction, Point


@dataclass(frozen=True)
class Swipe:
    """
    A directional gesture sent by a client to request pairing.

    The id is the swiping client's id. The timestamp is set by the server
    when the swipe is received, never by the client.
    """

    id: str
    direction: Direction
    position: Point
    timestamp: Optional[datetime] = None

    def received_at(self, timestamp: datetime) -> 'Swipe':
        """Return a copy of this swipe stamped with its receipt time."""
        return replace(self, timestamp=timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'direction': self.direction.value if isinstance(self.direction, Direction) else self.direction,
            'position': self.position.to_dict(),
            'timestamp': self.timestamp.isoformat() if self.timestamp else None
        }

    def __repr__(self) -> str:
        return f"Swipe(id={self.id!r}, direction={self.direction!r}, position={self.position!r})"
