"""Client and cluster records owned by the reducer."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from models.geometry import Point, Size


@dataclass(frozen=True)
class Client:
    """Represents one connected device and its place on the shared canvas."""

    id: str
    size: Size
    transform: Point = field(default_factory=Point)
    cluster_id: Optional[str] = None
    connections: Tuple[str, ...] = ()
    data: Any = None

    @property
    def has_cluster(self) -> bool:
        return self.cluster_id is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert client to dictionary representation."""
        return {
            'id': self.id,
            'size': self.size.to_dict(),
            'transform': self.transform.to_dict(),
            'cluster_id': self.cluster_id,
            'connections': list(self.connections),
            'data': self.data
        }

    def __repr__(self) -> str:
        return f"Client(id={self.id!r}, cluster_id={self.cluster_id!r}, transform={self.transform!r})"


@dataclass(frozen=True)
class Cluster:
    """A group of clients sharing one coordinate space."""

    id: str
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'data': self.data}
