"""Geometry primitives shared by clients and swipes."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class Direction(Enum):
    """Directions a swipe gesture can point toward."""
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    UP = "UP"
    DOWN = "DOWN"

    @classmethod
    def _missing_(cls, value):
        # Directions are matched case-insensitively.
        if isinstance(value, str):
            for member in cls:
                if member.value == value.upper():
                    return member
        return None


def coordinate(value: Any, name: str) -> float:
    """Convert a client-supplied number, rejecting anything non-finite."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


@dataclass(frozen=True)
class Point:
    """A position in a cluster's coordinate frame or on a client's screen."""

    x: float = 0
    y: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'x': self.x, 'y': self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Point':
        return cls(x=coordinate(data['x'], 'x'), y=coordinate(data['y'], 'y'))


@dataclass(frozen=True)
class Size:
    """Screen dimensions of a client."""

    width: float
    height: float

    def to_dict(self) -> Dict[str, Any]:
        return {'width': self.width, 'height': self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Size':
        return cls(width=coordinate(data['width'], 'width'), height=coordinate(data['height'], 'height'))
