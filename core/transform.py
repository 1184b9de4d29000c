"""Edge-alignment geometry for clients joining a cluster."""

from typing import Any

from models.client import Client
from models.geometry import Direction, Point
from models.swipe import Swipe
from core.exceptions import InvalidDirection


def parse_direction(direction: Any) -> Direction:
    """Return ``direction`` as a Direction or raise InvalidDirection."""
    if isinstance(direction, Direction):
        return direction
    try:
        return Direction(direction)
    except ValueError:
        raise InvalidDirection(direction) from None


def get_transform(anchor: Client, anchor_swipe: Swipe, joiner: Client, joiner_swipe: Swipe) -> Point:
    """
    Position ``joiner`` in the anchor's coordinate frame.

    The two screens meet edge to edge on the side the anchor swiped toward,
    and the swiped points line up along that edge.

    Raises:
        InvalidDirection: If the anchor swipe has an unknown direction
    """
    direction = parse_direction(anchor_swipe.direction)
    origin = anchor.transform
    dx = anchor_swipe.position.x - joiner_swipe.position.x
    dy = anchor_swipe.position.y - joiner_swipe.position.y

    if direction == Direction.LEFT:
        return Point(origin.x - joiner.size.width, origin.y + dy)
    if direction == Direction.RIGHT:
        return Point(origin.x + anchor.size.width, origin.y + dy)
    if direction == Direction.UP:
        return Point(origin.x + dx, origin.y - joiner.size.height)
    return Point(origin.x + dx, origin.y + anchor.size.height)
