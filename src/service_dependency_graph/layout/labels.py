"""Edge label placement."""

import math

from ..graph import GraphEdge
from .radial import Position

DEFAULT_LABEL_DISTANCE = 10.0
DEFAULT_SELF_LOOP_OFFSET = 30.0


def label_anchor(
    edge: GraphEdge,
    positions: dict[str, Position],
    distance: float = DEFAULT_LABEL_DISTANCE,
    self_loop_offset: float = DEFAULT_SELF_LOOP_OFFSET,
) -> Position | None:
    """Point at which an edge's label should be centred.

    The anchor is the edge midpoint pushed `distance` along the unit normal
    (-dy, dx) / |(dx, dy)|, so labels sit beside the line rather than on it.
    A zero-length edge (self-loop) has no normal; its anchor is placed
    `self_loop_offset` above the node instead.

    Args:
        edge: Edge to annotate.
        positions: Node positions from ``compute_layout``.
        distance: Perpendicular displacement from the midpoint.
        self_loop_offset: Upward displacement used for zero-length edges.

    Returns:
        The anchor, or None if either endpoint has no position.
    """
    source = positions.get(edge.source)
    target = positions.get(edge.target)
    if source is None or target is None:
        return None

    dx = target.x - source.x
    dy = target.y - source.y
    length = math.hypot(dx, dy)

    if length == 0:
        return Position(source.x, source.y - self_loop_offset)

    mid_x = (source.x + target.x) / 2
    mid_y = (source.y + target.y) / 2
    return Position(
        mid_x + (-dy / length) * distance,
        mid_y + (dx / length) * distance,
    )


def compute_label_anchors(
    edges: list[GraphEdge],
    positions: dict[str, Position],
    distance: float = DEFAULT_LABEL_DISTANCE,
    self_loop_offset: float = DEFAULT_SELF_LOOP_OFFSET,
) -> dict[str, Position]:
    """Anchors for every edge whose endpoints are both positioned."""
    anchors: dict[str, Position] = {}
    for edge in edges:
        anchor = label_anchor(edge, positions, distance, self_loop_offset)
        if anchor is not None:
            anchors[edge.id] = anchor
    return anchors
