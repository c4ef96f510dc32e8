"""Closed-form radial placement of subject, providers and consumers."""

import math
from functools import lru_cache
from typing import NamedTuple

from ..graph import DependencyGraph, GraphNode, NodeRole

DEFAULT_CENTER = (400.0, 250.0)
DEFAULT_RADIUS = 180.0
DEFAULT_OFFSET = 50.0  # Horizontal pull: providers left, consumers right
DEFAULT_COMPRESSION = 0.8  # Vertical squash of both arcs


class Position(NamedTuple):
    """Canvas coordinates (y grows downwards, as in SVG)."""

    x: float
    y: float


def provider_angles(n: int) -> list[float]:
    """Angles for `n` providers, strictly increasing inside (pi/2, 3pi/2)."""
    return [math.pi / 2 + math.pi * (i + 1) / (n + 1) for i in range(n)]


def consumer_angles(m: int) -> list[float]:
    """Angles for `m` consumers, strictly increasing inside (-pi/2, pi/2)."""
    return [-math.pi / 2 + math.pi * (j + 1) / (m + 1) for j in range(m)]


def partition_nodes(
    nodes: list[GraphNode],
) -> tuple[GraphNode | None, list[GraphNode], list[GraphNode]]:
    """Split nodes into (subject, providers, consumers), keeping input order.

    Only the first subject node is honoured; the builder never emits two.
    """
    by_role: dict[NodeRole, list[GraphNode]] = {role: [] for role in NodeRole}
    for node in nodes:
        by_role[node.role].append(node)
    subjects = by_role[NodeRole.SUBJECT]
    return (
        subjects[0] if subjects else None,
        by_role[NodeRole.PROVIDER],
        by_role[NodeRole.CONSUMER],
    )


@lru_cache(maxsize=256)
def slot_positions(
    n_providers: int,
    n_consumers: int,
    has_subject: bool,
    center: tuple[float, float] = DEFAULT_CENTER,
    radius: float = DEFAULT_RADIUS,
    offset: float = DEFAULT_OFFSET,
    compression: float = DEFAULT_COMPRESSION,
) -> tuple[Position | None, tuple[Position, ...], tuple[Position, ...]]:
    """Positions for every slot of a neighbourhood with the given shape.

    Depends only on role counts and canvas parameters, so results are cached
    across graphs with the same shape.

    Returns:
        (subject position or None, provider positions, consumer positions).
    """
    cx, cy = center

    subject = Position(cx, cy) if has_subject else None

    providers = tuple(
        Position(
            cx + radius * math.cos(angle) - offset,
            cy + radius * math.sin(angle) * compression,
        )
        for angle in provider_angles(n_providers)
    )

    consumers = tuple(
        Position(
            cx + radius * math.cos(angle) + offset,
            cy + radius * math.sin(angle) * compression,
        )
        for angle in consumer_angles(n_consumers)
    )

    return subject, providers, consumers


def compute_layout(
    graph: DependencyGraph,
    center: tuple[float, float] = DEFAULT_CENTER,
    radius: float = DEFAULT_RADIUS,
    offset: float = DEFAULT_OFFSET,
    compression: float = DEFAULT_COMPRESSION,
) -> dict[str, Position]:
    """Assign a position to every node of the graph.

    The subject sits at `center`. Providers are spread over the left
    semicircle and consumers over the right one, each shifted outwards by
    `offset` and squashed vertically by `compression`.

    Args:
        graph: Graph produced by ``build_graph``. Not modified.
        center: Canvas centre (cx, cy).
        radius: Arc radius.
        offset: Horizontal bias pulling providers left and consumers right.
        compression: Vertical compression factor, expected in (0, 1].

    Returns:
        Dictionary mapping node id to Position.
    """
    subject, providers, consumers = partition_nodes(graph.nodes)

    subject_pos, provider_pos, consumer_pos = slot_positions(
        len(providers),
        len(consumers),
        subject is not None,
        (float(center[0]), float(center[1])),
        float(radius),
        float(offset),
        float(compression),
    )

    positions: dict[str, Position] = {}
    if subject is not None:
        positions[subject.id] = subject_pos
    for node, pos in zip(providers, provider_pos):
        positions[node.id] = pos
    for node, pos in zip(consumers, consumer_pos):
        positions[node.id] = pos

    return positions
