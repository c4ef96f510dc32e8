"""Radial layout module for visualizing a service's dependency neighbourhood.

The subject sits at the centre, providers on a left arc and consumers on a
right arc, with closed-form angular spacing.
"""

from .labels import compute_label_anchors, label_anchor
from .radial import (
    Position,
    compute_layout,
    consumer_angles,
    partition_nodes,
    provider_angles,
)
from .render import render_graph

__all__ = [
    "Position",
    "partition_nodes",
    "provider_angles",
    "consumer_angles",
    "compute_layout",
    "label_anchor",
    "compute_label_anchors",
    "render_graph",
]
