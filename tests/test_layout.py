"""Tests for radial layout and label placement."""

import math

import pytest

from service_dependency_graph.graph import (
    DependencyGraph,
    EdgeDirection,
    GraphEdge,
    GraphNode,
    NodeRole,
    build_graph,
)
from service_dependency_graph.layout import (
    Position,
    compute_label_anchors,
    compute_layout,
    consumer_angles,
    label_anchor,
    partition_nodes,
    provider_angles,
)

CENTER = (400.0, 250.0)


def _graph_with_counts(n_providers: int, n_consumers: int, prefix: str = "") -> DependencyGraph:
    nodes = [GraphNode(id=f"{prefix}S", label=f"{prefix}subject", role=NodeRole.SUBJECT)]
    nodes += [
        GraphNode(id=f"{prefix}P{i}", label=f"{prefix}p{i}", role=NodeRole.PROVIDER)
        for i in range(n_providers)
    ]
    nodes += [
        GraphNode(id=f"{prefix}K{j}", label=f"{prefix}k{j}", role=NodeRole.CONSUMER)
        for j in range(n_consumers)
    ]
    return DependencyGraph(nodes=nodes)


def _edge(source: str, target: str, contract_id: str = "C") -> GraphEdge:
    return GraphEdge(
        id=f"{source}-{target}-{contract_id}",
        source=source,
        target=target,
        label="API",
        direction=EdgeDirection.PROVIDES,
        contract_id=contract_id,
    )


class TestAngles:
    """Tests for provider_angles and consumer_angles."""

    @pytest.mark.parametrize("n", [1, 2, 5, 40])
    def test_provider_angles_strictly_inside_left_half(self, n):
        angles = provider_angles(n)
        assert len(angles) == n
        for angle in angles:
            assert math.pi / 2 < angle < 3 * math.pi / 2
        assert all(a < b for a, b in zip(angles, angles[1:]))

    @pytest.mark.parametrize("m", [1, 2, 5, 40])
    def test_consumer_angles_strictly_inside_right_half(self, m):
        angles = consumer_angles(m)
        assert len(angles) == m
        for angle in angles:
            assert -math.pi / 2 < angle < math.pi / 2
        assert all(a < b for a, b in zip(angles, angles[1:]))

    def test_single_provider_points_left(self):
        assert provider_angles(1) == [math.pi]

    def test_empty(self):
        assert provider_angles(0) == []
        assert consumer_angles(0) == []


class TestPartitionNodes:
    """Tests for partition_nodes function."""

    def test_preserves_order(self, mixed_payload):
        graph = build_graph(mixed_payload)
        subject, providers, consumers = partition_nodes(graph.nodes)

        assert subject.id == "S"
        assert [n.id for n in providers] == ["P1", "P2", "P3"]
        assert [n.id for n in consumers] == ["K1", "K2", "B"]

    def test_no_subject(self):
        subject, providers, consumers = partition_nodes([])
        assert subject is None
        assert providers == []
        assert consumers == []


class TestComputeLayout:
    """Tests for compute_layout function."""

    def test_simple_scenario(self, simple_payload):
        """Subject at the centre, provider left, consumer right."""
        positions = compute_layout(build_graph(simple_payload))

        assert positions["S"] == Position(*CENTER)
        assert positions["P"].x < CENTER[0] < positions["K"].x

    def test_single_neighbours_exact_positions(self, simple_payload):
        positions = compute_layout(build_graph(simple_payload))

        # Provider at angle pi, consumer at angle 0
        assert positions["P"].x == pytest.approx(400 - 180 - 50)
        assert positions["P"].y == pytest.approx(250)
        assert positions["K"].x == pytest.approx(400 + 180 + 50)
        assert positions["K"].y == pytest.approx(250)

    def test_empty_graph(self):
        assert compute_layout(DependencyGraph()) == {}

    def test_every_edge_endpoint_positioned(self, mixed_payload):
        graph = build_graph(mixed_payload)
        positions = compute_layout(graph)

        assert set(positions) == graph.node_ids()
        for edge in graph.edges:
            assert edge.source in positions
            assert edge.target in positions

    def test_fan_in_distinct_positions(self, fan_in_payload):
        graph = build_graph(fan_in_payload)
        positions = compute_layout(graph)

        consumer_positions = [positions[n.id] for n in graph.nodes if n.role is NodeRole.CONSUMER]
        assert len(consumer_positions) == 5
        assert len(set(consumer_positions)) == 5
        assert all(p.x > CENTER[0] for p in consumer_positions)

    def test_independent_of_labels_and_ids(self):
        """Same role counts give the same positions slot by slot."""
        first = _graph_with_counts(3, 4)
        second = _graph_with_counts(3, 4, prefix="other-")

        first_positions = [compute_layout(first)[n.id] for n in first.nodes]
        second_positions = [compute_layout(second)[n.id] for n in second.nodes]

        assert first_positions == second_positions

    def test_does_not_mutate_graph(self, mixed_payload):
        graph = build_graph(mixed_payload)
        before = build_graph(mixed_payload)
        compute_layout(graph)
        assert graph == before

    def test_custom_canvas(self, simple_payload):
        positions = compute_layout(
            build_graph(simple_payload),
            center=(0, 0),
            radius=100,
            offset=0,
            compression=0.5,
        )

        assert positions["S"] == Position(0, 0)
        assert positions["P"].x == pytest.approx(-100)
        assert positions["K"].x == pytest.approx(100)

    def test_vertical_compression(self):
        graph = _graph_with_counts(1, 2)
        positions = compute_layout(graph, center=(0, 0), radius=100, offset=0, compression=0.5)

        # Two consumers at -pi/6 and +pi/6
        assert positions["K0"].y == pytest.approx(100 * math.sin(-math.pi / 6) * 0.5)
        assert positions["K1"].y == pytest.approx(100 * math.sin(math.pi / 6) * 0.5)

    def test_without_subject(self):
        graph = DependencyGraph(
            nodes=[GraphNode(id="K", label="k", role=NodeRole.CONSUMER)],
        )
        positions = compute_layout(graph)
        assert set(positions) == {"K"}

    def test_self_loop_does_not_raise(self, self_loop_payload):
        graph = build_graph(self_loop_payload)
        positions = compute_layout(graph)
        assert positions == {"S": Position(*CENTER)}


class TestLabelAnchor:
    """Tests for label_anchor and compute_label_anchors."""

    def test_horizontal_edge(self):
        positions = {"A": Position(0, 0), "B": Position(100, 0)}
        anchor = label_anchor(_edge("A", "B"), positions, distance=10)

        # Normal of (100, 0) is (0, 1)
        assert anchor == Position(50, 10)

    def test_vertical_edge(self):
        positions = {"A": Position(0, 0), "B": Position(0, 100)}
        anchor = label_anchor(_edge("A", "B"), positions, distance=10)

        assert anchor.x == pytest.approx(-10)
        assert anchor.y == pytest.approx(50)

    def test_anchor_off_the_line(self, mixed_payload):
        """Anchors sit exactly `distance` away from the line through the edge."""
        graph = build_graph(mixed_payload)
        positions = compute_layout(graph)
        anchors = compute_label_anchors(graph.edges, positions, distance=12)

        for edge in graph.edges:
            s, t, a = positions[edge.source], positions[edge.target], anchors[edge.id]
            dx, dy = t.x - s.x, t.y - s.y
            cross = abs(dx * (a.y - s.y) - dy * (a.x - s.x)) / math.hypot(dx, dy)
            assert cross == pytest.approx(12)

    def test_missing_endpoint(self):
        """Unpositioned endpoints are an omission, not an error."""
        positions = {"A": Position(0, 0)}
        assert label_anchor(_edge("A", "missing"), positions) is None
        assert compute_label_anchors([_edge("A", "missing")], positions) == {}

    def test_self_loop_anchor(self):
        positions = {"S": Position(400, 250)}
        anchor = label_anchor(_edge("S", "S"), positions, self_loop_offset=30)
        assert anchor == Position(400, 220)

    def test_parallel_edges_share_anchor_geometry(self, parallel_payload):
        graph = build_graph(parallel_payload)
        positions = compute_layout(graph)
        anchors = compute_label_anchors(graph.edges, positions)

        assert set(anchors) == {e.id for e in graph.edges}
