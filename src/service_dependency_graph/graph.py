"""Build a deduplicated dependency graph from a relationship payload."""

from dataclasses import dataclass, field
from enum import Enum

from .payload import ContractRef, RelationshipPayload, ServiceRef

UNKNOWN_LABEL = "Unknown"
DEFAULT_EDGE_LABEL = "API"


class NodeRole(Enum):
    """Structural role of a node relative to the subject service."""

    SUBJECT = "subject"
    PROVIDER = "provider"  # supplies a contract the subject consumes
    CONSUMER = "consumer"  # consumes a contract the subject provides


class EdgeDirection(Enum):
    """Which side of the subject an edge describes."""

    PROVIDES = "provides"  # subject -> consumer
    CONSUMES = "consumes"  # provider -> subject


@dataclass(frozen=True)
class GraphNode:
    """A service in the rendered neighbourhood."""

    id: str
    label: str
    role: NodeRole
    slug: str | None = None
    service_kind: str | None = None


@dataclass(frozen=True)
class GraphEdge:
    """One contract between two services."""

    id: str
    source: str
    target: str
    label: str
    direction: EdgeDirection
    contract_id: str
    operation_name: str | None = None


@dataclass
class DependencyGraph:
    """Nodes and edges of one service's dependency neighbourhood."""

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)  # Skipped malformed entries

    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    def get_node(self, node_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    @property
    def subject(self) -> GraphNode | None:
        for node in self.nodes:
            if node.role is NodeRole.SUBJECT:
                return node
        return None


@dataclass
class GraphStats:
    """Headline numbers shown next to the graph."""

    provides_count: int = 0
    consumes_count: int = 0
    total_nodes: int = 0
    total_edges: int = 0
    connected_services: int = 0

    @property
    def has_dependencies(self) -> bool:
        return self.provides_count > 0 or self.consumes_count > 0


def node_label(service: ServiceRef) -> str:
    """Display label: display name, then slug, then "Unknown"."""
    return service.display_name or service.slug or UNKNOWN_LABEL


def edge_id(source: str, target: str, contract_id: str) -> str:
    """Deterministic edge identity."""
    return f"{source}-{target}-{contract_id}"


def _make_node(service: ServiceRef, role: NodeRole) -> GraphNode:
    return GraphNode(
        id=service.id,
        label=node_label(service),
        role=role,
        slug=service.slug or None,
        service_kind=service.service_kind or None,
    )


def _make_edge(
    source: str,
    target: str,
    contract: ContractRef,
    direction: EdgeDirection,
) -> GraphEdge:
    return GraphEdge(
        id=edge_id(source, target, contract.id),
        source=source,
        target=target,
        label=contract.operation_name or DEFAULT_EDGE_LABEL,
        direction=direction,
        contract_id=contract.id,
        operation_name=contract.operation_name or None,
    )


def build_graph(payload: RelationshipPayload | None) -> DependencyGraph:
    """Deduplicate participants into nodes and emit one edge per contract.

    Nodes are deduplicated by service id; edges are not. A service consuming
    two contracts of the subject becomes one node with two parallel edges.

    When the payload has no subject, participants still become nodes but no
    edges are emitted, since every edge has the subject as one endpoint.

    Malformed entries (a contract without an id, a participant without an id)
    are skipped and reported in ``DependencyGraph.warnings``.

    Args:
        payload: Parsed relationship payload, or None.

    Returns:
        DependencyGraph with nodes in payload traversal order.
    """
    graph = DependencyGraph()
    if payload is None:
        return graph

    seen: set[str] = set()

    subject_id: str | None = None
    if payload.subject is not None:
        if payload.subject.id:
            subject_id = payload.subject.id
            graph.nodes.append(_make_node(payload.subject, NodeRole.SUBJECT))
            seen.add(subject_id)
        else:
            graph.warnings.append("Subject service has no id; treating it as absent")

    skipped_for_subject = 0

    def visit(
        contract: ContractRef | None,
        participants: list[ServiceRef],
        role: NodeRole,
        direction: EdgeDirection,
        where: str,
    ) -> None:
        nonlocal skipped_for_subject

        if contract is None or not contract.id:
            graph.warnings.append(f"Skipped {where}: contract has no id")
            return

        for index, service in enumerate(participants):
            if not service.id:
                graph.warnings.append(
                    f"Skipped {role.value} #{index} of {where} "
                    f"(contract {contract.id}): service has no id"
                )
                continue

            if service.id not in seen:
                graph.nodes.append(_make_node(service, role))
                seen.add(service.id)

            if subject_id is None:
                skipped_for_subject += 1
                continue

            if direction is EdgeDirection.PROVIDES:
                graph.edges.append(_make_edge(subject_id, service.id, contract, direction))
            else:
                graph.edges.append(_make_edge(service.id, subject_id, contract, direction))

    for i, entry in enumerate(payload.provides):
        visit(
            entry.contract,
            entry.consumers,
            NodeRole.CONSUMER,
            EdgeDirection.PROVIDES,
            f"provides[{i}]",
        )

    for i, entry in enumerate(payload.consumes):
        visit(
            entry.contract,
            entry.providers,
            NodeRole.PROVIDER,
            EdgeDirection.CONSUMES,
            f"consumes[{i}]",
        )

    if skipped_for_subject:
        graph.warnings.append(
            f"No subject service; skipped {skipped_for_subject} edge(s) that would reference it"
        )

    return graph


def compute_stats(payload: RelationshipPayload | None, graph: DependencyGraph) -> GraphStats:
    """Summarize a payload and the graph built from it."""
    total_nodes = len(graph.nodes)
    has_subject = graph.subject is not None
    return GraphStats(
        provides_count=len(payload.provides) if payload else 0,
        consumes_count=len(payload.consumes) if payload else 0,
        total_nodes=total_nodes,
        total_edges=len(graph.edges),
        connected_services=max(0, total_nodes - 1) if has_subject else total_nodes,
    )
