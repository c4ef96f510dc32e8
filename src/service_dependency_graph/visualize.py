"""Generate visualization outputs."""

import json
from pathlib import Path

import networkx as nx

from .graph import DependencyGraph, GraphNode, GraphStats, NodeRole
from .layout import Position, render_graph


def service_link(node: GraphNode, base_url: str = "/services") -> str | None:
    """Navigation target for a clicked node.

    Only neighbours with a known slug are navigable; the subject is the
    page the user is already on.
    """
    if node.role is NodeRole.SUBJECT or not node.slug:
        return None
    return f"{base_url.rstrip('/')}/{node.slug}"


def to_networkx(graph: DependencyGraph) -> nx.MultiDiGraph:
    """Convert to a networkx multigraph, keeping parallel contract edges.

    Edges are keyed by edge id.
    """
    G = nx.MultiDiGraph()
    for node in graph.nodes:
        G.add_node(
            node.id,
            label=node.label,
            role=node.role.value,
            slug=node.slug,
            service_kind=node.service_kind,
        )
    for edge in graph.edges:
        G.add_edge(
            edge.source,
            edge.target,
            key=edge.id,
            label=edge.label,
            direction=edge.direction.value,
            contract_id=edge.contract_id,
            operation_name=edge.operation_name,
        )
    return G


def contracts_per_neighbour(graph: DependencyGraph) -> dict[str, int]:
    """Number of contracts linking the subject to each other node."""
    G = to_networkx(graph)
    subject = graph.subject
    counts: dict[str, int] = {}
    for node in graph.nodes:
        if subject is not None and node.id == subject.id:
            continue
        counts[node.id] = G.in_degree(node.id) + G.out_degree(node.id)
    return counts


def generate_html(
    graph: DependencyGraph,
    positions: dict[str, Position],
    anchors: dict[str, Position],
    output_file: Path,
    base_url: str = "/services",
    stats: GraphStats | None = None,
) -> None:
    """Generate interactive HTML visualization using pyvis.

    Args:
        graph: The dependency graph to visualize.
        positions: Node positions.
        anchors: Edge label anchors.
        output_file: Path to write the HTML file.
        base_url: Prefix for node navigation links.
        stats: Optional statistics; a subject with no dependencies gets
            the no-dependencies banner.
    """
    links = {}
    for node in graph.nodes:
        link = service_link(node, base_url)
        if link:
            links[node.id] = link

    render_graph(
        graph=graph,
        positions=positions,
        anchors=anchors,
        output_path=output_file,
        links=links,
        has_dependencies=stats.has_dependencies if stats is not None else None,
    )


def graph_to_dict(
    graph: DependencyGraph,
    positions: dict[str, Position],
    anchors: dict[str, Position],
    stats: GraphStats | None = None,
) -> dict:
    """JSON-ready view of a positioned graph."""
    nodes = []
    for node in graph.nodes:
        pos = positions.get(node.id)
        nodes.append(
            {
                "id": node.id,
                "label": node.label,
                "role": node.role.value,
                "slug": node.slug,
                "serviceKind": node.service_kind,
                "position": {"x": pos.x, "y": pos.y} if pos else None,
            }
        )

    edges = []
    for edge in graph.edges:
        anchor = anchors.get(edge.id)
        edges.append(
            {
                "id": edge.id,
                "source": edge.source,
                "target": edge.target,
                "label": edge.label,
                "direction": edge.direction.value,
                "contractId": edge.contract_id,
                "operationName": edge.operation_name,
                "labelAnchor": {"x": anchor.x, "y": anchor.y} if anchor else None,
            }
        )

    result = {"nodes": nodes, "edges": edges, "warnings": list(graph.warnings)}
    if stats is not None:
        result["stats"] = {
            "providesCount": stats.provides_count,
            "consumesCount": stats.consumes_count,
            "totalNodes": stats.total_nodes,
            "totalEdges": stats.total_edges,
            "connectedServices": stats.connected_services,
        }
    return result


def generate_json(
    graph: DependencyGraph,
    positions: dict[str, Position],
    anchors: dict[str, Position],
    output_file: Path,
    stats: GraphStats | None = None,
) -> None:
    """Write the positioned graph as JSON.

    Args:
        graph: The dependency graph.
        positions: Node positions.
        anchors: Edge label anchors.
        output_file: Path to write the JSON file.
        stats: Optional statistics to include.
    """
    with open(output_file, "w") as f:
        json.dump(graph_to_dict(graph, positions, anchors, stats), f, indent=2)


def generate_summary(graph: DependencyGraph, stats: GraphStats, output_file: Path) -> None:
    """Generate human-readable summary file.

    Args:
        graph: The dependency graph.
        stats: Statistics computed from the payload and graph.
        output_file: Path to write the summary file.
    """
    subject = graph.subject

    with open(output_file, "w") as f:
        f.write("=" * 60 + "\n")
        f.write("Service Dependency Summary\n")
        f.write("=" * 60 + "\n\n")

        f.write(f"Service: {subject.label if subject else '(not found)'}\n\n")

        if not stats.has_dependencies:
            f.write("No dependencies found.\n")
            f.write("This service has no declared contracts (PROVIDES or CONSUMES).\n")
        else:
            f.write(f"Provides:           {stats.provides_count}\n")
            f.write(f"Consumes:           {stats.consumes_count}\n")
            f.write(f"Connected services: {stats.connected_services}\n")
            f.write(f"Total contracts:    {stats.total_edges}\n")

            counts = contracts_per_neighbour(graph)
            for role, title in ((NodeRole.PROVIDER, "Providers"), (NodeRole.CONSUMER, "Consumers")):
                members = [n for n in graph.nodes if n.role is role]
                if not members:
                    continue
                f.write(f"\n{title}:\n")
                f.write("-" * 40 + "\n")
                for node in members:
                    kind = f" [{node.service_kind}]" if node.service_kind else ""
                    f.write(f"  {counts.get(node.id, 0):3d}x  {node.label}{kind}\n")

        if graph.warnings:
            f.write("\nWarnings:\n")
            f.write("-" * 40 + "\n")
            for warning in graph.warnings:
                f.write(f"  {warning}\n")
