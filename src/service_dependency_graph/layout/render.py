"""Pyvis rendering with role and direction styling."""

import html
import json
from pathlib import Path

from ..graph import DependencyGraph, EdgeDirection, GraphNode, NodeRole
from .radial import Position

MAX_LABEL_LENGTH = 20

# Background / border / text per role
NODE_COLORS: dict[NodeRole, dict[str, str]] = {
    NodeRole.SUBJECT: {"bg": "#1976d2", "border": "#1565c0", "text": "#ffffff"},
    NodeRole.PROVIDER: {"bg": "#2e7d32", "border": "#1b5e20", "text": "#ffffff"},
    NodeRole.CONSUMER: {"bg": "#ed6c02", "border": "#e65100", "text": "#ffffff"},
}

EDGE_COLORS: dict[EdgeDirection, str] = {
    EdgeDirection.PROVIDES: "#2e7d32",
    EdgeDirection.CONSUMES: "#ed6c02",
}

ROLE_LEGEND: dict[NodeRole, str] = {
    NodeRole.SUBJECT: "Current Service",
    NodeRole.PROVIDER: "Providers (CONSUMES from)",
    NodeRole.CONSUMER: "Consumers (PROVIDES to)",
}

EMPTY_MESSAGE = "No dependency data available"
NO_DEPENDENCIES_MESSAGE = "No Dependencies Found"


def truncate_label(label: str, max_length: int = MAX_LABEL_LENGTH) -> str:
    """Shorten long edge labels to fit between nodes."""
    if len(label) > max_length:
        return label[: max_length - 3] + "..."
    return label


def _node_tooltip(node: GraphNode, link: str | None) -> str:
    lines = [node.label, f"id: {node.id}", f"role: {node.role.value}"]
    if node.service_kind:
        lines.append(f"kind: {node.service_kind}")
    if link:
        lines.append(f"open: {link}")
    return "\n".join(lines)


def render_graph(
    graph: DependencyGraph,
    positions: dict[str, Position],
    anchors: dict[str, Position],
    output_path: Path,
    links: dict[str, str] | None = None,
    has_dependencies: bool | None = None,
) -> None:
    """Render graph with pyvis.

    Nodes and edge labels are pinned to the precomputed layout; physics is
    disabled. Edge labels are drawn as text-only nodes at their anchors so
    they stay beside the line. Nodes or edges without a position are left
    out.

    Args:
        graph: Graph to draw.
        positions: Node positions from ``compute_layout``.
        anchors: Edge label anchors from ``compute_label_anchors``.
        output_path: Path to write the HTML file.
        links: Optional node id -> navigation URL.
        has_dependencies: False shows the no-dependencies banner even
            though the subject node is drawn.
    """
    from pyvis.network import Network

    links = links or {}

    net = Network(
        height="100vh",
        width="100%",
        bgcolor="#ffffff",
        directed=True,
    )
    net.toggle_physics(False)

    for node in graph.nodes:
        pos = positions.get(node.id)
        if pos is None:
            continue

        colors = NODE_COLORS[node.role]
        net.add_node(
            node.id,
            label=node.label,
            title=_node_tooltip(node, links.get(node.id)),
            x=pos.x,
            y=pos.y,
            fixed=True,
            shape="box",
            color={"background": colors["bg"], "border": colors["border"]},
            font={
                "color": colors["text"],
                "size": 14 if node.role is NodeRole.SUBJECT else 12,
            },
            borderWidth=2,
            group=node.role.value,
        )

    # vis.js rejects duplicate ids; repeated listings get a numbered suffix
    seen: dict[str, int] = {}
    for edge in graph.edges:
        if edge.source not in positions or edge.target not in positions:
            continue

        count = seen.get(edge.id, 0)
        seen[edge.id] = count + 1
        vis_id = edge.id if count == 0 else f"{edge.id}#{count}"

        color = EDGE_COLORS[edge.direction]
        net.add_edge(
            edge.source,
            edge.target,
            id=vis_id,
            color=color,
            width=2,
            title=edge.operation_name or edge.label,
        )

        anchor = anchors.get(edge.id)
        if anchor is None:
            continue
        net.add_node(
            f"label:{vis_id}",
            label=truncate_label(edge.label),
            title=edge.operation_name or edge.label,
            x=anchor.x,
            y=anchor.y,
            fixed=True,
            shape="text",
            font={"size": 10, "color": "#666666"},
            physics=False,
        )

    net.set_options("""
    {
        "physics": {"enabled": false},
        "interaction": {
            "navigationButtons": true,
            "zoomView": true,
            "dragView": true,
            "hover": true,
            "tooltipDelay": 100
        },
        "edges": {
            "arrows": {"to": {"enabled": true, "scaleFactor": 0.6}},
            "smooth": false
        },
        "nodes": {
            "borderWidthSelected": 3
        }
    }
    """)

    net.save_graph(str(output_path))

    if not graph.nodes:
        banner = EMPTY_MESSAGE
    elif has_dependencies is False:
        banner = NO_DEPENDENCIES_MESSAGE
    else:
        banner = None
    _inject_legend_script(output_path, links=links, banner=banner)


def _inject_legend_script(output_file: Path, links: dict[str, str], banner: str | None) -> None:
    """Add a role legend, an empty-state banner and click-to-navigate.

    Args:
        output_file: Path to the HTML file to modify.
        links: Node id -> navigation URL; nodes without an entry are inert.
        banner: Empty-state message, or None to show none.
    """
    with open(output_file) as f:
        page = f.read()

    legend_items = "".join(
        f'<div><span class="legend-color" style="background:{NODE_COLORS[role]["bg"]};"></span> '
        f"{html.escape(text)}</div>"
        for role, text in ROLE_LEGEND.items()
    )
    empty_banner = (
        f'<div id="emptyState">{html.escape(banner)}</div>' if banner else ""
    )

    custom_script = f"""
    <style>
    html, body {{ margin: 0; padding: 0; overflow: hidden; }}
    #legend {{ position:fixed;top:10px;right:10px;padding:10px;background:white;border:1px solid #ccc;border-radius:5px;font-family:sans-serif;font-size:11px;z-index:1000; }}
    #emptyState {{ position:fixed;top:45%;width:100%;text-align:center;font-family:sans-serif;color:#777;z-index:1000; }}
    .legend-color {{ display:inline-block;width:12px;height:12px;margin-right:5px;vertical-align:middle;border-radius:2px; }}
    </style>
    <div id="legend">{legend_items}</div>
    {empty_banner}
    <script type="text/javascript">
    var nodeLinks = {json.dumps(links)};
    document.addEventListener('DOMContentLoaded', function() {{
        setTimeout(function() {{
            if (typeof network === 'undefined') return;
            network.on('selectNode', function(params) {{
                var url = nodeLinks[params.nodes[0]];
                if (url) {{
                    window.location.href = url;
                }}
            }});
        }}, 500);
    }});
    </script>
    """

    page = page.replace("</body>", custom_script + "</body>")

    with open(output_file, "w") as f:
        f.write(page)
