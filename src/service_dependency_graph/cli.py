"""CLI for service-dependency-graph."""

import argparse
import json
import sys
from pathlib import Path

from .payload import PayloadError, load_payload
from .snapshot import GraphSnapshot, compute_snapshot
from .visualize import generate_html, generate_json, generate_summary, graph_to_dict

# config key -> argparse dest
LAYOUT_CONFIG_KEYS = {
    "center-x": "center_x",
    "center-y": "center_y",
    "radius": "radius",
    "offset": "offset",
    "compression": "compression",
    "label-distance": "label_distance",
}


def load_config(config_path: Path) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to the YAML config file.

    Returns:
        Dictionary of configuration values.
    """
    try:
        import yaml

        with open(config_path) as f:
            return yaml.safe_load(f) or {}
    except ImportError as err:
        raise ImportError("PyYAML required for config files: pip install pyyaml") from err


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments shared between subcommands."""
    parser.add_argument("--payload", type=Path, help="Relationship payload JSON file")
    parser.add_argument("--config", type=Path, help="Path to YAML config file")
    parser.add_argument("--center-x", type=float, help="Canvas centre x (default: 400)")
    parser.add_argument("--center-y", type=float, help="Canvas centre y (default: 250)")
    parser.add_argument("--radius", type=float, help="Arc radius (default: 180)")
    parser.add_argument(
        "--offset",
        type=float,
        help="Horizontal pull of providers left and consumers right (default: 50)",
    )
    parser.add_argument(
        "--compression",
        type=float,
        help="Vertical compression of the arcs (default: 0.8)",
    )
    parser.add_argument(
        "--label-distance",
        type=float,
        help="Distance of edge labels from their edge (default: 10)",
    )


def config_string(
    config: dict, key: str, parser: argparse.ArgumentParser, default: str | None = None
) -> str:
    """Read a string-valued config key, rejecting other types."""
    value = config.get(key, default)
    if not isinstance(value, str):
        parser.error(f"config value for {key} must be a string, got {value!r}")
    return value


def resolve_common_args(args: argparse.Namespace, parser: argparse.ArgumentParser) -> dict:
    """Resolve common arguments: load config, validate, and resolve paths.

    Returns:
        The loaded config (empty if none) for subcommand-specific keys.
    """
    config: dict = {}
    if args.config:
        config = load_config(args.config)
        if not isinstance(config, dict):
            parser.error(f"config file {args.config} must contain a mapping")
        if not args.payload and "payload" in config:
            args.payload = Path(config_string(config, "payload", parser))
        for key, dest in LAYOUT_CONFIG_KEYS.items():
            if getattr(args, dest) is None and key in config:
                try:
                    setattr(args, dest, float(config[key]))
                except (TypeError, ValueError):
                    parser.error(
                        f"config value for {key} must be a number, got {config[key]!r}"
                    )

    if not args.payload:
        parser.error("--payload is required")

    args.payload = args.payload.resolve()

    if args.compression is not None and not 0 < args.compression <= 1:
        parser.error("--compression must be in (0, 1]")

    return config


def layout_options(args: argparse.Namespace) -> dict:
    """Keyword arguments for compute_layout from parsed args."""
    options: dict = {}
    if args.center_x is not None or args.center_y is not None:
        options["center"] = (
            args.center_x if args.center_x is not None else 400.0,
            args.center_y if args.center_y is not None else 250.0,
        )
    for name in ("radius", "offset", "compression"):
        value = getattr(args, name)
        if value is not None:
            options[name] = value
    return options


def label_options(args: argparse.Namespace) -> dict:
    """Keyword arguments for compute_label_anchors from parsed args."""
    if args.label_distance is None:
        return {}
    return {"distance": args.label_distance}


def build_snapshot(args: argparse.Namespace, to_stderr: bool = False) -> GraphSnapshot | None:
    """Load the payload and compute graph, layout and label anchors.

    Returns:
        The snapshot, or None if the payload could not be loaded.
    """
    out = sys.stderr if to_stderr else sys.stdout
    print(f"Loading payload from {args.payload}...", file=out)
    try:
        payload = load_payload(args.payload)
    except OSError as err:
        print(f"ERROR: Cannot read payload: {err}", file=sys.stderr)
        return None
    except (json.JSONDecodeError, PayloadError) as err:
        print(f"ERROR: Invalid payload: {err}", file=sys.stderr)
        return None

    snapshot = compute_snapshot(
        payload,
        layout_options=layout_options(args),
        label_options=label_options(args),
    )

    for warning in snapshot.graph.warnings:
        print(f"Warning: {warning}", file=sys.stderr)

    print(
        f"Found {snapshot.stats.total_nodes} services and {snapshot.stats.total_edges} contracts",
        file=out,
    )
    return snapshot


def cmd_analyze(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Build the graph and write JSON, HTML and summary outputs."""
    config = resolve_common_args(args, parser)
    if args.output is None:
        args.output = Path(config_string(config, "output", parser, "results"))
    if args.base_url is None:
        args.base_url = config_string(config, "base-url", parser, "/services")
    args.output = args.output.resolve()
    args.output.mkdir(parents=True, exist_ok=True)

    snapshot = build_snapshot(args)
    if snapshot is None:
        return 1

    generate_json(
        snapshot.graph,
        snapshot.positions,
        snapshot.anchors,
        args.output / "dependency_graph.json",
        stats=snapshot.stats,
    )
    print("Wrote dependency_graph.json")

    generate_html(
        snapshot.graph,
        snapshot.positions,
        snapshot.anchors,
        args.output / "dependency_graph.html",
        base_url=args.base_url,
        stats=snapshot.stats,
    )
    print("Wrote dependency_graph.html")

    generate_summary(snapshot.graph, snapshot.stats, args.output / "summary.txt")
    print("Wrote summary.txt")

    stats = snapshot.stats
    if stats.has_dependencies:
        print("\n=== DEPENDENCIES ===")
        print(f"  Provides:           {stats.provides_count}")
        print(f"  Consumes:           {stats.consumes_count}")
        print(f"  Connected services: {stats.connected_services}")
        print(f"  Total contracts:    {stats.total_edges}")
    else:
        print("\nNo dependencies found.")

    print(f"\nAll outputs written to {args.output}/")
    return 0


def cmd_layout(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Print (or write) the positioned graph as JSON."""
    resolve_common_args(args, parser)

    # Keep stdout clean for the JSON document
    snapshot = build_snapshot(args, to_stderr=args.output is None)
    if snapshot is None:
        return 1

    data = graph_to_dict(snapshot.graph, snapshot.positions, snapshot.anchors, snapshot.stats)
    if args.output:
        with open(args.output, "w") as f:
            json.dump(data, f, indent=2)
        print(f"Wrote {args.output}")
    else:
        print(json.dumps(data, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for service-dependency-graph CLI."""
    parser = argparse.ArgumentParser(
        description="Lay out and render a service's contract dependency graph"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Write JSON, interactive HTML and a text summary for a payload",
    )
    add_common_args(analyze_parser)
    analyze_parser.add_argument(
        "--output",
        type=Path,
        help="Output directory (default: results)",
    )
    analyze_parser.add_argument(
        "--base-url",
        type=str,
        help="Link prefix for navigable services (default: /services)",
    )

    layout_parser = subparsers.add_parser(
        "layout",
        help="Print node positions and edge label anchors as JSON",
    )
    add_common_args(layout_parser)
    layout_parser.add_argument(
        "--output",
        type=Path,
        help="Write JSON to this file instead of stdout",
    )

    args = parser.parse_args(argv)

    if args.command == "analyze":
        return cmd_analyze(args, analyze_parser)
    elif args.command == "layout":
        return cmd_layout(args, layout_parser)
    else:
        # No subcommand provided - show help
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
