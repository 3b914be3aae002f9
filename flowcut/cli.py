"""Command-line interface for flowcut."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from flowcut.algorithms.base import NodeID
from flowcut.algorithms.matching import maximum_matching
from flowcut.algorithms.max_flow import FlowEngine
from flowcut.algorithms.min_cut import cut_capacity
from flowcut.errors import FlowError, UnknownNodeError
from flowcut.graph.residual import ResidualNetwork
from flowcut.io import load_matching_yaml, load_network_yaml
from flowcut.logging import cli_log_level, get_logger, set_global_log_level

logger = get_logger(__name__)


def _resolve_node(network: ResidualNetwork, name: str) -> NodeID:
    """Map a command-line node name onto a declared node by string form."""
    if name in network:
        return name
    for node in network.nodes:
        if str(node) == name:
            return node
    raise UnknownNodeError(name)


def _sorted_edges(edges) -> List[List[Any]]:
    return [[u, v] for u, v in sorted(edges, key=lambda e: (str(e[0]), str(e[1])))]


def _print_json(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _run_maxflow(
    path: Path, source: str, sink: str, search: Optional[str], show_cut: bool
) -> None:
    """Load a network, run max flow, and print the result as JSON."""
    logger.info(f"Loading network: {path}")
    try:
        network = load_network_yaml(path.read_text())
        src = _resolve_node(network, source)
        dst = _resolve_node(network, sink)
        engine = FlowEngine(network, search)
        flow = engine.construct(src, dst)
    except FileNotFoundError:
        logger.error(f"Network file not found: {path}")
        sys.exit(1)
    except (FlowError, ValueError) as e:
        logger.error(f"Failed to compute max flow: {e}")
        sys.exit(1)

    payload: Dict[str, Any] = {
        "source": src,
        "sink": dst,
        "flow": flow,
        "stages": engine.stages,
    }
    if show_cut:
        cut = engine.extract_cut()
        payload["cut"] = _sorted_edges(cut)
        payload["cut_capacity"] = cut_capacity(network, cut)
    _print_json(payload)


def _run_matching(path: Path, search: Optional[str]) -> None:
    """Load a bipartite instance, compute a maximum matching, print JSON."""
    logger.info(f"Loading matching instance: {path}")
    try:
        left, right, pairs = load_matching_yaml(path.read_text())
        matched, size = maximum_matching(left, right, pairs, search=search)
    except FileNotFoundError:
        logger.error(f"Matching file not found: {path}")
        sys.exit(1)
    except (FlowError, ValueError) as e:
        logger.error(f"Failed to compute matching: {e}")
        sys.exit(1)

    _print_json({"size": size, "pairs": _sorted_edges(matched)})


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``flowcut`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="flowcut",
        description="Compute maximum flows, minimum cuts and bipartite matchings.",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress informational logging"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{maxflow,matching}",
        help="Available commands",
    )

    flow_parser = subparsers.add_parser(
        "maxflow", help="Compute the maximum flow between two nodes"
    )
    flow_parser.add_argument("network", type=Path, help="Path to network YAML")
    flow_parser.add_argument("--source", "-s", required=True, help="Source node")
    flow_parser.add_argument("--sink", "-t", required=True, help="Sink node")
    flow_parser.add_argument(
        "--cut",
        action="store_true",
        help="Include the minimum cut edges and their capacity",
    )

    matching_parser = subparsers.add_parser(
        "matching", help="Compute a maximum bipartite matching"
    )
    matching_parser.add_argument(
        "instance", type=Path, help="Path to matching instance YAML"
    )

    for p in (flow_parser, matching_parser):
        p.add_argument(
            "--search",
            default=None,
            help="Augmenting path search: bfs or dfs (default: configured search)",
        )

    effective_args = sys.argv[1:] if argv is None else argv

    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    set_global_log_level(cli_log_level(args.verbose, args.quiet))
    logger.debug("Debug logging enabled")

    if args.command == "maxflow":
        _run_maxflow(args.network, args.source, args.sink, args.search, args.cut)
    elif args.command == "matching":
        _run_matching(args.instance, args.search)


if __name__ == "__main__":
    main()
