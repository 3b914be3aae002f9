"""YAML loaders for flow networks and bipartite matching instances.

A network document is a mapping with an optional ``nodes`` list and an
``edges`` list::

    nodes: [1, 2, 3]
    edges:
      - {source: 1, target: 2, capacity: 4}
      - {source: 2, target: 3, capacity: 3}

A matching document lists both groups and the compatibility pairs::

    left: [1, 2]
    right: [5, 6]
    pairs: [[1, 6], [2, 5]]

JSON is a subset of YAML, so JSON documents load the same way.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

import yaml

from flowcut.algorithms.base import Edge, NodeID
from flowcut.graph.residual import ResidualNetwork


def _load_mapping(text: str) -> Dict[str, Any]:
    data = yaml.safe_load(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided YAML must map to a dictionary at top-level.")
    return data


def load_network_yaml(text: str) -> ResidualNetwork:
    """Parse a network document into a ResidualNetwork.

    When ``nodes`` is omitted, nodes are collected from the edges in order
    of first appearance.

    Raises:
        ValueError: If the document shape is invalid.
        InvalidCapacityError: If an edge capacity is negative or not an integer.
        UnknownNodeError: If an edge references a node missing from ``nodes``.
    """
    data = _load_mapping(text)

    edges = data.get("edges", [])
    if not isinstance(edges, list):
        raise ValueError("'edges' must be a list")
    for entry in edges:
        if not isinstance(entry, dict):
            raise ValueError(
                "Each edge definition must be a mapping with 'source', 'target' "
                "and 'capacity'"
            )
        missing = [k for k in ("source", "target", "capacity") if k not in entry]
        if missing:
            raise ValueError(f"Edge definition {entry} is missing {missing}")

    if "nodes" in data:
        nodes = data["nodes"]
        if not isinstance(nodes, list):
            raise ValueError("'nodes' must be a list")
    else:
        nodes = []
        seen = set()
        for entry in edges:
            for node in (entry["source"], entry["target"]):
                if node not in seen:
                    seen.add(node)
                    nodes.append(node)

    network = ResidualNetwork(nodes)
    for entry in edges:
        network.add_edge(entry["source"], entry["target"], entry["capacity"])
    return network


def load_matching_yaml(text: str) -> Tuple[List[NodeID], List[NodeID], List[Edge]]:
    """Parse a matching document into ``(left, right, pairs)``.

    Raises:
        ValueError: If the document shape is invalid.
    """
    data = _load_mapping(text)
    for key in ("left", "right"):
        if not isinstance(data.get(key), list):
            raise ValueError(f"'{key}' must be a list of nodes")

    raw_pairs = data.get("pairs", [])
    if not isinstance(raw_pairs, list):
        raise ValueError("'pairs' must be a list")
    pairs: List[Edge] = []
    for entry in raw_pairs:
        if not isinstance(entry, (list, tuple)) or len(entry) != 2:
            raise ValueError(f"Each pair must have exactly two nodes, got {entry!r}")
        pairs.append((entry[0], entry[1]))
    return data["left"], data["right"], pairs
