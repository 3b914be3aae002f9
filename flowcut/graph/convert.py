"""Conversion utilities between ResidualNetwork and NetworkX graphs.

Parallel and antiparallel edges are handled the way capacities accumulate in
`ResidualNetwork.add_edge`: multi-edges sum, and an undirected edge adds the
same capacity in both directions.
"""

from __future__ import annotations

from typing import Any, Optional

import networkx as nx

from flowcut.graph.residual import ResidualNetwork


def from_networkx(
    nx_graph: Any,
    capacity_attr: str = "capacity",
    default_capacity: Optional[int] = None,
) -> ResidualNetwork:
    """Build a ResidualNetwork from any NetworkX graph.

    Args:
        nx_graph: Graph, DiGraph, MultiGraph or MultiDiGraph.
        capacity_attr: Edge attribute holding the integer capacity.
        default_capacity: Capacity for edges lacking ``capacity_attr``.

    Returns:
        A ResidualNetwork with the graph's nodes in NetworkX iteration order.

    Raises:
        ValueError: If an edge has no capacity and no default is given.
    """
    network = ResidualNetwork(nx_graph.nodes)
    directed = nx_graph.is_directed()
    for u, v, data in nx_graph.edges(data=True):
        capacity = data.get(capacity_attr, default_capacity)
        if capacity is None:
            raise ValueError(
                f"Edge ({u!r}, {v!r}) has no '{capacity_attr}' attribute "
                "and no default capacity was given."
            )
        network.add_edge(u, v, capacity)
        if not directed and u != v:
            network.add_edge(v, u, capacity)
    return network


def to_networkx(
    network: ResidualNetwork,
    capacity_attr: str = "capacity",
    flow_attr: str = "flow",
) -> nx.DiGraph:
    """Convert the original edges of a ResidualNetwork to a NetworkX DiGraph.

    Each edge carries its accumulated capacity and the flow currently pushed
    along it. Reverse residual entries are not exported.
    """
    nx_graph = nx.DiGraph()
    nx_graph.add_nodes_from(network.nodes)
    for u, v, capacity in network.edges():
        nx_graph.add_edge(
            u, v, **{capacity_attr: capacity, flow_attr: network.flow(u, v)}
        )
    return nx_graph
