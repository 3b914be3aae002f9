"""Minimum-cut extraction from a residual network after max flow.

Once no augmenting path remains, the nodes reachable from the source over
positive residual entries form the source side of a minimum cut. The
original edges leaving that side are saturated and their capacities sum to
the maximum flow value.
"""

from __future__ import annotations

from typing import Iterable, Set

from flowcut.algorithms.base import Edge, NodeID
from flowcut.errors import UnknownNodeError
from flowcut.graph.residual import ResidualNetwork


def reachable_nodes(network: ResidualNetwork, source: NodeID) -> Set[NodeID]:
    """Return the nodes reachable from ``source`` over positive residual entries.

    Raises:
        UnknownNodeError: If ``source`` is not in the network.
    """
    if source not in network:
        raise UnknownNodeError(source)

    reachable = {source}
    stack = [source]
    while stack:
        node = stack.pop()
        for nbr in network.neighbors(node):
            if nbr not in reachable and network.residual(node, nbr) > 0:
                reachable.add(nbr)
                stack.append(nbr)
    return reachable


def extract_cut(network: ResidualNetwork, source: NodeID) -> Set[Edge]:
    """Return the original edges crossing from the source side to the rest.

    Only meaningful once a flow construction from ``source`` has finished;
    on a partially augmented network the result is some cut, not a minimum
    one.

    Args:
        network: Residual network in its final state.
        source: Source node of the completed construction.

    Returns:
        Set of ``(u, v)`` edges with positive original capacity whose tail is
        reachable and whose head is not.
    """
    reachable = reachable_nodes(network, source)
    return {
        (u, v)
        for u, v, cap in network.edges()
        if cap > 0 and u in reachable and v not in reachable
    }


def cut_capacity(network: ResidualNetwork, cut: Iterable[Edge]) -> int:
    """Return the total original capacity of the edges in ``cut``."""
    return sum(network.capacity(u, v) for u, v in cut)
