"""Maximum bipartite matching by reduction to maximum flow.

The derived network has a synthetic source feeding every node of the first
group with capacity 1, every node of the second group draining into a
synthetic sink with capacity 1, and each compatibility pair directed from
the first group to the second with capacity 1. Integral flow in this network
corresponds one-to-one with matchings.

Unit capacities on the source edges mean every first-group node carries at
most one unit of flow, so at most one of its outgoing pair edges can end up
saturated. The same argument on the sink edges holds for the second group.
Matching reconstruction relies on this and checks it.
"""

from __future__ import annotations

from typing import Iterable, List, Set, Tuple, Union

from flowcut.algorithms.base import Edge, NodeID, PathSearch
from flowcut.algorithms.max_flow import FlowEngine
from flowcut.algorithms.paths import PathFinder
from flowcut.errors import ConservationError, UnknownNodeError
from flowcut.graph.residual import ResidualNetwork
from flowcut.logging import get_logger

logger = get_logger(__name__)


class _Terminal:
    """Synthetic source or sink; compares equal only to itself."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<{self.name}>"


def _unique(nodes: Iterable[NodeID]) -> List[NodeID]:
    seen = set()
    ordered = []
    for node in nodes:
        if node not in seen:
            seen.add(node)
            ordered.append(node)
    return ordered


def build_matching_network(
    group_a: Iterable[NodeID],
    group_b: Iterable[NodeID],
    compatible_pairs: Iterable[Tuple[NodeID, NodeID]],
) -> Tuple[ResidualNetwork, NodeID, NodeID, List[Edge]]:
    """Build the unit-capacity flow network for a bipartite instance.

    Pairs may list either endpoint first; they are oriented from
    ``group_a`` to ``group_b`` and deduplicated.

    Args:
        group_a: First node group.
        group_b: Second node group, disjoint from the first.
        compatible_pairs: Undirected compatibility relation between groups.

    Returns:
        Tuple of ``(network, source, sink, pairs)`` where ``pairs`` are the
        oriented, deduplicated compatibility edges in input order.

    Raises:
        ValueError: If the groups overlap.
        UnknownNodeError: If a pair does not join one node of each group.
    """
    left = _unique(group_a)
    right = _unique(group_b)
    left_set, right_set = set(left), set(right)
    overlap = left_set & right_set
    if overlap:
        raise ValueError(f"Bipartite groups must be disjoint; shared nodes: {overlap}")

    pairs: List[Edge] = []
    seen: Set[Edge] = set()
    for x, y in compatible_pairs:
        if x in left_set and y in right_set:
            pair = (x, y)
        elif y in left_set and x in right_set:
            pair = (y, x)
        else:
            unknown = x if x not in left_set and x not in right_set else y
            raise UnknownNodeError(unknown)
        if pair not in seen:
            seen.add(pair)
            pairs.append(pair)

    source = _Terminal("source")
    sink = _Terminal("sink")
    network = ResidualNetwork([source, *left, *right, sink])
    for a in left:
        network.add_edge(source, a, 1)
    for a, b in pairs:
        network.add_edge(a, b, 1)
    for b in right:
        network.add_edge(b, sink, 1)
    return network, source, sink, pairs


def maximum_matching(
    group_a: Iterable[NodeID],
    group_b: Iterable[NodeID],
    compatible_pairs: Iterable[Tuple[NodeID, NodeID]],
    *,
    search: Union[PathSearch, str, PathFinder, None] = None,
) -> Tuple[Set[Edge], int]:
    """Compute a maximum matching of a bipartite compatibility relation.

    Args:
        group_a: First node group.
        group_b: Second node group, disjoint from the first.
        compatible_pairs: Iterable of ``(a, b)`` pairs; orientation is free.
        search: Path search strategy for the underlying flow engine.

    Returns:
        Tuple of ``(pairs, size)``: matched pairs oriented ``(a, b)`` with
        ``a`` from ``group_a``, and the matching size.

    Examples:
        >>> pairs, size = maximum_matching([1, 2], ["x", "y"], [(1, "x"), (2, "x")])
        >>> size
        1
    """
    network, source, sink, pairs = build_matching_network(
        group_a, group_b, compatible_pairs
    )
    engine = FlowEngine(network, search)
    size = engine.construct(source, sink)

    matched = {(a, b) for a, b in pairs if network.residual(a, b) == 0}
    used_a = {a for a, _ in matched}
    used_b = {b for _, b in matched}
    if len(matched) != size or len(used_a) != size or len(used_b) != size:
        raise ConservationError(
            f"Matching reconstruction found {len(matched)} pairs for flow {size}."
        )

    logger.debug(
        "Maximum matching of %d pairs over %d compatibility edges in %d stages",
        size,
        len(pairs),
        engine.stages,
    )
    return matched, size
