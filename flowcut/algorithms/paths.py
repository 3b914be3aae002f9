"""Augmenting path search over a residual network.

Both searches follow only entries with strictly positive residual capacity,
visit each node at most once per call, and return the path as a list of
nodes from source to sink, or None when the sink is unreachable.
"""

from __future__ import annotations

from collections import deque
from typing import Callable, Dict, Optional, Union

from flowcut.algorithms.base import NodeID, Path, PathSearch
from flowcut.graph.residual import ResidualNetwork

PathFinder = Callable[[ResidualNetwork, NodeID, NodeID], Optional[Path]]


def dfs_augmenting_path(
    network: ResidualNetwork, source: NodeID, sink: NodeID
) -> Optional[Path]:
    """Depth-first search for an augmenting path.

    Neighbors are tried in node-iteration order. An explicit stack of
    neighbor iterators replaces recursion, so deep graphs do not grow the
    call stack.
    """
    if source == sink:
        return None

    visited = {source}
    stack = [(source, iter(network.neighbors(source)))]
    while stack:
        node, nbrs = stack[-1]
        for nbr in nbrs:
            if nbr in visited or network.residual(node, nbr) <= 0:
                continue
            visited.add(nbr)
            if nbr == sink:
                return [n for n, _ in stack] + [sink]
            stack.append((nbr, iter(network.neighbors(nbr))))
            break
        else:
            # Dead end; backtrack
            stack.pop()
    return None


def bfs_augmenting_path(
    network: ResidualNetwork, source: NodeID, sink: NodeID
) -> Optional[Path]:
    """Breadth-first search for a shortest (fewest edges) augmenting path."""
    if source == sink:
        return None

    pred: Dict[NodeID, NodeID] = {}
    visited = {source}
    queue = deque([source])
    while queue:
        node = queue.popleft()
        for nbr in network.neighbors(node):
            if nbr in visited or network.residual(node, nbr) <= 0:
                continue
            visited.add(nbr)
            pred[nbr] = node
            if nbr == sink:
                path = [sink]
                while path[-1] != source:
                    path.append(pred[path[-1]])
                path.reverse()
                return path
            queue.append(nbr)
    return None


def path_finder_fabric(
    search: Union[PathSearch, str, PathFinder],
) -> PathFinder:
    """Fabric producing the augmenting path function for a search strategy.

    Args:
        search: PathSearch member, its string form (see
            ``PathSearch.from_string``), or a user-defined callable with the
            signature ``(network, source, sink) -> Optional[Path]``.

    Returns:
        The path finding callable.

    Raises:
        ValueError: If ``search`` names no known strategy.
    """
    if isinstance(search, str):
        search = PathSearch.from_string(search)
    if isinstance(search, PathSearch):
        if search == PathSearch.DEPTH_FIRST:
            return dfs_augmenting_path
        return bfs_augmenting_path
    if callable(search):
        return search
    raise ValueError(f"Unknown path search: {search!r}")
