"""Base enums and aliases shared by the flow algorithms."""

from __future__ import annotations

from enum import IntEnum
from typing import List

from flowcut.graph.residual import Edge, NodeID

__all__ = ["Edge", "NodeID", "Path", "PathSearch"]

#: Augmenting path as the ordered list of visited nodes, source first.
Path = List[NodeID]

_SEARCH_ALIASES = {
    "DFS": "DEPTH_FIRST",
    "BFS": "BREADTH_FIRST",
    "SHORTEST_PATH": "BREADTH_FIRST",
}


class PathSearch(IntEnum):
    """Strategies for finding one augmenting path in a residual network."""

    #: Explore neighbors in node order, backtracking on dead ends.
    DEPTH_FIRST = 1
    #: Explore in layers; the returned path has the fewest edges.
    BREADTH_FIRST = 2

    @classmethod
    def from_string(cls, value: str) -> "PathSearch":
        """Parse a string into a PathSearch enum value.

        Accepts member names case-insensitively (``"breadth_first"``), with
        dashes in place of underscores, and the short forms ``"dfs"``,
        ``"bfs"`` and ``"shortest_path"``.

        Args:
            value: String to parse.

        Returns:
            The corresponding PathSearch member.

        Raises:
            ValueError: If the string doesn't match any member or alias.
        """
        key = value.strip().upper().replace("-", "_")
        key = _SEARCH_ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            valid = ", ".join(e.name for e in cls)
            raise ValueError(
                f"Invalid path search '{value}'. Valid values are: {valid}, dfs, bfs"
            ) from None
