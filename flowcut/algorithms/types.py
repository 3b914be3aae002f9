"""Types and data structures for flow analytics.

Defines immutable summary containers for algorithm outputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Set

from flowcut.algorithms.base import Edge, NodeID


@dataclass(frozen=True)
class FlowSummary:
    """Summary of a max-flow computation.

    Captures edge flows, residual capacities, the reachable set and min-cut.

    Attributes:
        total_flow: Maximum flow value achieved.
        stages: Number of augmentations performed by the last construction run.
        edge_flow: Flow carried by each original edge ``(u, v)``.
        residual_cap: Remaining forward capacity of each original edge.
        reachable: Nodes reachable from the source in the residual network.
        min_cut: Original edges leaving the reachable set.
        cut_capacity: Sum of original capacities over ``min_cut``.
    """

    total_flow: int
    stages: int
    edge_flow: Dict[Edge, int]
    residual_cap: Dict[Edge, int]
    reachable: Set[NodeID]
    min_cut: Set[Edge]
    cut_capacity: int

