"""flowcut: maximum flow, minimum cut and bipartite matching.

flowcut computes maximum flows over capacitated directed graphs with
augmenting paths, extracts the matching minimum cut, and reduces maximum
bipartite matching to a unit-capacity flow problem.

Primary API:
    ResidualNetwork - Capacitated directed graph over a declared node set
    FlowEngine - Runs augmenting-path stages on a ResidualNetwork
    calc_max_flow() - One-call max flow with an optional FlowSummary
    extract_cut() - Minimum cut of a finished construction
    maximum_matching() - Maximum bipartite matching

Example:
    from flowcut import FlowEngine, ResidualNetwork

    net = ResidualNetwork([1, 2, 3])
    net.add_edge(1, 2, 4)
    net.add_edge(2, 3, 3)

    engine = FlowEngine(net, "bfs")
    flow = engine.construct(1, 3)   # 3
    cut = engine.extract_cut()      # {(2, 3)}
"""

from __future__ import annotations

from flowcut import logging
from flowcut.algorithms.base import PathSearch
from flowcut.algorithms.matching import maximum_matching
from flowcut.algorithms.max_flow import FlowEngine, FlowState, calc_max_flow
from flowcut.algorithms.min_cut import cut_capacity, extract_cut, reachable_nodes
from flowcut.algorithms.paths import bfs_augmenting_path, dfs_augmenting_path
from flowcut.algorithms.types import FlowSummary
from flowcut.config import FLOW_CONFIG, FlowConfig
from flowcut.errors import (
    ConservationError,
    DisconnectedError,
    FlowError,
    InvalidCapacityError,
    NetworkBusyError,
    UnknownNodeError,
)
from flowcut.graph.convert import from_networkx, to_networkx
from flowcut.graph.residual import ResidualNetwork

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Model
    "ResidualNetwork",
    # Algorithms
    "FlowEngine",
    "FlowState",
    "PathSearch",
    "calc_max_flow",
    "extract_cut",
    "reachable_nodes",
    "cut_capacity",
    "maximum_matching",
    "bfs_augmenting_path",
    "dfs_augmenting_path",
    # Results
    "FlowSummary",
    # Configuration
    "FlowConfig",
    "FLOW_CONFIG",
    # Errors
    "FlowError",
    "InvalidCapacityError",
    "UnknownNodeError",
    "DisconnectedError",
    "NetworkBusyError",
    "ConservationError",
    # Library integrations (NetworkX)
    "from_networkx",
    "to_networkx",
    # Utilities
    "logging",
]
