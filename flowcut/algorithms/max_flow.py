"""Maximum-flow computation via repeated augmenting paths.

`FlowEngine` runs the Ford-Fulkerson loop over a `ResidualNetwork`: find an
augmenting path, push its bottleneck, repeat until the sink is unreachable.
With breadth-first search this is Edmonds-Karp and the number of stages is
bounded by O(|V|·|E|) regardless of capacity magnitudes; depth-first search
can need a number of stages proportional to the flow value.

When the loop ends because no path exists, the nodes reachable from the
source form a cut whose capacity equals the accumulated flow, so no larger
flow is possible.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Literal, Optional, Set, Union, overload

from flowcut.algorithms.base import Edge, NodeID, PathSearch
from flowcut.algorithms.min_cut import cut_capacity, extract_cut, reachable_nodes
from flowcut.algorithms.paths import PathFinder, path_finder_fabric
from flowcut.algorithms.types import FlowSummary
from flowcut.config import FLOW_CONFIG
from flowcut.errors import ConservationError, DisconnectedError, UnknownNodeError
from flowcut.graph.residual import ResidualNetwork
from flowcut.logging import get_logger

logger = get_logger(__name__)

#: Predicate ``stop(total_flow, stages) -> bool`` checked once per stage.
StopPredicate = Callable[[int, int], bool]


class FlowState(IntEnum):
    """Lifecycle of a flow construction run."""

    IDLE = 0
    AUGMENTING = 1
    #: No augmenting path remains; the flow is maximum.
    DONE = 2
    #: A stop predicate or stage limit ended the run early.
    STOPPED = 3


class FlowEngine:
    """Orchestrates augmenting-path stages on one residual network.

    The engine owns the network exclusively for the duration of each
    ``construct`` call. ``flow_value`` accumulates across runs between the
    same terminals, so a second run on a finished network adds nothing.

    Attributes:
        network: The residual network being augmented in place.
        search: Path search strategy, or a user-defined path finder.
        state: Current FlowState.
        stages: Augmentations performed by the most recent run.
        source: Source of the most recent run.
        sink: Sink of the most recent run.
    """

    def __init__(
        self,
        network: ResidualNetwork,
        search: Union[PathSearch, str, PathFinder, None] = None,
    ) -> None:
        if search is None:
            search = FLOW_CONFIG.resolve_search()
        elif isinstance(search, str):
            search = PathSearch.from_string(search)
        self.network = network
        self.search = search
        self._find_path = path_finder_fabric(search)
        self.state = FlowState.IDLE
        self.stages = 0
        self.source: Optional[NodeID] = None
        self.sink: Optional[NodeID] = None
        self._flow_value = 0

    @property
    def flow_value(self) -> int:
        """Total flow pushed from ``source`` to ``sink`` by this engine."""
        return self._flow_value

    def construct(
        self,
        source: NodeID,
        sink: NodeID,
        *,
        stop: Optional[StopPredicate] = None,
        require_flow: bool = False,
    ) -> int:
        """Augment until no path from ``source`` to ``sink`` remains.

        Args:
            source: Source node.
            sink: Sink node.
            stop: Optional predicate ``stop(total, stages)`` evaluated before
                every stage; returning True ends the run with the total as of
                the last completed stage.
            require_flow: If True, a run that pushes no flow raises
                DisconnectedError instead of returning 0.

        Returns:
            Flow pushed by this run. On a fresh network this is the maximum
            flow value; on a network already at maximum it is 0.

        Raises:
            UnknownNodeError: If ``source`` or ``sink`` is not in the network.
            DisconnectedError: If ``require_flow`` is set and no flow was pushed.
            NetworkBusyError: If another construction owns the network.
        """
        network = self.network
        for node in (source, sink):
            if node not in network:
                raise UnknownNodeError(node)

        max_stages = FLOW_CONFIG.max_stages
        progress_interval = max(1, FLOW_CONFIG.progress_interval)

        # Engine state is only touched once the network is claimed, so a
        # rejected call leaves the previous result intact.
        with network.exclusive():
            if (source, sink) != (self.source, self.sink):
                self._flow_value = 0
            self.source, self.sink = source, sink
            self.stages = 0
            added = 0

            logger.debug(
                "Starting flow construction %r -> %r on %r using %s",
                source,
                sink,
                network,
                getattr(self.search, "name", self.search),
            )
            self.state = FlowState.AUGMENTING
            try:
                while True:
                    if (stop is not None and stop(added, self.stages)) or (
                        max_stages is not None and self.stages >= max_stages
                    ):
                        self.state = FlowState.STOPPED
                        logger.info(
                            "Flow construction stopped early after %d stages with flow %d",
                            self.stages,
                            added,
                        )
                        break

                    path = self._find_path(network, source, sink)
                    if path is None:
                        self.state = FlowState.DONE
                        break

                    amount = network.bottleneck(path)
                    if amount <= 0:
                        raise ConservationError(
                            f"Path finder returned a path without residual capacity: {path}"
                        )
                    network.apply_augmentation(path, amount)
                    added += amount
                    self._flow_value += amount
                    self.stages += 1

                    if self.stages % progress_interval == 0:
                        logger.debug(
                            "Completed %d stages, flow so far %d", self.stages, added
                        )
            except BaseException:
                # Completed stages stay applied to the network.
                self.state = FlowState.STOPPED
                logger.warning(
                    "Flow construction aborted after %d stages with flow %d",
                    self.stages,
                    added,
                )
                raise

        logger.debug(
            "Flow construction %r -> %r finished: flow=%d stages=%d state=%s",
            source,
            sink,
            added,
            self.stages,
            self.state.name,
        )
        if require_flow and added == 0:
            raise DisconnectedError(
                f"No flow can be sent from '{source}' to '{sink}'."
            )
        return added

    def extract_cut(self, source: Optional[NodeID] = None) -> Set[Edge]:
        """Return the min-cut edges of the finished construction.

        Calling this before the engine reaches ``FlowState.DONE`` is caller
        misuse: a warning is logged and the returned edge set is not
        guaranteed to be a minimum cut.
        """
        if source is None:
            source = self.source
        if source is None:
            raise ValueError("No source given and no construction has run yet.")
        if self.state != FlowState.DONE:
            logger.warning(
                "Extracting a cut while the engine is %s; result is not a minimum cut",
                self.state.name,
            )
        return extract_cut(self.network, source)

    def summary(self) -> FlowSummary:
        """Build a FlowSummary from the current network state."""
        if self.source is None:
            raise ValueError("No construction has run yet.")
        network = self.network
        edge_flow = {}
        residual_cap = {}
        for u, v, _ in network.edges():
            edge_flow[(u, v)] = network.flow(u, v)
            residual_cap[(u, v)] = network.residual(u, v)

        reachable = reachable_nodes(network, self.source)
        min_cut = extract_cut(network, self.source)
        return FlowSummary(
            total_flow=self._flow_value,
            stages=self.stages,
            edge_flow=edge_flow,
            residual_cap=residual_cap,
            reachable=reachable,
            min_cut=min_cut,
            cut_capacity=cut_capacity(network, min_cut),
        )


@overload
def calc_max_flow(
    network: ResidualNetwork,
    source: NodeID,
    sink: NodeID,
    *,
    search: Union[PathSearch, str, PathFinder, None] = None,
    return_summary: Literal[False] = False,
    copy_network: bool = True,
    stop: Optional[StopPredicate] = None,
    require_flow: bool = False,
) -> int: ...


@overload
def calc_max_flow(
    network: ResidualNetwork,
    source: NodeID,
    sink: NodeID,
    *,
    search: Union[PathSearch, str, PathFinder, None] = None,
    return_summary: Literal[True],
    copy_network: bool = True,
    stop: Optional[StopPredicate] = None,
    require_flow: bool = False,
) -> tuple[int, FlowSummary]: ...


def calc_max_flow(
    network: ResidualNetwork,
    source: NodeID,
    sink: NodeID,
    *,
    search: Union[PathSearch, str, PathFinder, None] = None,
    return_summary: bool = False,
    copy_network: bool = True,
    stop: Optional[StopPredicate] = None,
    require_flow: bool = False,
) -> Union[int, tuple]:
    """Compute the maximum flow between two nodes.

    Args:
        network: Residual network holding the capacities.
        source: Source node.
        sink: Sink node.
        search: Path search strategy; defaults to ``FLOW_CONFIG.default_search``.
        return_summary: If True, also return a FlowSummary with per-edge flow
            and the min-cut.
        copy_network: If True, work on a copy so ``network`` stays unmodified.
        stop: Optional per-stage stopping predicate, see ``FlowEngine.construct``.
        require_flow: If True, raise DisconnectedError when no flow reaches
            ``sink``.

    Returns:
        Union[int, tuple]:
            - ``int`` flow value by default.
            - ``tuple[int, FlowSummary]`` if ``return_summary`` is True.

    Raises:
        UnknownNodeError: If ``source`` or ``sink`` is not in the network.
        DisconnectedError: If ``require_flow`` is set and the flow is 0.

    Examples:
        >>> net = ResidualNetwork(["A", "B", "C"])
        >>> net.add_edge("A", "B", 10)
        >>> net.add_edge("B", "C", 5)
        >>> calc_max_flow(net, "A", "C")
        5
    """
    work = network.copy() if copy_network else network
    engine = FlowEngine(work, search)
    flow = engine.construct(source, sink, stop=stop, require_flow=require_flow)
    if return_summary:
        return flow, engine.summary()
    return flow
