"""Residual network with a single capacity table keyed by ordered node pairs.

`ResidualNetwork` stores the residual capacity of every ordered node pair in
one mapping. Adding an edge ``(u, v)`` raises the forward entry and makes sure
the reverse entry ``(v, u)`` exists, so flow pushed along an edge is always
mirrored as cancellation capacity in the opposite direction. Original
capacities are kept separately to support cut and flow reporting.
"""

from __future__ import annotations

from contextlib import contextmanager
from numbers import Integral
from pickle import dumps, loads
from typing import Dict, Hashable, Iterable, Iterator, List, Sequence, Tuple

from flowcut.errors import (
    ConservationError,
    InvalidCapacityError,
    NetworkBusyError,
    UnknownNodeError,
)

NodeID = Hashable
Edge = Tuple[NodeID, NodeID]
EdgeTuple = Tuple[NodeID, NodeID, int]


class ResidualNetwork:
    """A capacitated directed graph over a fixed, caller-declared node set.

    This class enforces:
      - The node set is declared once at construction; duplicates raise
        ValueError and references to undeclared nodes raise UnknownNodeError.
      - Capacities are nonnegative integers; anything else raises
        InvalidCapacityError.
      - For every unordered pair ``{u, v}`` the sum of both residual entries
        equals the sum of both original capacities.
      - No edge may be added while a flow construction owns the network.

    Attributes:
        _order: Declared position of each node; defines node-iteration order.
        _residual: Residual capacity per ordered pair, forward and reverse.
        _capacity: Accumulated original capacity per edge added by the caller.
        _succ: Residual-table successors of each node, in insertion order.
    """

    def __init__(self, nodes: Iterable[NodeID]) -> None:
        """Declare the node set.

        Args:
            nodes: Node identifiers; iteration order becomes node order.

        Raises:
            ValueError: If a node is declared more than once.
        """
        self._order: Dict[NodeID, int] = {}
        for node in nodes:
            if node in self._order:
                raise ValueError(f"Node '{node}' is declared more than once.")
            self._order[node] = len(self._order)

        self._residual: Dict[Edge, int] = {}
        self._capacity: Dict[Edge, int] = {}
        self._succ: Dict[NodeID, Dict[NodeID, None]] = {n: {} for n in self._order}
        # Successors sorted by node order, rebuilt lazily after add_edge
        self._sorted_succ: Dict[NodeID, Tuple[NodeID, ...]] = {}
        self._busy = False

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, node: object) -> bool:
        try:
            return node in self._order
        except TypeError:
            return False

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(nodes={len(self._order)}, "
            f"edges={len(self._capacity)})"
        )

    @property
    def nodes(self) -> List[NodeID]:
        """Declared nodes in node-iteration order."""
        return list(self._order)

    #
    # Mutation
    #
    def add_edge(self, u: NodeID, v: NodeID, capacity: int) -> None:
        """Add ``capacity`` to the directed edge ``(u, v)``.

        Capacities accumulate over repeated calls for the same pair. The
        reverse entry ``(v, u)`` is created with residual 0 if absent.

        Args:
            u: Tail node. Must be declared.
            v: Head node. Must be declared.
            capacity: Nonnegative integer capacity.

        Raises:
            InvalidCapacityError: If ``capacity`` is negative or not an integer.
            UnknownNodeError: If ``u`` or ``v`` is not declared.
            NetworkBusyError: If a flow construction currently owns the network.
        """
        if isinstance(capacity, bool) or not isinstance(capacity, Integral):
            raise InvalidCapacityError(
                f"Capacity of edge ({u!r}, {v!r}) must be an integer, got {capacity!r}."
            )
        if capacity < 0:
            raise InvalidCapacityError(
                f"Capacity of edge ({u!r}, {v!r}) must be nonnegative, got {capacity}."
            )
        self._check_node(u)
        self._check_node(v)
        if self._busy:
            raise NetworkBusyError(
                "Cannot add edges while a flow construction owns the network."
            )

        capacity = int(capacity)
        self._capacity[(u, v)] = self._capacity.get((u, v), 0) + capacity
        self._residual[(u, v)] = self._residual.get((u, v), 0) + capacity
        self._residual.setdefault((v, u), 0)

        self._succ[u][v] = None
        self._succ[v][u] = None
        self._sorted_succ.pop(u, None)
        self._sorted_succ.pop(v, None)

    def apply_augmentation(self, path: Sequence[NodeID], amount: int) -> None:
        """Push ``amount`` units of flow along ``path``.

        Every forward entry on the path loses ``amount`` and every reverse
        entry gains it. The whole path is validated before any entry changes.

        Args:
            path: Nodes from source to sink.
            amount: Flow to push; at most the path bottleneck.

        Raises:
            ConservationError: If ``amount`` is negative, exceeds the residual
                capacity of an edge on the path, or the path uses a pair that
                is not in the residual table.
        """
        if amount < 0:
            raise ConservationError(f"Cannot augment by a negative amount ({amount}).")

        required: Dict[Edge, int] = {}
        for pair in zip(path, path[1:]):
            if pair not in self._residual:
                raise ConservationError(f"Edge {pair} is not in the residual network.")
            required[pair] = required.get(pair, 0) + amount
        for pair, needed in required.items():
            if self._residual[pair] < needed:
                raise ConservationError(
                    f"Augmenting by {amount} exceeds residual capacity "
                    f"{self._residual[pair]} of edge {pair}."
                )

        for u, v in zip(path, path[1:]):
            self._residual[(u, v)] -= amount
            self._residual[(v, u)] += amount

    def reset(self) -> None:
        """Discard all pushed flow, restoring residuals to original capacities."""
        if self._busy:
            raise NetworkBusyError(
                "Cannot reset while a flow construction owns the network."
            )
        self._residual = {pair: self._capacity.get(pair, 0) for pair in self._residual}

    @contextmanager
    def exclusive(self) -> Iterator["ResidualNetwork"]:
        """Claim the network for one flow construction.

        Raises:
            NetworkBusyError: If another construction already owns it.
        """
        if self._busy:
            raise NetworkBusyError("The network is already owned by a construction.")
        self._busy = True
        try:
            yield self
        finally:
            self._busy = False

    #
    # Queries
    #
    def residual(self, u: NodeID, v: NodeID) -> int:
        """Return the current residual capacity of ``(u, v)``, 0 if never added."""
        self._check_node(u)
        self._check_node(v)
        return self._residual.get((u, v), 0)

    def capacity(self, u: NodeID, v: NodeID) -> int:
        """Return the accumulated original capacity of ``(u, v)``."""
        self._check_node(u)
        self._check_node(v)
        return self._capacity.get((u, v), 0)

    def flow(self, u: NodeID, v: NodeID) -> int:
        """Return the flow currently carried by the original edge ``(u, v)``."""
        self._check_node(u)
        self._check_node(v)
        pair = (u, v)
        if pair not in self._capacity:
            return 0
        return max(0, self._capacity[pair] - self._residual[pair])

    def neighbors(self, u: NodeID) -> Tuple[NodeID, ...]:
        """Return every node sharing a residual entry with ``u``, in node order.

        Includes heads of reverse entries, so callers must still filter on
        positive residual capacity.
        """
        cached = self._sorted_succ.get(u)
        if cached is None:
            self._check_node(u)
            order = self._order
            cached = tuple(sorted(self._succ[u], key=order.__getitem__))
            self._sorted_succ[u] = cached
        return cached

    def edges(self) -> Iterator[EdgeTuple]:
        """Yield original edges as ``(u, v, capacity)`` in insertion order."""
        for (u, v), cap in self._capacity.items():
            yield u, v, cap

    def bottleneck(self, path: Sequence[NodeID]) -> int:
        """Return the minimum residual capacity along ``path``.

        Raises:
            ValueError: If the path has fewer than two nodes.
        """
        if len(path) < 2:
            raise ValueError("A path needs at least two nodes to have a bottleneck.")
        return min(self._residual.get(pair, 0) for pair in zip(path, path[1:]))

    def check_conservation(self) -> bool:
        """Return True if every residual pair satisfies capacity conservation."""
        for (u, v), res in self._residual.items():
            if res < 0:
                return False
            total = res + self._residual.get((v, u), 0)
            if u == v:
                if total != 2 * self._capacity.get((u, v), 0):
                    return False
                continue
            original = self._capacity.get((u, v), 0) + self._capacity.get((v, u), 0)
            if total != original:
                return False
        return True

    def copy(self) -> ResidualNetwork:
        """Return a deep copy for diagnostics or independent runs.

        The copy is never marked busy, even when taken during construction.
        """
        clone = loads(dumps(self))
        clone._busy = False
        return clone

    def _check_node(self, node: NodeID) -> None:
        if node not in self:
            raise UnknownNodeError(node)
