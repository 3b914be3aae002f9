"""Shared fixtures: small reference networks and bipartite instances."""

from __future__ import annotations

import pytest

from flowcut.graph.residual import ResidualNetwork


@pytest.fixture
def classic5():
    # Edges (capacity):
    #   1->2 (4), 1->3 (6), 2->3 (8), 2->4 (3), 3->5 (4), 4->5 (5)
    #
    # Max flow 1 -> 5 is 7; the min cut is {(2, 4), (3, 5)}.
    net = ResidualNetwork([1, 2, 3, 4, 5])
    net.add_edge(1, 2, 4)
    net.add_edge(1, 3, 6)
    net.add_edge(2, 3, 8)
    net.add_edge(2, 4, 3)
    net.add_edge(3, 5, 4)
    net.add_edge(4, 5, 5)
    return net


@pytest.fixture
def diamond():
    # Factory for the network that punishes poor path choice:
    #
    #        [Z]      [Z]
    #    1───────►2───────►4
    #    │        │        ▲
    # [Z]│     [1]│        │[Z]
    #    ▼        ▼        │
    #    └───────►3────────┘
    #
    # Max flow 1 -> 4 is 2Z.
    def make(z: int) -> ResidualNetwork:
        net = ResidualNetwork([1, 2, 3, 4])
        net.add_edge(1, 2, z)
        net.add_edge(1, 3, z)
        net.add_edge(2, 3, 1)
        net.add_edge(2, 4, z)
        net.add_edge(3, 4, z)
        return net

    return make


@pytest.fixture
def line3():
    #     [5]      [3]
    #  A───────►B───────►C
    net = ResidualNetwork(["A", "B", "C"])
    net.add_edge("A", "B", 5)
    net.add_edge("B", "C", 3)
    return net


@pytest.fixture
def disconnected():
    #     [5]
    #  A───────►B     C───────►D
    #                     [2]
    net = ResidualNetwork(["A", "B", "C", "D"])
    net.add_edge("A", "B", 5)
    net.add_edge("C", "D", 2)
    return net


@pytest.fixture
def bipartite4x3():
    left = [1, 2, 3, 4]
    right = [5, 6, 7]
    pairs = [(1, 6), (3, 5), (3, 6), (4, 7), (2, 6)]
    return left, right, pairs
