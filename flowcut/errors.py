"""Exception types raised by flowcut.

All recoverable errors derive from ``FlowError`` and also from the closest
built-in exception, so callers can catch either. ``ConservationError`` is
deliberately outside that hierarchy: it signals a broken internal invariant
and is never caught by the library.
"""

from __future__ import annotations

from typing import Hashable


class FlowError(Exception):
    """Base class for errors raised by flowcut."""


class InvalidCapacityError(FlowError, ValueError):
    """A negative or non-integer capacity was supplied to ``add_edge``."""


class UnknownNodeError(FlowError, KeyError):
    """An edge or query references a node outside the declared node set."""

    def __init__(self, node: Hashable) -> None:
        super().__init__(node)
        self.node = node

    def __str__(self) -> str:
        return f"Node '{self.node}' is not part of the network."


class DisconnectedError(FlowError):
    """Construction required a nonzero flow but source and sink are disconnected."""


class NetworkBusyError(FlowError, RuntimeError):
    """The network was mutated while a flow construction owned it."""


class ConservationError(AssertionError):
    """Residual capacity conservation would be broken by an augmentation."""
