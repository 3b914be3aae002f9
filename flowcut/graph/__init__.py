"""Graph primitives and helpers.

This package provides the residual network type `ResidualNetwork` and
conversion helpers to and from NetworkX (`convert`).
"""
