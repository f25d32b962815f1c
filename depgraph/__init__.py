"""Dependency graph of stateful items with nested subgraphs, cycle detection, diffing and DOT export."""

__version__ = "0.1.0"
__all__ = ["api", "iterators", "single_item", "graph", "dot"]