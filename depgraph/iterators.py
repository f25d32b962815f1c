"""Resettable iterators over items, edges and subgraphs of a graph."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Generic, Iterable, Optional, Tuple, TypeVar

from depgraph.api import Edge, Item, ItemState

_T = TypeVar("_T")


class _ResettableIterator(Generic[_T]):
    """Iterator over a fixed sequence that can be rewound and knows what is left."""

    def __init__(self, elements: Iterable[_T]) -> None:
        self._elements: tuple[_T, ...] = tuple(elements)
        self._pos = 0

    def __iter__(self) -> _ResettableIterator[_T]:
        return self

    def _advance(self) -> _T:
        if self._pos >= len(self._elements):
            raise StopIteration
        element = self._elements[self._pos]
        self._pos += 1
        return element

    def __len__(self) -> int:
        """Number of elements not yet returned."""
        return len(self._elements) - self._pos

    def reset(self) -> None:
        """Return the iterator to its start position."""
        self._pos = 0


class ItemIterator(_ResettableIterator[Tuple[Item, Optional[ItemState]]]):
    """Iterates ``(item, state)`` pairs of a graph.

    Items are ordered by subgraph (depth-first) and then by item reference.
    """

    def __init__(self, entries: Iterable[tuple[Item, Optional[ItemState]]]) -> None:
        super().__init__((item, state) for item, state in entries)

    def __iter__(self) -> ItemIterator:
        return self

    def __next__(self) -> tuple[Item, Optional[ItemState]]:
        return self._advance()

    def __len__(self) -> int:
        return super().__len__()

    def reset(self) -> None:
        super().reset()


class EdgeIterator(_ResettableIterator[Edge]):
    """Iterates outgoing or incoming edges of an item; the order is undefined.

    Each returned edge is a copy, so changing it does not change the graph.
    """

    def __init__(self, edges: Iterable[Edge]) -> None:
        super().__init__(edges)

    def __iter__(self) -> EdgeIterator:
        return self

    def __next__(self) -> Edge:
        return replace(self._advance())

    def __len__(self) -> int:
        return super().__len__()

    def reset(self) -> None:
        super().reset()


class SubGraphIterator(_ResettableIterator[Any]):
    """Iterates direct subgraphs of a graph; the order is undefined."""

    def __init__(self, subgraphs: Iterable[Any]) -> None:
        super().__init__(subgraphs)

    def __iter__(self) -> SubGraphIterator:
        return self

    def __next__(self) -> Any:
        return self._advance()

    def __len__(self) -> int:
        return super().__len__()

    def reset(self) -> None:
        super().reset()