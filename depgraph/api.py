"""Core value types and helper functions of the dependency graph."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, NamedTuple, Optional, Sequence


class DepGraphError(Exception):
    """Raised when the graph is used in a way it does not support."""


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


@dataclass(frozen=True, order=True)
class ItemRef:
    """Unique reference to an item: its type together with its name."""

    item_type: str
    item_name: str

    def compare(self, other: ItemRef) -> int:
        """Return -1, 0 or 1 when this reference sorts before, equal or after ``other``."""
        return _cmp((self.item_type, self.item_name), (other.item_type, other.item_name))

    def __str__(self) -> str:
        return f"{self.item_type}/{self.item_name}"


class SubGraphPath:
    """Relative path from a graph to one of its (direct or nested) subgraphs."""

    __slots__ = ("_elems",)

    def __init__(self, *args: str) -> None:
        self._elems: tuple[str, ...] = tuple(args)

    def __len__(self) -> int:
        return len(self._elems)

    def __iter__(self) -> Iterator[str]:
        return iter(self._elems)

    def __getitem__(self, index: int) -> str:
        return self._elems[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SubGraphPath):
            return NotImplemented
        return self._elems == other._elems

    def __lt__(self, other: SubGraphPath) -> bool:
        return self._elems < other._elems

    def __le__(self, other: SubGraphPath) -> bool:
        return self._elems <= other._elems

    def __gt__(self, other: SubGraphPath) -> bool:
        return self._elems > other._elems

    def __ge__(self, other: SubGraphPath) -> bool:
        return self._elems >= other._elems

    def __hash__(self) -> int:
        return hash(self._elems)

    def __repr__(self) -> str:
        return f"SubGraphPath{self._elems!r}"

    def append(self, *args: str) -> SubGraphPath:
        """Return a new path with the given names added at the end."""
        return SubGraphPath(*self._elems, *args)

    def concatenate(self, other: SubGraphPath) -> SubGraphPath:
        """Return a new path made of this path followed by ``other``."""
        return self.append(*other._elems)

    def is_prefix_of(self, other: SubGraphPath) -> bool:
        """Return True if this path is a prefix of ``other``."""
        return other._elems[: len(self._elems)] == self._elems

    def trim_prefix(self, prefix: SubGraphPath) -> SubGraphPath:
        """Return a new path with ``prefix`` removed, or this path if it is not a prefix."""
        if not prefix.is_prefix_of(self):
            return self
        return SubGraphPath(*self._elems[len(prefix._elems):])

    def compare(self, other: SubGraphPath) -> int:
        """Compare two paths lexicographically, returning -1, 0 or 1."""
        return _cmp(self._elems, other._elems)


@dataclass(frozen=True)
class DependencyAttributes:
    """Extra attributes further describing a dependency."""

    recreate_when_modified: bool = False
    auto_deleted_by_external: bool = False


@dataclass(frozen=True)
class Dependency:
    """A dependency satisfied once the required item exists and passes ``must_satisfy``."""

    required_item: ItemRef
    must_satisfy: Optional[Callable[["Item"], bool]] = None
    description: str = ""
    attributes: DependencyAttributes = field(default_factory=DependencyAttributes)


@dataclass
class Edge:
    """Directed edge of the dependency graph."""

    from_item: ItemRef
    to_item: ItemRef
    dependency: Dependency


class Item(abc.ABC):
    """A stateful object represented by one node of the graph."""

    @abc.abstractmethod
    def name(self) -> str:
        """Identifier unique among items of the same type."""

    def label(self) -> str:
        """Optional display label; empty means the name is used."""
        return ""

    @abc.abstractmethod
    def item_type(self) -> str:
        """Name of the item type."""

    @abc.abstractmethod
    def equal(self, other: Item) -> bool:
        """Whether this and another instance of the same item are equivalent."""

    def external(self) -> bool:
        """Whether the item is managed by someone else."""
        return False

    def dependencies(self) -> list[Dependency]:
        """Dependencies that all have to be satisfied before the item is created."""
        return []


class ItemState(abc.ABC):
    """State information stored alongside an item."""

    @abc.abstractmethod
    def is_created(self) -> bool:
        """Whether the item actually exists."""

    @abc.abstractmethod
    def with_error(self) -> Optional[BaseException]:
        """Error of the last failed state transition, or None."""

    def in_transition(self) -> bool:
        """Whether a state transition is in progress."""
        return False


@dataclass
class ItemWithState:
    """An item paired with its state data."""

    item: Item
    state: Optional[ItemState] = None


class ItemLookup(NamedTuple):
    """Result of looking an item up: the item, its state and its subgraph path."""

    item: Item
    state: Optional[ItemState]
    path: SubGraphPath


@dataclass
class InitArgs:
    """Arguments used to build a (sub)graph."""

    name: str = ""
    description: str = ""
    items_with_state: list[ItemWithState] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    subgraphs: list[InitArgs] = field(default_factory=list)
    private_data: Any = None


def reference(item: Item) -> ItemRef:
    """Build a reference to the given item."""
    return ItemRef(item.item_type(), item.name())


def get_graph_root(graph: Any) -> Any:
    """Return the top-most parent of a (sub)graph."""
    if graph is None:
        return None
    while (parent := graph.parent_graph()) is not None:
        graph = parent
    return graph


def get_subgraph(graph: Any, path: SubGraphPath | Sequence[str]) -> Any:
    """Return the subgraph at the relative ``path``, or None if it does not exist."""
    if graph is None:
        return None
    for name in path:
        graph = graph.subgraph(name)
        if graph is None:
            return None
    return graph


def put_item_into(graph: Any, item: Item, state: Optional[ItemState],
                  path: SubGraphPath) -> bool:
    """Put an item into the subgraph at ``path``; False if there is no such subgraph."""
    subgraph = get_subgraph(graph, path)
    if subgraph is None:
        return False
    subgraph.put_item(item, state)
    return True


def del_item_from(graph: Any, ref: ItemRef, path: SubGraphPath) -> bool:
    """Delete an item from the subgraph at ``path``; True only if it was deleted."""
    subgraph = get_subgraph(graph, path)
    if subgraph is None:
        return False
    return subgraph.del_item(ref)