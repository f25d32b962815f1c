"""View of a single item as if it were a graph of its own."""

from __future__ import annotations

from typing import Any, NoReturn, Optional

from depgraph.api import (
    DepGraphError,
    Item,
    ItemLookup,
    ItemRef,
    ItemState,
    SubGraphPath,
    get_subgraph,
    reference,
)
from depgraph.iterators import EdgeIterator, ItemIterator, SubGraphIterator


class SingleItemGraph:
    """A one-item subgraph; the item may or may not exist in the underlying graph."""

    def __init__(self, item_ref: ItemRef, path: SubGraphPath, graph_root: Any) -> None:
        self.item_ref = item_ref
        # Last known location of the item relative to the root.
        self._path = path
        self.graph_root = graph_root
        self._private_data: Any = None

    @property
    def name(self) -> str:
        """The item reference rendered as a string."""
        return str(self.item_ref)

    @property
    def description(self) -> str:
        """Always empty."""
        return ""

    @property
    def private_data(self) -> Any:
        """Private data; a single-item view never holds any."""
        return self._private_data

    def _reject(self, operation: str) -> NoReturn:
        raise DepGraphError(
            f"{operation} is not supported by single-item graph {self.name}")

    def _lookup(self) -> Optional[ItemLookup]:
        found = self.graph_root.item(self.item_ref)
        if found is not None:
            self._path = found.path
        return found

    def item(self, ref: ItemRef) -> Optional[ItemLookup]:
        """Return the item if ``ref`` refers to it and it exists, else None."""
        if ref != self.item_ref:
            return None
        found = self._lookup()
        if found is None:
            return None
        return ItemLookup(found.item, found.state, SubGraphPath())

    def items(self, incl_subgraphs: bool = False) -> ItemIterator:
        """Iterate over zero or one item."""
        found = self._lookup()
        entries = [] if found is None else [(found.item, found.state)]
        return ItemIterator(entries)

    def diff_items(self, other: Optional[SingleItemGraph]) -> list[ItemRef]:
        """Return ``[item_ref]`` if the item differs from the other view, else ``[]``."""
        if other is None:
            return [self.item_ref]
        if not isinstance(other, SingleItemGraph) or other.item_ref != self.item_ref:
            raise DepGraphError("not supported")
        found1 = self.graph_root.item(self.item_ref)
        found2 = other.graph_root.item(other.item_ref)
        if (found1 is None) != (found2 is None):
            return [self.item_ref]
        if found1 is not None and found2 is not None:
            if not found1.item.equal(found2.item) or found1.path != found2.path:
                return [self.item_ref]
        return []

    def subgraph(self, name: str) -> Any:
        """Look up a direct subgraph by name; a single-item graph has none."""
        return next((sub for sub in self.subgraphs() if sub.name == name), None)

    def subgraphs(self) -> SubGraphIterator:
        """Return an empty iterator."""
        return SubGraphIterator(())

    def parent_graph(self) -> Any:
        """Return the subgraph holding the item (or where it was last seen)."""
        self._lookup()
        return get_subgraph(self.graph_root, self._path)

    def item_as_subgraph(self, ref: ItemRef) -> Any:
        """Unsupported for a single-item graph; always raises DepGraphError."""
        self._reject(f"viewing item {ref} as a subgraph")

    def outgoing_edges(self, ref: ItemRef) -> EdgeIterator:
        """Outgoing edges of the item; empty for any other reference."""
        if ref == self.item_ref:
            return self.graph_root.outgoing_edges(ref)
        return EdgeIterator(())

    def incoming_edges(self, ref: ItemRef) -> EdgeIterator:
        """Incoming edges of the item; empty for any other reference."""
        if ref == self.item_ref:
            return self.graph_root.incoming_edges(ref)
        return EdgeIterator(())

    def detect_cycle(self) -> list[ItemRef]:
        """A single item never forms a cycle."""
        return []

    def set_description(self, description: str) -> None:
        """Only an empty description is accepted; anything else raises DepGraphError."""
        if description:
            self._reject("setting a description")

    def _editable_parent(self) -> Any:
        parent = self.edit_parent_graph()
        if parent is None:
            raise DepGraphError(f"subgraph holding item {self.item_ref} does not exist")
        return parent

    def put_item(self, item: Item, state: Optional[ItemState]) -> None:
        """Add or update the item in its subgraph."""
        if reference(item) != self.item_ref:
            raise DepGraphError("not supported")
        self._editable_parent().put_item(item, state)

    def del_item(self, ref: ItemRef) -> bool:
        """Delete the item; True if it existed and was deleted."""
        if ref != self.item_ref:
            raise DepGraphError("not supported")
        return self._editable_parent().del_item(ref)

    def put_subgraph(self, subgraph: Any) -> None:
        """Unsupported for a single-item graph; always raises DepGraphError."""
        self._reject("putting a subgraph")

    def del_subgraph(self, name: str) -> bool:
        """Unsupported for a single-item graph; always raises DepGraphError."""
        self._reject(f"deleting subgraph {name}")

    def edit_subgraph(self, subgraph: Any) -> Any:
        """Unsupported for a single-item graph; always raises DepGraphError."""
        self._reject("editing a subgraph")

    def edit_parent_graph(self) -> Any:
        """Return the subgraph holding the item (or where it was last seen)."""
        return self.parent_graph()

    def put_private_data(self, private_data: Any) -> None:
        """Unsupported for a single-item graph; always raises DepGraphError."""
        self._reject("storing private data")