"""The dependency graph: items as nodes, their dependencies as directed edges."""

from __future__ import annotations

from bisect import bisect_left, insort
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from depgraph.api import (
    Dependency,
    DepGraphError,
    Edge,
    InitArgs,
    Item,
    ItemLookup,
    ItemRef,
    ItemState,
    SubGraphPath,
    reference,
)
from depgraph.iterators import EdgeIterator, ItemIterator, SubGraphIterator
from depgraph.single_item import SingleItemGraph


@dataclass(eq=False)
class _Node:
    item: Item
    state: Optional[ItemState]
    path: SubGraphPath

    @property
    def ref(self) -> ItemRef:
        return reference(self.item)

    @property
    def sort_key(self) -> tuple[tuple[str, ...], ItemRef]:
        return tuple(self.path), self.ref


def _node_key(node: _Node) -> tuple[tuple[str, ...], ItemRef]:
    return node.sort_key


def _validate_deps(deps: Iterable[Dependency]) -> None:
    """Multiple dependencies pointing to the same item are not allowed."""
    seen: set[ItemRef] = set()
    for dep in deps:
        if dep.required_item in seen:
            raise DepGraphError(
                f"Duplicate dependencies (required item: {dep.required_item})")
        seen.add(dep.required_item)


class Graph:
    """A dependency graph, possibly nested inside a parent graph as a subgraph.

    All nodes and edges are kept by the root graph; subgraphs only remember
    their path from the root.
    """

    def __init__(self, name: str = "", description: str = "",
                 private_data: Any = None) -> None:
        self._name = name
        self._description = description
        self._private_data = private_data
        self._parent: Optional[Graph] = None
        self._root: Optional[Graph] = self
        self._path = SubGraphPath()
        self._subgraphs: list[Graph] = []
        self._reset()

    def _reset(self) -> None:
        self._nodes: dict[ItemRef, _Node] = {}
        # Ordered first by subgraph path, then by item reference.
        self._sorted: list[_Node] = []
        self._outgoing: dict[ItemRef, list[Edge]] = {}
        self._incoming: dict[ItemRef, list[Edge]] = {}

    def __repr__(self) -> str:
        return f"Graph(name={self._name!r}, path={self._path!r})"

    # ----------------------------------------------------------------- read

    @property
    def name(self) -> str:
        """Name assigned to the (sub)graph."""
        return self._name

    @property
    def description(self) -> str:
        """Description assigned to the (sub)graph."""
        return self._description

    @property
    def private_data(self) -> Any:
        """Whatever custom data the user stored with the graph."""
        return self._private_data

    def _visible(self, ref: ItemRef) -> Optional[_Node]:
        node = self._root._nodes.get(ref)
        if node is None or not self._path.is_prefix_of(node.path):
            return None
        return node

    def item(self, ref: ItemRef) -> Optional[ItemLookup]:
        """Look an item up in this graph or any nested subgraph.

        The returned path is relative to this graph. None if not found.
        """
        node = self._visible(ref)
        if node is None:
            return None
        return ItemLookup(node.item, node.state, node.path.trim_prefix(self._path))

    def _node_range(self, path: SubGraphPath, incl_nested: bool) -> tuple[int, int]:
        """Slice bounds of ``_sorted`` holding the nodes of the given subgraph."""
        first = bisect_left(self._sorted, True, key=lambda n: n.path >= path)
        if incl_nested:
            end = bisect_left(
                self._sorted, True,
                key=lambda n: n.path > path and not path.is_prefix_of(n.path))
        else:
            end = bisect_left(self._sorted, True, key=lambda n: n.path > path)
        return first, end

    def _own_nodes(self, incl_subgraphs: bool) -> list[_Node]:
        first, end = self._root._node_range(self._path, incl_subgraphs)
        return self._root._sorted[first:end]

    def items(self, incl_subgraphs: bool = False) -> ItemIterator:
        """Iterate ``(item, state)`` pairs, optionally including all subgraphs."""
        return ItemIterator((n.item, n.state) for n in self._own_nodes(incl_subgraphs))

    def diff_items(self, other: Optional[Graph]) -> list[ItemRef]:
        """References of items that differ between this and the other graph.

        Items differ if they are not equal or sit in different subgraphs
        (relative to each graph). With ``other`` None, all items are returned.
        """
        nodes1 = self._own_nodes(True)
        if other is None:
            return [n.ref for n in nodes1]
        if not isinstance(other, Graph):
            raise DepGraphError("argument is not an instance of Graph")
        nodes2 = other._own_nodes(True)
        located1 = {(n.path.trim_prefix(self._path), n.ref): n for n in nodes1}
        located2 = {(n.path.trim_prefix(other._path), n.ref): n for n in nodes2}
        diff: dict[ItemRef, None] = {}
        for key, node in located1.items():
            node2 = located2.get(key)
            if node2 is None or not node.item.equal(node2.item):
                diff[node.ref] = None
        for key, node in located2.items():
            if key not in located1:
                diff[node.ref] = None
        return list(diff)

    def subgraph(self, name: str) -> Optional[Graph]:
        """Return the direct subgraph with the given name, or None."""
        return next((sub for sub in self._subgraphs if sub._name == name), None)

    def subgraphs(self) -> SubGraphIterator:
        """Iterate direct subgraphs of this graph."""
        return SubGraphIterator(self._subgraphs)

    def parent_graph(self) -> Optional[Graph]:
        """Return the direct parent graph, or None for a top-level graph."""
        return self._parent

    def item_as_subgraph(self, ref: ItemRef) -> SingleItemGraph:
        """View an item (which may or may not exist) as a single-item subgraph."""
        return SingleItemGraph(ref, self._path, self._root)

    def outgoing_edges(self, ref: ItemRef) -> EdgeIterator:
        """Edges from the item to the items it depends on."""
        if self._visible(ref) is None:
            return EdgeIterator(())
        return EdgeIterator(self._root._outgoing.get(ref, ()))

    def incoming_edges(self, ref: ItemRef) -> EdgeIterator:
        """Edges from items depending on the given item."""
        if self._visible(ref) is None:
            return EdgeIterator(())
        return EdgeIterator(self._root._incoming.get(ref, ()))

    def _cycle_from(self, start: ItemRef, visited: set[ItemRef]) -> list[ItemRef]:
        if start in visited:
            return []
        on_stack: dict[ItemRef, int] = {start: 0}
        frames = [(start, iter(self._outgoing.get(start, ())))]
        while frames:
            ref, pending = frames[-1]
            for edge in pending:
                adjacent = edge.to_item
                if adjacent in on_stack:
                    return list(on_stack)[on_stack[adjacent]:]
                if adjacent not in visited:
                    on_stack[adjacent] = len(on_stack)
                    frames.append((adjacent, iter(self._outgoing.get(adjacent, ()))))
                    break
            else:
                frames.pop()
                del on_stack[ref]
                visited.add(ref)
        return []

    def detect_cycle(self) -> list[ItemRef]:
        """Return the first cycle found (in cycle order), or an empty list."""
        visited: set[ItemRef] = set()
        for ref in list(self._nodes):
            cycle = self._cycle_from(ref, visited)
            if cycle:
                return cycle
        return []

    # ---------------------------------------------------------------- write

    def set_description(self, description: str) -> None:
        """Update the description of the (sub)graph."""
        self._description = description

    def _find_sorted(self, node: _Node) -> int:
        index = bisect_left(self._sorted, node.sort_key, key=_node_key)
        if index >= len(self._sorted) or self._sorted[index] is not node:
            raise DepGraphError(f"item {node.ref} is not present in the sorted nodes")
        return index

    def _put_node(self, node: _Node) -> None:
        if node.item is None:
            raise DepGraphError("missing item inside node")
        deps = list(node.item.dependencies())
        ref = node.ref
        if node.item.external() and deps:
            raise DepGraphError(f"External item {ref} should not have dependencies")
        _validate_deps(deps)

        orig = self._nodes.get(ref)
        if orig is not None:
            items_equal = orig.item.equal(node.item)
            del self._sorted[self._find_sorted(orig)]
            orig.item, orig.state, orig.path = node.item, node.state, node.path
            insort(self._sorted, orig, key=_node_key)
            if not items_equal:
                self._update_edges(ref, deps)
            return

        self._nodes[ref] = node
        insort(self._sorted, node, key=_node_key)
        if self._outgoing.get(ref):
            raise DepGraphError(f"item {ref} already has some outgoing edges")
        for dep in deps:
            self._add_edge(ref, dep)

    def _update_edges(self, from_ref: ItemRef, new_deps: list[Dependency]) -> None:
        if from_ref not in self._nodes:
            raise DepGraphError(f"item {from_ref} is not present in the graph")
        pending = {dep.required_item: dep for dep in new_deps}
        kept: list[Edge] = []
        for edge in self._outgoing.get(from_ref, []):
            dep = pending.pop(edge.dependency.required_item, None)
            if dep is None:
                self._remove_incoming(edge)
            else:
                edge.dependency = dep
                kept.append(edge)
        self._outgoing[from_ref] = kept
        for dep in pending.values():
            self._add_edge(from_ref, dep)

    def _add_edge(self, from_ref: ItemRef, dep: Dependency) -> None:
        edge = Edge(from_item=from_ref, to_item=dep.required_item, dependency=dep)
        self._outgoing.setdefault(from_ref, []).append(edge)
        self._incoming.setdefault(edge.to_item, []).append(edge)

    def _remove_incoming(self, edge: Edge) -> None:
        incoming = self._incoming.get(edge.to_item, [])
        for index, candidate in enumerate(incoming):
            if candidate is edge:
                del incoming[index]
                return

    def _drop_outgoing(self, ref: ItemRef) -> None:
        # Incoming edges of the removed item are kept on purpose.
        for edge in self._outgoing.pop(ref, []):
            self._remove_incoming(edge)

    def put_item(self, item: Item, state: Optional[ItemState] = None) -> None:
        """Add, update or move an item (with its state) into this (sub)graph."""
        self._root._put_node(_Node(item=item, state=state, path=self._path))

    def _del_node(self, ref: ItemRef, path: SubGraphPath) -> bool:
        node = self._nodes.get(ref)
        if node is None or node.path != path:
            return False
        del self._sorted[self._find_sorted(node)]
        del self._nodes[ref]
        self._drop_outgoing(ref)
        return True

    def del_item(self, ref: ItemRef) -> bool:
        """Delete an item from this (sub)graph; True if it existed here."""
        return self._root._del_node(ref, self._path)

    def _set_root(self, root: Graph, path: SubGraphPath) -> None:
        self._root = root
        self._path = path
        for sub in self._subgraphs:
            sub._set_root(root, path.append(sub._name))

    def put_subgraph(self, subgraph: Graph) -> None:
        """Add a direct subgraph, replacing an existing one with the same name."""
        if not isinstance(subgraph, Graph):
            raise DepGraphError("subgraph is not an instance of Graph")
        if subgraph._root is not subgraph:
            raise DepGraphError("subgraph is already attached to a graph")

        if self.subgraph(subgraph._name) is not None:
            self.del_subgraph(subgraph._name)

        path = self._path.append(subgraph._name)
        subgraph._set_root(self._root, path)
        subgraph._parent = self
        self._subgraphs.append(subgraph)

        for node in subgraph._sorted:
            node.path = path.concatenate(node.path)
            self._root._put_node(node)
        subgraph._reset()

    def del_subgraph(self, name: str) -> bool:
        """Delete a direct subgraph with all its content; True if it existed.

        The deleted subgraph must not be used afterwards.
        """
        sub = self.subgraph(name)
        if sub is None:
            return False
        self._subgraphs.remove(sub)
        root = self._root
        first, end = root._node_range(sub._path, True)
        for node in root._sorted[first:end]:
            ref = node.ref
            del root._nodes[ref]
            root._drop_outgoing(ref)
        del root._sorted[first:end]
        sub._parent = None
        sub._root = None
        return True

    def edit_subgraph(self, subgraph: Any) -> Any:
        """Return read-write access to a (direct or nested) subgraph of this graph."""
        if isinstance(subgraph, SingleItemGraph):
            if subgraph.graph_root is self._root:
                return subgraph
        elif isinstance(subgraph, Graph):
            if subgraph._root is self._root and self._path.is_prefix_of(subgraph._path):
                return subgraph
        raise DepGraphError(
            f"Graph {self._name} does not contain sub-graph "
            f"{getattr(subgraph, 'name', subgraph)}")

    def edit_parent_graph(self) -> Optional[Graph]:
        """Return read-write access to the direct parent graph, or None."""
        return self._parent

    def put_private_data(self, private_data: Any) -> None:
        """Store any user data with the graph."""
        self._private_data = private_data


def new_graph(args: InitArgs) -> Graph:
    """Build a graph (with its subgraphs) from the given arguments."""
    graph = Graph(args.name, args.description, args.private_data)
    for item in args.items:
        graph.put_item(item, None)
    for item_with_state in args.items_with_state:
        graph.put_item(item_with_state.item, item_with_state.state)
    for sub_args in args.subgraphs:
        graph.put_subgraph(new_graph(sub_args))
    return graph