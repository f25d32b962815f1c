# depgraph

A dependency graph for configuration items and other managed stateful
objects (network interfaces, routes, volumes, files, processes, ...).
Each item is a graph node; the dependencies it declares become directed
edges. Items can be grouped into named, nested subgraphs.

## Features

- Add, update, move and delete items (`Graph.put_item`, `Graph.del_item`);
  edges follow the dependencies each item declares.
- Nested subgraphs (`put_subgraph`, `del_subgraph`, `subgraph`,
  `subgraphs`), addressed by `SubGraphPath`.
- Iteration over `(item, state)` pairs ordered by subgraph path, then by
  item reference; over outgoing and incoming edges; over direct subgraphs.
  The iterators report how many elements are left (`len()`) and can be
  rewound with `reset()`.
- Cycle detection (`detect_cycle`), returning the first cycle found in
  cycle order, or an empty list.
- Diffing two graphs (`diff_items`): items differ if they are not equal
  or sit in different subgraphs relative to the compared graphs.
- Viewing a single item as a one-item subgraph (`item_as_subgraph`,
  returning a `SingleItemGraph`).
- Export to Graphviz DOT, including a "transition" view between a current
  and an intended graph (`DotExporter`).

## Installation

```
pip install .
```

The package has no runtime dependencies.

## Modules

- `depgraph.api` – value types (`ItemRef`, `SubGraphPath`, `Dependency`,
  `DependencyAttributes`, `Edge`, `ItemWithState`, `ItemLookup`,
  `InitArgs`), the abstract `Item` and `ItemState` classes, the
  `DepGraphError` exception and helpers `reference`, `get_graph_root`,
  `get_subgraph`, `put_item_into`, `del_item_from`.
- `depgraph.graph` – `Graph` and `new_graph(args)`.
- `depgraph.single_item` – `SingleItemGraph`.
- `depgraph.iterators` – `ItemIterator`, `EdgeIterator`, `SubGraphIterator`.
- `depgraph.dot` – `DotExporter`, `escape_name`, `escape_tooltip`.

## Usage

Implement `Item` (and optionally `ItemState`) for your objects. `name`,
`item_type` and `equal` must be provided; `label` defaults to an empty
string, `external` to `False` and `dependencies` to an empty list.

```python
from depgraph.api import Dependency, InitArgs, Item, ItemRef, reference
from depgraph.graph import new_graph


class Interface(Item):
    def __init__(self, name, mtu, deps=()):
        self._name = name
        self.mtu = mtu
        self._deps = list(deps)

    def name(self):
        return self._name

    def item_type(self):
        return "interface"

    def equal(self, other):
        return self.mtu == other.mtu and self._deps == other._deps

    def dependencies(self):
        return self._deps

    def __str__(self):
        return f"interface {self._name} mtu={self.mtu}"


eth0 = Interface("eth0", 1500)
vlan = Interface(
    "vlan10", 1500,
    deps=[Dependency(required_item=ItemRef("interface", "eth0"))],
)

graph = new_graph(InitArgs(
    name="network",
    items=[eth0],
    subgraphs=[InitArgs(name="vlans", items=[vlan])],
))

lookup = graph.item(reference(vlan))          # None if the item is absent
print(list(lookup.path))                      # ['vlans']

for edge in graph.outgoing_edges(reference(vlan)):
    print(edge.from_item, "->", edge.to_item)  # interface/vlan10 -> interface/eth0

for item, state in graph.items(True):
    print(reference(item), state)

print(graph.detect_cycle())                   # []
```

Subgraphs can be reached with `get_subgraph(graph, path)` and edited
with `put_item_into` / `del_item_from` from `depgraph.api`. Misuse —
duplicate dependencies on one item, dependencies on an external item,
attaching a subgraph that already belongs to a graph, editing a subgraph
of another graph, or unsupported operations on a `SingleItemGraph` —
raises `DepGraphError`.

### DOT export

```python
from depgraph.dot import DotExporter

dot = DotExporter(check_deps=True).export(graph)
print(dot)
```

`export_transition(src, dst)` renders `src` and additionally shows, with
lowered saturation and grey, items and subgraphs present only in `dst`.
Items targeted by edges but present in neither graph are drawn dashed
with the tooltip `<missing>`. With `check_deps=True`, edges whose
dependency is not satisfied are drawn red.

## What it does not do

The graph only records items, their state and their dependencies. It
does not create, modify or delete the objects the items stand for, and
it does not render DOT into images; pass the exported text to Graphviz
for that.

## Running the tests

```
pip install .[test]
pytest
```