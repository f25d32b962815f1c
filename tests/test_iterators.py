from dataclasses import dataclass

import pytest

from depgraph.api import Dependency, Edge, Item, ItemRef
from depgraph.iterators import EdgeIterator, ItemIterator, SubGraphIterator


@dataclass
class _Item(Item):
    ident: str
    kind: str = "type1"

    def name(self):
        return self.ident

    def item_type(self):
        return self.kind

    def equal(self, other):
        return self == other


def _edge(src, dst):
    a = ItemRef("type1", src)
    b = ItemRef("type1", dst)
    return Edge(a, b, Dependency(b))


def test_item_iterator_yields_pairs_in_order():
    a, b = _Item("A"), _Item("B")
    it = ItemIterator([(a, None), (b, "state")])
    assert len(it) == 2
    assert next(it) == (a, None)
    assert len(it) == 1
    assert next(it) == (b, "state")
    assert len(it) == 0
    with pytest.raises(StopIteration):
        next(it)
    assert len(it) == 0


def test_item_iterator_reset_rewinds():
    a, b = _Item("A"), _Item("B")
    it = ItemIterator([(a, None), (b, None)])
    first = list(it)
    assert list(it) == []
    it.reset()
    assert len(it) == 2
    assert list(it) == first
    assert [item for item, _ in first] == [a, b]


def test_empty_iterators():
    for it in (ItemIterator([]), EdgeIterator([]), SubGraphIterator([])):
        assert len(it) == 0
        assert list(it) == []


def test_edge_iterator_returns_copies():
    edge = _edge("A", "B")
    it = EdgeIterator([edge])
    got = next(it)
    assert got == edge
    got.from_item = ItemRef("type9", "Z")
    it.reset()
    assert next(it).from_item == ItemRef("type1", "A")
    assert edge.from_item == ItemRef("type1", "A")


def test_edge_iterator_len_counts_remaining():
    edges = [_edge("A", "B"), _edge("A", "C"), _edge("A", "D")]
    it = EdgeIterator(edges)
    assert len(it) == len(edges)
    next(it)
    assert len(it) == len(edges) - 1
    assert list(it) == edges[1:]


def test_subgraph_iterator():
    graphs = ["g1", "g2"]
    it = SubGraphIterator(graphs)
    assert len(it) == 2
    assert list(it) == graphs
    it.reset()
    assert next(it) == "g1"
    assert len(it) == 1


def test_iterator_snapshot_unaffected_by_source_changes():
    graphs = ["g1"]
    it = SubGraphIterator(graphs)
    graphs.append("g2")
    assert list(it) == ["g1"]