import pytest

from depgraph.api import (
    Dependency,
    DependencyAttributes,
    Edge,
    InitArgs,
    Item,
    ItemLookup,
    ItemRef,
    ItemState,
    ItemWithState,
    SubGraphPath,
    del_item_from,
    get_graph_root,
    get_subgraph,
    put_item_into,
    reference,
)


class MockItem(Item):
    def __init__(self, name, item_type, attrs=None, deps=None):
        self._name = name
        self._type = item_type
        self.attrs = attrs or {}
        self.deps = deps or []

    def name(self):
        return self._name

    def item_type(self):
        return self._type

    def equal(self, other):
        return self.attrs == other.attrs and self.deps == other.deps

    def dependencies(self):
        return self.deps


class MockState(ItemState):
    def __init__(self, created):
        self.created = created

    def is_created(self):
        return self.created


class FakeGraph:
    def __init__(self, name, parent=None):
        self.name = name
        self.parent = parent
        self.children = {}
        self.items = {}
        if parent is not None:
            parent.children[name] = self

    def subgraph(self, name):
        return self.children.get(name)

    def parent_graph(self):
        return self.parent

    def put_item(self, item, state):
        self.items[reference(item)] = (item, state)

    def del_item(self, ref):
        return self.items.pop(ref, None) is not None


def test_item_ref_str_and_compare():
    ref = ItemRef("type1", "A")
    assert str(ref) == "type1/A"
    assert ref.compare(ItemRef("type1", "A")) == 0
    assert ref.compare(ItemRef("type1", "B")) == -1
    assert ref.compare(ItemRef("type0", "Z")) == 1
    assert ItemRef("type2", "A").compare(ref) == 1


def test_item_ref_hashable_and_ordered():
    refs = {ItemRef("t", "b"), ItemRef("t", "a"), ItemRef("t", "a")}
    assert sorted(refs) == [ItemRef("t", "a"), ItemRef("t", "b")]


def test_reference():
    item = MockItem("A", "type1")
    assert reference(item) == ItemRef("type1", "A")


def test_item_defaults():
    item = MockItem("A", "type1")
    assert Item.label(item) == ""
    assert Item.external(item) is False
    assert reference(MockItem("B", "t")) == ItemRef("t", "B")
    assert MockItem("B", "t").dependencies() == []


def test_item_is_abstract():
    with pytest.raises(TypeError):
        Item()
    with pytest.raises(TypeError):
        ItemState()


def test_subgraph_path_basics():
    path = SubGraphPath("a", "b")
    assert len(path) == 2
    assert list(path) == ["a", "b"]
    assert len(SubGraphPath()) == 0
    assert SubGraphPath().append("SubGraph1") == SubGraphPath("SubGraph1")


def test_subgraph_path_append_is_new():
    path = SubGraphPath("a")
    longer = path.append("b", "c")
    assert list(path) == ["a"]
    assert list(longer) == ["a", "b", "c"]
    assert path.concatenate(SubGraphPath("x")) == SubGraphPath("a", "x")


def test_subgraph_path_prefix():
    assert SubGraphPath().is_prefix_of(SubGraphPath("a"))
    assert SubGraphPath("a").is_prefix_of(SubGraphPath("a", "b"))
    assert SubGraphPath("a", "b").is_prefix_of(SubGraphPath("a", "b"))
    assert not SubGraphPath("a", "b").is_prefix_of(SubGraphPath("a"))
    assert not SubGraphPath("b").is_prefix_of(SubGraphPath("a", "b"))


def test_subgraph_path_trim_prefix():
    path = SubGraphPath("a", "b", "c")
    assert path.trim_prefix(SubGraphPath("a")) == SubGraphPath("b", "c")
    assert path.trim_prefix(SubGraphPath("x")) == path
    assert path.trim_prefix(path) == SubGraphPath()


@pytest.mark.parametrize(
    "left, right, expected",
    [
        ((), (), 0),
        (("a",), ("a",), 0),
        ((), ("a",), -1),
        (("a",), (), 1),
        (("a", "b"), ("a", "c"), -1),
        (("b",), ("a", "z"), 1),
        (("a",), ("a", "b"), -1),
    ],
)
def test_subgraph_path_compare(left, right, expected):
    assert SubGraphPath(*left).compare(SubGraphPath(*right)) == expected


def test_subgraph_path_hash_and_eq():
    assert {SubGraphPath("a"), SubGraphPath("a")} == {SubGraphPath("a")}
    assert SubGraphPath("a") != SubGraphPath("b")


def test_dependency_and_edge():
    dep = Dependency(required_item=ItemRef("type2", "C"), description="needs C")
    assert dep.must_satisfy is None
    assert dep.attributes == DependencyAttributes(False, False)
    edge = Edge(ItemRef("type1", "A"), dep.required_item, dep)
    assert edge.to_item == ItemRef("type2", "C")
    assert edge.dependency.description == "needs C"


def test_item_lookup_unpacks():
    item = MockItem("A", "type1")
    item_found, state, path = ItemLookup(item, None, SubGraphPath("s"))
    assert item_found is item
    assert state is None
    assert path == SubGraphPath("s")


def test_init_args_defaults():
    args = InitArgs(name="G")
    assert args.items == []
    assert args.items_with_state == []
    assert args.subgraphs == []
    assert args.private_data is None
    iws = ItemWithState(MockItem("A", "t"))
    assert iws.state is None


def test_get_graph_root():
    root = FakeGraph("root")
    child = FakeGraph("child", root)
    nested = FakeGraph("nested", child)
    assert get_graph_root(nested) is root
    assert get_graph_root(root) is root
    assert get_graph_root(None) is None


def test_get_subgraph():
    root = FakeGraph("root")
    child = FakeGraph("SubGraph1", root)
    nested = FakeGraph("NestedSubGraph", child)
    assert get_subgraph(root, SubGraphPath().append("SubGraph1", "NestedSubGraph")) is nested
    assert get_subgraph(root, SubGraphPath()) is root
    assert get_subgraph(root, SubGraphPath("missing")) is None
    assert get_subgraph(None, SubGraphPath()) is None


def test_put_and_del_item_into_subgraph():
    root = FakeGraph("root")
    child = FakeGraph("sub", root)
    item = MockItem("B", "type1")
    assert put_item_into(root, item, None, SubGraphPath("sub")) is True
    assert reference(item) in child.items
    assert put_item_into(root, item, None, SubGraphPath("nope")) is False
    assert del_item_from(root, reference(item), SubGraphPath("nope")) is False
    assert del_item_from(root, reference(item), SubGraphPath("sub")) is True
    assert del_item_from(root, reference(item), SubGraphPath("sub")) is False