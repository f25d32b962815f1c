"""Export of dependency graphs into the DOT graph description language."""

from __future__ import annotations

from typing import Any, Optional

from depgraph.api import (
    DepGraphError,
    Edge,
    Item,
    ItemRef,
    ItemState,
    SubGraphPath,
    get_subgraph,
    reference,
)

_INDENT = "\t"
_GREEN_HUE = 1.0 / 3


def escape_name(name: str) -> str:
    """Make a string usable as a DOT node or cluster identifier."""
    for char in ("-", "/", ".", ":"):
        name = name.replace(char, "_")
    return name


def escape_tooltip(tooltip: str) -> str:
    """Escape newlines and double quotes for use inside a quoted DOT attribute."""
    return tooltip.replace("\n", "\\n").replace('"', '\\"')


class DotExporter:
    """Renders a graph as DOT, optionally showing what a transition to another graph needs.

    With ``check_deps`` enabled, edges whose dependency is not satisfied are red.
    """

    def __init__(self, check_deps: bool = False) -> None:
        self.check_deps = check_deps
        self._graph: Any = None
        self._dst_graph: Any = None
        self._transition = False
        self._hue_map: dict[str, float] = {}

    def export(self, graph: Any) -> str:
        """Return the DOT description of the graph content."""
        self._graph = graph
        self._dst_graph = None
        self._transition = False
        return self._export()

    def export_transition(self, src: Any, dst: Any) -> str:
        """Export ``src`` and mark what is out of sync with ``dst``.

        Items and subgraphs present only in ``dst`` are included, drawn with
        a lower saturation and a grey border.
        """
        self._graph = src
        self._dst_graph = dst
        self._transition = True
        return self._export()

    def _export(self) -> str:
        self._hue_map = self._gen_hue_map()
        out: list[str] = ["digraph G {\n"]
        self._export_subgraph(out, SubGraphPath())
        self._export_edges(out)
        out.append("}\n")
        return "".join(out)

    def _found_in_src(self, ref: ItemRef) -> bool:
        return self._graph is not None and self._graph.item(ref) is not None

    def _export_subgraph(self, out: list[str], path: SubGraphPath) -> None:
        sub = get_subgraph(self._graph, path)
        dst_sub = get_subgraph(self._dst_graph, path) if self._transition else None
        source = sub if sub is not None else dst_sub
        if source is None:
            raise DepGraphError("no graph to export")

        indent = _INDENT * len(path)
        nested_indent = indent + _INDENT
        name = source.name
        description = source.description

        if len(path) > 0:
            out.append(f"{indent}subgraph cluster_{escape_name(name)} {{\n")

        color = "grey" if self._transition and sub is None else "black"
        out.append(f"{nested_indent}color = {color};\n")
        out.append(f'{nested_indent}label = "{name}";\n')
        out.append(f'{nested_indent}tooltip = "{escape_tooltip(description)}";\n')

        if sub is not None:
            for item, state in sub.items(False):
                self._export_item(out, item, state, False, nested_indent)
        if self._transition and dst_sub is not None:
            for item, state in dst_sub.items(False):
                if self._found_in_src(reference(item)):
                    continue
                self._export_item(out, item, state, True, nested_indent)

        if sub is not None:
            for nested in sub.subgraphs():
                self._export_subgraph(out, path.append(nested.name))
        if self._transition and dst_sub is not None:
            for nested in dst_sub.subgraphs():
                if sub is None or sub.subgraph(nested.name) is None:
                    self._export_subgraph(out, path.append(nested.name))

        if len(path) > 0:
            out.append(f"{indent}}}\n")

    def _export_item(self, out: list[str], item: Item, state: Optional[ItemState],
                     missing: bool, indent: str) -> None:
        item_err: Optional[BaseException] = None
        in_transition = False
        created = not missing
        if state is not None:
            item_err = state.with_error()
            in_transition = state.in_transition()
            created = state.is_created()

        if item.external():
            shape = "doubleoctagon"
        elif in_transition:
            shape = "cds"
        else:
            shape = "ellipse"

        if in_transition:
            color = "blue"
        elif item_err is not None:
            color = "red"
        elif not created:
            color = "grey"
        else:
            color = "black"

        saturation = 0.60 if created else 0.12
        hue = self._hue_map.get(item.item_type(), 0.0)
        fill_color = f"{hue:.3f} {saturation:.3f} 0.800"
        label = item.label() or item.name()
        tooltip = str(item)
        if item_err is not None:
            tooltip += f"\nError: {item_err}"
        out.append(
            f'{indent}{escape_name(str(reference(item)))} [color = {color}, '
            f'fillcolor = "{fill_color}", shape = {shape}, style = filled, '
            f'tooltip = "{escape_tooltip(tooltip)}", label = "{label}"];\n')

    def _export_edges(self, out: list[str]) -> None:
        # Items not in any graph but with edges pointing to them.
        missing: dict[ItemRef, None] = {}
        if self._graph is not None:
            for item, _ in self._graph.items(True):
                for edge in self._graph.outgoing_edges(reference(item)):
                    self._export_edge(out, edge, missing)
        if self._transition and self._dst_graph is not None:
            for item, _ in self._dst_graph.items(True):
                ref = reference(item)
                if self._found_in_src(ref):
                    continue
                for edge in self._dst_graph.outgoing_edges(ref):
                    self._export_edge(out, edge, missing)

        for ref in missing:
            out.append(
                f'{_INDENT}{escape_name(str(ref))} [color = grey, shape = ellipse, '
                f'style = dashed, tooltip = "<missing>", label = "{ref}"];\n')

    def _export_edge(self, out: list[str], edge: Edge,
                     missing: dict[ItemRef, None]) -> None:
        missing_target = True
        if self._graph is not None:
            missing_target = self._graph.item(edge.to_item) is None
            if missing_target and self._transition and self._dst_graph is not None:
                missing_target = self._dst_graph.item(edge.to_item) is None
        if missing_target:
            missing[edge.to_item] = None

        if not self.check_deps or self._is_dep_satisfied(edge):
            color = "black"
        else:
            color = "red"
        out.append(
            f"{_INDENT}{escape_name(str(edge.from_item))} -> "
            f"{escape_name(str(edge.to_item))} [color = {color}, "
            f'tooltip = "{escape_tooltip(edge.dependency.description)}"];\n')

    def _gen_hue_map(self) -> dict[str, float]:
        """Assign each item type a distinct hue between green and blue."""
        item_types: set[str] = set()
        if self._graph is not None:
            item_types.update(item.item_type() for item, _ in self._graph.items(True))
        if self._transition and self._dst_graph is not None:
            item_types.update(
                item.item_type() for item, _ in self._dst_graph.items(True))
        ordered = sorted(item_types)
        grade_inc = (1.0 / 3) / (len(ordered) + 1)
        return {item_type: _GREEN_HUE + grade_inc * position
                for position, item_type in enumerate(ordered, start=1)}

    def _is_dep_satisfied(self, edge: Edge) -> bool:
        if self._graph is None:
            return False
        found = self._graph.item(edge.to_item)
        if found is None:
            return False
        if found.state is not None and not found.state.is_created():
            return False
        must_satisfy = edge.dependency.must_satisfy
        if must_satisfy is not None and not must_satisfy(found.item):
            return False
        return True