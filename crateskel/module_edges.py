"""Enumeration of a module's named children, including re-exports."""

from dataclasses import dataclass

from crateskel.errors import GraphError
from crateskel.item_graph import ItemGraph
from crateskel.item_kind import ItemKind, kind_rank


@dataclass(frozen=True)
class ModuleEdge:
    """A named route from a module to a child item.

    `target_id` is None for re-exports that cannot be followed inside the
    graph and for private imports; those render from the `use` item itself.
    """

    name: str
    kind: ItemKind
    target_id: int | None
    use_id: int | None = None
    is_glob: bool = False
    is_reexport: bool = True

    @property
    def item_id(self) -> int:
        """The id this edge renders from: the target, or the `use` item."""
        if self.target_id is not None:
            return self.target_id
        if self.use_id is None:
            msg = f"Edge '{self.name}' has neither a target nor a use item"
            raise GraphError(msg)
        return self.use_id


def iter_module_edges(
    graph: ItemGraph, module_id: int, *, include_private: bool = False
) -> list[ModuleEdge]:
    """Return the module's visible edges in deterministic order."""
    edges = _collect(graph, module_id, include_private, frozenset({module_id}))
    seen: set[tuple[str, int]] = set()
    result = []
    for edge in sorted(edges, key=_edge_sort_key):
        if edge.target_id is not None:
            key = (edge.name, edge.target_id)
            if key in seen:
                continue
            seen.add(key)
        result.append(edge)
    return result


def _edge_sort_key(edge: ModuleEdge) -> tuple[int, str, int, int]:
    return (
        kind_rank(edge.kind),
        edge.name,
        -1 if edge.target_id is None else edge.target_id,
        -1 if edge.use_id is None else edge.use_id,
    )


def _collect(
    graph: ItemGraph,
    module_id: int,
    include_private: bool,
    glob_chain: frozenset[int],
) -> list[ModuleEdge]:
    module = graph.require(module_id)
    edges: list[ModuleEdge] = []
    for child_id in module.inner.get("items") or []:
        child = graph.require(child_id)
        if child.kind is ItemKind.IMPL:
            continue
        if child.kind is ItemKind.USE:
            edges.extend(_use_edges(graph, child_id, include_private, glob_chain))
            continue
        if child.name is None:
            continue
        if include_private or child.is_public:
            edges.append(ModuleEdge(child.name, child.kind, child_id))
    return edges


def _use_edges(
    graph: ItemGraph,
    use_id: int,
    include_private: bool,
    glob_chain: frozenset[int],
) -> list[ModuleEdge]:
    """Resolve a `use` item into the edges it contributes."""
    use = graph.require(use_id)
    payload = use.inner
    name = str(payload.get("name") or use.name or "")
    is_glob = bool(payload.get("is_glob", payload.get("glob")))

    if not use.is_public:
        if not include_private:
            return []
        return [
            ModuleEdge(
                name, ItemKind.USE, None, use_id, is_glob=is_glob, is_reexport=False
            )
        ]

    target = graph.get(payload.get("id"))
    if is_glob:
        if (
            target is not None
            and target.kind is ItemKind.MODULE
            and target.id not in glob_chain
        ):
            return _collect(graph, target.id, False, glob_chain | {target.id})
        return [ModuleEdge(name, ItemKind.USE, None, use_id, is_glob=True)]
    if target is None:
        return [ModuleEdge(name, ItemKind.USE, None, use_id)]
    return [ModuleEdge(name, target.kind, target.id, use_id)]
