"""Index of item names, docs, signatures and paths for substring search."""

import logging
from dataclasses import dataclass
from enum import Enum

from crateskel.container_members import field_ids, impl_ids, member_visible
from crateskel.item import Item
from crateskel.item_graph import ItemGraph
from crateskel.item_kind import ItemKind, kind_rank
from crateskel.merge_engine import merge_implementations
from crateskel.module_edges import iter_module_edges
from crateskel.path_resolver import PathTable, resolve_paths
from crateskel.render_options import RenderOptions
from crateskel.search_domain import SearchDomain
from crateskel.search_query import SearchQuery
from crateskel.signature import function_signature, item_signature

logger = logging.getLogger(__name__)


class SearchItemKind(Enum):
    """Classification of an indexed item; the value is its display label."""

    CRATE = "crate"
    MODULE = "module"
    STRUCT = "struct"
    UNION = "union"
    ENUM = "enum"
    ENUM_VARIANT = "enum variant"
    FIELD = "field"
    TRAIT = "trait"
    TRAIT_ALIAS = "trait alias"
    FUNCTION = "function"
    METHOD = "method"
    TRAIT_METHOD = "trait method"
    ASSOC_CONST = "assoc const"
    ASSOC_TYPE = "assoc type"
    CONSTANT = "constant"
    STATIC = "static"
    TYPE_ALIAS = "type alias"
    USE = "use"
    MACRO = "macro"
    PROC_MACRO = "proc macro"
    PRIMITIVE = "primitive"
    EXTERN_CRATE = "extern crate"
    EXTERN_TYPE = "extern type"

    @property
    def label(self) -> str:
        """Human-friendly label of the kind."""
        return self.value


CONTAINER_KINDS = frozenset(
    {
        SearchItemKind.CRATE,
        SearchItemKind.MODULE,
        SearchItemKind.STRUCT,
        SearchItemKind.ENUM,
        SearchItemKind.UNION,
        SearchItemKind.TRAIT,
    }
)

_KIND_MAP = {
    ItemKind.MODULE: SearchItemKind.MODULE,
    ItemKind.STRUCT: SearchItemKind.STRUCT,
    ItemKind.UNION: SearchItemKind.UNION,
    ItemKind.ENUM: SearchItemKind.ENUM,
    ItemKind.VARIANT: SearchItemKind.ENUM_VARIANT,
    ItemKind.STRUCT_FIELD: SearchItemKind.FIELD,
    ItemKind.TRAIT: SearchItemKind.TRAIT,
    ItemKind.TRAIT_ALIAS: SearchItemKind.TRAIT_ALIAS,
    ItemKind.FUNCTION: SearchItemKind.FUNCTION,
    ItemKind.TYPE_ALIAS: SearchItemKind.TYPE_ALIAS,
    ItemKind.CONSTANT: SearchItemKind.CONSTANT,
    ItemKind.STATIC: SearchItemKind.STATIC,
    ItemKind.USE: SearchItemKind.USE,
    ItemKind.MACRO: SearchItemKind.MACRO,
    ItemKind.PROC_MACRO: SearchItemKind.PROC_MACRO,
    ItemKind.PRIMITIVE: SearchItemKind.PRIMITIVE,
    ItemKind.EXTERN_CRATE: SearchItemKind.EXTERN_CRATE,
    ItemKind.EXTERN_TYPE: SearchItemKind.EXTERN_TYPE,
    ItemKind.ASSOC_CONST: SearchItemKind.ASSOC_CONST,
    ItemKind.ASSOC_TYPE: SearchItemKind.ASSOC_TYPE,
}


@dataclass(frozen=True)
class SearchEntry:
    """One indexed item at its primary path."""

    item_id: int
    kind: SearchItemKind
    path: tuple[str, ...]
    raw_name: str
    docs: str | None
    signature: str | None
    ancestors: tuple[int, ...]

    @property
    def path_string(self) -> str:
        """The path joined with `::`."""
        return "::".join(self.path)


@dataclass(frozen=True)
class SearchResult:
    """An index entry together with the domains that matched it."""

    entry: SearchEntry
    matched: SearchDomain

    @property
    def item_id(self) -> int:
        """Id of the matched item."""
        return self.entry.item_id

    @property
    def kind(self) -> SearchItemKind:
        """Kind of the matched item."""
        return self.entry.kind

    @property
    def path_string(self) -> str:
        """Path of the matched item."""
        return self.entry.path_string


class SearchIndex:
    """Ordered collection of search entries."""

    def __init__(self, entries: list[SearchEntry]) -> None:
        self._entries = list(entries)
        self._by_id = {e.item_id: e for e in self._entries}

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[SearchEntry]:
        """Entries in deterministic traversal order."""
        return list(self._entries)

    def get(self, item_id: int) -> SearchEntry | None:
        """Look up the entry for an item id."""
        return self._by_id.get(item_id)

    def search(self, query: SearchQuery) -> list[SearchResult]:
        """Return the entries matching the query in any selected domain."""
        if not query.normalized:
            return []
        results = []
        for entry in self._entries:
            matched = SearchDomain(0)
            if SearchDomain.NAME in query.domains and query.matches(entry.raw_name):
                matched |= SearchDomain.NAME
            if SearchDomain.DOC in query.domains and query.matches(entry.docs):
                matched |= SearchDomain.DOC
            if SearchDomain.PATH in query.domains and query.matches(
                entry.path_string
            ):
                matched |= SearchDomain.PATH
            if SearchDomain.SIGNATURE in query.domains and query.matches(
                entry.signature
            ):
                matched |= SearchDomain.SIGNATURE
            if matched:
                results.append(SearchResult(entry, matched))
        return results


class _IndexBuilder:
    """Depth-first walk recording each item once, at its primary path."""

    def __init__(
        self, graph: ItemGraph, options: RenderOptions, path_table: PathTable
    ) -> None:
        self.graph = graph
        self.options = options
        self.paths = path_table
        self.entries: list[SearchEntry] = []
        self.visited: set[int] = set()

    def build(self) -> list[SearchEntry]:
        root = self.graph.root
        primary = self.paths.primary(root.id)
        segments = primary.segments if primary else (self.graph.package_name,)
        self._record(root, SearchItemKind.CRATE, segments, (), is_root=True)
        self._visit_module(root, segments, (root.id,))
        return self.entries

    def _record(
        self,
        item: Item,
        kind: SearchItemKind,
        segments: tuple[str, ...],
        ancestors: tuple[int, ...],
        *,
        is_root: bool = False,
        signature: str | None = None,
    ) -> None:
        self.visited.add(item.id)
        raw_name = segments[-1]
        self.entries.append(
            SearchEntry(
                item_id=item.id,
                kind=kind,
                path=segments,
                raw_name=raw_name,
                docs=item.docs,
                signature=signature
                or item_signature(self.graph, item, is_root=is_root),
                ancestors=ancestors,
            )
        )

    def _visit_module(
        self, module: Item, segments: tuple[str, ...], ids: tuple[int, ...]
    ) -> None:
        for edge in iter_module_edges(
            self.graph, module.id, include_private=self.options.include_private
        ):
            child_id = edge.item_id
            child_segments = segments + (edge.name,)
            primary = self.paths.primary(child_id)
            if child_id in self.visited or primary is None:
                continue
            if primary.segments != child_segments:
                continue
            child = self.graph.require(child_id)
            self._visit(child, child_segments, ids)

    def _visit(
        self, item: Item, segments: tuple[str, ...], ancestors: tuple[int, ...]
    ) -> None:
        kind = _KIND_MAP.get(item.kind)
        if kind is None:
            return
        self._record(item, kind, segments, ancestors)
        ids = ancestors + (item.id,)
        if item.kind is ItemKind.MODULE:
            self._visit_module(item, segments, ids)
        elif item.kind in (ItemKind.STRUCT, ItemKind.UNION, ItemKind.VARIANT):
            self._visit_members(item, field_ids(item), segments, ids)
        elif item.kind is ItemKind.ENUM:
            self._visit_members(item, item.inner.get("variants") or [], segments, ids)
        elif item.kind is ItemKind.TRAIT:
            self._visit_trait_items(item, segments, ids)
        if item.kind in (ItemKind.STRUCT, ItemKind.UNION, ItemKind.ENUM):
            self._visit_impls(item, segments, ids)

    def _visit_members(
        self,
        parent: Item,
        member_ids: list[int],
        segments: tuple[str, ...],
        ids: tuple[int, ...],
    ) -> None:
        for member_id in member_ids:
            member = self.graph.require(member_id)
            if member.name is None or member_id in self.visited:
                continue
            if not member_visible(parent, member, self.options.include_private):
                continue
            self._visit(member, segments + (member.name,), ids)

    def _visit_trait_items(
        self, trait: Item, segments: tuple[str, ...], ids: tuple[int, ...]
    ) -> None:
        members = [self.graph.require(i) for i in trait.inner.get("items") or []]
        members.sort(key=lambda m: (kind_rank(m.kind), m.name or "", m.id))
        for member in members:
            if member.name is None or member.id in self.visited:
                continue
            if member.kind is ItemKind.FUNCTION:
                self._record(
                    member,
                    SearchItemKind.TRAIT_METHOD,
                    segments + (member.name,),
                    ids,
                    signature=function_signature(member, show_vis=False),
                )
            else:
                self._visit(member, segments + (member.name,), ids)

    def _visit_impls(
        self, item: Item, segments: tuple[str, ...], ids: tuple[int, ...]
    ) -> None:
        for group in merge_implementations(self.graph, impl_ids(item), self.options):
            impl_segments = segments
            if group.trait_path is not None:
                impl_segments = segments + (group.trait_path,)
            impl_ancestors = ids + (group.header.id,)
            for member_id in group.member_ids:
                member = self.graph.require(member_id)
                if member.name is None or member_id in self.visited:
                    continue
                if group.is_inherent and not (
                    self.options.include_private or member.is_public
                ):
                    continue
                kind = (
                    SearchItemKind.METHOD
                    if member.kind is ItemKind.FUNCTION
                    else _KIND_MAP.get(member.kind)
                )
                if kind is None:
                    continue
                self._record(
                    member, kind, impl_segments + (member.name,), impl_ancestors
                )


def build_search_index(
    graph: ItemGraph, options: RenderOptions, path_table: PathTable | None = None
) -> SearchIndex:
    """Index every visible item of the graph in deterministic order."""
    paths = path_table or resolve_paths(graph, options=options)
    entries = _IndexBuilder(graph, options, paths).build()
    logger.debug("Indexed %d items of %s", len(entries), graph.package_name)
    return SearchIndex(entries)


def entry_in_scope(
    entry: SearchEntry, prefix: tuple[str, ...], path_table: PathTable
) -> bool:
    """Check if an entry lies at or below `prefix` through any of its paths."""
    if entry.path[: len(prefix)] == prefix:
        return True
    return path_table.matches_filter(entry.item_id, prefix)
