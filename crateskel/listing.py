"""Flat listing of indexed items as `(kind, path)` rows."""

from dataclasses import dataclass

from crateskel.item_graph import ItemGraph
from crateskel.path_resolver import resolve_paths
from crateskel.render_options import RenderOptions
from crateskel.search_index import (
    SearchEntry,
    SearchItemKind,
    build_search_index,
    entry_in_scope,
)
from crateskel.skeleton_renderer import filter_segments


@dataclass(frozen=True)
class ListItem:
    """A single listing row."""

    kind: SearchItemKind
    path: str


def list_items(
    graph: ItemGraph, options: RenderOptions, start_id: int | None = None
) -> list[ListItem]:
    """List items in index order, narrowed by the search query and filter path."""
    path_table = resolve_paths(graph, options=options)
    index = build_search_index(graph, options, path_table)

    entries: list[SearchEntry] = index.entries
    if options.search is not None and options.search.normalized:
        entries = [r.entry for r in index.search(options.search)]

    prefix = filter_segments(graph, path_table, options.filter_path, start_id)
    if prefix is not None:
        entries = [e for e in entries if entry_in_scope(e, prefix, path_table)]

    return [
        ListItem(e.kind, e.path_string)
        for e in entries
        if e.kind is not SearchItemKind.USE
    ]


def format_listing(items: list[ListItem], query: str | None = None) -> str:
    """Render rows with the kind column padded to the widest label."""
    if not items:
        if query:
            return f'No matches found for "{query}".'
        return "No items found."
    width = max(len(item.kind.label) for item in items)
    return "\n".join(f"{item.kind.label:<{width}} {item.path}" for item in items)
