"""Conversion of search results into a renderer selection."""

from collections.abc import Iterable

from crateskel.render_selection import RenderSelection
from crateskel.search_index import CONTAINER_KINDS, SearchIndex, SearchResult


def build_render_selection(
    index: SearchIndex, results: Iterable[SearchResult], expand_containers: bool
) -> RenderSelection:
    """Cover the matches, their ancestors and, optionally, container contents.

    `context` only ever holds ancestors of matches. With `expand_containers`,
    a matched container is expanded together with every container indexed
    below it, so their contents render without being listed one by one.
    """
    results = list(results)
    matches = {r.item_id for r in results}
    context = {a for r in results for a in r.entry.ancestors}
    expanded: set[int] = set()

    if expand_containers:
        containers = {r.item_id for r in results if r.kind in CONTAINER_KINDS}
        expanded.update(containers)
        for entry in index.entries:
            for pos, ancestor in enumerate(entry.ancestors):
                if ancestor in containers:
                    expanded.update(entry.ancestors[pos + 1 :])
                    break

    return RenderSelection(
        matches=frozenset(matches),
        context=frozenset(context),
        expanded=frozenset(expanded),
    )
