"""Search over an item graph, rendered as a skeleton of the matches."""

import logging
from dataclasses import dataclass, field

from crateskel.build_render_selection import build_render_selection
from crateskel.frontmatter import Frontmatter, FrontmatterHit, FrontmatterSearch
from crateskel.item_graph import ItemGraph
from crateskel.path_resolver import resolve_paths
from crateskel.render_options import RenderOptions
from crateskel.render_selection import RenderSelection
from crateskel.search_domain import SearchDomain
from crateskel.search_index import SearchResult, build_search_index, entry_in_scope
from crateskel.skeleton_renderer import SkeletonRenderer, filter_segments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResponse:
    """Matches of a search plus the skeleton restricted to them."""

    results: list[SearchResult]
    rendered: str
    selection: RenderSelection = field(default_factory=RenderSelection)

    def by_domain(self) -> dict[str, list[str]]:
        """Group matched paths under the label of every domain they hit."""
        groups: dict[str, list[str]] = {}
        for domain in SearchDomain:
            paths = [r.path_string for r in self.results if domain in r.matched]
            if paths:
                groups[domain.label] = paths
        return groups


def search_skeleton(
    graph: ItemGraph,
    options: RenderOptions,
    target: str | None = None,
    start_id: int | None = None,
) -> SearchResponse:
    """Run `options.search` over the graph and render the selected items.

    An empty result yields an empty `rendered` string; callers decide how to
    report that nothing matched.
    """
    query = options.search
    if query is None:
        msg = "search_skeleton requires options.search to be set"
        raise ValueError(msg)

    path_table = resolve_paths(graph, options=options)
    index = build_search_index(graph, options, path_table)
    results = index.search(query)

    prefix = filter_segments(graph, path_table, options.filter_path, start_id)
    if prefix is not None:
        results = [r for r in results if entry_in_scope(r.entry, prefix, path_table)]

    logger.debug(
        "Query %r matched %d of %d items", query.text, len(results), len(index)
    )
    if not results:
        return SearchResponse(results=[], rendered="")

    expand = options.expand_containers
    selection = build_render_selection(index, results, expand)
    body = SkeletonRenderer(graph, options, selection, path_table).render()
    if not options.emit_header:
        return SearchResponse(results=results, rendered=body, selection=selection)

    header = Frontmatter(
        target=target or graph.package_name,
        filter_path=options.filter_path,
        include_private=options.include_private,
        auto_impls=options.include_auto_implementations,
        blanket_impls=options.include_blanket_implementations,
        search=FrontmatterSearch(
            query=query.text.strip(),
            domains=query.domains,
            case_sensitive=query.case_sensitive,
            expand_containers=expand,
            hits=tuple(FrontmatterHit(r.path_string, r.matched) for r in results),
        ),
    )
    return SearchResponse(
        results=results, rendered=header.render() + body, selection=selection
    )
