"""Tests for rendering search results as skeletons."""

import pytest

from crateskel.errors import FilterNotMatchedError
from crateskel.frontmatter import BANNER
from crateskel.render_options import RenderOptions
from crateskel.search_domain import SearchDomain
from crateskel.search_query import SearchQuery
from crateskel.search_skeleton import search_skeleton

NAME_SIG = SearchDomain.NAME | SearchDomain.SIGNATURE


def options_for(query: SearchQuery, **kw) -> RenderOptions:
    return RenderOptions(search=query, **kw)


def test_method_match_renders_owner_shell(demo_graph) -> None:
    """Verify that a matched method appears inside its type and impl only."""
    query = SearchQuery("status", domains=NAME_SIG)
    response = search_skeleton(demo_graph, options_for(query, emit_header=False))
    out = response.rendered
    assert [r.path_string for r in response.results] == ["demo::Size::status"]
    assert "    impl Size {\n        /// Return the area.\n" in out
    assert "pub fn status(&self) -> u16 {}" in out
    assert "rows" not in out
    assert "connect" not in out
    assert "A terminal size." not in out


def test_header_lists_query_and_hits(demo_graph) -> None:
    """Verify the search section of the header."""
    query = SearchQuery("status", domains=NAME_SIG)
    response = search_skeleton(demo_graph, options_for(query), target="demo")
    assert response.rendered.startswith(
        f"{BANNER}\n"
        "// settings: target=demo, visibility=public, "
        "auto_impls=false, blanket_impls=false\n"
        "\n"
        '// search: query="status"; case_sensitive=false; '
        "domains=name, signature; expand_containers=true\n"
        "// hits (1):\n"
        "//   - demo::Size::status [name, signature]\n"
        "\n"
        "pub mod demo {"
    )


def test_direct_match_only_module_shell(demo_graph) -> None:
    """Verify that a direct module match renders without its children."""
    query = SearchQuery("net", domains=SearchDomain.NAME)
    options = options_for(query, emit_header=False, direct_match_only=True)
    out = search_skeleton(demo_graph, options).rendered
    assert out == (
        "pub mod demo {\n"
        "    pub mod net {\n"
        "        //! Networking.\n"
        "    }\n"
        "}\n"
    )


def test_module_match_expands_contents(demo_graph) -> None:
    """Verify that a matched module shows its full contents by default."""
    query = SearchQuery("net", domains=SearchDomain.NAME)
    out = search_skeleton(demo_graph, options_for(query, emit_header=False)).rendered
    assert "        pub struct Socket;\n" in out
    assert "        pub fn open() {}\n" in out
    assert "pub_api" not in out


def test_no_results_renders_nothing(demo_graph) -> None:
    """Verify that an unmatched query returns an empty response."""
    response = search_skeleton(demo_graph, options_for(SearchQuery("zzz")))
    assert response.results == []
    assert response.rendered == ""


def test_filter_narrows_results(demo_graph) -> None:
    """Verify that results outside the filter path are dropped."""
    query = SearchQuery("o")
    options = options_for(query, emit_header=False, filter_path="net")
    response = search_skeleton(demo_graph, options)
    assert {r.path_string for r in response.results} <= {
        "demo::net",
        "demo::net::Socket",
        "demo::net::open",
    }
    assert response.results


def test_results_grouped_by_domain(demo_graph) -> None:
    """Verify the per-domain summary of matches."""
    response = search_skeleton(demo_graph, options_for(SearchQuery("status")))
    assert response.by_domain() == {
        "name": ["demo::Size::status"],
        "doc": ["demo::connect"],
        "signature": ["demo::Size::status"],
    }


def test_requires_query(demo_graph) -> None:
    """Verify that calling without a query is a programming error."""
    with pytest.raises(ValueError):
        search_skeleton(demo_graph, RenderOptions())


def test_unmatched_filter_is_an_error(demo_graph) -> None:
    """Verify that a filter matching no path fails instead of finding nothing."""
    options = options_for(SearchQuery("o"), filter_path="Missing")
    with pytest.raises(FilterNotMatchedError):
        search_skeleton(demo_graph, options)


def test_filter_on_method_path(demo_graph) -> None:
    """Verify that a method path narrows search results to that method."""
    options = options_for(
        SearchQuery("s"), emit_header=False, filter_path="Size::status"
    )
    response = search_skeleton(demo_graph, options)
    assert [r.path_string for r in response.results] == ["demo::Size::status"]
