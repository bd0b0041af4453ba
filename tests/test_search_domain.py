"""Tests for search domains and queries."""

import pytest

from crateskel.errors import InvalidSearchDomainError
from crateskel.search_domain import (
    DEFAULT_DOMAINS,
    SearchDomain,
    describe_domains,
    parse_domains,
)
from crateskel.search_query import SearchQuery


def test_parse_domains_with_aliases() -> None:
    """Verify comma-separated tokens, aliases and whitespace handling."""
    assert parse_domains("name, sig") == SearchDomain.NAME | SearchDomain.SIGNATURE
    assert parse_domains(["docs", "paths"]) == SearchDomain.DOC | SearchDomain.PATH


@pytest.mark.parametrize("spec", [None, "", " , "])
def test_empty_spec_uses_defaults(spec) -> None:
    """Verify that nothing selected means the default domains."""
    assert parse_domains(spec) == DEFAULT_DOMAINS


def test_unknown_domain_lists_valid_tokens() -> None:
    """Verify the error for an unrecognized token."""
    with pytest.raises(InvalidSearchDomainError) as exc:
        parse_domains("name,body")
    assert exc.value.token == "body"
    assert exc.value.valid == ["name", "doc", "path", "signature"]
    assert "Valid domains: name, doc, path, signature" in str(exc.value)


def test_describe_domains_fixed_order() -> None:
    """Verify that labels come out in a stable order."""
    domains = SearchDomain.SIGNATURE | SearchDomain.NAME
    assert describe_domains(domains) == ["name", "signature"]
    assert SearchDomain.DOC.label == "doc"


def test_query_matching() -> None:
    """Verify trimming, case folding and empty inputs."""
    query = SearchQuery("  Status ")
    assert query.normalized == "status"
    assert query.matches("fn status(&self)")
    assert not query.matches(None)
    assert not SearchQuery("   ").matches("anything")

    strict = SearchQuery("Status", case_sensitive=True)
    assert not strict.matches("fn status(&self)")
    assert strict.matches("StatusCode")


def test_query_empty_domains_fall_back() -> None:
    """Verify that an empty domain set is replaced by the defaults."""
    assert SearchQuery("x", domains=SearchDomain(0)).domains == DEFAULT_DOMAINS
