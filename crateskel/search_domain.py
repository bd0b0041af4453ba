"""Search domains selectable for a query."""

from collections.abc import Iterable
from enum import Flag, auto

from crateskel.errors import InvalidSearchDomainError


class SearchDomain(Flag):
    """Which indexed strings a query is matched against."""

    NAME = auto()
    DOC = auto()
    PATH = auto()
    SIGNATURE = auto()

    @property
    def label(self) -> str:
        """Label used in frontmatter and hit summaries."""
        return _LABELS[self]


DEFAULT_DOMAINS = SearchDomain.NAME | SearchDomain.DOC | SearchDomain.SIGNATURE

_LABELS = {
    SearchDomain.NAME: "name",
    SearchDomain.DOC: "doc",
    SearchDomain.PATH: "path",
    SearchDomain.SIGNATURE: "signature",
}

_TOKENS = {
    "name": SearchDomain.NAME,
    "names": SearchDomain.NAME,
    "doc": SearchDomain.DOC,
    "docs": SearchDomain.DOC,
    "path": SearchDomain.PATH,
    "paths": SearchDomain.PATH,
    "signature": SearchDomain.SIGNATURE,
    "signatures": SearchDomain.SIGNATURE,
    "sig": SearchDomain.SIGNATURE,
}


def parse_domains(spec: str | Iterable[str] | None) -> SearchDomain:
    """Parse comma-separated domain tokens into a SearchDomain set.

    An empty or missing specification selects the default domains.
    """
    if spec is None:
        return DEFAULT_DOMAINS
    tokens = spec.split(",") if isinstance(spec, str) else list(spec)
    domains = SearchDomain(0)
    for raw in tokens:
        token = raw.strip().lower()
        if not token:
            continue
        if token not in _TOKENS:
            raise InvalidSearchDomainError(raw.strip(), list(_LABELS.values()))
        domains |= _TOKENS[token]
    return domains or DEFAULT_DOMAINS


def describe_domains(domains: SearchDomain) -> list[str]:
    """Return the labels of the selected domains in a fixed order."""
    return [label for domain, label in _LABELS.items() if domain in domains]
