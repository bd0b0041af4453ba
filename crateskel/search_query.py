"""Query parameters for searching an item graph."""

from dataclasses import dataclass

from crateskel.search_domain import DEFAULT_DOMAINS, SearchDomain


@dataclass(frozen=True)
class SearchQuery:
    """A substring query over one or more search domains."""

    text: str
    domains: SearchDomain = DEFAULT_DOMAINS
    case_sensitive: bool = False
    direct_match_only: bool = False

    def __post_init__(self) -> None:
        if not self.domains:
            object.__setattr__(self, "domains", DEFAULT_DOMAINS)

    @property
    def normalized(self) -> str:
        """The trimmed query, lower-cased unless matching is case sensitive."""
        trimmed = self.text.strip()
        return trimmed if self.case_sensitive else trimmed.lower()

    def matches(self, haystack: str | None) -> bool:
        """Check if the query occurs in `haystack`."""
        needle = self.normalized
        if not needle or not haystack:
            return False
        if not self.case_sensitive:
            haystack = haystack.lower()
        return needle in haystack
