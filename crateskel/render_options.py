"""Options controlling what the renderer, search and listing emit."""

from dataclasses import dataclass, replace
from typing import Any

from crateskel.load_config import DEFAULT_CONFIG
from crateskel.search_query import SearchQuery

DEFAULT_FILTERED_TRAITS = frozenset(DEFAULT_CONFIG["rendering"]["filtered_traits"])
DEFAULT_EMITTED_ATTRIBUTES = tuple(DEFAULT_CONFIG["rendering"]["emitted_attributes"])


@dataclass(frozen=True)
class RenderOptions:
    """The configuration surface consumed by the core."""

    include_private: bool = False
    include_auto_implementations: bool = False
    include_blanket_implementations: bool = False
    filter_path: str | None = None
    search: SearchQuery | None = None
    direct_match_only: bool = False
    list_mode: bool = False
    emit_header: bool = True
    filtered_traits: frozenset[str] = DEFAULT_FILTERED_TRAITS
    emitted_attributes: tuple[str, ...] = DEFAULT_EMITTED_ATTRIBUTES
    indent: int = 4

    @classmethod
    def from_config(cls, config: dict[str, Any], **overrides: Any) -> "RenderOptions":
        """Build options from a loaded configuration plus explicit overrides."""
        rendering = config.get("rendering") or {}
        options = cls(
            filtered_traits=frozenset(
                rendering.get("filtered_traits", DEFAULT_FILTERED_TRAITS)
            ),
            emitted_attributes=tuple(
                rendering.get("emitted_attributes", DEFAULT_EMITTED_ATTRIBUTES)
            ),
            indent=int(rendering.get("indent", 4)),
        )
        return replace(options, **overrides)

    @property
    def expand_containers(self) -> bool:
        """Whether container hits show their full contents."""
        if self.direct_match_only:
            return False
        return not (self.search is not None and self.search.direct_match_only)
