"""Data models for representing rustdoc items."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from crateskel.item_kind import ItemKind


class Visibility(Enum):
    """Declared visibility of an item."""

    PUBLIC = "public"
    DEFAULT = "default"  # inherited: private, or public through an enum or trait
    CRATE = "crate"
    RESTRICTED = "restricted"


@dataclass(frozen=True)
class Item:
    """A single item of the graph with its kind-specific payload."""

    id: int
    kind: ItemKind
    name: str | None
    visibility: Visibility
    docs: str | None
    crate_id: int = 0
    attrs: list[str] = field(default_factory=list)
    deprecation: dict[str, Any] | None = None
    inner: dict[str, Any] = field(default_factory=dict)  # payload under inner[kind]

    @property
    def is_public(self) -> bool:
        """Whether the item renders with a `pub` qualifier."""
        return self.visibility is Visibility.PUBLIC

    @property
    def generics(self) -> dict[str, Any]:
        """Generic parameters and where predicates, empty for non-generic kinds."""
        return self.inner.get("generics") or {"params": [], "where_predicates": []}
