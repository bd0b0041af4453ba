"""The immutable, id-indexed item graph."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from crateskel.errors import ItemNotFoundError
from crateskel.item import Item


@dataclass(frozen=True)
class PathSummary:
    """Entry of the rustdoc `paths` table: where an id was defined."""

    crate_id: int
    path: tuple[str, ...]
    kind: str


@dataclass(frozen=True)
class ItemGraph:
    """Arena of items indexed by integer id plus the graph-level tables."""

    items: Mapping[int, Item]
    root_id: int
    package_name: str
    paths: Mapping[int, PathSummary] = field(default_factory=dict)
    external_packages: Mapping[int, str] = field(default_factory=dict)
    crate_version: str | None = None
    format_version: int = 0
    includes_private: bool = False
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def get(self, item_id: int | None) -> Item | None:
        """Return the item for an id, or None when it is absent."""
        if item_id is None:
            return None
        return self.items.get(item_id)

    def require(self, item_id: int) -> Item:
        """Return the item for an id or raise ItemNotFoundError."""
        item = self.items.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    @property
    def root(self) -> Item:
        """The package root module."""
        return self.require(self.root_id)

    def is_local(self, item: Item) -> bool:
        """Whether the item belongs to the analyzed package."""
        return item.crate_id == self.root.crate_id
