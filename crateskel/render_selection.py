"""Subsets of the item graph that restrict what the renderer emits."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from crateskel.errors import FilterNotMatchedError
from crateskel.path_resolver import PathTable


@dataclass(frozen=True)
class RenderSelection:
    """Ids to render when only part of the graph is shown.

    `matches` render fully, `context` ids render as shells holding only their
    selected children, and everything below an `expanded` container renders
    in full.
    """

    matches: frozenset[int] = field(default_factory=frozenset)
    context: frozenset[int] = field(default_factory=frozenset)
    expanded: frozenset[int] = field(default_factory=frozenset)

    @property
    def selected(self) -> frozenset[int]:
        """Every id the selection names."""
        return self.matches | self.context | self.expanded

    def is_empty(self) -> bool:
        """Whether nothing was selected."""
        return not (self.matches or self.expanded)

    def shows_docs(self, item_id: int, under_expanded: bool) -> bool:
        """Context-only shells omit their documentation."""
        return under_expanded or item_id in self.matches or item_id in self.expanded

    def renders_route(self, ids: Iterable[int]) -> bool:
        """Check if a route of ids from the root is kept by the selection.

        The root is always rendered; below it each id must be selected unless
        an expanded container precedes it on the route.
        """
        under_expanded = False
        for index, item_id in enumerate(ids):
            if index == 0:
                under_expanded = item_id in self.expanded
                continue
            if not under_expanded and item_id not in self.selected:
                return False
            if item_id in self.expanded:
                under_expanded = True
        return True


def selection_for_filter(
    path_table: PathTable, filter_path: tuple[str, ...]
) -> RenderSelection:
    """Select the items whose path equals `filter_path` plus their ancestors."""
    exact = path_table.exact(filter_path)
    if not exact:
        raise FilterNotMatchedError("::".join(filter_path))
    hits = frozenset(p.item_id for p in exact)
    context = frozenset(i for p in exact for i in p.ancestors)
    return RenderSelection(matches=hits, context=context, expanded=hits)
