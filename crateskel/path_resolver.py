"""Computation of every canonical path by which an item is reachable."""

import logging
from collections import deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from crateskel.container_members import impl_ids, member_ids, member_visible
from crateskel.item import Item
from crateskel.item_graph import ItemGraph
from crateskel.item_kind import ItemKind
from crateskel.merge_engine import merge_implementations
from crateskel.module_edges import ModuleEdge, iter_module_edges
from crateskel.render_options import RenderOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemPath:
    """A route from the package root to an item.

    `ids` holds the item ids along the route, root first and the terminal
    item last; alias segments carry the id of the item they resolve to.
    Members of impl blocks also carry the impl id, which shares the trait
    segment of a trait impl and has no segment of its own in an inherent one.
    """

    segments: tuple[str, ...]
    ids: tuple[int, ...]
    kind: ItemKind
    crate_id: int = 0

    @property
    def item_id(self) -> int:
        """The terminal item id."""
        return self.ids[-1]

    @property
    def ancestors(self) -> tuple[int, ...]:
        """Ids of the containers enclosing the terminal item."""
        return self.ids[:-1]

    def joined(self) -> str:
        """Render the path with `::` separators."""
        return "::".join(self.segments)

    def sort_key(self) -> tuple[int, tuple[str, ...]]:
        """Shortest first, then lexicographic by segment."""
        return (len(self.segments), self.segments)

    def has_prefix(self, prefix: tuple[str, ...]) -> bool:
        """Check if `prefix` is a segment-wise prefix of this path."""
        return self.segments[: len(prefix)] == prefix


def split_path(path: str) -> tuple[str, ...]:
    """Split a `::` separated path into segments."""
    return tuple(s for s in path.strip().split("::") if s)


class PathTable:
    """Read-only map from item id to the ordered set of its paths."""

    def __init__(self, paths: dict[int, list[ItemPath]]) -> None:
        self._paths = {
            item_id: sorted(set(found), key=ItemPath.sort_key)
            for item_id, found in paths.items()
        }

    def __contains__(self, item_id: int) -> bool:
        return item_id in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def ids(self) -> Iterator[int]:
        """Iterate the ids that have at least one path."""
        return iter(self._paths)

    def paths_for(self, item_id: int) -> list[ItemPath]:
        """All paths of an item, primary first."""
        return list(self._paths.get(item_id, ()))

    def primary(self, item_id: int) -> ItemPath | None:
        """The shortest path of an item, ties broken lexicographically."""
        found = self._paths.get(item_id)
        return found[0] if found else None

    def matches_filter(self, item_id: int, filter_path: tuple[str, ...]) -> bool:
        """Check if any path of the item lies at or below `filter_path`."""
        return any(p.has_prefix(filter_path) for p in self._paths.get(item_id, ()))

    def covers(self, prefix: tuple[str, ...]) -> bool:
        """Check if any recorded path lies at or below `prefix`."""
        return any(
            p.has_prefix(prefix) for paths in self._paths.values() for p in paths
        )

    def exact(self, filter_path: tuple[str, ...]) -> list[ItemPath]:
        """Return every path equal to `filter_path`, ordered by item id."""
        found = [
            p
            for paths in self._paths.values()
            for p in paths
            if p.segments == filter_path
        ]
        return sorted(found, key=lambda p: p.item_id)


def resolve_paths(
    graph: ItemGraph,
    *,
    include_private: bool = False,
    root_name: str | None = None,
    options: RenderOptions | None = None,
) -> PathTable:
    """Walk modules breadth-first from the root and record every path.

    `options` decides which impl blocks contribute member paths; without it
    the default impl policy applies with the given `include_private`.
    """
    options = options or RenderOptions(include_private=include_private)
    include_private = options.include_private
    root = graph.root
    found: dict[int, list[ItemPath]] = {}
    edge_cache: dict[int, list[ModuleEdge]] = {}

    def record(path: ItemPath) -> None:
        found.setdefault(path.item_id, []).append(path)

    root_path = ItemPath(
        (root_name or graph.package_name,), (root.id,), ItemKind.MODULE, root.crate_id
    )
    record(root_path)
    queue: deque[ItemPath] = deque([root_path])
    expanded: set[tuple[int, tuple[str, ...]]] = set()

    while queue:
        current = queue.popleft()
        module_id = current.item_id
        if (module_id, current.segments) in expanded:
            continue
        expanded.add((module_id, current.segments))

        if module_id not in edge_cache:
            edge_cache[module_id] = iter_module_edges(
                graph, module_id, include_private=include_private
            )
        for edge in edge_cache[module_id]:
            item = graph.require(edge.item_id)
            path = ItemPath(
                current.segments + (edge.name,),
                current.ids + (edge.item_id,),
                edge.kind,
                item.crate_id,
            )
            record(path)
            if edge.target_id is None:
                continue
            if item.kind is ItemKind.MODULE:
                # a module already on this route is recorded but not re-entered
                if item.id not in current.ids:
                    queue.append(path)
            else:
                _record_members(graph, item, path, include_private, record)
                _record_impl_members(graph, item, path, options, record)

    logger.debug("Resolved paths for %d items", len(found))
    return PathTable(found)


def _record_members(
    graph: ItemGraph,
    item: Item,
    path: ItemPath,
    include_private: bool,
    record: Callable[[ItemPath], None],
) -> None:
    """Record paths for fields, variants and trait items below a container."""
    for member_id in member_ids(item):
        member = graph.require(member_id)
        if member.name is None:
            continue
        if not member_visible(item, member, include_private):
            continue
        member_path = ItemPath(
            path.segments + (member.name,),
            path.ids + (member_id,),
            member.kind,
            member.crate_id,
        )
        record(member_path)
        if member.kind is ItemKind.VARIANT:
            _record_members(graph, member, member_path, include_private, record)


def _record_impl_members(
    graph: ItemGraph,
    item: Item,
    path: ItemPath,
    options: RenderOptions,
    record: Callable[[ItemPath], None],
) -> None:
    """Record `Type::member` and `Type::Trait::member` paths of merged impls."""
    for group in merge_implementations(graph, impl_ids(item), options):
        segments = path.segments
        if group.trait_path is not None:
            segments = segments + (group.trait_path,)
        ids = path.ids + (group.header.id,)
        for member_id in group.member_ids:
            member = graph.require(member_id)
            if member.name is None:
                continue
            if group.is_inherent and not (options.include_private or member.is_public):
                continue
            record(
                ItemPath(
                    segments + (member.name,),
                    ids + (member_id,),
                    member.kind,
                    member.crate_id,
                )
            )
