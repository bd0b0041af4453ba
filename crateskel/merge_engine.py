"""Grouping of impl blocks that apply to the same (type, trait) pair."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from crateskel.impl_policy import should_render_impl
from crateskel.item import Item
from crateskel.item_graph import ItemGraph
from crateskel.render_options import RenderOptions
from crateskel.signature import item_signature
from crateskel.type_formatter import DEFAULT_FORMATTER, TypeFormatter, split_variant

logger = logging.getLogger(__name__)

INHERENT = ("inherent",)


@dataclass(frozen=True)
class MergedImplementation:
    """One rendering unit per (target type, implemented trait) pair.

    `header` is the first impl of the group; its generics, where clause,
    unsafety and negativity are used for the rendered block.
    """

    key: tuple[Any, ...]
    impl_ids: tuple[int, ...]
    header: Item
    member_ids: tuple[int, ...]

    @property
    def is_inherent(self) -> bool:
        """Whether the group has no implemented trait."""
        return self.key[1] == INHERENT

    @property
    def trait_path(self) -> str | None:
        """The rendered path of the implemented trait."""
        trait = self.header.inner.get("trait")
        return DEFAULT_FORMATTER.path(trait) if trait else None


def impl_header(impl: Item, fmt: TypeFormatter = DEFAULT_FORMATTER) -> str:
    """Render `unsafe impl<G> !Trait for Type where P` for an impl item."""
    payload = impl.inner
    unsafe = "unsafe " if payload.get("is_unsafe") else ""
    trait = payload.get("trait")
    trait_part = ""
    if trait:
        negative = "!" if payload.get("is_negative") else ""
        trait_part = f"{negative}{fmt.path(trait)} for "
    return (
        f"{unsafe}impl{fmt.generics(impl.generics)} {trait_part}"
        f"{fmt.type(payload.get('for'))}{fmt.where_clause(impl.generics)}"
    )


def normalizing_formatter(impl: Item) -> TypeFormatter:
    """A formatter replacing the impl's own type parameters with placeholders."""
    substitutions = {}
    for index, param in enumerate(impl.generics.get("params") or []):
        kind, _ = split_variant(param["kind"])
        if kind != "lifetime":
            substitutions[param["name"]] = f"${index}"
    return TypeFormatter(substitutions)


def merge_key(impl: Item) -> tuple[Any, ...]:
    """Compute the (target identity, trait identity, negativity) key of an impl."""
    fmt = normalizing_formatter(impl)
    payload = impl.inner
    target = payload.get("for")
    if isinstance(target, dict) and "resolved_path" in target:
        path = target["resolved_path"]
        target_key: tuple[Any, ...] = (
            "id",
            path.get("id"),
            fmt.generic_args(path.get("args")),
        )
    else:
        target_key = ("type", fmt.type(target))
    trait = payload.get("trait")
    trait_key: tuple[Any, ...] = INHERENT
    if trait:
        trait_key = ("id", trait.get("id"), fmt.generic_args(trait.get("args")))
    return (target_key, trait_key, bool(payload.get("is_negative")))


def merge_implementations(
    graph: ItemGraph, impl_ids: Iterable[int], options: RenderOptions
) -> list[MergedImplementation]:
    """Group the impls of a type that pass the impl policy.

    Members are unioned by name in impl traversal order; a same-named member
    whose signature differs from the one already kept is dropped with a
    warning.
    """
    groups: dict[tuple[Any, ...], list[Item]] = {}
    seen_ids: set[int] = set()
    for impl_id in impl_ids:
        if impl_id in seen_ids:
            continue
        seen_ids.add(impl_id)
        impl = graph.require(impl_id)
        if not should_render_impl(impl.inner, options):
            continue
        groups.setdefault(merge_key(impl), []).append(impl)

    merged = [_merge_group(graph, key, impls) for key, impls in groups.items()]
    merged.sort(key=_group_sort_key)
    logger.debug("Merged %d impls into %d blocks", len(seen_ids), len(merged))
    return merged


def _merge_group(
    graph: ItemGraph, key: tuple[Any, ...], impls: list[Item]
) -> MergedImplementation:
    kept: dict[str, str | None] = {}
    member_ids: list[int] = []
    for impl in impls:
        fmt = normalizing_formatter(impl)
        for member_id in impl.inner.get("items") or []:
            if member_id in member_ids:
                continue
            member = graph.require(member_id)
            if member.name is None:
                member_ids.append(member_id)
                continue
            signature = item_signature(graph, member, fmt=fmt)
            if member.name in kept:
                if kept[member.name] != signature:
                    logger.warning(
                        "Impl %d redefines '%s' with a different signature; "
                        "keeping the first definition",
                        impl.id,
                        member.name,
                    )
                continue
            kept[member.name] = signature
            member_ids.append(member_id)
    return MergedImplementation(
        key=key,
        impl_ids=tuple(impl.id for impl in impls),
        header=impls[0],
        member_ids=tuple(member_ids),
    )


def _group_sort_key(group: MergedImplementation) -> tuple[bool, str, str, int]:
    return (
        not group.is_inherent,
        group.trait_path or "",
        impl_header(group.header),
        min(group.impl_ids),
    )
