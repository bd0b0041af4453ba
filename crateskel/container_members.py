"""Accessors for the child ids declared inside container items."""

from crateskel.item import Item
from crateskel.item_kind import ItemKind


def field_ids(item: Item) -> list[int]:
    """Return the field ids of a struct, union or variant, skipping stripped ones."""
    if item.kind is ItemKind.UNION:
        return list(item.inner.get("fields") or [])
    shape = item.inner.get("kind")
    if not isinstance(shape, dict):
        return []  # unit struct or plain variant
    if "tuple" in shape:
        return [f for f in shape["tuple"] or [] if f is not None]
    if "plain" in shape:
        return list(shape["plain"].get("fields") or [])
    if "struct" in shape:
        return list(shape["struct"].get("fields") or [])
    return []


def has_stripped_fields(item: Item) -> bool:
    """Whether some fields are hidden from the graph."""
    if item.kind is ItemKind.UNION:
        return bool(item.inner.get("has_stripped_fields"))
    shape = item.inner.get("kind")
    if not isinstance(shape, dict):
        return False
    if "tuple" in shape:
        return any(f is None for f in shape["tuple"] or [])
    payload = shape.get("plain") or shape.get("struct") or {}
    return bool(payload.get("has_stripped_fields"))


def member_ids(item: Item) -> list[int]:
    """Return the ids declared directly inside a container item."""
    if item.kind in (ItemKind.STRUCT, ItemKind.UNION, ItemKind.VARIANT):
        return field_ids(item)
    if item.kind is ItemKind.ENUM:
        return list(item.inner.get("variants") or [])
    if item.kind is ItemKind.TRAIT:
        return list(item.inner.get("items") or [])
    return []


def impl_ids(item: Item) -> list[int]:
    """Return the impl block ids attached to a type."""
    if item.kind in (ItemKind.STRUCT, ItemKind.ENUM, ItemKind.UNION):
        return list(item.inner.get("impls") or [])
    return []


def member_visible(parent: Item, member: Item, include_private: bool) -> bool:
    """Check if a member declared inside `parent` is part of the interface.

    Variants, variant fields and trait items inherit their container's
    visibility; struct and union fields need an explicit `pub`.
    """
    if include_private or member.is_public:
        return True
    return parent.kind in (ItemKind.ENUM, ItemKind.VARIANT, ItemKind.TRAIT)
