"""The closed set of item kinds found in a rustdoc item graph."""

from enum import Enum


class ItemKind(Enum):
    """Kind tag of an item; the value is the rustdoc `inner` key."""

    MODULE = "module"
    EXTERN_CRATE = "extern_crate"
    USE = "use"
    UNION = "union"
    STRUCT = "struct"
    STRUCT_FIELD = "struct_field"
    ENUM = "enum"
    VARIANT = "variant"
    FUNCTION = "function"
    TRAIT = "trait"
    TRAIT_ALIAS = "trait_alias"
    IMPL = "impl"
    TYPE_ALIAS = "type_alias"
    CONSTANT = "constant"
    STATIC = "static"
    EXTERN_TYPE = "extern_type"
    MACRO = "macro"
    PROC_MACRO = "proc_macro"
    PRIMITIVE = "primitive"
    ASSOC_CONST = "assoc_const"
    ASSOC_TYPE = "assoc_type"


# Containers come first, then declarations, then re-exports.
KIND_ORDER: tuple[ItemKind, ...] = (
    ItemKind.MODULE,
    ItemKind.STRUCT,
    ItemKind.ENUM,
    ItemKind.UNION,
    ItemKind.TRAIT,
    ItemKind.TRAIT_ALIAS,
    ItemKind.TYPE_ALIAS,
    ItemKind.CONSTANT,
    ItemKind.STATIC,
    ItemKind.ASSOC_TYPE,
    ItemKind.ASSOC_CONST,
    ItemKind.FUNCTION,
    ItemKind.MACRO,
    ItemKind.PROC_MACRO,
    ItemKind.PRIMITIVE,
    ItemKind.EXTERN_TYPE,
    ItemKind.EXTERN_CRATE,
    ItemKind.USE,
    ItemKind.VARIANT,
    ItemKind.STRUCT_FIELD,
    ItemKind.IMPL,
)

_RANK = {kind: i for i, kind in enumerate(KIND_ORDER)}


def kind_rank(kind: ItemKind) -> int:
    """Return the ordering precedence of a kind within a container."""
    return _RANK[kind]
