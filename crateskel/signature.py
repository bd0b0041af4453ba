"""One-line signatures of items, without bodies or doc comments."""

from typing import Any

from crateskel.item import Item
from crateskel.item_graph import ItemGraph
from crateskel.item_kind import ItemKind
from crateskel.keywords import escape_ident
from crateskel.type_formatter import DEFAULT_FORMATTER, TypeFormatter, render_abi

PROC_MACRO_ATTRIBUTES = {
    "derive": "#[proc_macro_derive]",
    "attr": "#[proc_macro_attribute]",
    "bang": "#[proc_macro]",
}


def vis_prefix(item: Item) -> str:
    """Return `pub ` for public items and nothing otherwise."""
    return "pub " if item.is_public else ""


def field_type(item: Item) -> Any:
    """The type expression of a struct field item."""
    return item.inner["value"] if "value" in item.inner else item.inner


def fn_qualifiers(header: dict[str, Any]) -> list[str]:
    """Qualifier keywords of a function header in declaration order."""
    qualifiers = []
    if header.get("is_const"):
        qualifiers.append("const")
    if header.get("is_async"):
        qualifiers.append("async")
    if header.get("is_unsafe"):
        qualifiers.append("unsafe")
    return qualifiers


def function_signature(
    item: Item, fmt: TypeFormatter = DEFAULT_FORMATTER, *, show_vis: bool = True
) -> str:
    """Render `pub const async unsafe extern "C" fn name<G>(args) -> R where ...`."""
    fn = item.inner
    sig = fn.get("sig") or fn.get("decl") or {}
    header = fn.get("header") or {}
    parts = []
    if show_vis and item.is_public:
        parts.append("pub")
    parts.extend(fn_qualifiers(header))
    abi = render_abi(header.get("abi")).strip()
    if abi:
        parts.append(abi)
    parts.append("fn")
    return (
        f"{' '.join(parts)} {escape_ident(item.name)}{fmt.generics(item.generics)}"
        f"({fmt.fn_args(sig)}){fmt.return_type(sig)}{fmt.where_clause(item.generics)}"
    )


def item_signature(
    graph: ItemGraph,
    item: Item,
    *,
    is_root: bool = False,
    fmt: TypeFormatter = DEFAULT_FORMATTER,
) -> str | None:
    """Return the one-line signature used for searching and comparing items."""
    kind = item.kind
    name = escape_ident(item.name)
    vis = vis_prefix(item)
    inner = item.inner
    generics = item.generics

    if kind is ItemKind.FUNCTION:
        return function_signature(item, fmt)
    if kind is ItemKind.STRUCT_FIELD:
        label = f"{item.name}: " if item.name else ""
        return f"{vis}{label}{fmt.type(field_type(item))}"
    if kind in (ItemKind.STRUCT, ItemKind.UNION, ItemKind.ENUM):
        return (
            f"{vis}{kind.value} {name}{fmt.generics(generics)}"
            f"{fmt.where_clause(generics)}"
        )
    if kind is ItemKind.TRAIT:
        unsafe = "unsafe " if inner.get("is_unsafe") else ""
        bounds = fmt.bounds(inner.get("bounds") or [])
        return (
            f"{vis}{unsafe}trait {name}{fmt.generics(generics)}"
            f"{': ' + bounds if bounds else ''}{fmt.where_clause(generics)}"
        )
    if kind is ItemKind.TRAIT_ALIAS:
        bounds = fmt.bounds(inner.get("params") or [])
        return (
            f"{vis}trait {name}{fmt.generics(generics)}"
            f"{' = ' + bounds if bounds else ''}{fmt.where_clause(generics)}"
        )
    if kind is ItemKind.TYPE_ALIAS:
        return (
            f"{vis}type {name}{fmt.generics(generics)}{fmt.where_clause(generics)}"
            f" = {fmt.type(inner.get('type'))}"
        )
    if kind is ItemKind.CONSTANT:
        return f"{vis}const {name}: {fmt.type(inner.get('type'))}"
    if kind is ItemKind.STATIC:
        return f"{vis}static {name}: {fmt.type(inner.get('type'))}"
    if kind is ItemKind.ASSOC_CONST:
        return f"const {name}: {fmt.type(inner.get('type'))}"
    if kind is ItemKind.ASSOC_TYPE:
        default = inner.get("type", inner.get("default"))
        if default is not None:
            return f"type {name} = {fmt.type(default)}"
        bounds = inner.get("bounds") or []
        if bounds:
            return f"type {name}: {fmt.bounds(bounds)}"
        return f"type {name}"
    if kind is ItemKind.MACRO:
        return f"macro {name}"
    if kind is ItemKind.PROC_MACRO:
        return f"{PROC_MACRO_ATTRIBUTES.get(inner.get('kind'), '#[proc_macro]')} {name}"
    if kind is ItemKind.USE:
        return use_signature(item)
    if kind is ItemKind.PRIMITIVE:
        return f"primitive {name}"
    if kind is ItemKind.MODULE:
        return name if is_root else f"{vis}mod {name}"
    if kind is ItemKind.VARIANT:
        return variant_signature(graph, item, fmt)
    if kind is ItemKind.EXTERN_CRATE:
        rename = inner.get("rename")
        return f"{vis}extern crate {inner.get('name') or name}" + (
            f" as {rename}" if rename else ""
        )
    return None


def use_signature(item: Item) -> str:
    """Render a `use` item as `pub use source as name`."""
    source = str(item.inner.get("source") or "")
    name = str(item.inner.get("name") or "")
    text = f"{vis_prefix(item)}use {source}"
    if name and name != source.split("::")[-1]:
        text += f" as {name}"
    if item.inner.get("is_glob", item.inner.get("glob")):
        text += "::*"
    return text


def variant_signature(
    graph: ItemGraph, item: Item, fmt: TypeFormatter = DEFAULT_FORMATTER
) -> str:
    """Render a variant as `Name`, `Name(T, U)` or `Name { f: T }`."""
    text = escape_ident(item.name)
    shape = item.inner.get("kind")
    if not isinstance(shape, dict):
        return text
    if "tuple" in shape:
        parts = [
            fmt.type(field_type(graph.require(f)))
            for f in shape["tuple"] or []
            if f is not None
        ]
        return f"{text}({', '.join(parts)})"
    fields = (shape.get("struct") or {}).get("fields") or []
    parts = []
    for f in fields:
        field = graph.require(f)
        parts.append(f"{field.name or '_'}: {fmt.type(field_type(field))}")
    return f"{text} {{ {', '.join(parts)} }}"
