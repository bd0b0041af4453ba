"""Rendering of an item graph into a body-free Rust skeleton."""

import logging
import re
from typing import Any

from crateskel.container_members import (
    field_ids,
    has_stripped_fields,
    impl_ids,
    member_visible,
)
from crateskel.errors import (
    FilterNotMatchedError,
    ItemNotFoundError,
    RenderError,
    SkeletonError,
)
from crateskel.frontmatter import Frontmatter
from crateskel.item import Item
from crateskel.item_graph import ItemGraph
from crateskel.item_kind import ItemKind, kind_rank
from crateskel.keywords import escape_ident
from crateskel.merge_engine import impl_header, merge_implementations
from crateskel.module_edges import ModuleEdge, iter_module_edges
from crateskel.path_resolver import ItemPath, PathTable, resolve_paths, split_path
from crateskel.render_options import RenderOptions
from crateskel.render_selection import RenderSelection, selection_for_filter
from crateskel.signature import (
    field_type,
    function_signature,
    use_signature,
    variant_signature,
    vis_prefix,
)
from crateskel.type_formatter import DEFAULT_FORMATTER

logger = logging.getLogger(__name__)

ATTR_NAME_RE = re.compile(r"#!?\[\s*([A-Za-z_][\w:]*)")

PROC_MACRO_TOKEN_STREAM = "proc_macro::TokenStream"

Lines = list[str]


class SkeletonRenderer:
    """Emits the declarations of a graph, optionally restricted by a selection.

    Every item is declared once, at the shortest rendered path that reaches
    it; other rendered locations re-export that declaration with `pub use`.
    """

    def __init__(
        self,
        graph: ItemGraph,
        options: RenderOptions,
        selection: RenderSelection | None = None,
        path_table: PathTable | None = None,
    ) -> None:
        self.graph = graph
        self.options = options
        self.selection = selection
        self.paths = path_table or resolve_paths(graph, options=options)
        self.fmt = DEFAULT_FORMATTER
        self._pad = " " * options.indent
        self._canonical = self._canonical_locations()

    def render(self) -> str:
        """Render the whole graph starting at the package root."""
        root = self.graph.root
        primary = self.paths.primary(root.id)
        segments = primary.segments if primary else (self.graph.package_name,)
        under = self.selection is None or root.id in self.selection.expanded
        lines = self._module(root, (root.id,), segments, under, force_pub=True)
        return "\n".join(lines) + "\n"

    # Locations

    def _canonical_locations(self) -> dict[int, tuple[str, ...]]:
        """Pick the declaration site of every item among the rendered paths."""
        every = sorted(
            (p for i in self.paths.ids() for p in self.paths.paths_for(i)),
            key=ItemPath.sort_key,
        )
        canonical: dict[int, tuple[str, ...]] = {}
        for path in every:
            if path.item_id in canonical:
                continue
            if self.selection is not None and not self.selection.renders_route(
                path.ids
            ):
                continue
            if all(
                canonical.get(ancestor) == path.segments[: depth + 1]
                for depth, ancestor in enumerate(path.ancestors)
            ):
                canonical[path.item_id] = path.segments
        return canonical

    def _keeps(self, item_id: int, under: bool) -> bool:
        return under or self.selection is None or item_id in self.selection.selected

    def _expands(self, item_id: int, under: bool) -> bool:
        return under or (
            self.selection is not None and item_id in self.selection.expanded
        )

    def _shows_docs(self, item_id: int, under: bool) -> bool:
        if self.selection is None:
            return True
        return self.selection.shows_docs(item_id, under)

    # Layout helpers

    def _indent(self, lines: Lines) -> Lines:
        return [f"{self._pad}{line}" if line else "" for line in lines]

    @staticmethod
    def _join(blocks: list[Lines]) -> Lines:
        out: Lines = []
        for block in blocks:
            if not block:
                continue
            if out:
                out.append("")
            out.extend(block)
        return out

    @staticmethod
    def _doc_lines(docs: str | None, marker: str = "///") -> Lines:
        if not docs:
            return []
        return [f"{marker} {line}" if line else marker for line in docs.splitlines()]

    def _prelude(self, item: Item, show_docs: bool) -> Lines:
        """Doc comment and attributes preceding a declaration."""
        lines = self._doc_lines(item.docs) if show_docs else []
        for attr in item.attrs:
            m = ATTR_NAME_RE.match(attr.strip())
            if m and m.group(1) in self.options.emitted_attributes:
                lines.append(attr.strip())
        if item.deprecation is not None:
            lines.append(_deprecated_attr(item.deprecation))
        return lines

    # Dispatch

    def _item(
        self, item: Item, ids: tuple[int, ...], segments: tuple[str, ...], under: bool
    ) -> Lines:
        try:
            return self._dispatch(item, ids, segments, under)
        except SkeletonError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise RenderError(item.id, item.kind.value, str(e)) from e

    def _dispatch(
        self, item: Item, ids: tuple[int, ...], segments: tuple[str, ...], under: bool
    ) -> Lines:
        kind = item.kind
        show_docs = self._shows_docs(item.id, under)
        if kind is ItemKind.MODULE:
            return self._module(item, ids, segments, under)
        if kind in (ItemKind.STRUCT, ItemKind.UNION):
            return self._struct(item, under)
        if kind is ItemKind.ENUM:
            return self._enum(item, under)
        if kind is ItemKind.TRAIT:
            return self._trait(item, under)

        lines = self._prelude(item, show_docs)
        if kind is ItemKind.FUNCTION:
            return lines + [self._function(item)]
        if kind is ItemKind.TYPE_ALIAS:
            return lines + [self._type_alias(item)]
        if kind is ItemKind.TRAIT_ALIAS:
            return lines + [self._trait_alias(item)]
        if kind is ItemKind.CONSTANT:
            return lines + [self._constant(item)]
        if kind is ItemKind.STATIC:
            return lines + [self._static(item)]
        if kind is ItemKind.MACRO:
            return lines + self._macro(item)
        if kind is ItemKind.PROC_MACRO:
            return lines + self._proc_macro(item)
        if kind is ItemKind.PRIMITIVE:
            return lines + [f"// primitive: {item.name}"]
        if kind is ItemKind.EXTERN_CRATE:
            return lines + [self._extern_crate(item)]
        if kind is ItemKind.EXTERN_TYPE:
            name = escape_ident(item.name)
            return lines + [f"extern {{ {vis_prefix(item)}type {name}; }}"]
        if kind is ItemKind.USE:
            return lines + [f"{use_signature(item)};"]
        return []

    # Modules

    def _module(
        self,
        module: Item,
        ids: tuple[int, ...],
        segments: tuple[str, ...],
        under: bool,
        *,
        force_pub: bool = False,
    ) -> Lines:
        vis = "pub " if force_pub else vis_prefix(module)
        blocks: list[Lines] = []
        if self._shows_docs(module.id, under):
            blocks.append(self._doc_lines(module.docs, "//!"))
        for edge in iter_module_edges(
            self.graph, module.id, include_private=self.options.include_private
        ):
            if not self._keeps(edge.item_id, under):
                continue
            blocks.append(self._edge(edge, ids, segments, under))
        body = self._join(blocks)
        name = escape_ident(segments[-1] if force_pub else module.name)
        if not body:
            return [f"{vis}mod {name} {{}}"]
        return [f"{vis}mod {name} {{", *self._indent(body), "}"]

    def _edge(
        self,
        edge: ModuleEdge,
        ids: tuple[int, ...],
        segments: tuple[str, ...],
        under: bool,
    ) -> Lines:
        child_ids = ids + (edge.item_id,)
        child_segments = segments + (edge.name,)
        child_under = self._expands(edge.item_id, under)
        if edge.target_id is None:
            use = self.graph.require(edge.item_id)
            return self._item(use, child_ids, child_segments, child_under)
        canonical = self._canonical.get(edge.target_id)
        if canonical is not None and canonical != child_segments:
            return [self._reexport(canonical, edge.name)]
        item = self.graph.require(edge.target_id)
        return self._item(item, child_ids, child_segments, child_under)

    @staticmethod
    def _reexport(canonical: tuple[str, ...], name: str) -> str:
        path = "::".join(["crate", *(escape_ident(s) for s in canonical[1:])])
        alias = f" as {escape_ident(name)}" if name != canonical[-1] else ""
        return f"pub use {path}{alias};"

    # Types

    def _struct(self, item: Item, under: bool) -> Lines:
        generics = self.fmt.generics(item.generics)
        where = self.fmt.where_clause(item.generics)
        name = escape_ident(item.name)
        head = f"{vis_prefix(item)}{item.kind.value} {name}{generics}"
        lines = self._prelude(item, self._shows_docs(item.id, under))
        shape = item.inner.get("kind")

        if item.kind is ItemKind.STRUCT and not isinstance(shape, dict):
            lines.append(f"{head}{where};")
        elif item.kind is ItemKind.STRUCT and "tuple" in shape:
            lines.append(f"{head}({self._tuple_fields(item, shape['tuple'])}){where};")
        else:
            body: Lines = []
            omitted = has_stripped_fields(item)
            for field_id in field_ids(item):
                field = self.graph.require(field_id)
                if not member_visible(item, field, self.options.include_private):
                    omitted = True
                    continue
                if not self._keeps(field_id, under):
                    continue
                body.extend(self._prelude(field, self._shows_docs(field_id, under)))
                body.append(
                    f"{vis_prefix(field)}{escape_ident(field.name)}: "
                    f"{self.fmt.type(field_type(field))},"
                )
            if omitted:
                body.append("// some fields omitted")
            lines.append(f"{head}{where} {{")
            lines.extend(self._indent(body))
            lines.append("}")
        return self._join([lines, *self._impl_blocks(item, under)])

    def _tuple_fields(self, item: Item, fields: list[int | None]) -> str:
        parts = []
        for field_id in fields:
            field = self.graph.get(field_id)
            if field is None or not member_visible(
                item, field, self.options.include_private
            ):
                parts.append("/* private field */")
                continue
            parts.append(f"{vis_prefix(field)}{self.fmt.type(field_type(field))}")
        return ", ".join(parts)

    def _enum(self, item: Item, under: bool) -> Lines:
        generics = self.fmt.generics(item.generics)
        where = self.fmt.where_clause(item.generics)
        lines = self._prelude(item, self._shows_docs(item.id, under))
        lines.append(
            f"{vis_prefix(item)}enum {escape_ident(item.name)}{generics}{where} {{"
        )
        body: Lines = []
        for variant_id in item.inner.get("variants") or []:
            if not self._keeps(variant_id, under):
                continue
            variant = self.graph.require(variant_id)
            body.extend(self._prelude(variant, self._shows_docs(variant_id, under)))
            discriminant = variant.inner.get("discriminant")
            suffix = f" = {discriminant['expr']}" if discriminant else ""
            body.append(f"{variant_signature(self.graph, variant)}{suffix},")
        if item.inner.get("has_stripped_variants"):
            body.append("// some variants omitted")
        lines.extend(self._indent(body))
        lines.append("}")
        return self._join([lines, *self._impl_blocks(item, under)])

    def _trait(self, item: Item, under: bool) -> Lines:
        payload = item.inner
        unsafe = "unsafe " if payload.get("is_unsafe") else ""
        auto = "auto " if payload.get("is_auto") else ""
        bounds = self.fmt.bounds(payload.get("bounds") or [])
        head = (
            f"{vis_prefix(item)}{unsafe}{auto}trait {escape_ident(item.name)}"
            f"{self.fmt.generics(item.generics)}{': ' + bounds if bounds else ''}"
            f"{self.fmt.where_clause(item.generics)}"
        )
        members = [
            self.graph.require(member_id)
            for member_id in payload.get("items") or []
            if self._keeps(member_id, under)
        ]
        members.sort(key=lambda m: (kind_rank(m.kind), m.name or "", m.id))
        blocks = [
            self._prelude(m, self._shows_docs(m.id, under)) + self._trait_member(m)
            for m in members
        ]
        lines = self._prelude(item, self._shows_docs(item.id, under))
        body = self._join(blocks)
        if not body:
            return lines + [f"{head} {{}}"]
        return lines + [f"{head} {{", *self._indent(body), "}"]

    def _trait_member(self, member: Item) -> Lines:
        name = escape_ident(member.name)
        payload = member.inner
        if member.kind is ItemKind.FUNCTION:
            return [self._function(member, in_trait=True)]
        if member.kind is ItemKind.ASSOC_CONST:
            default = payload.get("value", payload.get("default"))
            suffix = f" = {default}" if default is not None else ""
            return [f"const {name}: {self.fmt.type(payload.get('type'))}{suffix};"]
        if member.kind is ItemKind.ASSOC_TYPE:
            bounds = self.fmt.bounds(payload.get("bounds") or [])
            default = payload.get("type", payload.get("default"))
            return [
                f"type {name}{self.fmt.generics(member.generics)}"
                f"{': ' + bounds if bounds else ''}"
                f"{' = ' + self.fmt.type(default) if default is not None else ''};"
            ]
        return []

    # Impl blocks

    def _impl_blocks(self, item: Item, under: bool) -> list[Lines]:
        blocks = []
        for group in merge_implementations(self.graph, impl_ids(item), self.options):
            if not under and not any(self._keeps(i, False) for i in group.impl_ids):
                continue
            members: list[Lines] = []
            for member_id in group.member_ids:
                member = self.graph.require(member_id)
                if group.is_inherent and not (
                    self.options.include_private or member.is_public
                ):
                    continue
                if not self._keeps(member_id, under):
                    continue
                members.append(
                    self._prelude(member, self._shows_docs(member_id, under))
                    + self._impl_member(member)
                )
            header = impl_header(group.header, self.fmt)
            body = self._join(members)
            if not body:
                blocks.append([f"{header} {{}}"])
            else:
                blocks.append([f"{header} {{", *self._indent(body), "}"])
        return blocks

    def _impl_member(self, member: Item) -> Lines:
        name = escape_ident(member.name)
        payload = member.inner
        if member.kind is ItemKind.FUNCTION:
            return [self._function(member)]
        if member.kind is ItemKind.ASSOC_CONST:
            value = payload.get("value", payload.get("default"))
            suffix = f" = {value}" if value is not None else ""
            return [
                f"{vis_prefix(member)}const {name}: "
                f"{self.fmt.type(payload.get('type'))}{suffix};"
            ]
        if member.kind is ItemKind.ASSOC_TYPE:
            ty = payload.get("type", payload.get("default"))
            return [f"type {name} = {self.fmt.type(ty)};"]
        if member.kind is ItemKind.TYPE_ALIAS:
            return [self._type_alias(member)]
        if member.kind is ItemKind.CONSTANT:
            return [self._constant(member)]
        return []

    # Leaf declarations

    def _function(self, item: Item, *, in_trait: bool = False) -> str:
        text = function_signature(item, self.fmt)
        if in_trait and not item.inner.get("has_body", True):
            return f"{text};"
        return f"{text} {{}}"

    def _type_alias(self, item: Item) -> str:
        return (
            f"{vis_prefix(item)}type {escape_ident(item.name)}"
            f"{self.fmt.generics(item.generics)}{self.fmt.where_clause(item.generics)}"
            f" = {self.fmt.type(item.inner.get('type'))};"
        )

    def _trait_alias(self, item: Item) -> str:
        bounds = self.fmt.bounds(item.inner.get("params") or [])
        return (
            f"{vis_prefix(item)}trait {escape_ident(item.name)}"
            f"{self.fmt.generics(item.generics)} = {bounds}"
            f"{self.fmt.where_clause(item.generics)};"
        )

    def _constant(self, item: Item) -> str:
        payload = item.inner
        const = payload.get("const") or {}
        expr = const.get("expr") or payload.get("expr") or "_"
        return (
            f"{vis_prefix(item)}const {escape_ident(item.name)}: "
            f"{self.fmt.type(payload.get('type'))} = {expr};"
        )

    def _static(self, item: Item) -> str:
        payload = item.inner
        mutable = "mut " if payload.get("is_mutable", payload.get("mutable")) else ""
        return (
            f"{vis_prefix(item)}static {mutable}{escape_ident(item.name)}: "
            f"{self.fmt.type(payload.get('type'))} = {payload.get('expr') or '_'};"
        )

    def _extern_crate(self, item: Item) -> str:
        payload = item.inner
        rename = payload.get("rename")
        alias = f" as {escape_ident(rename)}" if rename else ""
        return (
            f"{vis_prefix(item)}extern crate "
            f"{escape_ident(payload.get('name') or item.name)}{alias};"
        )

    def _macro(self, item: Item) -> Lines:
        lines = ["#[macro_export]"] if item.is_public else []
        return lines + str(item.inner.get("value") or "").splitlines()

    def _proc_macro(self, item: Item) -> Lines:
        name = escape_ident(item.name)
        kind = item.inner.get("kind")
        if kind == "derive":
            helpers = item.inner.get("helpers") or []
            extra = f", attributes({', '.join(helpers)})" if helpers else ""
            attr = f"#[proc_macro_derive({name}{extra})]"
        elif kind == "attr":
            attr = "#[proc_macro_attribute]"
        else:
            attr = "#[proc_macro]"
        if kind == "attr":
            args = f"attr: {PROC_MACRO_TOKEN_STREAM}, item: {PROC_MACRO_TOKEN_STREAM}"
        else:
            args = f"input: {PROC_MACRO_TOKEN_STREAM}"
        return [attr, f"pub fn {name}({args}) -> {PROC_MACRO_TOKEN_STREAM} {{}}"]


def _deprecated_attr(deprecation: dict[str, Any]) -> str:
    parts = [
        f'{key} = "{deprecation[key]}"'
        for key in ("since", "note")
        if deprecation.get(key)
    ]
    return f"#[deprecated({', '.join(parts)})]" if parts else "#[deprecated]"


def filter_segments(
    graph: ItemGraph,
    path_table: PathTable,
    filter_path: str | None,
    start_id: int | None = None,
) -> tuple[str, ...] | None:
    """Turn a start item and a relative filter into an absolute path, if any.

    Filters are relative to the package root; a leading `crate` or package
    name segment is accepted.
    """
    segments = split_path(filter_path or "")
    if start_id is not None and start_id != graph.root_id:
        start = path_table.primary(start_id)
        if start is None:
            raise ItemNotFoundError(start_id)
        absolute = start.segments + segments
    elif not segments:
        return None
    else:
        root = path_table.primary(graph.root_id)
        root_name = root.segments[0] if root else graph.package_name
        if segments[0] in ("crate", root_name):
            segments = segments[1:]
        if not segments:
            return None
        absolute = (root_name, *segments)
    if not path_table.covers(absolute):
        raise FilterNotMatchedError("::".join(absolute))
    return absolute


def render_skeleton(
    graph: ItemGraph,
    options: RenderOptions,
    start_id: int | None = None,
    selection: RenderSelection | None = None,
    target: str | None = None,
) -> str:
    """Render a skeleton of the graph, optionally restricted to a sub-path."""
    path_table = resolve_paths(graph, options=options)
    if selection is None:
        segments = filter_segments(graph, path_table, options.filter_path, start_id)
        if segments is not None:
            selection = selection_for_filter(path_table, segments)
    body = SkeletonRenderer(graph, options, selection, path_table).render()
    logger.debug("Rendered %d lines for %s", body.count("\n"), graph.package_name)
    if not options.emit_header:
        return body
    header = Frontmatter(
        target=target or graph.package_name,
        filter_path=options.filter_path,
        include_private=options.include_private,
        auto_impls=options.include_auto_implementations,
        blanket_impls=options.include_blanket_implementations,
    )
    return header.render() + body
