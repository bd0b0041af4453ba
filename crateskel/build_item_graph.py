"""Logic for building an ItemGraph from parsed rustdoc JSON."""

import logging
from typing import Any

from crateskel.errors import GraphError
from crateskel.item import Item, Visibility
from crateskel.item_graph import ItemGraph, PathSummary
from crateskel.item_kind import ItemKind

logger = logging.getLogger(__name__)


def build_item_graph(raw: dict[str, Any]) -> ItemGraph:
    """Validate a raw rustdoc JSON document and index its items by id."""
    if not isinstance(raw, dict) or "index" not in raw or "root" not in raw:
        msg = "Item graph must be an object with 'root' and 'index' keys"
        raise GraphError(msg)

    items: dict[int, Item] = {}
    for key, it in (raw.get("index") or {}).items():
        item = _build_item(_parse_id(key), it)
        items[item.id] = item

    root_id = _parse_id(raw["root"])
    root = items.get(root_id)
    if root is None:
        msg = f"Root id {root_id} is not present in the index"
        raise GraphError(msg)
    if root.kind is not ItemKind.MODULE:
        msg = f"Root item {root_id} is a {root.kind.value}, expected a module"
        raise GraphError(msg)

    paths = {
        _parse_id(key): PathSummary(
            crate_id=int(p.get("crate_id", 0)),
            path=tuple(p.get("path") or ()),
            kind=str(p.get("kind") or ""),
        )
        for key, p in (raw.get("paths") or {}).items()
    }
    external = {
        _parse_id(key): str(c.get("name") if isinstance(c, dict) else c)
        for key, c in (raw.get("external_crates") or {}).items()
    }

    logger.debug("Built item graph with %d items, root %d", len(items), root_id)
    return ItemGraph(
        items=items,
        root_id=root_id,
        package_name=root.name or "crate",
        paths=paths,
        external_packages=external,
        crate_version=raw.get("crate_version"),
        format_version=int(raw.get("format_version") or 0),
        includes_private=bool(raw.get("includes_private")),
        raw=raw,
    )


def _parse_id(value: object) -> int:
    """Convert a JSON id (int or numeric string) to an integer."""
    try:
        return int(str(value))
    except (TypeError, ValueError) as e:
        msg = f"Invalid item id: {value!r}"
        raise GraphError(msg) from e


def _build_item(item_id: int, it: dict[str, Any]) -> Item:
    """Build a single Item from its JSON object."""
    inner = it.get("inner")
    if isinstance(inner, str):
        # unit kinds such as "extern_type" serialize as a bare string
        inner = {inner: None}
    if not isinstance(inner, dict) or len(inner) != 1:
        msg = f"Item {item_id} has a malformed 'inner' payload"
        raise GraphError(msg)
    kind_key, payload = next(iter(inner.items()))
    try:
        kind = ItemKind(kind_key)
    except ValueError as e:
        msg = f"Item {item_id} has unknown kind '{kind_key}'"
        raise GraphError(msg) from e

    if not isinstance(payload, dict):
        # macro bodies are bare strings
        payload = {"value": payload}

    return Item(
        id=item_id,
        kind=kind,
        name=it.get("name"),
        visibility=_parse_visibility(it.get("visibility")),
        docs=it.get("docs"),
        crate_id=int(it.get("crate_id") or 0),
        attrs=[a for a in (it.get("attrs") or []) if isinstance(a, str)],
        deprecation=it.get("deprecation"),
        inner=payload,
    )


def _parse_visibility(value: object) -> Visibility:
    """Map a rustdoc visibility value onto Visibility."""
    if isinstance(value, dict):
        return Visibility.RESTRICTED
    if value == "public":
        return Visibility.PUBLIC
    if value == "default":
        return Visibility.DEFAULT
    return Visibility.CRATE
