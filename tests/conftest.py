"""Shared rustdoc JSON fixtures."""

import copy
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from crateskel.build_item_graph import build_item_graph
from crateskel.item_graph import ItemGraph

U16 = {"primitive": "u16"}
F64 = {"primitive": "f64"}
SELF_REF = {
    "borrowed_ref": {"lifetime": None, "is_mutable": False, "type": {"generic": "Self"}}
}
NO_GENERICS: dict[str, Any] = {"params": [], "where_predicates": []}
UNIT_VARIANT = {"kind": "plain", "discriminant": None}


def item(
    name: str | None,
    kind: str,
    payload: Any,
    *,
    visibility: Any = "public",
    docs: str | None = None,
    attrs: list[str] | None = None,
) -> dict[str, Any]:
    """Build one entry of the rustdoc `index` table."""
    return {
        "name": name,
        "visibility": visibility,
        "docs": docs,
        "attrs": attrs or [],
        "deprecation": None,
        "crate_id": 0,
        "inner": {kind: payload},
    }


def function(
    name: str,
    inputs: list[Any],
    output: Any = None,
    *,
    docs: str | None = None,
    has_body: bool = True,
    visibility: Any = "public",
) -> dict[str, Any]:
    return item(
        name,
        "function",
        {
            "sig": {"inputs": inputs, "output": output, "is_c_variadic": False},
            "generics": NO_GENERICS,
            "header": {
                "is_const": False,
                "is_unsafe": False,
                "is_async": False,
                "abi": "Rust",
            },
            "has_body": has_body,
        },
        docs=docs,
        visibility=visibility,
    )


def module(name: str, items: list[int], *, docs: str | None = None) -> dict[str, Any]:
    return item(name, "module", {"is_crate": False, "items": items}, docs=docs)


def plain_struct(
    name: str, fields: list[int], impls: list[int], **kw: Any
) -> dict[str, Any]:
    return item(
        name,
        "struct",
        {
            "kind": {"plain": {"fields": fields, "has_stripped_fields": False}},
            "generics": NO_GENERICS,
            "impls": impls,
        },
        **kw,
    )


def impl(
    target_id: int,
    target: str,
    items: list[int],
    *,
    trait: str | None = None,
    trait_id: int | None = None,
    synthetic: bool = False,
    blanket: Any = None,
) -> dict[str, Any]:
    return item(
        None,
        "impl",
        {
            "is_unsafe": False,
            "generics": NO_GENERICS,
            "provided_trait_methods": [],
            "trait": {"path": trait, "id": trait_id, "args": None} if trait else None,
            "for": {"resolved_path": {"path": target, "id": target_id, "args": None}},
            "items": items,
            "is_negative": False,
            "is_synthetic": synthetic,
            "blanket_impl": blanket,
        },
        visibility="default",
    )


def demo_crate() -> dict[str, Any]:
    """A small crate exercising modules, re-exports, impls, enums and traits.

    `Size` is declared at the root and re-exported from `pub_api`.
    """
    index = {
        "0": item(
            "demo",
            "module",
            {"is_crate": True, "items": [1, 2, 3, 10, 20, 30]},
            docs="Demo crate.",
        ),
        "1": plain_struct("Size", [4, 5], [6, 40], docs="A terminal size."),
        "4": item("rows", "struct_field", U16),
        "5": item("cols", "struct_field", U16),
        "6": impl(1, "Size", [7]),
        "7": function("status", [["self", SELF_REF]], U16, docs="Return the area."),
        "40": impl(1, "Size", [], trait="Send", synthetic=True),
        "2": module("pub_api", [8]),
        "8": item(
            "Size",
            "use",
            {"source": "crate::Size", "name": "Size", "id": 1, "is_glob": False},
        ),
        "3": function("connect", [], None, docs="Report status of the connection."),
        "10": module("net", [11, 12], docs="Networking."),
        "11": item(
            "Socket",
            "struct",
            {"kind": "unit", "generics": NO_GENERICS, "impls": []},
        ),
        "12": function("open", [], None),
        "20": item(
            "Mode",
            "enum",
            {
                "generics": NO_GENERICS,
                "variants": [21, 22],
                "has_stripped_variants": False,
                "impls": [],
            },
        ),
        "21": item("Fast", "variant", dict(UNIT_VARIANT), visibility="default"),
        "22": item("Slow", "variant", dict(UNIT_VARIANT), visibility="default"),
        "30": item(
            "Shape",
            "trait",
            {
                "is_auto": False,
                "is_unsafe": False,
                "items": [31],
                "generics": NO_GENERICS,
                "bounds": [],
                "implementations": [],
            },
        ),
        "31": function(
            "area", [["self", SELF_REF]], F64, has_body=False, visibility="default"
        ),
    }
    return {
        "root": 0,
        "crate_version": "0.3.1",
        "includes_private": False,
        "index": index,
        "paths": {},
        "external_crates": {},
        "format_version": 39,
    }


def alloc_crate() -> dict[str, Any]:
    """The `alloc` partition, holding `vec::Vec`."""
    return {
        "root": 0,
        "crate_version": None,
        "index": {
            "0": item("alloc", "module", {"is_crate": True, "items": [1]}),
            "1": module("vec", [2], docs="A contiguous growable array type."),
            "2": item(
                "Vec",
                "struct",
                {"kind": "unit", "generics": NO_GENERICS, "impls": []},
                docs="A contiguous growable array type.",
            ),
        },
        "paths": {},
        "external_crates": {},
        "format_version": 39,
    }


@pytest.fixture
def demo_raw() -> dict[str, Any]:
    return demo_crate()


@pytest.fixture
def demo_graph() -> ItemGraph:
    return build_item_graph(demo_crate())


@pytest.fixture
def make_graph() -> Callable[[Callable[[dict[str, Any]], None]], ItemGraph]:
    """Build a variant of the demo crate after applying `edit` to its JSON."""

    def build(edit: Callable[[dict[str, Any]], None]) -> ItemGraph:
        raw = copy.deepcopy(demo_crate())
        edit(raw)
        return build_item_graph(raw)

    return build


@pytest.fixture
def json_dir(tmp_path: Path) -> Path:
    """A directory of rustdoc JSON files as written by `cargo rustdoc`."""
    directory = tmp_path / "doc"
    directory.mkdir()
    (directory / "demo.json").write_text(json.dumps(demo_crate()), encoding="utf-8")
    (directory / "alloc.json").write_text(json.dumps(alloc_crate()), encoding="utf-8")
    return directory
