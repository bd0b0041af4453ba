"""Orchestration logic for rendering, searching and listing a target."""

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from crateskel.doc_provider import JsonDocumentationProvider, LoadedDocumentation
from crateskel.errors import TargetModuleNotFoundError
from crateskel.item_graph import ItemGraph
from crateskel.listing import format_listing, list_items
from crateskel.load_config import load_config
from crateskel.path_resolver import resolve_paths
from crateskel.render_options import RenderOptions
from crateskel.search_domain import parse_domains
from crateskel.search_query import SearchQuery
from crateskel.search_skeleton import search_skeleton
from crateskel.skeleton_renderer import render_skeleton
from crateskel.std_mapping import (
    DEFAULT_STD_MAPPING_PATH,
    StdReexportMapper,
    load_std_mapping,
)
from crateskel.target import Target

logger = logging.getLogger(__name__)


def run_skeleton(args: argparse.Namespace) -> int:
    """Load the target's documentation and print the requested output."""
    config = load_config(args.config)
    target = Target.parse(args.target)
    doc = _provider(config, args).load(target)

    if args.raw:
        _emit(json.dumps(doc.raw, indent=2))
        return 0

    options = _render_options(config, args)
    start_id = _start_id(doc, options)

    if options.list_mode:
        items = list_items(doc.graph, options, start_id)
        query = options.search.text.strip() if options.search else None
        _emit(format_listing(items, query))
        return 0

    if options.search is not None:
        response = search_skeleton(doc.graph, options, doc.display, start_id)
        if not response.results:
            _emit(f'No matches found for "{options.search.text.strip()}".')
            return 0
        _emit(response.rendered)
        return 0

    _emit(render_skeleton(doc.graph, options, start_id, target=doc.display))
    return 0


def _provider(
    config: dict[str, Any], args: argparse.Namespace
) -> JsonDocumentationProvider:
    """Build the provider from the configured JSON directories and std table."""
    mapping_path = config.get("std_mapping_path")
    mapping = load_std_mapping(
        Path(mapping_path) if mapping_path else DEFAULT_STD_MAPPING_PATH
    )
    json_dirs = args.json_dir or config["provider"]["json_dirs"]
    return JsonDocumentationProvider(json_dirs, StdReexportMapper(mapping))


def _render_options(config: dict[str, Any], args: argparse.Namespace) -> RenderOptions:
    """Merge configuration defaults with command line switches."""
    search = None
    if args.search is not None:
        search_config = config.get("search") or {}
        search = SearchQuery(
            text=args.search,
            domains=parse_domains(args.search_spec or search_config.get("domains")),
            case_sensitive=args.search_case_sensitive
            or bool(search_config.get("case_sensitive")),
            direct_match_only=args.direct_match_only,
        )
    return RenderOptions.from_config(
        config,
        include_private=args.private,
        include_auto_implementations=args.auto_impls,
        include_blanket_implementations=args.blanket_impls,
        search=search,
        direct_match_only=args.direct_match_only,
        list_mode=args.list,
        emit_header=not args.no_frontmatter,
    )


def _start_id(doc: LoadedDocumentation, options: RenderOptions) -> int | None:
    """Find the item the target path names, relative to the package root."""
    if not doc.path:
        return None
    graph: ItemGraph = doc.graph
    table = resolve_paths(graph, options=options)
    root = table.primary(graph.root_id)
    root_name = root.segments[0] if root else graph.package_name
    found = table.exact((root_name, *doc.path))
    if not found:
        raise TargetModuleNotFoundError(doc.display)
    logger.info("Resolved %s to item %d", doc.display, found[0].item_id)
    return found[0].item_id


def _emit(text: str) -> None:
    print(text, end="" if text.endswith("\n") else "\n")
