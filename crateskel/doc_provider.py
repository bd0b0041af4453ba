"""Locating and loading rustdoc JSON output from disk."""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from crateskel.build_item_graph import build_item_graph
from crateskel.errors import GraphError, TargetModuleNotFoundError
from crateskel.item_graph import ItemGraph
from crateskel.std_mapping import StdReexportMapper
from crateskel.target import Target

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedDocumentation:
    """A parsed rustdoc JSON document and the item graph built from it."""

    source: Path
    raw: dict[str, Any]
    graph: ItemGraph
    path: tuple[str, ...]
    display: str


class JsonDocumentationProvider:
    """Finds `<crate>.json` files produced by `cargo rustdoc --output-format json`."""

    def __init__(self, json_dirs: Iterable[str | Path], mapper: StdReexportMapper):
        self.json_dirs = [Path(d) for d in json_dirs]
        self.mapper = mapper

    def load(self, target: Target) -> LoadedDocumentation:
        """Resolve the target's entrypoint and build its item graph.

        Standard library targets are redirected to the partition that defines
        the requested module, keeping the `std` prefix for display.
        """
        entry = target.entrypoint
        path = target.path
        display = str(entry)

        if entry.is_path:
            source = self._existing_file(entry.path)
        else:
            name = entry.name
            if self.mapper.is_subject_library(name):
                subject = self.mapper.resolve(name, path)
                name, path, display = (
                    subject.partition,
                    subject.path,
                    subject.display_prefix,
                )
            elif not self._candidates(name, entry.version):
                self.mapper.reject_bare_module(name)
            source = self._find(name, entry.version)

        raw = _read_json(source)
        logger.info("Loaded rustdoc JSON for %s from %s", display, source)
        return LoadedDocumentation(
            source=source,
            raw=raw,
            graph=build_item_graph(raw),
            path=tuple(path),
            display="::".join((display, *target.path)),
        )

    def _existing_file(self, path: Path) -> Path:
        if path.is_file():
            return path
        if path.is_dir():
            for directory in (path, path / "target" / "doc"):
                found = sorted(directory.glob("*.json")) if directory.is_dir() else []
                if len(found) == 1:
                    return found[0]
        raise TargetModuleNotFoundError(str(path))

    def _candidates(self, name: str, version: str | None) -> list[Path]:
        stem = name.replace("-", "_")
        found = []
        for directory in self.json_dirs:
            if version:
                found.append(directory / f"{stem}-{version}.json")
            found.append(directory / f"{stem}.json")
        return [p for p in found if p.is_file()]

    def _find(self, name: str, version: str | None) -> Path:
        for candidate in self._candidates(name, version):
            if version is None or candidate.stem.endswith(f"-{version}"):
                logger.info("Using %s for %s", candidate, name)
                return candidate
            # an unversioned file only counts if it documents the version asked for
            if _read_json(candidate).get("crate_version") == version:
                logger.info("Using %s for %s@%s", candidate, name, version)
                return candidate
        target = f"{name}@{version}" if version else name
        raise TargetModuleNotFoundError(target)


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        msg = f"{path} is not valid JSON: {e}"
        raise GraphError(msg) from e
    if not isinstance(data, dict):
        msg = f"{path} does not contain a rustdoc JSON object"
        raise GraphError(msg)
    return data
