"""Mapping of standard library modules to the partition that defines them."""

import functools
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import yaml

from crateskel.errors import AmbiguousSubjectModuleError

DEFAULT_STD_MAPPING_PATH = Path(__file__).with_name("std_mapping.yml")
PARTITIONS = ("core", "alloc", "std")
SUBJECT_LIBRARIES = ("std", "core", "alloc", "proc_macro", "test")


@dataclass(frozen=True)
class SubjectTarget:
    """Where a standard library path physically lives and how to display it."""

    partition: str
    path: tuple[str, ...]
    display_prefix: str


@functools.cache
def load_std_mapping(path: Path = DEFAULT_STD_MAPPING_PATH) -> dict[str, str]:
    """Load the partition table once, returning module name -> partition."""
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    mapping: dict[str, str] = {}
    for partition, modules in data.items():
        if partition not in PARTITIONS:
            msg = f"Unknown partition '{partition}' in {path}"
            raise ValueError(msg)
        for module in modules or []:
            mapping[str(module)] = partition
    return mapping


class StdReexportMapper:
    """Resolves `std::` paths onto the `core`/`alloc`/`std` partitions."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self.mapping = dict(mapping)

    def is_subject_library(self, name: str) -> bool:
        """Check if the name refers to one of the standard library partitions."""
        return name in SUBJECT_LIBRARIES

    def partition_for(self, module: str) -> str | None:
        """Return the partition owning a top-level `std` module."""
        return self.mapping.get(module)

    def resolve(self, name: str, path: tuple[str, ...]) -> SubjectTarget:
        """Map a subject-library target onto its physical partition.

        `std::vec::Vec` lives in `alloc` but keeps displaying under `std`;
        explicit `core::` and `alloc::` targets keep their own prefix.
        """
        if name == "std" and path:
            partition = self.mapping.get(path[0], "std")
            return SubjectTarget(partition, path, "std")
        return SubjectTarget(name, path, name)

    def reject_bare_module(self, name: str) -> None:
        """Raise if `name` is a partition module requested without a prefix."""
        if name in self.mapping:
            raise AmbiguousSubjectModuleError(name, f"std::{name}")
