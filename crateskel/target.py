"""Parsing of `entrypoint[::path]` target specifications."""

import re
from dataclasses import dataclass, field
from pathlib import Path

from crateskel.errors import InvalidTargetError

SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*))*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@dataclass(frozen=True)
class Entrypoint:
    """Either a filesystem path or a package name with an optional version."""

    name: str | None = None
    version: str | None = None
    path: Path | None = None

    @property
    def is_path(self) -> bool:
        return self.path is not None

    def __str__(self) -> str:
        if self.path is not None:
            return str(self.path)
        return f"{self.name}@{self.version}" if self.version else str(self.name)


@dataclass(frozen=True)
class Target:
    """A parsed target: where to find the documentation and what to show.

    Examples of accepted specifications:

    - `serde`, `serde::Deserialize`
    - `serde@1.0.104::Serialize`
    - `std::collections::HashMap`
    - `target/doc/my_crate.json::utils::helper`
    """

    entrypoint: Entrypoint
    path: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, spec: str) -> "Target":
        if not spec:
            raise InvalidTargetError(spec, "empty string")

        head, *rest = spec.split("::")
        if not head:
            raise InvalidTargetError(spec, "empty name")
        for position, component in enumerate(rest, start=1):
            if not component:
                raise InvalidTargetError(
                    spec, f"empty path component at position {position}"
                )

        return cls(entrypoint=_parse_entrypoint(spec, head), path=tuple(rest))

    @property
    def path_string(self) -> str:
        return "::".join(self.path)

    def __str__(self) -> str:
        return "::".join((str(self.entrypoint), *self.path))


def _parse_entrypoint(spec: str, head: str) -> Entrypoint:
    if "/" in head or "\\" in head or head in (".", "..") or head.endswith(".json"):
        return Entrypoint(path=Path(head))
    if "@" not in head:
        return Entrypoint(name=head)

    parts = head.split("@")
    if len(parts) != 2 or not parts[0]:
        raise InvalidTargetError(spec, f"invalid name specification: {head}")
    name, version = parts
    if not SEMVER_RE.match(version):
        raise InvalidTargetError(spec, f"invalid version: {version}")
    return Entrypoint(name=name, version=version)
