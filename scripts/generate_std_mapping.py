"""Regenerate crateskel/std_mapping.yml from the standard library's rustdoc JSON.

Usage:
    SYSROOT=$(rustc +nightly --print sysroot)
    python scripts/generate_std_mapping.py --json-dir $SYSROOT/share/doc/rust/json

Install the JSON first with `rustup component add --toolchain nightly rust-docs-json`.
"""

import argparse
import json
import pathlib
from typing import Any

import yaml

PARTITIONS = ("core", "alloc", "std")
OUTPUT = pathlib.Path(__file__).resolve().parents[1] / "crateskel" / "std_mapping.yml"
HEADER = (
    "# Top-level modules of `std` grouped by the partition that defines them.\n"
    "# Regenerate with scripts/generate_std_mapping.py.\n"
)

# std wraps these with platform-aware APIs even where core/alloc hold a subset.
STD_SPECIFIC = frozenset(
    {"backtrace", "env", "fs", "io", "net", "os", "path", "process", "sync", "thread"}
)


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments for the generator."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--json-dir",
        required=True,
        type=pathlib.Path,
        help="Directory containing std.json, core.json and alloc.json",
    )
    parser.add_argument(
        "--output",
        type=pathlib.Path,
        default=OUTPUT,
        help="Where to write the YAML table",
    )
    return parser.parse_args()


def load_crate(json_dir: pathlib.Path, name: str) -> dict[str, Any]:
    """Load the rustdoc JSON of one standard library crate."""
    path = json_dir / f"{name}.json"
    if not path.is_file():
        raise SystemExit(f"JSON file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def top_level_modules(krate: dict[str, Any]) -> set[str]:
    """Names of the public modules declared directly under a crate root."""
    index = krate["index"]
    root = index[str(krate["root"])]
    names = set()
    for item_id in root["inner"]["module"]["items"]:
        item = index.get(str(item_id)) or {}
        inner = item.get("inner")
        if item.get("visibility") == "public" and isinstance(inner, dict):
            if "module" in inner and item.get("name"):
                names.add(item["name"])
    return names


def std_reexports(std: dict[str, Any]) -> dict[str, str]:
    """Map each public top-level `std` module to the partition it comes from."""
    index = std["index"]
    root = index[str(std["root"])]
    mapping: dict[str, str] = {}
    for item_id in root["inner"]["module"]["items"]:
        item = index.get(str(item_id)) or {}
        name = item.get("name")
        inner = item.get("inner")
        if item.get("visibility") != "public" or not isinstance(inner, dict):
            continue
        if not name:
            continue
        if "use" in inner:
            source = inner["use"].get("source", "")
            head, _, rest = source.partition("::")
            if head in ("core", "alloc") and rest.split("::")[0] == name:
                mapping[name] = head
        elif "module" in inner:
            mapping.setdefault(name, "std")
    return mapping


def build_mapping(json_dir: pathlib.Path) -> dict[str, list[str]]:
    """Group the `std` modules by partition, preferring explicit re-exports."""
    mapping = std_reexports(load_crate(json_dir, "std"))
    core = top_level_modules(load_crate(json_dir, "core"))
    alloc = top_level_modules(load_crate(json_dir, "alloc"))

    for name, partition in list(mapping.items()):
        if name in STD_SPECIFIC or partition != "std":
            continue
        if name in alloc:
            mapping[name] = "alloc"
        elif name in core:
            mapping[name] = "core"
    for name in STD_SPECIFIC:
        mapping[name] = "std"

    grouped: dict[str, list[str]] = {p: [] for p in PARTITIONS}
    for name, partition in sorted(mapping.items()):
        grouped[partition].append(name)
    return grouped


def main() -> None:
    """Write the regenerated table."""
    args = parse_args()
    grouped = build_mapping(args.json_dir)
    body = yaml.safe_dump(grouped, sort_keys=False, default_flow_style=False)
    args.output.write_text(HEADER + body, encoding="utf-8")
    total = sum(len(v) for v in grouped.values())
    print(f"Wrote {total} modules to {args.output}")


if __name__ == "__main__":
    main()
