"""Command line entry point: render a body-free skeleton of a Rust crate.

The crate is read from rustdoc JSON, as produced by
`cargo +nightly rustdoc -- -Z unstable-options --output-format json`.
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from crateskel.errors import SkeletonError
from crateskel.run_skeleton import run_skeleton

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the `crateskel` command."""
    ap = argparse.ArgumentParser(
        prog="crateskel",
        description="Render a Rust crate's public API as a body-free skeleton.",
    )
    ap.add_argument(
        "target",
        help=(
            "Target as entrypoint[::path]; the entrypoint is a rustdoc JSON file, "
            "a crate name, or name@version"
        ),
    )
    ap.add_argument(
        "--json-dir",
        action="append",
        type=Path,
        help="Directory holding rustdoc JSON files (repeatable; default: target/doc)",
    )
    ap.add_argument(
        "--config",
        help="Path to a YAML configuration file",
    )

    mode = ap.add_mutually_exclusive_group()
    mode.add_argument(
        "--raw",
        action="store_true",
        help="Print the rustdoc JSON instead of a skeleton",
    )
    mode.add_argument(
        "--list",
        action="store_true",
        help="Print one `kind path` row per item instead of a skeleton",
    )

    ap.add_argument(
        "--search",
        metavar="QUERY",
        help="Restrict output to items matching QUERY",
    )
    ap.add_argument(
        "--search-spec",
        metavar="DOMAINS",
        help="Comma-separated search domains: name, doc, path, signature",
    )
    ap.add_argument(
        "--search-case-sensitive",
        action="store_true",
        help="Match the search query case-sensitively",
    )
    ap.add_argument(
        "--direct-match-only",
        action="store_true",
        help="Do not expand the contents of matched containers",
    )
    ap.add_argument(
        "--auto-impls",
        action="store_true",
        help="Render auto trait implementations (Send, Sync, ...)",
    )
    ap.add_argument(
        "--blanket-impls",
        action="store_true",
        help="Render blanket implementations",
    )
    ap.add_argument(
        "--private",
        action="store_true",
        help="Render private items",
    )
    ap.add_argument(
        "--no-frontmatter",
        action="store_true",
        help="Omit the settings comment block at the top of the output",
    )
    ap.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    return ap


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command, returning its exit status."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        return run_skeleton(args)
    except SkeletonError as e:
        logger.debug("Aborting", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
