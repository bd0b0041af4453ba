"""Tests for target specification parsing."""

from pathlib import Path

import pytest

from crateskel.errors import InvalidTargetError
from crateskel.target import Target


@pytest.mark.parametrize(
    ("spec", "name", "version", "path"),
    [
        ("serde", "serde", None, ()),
        ("serde::Deserialize", "serde", None, ("Deserialize",)),
        ("serde@1.0.104", "serde", "1.0.104", ()),
        ("serde@1.0.104::ser::Serialize", "serde", "1.0.104", ("ser", "Serialize")),
        ("std::collections::HashMap", "std", None, ("collections", "HashMap")),
        ("tokio@1.0.0-alpha.1", "tokio", "1.0.0-alpha.1", ()),
    ],
)
def test_parse_names(spec: str, name: str, version: str | None, path: tuple) -> None:
    """Verify that named entrypoints split into name, version and path."""
    target = Target.parse(spec)
    assert not target.entrypoint.is_path
    assert target.entrypoint.name == name
    assert target.entrypoint.version == version
    assert target.path == path


@pytest.mark.parametrize(
    ("spec", "entry", "path"),
    [
        ("src/lib.rs", "src/lib.rs", ()),
        (
            "/path/to/project::module::function",
            "/path/to/project",
            ("module", "function"),
        ),
        (".", ".", ()),
        ("demo.json::net", "demo.json", ("net",)),
    ],
)
def test_parse_paths(spec: str, entry: str, path: tuple) -> None:
    """Verify that filesystem entrypoints are recognized."""
    target = Target.parse(spec)
    assert target.entrypoint.path == Path(entry)
    assert target.path == path


@pytest.mark.parametrize(
    ("spec", "reason"),
    [
        ("", "empty string"),
        ("::", "empty name"),
        ("serde::", "empty path component at position 1"),
        ("serde::a::::b", "empty path component at position 2"),
        ("serde@1.0@2", "invalid name specification"),
        ("serde@latest", "invalid version"),
    ],
)
def test_parse_errors(spec: str, reason: str) -> None:
    """Verify that malformed specifications are rejected with a reason."""
    with pytest.raises(InvalidTargetError) as exc:
        Target.parse(spec)
    assert reason in exc.value.reason


def test_str_round_trip() -> None:
    """Verify that a parsed target prints back as written."""
    assert str(Target.parse("serde@1.0.104::Serialize")) == "serde@1.0.104::Serialize"
