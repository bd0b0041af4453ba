"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest
import yaml
from conftest import demo_crate

from crateskel.cli import main
from crateskel.frontmatter import BANNER


def run(capsys, json_dir: Path, *argv: str) -> tuple[int, str, str]:
    code = main([*argv, "--json-dir", str(json_dir)])
    captured = capsys.readouterr()
    return code, captured.out, captured.err


def test_render_with_frontmatter(capsys, json_dir: Path) -> None:
    """Verify the default output of a named target."""
    code, out, _ = run(capsys, json_dir, "demo")
    assert code == 0
    assert out.startswith(f"{BANNER}\n// settings: target=demo, visibility=public")
    assert "    pub struct Size {\n" in out
    assert out.endswith("}\n")


def test_render_sub_path(capsys, json_dir: Path) -> None:
    """Verify that `name::path` renders just that part of the crate."""
    code, out, _ = run(capsys, json_dir, "demo::net", "--no-frontmatter")
    assert code == 0
    assert out.startswith("pub mod demo {\n    pub mod net {\n")
    assert "Size" not in out


def test_unknown_sub_path(capsys, json_dir: Path) -> None:
    """Verify the error for a path missing from the crate."""
    code, out, err = run(capsys, json_dir, "demo::Nope")
    assert code == 1
    assert out == ""
    assert err.strip() == "error: Module not found: demo::Nope"


def test_list_mode(capsys, json_dir: Path) -> None:
    """Verify the two-column listing."""
    code, out, _ = run(capsys, json_dir, "demo", "--list")
    assert code == 0
    lines = out.splitlines()
    assert lines[0] == "crate        demo"
    assert "enum variant demo::Mode::Fast" in lines


def test_search_mode(capsys, json_dir: Path) -> None:
    """Verify the search header and the restricted skeleton."""
    code, out, _ = run(
        capsys, json_dir, "demo", "--search", "status", "--search-spec", "name,sig"
    )
    assert code == 0
    assert "//   - demo::Size::status [name, signature]" in out
    assert "pub fn status(&self) -> u16 {}" in out
    assert "connect" not in out


@pytest.mark.parametrize("extra", [(), ("--list",)])
def test_search_without_matches(capsys, json_dir: Path, extra) -> None:
    """Verify the message printed when nothing matches."""
    code, out, _ = run(capsys, json_dir, "demo", "--search", "zzz", *extra)
    assert code == 0
    assert out == 'No matches found for "zzz".\n'


def test_invalid_search_domain(capsys, json_dir: Path) -> None:
    """Verify that domain errors are reported on stderr."""
    code, _, err = run(
        capsys, json_dir, "demo", "--search", "x", "--search-spec", "body"
    )
    assert code == 1
    assert "Invalid search domain 'body'" in err


def test_raw_mode(capsys, json_dir: Path) -> None:
    """Verify that raw mode prints the rustdoc document."""
    code, out, _ = run(capsys, json_dir, "demo", "--raw")
    assert code == 0
    assert json.loads(out) == demo_crate()


def test_raw_and_list_are_exclusive(capsys, json_dir: Path) -> None:
    """Verify that argparse rejects two terminal output modes."""
    with pytest.raises(SystemExit) as exc:
        main(["demo", "--raw", "--list", "--json-dir", str(json_dir)])
    assert exc.value.code == 2


def test_std_module_suggestion(capsys, json_dir: Path) -> None:
    """Verify the suggestion for a bare standard library module."""
    code, _, err = run(capsys, json_dir, "vec")
    assert code == 1
    assert "did you mean 'std::vec'?" in err


def test_std_target_displays_std_prefix(capsys, json_dir: Path) -> None:
    """Verify that std paths render from alloc under the std name."""
    code, out, _ = run(capsys, json_dir, "std::vec::Vec")
    assert code == 0
    assert "// settings: target=std::vec::Vec," in out
    assert "pub struct Vec;" in out


def test_config_file(capsys, json_dir: Path, tmp_path: Path) -> None:
    """Verify that the YAML config reaches the renderer."""
    config = tmp_path / "crateskel.yml"
    config.write_text(yaml.dump({"rendering": {"indent": 2}}), encoding="utf-8")
    code, out, _ = run(
        capsys, json_dir, "demo", "--no-frontmatter", "--config", str(config)
    )
    assert code == 0
    assert "\n  pub struct Size {\n    pub rows: u16,\n" in out


def test_render_method_target(capsys, json_dir: Path) -> None:
    """Verify that a method path printed by `--list` is a valid target."""
    code, out, _ = run(capsys, json_dir, "demo::Size::status", "--no-frontmatter")
    assert code == 0
    assert "pub fn status(&self) -> u16 {}" in out
    assert "connect" not in out


def test_list_unmatched_filter_fails(capsys, json_dir: Path) -> None:
    """Verify that listing an unknown sub-path reports an error."""
    code, _, err = run(capsys, json_dir, "demo::Nope", "--list")
    assert code == 1
    assert err.strip() == "error: Module not found: demo::Nope"
