"""Tests for configuration loading, merging and render options."""

from pathlib import Path

import yaml

from crateskel.load_config import DEFAULT_CONFIG, load_config, merge_config
from crateskel.render_options import RenderOptions
from crateskel.search_query import SearchQuery


def test_merge_config_nested() -> None:
    """Verify that sections merge key by key."""
    config = {"rendering": {"indent": 4, "emitted_attributes": ["repr"]}}
    merge_config(config, {"rendering": {"indent": 2}})
    assert config == {"rendering": {"indent": 2, "emitted_attributes": ["repr"]}}


def test_merge_config_lists_replace() -> None:
    """Verify that ordinary lists are replaced."""
    config = {"provider": {"json_dirs": ["a", "b"]}}
    merge_config(config, {"provider": {"json_dirs": ["c"]}})
    assert config == {"provider": {"json_dirs": ["c"]}}


def test_merge_config_filtered_traits_additive() -> None:
    """Verify that filtered traits accumulate, deduplicated and sorted."""
    config = {"rendering": {"filtered_traits": ["Send", "Debug"]}}
    merged = merge_config(config, {"rendering": {"filtered_traits": ["Clone", "Send"]}})
    assert merged["rendering"]["filtered_traits"] == ["Clone", "Debug", "Send"]


def test_merge_config_additive_only_in_rendering() -> None:
    """Verify that a `filtered_traits` key outside `rendering` is replaced."""
    config = {"other": {"filtered_traits": ["Send"]}}
    merge_config(config, {"other": {"filtered_traits": ["Clone"]}})
    assert config["other"]["filtered_traits"] == ["Clone"]


def test_load_config_defaults() -> None:
    """Verify that defaults are returned when no path is provided."""
    config = load_config(None)
    assert config["search"]["domains"] == ["name", "doc", "signature"]
    assert config["provider"]["json_dirs"] == ["target/doc"]


def test_load_config_does_not_mutate_defaults(tmp_path: Path) -> None:
    """Verify that merging a user file leaves the module defaults untouched."""
    config_file = tmp_path / "config.yml"
    config_file.write_text(
        yaml.dump({"rendering": {"filtered_traits": ["Clone"]}}), encoding="utf-8"
    )
    config = load_config(str(config_file))
    assert "Clone" in config["rendering"]["filtered_traits"]
    assert "Send" in config["rendering"]["filtered_traits"]
    assert "Clone" not in DEFAULT_CONFIG["rendering"]["filtered_traits"]


def test_load_config_missing_file_warns(tmp_path: Path, caplog) -> None:
    """Verify that a missing config file falls back to defaults with a warning."""
    config = load_config(str(tmp_path / "absent.yml"))
    assert config == DEFAULT_CONFIG
    assert "does not exist" in caplog.text


def test_render_options_from_config_with_overrides(tmp_path: Path) -> None:
    """Verify that config values and explicit overrides both reach the options."""
    config_file = tmp_path / "config.yml"
    config_file.write_text(
        yaml.dump({"rendering": {"indent": 2, "emitted_attributes": ["repr"]}}),
        encoding="utf-8",
    )
    options = RenderOptions.from_config(
        load_config(str(config_file)), include_private=True
    )
    assert options.indent == 2
    assert options.emitted_attributes == ("repr",)
    assert options.include_private
    assert "Send" in options.filtered_traits


def test_expand_containers() -> None:
    """Verify that direct-match-only on either the options or the query wins."""
    assert RenderOptions().expand_containers
    assert not RenderOptions(direct_match_only=True).expand_containers
    query = SearchQuery("x", direct_match_only=True)
    assert not RenderOptions(search=query).expand_containers
