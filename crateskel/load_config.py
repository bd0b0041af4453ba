"""Logic for loading and merging configuration files."""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# dotted keys whose lists extend the defaults instead of replacing them
ADDITIVE_LISTS = frozenset({"rendering.filtered_traits"})

DEFAULT_CONFIG: dict[str, Any] = {
    "rendering": {
        "filtered_traits": [
            "Any",
            "Send",
            "Sync",
            "Unpin",
            "UnwindSafe",
            "RefUnwindSafe",
            "Borrow",
            "BorrowMut",
            "From",
            "Into",
            "TryFrom",
            "TryInto",
            "AsRef",
            "AsMut",
            "Default",
            "Debug",
            "PartialEq",
            "Eq",
            "PartialOrd",
            "Ord",
            "Hash",
            "Deref",
            "DerefMut",
            "Drop",
            "IntoIterator",
            "CloneToUninit",
            "ToOwned",
        ],
        "emitted_attributes": [
            "cfg",
            "cfg_attr",
            "derive",
            "repr",
            "non_exhaustive",
            "must_use",
        ],
        "indent": 4,
    },
    "search": {
        "domains": ["name", "doc", "signature"],
        "case_sensitive": False,
    },
    "provider": {
        "json_dirs": ["target/doc"],
    },
    "std_mapping_path": None,
}


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            merge_config(config, user_config)
        else:
            logger.warning("Config file %s does not exist, using defaults", p)
    return config


def merge_config(
    config: dict[str, Any], overrides: dict[str, Any], prefix: str = ""
) -> dict[str, Any]:
    """Apply `overrides` onto `config` in place and return it.

    Sections merge key by key. Lists replace the configured value, except
    those named in `ADDITIVE_LISTS`, which become the sorted union of both.
    """
    for key, value in overrides.items():
        dotted = f"{prefix}{key}"
        current = config.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merge_config(current, value, f"{dotted}.")
        elif dotted in ADDITIVE_LISTS and isinstance(value, list):
            config[key] = sorted({*(current or []), *value})
        else:
            config[key] = value
    return config
