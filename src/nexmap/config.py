"""
nexmap.config - Configuration loading and defaults

Configuration comes from three layers, later ones winning:

1. DEFAULT_CONFIG
2. A ``.nexmap.toml`` file (found by walking up from the working directory)
3. ``NEXMAP_<SECTION>_<KEY>`` environment variables

Example ``.nexmap.toml``:

    [reader]
    chunk_size = 65536
    strict = true

    [logging]
    level = "DEBUG"
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import tomlkit

CONFIG_FILENAME = ".nexmap.toml"
ENV_PREFIX = "NEXMAP_"

DEFAULT_CONFIG: Dict[str, Any] = {
    "reader": {
        "chunk_size": 16384,
        "strict": False,
        "link_taxa": True,
    },
    "logging": {
        "level": "WARNING",
    },
}


@dataclass
class ReaderConfig:
    """Settings for NexmlReader.

    Attributes:
        chunk_size: Bytes read from the source per parser feed.
        strict: Reject unknown elements instead of skipping them.
        link_taxa: Link nodes and tree collections to the taxa they name.
    """

    chunk_size: int = 16384
    strict: bool = False
    link_taxa: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ReaderConfig:
        """Create ReaderConfig from the ``[reader]`` section of a config.

        Args:
            data: Dictionary with optional keys: chunk_size, strict, link_taxa

        Returns:
            ReaderConfig with values from dict or defaults
        """
        chunk_size = int(data.get("chunk_size", 16384))
        if chunk_size <= 0:
            raise ValueError(f"reader.chunk_size must be positive, got {chunk_size}")
        return cls(
            chunk_size=chunk_size,
            strict=bool(data.get("strict", False)),
            link_taxa=bool(data.get("link_taxa", True)),
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> ReaderConfig:
        return cls.from_dict(config.get("reader", {}))


def find_config_file(start: Path) -> Optional[Path]:
    """Find ``.nexmap.toml`` in ``start`` or any of its parents."""
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def parse_toml(text: str) -> Dict[str, Any]:
    """Parse TOML text into plain Python containers."""
    return tomlkit.parse(text).unwrap()


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _try_parse_env_value(value: str) -> Any:
    """Convert an environment string to JSON, bool or int where it looks like one."""
    stripped = value.strip()
    if stripped.lower() in ("true", "false"):
        return stripped.lower() == "true"
    if stripped.startswith(("[", "{")):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return value
    try:
        return int(stripped)
    except ValueError:
        return value


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    """Apply ``NEXMAP_<SECTION>_<KEY>`` variables to known sections."""
    for name, raw in os.environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        rest = name[len(ENV_PREFIX):].lower()
        section, _, key = rest.partition("_")
        if not key or section not in config:
            continue
        config[section][key] = _try_parse_env_value(raw)
    return config


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from ``path`` (or the discovered file) over defaults.

    Args:
        path: Explicit config file. If None, ``find_config_file(Path.cwd())``
            is used; a missing file means defaults only.

    Returns:
        Merged configuration dictionary.
    """
    if path is None:
        path = find_config_file(Path.cwd())
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is not None:
        config = merge_configs(config, parse_toml(path.read_text(encoding="utf-8")))
    return _apply_env_overrides(config)


def configure_logging(config: Dict[str, Any]) -> None:
    """Set the ``nexmap`` logger level from the ``[logging]`` section."""
    level = str(config.get("logging", {}).get("level", "WARNING")).upper()
    logging.getLogger("nexmap").setLevel(level)


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CONFIG",
    "ReaderConfig",
    "configure_logging",
    "find_config_file",
    "load_config",
    "merge_configs",
    "parse_toml",
]
