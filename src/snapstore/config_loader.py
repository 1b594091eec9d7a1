"""Load RuntimeConfig from snapstore.yaml / snapstore.toml if present.

Merges file config with keyword overrides. Overrides take precedence.
"""

from __future__ import annotations

import tomllib
from dataclasses import fields
from typing import TYPE_CHECKING

import yaml

from snapstore._errors import ConfigError
from snapstore.config import RuntimeConfig

if TYPE_CHECKING:
    from pathlib import Path

_CONFIG_KEYS = frozenset(f.name for f in fields(RuntimeConfig))


def load_config(root: Path, **overrides: object) -> RuntimeConfig:
    """Load RuntimeConfig from ``root``, optionally merging a config file.

    Looks for snapstore.yaml, snapstore.yml, or snapstore.toml in root. If
    found, loads and merges with overrides. Overrides take precedence.

    Raises:
        ConfigError: The file cannot be parsed or holds unknown/invalid keys.

    """
    file_config = _read_config_file(root)
    merged = {**file_config, **overrides}
    unknown = sorted(set(merged) - _CONFIG_KEYS)
    if unknown:
        msg = f"unknown config key(s): {', '.join(unknown)}"
        raise ConfigError(msg)
    return RuntimeConfig(**merged)  # type: ignore[arg-type]


def _read_config_file(root: Path) -> dict[str, object]:
    """Read config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("snapstore.yaml", "snapstore.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "snapstore.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        msg = f"cannot parse {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping"
        raise ConfigError(msg)
    return _flatten_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        msg = f"cannot parse {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_section(data)


def _flatten_section(data: dict[str, object]) -> dict[str, object]:
    """Extract snapstore.* keys into top-level config."""
    result: dict[str, object] = {}
    section = data.get("snapstore")
    if isinstance(section, dict):
        result.update(section)
    for k, v in data.items():
        if k != "snapstore" and k in _CONFIG_KEYS:
            result[k] = v
    return result
