"""Load ProwlConfig from prowl.yaml if present.

Merges file config, environment, and CLI kwargs. CLI overrides environment,
environment overrides file.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

import yaml

from prowl._errors import ConfigError
from prowl.config import ProwlConfig

_KNOWN_KEYS = frozenset({
    "api_endpoint", "api_token", "homepage", "notfound", "notright",
    "templates_dir", "pages_dir", "partials_dir", "output", "base_url",
    "page_size", "site_type", "navi_key", "preview_cookie", "preview_max_age",
    "concurrency", "collections", "listener", "timeout",
})

_ENV_KEYS: dict[str, str] = {
    "PROWL_API_ENDPOINT": "api_endpoint",
    "PROWL_API_TOKEN": "api_token",
}


def load_config(root: Path, **overrides: object) -> ProwlConfig:
    """Load ProwlConfig from root, optionally merging prowl.yaml.

    Looks for prowl.yaml, prowl.yml, or prowl.toml in root. If found, loads
    and merges with environment variables and overrides. Overrides take
    precedence. ``None`` overrides are ignored so CLI defaults never mask
    file values.

    Raises:
        ConfigError: If a config file cannot be parsed or names unknown keys.

    """
    file_config = _read_prowl_config(root)
    env_config = {key: os.environ[name] for name, key in _ENV_KEYS.items() if os.environ.get(name)}
    explicit = {k: v for k, v in overrides.items() if v is not None}
    merged = {**file_config, **env_config, **explicit}

    unknown = sorted(set(merged) - _KNOWN_KEYS)
    if unknown:
        msg = f"Unknown config keys: {', '.join(unknown)}"
        raise ConfigError(msg)

    if "output" in merged and not isinstance(merged["output"], Path):
        merged["output"] = Path(str(merged["output"]))
    if "collections" in merged:
        merged["collections"] = _as_tuple(merged["collections"])
    return ProwlConfig(root=root, **merged)  # type: ignore[arg-type]


def _read_prowl_config(root: Path) -> dict[str, object]:
    """Read prowl config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("prowl.yaml", "prowl.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "prowl.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return _flatten_prowl_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Failed to read {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_prowl_section(data)


def _flatten_prowl_section(data: dict[str, object]) -> dict[str, object]:
    """Extract prowl.* keys into top-level config."""
    result: dict[str, object] = {}
    section = data.get("prowl")
    if isinstance(section, dict):
        result.update(section)
    for k, v in data.items():
        if k != "prowl" and k in _KNOWN_KEYS:
            result[k] = v
    return result


def _as_tuple(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    msg = f"collections must be a list of content types, got {type(value).__name__}"
    raise ConfigError(msg)
