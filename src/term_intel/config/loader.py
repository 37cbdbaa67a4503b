"""
Loading Settings from layered sources.

Later layers win, key by key:

1. Defaults declared in settings.py
2. A YAML file
3. Environment variables named TERM_INTEL__{SECTION}__{KEY},
   e.g. TERM_INTEL__SEARCH__LIMIT=20 or TERM_INTEL__LLM__MODEL=qwen2.5:7b
"""

import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from term_intel.config.settings import Settings
from term_intel.core.exceptions import ConfigurationError

ENV_PREFIX = "TERM_INTEL"

DEFAULT_CONFIG_LOCATIONS = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
    Path.home() / ".term_intel" / "config.yaml",
)

_settings_instance: Settings | None = None


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base, recursing into nested sections."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _parse_env_value(raw: str) -> Any:
    """
    Read an environment value as a YAML scalar.

    "20" becomes 20, "false" becomes False and "" or "null" becomes None.
    Anything that is not a plain scalar stays the raw string.
    """
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    if isinstance(value, (dict, list)):
        return raw
    return value


def _env_overrides(environ: Mapping[str, str], prefix: str) -> dict[str, Any]:
    """Collect {PREFIX}__SECTION__KEY variables into a nested mapping."""
    marker = f"{prefix}__"
    overrides: dict[str, Any] = {}

    for name, raw in environ.items():
        if not name.startswith(marker):
            continue
        *sections, key = name[len(marker):].lower().split("__")
        # Top-level keys are sections, not settings
        if not sections:
            continue

        target = overrides
        for section in sections:
            target = target.setdefault(section, {})
        target[key] = _parse_env_value(raw)

    return overrides


def _read_yaml(path: Path) -> dict[str, Any]:
    """
    Read a YAML mapping from path. An empty file is an empty mapping.

    Raises:
        FileNotFoundError: If path does not exist
        ConfigurationError: If the file is not YAML or not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        content = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError.wrap(
            e, "Invalid YAML in configuration file", path=str(path)
        )

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping, got: {type(content).__name__}",
            details={"path": str(path)},
        )
    return content


def load_config(
    config_path: Path | str | None = None,
    env_prefix: str = ENV_PREFIX,
) -> Settings:
    """
    Build Settings from defaults, an optional YAML file and the environment.

    Args:
        config_path: YAML file to read. None skips the file layer.
        env_prefix: Prefix of the override variables

    Raises:
        FileNotFoundError: If config_path is given but missing
        ConfigurationError: If the file is malformed or a value is invalid
    """
    data = _read_yaml(Path(config_path)) if config_path is not None else {}
    data = _deep_merge(data, _env_overrides(os.environ, env_prefix))

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError.wrap(e, "Invalid configuration")


def get_settings(
    config_path: Path | str | None = None,
    reload: bool = False,
) -> Settings:
    """Return the shared Settings, loading them on first use or when reload is set."""
    global _settings_instance

    if _settings_instance is None or reload:
        _settings_instance = load_config(config_path)
    return _settings_instance


def reset_settings() -> None:
    """Forget the shared Settings."""
    global _settings_instance
    _settings_instance = None


def get_default_config_path() -> Path | None:
    """
    First existing file among ./config.yaml, ./config/config.yaml and
    ~/.term_intel/config.yaml, or None.
    """
    for location in DEFAULT_CONFIG_LOCATIONS:
        path = location if location.is_absolute() else Path.cwd() / location
        if path.exists():
            return path
    return None
