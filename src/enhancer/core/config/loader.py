"""
Configuration loading with multi-layer merging.

Layers are applied lowest first:
    defaults < user config.json < project .enhancer.json < ENHANCER_* env vars

Each file layer is optional. A file that is missing, unreadable or not a
JSON object is skipped with a warning so one bad file never blocks a run;
values that do load are still validated by EnhancerConfig.
"""

import json
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .models import EnhancerConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = ".enhancer.json"

# Keyed by resolved project directory
_config_cache: dict[Path, EnhancerConfig] = {}

_FALSE_VALUES = ("false", "0", "no", "off", "")


def get_xdg_config_home() -> Path:
    """Return $XDG_CONFIG_HOME, falling back to ~/.config."""
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    return get_xdg_config_home() / "enhancer" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    return (cwd or Path.cwd()) / PROJECT_CONFIG_NAME


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Merge ``override`` into a copy of ``base``.

    Nested dicts merge key by key; any other value in ``override`` replaces
    the one in ``base``. Neither argument is modified.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 30}})
        {'a': 1, 'b': {'x': 10, 'y': 30}}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_json_file(path: Path) -> dict[str, Any] | None:
    """Read one config layer. Returns None when the layer should be skipped."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config at {path}: top level is not an object")
        return None
    return data


def _parse_timeout(raw: str) -> float | None:
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning(f"Invalid ENHANCER_TIMEOUT value '{raw}', ignoring")
        return None
    if timeout <= 0:
        logger.warning(f"ENHANCER_TIMEOUT must be > 0, got {timeout}, ignoring")
        return None
    return timeout


def _parse_flag(raw: str) -> bool:
    return raw.strip().lower() not in _FALSE_VALUES


# env var -> (section, key, parser); a parser returning None drops the override
_ENV_OVERRIDES: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "ENHANCER_BACKEND": ("generation", "backend", str),
    "ENHANCER_MODEL": ("generation", "model", str),
    "ENHANCER_TIMEOUT": ("generation", "timeout_seconds", _parse_timeout),
    "ENHANCER_CONTEXT_ENABLED": ("context", "enabled", _parse_flag),
    "ENHANCER_OUTPUT_DIR": ("storage", "output_dir", str),
}

# Empty strings still count for these (ENHANCER_CONTEXT_ENABLED= disables context)
_EMPTY_ALLOWED = {"ENHANCER_CONTEXT_ENABLED"}


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Return a copy of ``config_dict`` with ENHANCER_* variables applied.

    Supported env vars:
        ENHANCER_BACKEND - generation.backend
        ENHANCER_MODEL - generation.model
        ENHANCER_TIMEOUT - generation.timeout_seconds (positive number)
        ENHANCER_CONTEXT_ENABLED - context.enabled (false/0/no/off disable)
        ENHANCER_OUTPUT_DIR - storage.output_dir
    """
    overrides: dict[str, Any] = {}
    for var, (section, key, parse) in _ENV_OVERRIDES.items():
        raw = os.environ.get(var)
        if raw is None or (not raw and var not in _EMPTY_ALLOWED):
            continue
        value = parse(raw)
        if value is not None:
            overrides.setdefault(section, {})[key] = value

    if not overrides:
        return dict(config_dict)
    # A non-dict section in a file layer is replaced rather than merged into
    base = {
        name: value
        for name, value in config_dict.items()
        if name not in overrides or isinstance(value, dict)
    }
    return deep_merge(base, overrides)


def get_default_config() -> dict[str, Any]:
    """Baseline values; anything not listed here comes from the model defaults."""
    return {
        "generation": {"backend": "claude", "model": "haiku", "timeout_seconds": 60},
        "context": {"enabled": True, "max_files": 20, "display_files": 10},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> EnhancerConfig:
    """
    Load the merged configuration for a project.

    Args:
        project_dir: Directory holding .enhancer.json (defaults to cwd)
        use_cache: Reuse the config loaded earlier for the same directory

    Raises:
        ValidationError: If the merged values fail validation
    """
    key = (project_dir or Path.cwd()).resolve()
    if use_cache and key in _config_cache:
        return _config_cache[key]

    merged = get_default_config()
    for path in (get_user_config_path(), get_project_config_path(project_dir)):
        if layer := load_json_file(path):
            logger.debug(f"Applying config layer {path}")
            merged = deep_merge(merged, layer)

    config = EnhancerConfig.model_validate(apply_env_overrides(merged))
    _config_cache[key] = config
    return config


def clear_cache() -> None:
    _config_cache.clear()
