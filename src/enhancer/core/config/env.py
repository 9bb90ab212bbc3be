"""Layered .env loading.

Precedence: os.environ (pre-existing) > project .env files > user .env.

Values already exported in the shell are never replaced, so
``ENHANCER_BACKEND=offline enhancer enhance ...`` always wins over a .env file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

from .loader import get_xdg_config_home

logger = logging.getLogger(__name__)


def read_env_file(path: Path) -> dict[str, str]:
    """Parse a .env file, dropping keys without values. Missing files are empty."""
    if not path.is_file():
        return {}
    return {str(k): str(v) for k, v in dotenv_values(path).items() if k and v is not None}


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> set[str]:
    """Load user and project .env files into os.environ.

    Args:
        project_dir: base directory for project env paths (defaults to cwd)
        user_env_paths: explicit user env file paths
        project_env_paths: explicit project env file paths

    Returns:
        Names of the variables that were set by this call
    """
    if project_dir is None:
        project_dir = Path.cwd()
    if user_env_paths is None:
        user_env_paths = [get_xdg_config_home() / "enhancer" / ".env"]
    if project_env_paths is None:
        project_env_paths = [project_dir / ".env", project_dir / ".env.local"]

    # Project files may replace values the user file set, but never the shell's
    preexisting = set(os.environ)
    loaded: set[str] = set()
    for layer in (user_env_paths, project_env_paths):
        for path in layer:
            for key, value in read_env_file(Path(path)).items():
                if key in preexisting:
                    continue
                os.environ[key] = value
                loaded.add(key)

    if loaded:
        logger.debug(f"Loaded {len(loaded)} variables from .env files")
    return loaded
