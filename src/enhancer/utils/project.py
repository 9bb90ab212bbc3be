"""
Project root discovery.

Walks upward from a directory looking for files that mark the root of a
project the enhancer can gather context from.
"""

from pathlib import Path

# Markers that indicate a project root, in order of priority
PROJECT_ROOT_MARKERS = [
    ".enhancer.json",  # Enhancer configuration file
    ".claude",  # Agent definitions live here
    ".git",  # Git repository
    "pyproject.toml",
    "package.json",
]


def find_project_root(start: Path | None = None) -> Path | None:
    """
    Find the nearest ancestor of ``start`` (inclusive) containing a marker.

    Args:
        start: Directory to start searching from. Defaults to cwd.

    Returns:
        Path to the project root, or None if no ancestor has a marker.

    Example:
        >>> find_project_root(Path("/project/src/module"))  # /project/.git exists
        PosixPath('/project')
    """
    start = (start or Path.cwd()).resolve()
    for candidate in (start, *start.parents):
        if any((candidate / marker).exists() for marker in PROJECT_ROOT_MARKERS):
            return candidate
    return None


def resolve_project_root(start: Path | None = None) -> Path:
    """Project root for ``start``, falling back to ``start`` itself (or cwd)."""
    start = (start or Path.cwd()).resolve()
    return find_project_root(start) or start
