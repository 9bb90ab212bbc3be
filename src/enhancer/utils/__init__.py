"""Utility modules for the prompt enhancer."""

from .logging import EventLogger, EventType, LogEntry
from .project import find_project_root, resolve_project_root

__all__ = [
    "EventLogger",
    "EventType",
    "LogEntry",
    "find_project_root",
    "resolve_project_root",
]
