"""
Generation backends.

Importing this package registers the built-in backends ('claude', 'offline').
"""

from .backend import GenerationBackend, get_backend, list_backends, register_backend
from .claude_cli import ClaudeCliBackend, extract_json_object
from .offline import OfflineBackend
from .prompt import build_generation_prompt

__all__ = [
    "ClaudeCliBackend",
    "GenerationBackend",
    "OfflineBackend",
    "build_generation_prompt",
    "extract_json_object",
    "get_backend",
    "list_backends",
    "register_backend",
]
