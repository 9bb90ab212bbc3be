"""Persistent storage for enhanced prompts."""

from .store import PromptSearchQuery, PromptStore

__all__ = [
    "PromptSearchQuery",
    "PromptStore",
]
