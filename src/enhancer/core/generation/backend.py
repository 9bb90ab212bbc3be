"""
Generation backend protocol and registry.

A backend takes a fully built prompt plus the Pydantic model the answer must
satisfy, and returns an instance of that model (or a dict that validates
against it). Backends may be slow and may fail; retries and timeouts are the
caller's concern, not the backend's.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

_T = TypeVar("_T")


@runtime_checkable
class GenerationBackend(Protocol):
    """Protocol for generative backends."""

    @property
    def name(self) -> str:
        """Lowercase backend identifier (e.g., 'claude')."""
        ...

    def is_available(self) -> bool:
        """
        Check if the backend can be invoked on this system.

        Returns:
            True if the CLI/SDK/credentials the backend needs are present
        """
        ...

    async def generate(
        self, prompt: str, schema: type[BaseModel]
    ) -> BaseModel | dict[str, Any]:
        """
        Produce a structured answer for ``prompt``.

        Args:
            prompt: Complete prompt text
            schema: Model the answer must validate against

        Returns:
            Instance of ``schema`` or a dict that validates against it

        Raises:
            GenerationError: If the backend cannot produce an answer
        """
        ...


# Backend registry
_backends: dict[str, type[GenerationBackend]] = {}


def register_backend(name: str) -> Callable[[type[_T]], type[_T]]:
    """
    Decorator to register a generation backend.

    Usage:
        @register_backend('claude')
        class ClaudeCliBackend:
            ...

    Backends are constructed with a single optional ``model`` keyword.
    """

    def decorator(backend_class: type[_T]) -> type[_T]:
        _backends[name] = backend_class  # type: ignore[assignment]
        return backend_class

    return decorator


def get_backend(name: str, model: str | None = None) -> GenerationBackend:
    """
    Instantiate a registered backend.

    Raises:
        ValueError: If no backend is registered under ``name``
    """
    backend_class = _backends.get(name)
    if backend_class is None:
        raise ValueError(
            f"Generation backend '{name}' not registered. "
            f"Available backends: {', '.join(sorted(_backends))}"
        )
    return backend_class(model=model)  # type: ignore[call-arg]


def list_backends() -> list[str]:
    return sorted(_backends)
