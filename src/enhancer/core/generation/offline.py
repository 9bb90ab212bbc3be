"""Backend that never generates, forcing the deterministic fallback."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from enhancer.core.errors import GenerationUnavailableError

from .backend import register_backend


@register_backend("offline")
class OfflineBackend:
    """Always unavailable. Selected with ``--offline`` or ENHANCER_BACKEND=offline."""

    def __init__(self, model: str | None = None) -> None:
        self.model = model

    @property
    def name(self) -> str:
        return "offline"

    def is_available(self) -> bool:
        return False

    async def generate(
        self, prompt: str, schema: type[BaseModel]
    ) -> BaseModel | dict[str, Any]:
        raise GenerationUnavailableError("Offline backend does not generate", backend=self.name)
