"""
File storage for enhanced prompts.

Results are stored as JSON, one file per prompt, grouped by creation date:

    {output_dir}/2026-01-15/3f2a...e9.json

Example:
    store = PromptStore(Path(".enhancer/crafted"))
    path = store.save(result)
    again = store.load(result.id)
    bugs = store.search(PromptSearchQuery(category=WorkflowCategory.BUG))
"""

from __future__ import annotations

import json
import logging
import tempfile
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from enhancer.core.errors import PromptNotFoundError
from enhancer.core.prompts.models import StructuredResult, WorkflowCategory

logger = logging.getLogger(__name__)


class PromptSearchQuery(BaseModel):
    """
    Filters for PromptStore.search. Unset filters match everything.

    ``tags`` matches when the prompt carries at least one of them; ``text``
    is a case-insensitive substring match on the stored JSON.
    """

    category: WorkflowCategory | None = None
    tags: list[str] = Field(default_factory=list)
    author: str | None = None
    min_score: int | None = Field(default=None, ge=0, le=100)
    created_after: datetime | None = None
    created_before: datetime | None = None
    text: str | None = None

    def matches(self, result: StructuredResult, raw: str = "") -> bool:
        meta = result.metadata
        if self.category is not None and result.category != self.category:
            return False
        if self.author is not None and meta.author != self.author:
            return False
        if self.min_score is not None and result.score < self.min_score:
            return False
        if self.tags and not set(self.tags) & set(meta.tags):
            return False
        if self.created_after is not None and meta.created_at < self.created_after:
            return False
        if self.created_before is not None and meta.created_at > self.created_before:
            return False
        if self.text and self.text.lower() not in (raw or result.model_dump_json()).lower():
            return False
        return True


class PromptStore:
    """Reads and writes StructuredResults under one output directory."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def path_for(self, result: StructuredResult) -> Path:
        day = result.metadata.created_at.strftime("%Y-%m-%d")
        return self.output_dir / day / f"{result.id}.json"

    def save(self, result: StructuredResult) -> Path:
        """
        Write ``result`` to disk with an atomic rename.

        Returns:
            Path to the saved file

        Raises:
            ValueError: If the result has no id
            OSError: If the file cannot be written
        """
        if not result.id:
            raise ValueError("Cannot save a prompt without an id")

        path = self.path_for(result)
        path.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
        ) as tmp:
            tmp.write(result.model_dump_json(indent=2))
            tmp_path = Path(tmp.name)
        tmp_path.replace(path)

        logger.debug(f"Saved prompt {result.id} to {path}")
        return path

    def load(self, prompt_id: str) -> StructuredResult:
        """
        Load a stored prompt by id.

        Raises:
            PromptNotFoundError: If no file exists for ``prompt_id``
            pydantic.ValidationError: If the stored file is not a valid result
        """
        matches = sorted(self.output_dir.glob(f"*/{prompt_id}.json")) if prompt_id else []
        if not matches:
            raise PromptNotFoundError(prompt_id)
        return StructuredResult.model_validate_json(matches[-1].read_text(encoding="utf-8"))

    def delete(self, prompt_id: str) -> bool:
        """
        Remove every stored file for ``prompt_id``.

        Returns:
            True if anything was deleted, False if the id was not stored
        """
        matches = sorted(self.output_dir.glob(f"*/{prompt_id}.json")) if prompt_id else []
        for path in matches:
            path.unlink()
            logger.debug(f"Deleted prompt {prompt_id} from {path}")
        return bool(matches)

    def list(self) -> list[StructuredResult]:
        """All readable stored prompts, newest first."""
        return [result for result, _ in self._iter_stored()]

    def search(self, query: PromptSearchQuery) -> list[StructuredResult]:
        return [result for result, raw in self._iter_stored() if query.matches(result, raw)]

    def _iter_stored(self) -> list[tuple[StructuredResult, str]]:
        if not self.output_dir.is_dir():
            return []

        stored: list[tuple[StructuredResult, str]] = []
        for path in sorted(self.output_dir.glob("*/*.json")):
            try:
                raw = path.read_text(encoding="utf-8")
                stored.append((StructuredResult.model_validate_json(raw), raw))
            except (OSError, ValidationError, json.JSONDecodeError) as e:
                logger.warning(f"Skipping unreadable prompt file {path}: {e}")
        stored.sort(key=lambda item: item[0].metadata.created_at, reverse=True)
        return stored
