"""
Enhancement orchestration.

Runs a raw prompt through four stages:

    PARSE -> CONTEXTUALIZE -> GENERATE (model or fallback) -> VALIDATE

Only an empty prompt is rejected. A generation failure of any kind
(unavailable backend, exception, timeout, schema mismatch) switches to the
deterministic fallback, and context problems only reduce what the result
contains. Validation always runs, whichever path produced the instruction.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from enhancer.core.agents.catalog import AgentCatalog, load_agent_catalog
from enhancer.core.agents.resolver import AgentMentionResolver
from enhancer.core.cache import LRUCache
from enhancer.core.classify.classifier import WorkflowClassifier
from enhancer.core.config.models import EnhancerConfig
from enhancer.core.context.analyzer import ContextAnalyzer
from enhancer.core.errors import EmptyInputError
from enhancer.core.fallback.synthesizer import FallbackSynthesizer
from enhancer.core.fallback.tables import output_format_for, output_structure_for
from enhancer.core.generation import GenerationBackend, build_generation_prompt, get_backend
from enhancer.core.prompts.models import (
    AIEnhancement,
    ContextBundle,
    DiscoveredReference,
    EnhancementSource,
    InputType,
    MentionResolution,
    OutputSpecification,
    PromptContext,
    PromptInput,
    PromptMetadata,
    RawInput,
    StructuredResult,
    WorkflowCategory,
    utc_now,
)
from enhancer.core.references.discovery import ReferenceDiscovery
from enhancer.core.validate.validator import PromptValidator
from enhancer.utils.logging import EventLogger

logger = logging.getLogger(__name__)

ORIGINAL_PROMPT_LABEL = "Original Prompt"


class EnhancementStage(str, Enum):
    """Pipeline stages, in execution order."""

    PARSE = "parse"
    CONTEXTUALIZE = "contextualize"
    GENERATE = "generate"
    VALIDATE = "validate"


def _merge(*sources: list[str]) -> list[str]:
    merged: list[str] = []
    for source in sources:
        for item in source:
            if item and item not in merged:
                merged.append(item)
    return merged


def update_result(
    result: StructuredResult,
    changes: dict[str, Any],
    validator: PromptValidator | None = None,
) -> StructuredResult:
    """
    Return a re-validated copy of ``result`` with ``changes`` applied.

    ``metadata.updated_at`` is stamped with the current time. The original
    result is left untouched.

    Raises:
        ValueError: If ``changes`` tries to replace the id or the validation
        ValidationError: If the merged data is not a valid StructuredResult
    """
    protected = {"id", "validation"} & changes.keys()
    if protected:
        raise ValueError(f"Cannot update protected fields: {', '.join(sorted(protected))}")

    data = result.model_dump()
    data.update(changes)
    data["validation"] = None
    updated = StructuredResult.model_validate(data)
    updated = updated.model_copy(
        update={"metadata": updated.metadata.model_copy(update={"updated_at": utc_now()})}
    )
    validation = (validator or PromptValidator()).validate(updated)
    return updated.model_copy(update={"validation": validation})


class Enhancer:
    """
    Turns raw prompts into validated StructuredResults for one project.

    All collaborators can be injected; by default they are built from
    ``config``. The two caches (context bundles and agent catalogs) are
    owned by the instance, so separate Enhancers never share cached state.

    Example:
        >>> enhancer = Enhancer(Path("."), backend=get_backend("offline"))
        >>> result = enhancer.enhance("the login page is broken")
        >>> result.category, result.confidence_score
        (<WorkflowCategory.BUG: 'bug'>, 50)
    """

    def __init__(
        self,
        project_root: Path | None = None,
        config: EnhancerConfig | None = None,
        backend: GenerationBackend | None = None,
        *,
        classifier: WorkflowClassifier | None = None,
        resolver: AgentMentionResolver | None = None,
        validator: PromptValidator | None = None,
        synthesizer: FallbackSynthesizer | None = None,
        context_cache: LRUCache[tuple[str, str], ContextBundle] | None = None,
        catalog_cache: LRUCache[str, AgentCatalog] | None = None,
        events: EventLogger | None = None,
    ) -> None:
        self.project_root = (project_root or Path.cwd()).resolve()
        self.config = config or EnhancerConfig()
        self.backend = backend or get_backend(
            self.config.generation.backend, model=self.config.generation.model
        )
        self.classifier = classifier or WorkflowClassifier()
        self.resolver = resolver or AgentMentionResolver()
        self.validator = validator or PromptValidator()
        self.synthesizer = synthesizer or FallbackSynthesizer(self.classifier)
        # An empty LRUCache is falsy, so injected caches are checked against None
        if context_cache is None:
            context_cache = LRUCache(self.config.context.cache_size)
        if catalog_cache is None:
            catalog_cache = LRUCache(self.config.agents.cache_size)
        self.context_cache = context_cache
        self.catalog_cache = catalog_cache
        self.events = events
        self.analyzer = ContextAnalyzer(
            self.project_root, self.config.context, cache=self.context_cache
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def enhance(
        self,
        raw: str | RawInput,
        category: WorkflowCategory | str | None = None,
    ) -> StructuredResult:
        """
        Enhance ``raw`` synchronously.

        Must not be called from inside a running event loop; use
        ``enhance_async`` there.

        Raises:
            EmptyInputError: If the prompt is empty or whitespace-only
        """
        return asyncio.run(self.enhance_async(raw, category))

    async def enhance_async(
        self,
        raw: str | RawInput,
        category: WorkflowCategory | str | None = None,
    ) -> StructuredResult:
        """
        Enhance ``raw``.

        Args:
            raw: Prompt text or RawInput
            category: Explicit category; wins over any classification

        Returns:
            Validated, immutable StructuredResult

        Raises:
            EmptyInputError: If the prompt is empty or whitespace-only
        """
        started = time.monotonic()
        raw_input = self.parse_input(raw, category)
        text = raw_input.text
        prompt_id = uuid.uuid4().hex

        self._stage(prompt_id, EnhancementStage.PARSE)
        classified = self.classifier.classify(text, raw_input.category)
        catalog = self.load_catalog()
        resolution = self.resolver.resolve(text, catalog)
        if self.events:
            self.events.log_enhance_start(prompt_id, classified.value, len(text))

        self._stage(prompt_id, EnhancementStage.CONTEXTUALIZE)
        bundle = self.gather_context(resolution.processed_text)
        references = ReferenceDiscovery(bundle.dependencies).discover(resolution.processed_text)

        self._stage(prompt_id, EnhancementStage.GENERATE)
        enhancement, source = await self._generate(
            prompt_id, classified, catalog, resolution, bundle, references
        )

        if raw_input.category is not None:
            final_category = raw_input.category
        elif source == EnhancementSource.MODEL and enhancement.workflow_type is not None:
            final_category = enhancement.workflow_type
        else:
            final_category = classified

        result = self._build_result(
            prompt_id, raw_input, final_category, enhancement, source, bundle, resolution, references
        )

        self._stage(prompt_id, EnhancementStage.VALIDATE)
        result = result.model_copy(update={"validation": self.validator.validate(result)})

        if self.events:
            self.events.log_enhance_end(
                prompt_id,
                score=result.score,
                source=source.value,
                duration_sec=time.monotonic() - started,
                degraded=bundle.degraded,
            )
        return result

    def update(self, result: StructuredResult, **changes: Any) -> StructuredResult:
        """Merge ``changes`` into a copy of ``result`` and re-validate it."""
        return update_result(result, changes, self.validator)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def parse_input(
        self, raw: str | RawInput, category: WorkflowCategory | str | None = None
    ) -> RawInput:
        """
        Normalize ``raw`` into a RawInput.

        An unknown ``category`` is logged and ignored so classification
        decides instead.

        Raises:
            EmptyInputError: If the trimmed content is empty
        """
        raw_input = raw if isinstance(raw, RawInput) else RawInput(content=raw)
        if not raw_input.text:
            raise EmptyInputError()
        if category is None:
            return raw_input
        try:
            explicit = WorkflowCategory(category)
        except ValueError:
            logger.warning(f"Ignoring unknown category {category!r}")
            return raw_input
        return raw_input.model_copy(update={"category": explicit})

    def load_catalog(self) -> AgentCatalog:
        agents_dir = self.project_root / self.config.agents.directory
        return load_agent_catalog(
            agents_dir,
            cache=self.catalog_cache,
            description_max_length=self.config.agents.description_max_length,
        )

    def gather_context(self, text: str) -> ContextBundle:
        if not self.config.context.enabled:
            return ContextBundle()
        bundle = self.analyzer.analyze(text)
        if bundle.is_degraded:
            logger.warning(f"Context degraded: {'; '.join(bundle.degraded)}")
        return bundle

    async def _generate(
        self,
        prompt_id: str,
        category: WorkflowCategory,
        catalog: AgentCatalog,
        resolution: MentionResolution,
        bundle: ContextBundle,
        references: list[DiscoveredReference],
    ) -> tuple[AIEnhancement, EnhancementSource]:
        text = resolution.processed_text
        timeout = self.config.generation.timeout_seconds
        # Set when the backend was tried and failed, as opposed to being unavailable
        failed = False
        try:
            if not self.backend.is_available():
                reason = f"backend '{self.backend.name}' is unavailable"
            else:
                prompt = build_generation_prompt(
                    text,
                    AIEnhancement,
                    category=category,
                    bundle=bundle,
                    resolution=resolution,
                    references=references,
                )
                raw = await asyncio.wait_for(
                    self.backend.generate(prompt, AIEnhancement), timeout=timeout
                )
                return self._coerce(raw), EnhancementSource.MODEL
        except asyncio.TimeoutError:
            reason = f"generation timed out after {timeout}s"
            failed = True
        except ValidationError as e:
            reason = f"malformed generation output ({e.error_count()} errors)"
            failed = True
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            failed = True

        logger.warning(f"Using fallback enhancement: {reason}")
        if self.events:
            if failed:
                self.events.log_error(
                    reason,
                    {
                        "prompt_id": prompt_id,
                        "stage": "generate",
                        "backend": self.backend.name,
                    },
                )
            self.events.log_fallback(prompt_id, reason)
        enhancement = self.synthesizer.synthesize(
            text,
            category=category,
            technical_stack=bundle.technical_stack,
            agent_names=catalog.names,
        )
        return enhancement, EnhancementSource.FALLBACK

    @staticmethod
    def _coerce(raw: BaseModel | dict[str, Any]) -> AIEnhancement:
        if isinstance(raw, AIEnhancement):
            return raw
        if isinstance(raw, BaseModel):
            return AIEnhancement.model_validate(raw.model_dump())
        return AIEnhancement.model_validate(raw)

    def _build_result(
        self,
        prompt_id: str,
        raw_input: RawInput,
        category: WorkflowCategory,
        enhancement: AIEnhancement,
        source: EnhancementSource,
        bundle: ContextBundle,
        resolution: MentionResolution,
        references: list[DiscoveredReference],
    ) -> StructuredResult:
        hints = enhancement.context
        now = utc_now()
        meta = raw_input.metadata
        context = PromptContext(
            relevant_files=_merge(hints.relevant_files, bundle.file_paths)[
                : self.config.context.display_files
            ],
            dependencies=_merge(hints.dependencies, bundle.dependencies),
            technical_stack=_merge(hints.technical_stack, bundle.technical_stack),
            current_state=(
                f"Context partially unavailable: {'; '.join(bundle.degraded)}"
                if bundle.is_degraded
                else None
            ),
        )
        return StructuredResult(
            id=prompt_id,
            category=category,
            instruction=enhancement.instruction,
            context=context,
            inputs=[
                PromptInput(label=ORIGINAL_PROMPT_LABEL, value=raw_input.text, type=InputType.TEXT)
            ],
            expected_output=OutputSpecification(
                format=output_format_for(category),
                structure=output_structure_for(category),
                constraints=list(enhancement.constraints),
                examples=list(enhancement.examples),
            ),
            metadata=PromptMetadata(
                created_at=now,
                updated_at=now,
                author=meta.author,
                tags=list(meta.tags),
                source=meta.source,
                task_id=meta.task_id,
            ),
            clarifying_questions=list(enhancement.clarifying_questions),
            success_criteria=list(enhancement.success_criteria),
            constraints=list(enhancement.constraints),
            examples=list(enhancement.examples),
            discovered_references=references,
            agent_resolution=resolution,
            source=source,
            confidence_score=enhancement.confidence_score,
            estimated_complexity=enhancement.estimated_complexity,
            order_of_steps=list(enhancement.order_of_steps),
            agent_suggestions=list(enhancement.agent_suggestions),
            token_count=enhancement.token_count,
        )

    def _stage(self, prompt_id: str, stage: EnhancementStage) -> None:
        logger.debug(f"[{prompt_id[:8]}] stage={stage.value}")


def enhance(
    raw: str | RawInput,
    category: WorkflowCategory | str | None = None,
    project_root: Path | None = None,
    config: EnhancerConfig | None = None,
) -> StructuredResult:
    """Enhance ``raw`` with a one-off Enhancer for ``project_root``."""
    return Enhancer(project_root, config).enhance(raw, category)
