"""
Deterministic, model-free enhancement.

Used whenever the generative backend is unavailable, times out or returns
something unusable. Produces the same AIEnhancement shape as a model would,
from the raw text alone, with a fixed confidence of 50 to mark it as
unverified.

``synthesize`` never raises: an internal failure degrades to a minimal
generic enhancement.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from enhancer.core.classify.classifier import WorkflowClassifier
from enhancer.core.fallback.tables import (
    AGENT_ROLE_HINTS,
    COMPLEX_LENGTH,
    COMPLEXITY_CUES,
    CONSTRAINTS,
    DEFAULT_CLARIFYING_QUESTIONS,
    MODERATE_LENGTH,
    STEPS,
    SUCCESS_CRITERIA,
)
from enhancer.core.prompts.models import (
    AIEnhancement,
    Complexity,
    ContextHints,
    WorkflowCategory,
)

logger = logging.getLogger(__name__)

FALLBACK_CONFIDENCE = 50
CLARIFY_BELOW_LENGTH = 50
REWRITE_BELOW_LENGTH = 100

ACTION_PREFIXES = (
    "implement",
    "create",
    "fix",
    "add",
    "update",
    "refactor",
    "optimize",
    "test",
    "document",
    "deploy",
    "secure",
    "analyze",
)

_BROKEN = re.compile(r"\b(?:not working|broken)\b", re.IGNORECASE)
_WANTS = re.compile(r"\b(?:needs?|wants?)\b", re.IGNORECASE)
_WANT_PHRASE = re.compile(r"\b(?:i|we)\s+(?:need|want)\b\s*", re.IGNORECASE)
_TERMINATED = re.compile(r"[.!?]$")


def estimate_complexity(text: str) -> Complexity:
    """
    Estimate effort from keyword cues and length.

    Complex cues or more than 300 characters -> complex; moderate cues or
    more than 150 characters -> moderate; otherwise simple.
    """
    if COMPLEXITY_CUES[Complexity.COMPLEX].search(text) or len(text) > COMPLEX_LENGTH:
        return Complexity.COMPLEX
    if COMPLEXITY_CUES[Complexity.MODERATE].search(text) or len(text) > MODERATE_LENGTH:
        return Complexity.MODERATE
    return Complexity.SIMPLE


def finish_sentence(text: str) -> str:
    """Capitalize the first letter and make sure the text ends with . ! or ?"""
    text = text.strip()
    if not text:
        return text
    text = text[0].upper() + text[1:]
    if not _TERMINATED.search(text):
        text += "."
    return text


def improve_instruction(text: str) -> str:
    """
    Rewrite a short request into an imperative instruction.

    Example:
        >>> improve_instruction("the login page is broken")
        'Fix the issue where the login page is broken.'
        >>> improve_instruction("we need to export reports as CSV")
        'Implement functionality to export reports as CSV.'
        >>> improve_instruction("dark mode")
        'Implement: dark mode.'
    """
    improved = text.strip()
    starts_with_action = improved.lower().startswith(ACTION_PREFIXES)

    if not starts_with_action and len(improved) < REWRITE_BELOW_LENGTH:
        if _BROKEN.search(improved):
            improved = f"Fix the issue where {improved}"
        elif _WANTS.search(improved):
            goal = _WANT_PHRASE.sub("", improved).strip()
            goal = re.sub(r"^to\s+", "", goal, flags=re.IGNORECASE)
            improved = f"Implement functionality to {goal}"
        else:
            improved = f"Implement: {improved}"

    return finish_sentence(improved)


def suggest_agents(
    category: WorkflowCategory, agent_names: Iterable[str]
) -> list[str]:
    """Catalog agents whose name carries a role hint for ``category``."""
    hints = AGENT_ROLE_HINTS.get(category, ())
    suggestions: list[str] = []
    for name in agent_names:
        lowered = name.lower()
        if any(hint in lowered for hint in hints) and name not in suggestions:
            suggestions.append(name)
    return suggestions


def minimal_enhancement(text: str) -> AIEnhancement:
    """Last-resort enhancement that cannot fail for non-blank text."""
    instruction = finish_sentence(text) or "Complete the requested task."
    return AIEnhancement(
        instruction=instruction,
        workflow_type=WorkflowCategory.GENERAL,
        success_criteria=list(SUCCESS_CRITERIA[WorkflowCategory.GENERAL]),
        confidence_score=FALLBACK_CONFIDENCE,
        estimated_complexity=Complexity.SIMPLE,
        token_count=len(text) * 2,
    )


class FallbackSynthesizer:
    """Build an AIEnhancement from raw text using the default tables."""

    def __init__(self, classifier: WorkflowClassifier | None = None) -> None:
        self.classifier = classifier or WorkflowClassifier()

    def synthesize(
        self,
        text: str,
        category: WorkflowCategory | None = None,
        technical_stack: Iterable[str] = (),
        agent_names: Iterable[str] = (),
    ) -> AIEnhancement:
        """
        Derive an enhancement from ``text`` without a model.

        Args:
            text: Raw prompt text
            category: Category to use instead of classifying ``text``
            technical_stack: Stack tags already detected for the project
            agent_names: Catalog agent names to draw suggestions from

        Returns:
            AIEnhancement with confidence_score == 50
        """
        try:
            return self._synthesize(text, category, list(technical_stack), list(agent_names))
        except Exception:
            logger.exception("Fallback synthesis failed, using minimal enhancement")
            return minimal_enhancement(text)

    def _synthesize(
        self,
        text: str,
        category: WorkflowCategory | None,
        technical_stack: list[str],
        agent_names: list[str],
    ) -> AIEnhancement:
        text = text.strip()
        category = category or self.classifier.classify(text)
        complexity = estimate_complexity(text)

        agents: list[str] = []
        if complexity != Complexity.SIMPLE:
            agents = suggest_agents(category, agent_names)

        return AIEnhancement(
            instruction=improve_instruction(text),
            context=ContextHints(technical_stack=technical_stack),
            workflow_type=category,
            clarifying_questions=(
                list(DEFAULT_CLARIFYING_QUESTIONS) if len(text) < CLARIFY_BELOW_LENGTH else []
            ),
            success_criteria=list(SUCCESS_CRITERIA[category]),
            constraints=list(CONSTRAINTS[category]),
            agent_suggestions=agents,
            confidence_score=FALLBACK_CONFIDENCE,
            estimated_complexity=complexity,
            order_of_steps=list(STEPS[category]),
            token_count=len(text) * 2,
        )
