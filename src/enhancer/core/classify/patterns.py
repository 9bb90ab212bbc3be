"""
Keyword pattern tables for workflow classification.

Each category maps to a handful of compiled patterns covering synonyms and
common inflections. Patterns are matched against lower-cased text and every
match counts toward the category score, so repeated cues weigh more.

To add a category cue, extend the table; the classifier needs no changes.
"""

import re

from enhancer.core.prompts.models import WorkflowCategory


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p) for p in patterns)


CATEGORY_PATTERNS: dict[WorkflowCategory, tuple[re.Pattern[str], ...]] = {
    WorkflowCategory.BUG: _compile(
        r"\b(?:bugs?|errors?|issues?|problems?|broken|crash(?:es|ed|ing)?|fail(?:s|ed|ing|ure)?)\b",
        r"(?:\bnot working\b|\bdoesn't work\b|\bcan't\b|\bcannot\b|\bunable to\b|\bexceptions?\b)",
        r"\b(?:regressions?|defects?|faults?|fix(?:es|ed|ing)?)\b",
    ),
    WorkflowCategory.FEATURE: _compile(
        r"\b(?:add|adding|create|implement|build|develop)\b",
        r"\b(?:new feature|enhance|extend|integrate|support)\b",
        r"\b(?:functionality|capability|capabilities)\b",
    ),
    WorkflowCategory.REFACTOR: _compile(
        r"\b(?:refactor(?:ing)?|restructure|reorganize)\b",
        r"\b(?:clean up|cleanup|simplify|modernize|decouple)\b",
        r"\b(?:maintainability|readability|technical debt|tech debt)\b",
    ),
    WorkflowCategory.DOCUMENTATION: _compile(
        r"\b(?:document|documentation|docs|readme)\b",
        r"\b(?:explain|describe|clarify|comments?)\b",
        r"\b(?:guides?|tutorials?|docstrings?)\b",
    ),
    WorkflowCategory.RESEARCH: _compile(
        r"\b(?:research|investigate|explore|analy[sz]e)\b",
        r"\b(?:compare|evaluate|assess|study)\b",
        r"\b(?:understand|learn|discover|options)\b",
    ),
    WorkflowCategory.REVIEW: _compile(
        r"\b(?:pr|pull request|code review)\b",
        r"\b(?:review|feedback|approve)\b",
        r"\b(?:changes|diff|commits?)\b",
    ),
    WorkflowCategory.ARCHITECTURE: _compile(
        r"\b(?:architect(?:ure)?|system design)\b",
        r"\b(?:design|structure|patterns?)\b",
        r"\b(?:microservices?|scalab\w*|modules?|layers?)\b",
    ),
    WorkflowCategory.TESTING: _compile(
        r"\b(?:tests?|testing)\b",
        r"\b(?:coverage|unit|integration|e2e)\b",
        r"\b(?:pytest|jest|vitest|playwright|mocks?)\b",
    ),
    WorkflowCategory.OPTIMIZATION: _compile(
        r"\boptimi[sz](?:e|ation|ing)\b",
        r"\b(?:performance|speed|faster|slow|latency)\b",
        r"\b(?:efficien\w*|memory usage|throughput|bottlenecks?)\b",
    ),
    WorkflowCategory.SECURITY: _compile(
        r"\b(?:security|secure|vulnerabilit(?:y|ies))\b",
        r"\b(?:auth|authentication|authorization|encrypt\w*)\b",
        r"\b(?:xss|csrf|injection|owasp|secrets?)\b",
    ),
    WorkflowCategory.DEPLOYMENT: _compile(
        r"\b(?:deploy\w*|release)\b",
        r"\b(?:ci|cd|pipelines?)\b",
        r"\b(?:docker|kubernetes|k8s|staging|production)\b",
    ),
}
