"""Workflow classification."""

from .classifier import WorkflowClassifier, classify, score_categories
from .patterns import CATEGORY_PATTERNS

__all__ = ["CATEGORY_PATTERNS", "WorkflowClassifier", "classify", "score_categories"]
