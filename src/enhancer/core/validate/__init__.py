"""Quality validation of structured prompts."""

from .validator import PromptValidator, validate

__all__ = ["PromptValidator", "validate"]
