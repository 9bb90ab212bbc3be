"""
Prompt data models.

Pydantic records shared by every stage of the enhancement pipeline.
"""

from .models import (
    AgentInfo,
    AIEnhancement,
    Complexity,
    ContextBundle,
    ContextHints,
    DiscoveredReference,
    EnhancementSource,
    Example,
    FileContext,
    InputMetadata,
    InputType,
    IssueSeverity,
    MentionResolution,
    OutputFormat,
    OutputSpecification,
    PromptContext,
    PromptInput,
    PromptMetadata,
    RawInput,
    ReferenceType,
    StructuredResult,
    ValidationIssue,
    ValidationResult,
    WorkflowCategory,
)

__all__ = [
    "AgentInfo",
    "AIEnhancement",
    "Complexity",
    "ContextBundle",
    "ContextHints",
    "DiscoveredReference",
    "EnhancementSource",
    "Example",
    "FileContext",
    "InputMetadata",
    "InputType",
    "IssueSeverity",
    "MentionResolution",
    "OutputFormat",
    "OutputSpecification",
    "PromptContext",
    "PromptInput",
    "PromptMetadata",
    "RawInput",
    "ReferenceType",
    "StructuredResult",
    "ValidationIssue",
    "ValidationResult",
    "WorkflowCategory",
]
