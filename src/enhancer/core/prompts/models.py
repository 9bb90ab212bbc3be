"""
Prompt data models.

Defines the records that flow through the enhancement pipeline:

    RawInput -> MentionResolution / ContextBundle -> AIEnhancement
             -> StructuredResult (+ ValidationResult)

Results handed back to callers are frozen. An "update" is always a new
StructuredResult built with ``model_copy``, so history is never rewritten in
place.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

RESULT_VERSION = "1.0.0"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WorkflowCategory(str, Enum):
    """Closed set of task categories a prompt can be classified into."""

    BUG = "bug"
    FEATURE = "feature"
    REFACTOR = "refactor"
    DOCUMENTATION = "documentation"
    RESEARCH = "research"
    REVIEW = "review"
    ARCHITECTURE = "architecture"
    TESTING = "testing"
    OPTIMIZATION = "optimization"
    SECURITY = "security"
    DEPLOYMENT = "deployment"
    GENERAL = "general"


class Complexity(str, Enum):
    """Rough effort tier for a task."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


class IssueSeverity(str, Enum):
    """Severity levels for validation issues."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class OutputFormat(str, Enum):
    """Shape of the deliverable a prompt asks for."""

    TEXT = "text"
    CODE = "code"
    STRUCTURED_DATA = "structured_data"
    DOCUMENTATION = "documentation"
    ANALYSIS = "analysis"


class InputType(str, Enum):
    TEXT = "text"
    CODE = "code"
    FILE = "file"
    URL = "url"


class ReferenceType(str, Enum):
    URL = "url"
    LIBRARY = "library"
    PACKAGE = "package"


class EnhancementSource(str, Enum):
    """Which path produced the instruction of a result."""

    MODEL = "model"
    FALLBACK = "fallback"


# ==============================================================================
# Input
# ==============================================================================


class InputMetadata(BaseModel):
    """Optional caller-supplied metadata for a raw prompt."""

    author: str | None = None
    tags: list[str] = Field(default_factory=list)
    timestamp: datetime | None = None
    source: str = Field(default="manual", description="Where the prompt came from")
    task_id: str | None = None


class RawInput(BaseModel):
    """
    A raw, unstructured prompt as typed by a user.

    The content is not rejected here; the orchestrator decides whether the
    trimmed content is usable so that it can raise EmptyInputError.
    """

    content: str = Field(..., description="Free-text task description")
    category: WorkflowCategory | None = Field(
        default=None,
        description="Explicit category override; bypasses classification",
    )
    metadata: InputMetadata = Field(default_factory=InputMetadata)

    @property
    def text(self) -> str:
        """Content with surrounding whitespace removed."""
        return self.content.strip()


# ==============================================================================
# Agents
# ==============================================================================


class AgentInfo(BaseModel):
    """One entry of the agent catalog."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique agent name")
    description: str = Field(default="", description="Short free-text description")
    file_path: str = Field(default="", description="Where the agent was loaded from")

    @property
    def token(self) -> str:
        """Canonical in-text reference for this agent."""
        return f"@agent-{self.name}"


class MentionResolution(BaseModel):
    """Outcome of resolving agent mentions in a piece of text."""

    model_config = ConfigDict(frozen=True)

    original_text: str
    processed_text: str
    resolved_agents: list[AgentInfo] = Field(default_factory=list)
    ambiguous_mentions: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Mention -> candidate agent names when more than one matched",
    )

    @property
    def agent_names(self) -> list[str]:
        return [agent.name for agent in self.resolved_agents]


# ==============================================================================
# Context
# ==============================================================================


class FileContext(BaseModel):
    """A project file judged relevant to a prompt."""

    model_config = ConfigDict(frozen=True)

    path: str
    summary: str
    score: int = 0


class ContextBundle(BaseModel):
    """Files, dependencies and stack tags gathered for a prompt."""

    model_config = ConfigDict(frozen=True)

    files: list[FileContext] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    technical_stack: list[str] = Field(default_factory=list)
    project_rules: str | None = None
    degraded: list[str] = Field(
        default_factory=list,
        description="Sub-analyses that fell back to an empty result",
    )

    @property
    def file_paths(self) -> list[str]:
        return [f.path for f in self.files]

    @property
    def is_degraded(self) -> bool:
        return bool(self.degraded)


class PromptContext(BaseModel):
    """Context section of a structured prompt."""

    project_overview: str | None = None
    relevant_files: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    current_state: str | None = None
    technical_stack: list[str] = Field(default_factory=list)


# ==============================================================================
# Structured prompt parts
# ==============================================================================


class PromptInput(BaseModel):
    label: str
    value: str
    type: InputType = InputType.TEXT


class Example(BaseModel):
    input: str
    output: str
    explanation: str | None = None


class OutputSpecification(BaseModel):
    """What the deliverable should look like."""

    format: OutputFormat = OutputFormat.TEXT
    structure: str | None = None
    constraints: list[str] = Field(default_factory=list)
    examples: list[Example] = Field(default_factory=list)


class ValidationIssue(BaseModel):
    """A single finding produced by the validator."""

    model_config = ConfigDict(frozen=True)

    severity: IssueSeverity
    field: str
    message: str
    fix: str | None = None

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.field}: {self.message}"


class ValidationResult(BaseModel):
    """Score, issues and suggestions for a structured prompt."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    score: int = Field(..., ge=0, le=100)
    issues: list[ValidationIssue] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.WARNING]


class PromptMetadata(BaseModel):
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    author: str | None = None
    tags: list[str] = Field(default_factory=list)
    source: str = "manual"
    task_id: str | None = None


class DiscoveredReference(BaseModel):
    """A URL, library or package name mentioned in the prompt."""

    model_config = ConfigDict(frozen=True)

    type: ReferenceType
    value: str
    context: str = ""


# ==============================================================================
# Generation schema
# ==============================================================================


class ContextHints(BaseModel):
    """Context suggestions returned by the generative step."""

    relevant_files: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    technical_stack: list[str] = Field(default_factory=list)


class AIEnhancement(BaseModel):
    """
    Schema the generative backend must satisfy.

    The fallback synthesizer produces the same shape, so everything after the
    GENERATE stage is indifferent to which path ran.
    """

    model_config = ConfigDict(extra="ignore")

    instruction: str = Field(..., min_length=1)
    context: ContextHints = Field(default_factory=ContextHints)
    workflow_type: WorkflowCategory | None = None
    clarifying_questions: list[str] = Field(default_factory=list)
    success_criteria: list[str] = Field(default_factory=list)
    constraints: list[str] = Field(default_factory=list)
    examples: list[Example] = Field(default_factory=list)
    agent_suggestions: list[str] = Field(default_factory=list)
    confidence_score: int = Field(default=0, ge=0, le=100)
    estimated_complexity: Complexity = Complexity.SIMPLE
    order_of_steps: list[str] = Field(default_factory=list)
    token_count: int = Field(default=0, ge=0)

    @field_validator("instruction")
    @classmethod
    def strip_instruction(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("instruction must not be blank")
        return v


# ==============================================================================
# Result
# ==============================================================================


class StructuredResult(BaseModel):
    """
    A fully structured, validated prompt.

    Optional collections default to empty; ``category`` and ``context`` are
    nullable so that hand-built or imported results can be validated and
    reported as incomplete rather than rejected.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default="", description="Unique id (uuid4 hex)")
    version: str = RESULT_VERSION
    category: WorkflowCategory | None = None
    instruction: str = ""
    context: PromptContext | None = None
    inputs: list[PromptInput] = Field(default_factory=list)
    expected_output: OutputSpecification = Field(default_factory=OutputSpecification)
    validation: ValidationResult | None = None
    metadata: PromptMetadata = Field(default_factory=PromptMetadata)

    clarifying_questions: list[str] = Field(default_factory=list)
    success_criteria: list[str] = Field(default_factory=list)
    constraints: list[str] = Field(default_factory=list)
    examples: list[Example] = Field(default_factory=list)
    discovered_references: list[DiscoveredReference] = Field(default_factory=list)
    agent_resolution: MentionResolution | None = None

    source: EnhancementSource = EnhancementSource.FALLBACK
    confidence_score: int = Field(default=0, ge=0, le=100)
    estimated_complexity: Complexity = Complexity.SIMPLE
    order_of_steps: list[str] = Field(default_factory=list)
    agent_suggestions: list[str] = Field(default_factory=list)
    token_count: int = 0

    @property
    def score(self) -> int:
        return self.validation.score if self.validation else 0

    @property
    def is_valid(self) -> bool:
        return bool(self.validation and self.validation.is_valid)

    @property
    def relevant_files(self) -> list[str]:
        return self.context.relevant_files if self.context else []
