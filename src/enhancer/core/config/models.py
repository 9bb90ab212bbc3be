"""
Configuration data models for the prompt enhancer.

These models define the structure of .enhancer.json and
~/.config/enhancer/config.json files, with validation and type safety via
Pydantic.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_IGNORE_DIRS = [
    "node_modules",
    ".git",
    "dist",
    "build",
    ".next",
    "coverage",
    ".turbo",
    "__pycache__",
    ".venv",
    "venv",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
    ".tox",
]

DEFAULT_SOURCE_EXTENSIONS = [
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".json",
    ".yaml",
    ".yml",
    ".md",
    ".py",
    ".pyi",
    ".toml",
    ".cfg",
    ".ini",
    ".rst",
]


class GenerationConfig(BaseModel):
    """
    Generative backend settings.

    The backend is optional: when it is unavailable or fails, prompts are
    built by the deterministic fallback instead.
    """
    backend: str = Field(
        default="claude",
        description="Registered backend name: 'claude' or 'offline'"
    )
    model: Optional[str] = Field(
        default="haiku",
        description="Model passed to the backend (e.g., 'haiku', 'sonnet')"
    )
    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Deadline for a single generation call"
    )


class ContextConfig(BaseModel):
    """
    Project context gathering.

    Controls which files are scanned and how many are reported.
    """
    enabled: bool = Field(
        default=True,
        description="Scan the project tree and manifests for context"
    )
    max_files: int = Field(
        default=20,
        ge=1,
        description="Stop collecting relevant files after this many"
    )
    display_files: int = Field(
        default=10,
        ge=1,
        description="Number of ranked files kept in the result"
    )
    ignore_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_DIRS),
        description="Directory names never descended into"
    )
    extra_ignore: list[str] = Field(
        default_factory=list,
        description="Additional directory names to skip"
    )
    source_extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SOURCE_EXTENSIONS),
        description="File extensions considered source files"
    )
    cache_size: int = Field(
        default=64,
        ge=1,
        description="Capacity of the in-memory context cache"
    )
    cache_key_length: int = Field(
        default=50,
        ge=1,
        description="Prompt prefix length used as the cache key"
    )

    @model_validator(mode="after")
    def clamp_display_files(self) -> "ContextConfig":
        """The display cap can never exceed the collection cap."""
        if self.display_files > self.max_files:
            self.display_files = self.max_files
        return self

    @property
    def all_ignored_dirs(self) -> set[str]:
        return set(self.ignore_dirs) | set(self.extra_ignore)


class AgentsConfig(BaseModel):
    """Agent catalog discovery."""
    directory: str = Field(
        default=".claude/agents",
        description="Agent definition directory, relative to the project root"
    )
    cache_size: int = Field(
        default=16,
        ge=1,
        description="Capacity of the in-memory catalog cache"
    )
    description_max_length: int = Field(
        default=200,
        ge=1,
        description="Longer agent descriptions are truncated"
    )


class StorageConfig(BaseModel):
    """Where saved prompts are written."""
    output_dir: str = Field(
        default=".enhancer/crafted",
        description="Directory for saved prompts, relative to the project root"
    )


class EnhancerConfig(BaseModel):
    """
    Top-level enhancer configuration.

    Loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = EnhancerConfig(generation=GenerationConfig(backend="offline"))
        >>> config.generation.backend
        'offline'
        >>> config.context.max_files
        20
    """
    generation: GenerationConfig = Field(
        default_factory=GenerationConfig,
        description="Generative backend settings"
    )
    context: ContextConfig = Field(
        default_factory=ContextConfig,
        description="Project context gathering"
    )
    agents: AgentsConfig = Field(
        default_factory=AgentsConfig,
        description="Agent catalog discovery"
    )
    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Saved prompt storage"
    )
    debug: bool = Field(
        default=False,
        description="Verbose logging"
    )

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields for forward compatibility
        validate_assignment=True,
    )

    @field_validator('generation', mode='before')
    @classmethod
    def validate_generation(
        cls, v: Union[str, dict, GenerationConfig]
    ) -> Union[dict, GenerationConfig]:
        """Convert a bare backend name to GenerationConfig."""
        if isinstance(v, str):
            return {"backend": v}
        return v
