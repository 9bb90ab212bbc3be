"""
Exception hierarchy for the enhancement engine.

Only EmptyInputError is ever surfaced by ``Enhancer.enhance``. Generation
errors are raised by backends and recovered by the orchestrator through the
fallback synthesizer.
"""


class EnhancerError(Exception):
    """Base exception for prompt enhancer errors."""

    pass


class EmptyInputError(EnhancerError, ValueError):
    """Raised when the raw prompt is empty or whitespace-only."""

    def __init__(self, message: str = "Prompt content cannot be empty") -> None:
        super().__init__(message)


class GenerationError(EnhancerError):
    """Raised when the generative backend fails to produce an enhancement."""

    def __init__(self, message: str, backend: str | None = None) -> None:
        self.backend = backend
        super().__init__(message)


class GenerationUnavailableError(GenerationError):
    """Raised when the generative backend cannot be invoked at all."""

    pass


class GenerationTimeoutError(GenerationError):
    """Raised when the generative backend exceeds its deadline."""

    pass


class MalformedGenerationError(GenerationError):
    """Raised when the backend response does not match the expected schema."""

    pass


class PromptNotFoundError(EnhancerError):
    """Raised when a stored prompt cannot be found."""

    def __init__(self, prompt_id: str) -> None:
        self.prompt_id = prompt_id
        super().__init__(f"Prompt not found: {prompt_id}")
