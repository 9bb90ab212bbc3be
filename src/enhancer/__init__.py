"""
Prompt Enhancer

Turns rough, natural-language task descriptions into structured, scored
prompts with classified categories, success criteria and constraints.
"""

__version__ = "0.3.0"

# Re-export core models for convenience
from enhancer.core.prompts.models import StructuredResult, ValidationResult, WorkflowCategory

__all__ = ["StructuredResult", "ValidationResult", "WorkflowCategory", "__version__"]
