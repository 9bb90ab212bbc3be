"""Project context gathering: relevant files, dependencies and rules."""

from .analyzer import ContextAnalyzer, extract_keywords
from .manifest import detect_technical_stack, scan_manifests
from .outcome import Outcome
from .rules import load_project_rules

__all__ = [
    "ContextAnalyzer",
    "Outcome",
    "detect_technical_stack",
    "extract_keywords",
    "load_project_rules",
    "scan_manifests",
]
