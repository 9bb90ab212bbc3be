"""Export renderings of structured prompts."""

from .formatter import ExportFormat, export_result, to_json, to_markdown, to_yaml

__all__ = [
    "ExportFormat",
    "export_result",
    "to_json",
    "to_markdown",
    "to_yaml",
]
