"""
Rule-based quality validation for structured prompts.

The validator is a pure function of the StructuredResult: it performs no
I/O and returns the same ValidationResult for the same input.

Scoring starts at 100, deducts a fixed penalty per issue severity and then
adds fixed bonuses for quality features (criteria, examples, constraints,
context files, instruction length), clamped to [0, 100]. Because bonuses are
applied after penalties, a result with several issues but rich content can
still score highly; that is intended.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from enhancer.core.prompts.models import (
    IssueSeverity,
    PromptContext,
    StructuredResult,
    ValidationIssue,
    ValidationResult,
    WorkflowCategory,
)

MIN_INSTRUCTION_LENGTH = 20

SEVERITY_PENALTIES: dict[IssueSeverity, int] = {
    IssueSeverity.ERROR: 20,
    IssueSeverity.WARNING: 10,
    IssueSeverity.INFO: 5,
}
QUALITY_BONUS = 5

VAGUE_TERMS = re.compile(r"\b(?:something|somehow|stuff|things?|whatever)\b", re.IGNORECASE)

ACTION_VERBS = (
    "create",
    "implement",
    "fix",
    "add",
    "update",
    "refactor",
    "document",
    "remove",
    "replace",
    "optimize",
    "test",
    "write",
    "build",
    "migrate",
    "investigate",
    "review",
    "deploy",
    "secure",
    "analyze",
    "design",
    "improve",
)
ACTION_PATTERN = re.compile(rf"\b(?:{'|'.join(ACTION_VERBS)})", re.IGNORECASE)

# category -> minimum number of success criteria
MIN_CRITERIA: dict[WorkflowCategory, int] = {
    WorkflowCategory.BUG: 2,
    WorkflowCategory.FEATURE: 3,
}


@dataclass(frozen=True)
class Finding:
    issue: ValidationIssue
    suggestion: str | None = None


def _issue(
    severity: IssueSeverity,
    field: str,
    message: str,
    fix: str | None = None,
    suggestion: str | None = None,
) -> Finding:
    return Finding(
        issue=ValidationIssue(severity=severity, field=field, message=message, fix=fix),
        suggestion=suggestion,
    )


class PromptValidator:
    """
    Score a StructuredResult against the quality rule set.

    Example:
        >>> result = StructuredResult(instruction="fix")
        >>> validation = PromptValidator().validate(result)
        >>> validation.is_valid, validation.score
        (False, 10)
    """

    def validate(self, result: StructuredResult) -> ValidationResult:
        findings: list[Finding] = []
        findings.extend(self._check_required(result))
        findings.extend(self._check_instruction(result.instruction))
        findings.extend(self._check_context(result.context or PromptContext()))
        findings.extend(self._check_category(result))

        issues = [f.issue for f in findings]
        suggestions: list[str] = []
        for finding in findings:
            if finding.suggestion and finding.suggestion not in suggestions:
                suggestions.append(finding.suggestion)
        if result.category == WorkflowCategory.FEATURE and not result.examples:
            suggestions.append("Consider adding usage examples for the new feature")

        return ValidationResult(
            is_valid=not any(i.severity == IssueSeverity.ERROR for i in issues),
            score=self.score(result, issues),
            issues=issues,
            suggestions=suggestions,
        )

    def score(self, result: StructuredResult, issues: list[ValidationIssue]) -> int:
        """Penalties per issue, then quality bonuses, clamped to [0, 100]."""
        score = 100 - sum(SEVERITY_PENALTIES[issue.severity] for issue in issues)

        instruction = result.instruction.strip()
        bonuses = (
            len(result.success_criteria) >= 3,
            len(result.examples) >= 1,
            len(result.constraints) >= 1,
            len(result.relevant_files) > 3,
            len(instruction) > 100,
            len(instruction) > 200,
        )
        score += QUALITY_BONUS * sum(bonuses)
        return max(0, min(100, score))

    def _check_required(self, result: StructuredResult) -> list[Finding]:
        findings: list[Finding] = []
        if not result.id.strip():
            findings.append(_issue(IssueSeverity.ERROR, "id", "Prompt ID is required"))
        if not result.instruction.strip():
            findings.append(
                _issue(IssueSeverity.ERROR, "instruction", "Instruction cannot be empty")
            )
        if result.category is None:
            findings.append(
                _issue(IssueSeverity.ERROR, "category", "Workflow category must be specified")
            )
        if result.context is None:
            findings.append(_issue(IssueSeverity.ERROR, "context", "Context is required"))
        return findings

    def _check_instruction(self, instruction: str) -> list[Finding]:
        instruction = instruction.strip()
        if not instruction:
            # Already reported as a required-field error
            return []

        findings: list[Finding] = []
        if len(instruction) < MIN_INSTRUCTION_LENGTH:
            findings.append(
                _issue(
                    IssueSeverity.WARNING,
                    "instruction",
                    f"Instruction is too short ({len(instruction)} chars)",
                    fix="Add more specific details about what needs to be done",
                    suggestion="Expand the instruction with specific requirements and context",
                )
            )

        vague = sorted({m.group(0).lower() for m in VAGUE_TERMS.finditer(instruction)})
        if vague:
            findings.append(
                _issue(
                    IssueSeverity.WARNING,
                    "instruction",
                    f"Instruction contains vague terms: {', '.join(vague)}",
                    fix="Replace vague terms with specific descriptions",
                    suggestion="Be more specific about what exactly needs to be done",
                )
            )

        if not ACTION_PATTERN.search(instruction):
            findings.append(
                _issue(
                    IssueSeverity.INFO,
                    "instruction",
                    "Instruction lacks clear action words",
                    fix="Start with a clear action verb",
                )
            )
        return findings

    def _check_context(self, context: PromptContext) -> list[Finding]:
        findings: list[Finding] = []
        if not context.relevant_files:
            findings.append(
                _issue(
                    IssueSeverity.INFO,
                    "context.relevant_files",
                    "No relevant files identified",
                    fix="Consider adding file paths that might be affected",
                    suggestion="Specify which files or components will be modified",
                )
            )
        if not context.technical_stack:
            findings.append(
                _issue(
                    IssueSeverity.WARNING,
                    "context.technical_stack",
                    "Technical stack not identified",
                    fix="Specify the technologies involved",
                )
            )
        if not context.dependencies:
            findings.append(
                _issue(
                    IssueSeverity.INFO,
                    "context.dependencies",
                    "No dependencies listed",
                    fix="Consider which libraries or packages are involved",
                )
            )
        return findings

    def _check_category(self, result: StructuredResult) -> list[Finding]:
        category = result.category
        findings: list[Finding] = []

        minimum = MIN_CRITERIA.get(category) if category else None
        if minimum is not None and len(result.success_criteria) < minimum:
            if category == WorkflowCategory.BUG:
                findings.append(
                    _issue(
                        IssueSeverity.WARNING,
                        "success_criteria",
                        "Bug fixes should have clear success criteria",
                        fix="Add criteria for verifying the fix",
                        suggestion="Include steps to verify the bug is fixed",
                    )
                )
            else:
                findings.append(
                    _issue(
                        IssueSeverity.WARNING,
                        "success_criteria",
                        "Features should have comprehensive success criteria",
                        fix="Add acceptance criteria for the feature",
                    )
                )

        if category == WorkflowCategory.REFACTOR and not result.constraints:
            findings.append(
                _issue(
                    IssueSeverity.WARNING,
                    "constraints",
                    "Refactoring should specify constraints",
                    fix="Add constraints like maintaining backward compatibility",
                )
            )

        if category == WorkflowCategory.DOCUMENTATION and not result.expected_output.structure:
            findings.append(
                _issue(
                    IssueSeverity.INFO,
                    "expected_output.structure",
                    "Documentation should specify format",
                    fix="Specify the documentation structure expected",
                )
            )
        return findings


_default_validator = PromptValidator()


def validate(result: StructuredResult) -> ValidationResult:
    """Validate ``result`` with the default rule set."""
    return _default_validator.validate(result)
