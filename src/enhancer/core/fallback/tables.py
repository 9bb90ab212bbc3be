"""
Per-category defaults for fallback synthesis.

Success criteria, constraints, ordered steps and agent role hints for every
WorkflowCategory. Steps are stored without numbering; renderers number them.
"""

import re

from enhancer.core.prompts.models import (
    Complexity,
    OutputFormat,
    WorkflowCategory,
)

C = WorkflowCategory

SUCCESS_CRITERIA: dict[WorkflowCategory, tuple[str, ...]] = {
    C.BUG: (
        "Issue is resolved and no longer reproducible",
        "All existing tests pass without regression",
        "New tests added to prevent regression",
        "Error handling improved",
    ),
    C.FEATURE: (
        "Feature works as specified with edge cases handled",
        "Unit and integration tests provide >80% coverage",
        "Documentation and examples updated",
        "Performance benchmarks met",
        "Accessibility requirements satisfied",
    ),
    C.REFACTOR: (
        "Code complexity reduced (measurable via metrics)",
        "All tests pass with no functionality changes",
        "Performance maintained or improved",
        "Code follows established patterns",
        "Technical debt reduced",
    ),
    C.DOCUMENTATION: (
        "All public APIs documented with examples",
        "Setup and usage instructions clear and tested",
        "Architecture decisions documented",
        "Troubleshooting guide included",
    ),
    C.RESEARCH: (
        "All viable options evaluated with pros/cons",
        "Performance benchmarks compared",
        "Cost analysis provided",
        "Implementation plan detailed",
        "Risks and mitigations identified",
    ),
    C.REVIEW: (
        "Code quality verified against standards",
        "Test coverage adequate (>80%)",
        "No security vulnerabilities introduced",
        "Performance impact assessed",
        "Documentation updated",
    ),
    C.ARCHITECTURE: (
        "System design documented with diagrams",
        "Scalability considerations addressed",
        "Security architecture reviewed",
        "Integration points defined",
        "Migration path specified",
    ),
    C.TESTING: (
        "Test coverage increased to target percentage",
        "Edge cases and error conditions covered",
        "Performance tests implemented",
        "Test execution time optimized",
        "CI/CD integration working",
    ),
    C.OPTIMIZATION: (
        "Performance metrics improved by target percentage",
        "Bottlenecks identified and resolved",
        "Resource usage reduced",
        "Benchmarks documented",
        "No functionality regression",
    ),
    C.SECURITY: (
        "Vulnerabilities identified and patched",
        "Security best practices implemented",
        "Authentication/authorization verified",
        "Sensitive data properly encrypted",
        "Security tests added",
    ),
    C.DEPLOYMENT: (
        "Deployment pipeline configured and tested",
        "Rollback strategy implemented",
        "Monitoring and alerting set up",
        "Documentation updated",
        "Zero-downtime deployment achieved",
    ),
    C.GENERAL: (
        "Task completed as specified",
        "Quality standards met",
        "Tests added/updated",
        "Documentation current",
        "Code reviewed and approved",
    ),
}

CONSTRAINTS: dict[WorkflowCategory, tuple[str, ...]] = {
    C.BUG: (
        "Maintain backward compatibility",
        "Add comprehensive error logging",
        "Include regression tests",
    ),
    C.FEATURE: (
        "Follow project coding standards",
        "Include input validation",
        "Ensure mobile responsiveness",
    ),
    C.REFACTOR: (
        "No external API changes",
        "Preserve all functionality",
        "Maintain or improve performance",
    ),
    C.DOCUMENTATION: (
        "Use markdown format",
        "Include working code examples",
        "Keep under 5000 words",
    ),
    C.RESEARCH: (
        "Provide quantitative comparisons",
        "Include implementation timelines",
        "Consider team expertise",
    ),
    C.REVIEW: (
        "Check against security checklist",
        "Verify test coverage >80%",
        "Ensure no breaking changes",
    ),
    C.ARCHITECTURE: (
        "Consider microservices principles",
        "Plan for 10x scale",
        "Minimize vendor lock-in",
    ),
    C.TESTING: (
        "Achieve 80% code coverage",
        "Tests must run in <5 minutes",
        "Mock external dependencies",
    ),
    C.OPTIMIZATION: (
        "No functionality changes",
        "Benchmark before and after",
        "Document optimization techniques",
    ),
    C.SECURITY: (
        "Follow OWASP guidelines",
        "Implement defense in depth",
        "Include security tests",
    ),
    C.DEPLOYMENT: (
        "Ensure rollback capability",
        "Test in staging first",
        "Update runbooks",
    ),
    C.GENERAL: (
        "Follow best practices",
        "Maintain code quality",
        "Update relevant documentation",
    ),
}

STEPS: dict[WorkflowCategory, tuple[str, ...]] = {
    C.BUG: (
        "Reproduce the issue locally",
        "Identify root cause through debugging",
        "Implement fix with proper error handling",
        "Add tests to prevent regression",
        "Verify fix resolves issue completely",
    ),
    C.FEATURE: (
        "Design component/API architecture",
        "Implement core functionality",
        "Add comprehensive tests",
        "Implement edge cases and error handling",
        "Update documentation and examples",
    ),
    C.REFACTOR: (
        "Analyze current implementation",
        "Plan refactoring approach",
        "Implement changes incrementally",
        "Ensure all tests pass",
        "Verify performance metrics",
    ),
    C.DOCUMENTATION: (
        "Outline documentation structure",
        "Write main content",
        "Add code examples",
        "Review for clarity",
        "Test examples work",
    ),
    C.RESEARCH: (
        "Define evaluation criteria",
        "Research available options",
        "Create comparison matrix",
        "Test promising solutions",
        "Document recommendations",
    ),
    C.REVIEW: (
        "Review code changes",
        "Check test coverage",
        "Verify documentation",
        "Test functionality",
        "Provide feedback",
    ),
    C.ARCHITECTURE: (
        "Analyze requirements and constraints",
        "Design system architecture",
        "Create proof of concept",
        "Document design decisions",
        "Plan implementation phases",
    ),
    C.TESTING: (
        "Identify test gaps",
        "Write unit tests",
        "Implement integration tests",
        "Add E2E tests if needed",
        "Integrate with CI/CD",
    ),
    C.OPTIMIZATION: (
        "Profile and identify bottlenecks",
        "Benchmark current performance",
        "Implement optimizations",
        "Measure improvements",
        "Document changes",
    ),
    C.SECURITY: (
        "Perform security audit",
        "Identify vulnerabilities",
        "Implement fixes",
        "Add security tests",
        "Update security documentation",
    ),
    C.DEPLOYMENT: (
        "Set up deployment environment",
        "Configure CI/CD pipeline",
        "Implement deployment scripts",
        "Test deployment process",
        "Document procedures",
    ),
    C.GENERAL: (
        "Understand requirements",
        "Plan implementation",
        "Execute task",
        "Test and verify",
        "Document changes",
    ),
}

# Substrings of agent names suited to each category
AGENT_ROLE_HINTS: dict[WorkflowCategory, tuple[str, ...]] = {
    C.BUG: ("resolver", "debugger"),
    C.FEATURE: ("engineer", "developer"),
    C.REFACTOR: ("challenger", "reviewer"),
    C.REVIEW: ("reviewer", "challenger"),
    C.ARCHITECTURE: ("architect", "principle"),
    C.TESTING: ("tester", "challenger"),
    C.OPTIMIZATION: ("principle", "performance"),
    C.SECURITY: ("security", "principle", "challenger"),
    C.DEPLOYMENT: ("orchestrator", "devops"),
}

DEFAULT_CLARIFYING_QUESTIONS: tuple[str, ...] = (
    "What is the specific technical goal and acceptance criteria?",
    "Which files/components need modification and why?",
    "What are the performance and scalability requirements?",
    "Are there existing patterns or conventions to follow?",
    "What testing strategy should be implemented?",
    "Are there security or compliance considerations?",
)

OUTPUT_FORMATS: dict[WorkflowCategory, OutputFormat] = {
    C.BUG: OutputFormat.CODE,
    C.FEATURE: OutputFormat.CODE,
    C.REFACTOR: OutputFormat.CODE,
    C.DOCUMENTATION: OutputFormat.DOCUMENTATION,
    C.RESEARCH: OutputFormat.ANALYSIS,
    C.REVIEW: OutputFormat.ANALYSIS,
}

OUTPUT_STRUCTURES: dict[WorkflowCategory, str] = {
    C.BUG: "Fixed code with error handling",
    C.FEATURE: "Implementation with tests",
    C.REFACTOR: "Improved code structure",
    C.DOCUMENTATION: "Markdown documentation",
    C.RESEARCH: "Analysis with recommendations",
    C.REVIEW: "Review feedback",
}
DEFAULT_OUTPUT_STRUCTURE = "Appropriate format for task"

# Regex cues per complexity tier; simple is the default when neither matches
COMPLEXITY_CUES: dict[Complexity, re.Pattern[str]] = {
    Complexity.COMPLEX: re.compile(
        r"\b(?:architecture|system|redesign|multiple|integration|workflow|orchestrate)\b",
        re.IGNORECASE,
    ),
    Complexity.MODERATE: re.compile(
        r"\b(?:implement|feature|refactor|optimize|enhance)\b", re.IGNORECASE
    ),
}
COMPLEX_LENGTH = 300
MODERATE_LENGTH = 150


def output_format_for(category: WorkflowCategory) -> OutputFormat:
    return OUTPUT_FORMATS.get(category, OutputFormat.STRUCTURED_DATA)


def output_structure_for(category: WorkflowCategory) -> str:
    return OUTPUT_STRUCTURES.get(category, DEFAULT_OUTPUT_STRUCTURE)
