"""
Pytest configuration and shared fixtures.

Provides fixtures for sample projects (agents, source files, manifests),
stub generation backends and isolated XDG/config state.
"""

import asyncio
import json
from pathlib import Path
from typing import Any

import pytest
from pydantic import BaseModel

from enhancer.core.config import clear_cache
from enhancer.core.prompts.models import AIEnhancement, ContextHints, WorkflowCategory

# ==============================================================================
# Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point XDG dirs at tmp_path and clear ENHANCER_* overrides and the config cache."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    for var in (
        "ENHANCER_BACKEND",
        "ENHANCER_MODEL",
        "ENHANCER_TIMEOUT",
        "ENHANCER_CONTEXT_ENABLED",
        "ENHANCER_OUTPUT_DIR",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Directory Fixtures
# ==============================================================================


AGENT_FILES = {
    "nextjs-ui-api-engineer.md": (
        "---\n"
        "name: nextjs-ui-api-engineer\n"
        "description: Builds Next.js pages and API routes\n"
        "---\n\nYou build UI and API code.\n"
    ),
    "typescript-error-resolver.md": (
        "---\n"
        "name: typescript-error-resolver\n"
        "description: Resolves TypeScript compiler errors\n"
        "---\n\nYou fix type errors.\n"
    ),
}


def write_agents(project: Path, files: dict[str, str] = AGENT_FILES) -> Path:
    agents_dir = project / ".claude" / "agents"
    agents_dir.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        (agents_dir / name).write_text(content)
    return agents_dir


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary project with agents, sources and a package.json.

    Creates:
    - .claude/agents/{nextjs-ui-api-engineer,typescript-error-resolver}.md
    - src/auth/login.ts, src/auth/LoginForm.tsx, src/utils/format.ts
    - node_modules/login-lib/index.js (must be ignored)
    - package.json with next/react/prisma dependencies
    - .git/
    """
    project = tmp_path / "project"
    project.mkdir()
    (project / ".git").mkdir()
    write_agents(project)

    for rel in ("src/auth/login.ts", "src/auth/LoginForm.tsx", "src/utils/format.ts"):
        path = project / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("export {}\n")

    ignored = project / "node_modules" / "login-lib" / "index.js"
    ignored.parent.mkdir(parents=True)
    ignored.write_text("module.exports = {}\n")

    package = {
        "name": "sample",
        "dependencies": {"next": "14.0.0", "react": "18.2.0", "@prisma/client": "5.0.0"},
        "devDependencies": {"typescript": "5.3.0"},
    }
    (project / "package.json").write_text(json.dumps(package, indent=2))
    return project


@pytest.fixture
def empty_project(tmp_path: Path) -> Path:
    project = tmp_path / "empty"
    project.mkdir()
    return project


# ==============================================================================
# Stub Backends
# ==============================================================================


def model_enhancement(**overrides: Any) -> AIEnhancement:
    data: dict[str, Any] = {
        "instruction": "Fix the login form so that submitting valid credentials signs the user in.",
        "context": ContextHints(relevant_files=["src/auth/session.ts"]),
        "workflow_type": WorkflowCategory.BUG,
        "success_criteria": ["Login succeeds", "Error is shown for bad passwords"],
        "constraints": ["Keep the public API unchanged"],
        "confidence_score": 88,
    }
    data.update(overrides)
    return AIEnhancement(**data)


class StubBackend:
    """Backend returning a canned answer and recording prompts."""

    def __init__(
        self,
        answer: BaseModel | dict[str, Any] | None = None,
        available: bool = True,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.answer = answer if answer is not None else model_enhancement()
        self.available = available
        self.error = error
        self.delay = delay
        self.prompts: list[str] = []

    @property
    def name(self) -> str:
        return "stub"

    def is_available(self) -> bool:
        return self.available

    async def generate(self, prompt: str, schema: type[BaseModel]) -> BaseModel | dict[str, Any]:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def stub_backend() -> StubBackend:
    return StubBackend()
