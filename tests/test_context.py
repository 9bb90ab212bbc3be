"""
Tests for project context gathering: file relevance, manifests and rules.
"""

import json
import os
import sys
from pathlib import Path

import pytest

from enhancer.core.cache import LRUCache
from enhancer.core.config import ContextConfig
from enhancer.core.context import (
    ContextAnalyzer,
    Outcome,
    detect_technical_stack,
    extract_keywords,
    load_project_rules,
    scan_manifests,
)
from enhancer.core.context.manifest import read_pyproject, read_requirements, requirement_name
from enhancer.core.context.rules import RULES_HEADER


def touch(root: Path, *paths: str) -> None:
    for rel in paths:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x\n")


# ==============================================================================
# Keyword Extraction
# ==============================================================================


class TestExtractKeywords:
    def test_drops_short_and_stop_words(self):
        """Test that short and stop words are not keywords."""
        assert extract_keywords("Fix the login form, the LOGIN button") == [
            "login",
            "form",
            "button",
        ]

    def test_empty(self):
        assert extract_keywords("   ") == []


# ==============================================================================
# File Relevance
# ==============================================================================


class TestFindRelevantFiles:
    """Test the relevance walk over the project tree."""

    def test_ranks_by_keyword_hits(self, project_dir: Path):
        """Test that files with more hits rank first."""
        bundle = ContextAnalyzer(project_dir).analyze("fix the login form")
        assert bundle.file_paths == [
            "src/auth/LoginForm.tsx",
            "src/auth/login.ts",
            "src/utils/format.ts",
        ]
        assert bundle.files[0].score == 2
        assert bundle.files[0].summary == "File: src/auth/LoginForm.tsx"

    def test_ignored_directories_never_included(self, project_dir: Path):
        """Test that node_modules and friends are skipped."""
        touch(project_dir, "dist/login.js", "build/login.js", "pkg.egg-info/login.txt")
        bundle = ContextAnalyzer(project_dir).analyze("login")
        assert bundle.file_paths
        for path in bundle.file_paths:
            assert not path.startswith(("node_modules/", "dist/", "build/", "pkg.egg-info/"))

    def test_extra_ignore(self, project_dir: Path):
        """Test skipping directories listed in extra_ignore."""
        settings = ContextConfig(extra_ignore=["auth"])
        bundle = ContextAnalyzer(project_dir, settings).analyze("login")
        assert bundle.file_paths == []

    def test_lockfiles_and_logs_skipped(self, tmp_path: Path):
        """Test that lockfiles and logs are never relevant."""
        touch(tmp_path, "package-lock.json", "debug-package.log", "package-notes.md")
        bundle = ContextAnalyzer(tmp_path).analyze("package")
        assert bundle.file_paths == ["package-notes.md"]

    def test_non_source_extensions_skipped(self, tmp_path: Path):
        """Test that binary and asset files are skipped."""
        touch(tmp_path, "login.png", "login.py")
        bundle = ContextAnalyzer(tmp_path).analyze("login")
        assert bundle.file_paths == ["login.py"]

    def test_respects_display_cap(self, tmp_path: Path):
        """Test that at most display_files are returned."""
        touch(tmp_path, *(f"src/widget_{i:02d}.py" for i in range(30)))
        bundle = ContextAnalyzer(tmp_path).analyze("widget")
        assert len(bundle.files) == 10

    def test_respects_collection_cap(self, tmp_path: Path):
        """Test that the walk stops at max_files."""
        touch(tmp_path, *(f"src/widget_{i:02d}.py" for i in range(30)))
        settings = ContextConfig(max_files=5, display_files=10)
        analyzer = ContextAnalyzer(tmp_path, settings)
        outcome = analyzer.find_relevant_files(["widget"])
        assert len(outcome.value) == 5
        assert settings.display_files == 5

    def test_no_keywords(self, project_dir: Path):
        """Test that a prompt without keywords finds no files."""
        assert ContextAnalyzer(project_dir).analyze("a to be").files == []

    def test_missing_root_is_degraded(self, tmp_path: Path):
        """Test that a missing root degrades instead of raising."""
        bundle = ContextAnalyzer(tmp_path / "missing").analyze("login form")
        assert bundle.files == []
        assert bundle.is_degraded
        assert "not a directory" in bundle.degraded[0]

    @pytest.mark.skipif(
        sys.platform == "win32" or os.geteuid() == 0, reason="needs POSIX permissions"
    )
    def test_unreadable_directory_is_degraded(self, tmp_path: Path):
        """Test that an unreadable directory is noted and skipped."""
        touch(tmp_path, "open/login.py", "locked/login.py")
        locked = tmp_path / "locked"
        locked.chmod(0)
        try:
            bundle = ContextAnalyzer(tmp_path).analyze("login")
        finally:
            locked.chmod(0o755)
        assert bundle.file_paths == ["open/login.py"]
        assert bundle.is_degraded


class TestContextCache:
    """Test the injected context cache."""

    def test_cache_hit_skips_rescan(self, project_dir: Path):
        """Test that a repeated prompt reuses the cached bundle."""
        cache = LRUCache(4)
        analyzer = ContextAnalyzer(project_dir, cache=cache)
        first = analyzer.analyze("login form")
        touch(project_dir, "src/login_extra.ts")
        second = analyzer.analyze("login form")
        assert second is first
        assert cache.hits == 1

    def test_key_uses_prompt_prefix(self, project_dir: Path):
        """Test that prompts sharing a prefix share a cache entry."""
        cache = LRUCache(4)
        analyzer = ContextAnalyzer(project_dir, ContextConfig(cache_key_length=10), cache=cache)
        first = analyzer.analyze("login form one")
        second = analyzer.analyze("login form two")
        assert second is first

    def test_key_includes_root(self, project_dir: Path, empty_project: Path):
        """Test that different roots never share cache entries."""
        cache = LRUCache(4)
        ContextAnalyzer(project_dir, cache=cache).analyze("login")
        other = ContextAnalyzer(empty_project, cache=cache).analyze("login")
        assert other.files == []
        assert len(cache) == 2


# ==============================================================================
# Manifests
# ==============================================================================


class TestManifests:
    """Test dependency manifest scanning."""

    def test_package_json(self, project_dir: Path):
        """Test reading dependencies from package.json."""
        dependencies, stack, outcomes = scan_manifests(project_dir)
        assert dependencies == ["next", "react", "@prisma/client", "typescript"]
        assert stack == ["Next.js", "React", "Prisma", "TypeScript", "Node.js"]
        assert [o.source for o in outcomes] == ["package.json"]

    def test_pyproject_pep621_and_poetry(self, tmp_path: Path):
        """Test reading PEP 621 and Poetry dependencies."""
        (tmp_path / "pyproject.toml").write_text(
            "[project]\n"
            'dependencies = ["pydantic>=2.0", "typer[all]>=0.9"]\n'
            "[project.optional-dependencies]\n"
            'test = ["pytest>=7"]\n'
            "[tool.poetry.dependencies]\n"
            'python = "^3.10"\n'
            'fastapi = "^0.100"\n'
        )
        outcome = read_pyproject(tmp_path)
        assert outcome is not None
        assert outcome.value == ["pydantic", "typer", "pytest", "fastapi"]

    def test_requirements_txt(self, tmp_path: Path):
        """Test reading requirements.txt, skipping options and comments."""
        (tmp_path / "requirements.txt").write_text(
            "# pinned\n-r base.txt\ndjango==4.2  # web\n\nrequests>=2\n"
        )
        outcome = read_requirements(tmp_path)
        assert outcome is not None
        assert outcome.value == ["django", "requests"]

    def test_python_stack(self, tmp_path: Path):
        """Test stack tags for a Python project."""
        (tmp_path / "requirements.txt").write_text("flask\nsqlalchemy\n")
        _, stack, _ = scan_manifests(tmp_path)
        assert stack == ["Flask", "SQLAlchemy", "Python"]

    def test_absent_manifests(self, empty_project: Path):
        assert scan_manifests(empty_project) == ([], [], [])

    def test_malformed_package_json_is_degraded(self, tmp_path: Path, caplog):
        """Test that invalid JSON degrades with a warning."""
        (tmp_path / "package.json").write_text("{not json")
        dependencies, stack, outcomes = scan_manifests(tmp_path)
        assert dependencies == []
        assert stack == []
        assert outcomes[0].degraded
        assert "package.json" in caplog.text

    def test_degraded_manifest_reported_in_bundle(self, tmp_path: Path):
        """Test that manifest failures reach the bundle."""
        (tmp_path / "pyproject.toml").write_text("[project\n")
        bundle = ContextAnalyzer(tmp_path).analyze("anything")
        assert any(note.startswith("pyproject.toml") for note in bundle.degraded)

    @pytest.mark.parametrize(
        "content,section",
        [
            ('project = "x"\n', "project"),
            ('[project]\noptional-dependencies = ["pytest"]\n', "project.optional-dependencies"),
            ('tool = 3\n', "tool"),
            ('[tool]\npoetry = "x"\n', "tool.poetry"),
            ('[tool.poetry]\ngroup = ["dev"]\n', "tool.poetry.group"),
        ],
    )
    def test_pyproject_wrong_shape_is_degraded(self, tmp_path: Path, content: str, section: str):
        """A section that parses but is not a table degrades instead of raising."""
        (tmp_path / "pyproject.toml").write_text(content)
        outcome = read_pyproject(tmp_path)
        assert outcome is not None
        assert outcome.degraded
        assert outcome.value == []
        assert outcome.reason == f"{section} is not a table"

    def test_pyproject_wrong_shape_keeps_other_manifests(self, project_dir: Path):
        """A bad pyproject.toml does not discard package.json results."""
        (project_dir / "pyproject.toml").write_text('[tool]\npoetry = "x"\n')
        dependencies, stack, outcomes = scan_manifests(project_dir)
        assert "next" in dependencies
        assert "Python" not in stack
        assert [o.degraded for o in outcomes] == [False, True]

    def test_detect_technical_stack(self):
        assert detect_technical_stack(["next", "react-dom", "@prisma/client"]) == [
            "Next.js",
            "React",
            "Prisma",
        ]

    @pytest.mark.parametrize(
        "requirement,name",
        [
            ("pydantic>=2.0", "pydantic"),
            ("python-dotenv[cli]==1.0", "python-dotenv"),
            ("tomli; python_version<'3.11'", "tomli"),
            ("  ", None),
        ],
    )
    def test_requirement_name(self, requirement, name):
        """Test extracting the name from a requirement string."""
        assert requirement_name(requirement) == name


# ==============================================================================
# Project Rules
# ==============================================================================


class TestProjectRules:
    """Test project rule discovery."""

    def test_no_rules(self, empty_project: Path):
        """Test a project without rule files."""
        outcome = load_project_rules(empty_project)
        assert outcome == Outcome.ok(None, "rules")

    def test_agents_md_preferred_over_claude_md(self, tmp_path: Path):
        """Test that AGENTS.md wins over CLAUDE.md."""
        (tmp_path / "AGENTS.md").write_text("Use tabs.")
        (tmp_path / "CLAUDE.md").write_text("Use spaces.")
        text = load_project_rules(tmp_path).value
        assert text is not None
        assert text.startswith(RULES_HEADER)
        assert "#### Source: AGENTS.md" in text
        assert "Use tabs." in text
        assert "CLAUDE.md" not in text

    def test_order_of_sources(self, tmp_path: Path):
        """Test the order rule sources are combined in."""
        (tmp_path / "CLAUDE.md").write_text("claude rules")
        ruler = tmp_path / ".ruler"
        ruler.mkdir()
        (ruler / "b.md").write_text("ruler b")
        (ruler / "a.json").write_text(json.dumps({"rule": "a"}))
        (ruler / "ignored.txt").write_text("not a rule")
        (tmp_path / "CONTRIBUTING.md").write_text("contributing")
        text = load_project_rules(tmp_path).value
        assert text is not None
        sources = [line for line in text.splitlines() if line.startswith("#### Source:")]
        assert sources == [
            "#### Source: CLAUDE.md",
            "#### Source: .ruler/a.json",
            "#### Source: .ruler/b.md",
            "#### Source: CONTRIBUTING.md",
        ]

    def test_truncates_long_rules(self, tmp_path: Path):
        """Test that oversized rule text is truncated."""
        (tmp_path / "AGENTS.md").write_text("r" * 100)
        text = load_project_rules(tmp_path, max_chars=10).value
        assert text is not None
        assert "r" * 10 + "\n[truncated]" in text

    def test_rules_in_bundle(self, project_dir: Path):
        """Test that loaded rules are attached to the bundle."""
        (project_dir / "AGENTS.md").write_text("Always write tests.")
        bundle = ContextAnalyzer(project_dir).analyze("login")
        assert bundle.project_rules is not None
        assert "Always write tests." in bundle.project_rules
