"""
Tests for the on-disk prompt store.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from enhancer.core.errors import PromptNotFoundError
from enhancer.core.prompts.models import (
    PromptContext,
    PromptMetadata,
    StructuredResult,
    WorkflowCategory,
)
from enhancer.core.storage import PromptSearchQuery, PromptStore
from enhancer.core.validate import validate

DAY = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_result(
    prompt_id: str,
    category: WorkflowCategory = WorkflowCategory.BUG,
    created_at: datetime = DAY,
    instruction: str = "Fix the login form so that valid credentials sign the user in.",
    **meta,
) -> StructuredResult:
    result = StructuredResult(
        id=prompt_id,
        category=category,
        instruction=instruction,
        context=PromptContext(technical_stack=["Next.js"], dependencies=["next"]),
        metadata=PromptMetadata(created_at=created_at, updated_at=created_at, **meta),
    )
    return result.model_copy(update={"validation": validate(result)})


@pytest.fixture
def store(tmp_path: Path) -> PromptStore:
    return PromptStore(tmp_path / "crafted")


class TestSaveLoad:
    """Test persistence of single prompts."""

    def test_path_grouped_by_day(self, store: PromptStore):
        """Test that files are grouped by creation day."""
        path = store.save(make_result("abc"))
        assert path == store.output_dir / "2026-01-15" / "abc.json"
        assert path.is_file()

    def test_round_trip(self, store: PromptStore):
        """Test saving and loading a prompt."""
        result = make_result("abc", author="dev", tags=["auth"])
        store.save(result)
        assert store.load("abc") == result

    def test_no_temp_files_left(self, store: PromptStore):
        """Test that the atomic write leaves no temp files."""
        store.save(make_result("abc"))
        assert [p.name for p in (store.output_dir / "2026-01-15").iterdir()] == ["abc.json"]

    def test_save_overwrites(self, store: PromptStore):
        """Test that saving the same id replaces the file."""
        store.save(make_result("abc"))
        store.save(make_result("abc", instruction="Rewrite the login form validation logic."))
        assert store.load("abc").instruction == "Rewrite the login form validation logic."

    def test_save_requires_id(self, store: PromptStore):
        """Test that a result without an id cannot be saved."""
        with pytest.raises(ValueError):
            store.save(make_result(""))

    def test_load_missing(self, store: PromptStore):
        """Test that an unknown id raises PromptNotFoundError."""
        with pytest.raises(PromptNotFoundError) as exc_info:
            store.load("nope")
        assert exc_info.value.prompt_id == "nope"

    def test_delete(self, store: PromptStore):
        """Deleting removes the file so later loads fail."""
        store.save(make_result("abc"))
        store.save(make_result("keep"))
        assert store.delete("abc") is True
        assert not (store.output_dir / "2026-01-15" / "abc.json").exists()
        with pytest.raises(PromptNotFoundError):
            store.load("abc")
        assert [r.id for r in store.list()] == ["keep"]

    @pytest.mark.parametrize("prompt_id", ["nope", ""])
    def test_delete_missing(self, store: PromptStore, prompt_id: str):
        """Unknown or empty ids report False."""
        assert store.delete(prompt_id) is False


class TestListSearch:
    """Test listing and filtering stored prompts."""

    @pytest.fixture
    def filled(self, store: PromptStore) -> PromptStore:
        store.save(make_result("old", created_at=DAY - timedelta(days=3), author="ana"))
        store.save(
            make_result(
                "mid",
                WorkflowCategory.FEATURE,
                created_at=DAY - timedelta(days=1),
                instruction="Add CSV export to the monthly revenue report page.",
                tags=["reports"],
            )
        )
        store.save(make_result("new", created_at=DAY, tags=["auth", "urgent"], author="ana"))
        return store

    def test_list_newest_first(self, filled: PromptStore):
        """Test that list returns newest prompts first."""
        assert [r.id for r in filled.list()] == ["new", "mid", "old"]

    def test_list_empty_store(self, store: PromptStore):
        assert store.list() == []

    def test_unreadable_files_skipped(self, filled: PromptStore, caplog):
        """Test that corrupt files are skipped with a warning."""
        (filled.output_dir / "2026-01-15" / "broken.json").write_text("{not json")
        assert [r.id for r in filled.list()] == ["new", "mid", "old"]
        assert "broken.json" in caplog.text

    @pytest.mark.parametrize(
        "query,expected",
        [
            (PromptSearchQuery(), ["new", "mid", "old"]),
            (PromptSearchQuery(category=WorkflowCategory.FEATURE), ["mid"]),
            (PromptSearchQuery(author="ana"), ["new", "old"]),
            (PromptSearchQuery(tags=["reports", "urgent"]), ["new", "mid"]),
            (PromptSearchQuery(text="csv EXPORT"), ["mid"]),
            (PromptSearchQuery(created_after=DAY - timedelta(days=2)), ["new", "mid"]),
            (PromptSearchQuery(created_before=DAY - timedelta(days=2)), ["old"]),
            (PromptSearchQuery(category=WorkflowCategory.BUG, author="ana", tags=["auth"]), ["new"]),
        ],
    )
    def test_search(self, filled: PromptStore, query: PromptSearchQuery, expected: list[str]):
        """Test each search filter."""
        assert [r.id for r in filled.search(query)] == expected

    def test_min_score(self, filled: PromptStore):
        """Test filtering by minimum score."""
        scores = {r.id: r.score for r in filled.list()}
        threshold = max(scores.values())
        found = filled.search(PromptSearchQuery(min_score=threshold))
        assert found
        assert all(r.score >= threshold for r in found)

    def test_min_score_bounds(self):
        """Test that min_score must be between 0 and 100."""
        with pytest.raises(ValueError):
            PromptSearchQuery(min_score=101)
