"""
Tests for the JSONL event log and project root discovery.
"""

import json
from pathlib import Path

import pytest

from enhancer.utils import EventLogger, EventType, find_project_root, resolve_project_root


def read_events(logger: EventLogger) -> list[dict]:
    return [json.loads(line) for line in logger.log_file.read_text().splitlines()]


class TestEventLogger:
    """Test event writing."""

    def test_init_uses_xdg_data_home(self, tmp_path: Path):
        """Test that logs go under XDG_DATA_HOME."""
        events = EventLogger.init("myproj", "session-1")
        log_dir = tmp_path / "xdg-data" / "enhancer" / "logs" / "myproj"
        assert events.log_file == log_dir / "session-1.jsonl"

    @pytest.mark.parametrize("project,session", [("", "s"), ("p", "")])
    def test_init_requires_names(self, project: str, session: str):
        """Test that empty project or session names are rejected."""
        with pytest.raises(ValueError):
            EventLogger.init(project, session)

    def test_appends_one_line_per_event(self, tmp_path: Path):
        """Test that each event is one JSON line."""
        events = EventLogger(tmp_path / "logs" / "run.jsonl")
        events.log_enhance_start("abc", "bug", 24)
        events.log_fallback("abc", "backend 'claude' is unavailable")
        events.log_enhance_end("abc", score=85, source="fallback", duration_sec=0.12345)

        lines = read_events(events)
        assert [line["event_type"] for line in lines] == [
            EventType.ENHANCE_START.value,
            EventType.FALLBACK_USED.value,
            EventType.ENHANCE_END.value,
        ]
        assert lines[0]["data"] == {"prompt_id": "abc", "category": "bug", "length": 24}
        assert lines[2]["data"]["duration_sec"] == 0.123
        assert "degraded" not in lines[2]["data"]
        assert lines[0]["timestamp"].endswith("Z")

    def test_degraded_recorded(self, tmp_path: Path):
        """Test that degraded notes are written on enhance_end."""
        events = EventLogger(tmp_path / "run.jsonl")
        events.log_enhance_end("abc", score=60, source="model", duration_sec=1, degraded=["rules"])
        assert read_events(events)[0]["data"]["degraded"] == ["rules"]

    def test_log_error(self, tmp_path: Path):
        """Test the error event payload."""
        events = EventLogger(tmp_path / "run.jsonl")
        events.log_error("boom", {"stage": "generate"})
        assert read_events(events)[0]["data"] == {"message": "boom", "context": {"stage": "generate"}}

    def test_write_failure_is_not_raised(self, tmp_path: Path, caplog):
        """Test that write failures are logged, not raised."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        events = EventLogger(blocker / "run.jsonl")
        events.log_fallback("abc", "timeout")
        assert "Failed to write event log" in caplog.text


class TestProjectRoot:
    def test_finds_marker_in_ancestor(self, project_dir: Path):
        """Test finding the root from a nested directory."""
        nested = project_dir / "src" / "auth"
        assert find_project_root(nested) == project_dir.resolve()

    def test_no_marker(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Test the fallback when no marker is found."""
        lonely = tmp_path / "lonely"
        lonely.mkdir()
        monkeypatch.setattr(
            "enhancer.utils.project.PROJECT_ROOT_MARKERS", [".marker-that-does-not-exist"]
        )
        assert find_project_root(lonely) is None
        assert resolve_project_root(lonely) == lonely.resolve()
