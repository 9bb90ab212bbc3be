"""
Structured JSONL event log for enhancement runs.

Events are appended to ~/.local/share/enhancer/logs/{project}/{session}.jsonl
(or the XDG_DATA_HOME equivalent), one JSON object per line:

{
  "timestamp": "2026-01-15T12:34:56.789Z",
  "event_type": "enhance_end",
  "data": {"prompt_id": "...", "score": 85, "source": "model"}
}

The event log is an audit trail, separate from stdlib ``logging`` output.
A failed write is reported through stdlib logging and never interrupts an
enhancement.
"""

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of events that can be logged."""

    ENHANCE_START = "enhance_start"
    ENHANCE_END = "enhance_end"
    FALLBACK_USED = "fallback_used"
    ERROR = "error"


class LogEntry(BaseModel):
    """A single structured log entry in JSONL format."""

    model_config = ConfigDict(use_enum_values=True)

    timestamp: datetime = Field(..., description="When the event occurred (ISO 8601 format)")
    event_type: EventType = Field(..., description="Type of event")
    data: dict[str, Any] = Field(default_factory=dict, description="Event-specific data")


def get_xdg_data_home() -> Path:
    if xdg_data_home := os.environ.get("XDG_DATA_HOME"):
        return Path(xdg_data_home)
    return Path.home() / ".local" / "share"


class EventLogger:
    """
    JSONL event writer for one project session.

    Example:
        events = EventLogger.init("my_project", "session-123")
        events.log_enhance_start("3f2a...", "bug", 42)
        events.log_enhance_end("3f2a...", score=85, source="model", duration_sec=1.2)
    """

    def __init__(self, log_file: Path):
        self.log_file = Path(log_file)

    @staticmethod
    def init(project_name: str, session_id: str) -> "EventLogger":
        """
        Create a logger writing to the XDG data directory.

        Raises:
            ValueError: If project_name or session_id are empty
        """
        if not project_name:
            raise ValueError("project_name cannot be empty")
        if not session_id:
            raise ValueError("session_id cannot be empty")

        log_dir = get_xdg_data_home() / "enhancer" / "logs" / project_name
        return EventLogger(log_dir / f"{session_id}.jsonl")

    def log_event(self, event_type: EventType, data: dict[str, Any] | None = None) -> None:
        """Append one event. Write failures are logged, not raised."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc), event_type=event_type, data=data or {}
        )
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(entry.model_dump_json(exclude_none=True) + "\n")
        except OSError as e:
            logger.warning(f"Failed to write event log {self.log_file}: {e}")

    def log_enhance_start(self, prompt_id: str, category: str, length: int) -> None:
        self.log_event(
            EventType.ENHANCE_START,
            {"prompt_id": prompt_id, "category": category, "length": length},
        )

    def log_enhance_end(
        self,
        prompt_id: str,
        score: int,
        source: str,
        duration_sec: float,
        degraded: list[str] | None = None,
    ) -> None:
        data: dict[str, Any] = {
            "prompt_id": prompt_id,
            "score": score,
            "source": source,
            "duration_sec": round(duration_sec, 3),
        }
        if degraded:
            data["degraded"] = degraded
        self.log_event(EventType.ENHANCE_END, data)

    def log_fallback(self, prompt_id: str, reason: str) -> None:
        self.log_event(EventType.FALLBACK_USED, {"prompt_id": prompt_id, "reason": reason})

    def log_error(self, message: str, context: dict[str, Any] | None = None) -> None:
        data: dict[str, Any] = {"message": message}
        if context:
            data["context"] = context
        self.log_event(EventType.ERROR, data)
