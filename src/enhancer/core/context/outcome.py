"""
Result type for sub-analyses that may degrade.

A filesystem problem never aborts context gathering. Instead the affected
sub-analysis returns a degraded Outcome carrying an empty (or partial) value
and the reason, so callers can log it and report it in the ContextBundle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Value of a sub-analysis plus whether it had to fall back."""

    value: T
    source: str
    degraded: bool = False
    reason: str | None = None

    @classmethod
    def ok(cls, value: T, source: str) -> Outcome[T]:
        return cls(value=value, source=source)

    @classmethod
    def fallback(cls, value: T, source: str, reason: str) -> Outcome[T]:
        return cls(value=value, source=source, degraded=True, reason=reason)

    @property
    def note(self) -> str:
        """One-line description used in ContextBundle.degraded."""
        return f"{self.source}: {self.reason}" if self.degraded else self.source
