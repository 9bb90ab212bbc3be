"""Deterministic fallback enhancement."""

from .synthesizer import (
    FALLBACK_CONFIDENCE,
    FallbackSynthesizer,
    estimate_complexity,
    finish_sentence,
    improve_instruction,
    minimal_enhancement,
    suggest_agents,
)

__all__ = [
    "FALLBACK_CONFIDENCE",
    "FallbackSynthesizer",
    "estimate_complexity",
    "finish_sentence",
    "improve_instruction",
    "minimal_enhancement",
    "suggest_agents",
]
