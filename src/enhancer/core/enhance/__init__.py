"""
Enhancement pipeline.

Ties classification, agent resolution, context gathering, generation and
validation together behind ``Enhancer``.
"""

from .orchestrator import EnhancementStage, Enhancer, enhance, update_result

__all__ = [
    "EnhancementStage",
    "Enhancer",
    "enhance",
    "update_result",
]
