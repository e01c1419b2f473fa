"""
Core shared types and utilities for panel analysis.

This module provides foundational components used by the synthetic data
generator, the model-fitting wrappers and the evaluation layer.
"""

from panel_analysis.core.utils import get_rng, spawn_seeds

__all__ = [
    "get_rng",
    "spawn_seeds",
]
