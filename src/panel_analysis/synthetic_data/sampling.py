"""
Random draws for synthetic panel generation.

Every function takes an explicit Generator and returns values keyed by
identifier, so that callers join draws to records by identifier rather
than by position.
"""

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

PREDICTOR_DECIMALS = 2


def draw_item_predictors(
    item_ids: list[str],
    scale: float,
    rng: Generator,
) -> dict[str, float]:
    """
    Draw one item-level covariate per item.

    Values are Exp(rate=1) draws multiplied by ``scale`` and rounded to
    two decimals, assigned to items in the order given.

    Args:
        item_ids: Item identifiers, in assignment order.
        scale: Positive multiplier.
        rng: Random number generator.

    Returns:
        Mapping item_id -> predictor value.
    """
    if scale <= 0:
        raise ValueError(f"scale must be > 0, got {scale}")
    raw = rng.exponential(scale=1.0, size=len(item_ids))
    values: NDArray[np.float64] = np.round(raw * scale, PREDICTOR_DECIMALS)
    return {
        item_id: float(v) for item_id, v in zip(item_ids, values, strict=True)
    }


def draw_group_offsets(
    group_ids: list[str],
    sd: float,
    rng: Generator,
) -> dict[str, float]:
    """
    Draw one zero-mean normal random intercept per group.

    Args:
        group_ids: Group identifiers, in draw order.
        sd: Standard deviation (>= 0). Zero gives all-zero offsets.
        rng: Random number generator.

    Returns:
        Mapping group_id -> offset.
    """
    if sd < 0:
        raise ValueError(f"sd must be >= 0, got {sd}")
    values = rng.normal(loc=0.0, scale=sd, size=len(group_ids))
    return {
        group_id: float(v)
        for group_id, v in zip(group_ids, values, strict=True)
    }


def draw_residuals(
    n: int,
    sd: float,
    rng: Generator,
) -> NDArray[np.float64]:
    """
    Draw trial-level errors, one per record.

    Args:
        n: Number of records.
        sd: Standard deviation (>= 0).
        rng: Random number generator.

    Returns:
        Array of shape (n,).
    """
    if sd < 0:
        raise ValueError(f"sd must be >= 0, got {sd}")
    result: NDArray[np.float64] = rng.normal(loc=0.0, scale=sd, size=n)
    return result
