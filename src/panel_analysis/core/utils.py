"""
Core utility functions shared across panel analysis modules.

Random sources are always explicit ``numpy.random.Generator`` handles;
nothing in this package touches numpy's global random state.
"""

import numpy as np
from numpy.random import Generator


def get_rng(seed: int | np.random.SeedSequence | None = None) -> Generator:
    """
    Create a numpy random Generator with optional seed.

    Args:
        seed: Random seed or SeedSequence for reproducibility.
            If None, uses entropy.

    Returns:
        A numpy random Generator instance.
    """
    return np.random.default_rng(seed)


def spawn_seeds(base_seed: int, n: int) -> list[int]:
    """
    Derive ``n`` independent integer seeds from a base seed.

    Uses SeedSequence spawning so that batch members (e.g. replicates of a
    simulation study) draw from statistically independent streams.

    Args:
        base_seed: Root seed.
        n: Number of child seeds.

    Returns:
        List of ``n`` integer seeds.
    """
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")
    children = np.random.SeedSequence(base_seed).spawn(n)
    return [int(child.generate_state(1)[0]) for child in children]
