"""Seeded numpy generators for reproducible and parallel draws."""
from __future__ import annotations

from typing import List, Optional

import numpy as np
from numpy.random import Generator


def make_rng(seed: Optional[int] = None) -> Generator:
    """numpy Generator for ``seed``; OS entropy when ``seed`` is None."""
    return np.random.default_rng(seed)


def spawn_generators(seed: Optional[int], n: int) -> List[Generator]:
    """Independent generators, e.g. one per worker thread.

    Streams come from :meth:`numpy.random.SeedSequence.spawn`, so they do not
    overlap and are reproducible for a fixed ``seed``.
    """
    if n < 0:
        raise ValueError("n must be non-negative.")
    children = np.random.SeedSequence(seed).spawn(n)
    return [np.random.default_rng(child) for child in children]
