"""Rejection loop and regime registry for the GIG samplers."""
from __future__ import annotations

import itertools
from enum import Enum
from typing import Callable, Dict, Optional, Protocol, Union

from numpy.random import Generator

from gigsampler.errors import RejectionLimitError
from gigsampler.inference.envelopes import (
    ConcaveEnvelope,
    RatioModeShiftEnvelope,
    RatioNoShiftEnvelope,
)

DEFAULT_MAX_ITERATIONS = 1_000_000

UniformSource = Callable[[], float]


class Regime(str, Enum):
    CONCAVE = "concave"
    RATIO_NO_SHIFT = "ratio_no_shift"
    RATIO_MODE_SHIFT = "ratio_mode_shift"


class Envelope(Protocol):
    """Protocol shared by every envelope construction."""

    lam: float
    beta: float

    def propose(self, u: float, v: float) -> Optional[float]:  # pragma: no cover - protocol
        ...


ENVELOPES: Dict[Regime, Callable[[float, float], Envelope]] = {
    Regime.CONCAVE: ConcaveEnvelope.build,
    Regime.RATIO_NO_SHIFT: RatioNoShiftEnvelope.build,
    Regime.RATIO_MODE_SHIFT: RatioModeShiftEnvelope.build,
}


def as_uniform_source(rng: Union[Generator, UniformSource]) -> UniformSource:
    """Return a zero-argument callable drawing from U[0, 1).

    Accepts a :class:`numpy.random.Generator` (uses ``rng.random``) or any
    callable already producing uniform floats.
    """
    random = getattr(rng, "random", None)
    if callable(random):
        return random
    if callable(rng):
        return rng
    raise TypeError(f"Expected a numpy Generator or a callable, got {type(rng).__name__}")


def build_envelope(regime: Regime, lam: float, beta: float) -> Envelope:
    return ENVELOPES[Regime(regime)](lam, beta)


def rejection_sample(
    envelope: Envelope,
    uniform: UniformSource,
    *,
    max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS,
) -> float:
    """Draw ``(u, v)`` pairs until ``envelope`` accepts a candidate.

    ``max_iterations=None`` loops without a cap.
    """
    trials = itertools.count() if max_iterations is None else range(int(max_iterations))
    for _ in trials:
        u = uniform()
        v = uniform()
        x = envelope.propose(u, v)
        if x is not None:
            return x
    raise RejectionLimitError(
        f"{type(envelope).__name__} rejected {max_iterations} candidates in a row "
        f"(lam={envelope.lam!r}, beta={envelope.beta!r})"
    )


def sample_standardized(
    regime: Regime,
    lam: float,
    beta: float,
    rng: Union[Generator, UniformSource],
    *,
    max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS,
) -> float:
    """One draw from the two-parameter kernel x^(lam-1) exp(-beta/2 (x + 1/x))."""
    envelope = build_envelope(regime, lam, beta)
    return rejection_sample(envelope, as_uniform_source(rng), max_iterations=max_iterations)


__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "ENVELOPES",
    "Envelope",
    "Regime",
    "UniformSource",
    "as_uniform_source",
    "build_envelope",
    "rejection_sample",
    "sample_standardized",
]
