"""Generalized inverse Gaussian sampling utilities."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from numpy.random import Generator, default_rng

from gigsampler.errors import GIGParameterError, NoApplicableRegimeError
from gigsampler.inference.samplers import (
    DEFAULT_MAX_ITERATIONS,
    Regime,
    UniformSource,
    as_uniform_source,
    sample_standardized,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StandardizedParams:
    """(alpha, beta, lam) representation of GIG(a, b, p)."""

    alpha: float
    beta: float
    lam: float


def check_params(a: float, b: float, p: float) -> None:
    if not (math.isfinite(a) and math.isfinite(b) and math.isfinite(p)):
        raise GIGParameterError(f"GIG parameters must be finite, got a={a!r}, b={b!r}, p={p!r}")
    if a <= 0 or b <= 0:
        raise GIGParameterError(f"a and b must be positive for GIG sampling, got a={a!r}, b={b!r}")


def standardize(a: float, b: float, p: float) -> StandardizedParams:
    a = float(a)
    b = float(b)
    return StandardizedParams(alpha=math.sqrt(a / b), beta=math.sqrt(a * b), lam=abs(float(p)))


def beta_bound(p: float) -> float:
    """Split between the no-shift and concave samplers when beta, lam <= 1."""
    return min(0.5, (2.0 / 3.0) * math.sqrt(1.0 - p))


def select_regime(beta: float, lam: float, p: float) -> Regime:
    """Pick the rejection algorithm for the standardized parameters.

    For p >= 0 the threshold is taken at the signed index, for p < 0 at
    ``lam`` so that it falls to 0 as lam -> 1, where the concave envelope
    stops bounding the kernel. The no-shift range is closed at beta == 1.
    beta == 0 has no method.
    """
    if beta > 1 or lam > 1:
        return Regime.RATIO_MODE_SHIFT
    bound = beta_bound(p if p >= 0 else lam)
    if 0 < beta <= 1 and beta >= bound:
        return Regime.RATIO_NO_SHIFT
    if 0 < beta < bound:
        return Regime.CONCAVE
    raise NoApplicableRegimeError(
        f"No GIG sampling method applies to beta={beta!r}, lam={lam!r}, p={p!r}"
    )



def sample_gig(
    a: float,
    b: float,
    p: float,
    rng: Union[Generator, UniformSource],
    *,
    max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS,
) -> float:
    """Draw one sample from GIG(a, b, p).

    The density is proportional to
        x^{p - 1} * exp(-(a * x + b / x) / 2),  x > 0.

    ``rng`` is either a :class:`numpy.random.Generator` or a zero-argument
    callable returning uniforms on [0, 1). There is no fallback to global
    random state.
    """
    check_params(a, b, p)
    std = standardize(a, b, p)
    regime = select_regime(std.beta, std.lam, p)
    logger.debug(
        "GIG(a=%g, b=%g, p=%g): alpha=%g beta=%g lam=%g -> %s",
        a, b, p, std.alpha, std.beta, std.lam, regime.value,
    )

    x = sample_standardized(regime, std.lam, std.beta, rng, max_iterations=max_iterations)
    if p >= 0:
        return x / std.alpha
    return 1.0 / (std.alpha * x)


def sample_gig_array(
    a: float,
    b: float,
    p: float,
    *,
    size: int | tuple[int, ...] = 1,
    rng: Optional[Union[Generator, UniformSource]] = None,
    max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS,
) -> np.ndarray:
    """Fill an array of shape ``size`` with independent GIG(a, b, p) draws.

    A plain loop over :func:`sample_gig`. When ``rng`` is omitted a fresh
    ``default_rng()`` seeded from OS entropy is created for this call.
    """
    if rng is None:
        rng = default_rng()
    uniform = as_uniform_source(rng)

    out = np.empty(size, dtype=float)
    flat = out.reshape(-1)
    for i in range(flat.size):
        flat[i] = sample_gig(a, b, p, uniform, max_iterations=max_iterations)
    return out


__all__ = [
    "StandardizedParams",
    "beta_bound",
    "check_params",
    "sample_gig",
    "sample_gig_array",
    "select_regime",
    "standardize",
]
