"""Generalized inverse Gaussian distribution object.

GIG(a, b, p) has density

    f(x; a, b, p) = (a/b)^(p/2) / (2 K_p(sqrt(ab))) * x^(p-1) * exp(-(a x + b/x) / 2),  x > 0,

with a > 0, b > 0 and real p. Moments and the normalizing constant use the
modified Bessel function of the second kind from :mod:`scipy.special`; the
exponentially scaled ``kve`` is used for ratios and logarithms so that large
``sqrt(ab)`` does not underflow.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np
from numpy.random import Generator, default_rng
from scipy import special
from scipy.stats import geninvgauss

from gigsampler.errors import GIGParameterError
from gigsampler.inference.gig import check_params, sample_gig, sample_gig_array, select_regime, standardize
from gigsampler.inference.samplers import DEFAULT_MAX_ITERATIONS, Regime

ArrayLike = Union[float, np.ndarray]


def _bessel_ratio(nu_num: float, nu_den: float, z: float) -> float:
    """K_{nu_num}(z) / K_{nu_den}(z); the exp(z) scalings cancel."""
    return float(special.kve(nu_num, z) / special.kve(nu_den, z))


@dataclass(frozen=True)
class GeneralizedInverseGaussian:
    a: float
    b: float
    p: float

    def __post_init__(self) -> None:
        try:
            a, b, p = float(self.a), float(self.b), float(self.p)
        except (TypeError, ValueError) as exc:
            raise GIGParameterError(f"GIG parameters must be real numbers: {exc}") from exc
        check_params(a, b, p)
        object.__setattr__(self, "a", a)
        object.__setattr__(self, "b", b)
        object.__setattr__(self, "p", p)

    @classmethod
    def from_scipy_params(cls, p: float, b: float, scale: float = 1.0) -> "GeneralizedInverseGaussian":
        """Build from ``scipy.stats.geninvgauss(p, b, scale=scale)`` parameters."""
        if scale <= 0:
            raise GIGParameterError(f"scale must be positive, got {scale!r}")
        return cls(a=b / scale, b=b * scale, p=p)

    # ------------------------------
    # Parameters
    # ------------------------------
    def params(self) -> Tuple[float, float, float]:
        return self.a, self.b, self.p

    @property
    def support(self) -> Tuple[float, float]:
        return 0.0, math.inf

    @property
    def sqrt_ab(self) -> float:
        return math.sqrt(self.a * self.b)

    @property
    def regime(self) -> Regime:
        """Rejection algorithm used by :meth:`rand` for these parameters."""
        std = standardize(self.a, self.b, self.p)
        return select_regime(std.beta, std.lam, self.p)

    def reciprocal(self) -> "GeneralizedInverseGaussian":
        """Law of 1/X when X ~ GIG(a, b, p)."""
        return GeneralizedInverseGaussian(a=self.b, b=self.a, p=-self.p)

    def to_scipy(self):
        """Equivalent frozen :func:`scipy.stats.geninvgauss` distribution."""
        return geninvgauss(self.p, self.sqrt_ab, scale=math.sqrt(self.b / self.a))

    # ------------------------------
    # Statistics
    # ------------------------------
    def mean(self) -> float:
        a, b, p = self.params()
        return math.sqrt(b / a) * _bessel_ratio(p + 1.0, p, self.sqrt_ab)

    def var(self) -> float:
        a, b, p = self.params()
        z = self.sqrt_ab
        left = _bessel_ratio(p + 2.0, p, z)
        right = _bessel_ratio(p + 1.0, p, z)
        return (b / a) * (left - right ** 2)

    def std(self) -> float:
        return math.sqrt(self.var())

    def mode(self) -> float:
        a, b, p = self.params()
        return ((p - 1.0) + math.sqrt((p - 1.0) ** 2 + a * b)) / a

    # ------------------------------
    # Evaluation
    # ------------------------------
    def log_normalizer(self) -> float:
        """log of (a/b)^(p/2) / (2 K_p(sqrt(ab)))."""
        a, b, p = self.params()
        z = self.sqrt_ab
        log_kp = math.log(special.kve(p, z)) - z
        return 0.5 * p * (math.log(a) - math.log(b)) - math.log(2.0) - log_kp

    def logpdf(self, x: ArrayLike) -> ArrayLike:
        a, b, p = self.params()
        x_arr = np.asarray(x, dtype=float)
        out = np.full(x_arr.shape, -np.inf)
        pos = x_arr > 0
        xp = x_arr[pos]
        out[pos] = self.log_normalizer() + (p - 1.0) * np.log(xp) - 0.5 * (a * xp + b / xp)
        if out.ndim == 0:
            return float(out)
        return out

    def pdf(self, x: ArrayLike) -> ArrayLike:
        return np.exp(self.logpdf(x))

    def cdf(self, x: ArrayLike) -> ArrayLike:
        raise NotImplementedError(
            "The GIG cumulative distribution function has no closed form; "
            "use to_scipy().cdf for a numerical approximation."
        )

    # ------------------------------
    # Sampling
    # ------------------------------
    def rand(
        self,
        rng: Generator,
        *,
        max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS,
    ) -> float:
        return sample_gig(self.a, self.b, self.p, rng, max_iterations=max_iterations)

    def rvs(
        self,
        size: int | tuple[int, ...] = 1,
        rng: Optional[Generator] = None,
        *,
        max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS,
    ) -> np.ndarray:
        if rng is None:
            rng = default_rng()
        return sample_gig_array(self.a, self.b, self.p, size=size, rng=rng, max_iterations=max_iterations)


__all__ = ["GeneralizedInverseGaussian"]
