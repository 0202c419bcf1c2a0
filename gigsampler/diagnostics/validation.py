"""Statistical checks of GIG draws against closed-form moments and CDFs."""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict

import numpy as np
from scipy.stats import ks_2samp, kstest

from gigsampler.distributions.gig import GeneralizedInverseGaussian


@dataclass
class MomentCheck:
    n: int
    sample_mean: float
    sample_var: float
    expected_mean: float
    expected_var: float
    z_mean: float
    z_var: float
    n_se: float

    @property
    def passed(self) -> bool:
        return abs(self.z_mean) <= self.n_se and abs(self.z_var) <= self.n_se

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["passed"] = self.passed
        return out


@dataclass
class KSResult:
    statistic: float
    pvalue: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _as_sample(samples) -> np.ndarray:
    arr = np.asarray(samples, dtype=float).reshape(-1)
    if arr.size < 2:
        raise ValueError("At least two samples are required.")
    if not np.all(np.isfinite(arr)):
        raise ValueError("Samples contain non-finite values.")
    return arr


def moment_check(samples, dist: GeneralizedInverseGaussian, n_se: float = 5.0) -> MomentCheck:
    """Compare sample mean/variance with the Bessel closed forms.

    Standard errors come from the sample itself: s / sqrt(n) for the mean and
    sqrt((m4 - s^4) / n) for the variance, with m4 the fourth central moment.
    """
    x = _as_sample(samples)
    n = x.size
    mean = float(x.mean())
    centered = x - mean
    var = float(np.mean(centered ** 2) * n / (n - 1))
    m4 = float(np.mean(centered ** 4))

    se_mean = math.sqrt(var / n)
    se_var = math.sqrt(max(m4 - var ** 2, 0.0) / n)

    expected_mean = dist.mean()
    expected_var = dist.var()
    z_mean = (mean - expected_mean) / se_mean if se_mean > 0 else math.inf
    z_var = (var - expected_var) / se_var if se_var > 0 else math.inf
    return MomentCheck(
        n=n,
        sample_mean=mean,
        sample_var=var,
        expected_mean=expected_mean,
        expected_var=expected_var,
        z_mean=float(z_mean),
        z_var=float(z_var),
        n_se=float(n_se),
    )


def ks_check(samples, dist: GeneralizedInverseGaussian) -> KSResult:
    """One-sample Kolmogorov-Smirnov test against scipy's numerical GIG CDF."""
    x = _as_sample(samples)
    res = kstest(x, dist.to_scipy().cdf)
    return KSResult(statistic=float(res.statistic), pvalue=float(res.pvalue))


def compare_samples(x, y) -> KSResult:
    """Two-sample Kolmogorov-Smirnov test."""
    res = ks_2samp(_as_sample(x), _as_sample(y))
    return KSResult(statistic=float(res.statistic), pvalue=float(res.pvalue))


__all__ = ["KSResult", "MomentCheck", "compare_samples", "ks_check", "moment_check"]
