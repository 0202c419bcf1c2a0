from __future__ import annotations

import numpy as np
import pytest

from gigsampler.diagnostics.validation import compare_samples, ks_check, moment_check
from gigsampler.distributions.gig import GeneralizedInverseGaussian


def test_moment_check_accepts_exact_draws():
    dist = GeneralizedInverseGaussian(1.5, 0.8, 0.7)
    samples = dist.to_scipy().rvs(size=50_000, random_state=np.random.default_rng(0))
    check = moment_check(samples, dist)
    assert check.n == 50_000
    assert check.passed
    summary = check.to_dict()
    assert summary["passed"] is True
    assert set(summary) >= {"sample_mean", "expected_mean", "z_mean", "z_var"}


def test_moment_check_flags_shifted_draws():
    dist = GeneralizedInverseGaussian(1.5, 0.8, 0.7)
    samples = dist.to_scipy().rvs(size=50_000, random_state=np.random.default_rng(0)) * 1.1
    check = moment_check(samples, dist)
    assert not check.passed
    assert check.z_mean > 5


def test_ks_check_against_numerical_cdf():
    dist = GeneralizedInverseGaussian(2.0, 1.0, -0.4)
    samples = dist.rvs(size=300, rng=np.random.default_rng(1))
    result = ks_check(samples, dist)
    assert 0.0 <= result.statistic <= 1.0
    assert result.pvalue > 1e-4


def test_compare_samples_detects_different_laws():
    rng = np.random.default_rng(2)
    x = GeneralizedInverseGaussian(1.0, 1.0, 0.5).rvs(size=5000, rng=rng)
    y = GeneralizedInverseGaussian(1.0, 1.0, 3.0).rvs(size=5000, rng=rng)
    assert compare_samples(x, y).pvalue < 1e-6


def test_sample_validation_rejects_bad_input():
    dist = GeneralizedInverseGaussian(1.0, 1.0, 0.5)
    with pytest.raises(ValueError):
        moment_check([1.0], dist)
    with pytest.raises(ValueError):
        compare_samples([1.0, np.nan], [1.0, 2.0])
