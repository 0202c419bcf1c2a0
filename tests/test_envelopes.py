from __future__ import annotations

import math

import numpy as np
import pytest

from gigsampler.errors import NoApplicableRegimeError, SamplingDegeneracyError
from gigsampler.inference.envelopes import (
    ConcaveEnvelope,
    RatioModeShiftEnvelope,
    RatioNoShiftEnvelope,
)
from gigsampler.inference.kernel import gig_kernel

GRID = np.concatenate([np.geomspace(1e-4, 1.0, 400), np.linspace(1.0, 200.0, 800)[1:]])


def _concave_height(env: ConcaveEnvelope, x: float) -> float:
    if x <= env.x0:
        return env.k1
    if env.a2 > 0 and x <= 2.0 / env.beta:
        return env.k2 * x ** (env.lam - 1.0)
    return env.k3 * math.exp(-x * env.beta / 2.0)


@pytest.mark.parametrize("lam", [0.0, 0.3, 0.7, 0.95])
@pytest.mark.parametrize("beta", [0.05, 0.2, 0.45])
def test_concave_envelope_dominates_kernel(lam, beta):
    env = ConcaveEnvelope.build(lam, beta)
    assert env.a1 > 0 and env.a2 >= 0 and env.a3 > 0
    assert env.x_star == max(env.x0, 2.0 / beta)
    for x in GRID:
        assert gig_kernel(x, lam, beta) <= _concave_height(env, x) * (1 + 1e-12)


def test_concave_envelope_zero_lambda_uses_log_piece():
    env = ConcaveEnvelope.build(0.0, 0.1)
    assert env.x0 == pytest.approx(0.1)
    assert env.a2 == pytest.approx(math.exp(-0.1) * math.log(2.0 / 0.01))


def test_concave_envelope_regions_map_into_their_intervals():
    env = ConcaveEnvelope.build(0.4, 0.1)
    assert env.a2 > 0
    # u = 0 always accepts, exposing the inverse transform of each region
    x_left = env.propose(0.0, 0.5 * env.a1 / env.area)
    x_mid = env.propose(0.0, (env.a1 + 0.5 * env.a2) / env.area)
    x_tail = env.propose(0.0, (env.a1 + env.a2 + 0.5 * env.a3) / env.area)
    assert 0 < x_left <= env.x0
    assert env.x0 <= x_mid <= 2.0 / env.beta
    assert x_tail >= env.x_star


def test_concave_envelope_rejects_zero_draws():
    env = ConcaveEnvelope.build(0.5, 0.2)
    assert env.propose(0.0, 0.0) is None


def test_concave_envelope_requires_lambda_below_one():
    with pytest.raises(NoApplicableRegimeError):
        ConcaveEnvelope.build(1.0, 0.2)


@pytest.mark.parametrize("lam, beta", [(0.0, 0.5), (0.5, 0.7), (1.0, 0.2), (0.9, 0.99)])
def test_ratio_no_shift_rectangle_bounds_region(lam, beta):
    env = RatioNoShiftEnvelope.build(lam, beta)
    for x in GRID:
        root = math.sqrt(gig_kernel(x, lam, beta))
        assert root <= env.v_plus * (1 + 1e-12)
        assert x * root <= env.u_plus * (1 + 1e-12)


def test_ratio_no_shift_rejects_zero_draws():
    env = RatioNoShiftEnvelope.build(0.5, 0.7)
    assert env.propose(0.0, 0.5) is None
    assert env.propose(0.5, 0.0) is None


@pytest.mark.parametrize("lam, beta", [(0.0, 3.0), (0.5, 2.0), (2.0, 0.5), (5.0, 10.0), (50.0, 1.0), (0.2, 400.0)])
def test_ratio_mode_shift_rectangle_bounds_region(lam, beta):
    env = RatioModeShiftEnvelope.build(lam, beta)
    assert 0 < env.x_minus < env.mode < env.x_plus
    assert env.u_minus < 0 < env.u_plus
    assert env.v_plus == pytest.approx(1.0)
    grid = np.concatenate([GRID, np.linspace(env.x_minus, env.x_plus, 200)])
    for x in grid:
        root = math.sqrt(gig_kernel(x, lam, beta, env.log_shift))
        assert root <= env.v_plus * (1 + 1e-9)
        shifted = (x - env.mode) * root
        assert env.u_minus * (1 + 1e-9) <= shifted <= env.u_plus * (1 + 1e-9)


def test_ratio_mode_shift_handles_large_index_without_overflow():
    env = RatioModeShiftEnvelope.build(400.0, 1.0)
    assert math.isfinite(env.u_plus) and math.isfinite(env.u_minus)


def test_ratio_mode_shift_reports_degenerate_constants():
    with pytest.raises(SamplingDegeneracyError):
        RatioModeShiftEnvelope.build(0.5, 0.0)


def test_ratio_mode_shift_rejects_nonpositive_candidates():
    env = RatioModeShiftEnvelope.build(0.5, 2.0)
    # u = 0 maps to u_minus; a tiny v pushes u/v + m far below zero
    assert env.propose(0.0, 1e-12) is None
    assert env.propose(0.3, 0.0) is None


@pytest.mark.parametrize("lam", [1.0000001, 1.001, 3.0])
def test_ratio_mode_shift_roots_with_tiny_beta(lam):
    beta = 1e-6
    env = RatioModeShiftEnvelope.build(lam, beta)
    assert 0 < env.x_minus < env.mode < env.x_plus
    assert math.isfinite(env.u_minus) and math.isfinite(env.u_plus)
    # u_minus and u_plus are the extremes of (x - m) * sqrt(g(x) / g(m))
    for x in np.concatenate([env.x_minus * np.linspace(0.5, 1.5, 101), env.x_plus * np.linspace(0.5, 1.5, 101)]):
        shifted = (x - env.mode) * math.sqrt(gig_kernel(x, lam, beta, env.log_shift))
        assert env.u_minus * (1 + 1e-9) <= shifted <= env.u_plus * (1 + 1e-9)
