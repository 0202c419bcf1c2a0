from __future__ import annotations

import math

import numpy.testing as npt
import pytest

from gigsampler.inference.kernel import gig_kernel, log_gig_kernel


@pytest.mark.parametrize("x, p, beta", [(0.5, 0.3, 0.2), (2.0, -1.5, 1.7), (1.0, 0.0, 0.0), (7.5, 4.0, 12.0)])
def test_kernel_matches_closed_form(x, p, beta):
    expected = x ** (p - 1.0) * math.exp(-(beta / 2.0) * (x + 1.0 / x))
    npt.assert_allclose(gig_kernel(x, p, beta), expected, rtol=1e-12)
    npt.assert_allclose(log_gig_kernel(x, p, beta), math.log(expected), rtol=1e-12, atol=1e-12)


def test_kernel_log_shift_divides_by_constant():
    base = gig_kernel(1.3, 2.5, 3.0)
    shifted = gig_kernel(1.3, 2.5, 3.0, log_shift=math.log(base))
    npt.assert_allclose(shifted, 1.0, rtol=1e-12)


def test_kernel_reciprocal_symmetry():
    # g(1/x, p, beta) = x^2 * g(x, -p, beta): the Jacobian of x -> 1/x
    for x in (0.1, 0.8, 3.0, 25.0):
        for p in (-2.0, -0.3, 0.0, 0.7, 3.5):
            lhs = gig_kernel(1.0 / x, p, 0.9)
            rhs = x ** 2 * gig_kernel(x, -p, 0.9)
            npt.assert_allclose(lhs, rhs, rtol=1e-10)


def test_kernel_extreme_arguments_do_not_raise():
    assert gig_kernel(5e-324, 0.5, 0.3) == 0.0
    assert gig_kernel(1e300, 0.5, 0.3) == 0.0
    assert gig_kernel(1e-200, 1.0, 0.0) == 1.0
