"""Unnormalized GIG kernel shared by every rejection test."""
from __future__ import annotations

import math


def log_gig_kernel(x: float, p: float, beta: float) -> float:
    """log of x^(p-1) * exp(-beta/2 * (x + 1/x)) for x > 0."""
    return (p - 1.0) * math.log(x) - 0.5 * beta * (x + 1.0 / x)


def gig_kernel(x: float, p: float, beta: float, log_shift: float = 0.0) -> float:
    """Evaluate x^(p-1) * exp(-beta/2 * (x + 1/x)) / exp(log_shift).

    Computed in log space so that extreme ``x`` underflows to 0.0 instead of
    raising. ``log_shift`` rescales the kernel by a constant; rejection tests
    are invariant to it as long as the envelope uses the same shift.
    Callers must pass ``x > 0``.
    """
    return math.exp(log_gig_kernel(x, p, beta) - log_shift)


__all__ = ["gig_kernel", "log_gig_kernel"]
