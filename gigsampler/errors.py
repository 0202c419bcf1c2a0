"""Exception types raised by the GIG sampler and distribution object."""
from __future__ import annotations


class GIGError(Exception):
    """Base class for all gigsampler errors."""


class GIGParameterError(GIGError, ValueError):
    """Distribution parameters outside a > 0, b > 0 (or not finite)."""


class NoApplicableRegimeError(GIGError, ValueError):
    """No sampling algorithm covers the standardized parameters."""


class SamplingDegeneracyError(GIGError, ArithmeticError):
    """Envelope constants or candidates became NaN/Inf, or a math domain error occurred."""


class RejectionLimitError(SamplingDegeneracyError):
    """The rejection loop exceeded its iteration cap."""


__all__ = [
    "GIGError",
    "GIGParameterError",
    "NoApplicableRegimeError",
    "SamplingDegeneracyError",
    "RejectionLimitError",
]
