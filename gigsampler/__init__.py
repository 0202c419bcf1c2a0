"""Exact rejection sampling from the Generalized Inverse Gaussian distribution."""

from .errors import (
    GIGError,
    GIGParameterError,
    NoApplicableRegimeError,
    RejectionLimitError,
    SamplingDegeneracyError,
)
from .inference.gig import sample_gig, sample_gig_array, select_regime, standardize
from .inference.samplers import Regime
from .distributions.gig import GeneralizedInverseGaussian

__version__ = "0.1.0"

__all__ = [
    "GIGError",
    "GIGParameterError",
    "GeneralizedInverseGaussian",
    "NoApplicableRegimeError",
    "Regime",
    "RejectionLimitError",
    "SamplingDegeneracyError",
    "sample_gig",
    "sample_gig_array",
    "select_regime",
    "standardize",
]
