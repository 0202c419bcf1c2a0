"""Envelope constructions for the three GIG rejection samplers.

Every envelope is built once per draw from the standardized parameters
``(lam, beta)`` of the two-parameter kernel

    g(x) = x^(lam - 1) * exp(-beta/2 * (x + 1/x)),  x > 0,

and exposes ``propose(u, v)`` which maps a pair of uniform variates on
[0, 1) to an accepted candidate, or ``None`` when the pair is rejected.

Reference: Hörmann, W. and Leydold, J. (2014). Generating generalized inverse
Gaussian random variates. Statistics and Computing, 24(4), 547-557.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields
from typing import Optional

from gigsampler.errors import NoApplicableRegimeError, SamplingDegeneracyError
from gigsampler.inference.kernel import gig_kernel, log_gig_kernel

logger = logging.getLogger(__name__)

# tolerated overshoot of |cos(phi)| past 1 before the cubic counts as degenerate
_ACOS_SLACK = 1e-8


def _ensure_finite(envelope) -> None:
    for f in fields(envelope):
        value = getattr(envelope, f.name)
        if not math.isfinite(value):
            raise SamplingDegeneracyError(
                f"{type(envelope).__name__}: constant '{f.name}' is {value!r} "
                f"(lam={envelope.lam!r}, beta={envelope.beta!r})"
            )


@dataclass(frozen=True)
class ConcaveEnvelope:
    """Three-piece envelope for the log-concave corner (lam < 1, small beta).

    Left piece is constant ``k1`` on [0, x0], middle piece ``k2 * x^(lam-1)``
    on [x0, 2/beta] (empty when x0 >= 2/beta) and right piece
    ``k3 * exp(-beta x / 2)`` on [x*, inf).
    """

    lam: float
    beta: float
    mode: float
    x0: float
    x_star: float
    k1: float
    k2: float
    k3: float
    a1: float
    a2: float
    a3: float

    @property
    def area(self) -> float:
        return self.a1 + self.a2 + self.a3

    @classmethod
    def build(cls, lam: float, beta: float) -> "ConcaveEnvelope":
        if lam >= 1.0:
            raise NoApplicableRegimeError(f"Concave envelope requires lam < 1, got lam={lam!r}")
        mode = beta / ((1.0 - lam) + math.sqrt((1.0 - lam) ** 2 + beta ** 2))
        x0 = beta / (1.0 - lam)
        x_star = max(x0, 2.0 / beta)

        k1 = gig_kernel(mode, lam, beta)
        a1 = k1 * x0

        k2 = 0.0
        a2 = 0.0
        if x0 < 2.0 / beta:
            k2 = math.exp(-beta)
            if lam > 0:
                a2 = k2 * ((2.0 / beta) ** lam - x0 ** lam) / lam
            else:
                a2 = k2 * math.log(2.0 / beta ** 2)

        k3 = x_star ** (lam - 1.0)
        a3 = 2.0 * k3 * math.exp(-x_star * beta / 2.0) / beta

        envelope = cls(lam, beta, mode, x0, x_star, k1, k2, k3, a1, a2, a3)
        _ensure_finite(envelope)
        return envelope

    def propose(self, u: float, v: float) -> Optional[float]:
        lam, beta = self.lam, self.beta
        v = v * self.area
        if v <= self.a1:
            x = self.x0 * v / self.a1
            h = self.k1
        elif v <= self.a1 + self.a2:
            v -= self.a1
            if lam > 0:
                x = (self.x0 ** lam + v * lam / self.k2) ** (1.0 / lam)
            else:
                x = beta * math.exp(v * math.exp(beta))
            h = self.k2 * x ** (lam - 1.0)
        else:
            v -= self.a1 + self.a2
            tail = math.exp(-self.x_star * beta / 2.0) - v * beta / (2.0 * self.k3)
            # rounding at the far end of the cumulative area
            if tail <= 0.0:
                return None
            x = -2.0 * math.log(tail) / beta
            h = self.k3 * math.exp(-x * beta / 2.0)

        if x <= 0.0:
            return None
        if u * h <= gig_kernel(x, lam, beta):
            return x
        return None


@dataclass(frozen=True)
class RatioNoShiftEnvelope:
    """Bounding rectangle [0, u_plus) x [0, v_plus) for ratio-of-uniforms."""

    lam: float
    beta: float
    mode: float
    x_plus: float
    u_plus: float
    v_plus: float

    @classmethod
    def build(cls, lam: float, beta: float) -> "RatioNoShiftEnvelope":
        mode = beta / ((1.0 - lam) + math.sqrt((1.0 - lam) ** 2 + beta ** 2))
        x_plus = ((1.0 + lam) + math.sqrt((1.0 + lam) ** 2 + beta ** 2)) / beta
        v_plus = math.sqrt(gig_kernel(mode, lam, beta))
        u_plus = x_plus * math.sqrt(gig_kernel(x_plus, lam, beta))

        envelope = cls(lam, beta, mode, x_plus, u_plus, v_plus)
        _ensure_finite(envelope)
        return envelope

    def propose(self, u: float, v: float) -> Optional[float]:
        u = u * self.u_plus
        v = v * self.v_plus
        if u <= 0.0 or v <= 0.0:
            return None
        x = u / v
        if v * v <= gig_kernel(x, self.lam, self.beta):
            return x
        return None


@dataclass(frozen=True)
class RatioModeShiftEnvelope:
    """Ratio-of-uniforms rectangle centred on the mode (Dagpunar, 1989).

    ``x_minus`` and ``x_plus`` are the two positive roots of the cubic
    x^3 + a x^2 + b x + m = 0. ``x_plus`` comes from the trigonometric
    formula; ``x_minus`` is recovered from Vieta's relations, since the
    trigonometric expression for it cancels badly when beta is tiny. The
    kernel is divided by its value at the mode (``log_shift``), which keeps
    ``v_plus == 1`` and avoids overflow for large ``lam`` or ``beta``.
    """

    lam: float
    beta: float
    mode: float
    log_shift: float
    x_minus: float
    x_plus: float
    u_minus: float
    u_plus: float
    v_plus: float

    @classmethod
    def build(cls, lam: float, beta: float) -> "RatioModeShiftEnvelope":
        try:
            lm1 = lam - 1.0
            mode = (math.sqrt(lm1 ** 2 + beta ** 2) + lm1) / beta
            a = -(2.0 * (lam + 1.0) / beta) - mode
            b = (2.0 * lm1 / beta) * mode - 1.0
            p2 = b - a ** 2 / 3.0
            q = 2.0 * a ** 3 / 27.0 - a * b / 3.0 + mode
            cos_phi = -(q / 2.0) * math.sqrt(-27.0 / p2 ** 3)
            if not abs(cos_phi) <= 1.0 + _ACOS_SLACK:
                raise SamplingDegeneracyError(
                    f"Mode-shift cubic has no trigonometric solution for lam={lam!r}, "
                    f"beta={beta!r} (cos(phi)={cos_phi!r})"
                )
            # rounding can push cos(phi) just past +-1 when beta is tiny
            if abs(cos_phi) > 1.0:
                logger.debug("Clamping cos(phi)=%r for lam=%r, beta=%r", cos_phi, lam, beta)
            phi = math.acos(min(1.0, max(-1.0, cos_phi)))
            radius = math.sqrt(-4.0 * p2 / 3.0)
            x_plus = radius * math.cos(phi / 3.0) - a / 3.0
            if not x_plus > mode:
                raise SamplingDegeneracyError(
                    f"Mode-shift upper root {x_plus!r} not above mode {mode!r} (lam={lam!r}, beta={beta!r})"
                )
            # x_minus from the two remaining roots: their sum is -a - x_plus and
            # their product -mode / x_plus < 0, so x_minus is the positive one
            s = -a - x_plus
            t = -mode / x_plus
            disc = math.sqrt(s * s - 4.0 * t)
            x_minus = (s + disc) / 2.0 if s >= 0 else 2.0 * t / (s - disc)

            log_shift = log_gig_kernel(mode, lam, beta)
            v_plus = math.sqrt(gig_kernel(mode, lam, beta, log_shift))
            u_minus = (x_minus - mode) * math.sqrt(gig_kernel(x_minus, lam, beta, log_shift))
            u_plus = (x_plus - mode) * math.sqrt(gig_kernel(x_plus, lam, beta, log_shift))
        except (ValueError, ZeroDivisionError, OverflowError) as exc:
            raise SamplingDegeneracyError(
                f"Mode-shift envelope is degenerate for lam={lam!r}, beta={beta!r}: {exc}"
            ) from exc

        envelope = cls(lam, beta, mode, log_shift, x_minus, x_plus, u_minus, u_plus, v_plus)
        _ensure_finite(envelope)
        return envelope

    def propose(self, u: float, v: float) -> Optional[float]:
        u = self.u_minus + u * (self.u_plus - self.u_minus)
        v = v * self.v_plus
        if v <= 0.0:
            return None
        x = u / v + self.mode
        if x > 0.0 and v * v <= gig_kernel(x, self.lam, self.beta, self.log_shift):
            return x
        return None


__all__ = ["ConcaveEnvelope", "RatioNoShiftEnvelope", "RatioModeShiftEnvelope"]
