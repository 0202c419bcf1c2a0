"""Logging for draw runs: handler setup, a run header, a draw-rate timer and progress bars."""
from __future__ import annotations

import logging
import os
import sys
import time
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from gigsampler.inference.gig import select_regime, standardize

_HAS_RICH = False
try:  # Optional colored logging
    from rich.console import Console
    from rich.logging import RichHandler
    _HAS_RICH = True
except Exception:
    Console = None  # type: ignore

_HAS_TQDM = False
try:
    from tqdm import tqdm as _tqdm  # type: ignore
    _HAS_TQDM = True
except Exception:
    _tqdm = None  # type: ignore

FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _console_handler() -> logging.Handler:
    if _HAS_RICH:
        # stderr keeps stdout free for the [OK] line
        return RichHandler(console=Console(stderr=True), show_time=True, show_path=False, markup=False)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s - %(message)s", datefmt="%H:%M:%S"))
    return handler


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """Attach console (and optionally file) handlers to the ``gigsampler`` logger.

    Calling it again replaces the previous handlers, so repeated CLI runs in
    one process do not duplicate output.
    """
    root = logging.getLogger("gigsampler")
    root.setLevel(level)
    root.propagate = False
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()

    handlers = [_console_handler()]
    if log_file:
        parent = os.path.dirname(log_file)
        if parent:
            os.makedirs(parent, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(fh)
    for h in handlers:
        h.setLevel(level)
        root.addHandler(h)

    root.debug("Logging to %d handler(s) at level %s.", len(handlers), logging.getLevelName(level))
    return root


def verbosity_to_level(verbosity: int) -> int:
    """``-v`` count to level: none WARNING, one INFO, two or more DEBUG."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def _flatten(cfg: Mapping[str, Any], prefix: str = "") -> Iterable[tuple[str, Any]]:
    for k in sorted(cfg):
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(cfg[k], Mapping):
            yield from _flatten(cfg[k], key)
        else:
            yield key, cfg[k]


def log_draw_header(
    logger: logging.Logger,
    a: float,
    b: float,
    p: float,
    *,
    n: int,
    seed: Optional[int] = None,
    max_iterations: Optional[int] = None,
    resolved: Optional[Mapping[str, Any]] = None,
) -> str:
    """Log the target law, its standardized form and the selected regime.

    The full resolved config, when given, goes to DEBUG as flat ``key=value``
    lines. Returns the regime name.
    """
    std = standardize(a, b, p)
    regime = select_regime(std.beta, std.lam, p).value
    logger.info("Target GIG(a=%g, b=%g, p=%g)", a, b, p)
    logger.info("Standardized: alpha=%g beta=%g lam=%g -> regime %s", std.alpha, std.beta, std.lam, regime)
    cap = "none" if max_iterations is None else f"{max_iterations:,}"
    logger.info("Drawing n=%d (seed=%s, rejection cap=%s)", n, seed, cap)
    if resolved is not None:
        for key, value in _flatten(resolved):
            logger.debug("config %s=%r", key, value)
    return regime


@dataclass
class DrawTimer:
    """Times a batch of ``n`` draws in one regime and logs the draw rate on exit."""
    regime: str
    n: int
    logger: Optional[logging.Logger] = None
    start: float = 0.0
    elapsed: float = 0.0

    @property
    def rate(self) -> float:
        return self.n / self.elapsed if self.elapsed > 0 else float("inf")

    def __enter__(self) -> "DrawTimer":
        self.start = time.perf_counter()
        if self.logger:
            self.logger.debug("[%s] drawing %d sample(s).", self.regime, self.n)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.elapsed = time.perf_counter() - self.start
        if not self.logger:
            return
        if exc_type is None:
            self.logger.info(
                "[%s] %d draw(s) in %.3fs (%.0f draws/s).", self.regime, self.n, self.elapsed, self.rate
            )
        else:
            self.logger.warning(
                "[%s] sampling failed after %.3fs: %s", self.regime, self.elapsed, exc_type.__name__
            )

    def to_dict(self) -> dict:
        return {"regime": self.regime, "n": self.n, "elapsed_sec": self.elapsed, "draws_per_sec": self.rate}


def draw_progress(n: int, regime: str, disable: bool = False) -> Iterable[int]:
    """``range(n)`` behind a tqdm bar labelled with the regime, or bare when tqdm is absent."""
    if _HAS_TQDM and not disable:
        return _tqdm(range(n), total=n, desc=f"GIG[{regime}]", unit="draw")
    return range(n)
