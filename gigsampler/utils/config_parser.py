"""YAML configuration loader with command-line overrides."""
from __future__ import annotations

import copy
from dataclasses import dataclass
from functools import reduce
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from gigsampler.inference.gig import check_params
from gigsampler.inference.samplers import DEFAULT_MAX_ITERATIONS

DEFAULT_CONFIG: Dict[str, Any] = {
    "gig": {"a": 1.0, "b": 1.0, "p": 0.5},
    "sampling": {"n": 1000, "seed": None, "max_iterations": DEFAULT_MAX_ITERATIONS},
    "output": {"dir": "outputs/draws", "name": None, "save_samples": True},
    "validation": {"enabled": True, "n_se": 5.0},
}


def deep_update(dst: Dict[str, Any], src: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``src`` into ``dst`` in place and return ``dst``."""
    for k, v in src.items():
        if isinstance(v, Mapping) and isinstance(dst.get(k), dict):
            deep_update(dst[k], v)
        else:
            dst[k] = copy.deepcopy(v) if isinstance(v, Mapping) else v
    return dst


def _load_with_defaults(path: Path, seen: frozenset[Path]) -> Dict[str, Any]:
    norm_path = path.resolve()
    if norm_path in seen:
        cycle = " -> ".join(str(p) for p in (*seen, norm_path))
        raise ValueError(f"Config defaults cycle detected: {cycle}")
    seen = seen | {norm_path}

    data = yaml.safe_load(norm_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config {norm_path} must be a YAML mapping at top-level.")

    defaults = data.pop("defaults", None)
    base: Dict[str, Any] = {}
    if defaults:
        if isinstance(defaults, (str, Path)):
            defaults = [defaults]
        if not isinstance(defaults, list):
            raise ValueError(f"'defaults' in {norm_path} must be string or list.")
        for item in defaults:
            ref = Path(item)
            if not ref.is_absolute():
                ref = norm_path.parent / ref
            if not ref.exists():
                raise FileNotFoundError(f"Default config '{item}' referenced from {norm_path} not found.")
            deep_update(base, _load_with_defaults(ref, seen))
    return deep_update(base, data)


def load_config(path: Path) -> Dict[str, Any]:
    """Load a YAML config file, resolving its ``defaults`` chain."""
    return _load_with_defaults(Path(path), frozenset())


def load_and_merge(paths: Sequence[Path]) -> Dict[str, Any]:
    """Load several configs and merge them left to right over :data:`DEFAULT_CONFIG`."""
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    for p in paths:
        deep_update(cfg, load_config(Path(p)))
    return cfg


def _cast_value(v: str) -> Any:
    low = v.lower()
    if low in {"true", "false"}:
        return low == "true"
    if low in {"null", "none", "~"}:
        return None
    try:
        if any(ch in v for ch in ".eE"):
            return float(v)
        return int(v)
    except ValueError:
        return v


def parse_overrides(pairs: Sequence[str]) -> Dict[str, Any]:
    """
    Parse CLI overrides like:
      ['gig.p=-0.5', 'sampling.n=10000', 'validation.enabled=false']

    Returns a nested dict to be merged with :func:`deep_update`.
    """
    root: Dict[str, Any] = {}
    for item in pairs:
        if "=" not in item:
            raise ValueError(f"Override must be key=value, got: '{item}'")
        k, v = item.split("=", 1)
        keys = k.strip().split(".")
        d = reduce(lambda acc, kk: acc.setdefault(kk, {}), keys[:-1], root)
        if not isinstance(d, dict):
            raise ValueError(f"Key path conflict at '{k}'")
        d[keys[-1]] = _cast_value(v.strip())
    return root


def merge_overrides(config: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge nested overrides into a copy of ``config``."""
    return deep_update(copy.deepcopy(config), overrides)


@dataclass
class DrawConfig:
    a: float
    b: float
    p: float
    n: int = 1000
    seed: Optional[int] = None
    max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS
    out_dir: str = "outputs/draws"
    name: Optional[str] = None
    save_samples: bool = True
    validate: bool = True
    n_se: float = 5.0

    @classmethod
    def from_dict(cls, cfg: Mapping[str, Any]) -> "DrawConfig":
        gig = cfg.get("gig", {}) or {}
        sampling = cfg.get("sampling", {}) or {}
        output = cfg.get("output", {}) or {}
        validation = cfg.get("validation", {}) or {}

        missing: List[str] = [k for k in ("a", "b", "p") if gig.get(k) is None]
        if missing:
            raise ValueError(f"Missing GIG parameter(s) in config: {', '.join('gig.' + k for k in missing)}")

        n = int(sampling.get("n", 1000))
        if n < 1:
            raise ValueError(f"sampling.n must be >= 1, got {n}")
        max_iter = sampling.get("max_iterations", DEFAULT_MAX_ITERATIONS)
        if max_iter is not None:
            max_iter = int(max_iter)
            if max_iter < 1:
                raise ValueError(f"sampling.max_iterations must be >= 1 or null, got {max_iter}")
        seed = sampling.get("seed")
        check_params(float(gig["a"]), float(gig["b"]), float(gig["p"]))

        return cls(
            a=float(gig["a"]),
            b=float(gig["b"]),
            p=float(gig["p"]),
            n=n,
            seed=None if seed is None else int(seed),
            max_iterations=max_iter,
            out_dir=str(output.get("dir", "outputs/draws")),
            name=output.get("name"),
            save_samples=bool(output.get("save_samples", True)),
            validate=bool(validation.get("enabled", True)),
            n_se=float(validation.get("n_se", 5.0)),
        )
