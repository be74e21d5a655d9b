"""
Run-level defaults for the integration pipeline.

Values can be overridden per call, or globally through ``OMICNET_*``
environment variables via :meth:`PipelineConfig.from_env`.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict


_ENV_FIELDS: Dict[str, Callable[[str], Any]] = {
    "n_components": int,
    "penalty_x": float,
    "penalty_y": float,
    "comp_select": int,
    "weight_threshold": float,
    "max_iter": int,
    "tol": float,
}


@dataclass(frozen=True)
class PipelineConfig:
    n_components: int = 2
    penalty_x: float = 0.9
    penalty_y: float = 0.9
    comp_select: int = 1
    weight_threshold: float = 0.05
    max_iter: int = 500
    tol: float = 1e-06
    scale: bool = True

    def __post_init__(self) -> None:
        if self.n_components < 1: raise ValueError("n_components must be >= 1")
        for name in ("penalty_x", "penalty_y"):
            if not (0 <= getattr(self, name) <= 1): raise ValueError(f"{name} must be in [0, 1]")
        if self.comp_select < 1: raise ValueError("comp_select must be >= 1")
        if self.comp_select > self.n_components: raise ValueError("comp_select must not exceed n_components")
        if self.weight_threshold < 0: raise ValueError("weight_threshold must be non-negative")
        if self.max_iter < 1: raise ValueError("max_iter must be >= 1")
        if self.tol <= 0: raise ValueError("tol must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> PipelineConfig:
        """Build a config from ``OMICNET_<FIELD>`` variables; keyword overrides win."""
        values: Dict[str, Any] = {}
        for field, cast in _ENV_FIELDS.items():
            raw = os.getenv(f"OMICNET_{field.upper()}")
            if raw is None or raw == "":
                continue
            try:
                values[field] = cast(raw)
            except ValueError as exc:
                raise ValueError(f"OMICNET_{field.upper()} has an invalid value: {raw!r}") from exc
        values.update(overrides)
        return cls(**values)

    def replace(self, **overrides: Any) -> PipelineConfig:
        return replace(self, **overrides)
