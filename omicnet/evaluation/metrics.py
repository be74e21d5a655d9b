"""
Ground-truth recovery metrics for runs on synthetic data.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable
import numpy as np
import pyarrow as pa

from omicnet.decomposition.adapter import DecompositionResult


def _precision(selected: set, actual: set) -> float:
    if not selected: return 0.0
    return len(selected & actual) / len(selected)

def _recall(selected: set, actual: set) -> float:
    if not actual: return 0.0
    return len(selected & actual) / len(actual)

def feature_recovery(selected: Iterable[Any], linked: Iterable[Any]) -> Dict[str, float]:
    """Precision, recall and F1 of a selected feature set against the linked features."""
    sel, act = set(selected), set(linked)
    p, r = _precision(sel, act), _recall(sel, act)
    return {"precision": p, "recall": r, "f1": 2 * p * r / (p + r) if (p + r) > 0 else 0.0}

def linked_edge_fraction(edges: pa.Table, linked_x: Iterable[Any], linked_y: Iterable[Any], mode: str = "any") -> float:
    """
    Share of edges touching the linked features.

    ``mode="any"`` counts an edge when at least one endpoint is linked,
    ``mode="both"`` only when both are.
    """
    if mode not in ("any", "both"): raise ValueError("mode must be 'any' or 'both'")
    if edges.num_rows == 0: return 0.0
    lx, ly = set(linked_x), set(linked_y)
    hits = 0
    for fx, fy in zip(edges.column("feature_x").to_pylist(), edges.column("feature_y").to_pylist()):
        in_x, in_y = fx in lx, fy in ly
        if (in_x and in_y) if mode == "both" else (in_x or in_y): hits += 1
    return hits / edges.num_rows

def latent_correlation(result: DecompositionResult, latent: Iterable[float], component: int = 1, block: str = "X") -> float:
    """Absolute Pearson correlation between a component's variate and the true latent factor."""
    t = result.variate(block, component).to_numpy(dtype=float)
    z = np.asarray(list(latent), dtype=float)
    if t.shape != z.shape: raise ValueError(f"latent has {z.size} values for {t.size} samples")
    if np.std(t) == 0 or np.std(z) == 0: return 0.0
    return float(abs(np.corrcoef(t, z)[0, 1]))
