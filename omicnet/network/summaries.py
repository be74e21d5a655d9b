"""
Tables for downstream rendering: network nodes, ranked loadings and the
raw-value correlations between selected features.
"""
from __future__ import annotations
from typing import Sequence
import numpy as np
import pandas as pd
import pyarrow as pa

from omicnet.core.alignment import AlignedPair
from omicnet.core.scaling import standardize
from omicnet.decomposition.adapter import DecompositionResult
from omicnet.errors import EmptySelectionError

DEFAULT_LAYERS = ("Gene", "Metabolite")


def _check_layers(names: Sequence[str]):
    if len(names) != 2 or names[0] == names[1]:
        raise ValueError("layer names must be two distinct labels")


def _degrees(edges: pa.Table, column: str, other: str, layer: str) -> pa.Table:
    # single-threaded grouping keeps first-appearance order
    counts = edges.group_by(column, use_threads=False).aggregate([(other, "count")])
    return pa.table({
        "node": counts.column(column).cast(pa.string()),
        "layer": pa.array([layer] * counts.num_rows, type=pa.string()),
        "degree": counts.column(f"{other}_count").cast(pa.int64()),
    })


def bipartite_nodes(edges: pa.Table, layer_names: Sequence[str] = DEFAULT_LAYERS) -> pa.Table:
    """Nodes present in ``edges`` with their layer and degree; X features first."""
    _check_layers(layer_names)
    return pa.concat_tables([
        _degrees(edges, "feature_x", "feature_y", layer_names[0]),
        _degrees(edges, "feature_y", "feature_x", layer_names[1]),
    ])


def top_loadings(
    result: DecompositionResult,
    top_features: int = 40,
    comp_select: int = 1,
    block_names: Sequence[str] = DEFAULT_LAYERS,
) -> pa.Table:
    """Absolute loadings of both blocks ranked together, largest first."""
    _check_layers(block_names)
    if top_features < 1: raise ValueError("top_features must be >= 1")
    rows = []
    for block, label in zip(("X", "Y"), block_names):
        w = result.loading_vector(block, comp_select).abs()
        rows += [{"feature": str(f), "loading": float(v), "block": label} for f, v in w.items()]
    rows.sort(key=lambda r: r["loading"], reverse=True)
    schema = pa.schema([("feature", pa.string()), ("loading", pa.float64()), ("block", pa.string())])
    return pa.Table.from_pylist(rows[:top_features], schema=schema)


def selected_correlations(pair: AlignedPair, result: DecompositionResult, comp_select: int = 1) -> pd.DataFrame:
    """
    Pearson correlation between each selected X feature (rows) and each
    selected Y feature (columns), computed on the aligned raw values.
    Constant features yield NaN.
    """
    fx = result.selected_features("X", comp_select)
    fy = result.selected_features("Y", comp_select)
    if not fx or not fy:
        raise EmptySelectionError(f"Component {comp_select} has no selected features in block {'X' if not fx else 'Y'}")
    if pair.n_samples < 2: raise ValueError("At least two samples are needed for correlations")
    zx = standardize(pair.X[fx].to_numpy(dtype=float), constant="nan")
    zy = standardize(pair.Y[fy].to_numpy(dtype=float), constant="nan")
    corr = zx.T @ zy / (pair.n_samples - 1)
    return pd.DataFrame(corr, index=fx, columns=fy)
