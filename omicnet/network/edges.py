"""
Bipartite edge lists from per-component loadings.

Every selected X feature is paired with every selected Y feature; the edge
weight is the product of the two loadings and the only pruning is the
``|weight_product| >= weight_threshold`` filter.
"""
from __future__ import annotations
from typing import Mapping, Optional
import math
import pyarrow as pa
import pyarrow.compute as pc

from omicnet.core.connection import DuckDBConnection
from omicnet.decomposition.adapter import DecompositionResult
from omicnet.errors import EmptySelectionError
from omicnet.logging_utils import get_logger

logger = get_logger(__name__)

EDGE_SCHEMA = pa.schema([
    ("feature_x", pa.string()),
    ("feature_y", pa.string()),
    ("weight_product", pa.float64()),
    ("interaction_type", pa.string()),
])

_EDGE_SQL = """
    SELECT
        x.feature AS feature_x,
        y.feature AS feature_y,
        x.weight * y.weight AS weight_product,
        CASE WHEN x.weight * y.weight > 0 THEN 'Positive' ELSE 'Negative' END AS interaction_type
    FROM _weights_x x CROSS JOIN _weights_y y
    WHERE abs(x.weight * y.weight) >= ?
    ORDER BY x.ord, y.ord
"""


def _check_threshold(weight_threshold: float):
    if weight_threshold is None or not weight_threshold >= 0:
        raise ValueError("weight_threshold must be non-negative")


def _selected(weights: Mapping[str, float], block: str) -> pa.Table:
    names, values = [], []
    for name, w in weights.items():
        w = float(w)
        if not math.isfinite(w): raise ValueError(f"Non-finite loading for {block} feature {name!r}")
        if w != 0:
            names.append(str(name)); values.append(w)
    return pa.table({
        "ord": pa.array(list(range(len(names))), type=pa.int64()),
        "feature": pa.array(names, type=pa.string()),
        "weight": pa.array(values, type=pa.float64()),
    })


def empty_edges() -> pa.Table:
    return EDGE_SCHEMA.empty_table()


class NetworkBuilder:
    def __init__(self, conn: Optional[DuckDBConnection] = None, weight_threshold: float = 0.05):
        _check_threshold(weight_threshold)
        self.conn, self.weight_threshold = conn, weight_threshold

    def _run(self, conn: DuckDBConnection, wx: pa.Table, wy: pa.Table) -> pa.Table:
        with conn.registered(_weights_x=wx, _weights_y=wy):
            return conn.query(_EDGE_SQL, [float(self.weight_threshold)]).cast(EDGE_SCHEMA)

    def cross_edges(self, weights_x: Mapping[str, float], weights_y: Mapping[str, float]) -> pa.Table:
        """Edges between the nonzero entries of two feature -> weight mappings."""
        wx, wy = _selected(weights_x, "X"), _selected(weights_y, "Y")
        if wx.num_rows == 0 or wy.num_rows == 0:
            side = "X" if wx.num_rows == 0 else "Y"
            raise EmptySelectionError(f"No features selected in block {side}. Try decreasing penalty_{side.lower()}.")

        if self.conn is not None:
            edges = self._run(self.conn, wx, wy)
        else:
            with DuckDBConnection() as conn:
                edges = self._run(conn, wx, wy)

        logger.info(
            "%d X and %d Y features selected: %d candidate pairs, %d edges with |weight| >= %g",
            wx.num_rows, wy.num_rows, wx.num_rows * wy.num_rows, edges.num_rows, self.weight_threshold,
        )
        return edges

    def build(self, result: DecompositionResult, comp_select: int = 1) -> pa.Table:
        u = result.loading_vector("X", comp_select)
        v = result.loading_vector("Y", comp_select)
        try:
            return self.cross_edges(u.to_dict(), v.to_dict())
        except EmptySelectionError as exc:
            raise EmptySelectionError(f"Component {comp_select}: {exc}") from exc


def cross_edges(
    weights_x: Mapping[str, float],
    weights_y: Mapping[str, float],
    weight_threshold: float = 0.0,
    conn: Optional[DuckDBConnection] = None,
) -> pa.Table:
    return NetworkBuilder(conn, weight_threshold=weight_threshold).cross_edges(weights_x, weights_y)


def scca_to_network(
    model: DecompositionResult,
    comp_select: int = 1,
    weight_threshold: float = 0.05,
    conn: Optional[DuckDBConnection] = None,
) -> pa.Table:
    """Edge list for one component of a fitted decomposition."""
    return NetworkBuilder(conn, weight_threshold=weight_threshold).build(model, comp_select=comp_select)


def filter_edges(edges: pa.Table, weight_threshold: float) -> pa.Table:
    """New edge list keeping only edges with ``|weight_product| >= weight_threshold``."""
    _check_threshold(weight_threshold)
    return edges.filter(pc.greater_equal(pc.abs(edges["weight_product"]), weight_threshold))


def top_edges(edges: pa.Table, n: int = 50) -> pa.Table:
    """The ``n`` strongest edges by absolute weight, strongest first."""
    if n < 0: raise ValueError("n must be non-negative")
    order = pc.array_sort_indices(pc.abs(edges["weight_product"].combine_chunks()), order="descending")
    return edges.take(order[:n])
