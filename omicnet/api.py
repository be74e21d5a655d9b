from __future__ import annotations
from typing import Any, Optional, Sequence
import pandas as pd
import pyarrow as pa
from omicnet.config import PipelineConfig
from omicnet.core.alignment import AlignedPair, align_omics
from omicnet.core.connection import DuckDBConnection
from omicnet.decomposition.adapter import DecompositionResult, omic_scca
from omicnet.decomposition.spls import Decomposer, SparsePLS
from omicnet.network.edges import NetworkBuilder, top_edges
from omicnet.network.summaries import DEFAULT_LAYERS, bipartite_nodes, selected_correlations, top_loadings

def _pick(value, fallback):
    return fallback if value is None else value

class OmicNet:
    """Unified engine: align two omics blocks, decompose them and build the feature network."""

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        decomposer: Optional[Decomposer] = None,
        threads: Optional[int] = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self.conn = DuckDBConnection(threads=threads)
        self.decomposer = decomposer
        self._pair, self._model, self._edges = None, None, None

    @property
    def aligned(self) -> Optional[AlignedPair]: return self._pair
    @property
    def model(self) -> Optional[DecompositionResult]: return self._model
    @property
    def edges(self) -> Optional[pa.Table]: return self._edges

    def align(self, X: Any, Y: Any, sample_col: Optional[str] = None) -> OmicNet:
        self._pair = align_omics(X, Y, sample_col=sample_col)
        self._model, self._edges = None, None
        return self

    def _decomposer(self) -> Decomposer:
        if self.decomposer is not None: return self.decomposer
        return SparsePLS(max_iter=self.config.max_iter, tol=self.config.tol, scale=self.config.scale)

    def fit(self, n_components: Optional[int] = None, penalty_x: Optional[float] = None, penalty_y: Optional[float] = None) -> OmicNet:
        if self._pair is None: raise RuntimeError("Call align() first.")
        self._model = omic_scca(
            self._pair,
            n_components=_pick(n_components, self.config.n_components),
            penalty_x=_pick(penalty_x, self.config.penalty_x),
            penalty_y=_pick(penalty_y, self.config.penalty_y),
            decomposer=self._decomposer(),
        )
        self._edges = None
        return self

    def _require_model(self) -> DecompositionResult:
        if self._model is None: raise RuntimeError("Call fit() first.")
        return self._model

    def network(self, comp_select: Optional[int] = None, weight_threshold: Optional[float] = None) -> pa.Table:
        model = self._require_model()
        builder = NetworkBuilder(self.conn, weight_threshold=_pick(weight_threshold, self.config.weight_threshold))
        self._edges = builder.build(model, comp_select=_pick(comp_select, self.config.comp_select))
        self.conn.publish_edges(self._edges)
        return self._edges

    def top_edges(self, n: int = 50, **kwargs) -> pa.Table:
        edges = self._edges if self._edges is not None and not kwargs else self.network(**kwargs)
        return top_edges(edges, n)

    def nodes(self, edges: Optional[pa.Table] = None, layer_names: Sequence[str] = DEFAULT_LAYERS) -> pa.Table:
        if edges is None:
            edges = self._edges if self._edges is not None else self.network()
        return bipartite_nodes(edges, layer_names=layer_names)

    def top_loadings(self, top_features: int = 40, comp_select: Optional[int] = None, block_names: Sequence[str] = DEFAULT_LAYERS) -> pa.Table:
        return top_loadings(self._require_model(), top_features=top_features,
                            comp_select=_pick(comp_select, self.config.comp_select), block_names=block_names)

    def correlations(self, comp_select: Optional[int] = None) -> pd.DataFrame:
        return selected_correlations(self._pair, self._require_model(), _pick(comp_select, self.config.comp_select))

    def sql(self, query: str) -> pa.Table:
        """Query the last built edge list, registered as ``edges``."""
        if self._edges is None: raise RuntimeError("Call network() first.")
        return self.conn.query(query)

    def close(self): self.conn.close()
    def __enter__(self): return self
    def __exit__(self, *_): self.close()
    def __repr__(self) -> str:
        state = "fitted" if self._model is not None else ("aligned" if self._pair is not None else "empty")
        return f"OmicNet({state}, config={self.config!r})"
