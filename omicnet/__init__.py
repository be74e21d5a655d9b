from .api import OmicNet
from .config import PipelineConfig
from .errors import OmicNetError, AlignmentError, FittingError, EmptySelectionError
from .core.alignment import AlignedPair, align_omics
from .core.connection import DuckDBConnection
from .core.ingestion import as_feature_matrix
from .decomposition import DecompositionResult, SparseCCA, SparsePLS, omic_scca, retention_count
from .network import (
    NetworkBuilder,
    bipartite_nodes,
    cross_edges,
    filter_edges,
    scca_to_network,
    selected_correlations,
    top_edges,
    top_loadings,
)
from .evaluation import feature_recovery, linked_edge_fraction, latent_correlation
from .datasets import generate_dummy_omics, load_omics_example

def integrate(X, Y, **kwargs) -> OmicNet:
    """Align and fit in one call; keyword arguments go to :class:`PipelineConfig`."""
    engine = OmicNet(config=PipelineConfig(**kwargs))
    engine.align(X, Y).fit()
    return engine

__all__ = [
    "OmicNet",
    "integrate",
    "PipelineConfig",
    # Errors
    "OmicNetError",
    "AlignmentError",
    "FittingError",
    "EmptySelectionError",
    # Core
    "AlignedPair",
    "align_omics",
    "DuckDBConnection",
    "as_feature_matrix",
    # Decomposition
    "DecompositionResult",
    "SparseCCA",
    "SparsePLS",
    "omic_scca",
    "retention_count",
    # Network
    "NetworkBuilder",
    "bipartite_nodes",
    "cross_edges",
    "filter_edges",
    "scca_to_network",
    "selected_correlations",
    "top_edges",
    "top_loadings",
    # Evaluation
    "feature_recovery",
    "linked_edge_fraction",
    "latent_correlation",
    # Datasets
    "generate_dummy_omics",
    "load_omics_example",
]
