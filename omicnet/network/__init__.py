from .edges import (
    EDGE_SCHEMA,
    NetworkBuilder,
    cross_edges,
    empty_edges,
    filter_edges,
    scca_to_network,
    top_edges,
)
from .summaries import bipartite_nodes, selected_correlations, top_loadings

__all__ = [
    "EDGE_SCHEMA",
    "NetworkBuilder",
    "cross_edges",
    "empty_edges",
    "filter_edges",
    "scca_to_network",
    "top_edges",
    "bipartite_nodes",
    "selected_correlations",
    "top_loadings",
]
