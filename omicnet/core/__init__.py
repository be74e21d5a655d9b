from .connection import DuckDBConnection
from .ingestion import as_feature_matrix
from .alignment import AlignedPair, align_omics

__all__ = ["DuckDBConnection", "as_feature_matrix", "AlignedPair", "align_omics"]
