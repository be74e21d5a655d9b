from .spls import Decomposer, SparsePLS, SPLSFit, soft_threshold_keep
from .adapter import DecompositionResult, SparseCCA, omic_scca, retention_count

__all__ = [
    "Decomposer",
    "SparsePLS",
    "SPLSFit",
    "soft_threshold_keep",
    "DecompositionResult",
    "SparseCCA",
    "omic_scca",
    "retention_count",
]
