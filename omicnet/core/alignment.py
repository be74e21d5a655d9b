"""
Sample alignment: reconcile two feature matrices onto one ordered sample set.

The common samples keep the order in which they appear in ``X``. Alignment
never centres or scales values.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Optional
import pandas as pd

from omicnet.core.ingestion import as_feature_matrix
from omicnet.errors import AlignmentError
from omicnet.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AlignedPair:
    """Two matrices whose row ``i`` refers to the same sample."""
    X: pd.DataFrame
    Y: pd.DataFrame

    @property
    def samples(self) -> List[str]:
        return list(self.X.index)

    @property
    def n_samples(self) -> int:
        return len(self.X.index)

    def __iter__(self):
        # Allows ``X, Y = align_omics(...)``
        return iter((self.X, self.Y))

    def __repr__(self) -> str:
        return f"AlignedPair(n_samples={self.n_samples}, n_x={self.X.shape[1]}, n_y={self.Y.shape[1]})"


def common_samples(x_ids: List[str], y_ids: List[str]) -> List[str]:
    in_y = set(y_ids)
    return [s for s in x_ids if s in in_y]


def align_omics(X: Any, Y: Any, sample_col: Optional[str] = None) -> AlignedPair:
    """
    Subset ``X`` and ``Y`` to their shared samples, in ``X``'s row order.

    Raises
    ------
    AlignmentError
        If no sample id is present in both matrices.
    """
    x_mat = as_feature_matrix(X, sample_col=sample_col)
    y_mat = as_feature_matrix(Y, sample_col=sample_col)

    shared = common_samples(list(x_mat.index), list(y_mat.index))
    if not shared:
        raise AlignmentError("No matching sample names found between X and Y. Check your sample ids.")

    logger.info("Successfully aligned %d matching samples.", len(shared))
    logger.debug("Dropped %d samples from X and %d from Y", len(x_mat) - len(shared), len(y_mat) - len(shared))

    return AlignedPair(X=x_mat.loc[shared].copy(), Y=y_mat.loc[shared].copy())
