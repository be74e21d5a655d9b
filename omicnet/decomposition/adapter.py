"""
Adapter between aligned matrices and a sparse decomposition backend.

Sparsity fractions are turned into per-block feature counts, the backend is
called once for all components, and its raw arrays are labelled with the
sample and feature ids of the inputs.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import numpy as np
import pandas as pd

from omicnet.core.alignment import AlignedPair
from omicnet.decomposition.spls import Decomposer, SparsePLS, SPLSFit
from omicnet.errors import FittingError
from omicnet.logging_utils import get_logger

logger = get_logger(__name__)

BLOCKS = ("X", "Y")


def component_labels(n_components: int) -> List[str]:
    return [f"comp{k}" for k in range(1, n_components + 1)]


def retention_count(n_features: int, penalty: float) -> int:
    """Number of features kept for a sparsity fraction (1.0 keeps the fewest, never fewer than one)."""
    if not (0 <= penalty <= 1): raise ValueError("penalty must be in [0, 1]")
    if n_features < 0: raise ValueError("n_features must be non-negative")
    return max(int(round(n_features * (1 - penalty))), 1)


@dataclass(frozen=True)
class DecompositionResult:
    loadings: Dict[str, pd.DataFrame]
    variates: Dict[str, pd.DataFrame]
    explained_variance: pd.DataFrame
    variate_correlations: pd.Series
    keep_x: int
    keep_y: int
    penalties: Dict[str, float] = field(default_factory=dict)
    n_iter: Tuple[int, ...] = ()

    @property
    def n_components(self) -> int:
        return self.loadings["X"].shape[1]

    def _check(self, block: str, component: int):
        if block not in BLOCKS: raise ValueError(f"block must be one of {BLOCKS}")
        if not (1 <= component <= self.n_components):
            raise ValueError(f"component must be in [1, {self.n_components}], got {component}")

    def loading_vector(self, block: str, component: int = 1) -> pd.Series:
        """Copy of one block's loadings for a 1-based component, indexed by feature id."""
        self._check(block, component)
        return self.loadings[block].iloc[:, component - 1].copy()

    def variate(self, block: str, component: int = 1) -> pd.Series:
        self._check(block, component)
        return self.variates[block].iloc[:, component - 1].copy()

    def selected_features(self, block: str, component: int = 1) -> List[str]:
        w = self.loading_vector(block, component)
        return list(w.index[w.to_numpy() != 0])

    def __repr__(self) -> str:
        return (f"DecompositionResult(n_components={self.n_components}, keep_x={self.keep_x}, "
                f"keep_y={self.keep_y}, n_x={self.loadings['X'].shape[0]}, n_y={self.loadings['Y'].shape[0]})")


def _variate_correlation(t: np.ndarray, s: np.ndarray) -> float:
    if np.std(t) == 0 or np.std(s) == 0: return float("nan")
    return float(np.corrcoef(t, s)[0, 1])


class SparseCCA:
    """Sparse canonical decomposition of two aligned blocks."""

    def __init__(
        self,
        n_components: int = 2,
        penalty_x: float = 0.9,
        penalty_y: float = 0.9,
        decomposer: Optional[Decomposer] = None,
    ):
        if n_components < 1: raise ValueError("n_components must be >= 1")
        if not (0 <= penalty_x <= 1): raise ValueError("penalty_x must be in [0, 1]")
        if not (0 <= penalty_y <= 1): raise ValueError("penalty_y must be in [0, 1]")
        self.n_components, self.penalty_x, self.penalty_y = n_components, penalty_x, penalty_y
        self.decomposer = decomposer if decomposer is not None else SparsePLS()

    def _check_inputs(self, X: pd.DataFrame, Y: pd.DataFrame):
        if X.shape[0] != Y.shape[0] or not X.index.equals(Y.index):
            raise FittingError("X and Y are not sample-aligned; run align_omics() first")
        if X.shape[1] == 0 or Y.shape[1] == 0:
            raise FittingError(f"Empty feature set (X has {X.shape[1]} features, Y has {Y.shape[1]})")
        if X.shape[0] < self.n_components:
            raise FittingError(f"{X.shape[0]} samples cannot support {self.n_components} components")

    def _check_fit(self, fit: SPLSFit, n: int, p: int, q: int):
        K = self.n_components
        expected = {
            "loadings_x": (p, K), "loadings_y": (q, K),
            "variates_x": (n, K), "variates_y": (n, K),
        }
        for name, shape in expected.items():
            got = np.shape(getattr(fit, name))
            if got != shape: raise FittingError(f"Decomposer returned {name} with shape {got}, expected {shape}")

    def fit(self, X: Any, Y: Optional[pd.DataFrame] = None) -> DecompositionResult:
        if isinstance(X, AlignedPair): X, Y = X.X, X.Y
        if Y is None: raise ValueError("Y is required unless an AlignedPair is given")
        self._check_inputs(X, Y)

        keep_x = retention_count(X.shape[1], self.penalty_x)
        keep_y = retention_count(Y.shape[1], self.penalty_y)
        logger.info("Keeping %d features in X and %d features in Y.", keep_x, keep_y)

        try:
            fit = self.decomposer.fit(
                X.to_numpy(dtype=float, copy=True), Y.to_numpy(dtype=float, copy=True),
                self.n_components, keep_x, keep_y,
            )
        except (RuntimeError, ValueError, np.linalg.LinAlgError) as exc:
            raise FittingError(f"Sparse decomposition failed: {exc}") from exc
        self._check_fit(fit, X.shape[0], X.shape[1], Y.shape[1])
        return self._to_result(fit, X, Y, keep_x, keep_y)

    def _to_result(self, fit: SPLSFit, X: pd.DataFrame, Y: pd.DataFrame, keep_x: int, keep_y: int) -> DecompositionResult:
        comps = component_labels(self.n_components)
        tx, ty = np.asarray(fit.variates_x, dtype=float), np.asarray(fit.variates_y, dtype=float)
        return DecompositionResult(
            loadings={
                "X": pd.DataFrame(np.array(fit.loadings_x, dtype=float), index=X.columns.copy(), columns=comps),
                "Y": pd.DataFrame(np.array(fit.loadings_y, dtype=float), index=Y.columns.copy(), columns=comps),
            },
            variates={
                "X": pd.DataFrame(tx.copy(), index=X.index.copy(), columns=comps),
                "Y": pd.DataFrame(ty.copy(), index=Y.index.copy(), columns=comps),
            },
            explained_variance=pd.DataFrame(
                [np.asarray(fit.explained_variance_x, dtype=float), np.asarray(fit.explained_variance_y, dtype=float)],
                index=list(BLOCKS), columns=comps,
            ),
            variate_correlations=pd.Series(
                [_variate_correlation(tx[:, k], ty[:, k]) for k in range(self.n_components)], index=comps,
            ),
            keep_x=keep_x,
            keep_y=keep_y,
            penalties={"penalty_x": self.penalty_x, "penalty_y": self.penalty_y},
            n_iter=tuple(fit.n_iter),
        )


def omic_scca(
    X: Any,
    Y: Optional[pd.DataFrame] = None,
    n_components: int = 2,
    penalty_x: float = 0.9,
    penalty_y: float = 0.9,
    decomposer: Optional[Decomposer] = None,
) -> DecompositionResult:
    """Fit a sparse canonical decomposition on an aligned pair."""
    return SparseCCA(n_components=n_components, penalty_x=penalty_x, penalty_y=penalty_y, decomposer=decomposer).fit(X, Y)
