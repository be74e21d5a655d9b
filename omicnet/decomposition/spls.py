"""
Sparse PLS in canonical mode.

Each component alternates between the two blocks: the loading vector of one
block is the soft-thresholded covariance with the other block's variate,
keeping only the ``keep`` largest entries. After convergence both blocks are
deflated on their own variate.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol, Tuple
import numpy as np
from scipy import linalg

from omicnet.core.scaling import standardize
from omicnet.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SPLSFit:
    loadings_x: np.ndarray
    loadings_y: np.ndarray
    variates_x: np.ndarray
    variates_y: np.ndarray
    explained_variance_x: np.ndarray
    explained_variance_y: np.ndarray
    n_iter: Tuple[int, ...]


class Decomposer(Protocol):
    """Anything able to fit paired blocks into per-component loadings and variates."""
    def fit(self, X: np.ndarray, Y: np.ndarray, n_components: int, keep_x: int, keep_y: int) -> SPLSFit: ...


def soft_threshold_keep(w: np.ndarray, keep: int) -> np.ndarray:
    """
    Shrink ``w`` so that only its ``keep`` largest absolute entries stay nonzero.

    The kept entries are chosen by rank (ties broken by position), then shrunk
    by the largest magnitude left outside the selection. Kept entries tied with
    that magnitude are shrunk to a small fraction of themselves rather than to
    zero, so at least one entry survives whenever ``w`` is not all zero.
    """
    if keep >= w.size: return w.copy()
    abs_w = np.abs(w)
    order = np.argsort(-abs_w, kind="stable")
    kept, dropped = order[:keep], order[keep:]
    lam = abs_w[dropped].max()
    shrunk = abs_w[kept] - lam
    floor = abs_w[kept] * np.finfo(float).eps ** 0.5
    out = np.zeros_like(w, dtype=float)
    out[kept] = np.sign(w[kept]) * np.maximum(shrunk, floor)
    return out


def _unit(w: np.ndarray, what: str) -> np.ndarray:
    norm = np.linalg.norm(w)
    if norm == 0: raise RuntimeError(f"{what} collapsed to zero; the blocks share no remaining covariance")
    return w / norm


def _explained_variance(block: np.ndarray, variates: np.ndarray) -> np.ndarray:
    total = np.sum(block ** 2)
    if total == 0: raise RuntimeError("block has zero total variance")
    proj = block.T @ variates
    return np.sum(proj ** 2, axis=0) / (np.sum(variates ** 2, axis=0) * total)


class SparsePLS:
    def __init__(self, max_iter: int = 500, tol: float = 1e-06, scale: bool = True):
        if max_iter < 1: raise ValueError("max_iter must be >= 1")
        if tol <= 0: raise ValueError("tol must be positive")
        self.max_iter, self.tol, self.scale = max_iter, tol, scale

    def _validate(self, X: np.ndarray, Y: np.ndarray, n_components: int, keep_x: int, keep_y: int):
        if X.ndim != 2 or Y.ndim != 2: raise ValueError("X and Y must be 2-D")
        if X.shape[0] != Y.shape[0]: raise ValueError(f"X has {X.shape[0]} rows but Y has {Y.shape[0]}")
        if X.shape[1] == 0 or Y.shape[1] == 0: raise ValueError("X and Y need at least one feature each")
        if n_components < 1: raise ValueError("n_components must be >= 1")
        if X.shape[0] < max(n_components, 2): raise ValueError(f"{X.shape[0]} samples cannot support {n_components} components")
        if not (1 <= keep_x <= X.shape[1]): raise ValueError(f"keep_x must be in [1, {X.shape[1]}]")
        if not (1 <= keep_y <= Y.shape[1]): raise ValueError(f"keep_y must be in [1, {Y.shape[1]}]")
        if not (np.isfinite(X).all() and np.isfinite(Y).all()): raise ValueError("X and Y must not contain NaN or infinite values")

    def _component(self, M: np.ndarray, keep_x: int, keep_y: int, comp: int) -> Tuple[np.ndarray, np.ndarray, int]:
        U, _, Vt = linalg.svd(M, full_matrices=False)
        u, v = U[:, 0], Vt[0]
        for it in range(1, self.max_iter + 1):
            u_new = _unit(soft_threshold_keep(M @ v, keep_x), f"X loading of component {comp}")
            v_new = _unit(soft_threshold_keep(M.T @ u_new, keep_y), f"Y loading of component {comp}")
            delta = max(np.sum((u_new - u) ** 2), np.sum((v_new - v) ** 2))
            u, v = u_new, v_new
            if delta < self.tol:
                logger.debug("Component %d converged after %d iterations", comp, it)
                return u, v, it
        raise RuntimeError(f"Component {comp} did not converge within {self.max_iter} iterations")

    def fit(self, X: np.ndarray, Y: np.ndarray, n_components: int, keep_x: int, keep_y: int) -> SPLSFit:
        X = np.array(X, dtype=float)
        Y = np.array(Y, dtype=float)
        self._validate(X, Y, n_components, keep_x, keep_y)

        X0, Y0 = standardize(X, self.scale), standardize(Y, self.scale)
        X_h, Y_h = X0.copy(), Y0.copy()
        n, p, q = X.shape[0], X.shape[1], Y.shape[1]
        U, V = np.zeros((p, n_components)), np.zeros((q, n_components))
        T, S = np.zeros((n, n_components)), np.zeros((n, n_components))
        iters = []

        for k in range(n_components):
            u, v, it = self._component(X_h.T @ Y_h, keep_x, keep_y, k + 1)
            t, s = X_h @ u, Y_h @ v
            tt, ss = t @ t, s @ s
            if tt == 0 or ss == 0: raise RuntimeError(f"Component {k + 1} produced a null variate")
            # canonical mode: each block is deflated on its own variate
            X_h = X_h - np.outer(t, X_h.T @ t / tt)
            Y_h = Y_h - np.outer(s, Y_h.T @ s / ss)
            U[:, k], V[:, k], T[:, k], S[:, k] = u, v, t, s
            iters.append(it)

        return SPLSFit(
            loadings_x=U, loadings_y=V,
            variates_x=T, variates_y=S,
            explained_variance_x=_explained_variance(X0, T),
            explained_variance_y=_explained_variance(Y0, S),
            n_iter=tuple(iters),
        )
