# ---------------------------------------------------------------------------
# Tests configuration
# ---------------------------------------------------------------------------

import numpy as np
import pandas as pd
import pytest

from omicnet.core.connection import DuckDBConnection
from omicnet.decomposition.spls import SPLSFit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def conn():
    """In-memory DuckDB connection for each test."""
    db = DuckDBConnection()
    yield db
    db.close()


@pytest.fixture
def rna_df():
    """Four samples x three genes, index in S4..S1 order."""
    return pd.DataFrame(
        {"Gene_1": [1.0, 2.0, 3.0, 4.0], "Gene_2": [0.5, 0.1, 0.3, 0.2], "Gene_3": [9.0, 8.0, 7.0, 6.0]},
        index=pd.Index(["S4", "S3", "S2", "S1"], name="sample_id"),
    )


@pytest.fixture
def met_df():
    """Three samples overlapping rna_df (S1, S2, S4) plus S9, in another order."""
    return pd.DataFrame(
        {"Met_1": [10.0, 20.0, 30.0, 40.0], "Met_2": [1.0, 1.5, 2.0, 2.5]},
        index=pd.Index(["S1", "S9", "S2", "S4"], name="sample_id"),
    )


class StubDecomposer:
    """Returns hand-crafted loadings; ignores the data apart from its shape."""

    def __init__(self, loadings_x, loadings_y, error=None):
        self.loadings_x = np.asarray(loadings_x, dtype=float)
        self.loadings_y = np.asarray(loadings_y, dtype=float)
        self.error = error
        self.calls = []

    def fit(self, X, Y, n_components, keep_x, keep_y):
        self.calls.append({"shape_x": X.shape, "shape_y": Y.shape, "n_components": n_components, "keep_x": keep_x, "keep_y": keep_y})
        if self.error is not None:
            raise self.error
        n = X.shape[0]
        T = X @ self.loadings_x if X.shape[1] == self.loadings_x.shape[0] else np.zeros((n, n_components))
        S = Y @ self.loadings_y if Y.shape[1] == self.loadings_y.shape[0] else np.zeros((n, n_components))
        return SPLSFit(
            loadings_x=self.loadings_x, loadings_y=self.loadings_y,
            variates_x=T, variates_y=S,
            explained_variance_x=np.full(n_components, 0.1),
            explained_variance_y=np.full(n_components, 0.2),
            n_iter=tuple([1] * n_components),
        )


@pytest.fixture
def stub_pair():
    """Aligned 5-sample pair with 4 genes and 3 metabolites."""
    from omicnet.core.alignment import align_omics
    rng = np.random.default_rng(0)
    idx = [f"S{i}" for i in range(1, 6)]
    X = pd.DataFrame(rng.standard_normal((5, 4)), index=idx, columns=["G1", "G2", "G3", "G4"])
    Y = pd.DataFrame(rng.standard_normal((5, 3)), index=idx, columns=["M1", "M2", "M3"])
    return align_omics(X, Y)


@pytest.fixture
def stub_loadings():
    """Two components. Component 1 selects G1, G3 (X) and M1, M3 (Y); component 2 selects nothing in Y."""
    u = [[0.6, 0.0], [0.0, 1.0], [-0.8, 0.0], [0.0, 0.0]]
    v = [[0.5, 0.0], [0.0, 0.0], [-0.1, 0.0]]
    return u, v


@pytest.fixture
def stub_result(stub_pair, stub_loadings):
    from omicnet.decomposition.adapter import omic_scca
    u, v = stub_loadings
    return omic_scca(stub_pair, n_components=2, penalty_x=0.5, penalty_y=0.5, decomposer=StubDecomposer(u, v))


@pytest.fixture(scope="session")
def synthetic_omics():
    """The reference synthetic scenario: 60 samples, 800 genes, 150 metabolites, 20 linked."""
    from omicnet.datasets import generate_dummy_omics
    return generate_dummy_omics(n_samples=60, n_genes=800, n_metabolites=150, n_linked=20, seed=123)


@pytest.fixture
def make_stub():
    """Factory for StubDecomposer instances."""
    return StubDecomposer
