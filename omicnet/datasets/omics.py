"""
omicnet.datasets.omics — Linked synthetic transcriptomics / metabolomics data.

A hidden per-sample factor ``Z`` (think disease severity) is injected into the
first ``n_linked`` genes and metabolites, so a sparse canonical decomposition
should recover exactly those features on its first component.
"""
from __future__ import annotations
import numpy as np
import pandas as pd
from typing import Optional, Tuple

from omicnet.core.scaling import standardize

GENE_SIGNAL = 1.5
METABOLITE_SIGNAL = 1.8
INJECTION_NOISE_SD = 0.5
HIGH_Z_CUTOFF = 0.5


def generate_dummy_omics(
    n_samples: int = 50,
    n_genes: int = 1000,
    n_metabolites: int = 200,
    n_linked: int = 10,
    seed: Optional[int] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    """
    Generate standardized, sample-aligned RNA-seq (X) and metabolomics (Y) matrices.

    Structure:
    - **Latent factor**: ``Z ~ N(0, 1)`` per sample.
    - **Linked genes** ``Gene_1..Gene_{n_linked}``: ``+/- 1.5 * Z`` plus
      ``N(0, 0.5)`` noise. Even-numbered genes carry ``+``, odd ones ``-``.
    - **Linked metabolites** ``Met_1..Met_{n_linked}``: ``+/- 1.8 * Z`` plus
      ``N(0, 0.5)`` noise, with the opposite phase: odd-numbered ``+``, even
      ``-``. Gene/metabolite pairs with the same number are therefore
      negatively coupled, while ``Gene_2`` and ``Met_1`` are positively coupled.
    - Everything else is independent ``N(0, 1)`` noise.

    Both matrices are scaled to zero mean and unit variance per column and
    share the row labels ``S1..S{n_samples}``.

    Parameters
    ----------
    n_samples : int
        Number of samples (rows).
    n_genes : int
        Number of genes (columns of X).
    n_metabolites : int
        Number of metabolites (columns of Y).
    n_linked : int
        Number of leading features in each matrix driven by ``Z``.
    seed : int, optional
        Random seed for reproducibility.

    Returns
    -------
    (pd.DataFrame, pd.DataFrame, pd.DataFrame)
        ``X``, ``Y`` and the metadata frame with columns
        ``SampleID``, ``Group`` (``High_Z`` when ``Z > 0.5``, else ``Low_Z``)
        and ``Z_Score``.

    Example
    -------
    >>> from omicnet.datasets import generate_dummy_omics
    >>> X, Y, meta = generate_dummy_omics(n_samples=60, n_genes=800, n_metabolites=150, n_linked=20, seed=123)
    >>> X.shape, Y.shape
    ((60, 800), (60, 150))
    """
    if n_samples < 2: raise ValueError("n_samples must be >= 2")
    if n_genes < 1 or n_metabolites < 1: raise ValueError("n_genes and n_metabolites must be >= 1")
    if not (0 <= n_linked <= min(n_genes, n_metabolites)):
        raise ValueError("n_linked must be between 0 and min(n_genes, n_metabolites)")

    rng = np.random.default_rng(seed)
    z = rng.standard_normal(n_samples)

    X = rng.standard_normal((n_samples, n_genes))
    for j in range(n_linked):
        sign = 1.0 if (j + 1) % 2 == 0 else -1.0
        X[:, j] += sign * GENE_SIGNAL * z + rng.normal(0.0, INJECTION_NOISE_SD, n_samples)

    Y = rng.standard_normal((n_samples, n_metabolites))
    for j in range(n_linked):
        sign = -1.0 if (j + 1) % 2 == 0 else 1.0
        Y[:, j] += sign * METABOLITE_SIGNAL * z + rng.normal(0.0, INJECTION_NOISE_SD, n_samples)

    sample_ids = [f"S{i}" for i in range(1, n_samples + 1)]
    metadata = pd.DataFrame({
        "SampleID": sample_ids,
        "Group": pd.Categorical(np.where(z > HIGH_Z_CUTOFF, "High_Z", "Low_Z"), categories=["High_Z", "Low_Z"]),
        "Z_Score": z,
    })

    index = pd.Index(sample_ids, name="sample_id")
    X_df = pd.DataFrame(standardize(X), index=index, columns=[f"Gene_{i}" for i in range(1, n_genes + 1)])
    Y_df = pd.DataFrame(standardize(Y), index=index.copy(), columns=[f"Met_{i}" for i in range(1, n_metabolites + 1)])
    return X_df, Y_df, metadata


def load_omics_example() -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    """Small fixed example (40 samples, 200 genes, 50 metabolites, 10 linked) for demos and docs."""
    return generate_dummy_omics(n_samples=40, n_genes=200, n_metabolites=50, n_linked=10, seed=2024)
