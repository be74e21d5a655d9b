"""
omicnet.datasets — Synthetic paired omics data with a known shared signal.

Each generator returns ``(X, Y, metadata)`` with sample-aligned, standardized
matrices and the ground-truth latent factor, so end-to-end runs can be
scored against what was injected.
"""

from .omics import generate_dummy_omics, load_omics_example

__all__ = [
    "generate_dummy_omics",
    "load_omics_example",
]
