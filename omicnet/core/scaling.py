from __future__ import annotations
import numpy as np


def standardize(values: np.ndarray, scale: bool = True, constant: str = "keep") -> np.ndarray:
    """
    Centre each column and, when ``scale`` is set, divide by its sample
    standard deviation (``ddof=1``).

    ``constant`` decides what happens to zero-variance columns: ``"keep"``
    leaves them centred (all zeros), ``"nan"`` turns them into NaN so that
    statistics built on them are undefined rather than zero.
    """
    if constant not in ("keep", "nan"): raise ValueError("constant must be 'keep' or 'nan'")
    centered = np.asarray(values, dtype=float) - np.mean(values, axis=0)
    if not scale: return centered
    sd = centered.std(axis=0, ddof=1)
    if constant == "keep":
        sd = np.where(sd == 0, 1.0, sd)
    with np.errstate(divide="ignore", invalid="ignore"):
        return centered / sd
