from __future__ import annotations
from typing import Any, List, Optional
import numpy as np
import pandas as pd
import narwhals as nw

SAMPLE_COL = "sample_id"


def _check_unique(labels: List[str], what: str):
    seen, dupes = set(), []
    for label in labels:
        if label in seen: dupes.append(label)
        seen.add(label)
    if dupes: raise ValueError(f"Duplicated {what}: {sorted(set(dupes))[:5]}")


def _from_indexed_pandas(df: pd.DataFrame) -> pd.DataFrame:
    non_numeric = [c for c in df.columns if not pd.api.types.is_numeric_dtype(df[c])]
    if non_numeric: raise ValueError(f"Non-numeric feature columns: {non_numeric[:5]}")
    out = pd.DataFrame(
        df.to_numpy(dtype=float, copy=True),
        index=pd.Index([str(i) for i in df.index], name=df.index.name or SAMPLE_COL),
        columns=[str(c) for c in df.columns],
    )
    return out


def _resolve_native(data: Any):
    try: nw_df = nw.from_native(data)
    except TypeError as exc:
        raise ValueError("Feature matrix must be a DataFrame (pandas, polars or any narwhals-compatible frame)") from exc
    if isinstance(nw_df, nw.LazyFrame): nw_df = nw_df.collect()
    if not isinstance(nw_df, nw.DataFrame):
        raise ValueError("Feature matrix must be a DataFrame, not a Series")
    return nw_df


def _from_sample_column(data: Any, sample_col: str) -> pd.DataFrame:
    nw_df = _resolve_native(data)
    if sample_col not in nw_df.columns:
        raise ValueError(f"Input DataFrame must have a {sample_col!r} column or a sample index")
    schema = nw_df.drop(sample_col).collect_schema()
    non_numeric = [name for name, dtype in schema.items() if not dtype.is_numeric()]
    if non_numeric: raise ValueError(f"Non-numeric feature columns: {non_numeric[:5]}")
    ids = [str(v) for v in nw_df.get_column(sample_col).to_list()]
    values = np.asarray(nw_df.drop(sample_col).to_numpy(), dtype=float)
    return pd.DataFrame(values, index=pd.Index(ids, name=sample_col), columns=[str(c) for c in schema.names()])


def as_feature_matrix(data: Any, sample_col: Optional[str] = None) -> pd.DataFrame:
    """
    Normalise ``data`` into a samples x features float ``pd.DataFrame``.

    A pandas frame uses its ``sample_col`` column when it has one, otherwise
    its index (which must carry that name when ``sample_col`` is given). Any
    other frame (polars, lazy polars, pyarrow...) needs a sample-id column,
    ``sample_id`` unless told otherwise. The input is never modified.
    """
    if isinstance(data, pd.DataFrame):
        col = sample_col or SAMPLE_COL
        if col in data.columns:
            matrix = _from_sample_column(data, col)
        elif sample_col is None or data.index.name == sample_col:
            matrix = _from_indexed_pandas(data)
        else:
            raise ValueError(f"Input DataFrame must have a {sample_col!r} column or a sample index")
    else:
        matrix = _from_sample_column(data, sample_col or SAMPLE_COL)
    _check_unique(list(matrix.index), "sample ids")
    _check_unique(list(matrix.columns), "feature ids")
    return matrix
