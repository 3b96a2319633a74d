"""Tabular views of a derived table.

Helpers for hosts that display the derived table: a flat summary table with
display-friendly column names, and an exploded long-form table with one row
per list element.
"""

from __future__ import annotations

import pandas as pd

from chromaview.pipeline.column_conventions import (
    ROLLING_COLUMNS,
    SIGNAL,
    GroupColumns,
    public_name,
)
from chromaview.pipeline.errors import SchemaMismatchError
from chromaview.pipeline.hashed_table import HashedTable
from chromaview.pipeline.settings import Sort


def summary_table(derived: HashedTable, sort: Sort) -> pd.DataFrame:
    """Scalar columns of the derived table, without the private prefix.

    Key first, then the per-group summaries, then the rolling statistics. The
    list column and the filter flag are left out.
    """
    columns = GroupColumns.for_sort(sort)
    df = derived.data_frame
    ordered = (columns.key, *columns.summary_columns, *ROLLING_COLUMNS)
    keep = [col for col in ordered if col in df.columns]
    return df[keep].rename(columns=public_name)


def exploded_rows(derived: HashedTable, sort: Sort) -> pd.DataFrame:
    """Flatten the list column: one row per (key, complement, signal).

    Groups with an empty list are kept as a single row with nulls.

    Raises:
        SchemaMismatchError: If the derived table has no list column for ``sort``.
    """
    columns = GroupColumns.for_sort(sort)
    df = derived.data_frame
    if columns.key not in df.columns or columns.values not in df.columns:
        raise SchemaMismatchError(
            f"derived table must contain {columns.key!r} and {columns.values!r}",
            missing=[c for c in (columns.key, columns.values) if c not in df.columns],
        )
    long = df[[columns.key, columns.values]].explode(columns.values, ignore_index=True)
    pairs = long[columns.values]
    return pd.DataFrame({
        columns.key: long[columns.key].astype("float64"),
        columns.complement: pd.to_numeric(
            pairs.map(lambda p: p[0] if isinstance(p, (tuple, list)) else None), errors="coerce"
        ).astype("float64"),
        SIGNAL: pd.to_numeric(
            pairs.map(lambda p: p[1] if isinstance(p, (tuple, list)) else None), errors="coerce"
        ).astype("float64"),
    })
