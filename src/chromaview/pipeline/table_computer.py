"""Derived-table computation.

``compute_table`` turns the hashed raw table into the hashed derived table:
aggregation, then rolling regression statistics, then the peak filter. The
result is re-hashed so it can seed the plot stage's cache key.

The computation only sees a TableKey (plus the raw frame the key's hash was
taken from), which keeps it a pure function of the key.
"""

from __future__ import annotations

import pandas as pd

from chromaview.pipeline.algorithms.aggregation import aggregate
from chromaview.pipeline.algorithms.peak_filter import peak_mask
from chromaview.pipeline.algorithms.rolling_stats import with_rolling_columns
from chromaview.pipeline.cache_keys import TableKey, table_key
from chromaview.pipeline.column_conventions import FILTER, SIGNAL_SUM, GroupColumns
from chromaview.pipeline.hashed_table import HashedTable
from chromaview.pipeline.records import extract_raw_columns, to_raw_frame
from chromaview.pipeline.settings import Settings
from chromaview.utils.logging import get_logger

logger = get_logger(__name__)


def compute_table(raw: HashedTable, settings: Settings) -> HashedTable:
    """Derive the aggregated, rolled and peak-tagged table for ``settings``.

    Raises:
        SchemaMismatchError: If the raw table lacks the record columns.
    """
    return compute_table_for_key(raw, table_key(raw, settings))


def compute_table_for_key(raw: HashedTable, key: TableKey) -> HashedTable:
    if raw.hash != key.table_hash:
        raise ValueError("TableKey was built from a different raw table")

    frame = raw.data_frame
    if frame.shape == (0, 0):
        # HashedTable.empty(): nothing loaded yet.
        frame = to_raw_frame([])

    logger.info(
        f"compute_table: rows={len(frame)}, sort={key.sort.value}, explode={key.explode}, "
        f"filter_null={key.filter_null}, normalize_signal={key.normalize_signal}, "
        f"window_size={key.window_size}, min_periods={key.min_periods}"
    )

    df = aggregate(
        extract_raw_columns(frame),
        sort=key.sort,
        explode=key.explode,
        filter_null=key.filter_null,
        normalize=key.normalize_signal,
    )
    df = _rolling(df, key)
    df = _filter(df, key)

    derived = HashedTable(df)
    logger.debug(f"Derived table: rows={len(df)}, hash={derived.hash:#018x}")
    return derived


def _rolling(df: pd.DataFrame, key: TableKey) -> pd.DataFrame:
    if SIGNAL_SUM not in df.columns:
        logger.debug("No summed signal (explode); skipping rolling statistics")
        return df
    columns = GroupColumns.for_sort(key.sort)
    return with_rolling_columns(
        df,
        x_col=columns.key,
        y_col=SIGNAL_SUM,
        window_size=key.window_size,
        min_periods=key.min_periods,
    )


def _filter(df: pd.DataFrame, key: TableKey) -> pd.DataFrame:
    df = df.copy()
    if SIGNAL_SUM not in df.columns:
        df[FILTER] = pd.Series(True, index=df.index, dtype=bool)
        return df
    df[FILTER] = peak_mask(df[SIGNAL_SUM], peak_min=key.peak_min, peak_max=key.peak_max)
    return df
