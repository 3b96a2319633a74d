"""
Aggregation engine (pure pandas/numpy).

Groups long-form raw observations by the active sort axis and collects each
group's paired values into an ordered list column:

- Sort.RETENTION_TIME: one row per distinct retention time, with a
  MassSpectrum list of (mass_to_charge, signal) pairs ordered by mass-to-charge.
- Sort.MASS_TO_CHARGE: one row per mass-to-charge rounded to 2 decimals
  (half-to-even), with an ExtractedIonChromatogram list of
  (retention_time, signal) pairs ordered by retention time.

Steps run in a fixed order: null screen, global signal normalization,
grouping, per-group summaries, retention-time unit rescale.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from chromaview.pipeline.column_conventions import (
    MASS_TO_CHARGE,
    MASS_TO_CHARGE_DECIMALS,
    MILLISECONDS_PER_MINUTE,
    RETENTION_TIME,
    SIGNAL,
    SIGNAL_MAX,
    SIGNAL_MIN,
    SIGNAL_SUM,
    GroupColumns,
)
from chromaview.pipeline.records import RawColumns
from chromaview.pipeline.settings import Sort


# -----------------------------------------------------------------------------
# Step 1: Null screen
# -----------------------------------------------------------------------------


def drop_null_observations(raw: RawColumns) -> RawColumns:
    """Drop observations whose mass-to-charge or signal is null."""
    keep = ~(np.isnan(raw.mass_to_charge) | np.isnan(raw.signal))
    return RawColumns(
        retention_time=raw.retention_time[keep],
        mass_to_charge=raw.mass_to_charge[keep],
        signal=raw.signal[keep],
    )


# -----------------------------------------------------------------------------
# Step 2: Global normalization
# -----------------------------------------------------------------------------


def normalize_signal(signal: np.ndarray) -> np.ndarray:
    """Rescale signal by its global maximum so the largest value becomes 1.0.

    A missing or zero maximum leaves nothing to scale by; the result is all null
    rather than infinities.
    """
    if signal.size == 0 or np.all(np.isnan(signal)):
        return signal.astype("float64")
    peak = np.nanmax(signal)
    if peak == 0:
        return np.full_like(signal, np.nan, dtype="float64")
    return signal / peak


# -----------------------------------------------------------------------------
# Step 3: Grouping
# -----------------------------------------------------------------------------


def round_half_even(values: np.ndarray, decimals: int = MASS_TO_CHARGE_DECIMALS) -> np.ndarray:
    """Round to ``decimals`` places; ties go to the even neighbor (numpy's rint)."""
    return np.round(values.astype("float64"), decimals)


_PAIR = "_pair"


def _group(key: np.ndarray, complement: np.ndarray, signal: np.ndarray, columns: GroupColumns):
    """Group observations by key; within a group, order follows the complement field.

    Null keys form a single group, ordered last.

    Returns:
        (frame with key and list columns, the groupby object for summaries)
    """
    work = pd.DataFrame({
        columns.key: key,
        columns.complement: complement,
        SIGNAL: signal,
    })
    work = work.sort_values(columns.complement, kind="stable", na_position="last")
    work[_PAIR] = list(zip(work[columns.complement].tolist(), work[SIGNAL].tolist()))
    grouped = work.groupby(columns.key, sort=True, dropna=False)
    values = grouped[_PAIR].agg(list)
    out = pd.DataFrame({
        columns.key: np.asarray(values.index, dtype="float64"),
        columns.values: pd.Series(values.tolist(), dtype=object),
    })
    return out, grouped


# -----------------------------------------------------------------------------
# Step 4: Summaries
# -----------------------------------------------------------------------------


def _summaries(grouped, columns: GroupColumns, n_groups: int) -> dict[str, np.ndarray]:
    if n_groups == 0:
        empty_int = np.array([], dtype="int64")
        empty = np.array([], dtype="float64")
        return {
            columns.count: empty_int,
            columns.complement_min: empty,
            columns.complement_max: empty,
            SIGNAL_MIN: empty,
            SIGNAL_MAX: empty,
            SIGNAL_SUM: empty,
        }
    complement = grouped[columns.complement]
    signal = grouped[SIGNAL]
    return {
        columns.count: grouped.size().to_numpy(dtype="int64"),
        columns.complement_min: complement.min().to_numpy(dtype="float64"),
        columns.complement_max: complement.max().to_numpy(dtype="float64"),
        SIGNAL_MIN: signal.min().to_numpy(dtype="float64"),
        SIGNAL_MAX: signal.max().to_numpy(dtype="float64"),
        SIGNAL_SUM: signal.sum().to_numpy(dtype="float64"),
    }


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------


def aggregate(
    raw: RawColumns,
    *,
    sort: Sort,
    explode: bool = False,
    filter_null: bool = False,
    normalize: bool = False,
) -> pd.DataFrame:
    """
    Group raw observations by the sort axis and summarize each group.

    Args:
        raw: Typed raw columns (see records.extract_raw_columns).
        sort: Grouping axis.
        explode: If True, skip per-group summaries (list column only).
        filter_null: If True, drop observations with null mass-to-charge or signal first.
        normalize: If True, divide signal by its global maximum before grouping.

    Returns:
        One row per group, ordered by the grouping key. Summary columns carry the
        private prefix (see column_conventions.GroupColumns).
    """
    if filter_null:
        raw = drop_null_observations(raw)
    signal = normalize_signal(raw.signal) if normalize else raw.signal.astype("float64")

    columns = GroupColumns.for_sort(sort)
    if sort is Sort.RETENTION_TIME:
        key = raw.retention_time
        complement = raw.mass_to_charge
    else:
        key = round_half_even(raw.mass_to_charge)
        complement = raw.retention_time

    out, grouped = _group(key, complement, signal, columns)
    if not explode:
        for name, values in _summaries(grouped, columns, len(out)).items():
            out[name] = values

    if sort is Sort.RETENTION_TIME:
        out[RETENTION_TIME] = out[RETENTION_TIME] / MILLISECONDS_PER_MINUTE

    out = out.sort_values(columns.key, kind="stable", na_position="last")
    return out.reset_index(drop=True)
