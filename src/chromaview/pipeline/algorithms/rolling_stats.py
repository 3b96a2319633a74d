"""
Rolling regression statistics (pure pandas/numpy).

For a key series ``x`` and the per-group summed signal ``y``, computes over a
centered window of ``window_size`` rows (null unless at least ``min_periods``
non-null values fall in the window):

    mean(x), mean(y), mean(x*y), std(x), std(y)      pandas online rolling aggregations
    cov   = mean(x*y) - mean(x) * mean(y)
    corr  = cov / (std(x) * std(y))
    slope = corr * (std(y) / std(x))
    inter = mean(y) - slope * mean(x)

Standard deviations are sample (ddof=1). Any division by zero or null
yields null instead of an infinity.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from chromaview.pipeline.column_conventions import (
    CORRELATION,
    INTERCEPT,
    SLOPE,
    X_ROLLING_MEAN,
    X_ROLLING_STD,
    XY_COVARIANCE,
    XY_ROLLING_MEAN,
    Y_ROLLING_MEAN,
    Y_ROLLING_STD,
)


def _safe_divide(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """numerator / denominator with null wherever the denominator is 0 or null."""
    result = numerator / denominator.where(denominator != 0)
    return result.replace([np.inf, -np.inf], np.nan)


def rolling_regression(
    x: pd.Series,
    y: pd.Series,
    *,
    window_size: int,
    min_periods: int,
) -> pd.DataFrame:
    """
    Compute centered rolling regression statistics of y on x.

    Args:
        x: Key series, already in the order the window should slide over.
        y: Value series aligned with x.
        window_size: Number of rows in each centered window.
        min_periods: Minimum non-null values needed for a non-null result.

    Returns:
        DataFrame indexed like x with the rolling columns in computation order.
    """
    x = pd.to_numeric(x, errors="coerce").astype("float64")
    y = pd.to_numeric(y, errors="coerce").astype("float64")

    def _rolling(s: pd.Series):
        return s.rolling(window=window_size, min_periods=min_periods, center=True)

    out = pd.DataFrame(index=x.index)
    out[X_ROLLING_MEAN] = _rolling(x).mean()
    out[Y_ROLLING_MEAN] = _rolling(y).mean()
    out[XY_ROLLING_MEAN] = _rolling(x * y).mean()
    out[X_ROLLING_STD] = _rolling(x).std(ddof=1)
    out[Y_ROLLING_STD] = _rolling(y).std(ddof=1)

    out[XY_COVARIANCE] = out[XY_ROLLING_MEAN] - out[X_ROLLING_MEAN] * out[Y_ROLLING_MEAN]
    out[CORRELATION] = _safe_divide(out[XY_COVARIANCE], out[X_ROLLING_STD] * out[Y_ROLLING_STD])
    out[SLOPE] = out[CORRELATION] * _safe_divide(out[Y_ROLLING_STD], out[X_ROLLING_STD])
    out[INTERCEPT] = out[Y_ROLLING_MEAN] - out[SLOPE] * out[X_ROLLING_MEAN]
    return out


def with_rolling_columns(
    df: pd.DataFrame,
    *,
    x_col: str,
    y_col: str,
    window_size: int,
    min_periods: int,
) -> pd.DataFrame:
    """Return a copy of df (ordered by x_col) with the rolling columns appended."""
    df = df.sort_values(x_col, kind="stable", na_position="last").reset_index(drop=True)
    stats = rolling_regression(
        df[x_col], df[y_col], window_size=window_size, min_periods=min_periods
    )
    out = pd.concat([df, stats], axis=1)
    return out.sort_values(x_col, kind="stable", na_position="last").reset_index(drop=True)
