"""
Peak filter (pure pandas/numpy).

Tags each row of an ordered series with a boolean inclusion flag. Peaks are
strict local extrema against both immediate neighbors; boundary rows, null
values and rows next to a null are never peaks.

Policy on (peak_min, peak_max):

    (False, True)   local maximum and value > series median
    (True,  False)  local minimum
    (True,  True)   local maximum or local minimum
    (False, False)  every row included

The flag is advisory: rows are never dropped.
"""

from __future__ import annotations

import numpy as np
import pandas as pd


def _neighbors(values: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    previous = np.full_like(values, np.nan)
    following = np.full_like(values, np.nan)
    previous[1:] = values[:-1]
    following[:-1] = values[1:]
    return previous, following


def local_maxima(series: pd.Series) -> pd.Series:
    """True where a value is strictly greater than both neighbors."""
    values = pd.to_numeric(series, errors="coerce").to_numpy(dtype="float64")
    previous, following = _neighbors(values)
    with np.errstate(invalid="ignore"):
        mask = (values > previous) & (values > following)
    return pd.Series(mask, index=series.index, dtype=bool)


def local_minima(series: pd.Series) -> pd.Series:
    """True where a value is strictly smaller than both neighbors."""
    values = pd.to_numeric(series, errors="coerce").to_numpy(dtype="float64")
    previous, following = _neighbors(values)
    with np.errstate(invalid="ignore"):
        mask = (values < previous) & (values < following)
    return pd.Series(mask, index=series.index, dtype=bool)


def peak_mask(series: pd.Series, *, peak_min: bool, peak_max: bool) -> pd.Series:
    """
    Build the inclusion flag for a series according to the peak policy.

    Args:
        series: Values in the order the peaks are judged (e.g. summed signal by retention time).
        peak_min: Include local minima.
        peak_max: Include local maxima (above the median when minima are not requested).

    Returns:
        Boolean series aligned with ``series``.
    """
    if peak_max and not peak_min:
        numeric = pd.to_numeric(series, errors="coerce")
        above = (numeric > numeric.median()).astype(bool)
        return local_maxima(series) & above
    if peak_min and not peak_max:
        return local_minima(series)
    if peak_min and peak_max:
        return local_maxima(series) | local_minima(series)
    return pd.Series(True, index=series.index, dtype=bool)
