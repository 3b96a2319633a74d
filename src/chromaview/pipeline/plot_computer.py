"""Plot projection.

``compute_plot`` turns the derived table into a PlotValue: bar descriptors
grouped by mass-to-charge category (optionally stacked per retention time),
the per-retention-time mass spectra, and, when stacking, the mean and median
summed signal plus the rolling-mean line.

Only the retention-time projection is defined. The mass-to-charge sort
raises UnsupportedError instead of producing an empty plot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

import numpy as np
import pandas as pd

from chromaview.pipeline.cache_keys import PlotKey, plot_key
from chromaview.pipeline.column_conventions import (
    FILTER,
    MASS_SPECTRUM,
    MASS_TO_CHARGE,
    RETENTION_TIME,
    SIGNAL,
    SIGNAL_SUM,
    Y_ROLLING_MEAN,
)
from chromaview.pipeline.errors import MissingFieldError, SchemaMismatchError, UnsupportedError
from chromaview.pipeline.hashed_table import HashedTable
from chromaview.pipeline.settings import BarSort, Settings, Sort
from chromaview.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Bar:
    """One bar: a single (mass-to-charge, signal) pair drawn at a retention time."""
    x: float
    height: float
    width: float
    base_offset: float = 0.0
    name: str = ""


@dataclass(frozen=True)
class PlotValue:
    """Plot-ready projection of a derived table. Shared read-only between callers.

    Attributes:
        bars: Mass-to-charge category -> bars, in first-seen order.
        mass_spectra: Retention time -> (mass_to_charge, signal) pairs, in bar order.
        mean: Mean summed signal (stacked plots only).
        median: Median summed signal (stacked plots only).
        rolling_mean: (retention_time, rolling mean of summed signal) points.
    """
    bars: Mapping[float, tuple[Bar, ...]] = field(default_factory=lambda: MappingProxyType({}))
    mass_spectra: Mapping[float, tuple[tuple[float, float], ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    mean: Optional[float] = None
    median: Optional[float] = None
    rolling_mean: tuple[tuple[float, float], ...] = ()


def category_key(mass_to_charge: float) -> float:
    """Stable float key for a mass-to-charge category (float32 precision)."""
    return float(np.float32(mass_to_charge))


def _is_null(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _sort_key(value: float) -> tuple[bool, float]:
    # Nulls sort last.
    return (_is_null(value), 0.0 if _is_null(value) else value)


def sort_mass_spectrum(pairs, bar_sort: BarSort) -> list[tuple[float, float]]:
    """Order one mass spectrum's pairs by mass-to-charge or by signal (stable)."""
    index = 0 if bar_sort is BarSort.MASS_TO_CHARGE else 1
    return sorted(pairs, key=lambda pair: _sort_key(pair[index]))


def compute_plot(derived: HashedTable, settings: Settings) -> PlotValue:
    """Project the derived table into a PlotValue for ``settings``.

    Raises:
        UnsupportedError: For the mass-to-charge sort.
        SchemaMismatchError: If the derived table lacks the projected columns.
        MissingFieldError: If a projected value is null (rows kept by filter_null=False).
    """
    return compute_plot_for_key(derived, plot_key(derived, settings))


def compute_plot_for_key(derived: HashedTable, key: PlotKey) -> PlotValue:
    if derived.hash != key.table_hash:
        raise ValueError("PlotKey was built from a different derived table")
    if key.sort is Sort.MASS_TO_CHARGE:
        raise UnsupportedError("plot projection sorted by mass-to-charge")

    df = derived.data_frame
    logger.info(
        f"compute_plot: rows={len(df)}, bar_sort={key.bar_sort.value}, "
        f"bar_width={key.bar_width}, stack={key.stack}"
    )
    return _by_retention_time(df, key)


def _require(df: pd.DataFrame, *columns: str) -> None:
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise SchemaMismatchError(f"derived table is missing columns {missing}", missing=missing)


def _by_retention_time(df: pd.DataFrame, key: PlotKey) -> PlotValue:
    _require(df, RETENTION_TIME, MASS_SPECTRUM, FILTER)
    selected = df[df[FILTER].astype(bool)]

    bars: dict[float, list[Bar]] = {}
    mass_spectra: dict[float, list[tuple[float, float]]] = {}
    offsets: dict[float, float] = {}

    for retention_time, mass_spectrum in zip(selected[RETENTION_TIME], selected[MASS_SPECTRUM]):
        if _is_null(retention_time):
            raise MissingFieldError(RETENTION_TIME)
        if not isinstance(mass_spectrum, (list, tuple)):
            raise MissingFieldError(MASS_SPECTRUM)
        retention_time = float(retention_time)
        for mass_to_charge, signal in sort_mass_spectrum(mass_spectrum, key.bar_sort):
            if _is_null(mass_to_charge):
                raise MissingFieldError(MASS_TO_CHARGE)
            if _is_null(signal):
                raise MissingFieldError(SIGNAL)
            mass_spectra.setdefault(retention_time, []).append((float(mass_to_charge), float(signal)))
            offset = offsets.get(retention_time, 0.0)
            bar = Bar(
                x=retention_time,
                height=float(signal),
                width=key.bar_width,
                base_offset=offset if key.stack else 0.0,
                name=str(np.float32(mass_to_charge)),
            )
            offsets[retention_time] = offset + float(signal)
            bars.setdefault(category_key(mass_to_charge), []).append(bar)

    mean = median = None
    rolling_mean: list[tuple[float, float]] = []
    if key.stack and SIGNAL_SUM in df.columns:
        total = pd.to_numeric(df[SIGNAL_SUM], errors="coerce").dropna()
        if len(total):
            mean = float(total.mean())
            median = float(total.median())
        if Y_ROLLING_MEAN in df.columns:
            for retention_time, value in zip(df[RETENTION_TIME], df[Y_ROLLING_MEAN]):
                if _is_null(retention_time):
                    raise MissingFieldError(RETENTION_TIME)
                if _is_null(value):
                    continue
                rolling_mean.append((float(retention_time), float(value)))

    logger.debug(f"PlotValue: categories={len(bars)}, retention_times={len(mass_spectra)}")
    return PlotValue(
        bars=MappingProxyType({k: tuple(v) for k, v in bars.items()}),
        mass_spectra=MappingProxyType({k: tuple(v) for k, v in mass_spectra.items()}),
        mean=mean,
        median=median,
        rolling_mean=tuple(rolling_mean),
    )
