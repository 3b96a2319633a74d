"""Record schema boundary.

Raw records enter the pipeline here. Whatever the input shape (Record
objects, dicts, a nested pandas DataFrame with a mass-spectrum list column,
or a polars DataFrame) it is converted once into the canonical long-form
frame: one row per (retention time, mass-to-charge, signal) observation.

Downstream stages never index columns by loose strings; they read the
RawColumns struct returned by ``extract_raw_columns``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence, Union

import numpy as np
import pandas as pd

from chromaview.pipeline.column_conventions import (
    MASS_SPECTRUM,
    MASS_TO_CHARGE,
    RAW_COLUMNS,
    RETENTION_TIME,
    SIGNAL,
)
from chromaview.pipeline.errors import SchemaMismatchError
from chromaview.pipeline.hashed_table import HashedTable
from chromaview.utils.logging import get_logger

logger = get_logger(__name__)

try:
    import polars as pl  # type: ignore[import]

    HAS_POLARS = True
except ImportError:  # pragma: no cover - polars is optional
    pl = None
    HAS_POLARS = False

RAW_DTYPES = {
    RETENTION_TIME: "float64",
    MASS_TO_CHARGE: "Float32",
    SIGNAL: "UInt16",
}


@dataclass(frozen=True)
class Peak:
    """One (mass-to-charge, signal) observation within a mass spectrum."""
    mass_to_charge: float
    signal: int


@dataclass(frozen=True)
class Record:
    """One input row: a retention time (ms) and its mass spectrum."""
    retention_time: float
    mass_spectrum: tuple[Peak, ...] = ()

    @classmethod
    def from_pairs(cls, retention_time: float, pairs: Iterable[Sequence[Any]]) -> "Record":
        return cls(float(retention_time), tuple(Peak(float(mz), int(s)) for mz, s in pairs))


@dataclass(frozen=True)
class RawColumns:
    """Typed view of a long-form raw frame.

    Attributes:
        retention_time: float64, NaN for null.
        mass_to_charge: float64 (values read from float32 storage), NaN for null.
        signal: float64, NaN for null.
    """
    retention_time: np.ndarray
    mass_to_charge: np.ndarray
    signal: np.ndarray

    def __len__(self) -> int:
        return len(self.retention_time)


def _empty_raw_frame() -> pd.DataFrame:
    return pd.DataFrame({col: pd.Series([], dtype=dtype) for col, dtype in RAW_DTYPES.items()})


def _peak_items(mass_spectrum: Any) -> list[tuple[Any, Any]]:
    """Normalize one mass spectrum cell to a list of (mass_to_charge, signal)."""
    if mass_spectrum is None:
        return []
    if isinstance(mass_spectrum, float) and np.isnan(mass_spectrum):
        return []
    items = []
    for peak in mass_spectrum:
        if isinstance(peak, Peak):
            items.append((peak.mass_to_charge, peak.signal))
        elif isinstance(peak, Mapping):
            items.append((peak.get(MASS_TO_CHARGE), peak.get(SIGNAL)))
        else:
            mz, signal = peak
            items.append((mz, signal))
    return items


def _rows_from_nested(retention_times: Iterable[Any], spectra: Iterable[Any]) -> pd.DataFrame:
    rt_out: list[Any] = []
    mz_out: list[Any] = []
    signal_out: list[Any] = []
    for rt, spectrum in zip(retention_times, spectra):
        items = _peak_items(spectrum)
        if not items:
            # An empty spectrum survives as a null observation (what filter_null drops).
            rt_out.append(rt)
            mz_out.append(None)
            signal_out.append(None)
            continue
        for mz, signal in items:
            rt_out.append(rt)
            mz_out.append(mz)
            signal_out.append(signal)
    if not rt_out:
        return _empty_raw_frame()
    return coerce_raw_frame(pd.DataFrame({
        RETENTION_TIME: rt_out,
        MASS_TO_CHARGE: mz_out,
        SIGNAL: signal_out,
    }))


def records_to_frame(records: Iterable[Union[Record, Mapping[str, Any]]]) -> pd.DataFrame:
    """Convert records (Record objects or dicts) into the long-form raw frame.

    Dict records use the column names as keys, e.g.
    ``{"RetentionTime": 1000.0, "MassSpectrum": [{"MassToCharge": 100.0, "Signal": 10}]}``.
    """
    retention_times = []
    spectra = []
    for record in records:
        if isinstance(record, Record):
            retention_times.append(record.retention_time)
            spectra.append(record.mass_spectrum)
        else:
            if RETENTION_TIME not in record:
                raise SchemaMismatchError(
                    f"record is missing {RETENTION_TIME!r}", missing=[RETENTION_TIME]
                )
            retention_times.append(record[RETENTION_TIME])
            spectra.append(record.get(MASS_SPECTRUM))
    return _rows_from_nested(retention_times, spectra)


def coerce_raw_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Validate a long-form frame and cast it to the canonical raw dtypes.

    Raises:
        SchemaMismatchError: If a raw column is missing or not numeric.
    """
    missing = [col for col in RAW_COLUMNS if col not in df.columns]
    if missing:
        raise SchemaMismatchError(
            f"raw table must contain columns {list(RAW_COLUMNS)}; missing {missing}",
            missing=missing,
        )
    out = {}
    for col, dtype in RAW_DTYPES.items():
        try:
            out[col] = pd.to_numeric(df[col], errors="raise").astype(dtype)
        except (TypeError, ValueError) as e:
            raise SchemaMismatchError(f"column {col!r} cannot be read as {dtype}: {e}") from e
    return pd.DataFrame(out).reset_index(drop=True)


def to_raw_frame(data: Any) -> pd.DataFrame:
    """Convert any supported input into the canonical long-form raw frame.

    Supported inputs:
        - pandas DataFrame in long form (RetentionTime, MassToCharge, Signal)
        - pandas DataFrame in nested form (RetentionTime, MassSpectrum)
        - polars DataFrame in either form (when polars is installed)
        - an iterable of Record objects or record dicts
    """
    if HAS_POLARS and isinstance(data, pl.DataFrame):
        data = pd.DataFrame(data.to_dict(as_series=False))
    if isinstance(data, pd.DataFrame):
        if MASS_SPECTRUM in data.columns and MASS_TO_CHARGE not in data.columns:
            if RETENTION_TIME not in data.columns:
                raise SchemaMismatchError(
                    f"nested table is missing {RETENTION_TIME!r}", missing=[RETENTION_TIME]
                )
            return _rows_from_nested(data[RETENTION_TIME].tolist(), data[MASS_SPECTRUM].tolist())
        return coerce_raw_frame(data)
    return records_to_frame(data)


def load_table(data: Any) -> HashedTable:
    """Build the hashed raw table that seeds every downstream cache key."""
    frame = to_raw_frame(data)
    table = HashedTable(frame)
    logger.info(f"Loaded raw table: rows={len(frame)}, hash={table.hash:#018x}")
    return table


def extract_raw_columns(df: pd.DataFrame) -> RawColumns:
    """Read the raw columns of a long-form frame as float64 arrays (NaN for null).

    Raises:
        SchemaMismatchError: If a raw column is missing.
    """
    missing = [col for col in RAW_COLUMNS if col not in df.columns]
    if missing:
        raise SchemaMismatchError(
            f"raw table must contain columns {list(RAW_COLUMNS)}; missing {missing}",
            missing=missing,
        )
    try:
        return RawColumns(
            retention_time=df[RETENTION_TIME].to_numpy(dtype="float64", na_value=np.nan),
            mass_to_charge=df[MASS_TO_CHARGE].to_numpy(dtype="float64", na_value=np.nan),
            signal=df[SIGNAL].to_numpy(dtype="float64", na_value=np.nan),
        )
    except (TypeError, ValueError) as e:
        raise SchemaMismatchError(f"raw columns are not numeric: {e}") from e
