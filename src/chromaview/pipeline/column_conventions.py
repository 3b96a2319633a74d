"""Column naming conventions for raw and derived tables.

Single source of truth for column names so records, aggregation, rolling
statistics, the peak filter and plot projection stay consistent. Summary and
rolling columns carry a leading underscore so they never collide with
user-visible columns.
"""

from __future__ import annotations

from dataclasses import dataclass

from chromaview.pipeline.settings import Sort

# Raw (long-form) record columns.
RETENTION_TIME = "RetentionTime"
MASS_TO_CHARGE = "MassToCharge"
SIGNAL = "Signal"

# Aggregated list columns.
MASS_SPECTRUM = "MassSpectrum"
EXTRACTED_ION_CHROMATOGRAM = "ExtractedIonChromatogram"

RAW_COLUMNS = (RETENTION_TIME, MASS_TO_CHARGE, SIGNAL)

# Retention times arrive in milliseconds; the derived table holds minutes.
MILLISECONDS_PER_MINUTE = 60_000.0

# Mass-to-charge grouping precision (decimals, half-to-even).
MASS_TO_CHARGE_DECIMALS = 2

PRIVATE_PREFIX = "_"

SIGNAL_MIN = "_Signal.Min"
SIGNAL_MAX = "_Signal.Max"
SIGNAL_SUM = "_Signal.Sum"

X_ROLLING_MEAN = "_x.Rolling.Mean"
Y_ROLLING_MEAN = "_y.Rolling.Mean"
XY_ROLLING_MEAN = "_xy.Rolling.Mean"
X_ROLLING_STD = "_x.Rolling.StandardDeviation"
Y_ROLLING_STD = "_y.Rolling.StandardDeviation"
XY_COVARIANCE = "_xy.Covariance"
CORRELATION = "Correlation"
SLOPE = "Slope"
INTERCEPT = "Intercept"

ROLLING_COLUMNS = (
    X_ROLLING_MEAN,
    Y_ROLLING_MEAN,
    XY_ROLLING_MEAN,
    X_ROLLING_STD,
    Y_ROLLING_STD,
    XY_COVARIANCE,
    CORRELATION,
    SLOPE,
    INTERCEPT,
)

FILTER = "_Filter"


@dataclass(frozen=True)
class GroupColumns:
    """Column names used by one sort axis.

    Attributes:
        key: Grouping key column (one row per distinct value).
        complement: The paired field collected in each group's list.
        values: The aggregated list column.
        count: Number of pairs in the list.
        complement_min: Minimum of the complement field.
        complement_max: Maximum of the complement field.
    """
    key: str
    complement: str
    values: str
    count: str
    complement_min: str
    complement_max: str

    @classmethod
    def for_sort(cls, sort: Sort) -> "GroupColumns":
        if sort is Sort.RETENTION_TIME:
            return _BY_RETENTION_TIME
        return _BY_MASS_TO_CHARGE

    @property
    def summary_columns(self) -> tuple[str, ...]:
        return (
            self.count,
            self.complement_min,
            self.complement_max,
            SIGNAL_MIN,
            SIGNAL_MAX,
            SIGNAL_SUM,
        )


_BY_RETENTION_TIME = GroupColumns(
    key=RETENTION_TIME,
    complement=MASS_TO_CHARGE,
    values=MASS_SPECTRUM,
    count=f"_{MASS_SPECTRUM}.Count",
    complement_min=f"_{MASS_TO_CHARGE}.Min",
    complement_max=f"_{MASS_TO_CHARGE}.Max",
)

_BY_MASS_TO_CHARGE = GroupColumns(
    key=MASS_TO_CHARGE,
    complement=RETENTION_TIME,
    values=EXTRACTED_ION_CHROMATOGRAM,
    count=f"_{EXTRACTED_ION_CHROMATOGRAM}.Count",
    complement_min=f"_{RETENTION_TIME}.Min",
    complement_max=f"_{RETENTION_TIME}.Max",
)


def public_name(column: str) -> str:
    """Strip the private prefix for display (``_Signal.Sum`` -> ``Signal.Sum``)."""
    return column[len(PRIVATE_PREFIX):] if column.startswith(PRIVATE_PREFIX) else column
