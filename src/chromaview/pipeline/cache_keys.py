"""Cache keys for the two memoized pipeline stages.

Each stage has one key dataclass and one constructor that lists exactly the
settings fields influencing that stage's output. Stage computations receive
the key rather than the Settings, so they cannot read a field the key omits.

Excluded on purpose:
- ``legend`` (display only).
- The second flag of ``peak_min``/``peak_max`` (label toggle only).

Bump KEY_VERSION whenever a stage's output changes for the same key fields.
"""

from __future__ import annotations

from dataclasses import dataclass

from chromaview.pipeline.hashed_table import HashedTable
from chromaview.pipeline.settings import BarSort, Settings, Sort

KEY_VERSION: int = 1


@dataclass(frozen=True)
class TableKey:
    """Identity of a derived-table computation."""
    table_hash: int
    sort: Sort
    explode: bool
    filter_null: bool
    normalize_signal: bool
    peak_min: bool
    peak_max: bool
    window_size: int
    min_periods: int
    version: int = KEY_VERSION


@dataclass(frozen=True)
class PlotKey:
    """Identity of a plot computation; seeded by the derived table's hash."""
    table_hash: int
    sort: Sort
    bar_sort: BarSort
    bar_width: float
    stack: bool
    version: int = KEY_VERSION


def table_key(raw: HashedTable, settings: Settings) -> TableKey:
    return TableKey(
        table_hash=raw.hash,
        sort=settings.sort,
        explode=settings.explode,
        filter_null=settings.filter_null,
        normalize_signal=settings.normalize_signal,
        peak_min=settings.peak_min[0],
        peak_max=settings.peak_max[0],
        window_size=settings.window_size,
        min_periods=settings.min_periods,
    )


def plot_key(derived: HashedTable, settings: Settings) -> PlotKey:
    return PlotKey(
        table_hash=derived.hash,
        sort=settings.sort,
        bar_sort=settings.bar_sort,
        bar_width=float(settings.bar_width),
        stack=settings.stack,
    )
