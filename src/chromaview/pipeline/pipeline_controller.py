"""Host-facing controller for the memoized pipeline.

PipelineController is the entry point for a redraw-driven host: call
``table``/``plot``/``figure`` every frame with the current Settings and the
controller answers from the memo store unless a cache key changed.

Key chain:
    raw.hash + table settings  -> TableKey -> derived table
    derived.hash + plot settings -> PlotKey -> PlotValue

Replacing the raw table (``load``) changes raw.hash and therefore every
downstream key; there is no explicit invalidation.
"""

from __future__ import annotations

from typing import Any, Optional

from chromaview.pipeline.cache_keys import plot_key, table_key
from chromaview.pipeline.figure_generator import FigureGenerator
from chromaview.pipeline.hashed_table import HashedTable
from chromaview.pipeline.memo_cache import MemoCache, MemoStore
from chromaview.pipeline.plot_computer import PlotValue, compute_plot_for_key
from chromaview.pipeline.records import load_table
from chromaview.pipeline.settings import Settings
from chromaview.pipeline.table_computer import compute_table_for_key
from chromaview.utils.logging import get_logger

logger = get_logger(__name__)


class PipelineController:
    """Memoized access to the derived table, plot value and figure.

    **Public API:**

    - **load(data)**: Replace the raw table (records, DataFrame, or polars DataFrame).
    - **table(settings)**: Derived HashedTable for the current raw table.
    - **plot(settings)**: PlotValue for the current raw table.
    - **figure(settings)**: Plotly figure dict built from plot(settings).
    """

    def __init__(
        self,
        raw: Optional[HashedTable] = None,
        *,
        store: Optional[MemoStore] = None,
        figure_generator: Optional[FigureGenerator] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            raw: Initial raw table. Defaults to an empty table.
            store: Memo store shared by both stages. Defaults to a new MemoCache.
            figure_generator: Figure builder. Defaults to FigureGenerator().
        """
        self.raw = raw if raw is not None else HashedTable.empty()
        self.store: MemoStore = store if store is not None else MemoCache()
        self.figure_generator = figure_generator or FigureGenerator()

    def load(self, data: Any) -> HashedTable:
        """Replace the raw table; all downstream keys change with its hash."""
        self.raw = data if isinstance(data, HashedTable) else load_table(data)
        return self.raw

    def table(self, settings: Settings) -> HashedTable:
        """Derived table for ``settings`` (computed at most once per TableKey)."""
        raw = self.raw
        key = table_key(raw, settings)
        return self.store.get_or_compute(key, lambda: compute_table_for_key(raw, key))

    def plot(self, settings: Settings) -> PlotValue:
        """PlotValue for ``settings`` (computed at most once per PlotKey)."""
        derived = self.table(settings)
        key = plot_key(derived, settings)
        return self.store.get_or_compute(key, lambda: compute_plot_for_key(derived, key))

    def figure(self, settings: Settings) -> dict:
        """Plotly figure dict for ``settings``. Not memoized; legend is display only."""
        return self.figure_generator.make_figure(self.plot(settings), settings)
