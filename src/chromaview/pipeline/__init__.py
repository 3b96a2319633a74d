"""Memoized chromatography/mass-spectrometry pipeline.

Raw records -> derived table (aggregation, rolling statistics, peak filter)
-> plot value, each stage cached by a content-addressed key.
"""

from chromaview.pipeline.errors import (
    MissingFieldError,
    PipelineError,
    SchemaMismatchError,
    UnsupportedError,
)
from chromaview.pipeline.hashed_table import HashedTable
from chromaview.pipeline.memo_cache import MemoCache, MemoCacheConfig, MemoStore
from chromaview.pipeline.pipeline_controller import PipelineController
from chromaview.pipeline.plot_computer import Bar, PlotValue, compute_plot
from chromaview.pipeline.records import Peak, Record, load_table
from chromaview.pipeline.settings import BarSort, Settings, Sort
from chromaview.pipeline.table_computer import compute_table

__all__ = [
    "Bar",
    "BarSort",
    "HashedTable",
    "MemoCache",
    "MemoCacheConfig",
    "MemoStore",
    "MissingFieldError",
    "Peak",
    "PipelineController",
    "PipelineError",
    "PlotValue",
    "Record",
    "SchemaMismatchError",
    "Settings",
    "Sort",
    "UnsupportedError",
    "compute_plot",
    "compute_table",
    "load_table",
]
