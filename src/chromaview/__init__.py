"""
chromaview: memoized table and plot views of chromatography/mass-spectrometry records.

This package provides:
- load_table: build the content-hashed raw table from records or DataFrames
- compute_table / compute_plot: pure stage functions (derived table, plot value)
- PipelineController: memoized access for redraw-driven hosts
- Logging utilities for library and application use

For logging configuration in standalone scripts:
    ```python
    from chromaview.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library, logging is handled by the host application's configuration.
"""

import logging

from chromaview.utils.logging import configure_logging, get_logger

from chromaview.pipeline import (
    HashedTable,
    PipelineController,
    Settings,
    compute_plot,
    compute_table,
    load_table,
)

# Ensure the chromaview logger has a NullHandler so logs don't propagate to root
# when no application has configured logging.
_logger = logging.getLogger("chromaview")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "HashedTable",
    "PipelineController",
    "Settings",
    "compute_plot",
    "compute_table",
    "configure_logging",
    "get_logger",
    "load_table",
]

__version__ = "0.1.0"
