"""Algorithms used by the table computer.

Pure pandas/numpy implementations of each pipeline stage: grouping and
summaries (aggregation), centered rolling regression statistics
(rolling_stats) and local-extremum tagging (peak_filter).
"""
