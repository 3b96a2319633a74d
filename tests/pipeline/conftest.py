"""Shared fixtures for pipeline tests."""

from __future__ import annotations

import pytest

from chromaview.pipeline.records import Record, load_table


@pytest.fixture
def two_records():
    """Two retention times (ms) with the same two-peak mass spectrum."""
    return [
        Record.from_pairs(1000.0, [(100.0, 10), (200.0, 20)]),
        Record.from_pairs(2000.0, [(100.0, 10), (200.0, 20)]),
    ]


@pytest.fixture
def two_record_table(two_records):
    return load_table(two_records)


@pytest.fixture
def mixed_records():
    """Two retention times with partly shared mass-to-charge values."""
    return [
        Record.from_pairs(1000.0, [(200.0, 20), (100.0, 10)]),
        Record.from_pairs(2000.0, [(100.0, 5), (300.0, 15)]),
    ]


@pytest.fixture
def mixed_table(mixed_records):
    return load_table(mixed_records)


@pytest.fixture
def peak_series_table():
    """Five retention times whose summed signals are [1, 5, 2, 8, 3]."""
    sums = [1, 5, 2, 8, 3]
    return load_table([
        Record.from_pairs(1000.0 * (i + 1), [(100.0, s)]) for i, s in enumerate(sums)
    ])
