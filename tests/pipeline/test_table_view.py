"""Tests for summary and exploded table views."""

import pytest

from chromaview.pipeline.errors import SchemaMismatchError
from chromaview.pipeline.hashed_table import HashedTable
from chromaview.pipeline.records import Record, load_table
from chromaview.pipeline.settings import Settings, Sort
from chromaview.pipeline.table_computer import compute_table
from chromaview.pipeline.table_view import exploded_rows, summary_table


def test_summary_table_public_names(mixed_table):
    df = summary_table(compute_table(mixed_table, Settings()), Sort.RETENTION_TIME)
    assert "MassSpectrum" not in df.columns
    assert "_Filter" not in df.columns
    assert "Filter" not in df.columns
    assert {"RetentionTime", "MassSpectrum.Count", "Signal.Sum", "Correlation"} <= set(df.columns)
    assert not any(col.startswith("_") for col in df.columns)


def test_exploded_rows_by_retention_time(mixed_table):
    df = exploded_rows(compute_table(mixed_table, Settings()), Sort.RETENTION_TIME)
    assert list(df.columns) == ["RetentionTime", "MassToCharge", "Signal"]
    assert df["MassToCharge"].tolist() == [100.0, 200.0, 100.0, 300.0]
    assert df["Signal"].tolist() == [10.0, 20.0, 5.0, 15.0]


def test_exploded_rows_by_mass_to_charge(mixed_table):
    settings = Settings(sort=Sort.MASS_TO_CHARGE)
    df = exploded_rows(compute_table(mixed_table, settings), Sort.MASS_TO_CHARGE)
    assert list(df.columns) == ["MassToCharge", "RetentionTime", "Signal"]
    assert df["MassToCharge"].tolist() == [100.0, 100.0, 200.0, 300.0]
    assert df["RetentionTime"].tolist() == [1000.0, 2000.0, 1000.0, 2000.0]


def test_exploded_rows_keep_null_group():
    raw = load_table([Record(retention_time=1000.0)])
    df = exploded_rows(compute_table(raw, Settings()), Sort.RETENTION_TIME)
    assert len(df) == 1
    assert df["Signal"].isna().all()


def test_exploded_rows_requires_list_column():
    with pytest.raises(SchemaMismatchError):
        exploded_rows(HashedTable.empty(), Sort.RETENTION_TIME)


def test_summary_table_column_order(mixed_table):
    df = summary_table(compute_table(mixed_table, Settings()), Sort.RETENTION_TIME)
    assert list(df.columns)[:7] == [
        "RetentionTime",
        "MassSpectrum.Count",
        "MassToCharge.Min",
        "MassToCharge.Max",
        "Signal.Min",
        "Signal.Max",
        "Signal.Sum",
    ]
    assert list(df.columns)[-1] == "Intercept"


def test_summary_table_of_exploded_table_is_key_only(mixed_table):
    df = summary_table(compute_table(mixed_table, Settings(explode=True)), Sort.RETENTION_TIME)
    assert list(df.columns) == ["RetentionTime"]
