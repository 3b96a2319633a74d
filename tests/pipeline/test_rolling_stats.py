"""Unit tests for centered rolling regression statistics."""

import numpy as np
import pandas as pd
import pytest

from chromaview.pipeline.algorithms.rolling_stats import rolling_regression, with_rolling_columns


@pytest.fixture
def linear():
    x = pd.Series([1.0, 2.0, 3.0, 4.0, 5.0])
    return x, 2.0 * x


def test_min_periods_one_defines_edges(linear):
    x, y = linear
    out = rolling_regression(x, y, window_size=3, min_periods=1)
    assert out["_x.Rolling.Mean"].notna().all()
    assert out["_x.Rolling.Mean"].iloc[0] == pytest.approx(1.5)
    assert out["_x.Rolling.Mean"].iloc[-1] == pytest.approx(4.5)


def test_min_periods_three_nulls_edges(linear):
    """Centered windows at the edges hold only two values."""
    x, y = linear
    out = rolling_regression(x, y, window_size=3, min_periods=3)
    mean = out["_x.Rolling.Mean"]
    assert np.isnan(mean.iloc[0])
    assert np.isnan(mean.iloc[-1])
    assert mean.iloc[1:-1].tolist() == pytest.approx([2.0, 3.0, 4.0])


def test_regression_columns_follow_definitions(linear):
    """cov = E[xy] - E[x]E[y]; corr = cov / (sx*sy); slope = corr*sy/sx; b = E[y] - slope*E[x]."""
    x, y = linear
    out = rolling_regression(x, y, window_size=3, min_periods=3)
    row = out.iloc[1]
    assert row["_xy.Rolling.Mean"] == pytest.approx(28.0 / 3.0)
    assert row["_x.Rolling.StandardDeviation"] == pytest.approx(1.0)
    assert row["_y.Rolling.StandardDeviation"] == pytest.approx(2.0)
    assert row["_xy.Covariance"] == pytest.approx(4.0 / 3.0)
    assert row["Correlation"] == pytest.approx(2.0 / 3.0)
    assert row["Slope"] == pytest.approx(4.0 / 3.0)
    assert row["Intercept"] == pytest.approx(4.0 - (4.0 / 3.0) * 2.0)


def test_zero_deviation_gives_null_not_inf():
    x = pd.Series([1.0, 1.0, 1.0])
    y = pd.Series([1.0, 2.0, 3.0])
    out = rolling_regression(x, y, window_size=3, min_periods=1)
    for col in ("Correlation", "Slope", "Intercept"):
        assert out[col].isna().all()
    assert not np.isinf(out.to_numpy(dtype="float64")).any()


def test_column_order():
    out = rolling_regression(pd.Series([1.0]), pd.Series([1.0]), window_size=1, min_periods=1)
    assert list(out.columns) == [
        "_x.Rolling.Mean",
        "_y.Rolling.Mean",
        "_xy.Rolling.Mean",
        "_x.Rolling.StandardDeviation",
        "_y.Rolling.StandardDeviation",
        "_xy.Covariance",
        "Correlation",
        "Slope",
        "Intercept",
    ]


def test_with_rolling_columns_sorts_by_key():
    df = pd.DataFrame({"k": [3.0, 1.0, 2.0], "v": [30.0, 10.0, 20.0]})
    out = with_rolling_columns(df, x_col="k", y_col="v", window_size=3, min_periods=1)
    assert out["k"].tolist() == [1.0, 2.0, 3.0]
    assert out["_y.Rolling.Mean"].tolist() == pytest.approx([15.0, 20.0, 25.0])


def test_empty_series():
    out = rolling_regression(pd.Series([], dtype=float), pd.Series([], dtype=float), window_size=3, min_periods=1)
    assert len(out) == 0
    assert "Intercept" in out.columns
