"""Tests for the plot projection stage."""

import pandas as pd
import pytest

from chromaview.pipeline.cache_keys import plot_key
from chromaview.pipeline.errors import MissingFieldError, SchemaMismatchError, UnsupportedError
from chromaview.pipeline.hashed_table import HashedTable
from chromaview.pipeline.plot_computer import (
    PlotValue,
    category_key,
    compute_plot,
    compute_plot_for_key,
    sort_mass_spectrum,
)
from chromaview.pipeline.records import Record, load_table
from chromaview.pipeline.settings import BarSort, Settings, Sort
from chromaview.pipeline.table_computer import compute_table


def _plot(raw, settings):
    return compute_plot(compute_table(raw, settings), settings)


def test_stacked_bases_accumulate_per_retention_time(mixed_table):
    value = _plot(mixed_table, Settings(stack=True))
    rt1, rt2 = 1 / 60, 2 / 60
    spectra = {round(k, 9): v for k, v in value.mass_spectra.items()}
    assert spectra[round(rt1, 9)] == ((100.0, 10.0), (200.0, 20.0))
    assert spectra[round(rt2, 9)] == ((100.0, 5.0), (300.0, 15.0))

    bars_100 = value.bars[category_key(100.0)]
    assert [b.base_offset for b in bars_100] == [0.0, 0.0]
    assert value.bars[category_key(200.0)][0].base_offset == 10.0
    assert value.bars[category_key(300.0)][0].base_offset == 5.0


def test_stack_heights_sum_to_signal_total(mixed_table):
    value = _plot(mixed_table, Settings(stack=True))
    tops: dict[float, float] = {}
    for bars in value.bars.values():
        for bar in bars:
            tops[bar.x] = max(tops.get(bar.x, 0.0), bar.base_offset + bar.height)
    assert sorted(tops.values()) == [20.0, 30.0]


def test_stack_summaries(mixed_table):
    value = _plot(mixed_table, Settings(stack=True))
    assert value.mean == pytest.approx(25.0)
    assert value.median == pytest.approx(25.0)
    assert [x for x, _ in value.rolling_mean] == pytest.approx([1 / 60, 2 / 60])
    assert [y for _, y in value.rolling_mean] == pytest.approx([25.0, 25.0])


def test_no_stack_has_zero_bases_and_no_summaries(mixed_table):
    value = _plot(mixed_table, Settings(bar_width=0.1))
    assert all(b.base_offset == 0.0 for bars in value.bars.values() for b in bars)
    assert all(b.width == 0.1 for bars in value.bars.values() for b in bars)
    assert value.mean is None
    assert value.median is None
    assert value.rolling_mean == ()


def test_bars_keep_first_seen_category_order(mixed_table):
    value = _plot(mixed_table, Settings())
    assert list(value.bars) == [category_key(100.0), category_key(200.0), category_key(300.0)]


def test_bar_sort_by_signal():
    raw = load_table([Record.from_pairs(1000.0, [(100.0, 30), (200.0, 10), (300.0, 20)])])
    value = _plot(raw, Settings(bar_sort=BarSort.SIGNAL, stack=True))
    (spectrum,) = value.mass_spectra.values()
    assert spectrum == ((200.0, 10.0), (300.0, 20.0), (100.0, 30.0))
    assert value.bars[category_key(100.0)][0].base_offset == 30.0


def test_sort_mass_spectrum_puts_nulls_last():
    pairs = [(float("nan"), 1.0), (200.0, 2.0), (100.0, 3.0)]
    ordered = sort_mass_spectrum(pairs, BarSort.MASS_TO_CHARGE)
    assert [p[0] for p in ordered[:2]] == [100.0, 200.0]
    assert ordered[2][1] == 1.0


def test_peak_filter_selects_rows(peak_series_table):
    value = _plot(peak_series_table, Settings(peak_max=(True, False)))
    assert sorted(value.mass_spectra) == pytest.approx([2 / 60, 4 / 60])


def test_mass_to_charge_sort_is_unsupported(mixed_table):
    with pytest.raises(UnsupportedError) as excinfo:
        _plot(mixed_table, Settings(sort=Sort.MASS_TO_CHARGE))
    assert excinfo.value.kind == "Unsupported"


def test_null_spectrum_kept_by_filter_null_false_is_missing_field():
    raw = load_table([
        Record.from_pairs(1000.0, [(100.0, 1)]),
        Record(retention_time=2000.0),
    ])
    with pytest.raises(MissingFieldError):
        _plot(raw, Settings())
    value = _plot(raw, Settings(filter_null=True))
    assert len(value.mass_spectra) == 1


def test_derived_table_without_projected_columns():
    derived = HashedTable(pd.DataFrame({"RetentionTime": [1.0]}))
    with pytest.raises(SchemaMismatchError) as excinfo:
        compute_plot(derived, Settings())
    assert set(excinfo.value.missing) == {"MassSpectrum", "_Filter"}


def test_empty_input_gives_empty_plot():
    value = _plot(HashedTable.empty(), Settings(stack=True))
    assert isinstance(value, PlotValue)
    assert len(value.bars) == 0
    assert value.mean is None


def test_key_from_other_table_is_rejected(mixed_table, two_record_table):
    derived = compute_table(mixed_table, Settings())
    other = compute_table(two_record_table, Settings())
    with pytest.raises(ValueError):
        compute_plot_for_key(other, plot_key(derived, Settings()))


def test_plot_value_is_read_only(mixed_table):
    value = _plot(mixed_table, Settings())
    with pytest.raises(TypeError):
        value.bars[1.0] = ()  # type: ignore[index]


@pytest.mark.parametrize(
    "settings",
    [
        Settings(),
        Settings(stack=True),
        Settings(bar_sort=BarSort.SIGNAL),
        Settings(stack=True, bar_sort=BarSort.SIGNAL, bar_width=0.2),
        Settings(stack=True, peak_max=(True, False)),
    ],
)
def test_compute_plot_is_deterministic(mixed_table, settings):
    derived = compute_table(mixed_table, settings)
    first = compute_plot(derived, settings)
    second = compute_plot(derived, settings)
    assert first is not second
    assert dict(first.bars) == dict(second.bars)
    assert list(first.bars) == list(second.bars)
    assert dict(first.mass_spectra) == dict(second.mass_spectra)
    assert first.mean == second.mean
    assert first.median == second.median
    assert first.rolling_mean == second.rolling_mean


def test_bar_name_uses_single_precision_text():
    raw = load_table([Record.from_pairs(1000.0, [(100.1, 5)])])
    value = _plot(raw, Settings())
    (bars,) = value.bars.values()
    assert bars[0].name == "100.1"
