"""Settings snapshot for the chromaview pipeline.

This module defines the Sort and BarSort enums and the Settings dataclass.
A Settings instance is an immutable snapshot: hosts build a new one (e.g. with
``dataclasses.replace``) whenever a control changes, and cache keys are
derived from it per stage (see cache_keys.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Sort(Enum):
    """Axis the records are grouped and ordered by."""
    RETENTION_TIME = "retention_time"
    MASS_TO_CHARGE = "mass_to_charge"


class BarSort(Enum):
    """Ordering of sibling bars within one mass spectrum."""
    MASS_TO_CHARGE = "mass_to_charge"
    SIGNAL = "signal"


def _bool_pair(value: Any, default: tuple[bool, bool] = (False, False)) -> tuple[bool, bool]:
    if value is None:
        return default
    items = list(value)
    if len(items) != 2:
        raise ValueError(f"peak selector must have exactly two flags, got {value!r}")
    return (bool(items[0]), bool(items[1]))


@dataclass(frozen=True)
class Settings:
    """Configuration snapshot for one table/plot computation.

    ``peak_min`` and ``peak_max`` are ``(enabled, show_label)`` pairs; only the
    first flag of each pair affects computed output.
    """
    sort: Sort = Sort.RETENTION_TIME
    explode: bool = False
    filter_null: bool = False
    normalize_signal: bool = False
    peak_min: tuple[bool, bool] = (False, False)
    peak_max: tuple[bool, bool] = (False, False)
    window_size: int = 3               # rows in the centered rolling window
    min_periods: int = 1               # non-null values required for a rolling result
    bar_sort: BarSort = BarSort.MASS_TO_CHARGE
    bar_width: float = 0.05
    stack: bool = False
    legend: bool = True                # display only

    def __post_init__(self) -> None:
        if not isinstance(self.sort, Sort):
            raise ValueError(f"sort must be a Sort, got {self.sort!r}")
        if not isinstance(self.bar_sort, BarSort):
            raise ValueError(f"bar_sort must be a BarSort, got {self.bar_sort!r}")
        # Accept lists (e.g. from JSON or UI checkboxes) but store hashable tuples.
        object.__setattr__(self, "peak_min", _bool_pair(self.peak_min))
        object.__setattr__(self, "peak_max", _bool_pair(self.peak_max))
        for name in ("window_size", "min_periods"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an int, got {value!r}")
        if self.min_periods < 1:
            raise ValueError(f"min_periods must be >= 1, got {self.min_periods}")
        if self.window_size < self.min_periods:
            raise ValueError(
                f"window_size ({self.window_size}) must be >= min_periods ({self.min_periods})"
            )
        if not self.bar_width >= 0:
            raise ValueError(f"bar_width must be >= 0, got {self.bar_width}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize Settings to a JSON-friendly dictionary."""
        return {
            "sort": self.sort.value,
            "explode": self.explode,
            "filter_null": self.filter_null,
            "normalize_signal": self.normalize_signal,
            "peak_min": list(self.peak_min),
            "peak_max": list(self.peak_max),
            "window_size": self.window_size,
            "min_periods": self.min_periods,
            "bar_sort": self.bar_sort.value,
            "bar_width": self.bar_width,
            "stack": self.stack,
            "legend": self.legend,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Settings":
        """Deserialize Settings from a dictionary; missing fields take defaults.

        Raises:
            ValueError: If an enum value is unknown or the window parameters are invalid.
        """
        return cls(
            sort=Sort(data.get("sort", Sort.RETENTION_TIME.value)),
            explode=bool(data.get("explode", False)),
            filter_null=bool(data.get("filter_null", False)),
            normalize_signal=bool(data.get("normalize_signal", False)),
            peak_min=_bool_pair(data.get("peak_min")),
            peak_max=_bool_pair(data.get("peak_max")),
            window_size=int(data.get("window_size", 3)),
            min_periods=int(data.get("min_periods", 1)),
            bar_sort=BarSort(data.get("bar_sort", BarSort.MASS_TO_CHARGE.value)),
            bar_width=float(data.get("bar_width", 0.05)),
            stack=bool(data.get("stack", False)),
            legend=bool(data.get("legend", True)),
        )
