"""Content-hashed DataFrame wrapper.

HashedTable pairs a DataFrame with a 64-bit content hash. The hash is the
only identity the memoization layer uses, so the wrapped frame is copied on
the way in and on the way out: nothing can mutate the data a hash was
computed from. A new hash is only produced by the constructor or ``update``.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd

# Fixed key so hashes are stable across processes (pandas' default key, spelled out).
HASH_KEY = "0123456789123456"


def _hashable_cell(value: Any) -> Any:
    if isinstance(value, (list, tuple, np.ndarray)):
        return repr([_hashable_cell(v) for v in value])
    if isinstance(value, dict):
        return repr(sorted((k, _hashable_cell(v)) for k, v in value.items()))
    return value


def _hashable_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Replace list-valued object cells by a stable text form so rows can be hashed."""
    out = {}
    for col in df.columns:
        s = df[col].reset_index(drop=True)
        if s.dtype == object:
            s = s.map(_hashable_cell)
        out[col] = s
    return pd.DataFrame(out, index=pd.RangeIndex(len(df)))


def hash_data_frame(df: pd.DataFrame) -> int:
    """Hash every row together with its position and XOR-reduce to one uint64.

    Column labels are mixed in by position, so renaming a column changes the
    hash. Identical content in identical order gives an identical hash. Not
    cryptographically strong. An empty frame hashes to 0.
    """
    if len(df) == 0:
        return 0
    row_hashes = pd.util.hash_pandas_object(
        _hashable_frame(df), index=True, hash_key=HASH_KEY, categorize=True
    ).to_numpy(dtype=np.uint64)
    label_hashes = pd.util.hash_pandas_object(
        pd.Series([str(col) for col in df.columns], dtype=object), index=True, hash_key=HASH_KEY
    ).to_numpy(dtype=np.uint64)
    return int(np.bitwise_xor.reduce(np.concatenate([row_hashes, label_hashes])))


class HashedTable:
    """Immutable DataFrame plus its content hash.

    Attributes:
        hash: 64-bit content hash (read-only).
    """

    __slots__ = ("_frame", "_hash")

    def __init__(self, df: pd.DataFrame) -> None:
        frame = df.copy(deep=True)
        self._frame = frame
        self._hash = hash_data_frame(frame)

    @classmethod
    def empty(cls) -> "HashedTable":
        return cls(pd.DataFrame())

    @property
    def hash(self) -> int:
        return self._hash

    @property
    def data_frame(self) -> pd.DataFrame:
        """A copy of the wrapped frame; edits to it never reach this table."""
        return self._frame.copy(deep=True)

    @property
    def columns(self) -> list[str]:
        return list(self._frame.columns)

    def update(self, df: pd.DataFrame) -> "HashedTable":
        """Return a new table for ``df`` with a freshly computed hash."""
        return HashedTable(df)

    def __len__(self) -> int:
        return len(self._frame)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashedTable):
            return NotImplemented
        return self._hash == other._hash

    def __hash__(self) -> int:
        return hash(self._hash)

    def __repr__(self) -> str:
        return f"HashedTable(rows={len(self._frame)}, columns={len(self._frame.columns)}, hash={self._hash:#018x})"
