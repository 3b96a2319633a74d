"""Memoization store for pipeline stage results.

The pipeline only requires ``get_or_compute(key, compute_fn)`` from its host
(see MemoStore). MemoCache is an in-process implementation: compute runs at
most once per resident key and every caller holding that key receives the
same object.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional, Protocol, TypeVar

from chromaview.pipeline.errors import PipelineError
from chromaview.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class MemoStore(Protocol):
    """Host-provided cache contract: compute at most once per key."""

    def get_or_compute(self, key: Hashable, compute_fn: Callable[[], T]) -> T:
        ...


@dataclass
class MemoCacheConfig:
    """Configuration for MemoCache.

    Args:
        max_entries: Keep at most this many keys, evicting the least recently used.
            None means unbounded.
        cache_errors: Remember PipelineErrors raised by compute and re-raise them for
            the same key instead of recomputing on every call.
    """
    max_entries: Optional[int] = 64
    cache_errors: bool = True


@dataclass(frozen=True)
class _Failure:
    error: PipelineError


class MemoCache:
    """LRU memoization store keyed by stage cache keys.

    Attributes:
        hits: Number of lookups answered from the cache.
        misses: Number of lookups that ran compute.
    """

    def __init__(self, config: MemoCacheConfig | None = None) -> None:
        self._cfg = config or MemoCacheConfig()
        if self._cfg.max_entries is not None and self._cfg.max_entries < 1:
            raise ValueError(f"max_entries must be >= 1 or None, got {self._cfg.max_entries}")
        self._entries: "OrderedDict[Hashable, Any]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, key: Hashable, compute_fn: Callable[[], T]) -> T:
        """Return the cached value for key, computing it on first use.

        Raises:
            PipelineError: The error raised by compute for this key (cached when
                ``cache_errors`` is set).
        """
        if key in self._entries:
            self.hits += 1
            self._entries.move_to_end(key)
            entry = self._entries[key]
            if isinstance(entry, _Failure):
                raise entry.error
            return entry

        self.misses += 1
        logger.debug(f"MemoCache miss: {type(key).__name__} (entries={len(self._entries)})")
        try:
            value = compute_fn()
        except PipelineError as e:
            if self._cfg.cache_errors:
                self._store(key, _Failure(e))
            raise
        self._store(key, value)
        return value

    def _store(self, key: Hashable, entry: Any) -> None:
        self._entries[key] = entry
        self._entries.move_to_end(key)
        max_entries = self._cfg.max_entries
        while max_entries is not None and len(self._entries) > max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"MemoCache evicted {type(evicted).__name__}")

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
