"""Precomputed twiddle-factor tables.

Each table holds cos(2*pi*i/N) and sin(2*pi*i/N) for i in [0, N/2). Radix-2
butterflies only ever rotate by angles in that half circle, so the second
half is never stored. The forward/inverse sign is applied by the caller.

Tables are built lazily on first request and shared read-only for the
lifetime of the process. Two threads racing on the same size may both
compute a table; only the first one published is kept.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from fftengine.core.bitreverse import is_power_of_two
from fftengine.errors import InvalidSizeError
from fftengine.typing import NDArrayFloat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TwiddleTable:
    """Immutable cos/sin table for one transform size.

    Attributes:
        size: Transform size N
        cos: cos(2*pi*i/N) for i in [0, N/2)
        sin: sin(2*pi*i/N) for i in [0, N/2)
    """

    size: int
    cos: NDArrayFloat
    sin: NDArrayFloat

    def __len__(self) -> int:
        return int(self.cos.size)

    def pair(self, index: int) -> tuple[float, float]:
        """Return (cos, sin) for a single twiddle index."""
        return float(self.cos[index]), float(self.sin[index])


_CACHE: dict[int, TwiddleTable] = {}
_lock = threading.Lock()


def _compute(size: int) -> TwiddleTable:
    angles = 2.0 * math.pi * np.arange(size // 2, dtype=np.float64) / size
    cos = np.cos(angles)
    sin = np.sin(angles)
    cos.flags.writeable = False
    sin.flags.writeable = False
    return TwiddleTable(size=size, cos=cos, sin=sin)


def table_for(size: int) -> TwiddleTable:
    """Return the twiddle table for ``size``, building it on first use.

    Raises:
        InvalidSizeError: If size is not a power of two
    """
    table = _CACHE.get(size)
    if table is not None:
        return table
    if not is_power_of_two(size):
        raise InvalidSizeError(f"Twiddle table size must be a power of 2, got: {size}", size=size)

    table = _compute(size)
    with _lock:
        table = _CACHE.setdefault(size, table)
    logger.debug(f"Twiddle table ready for size {size} ({len(table)} factors)")
    return table


def warm(sizes: Iterable[int]) -> None:
    """Precompute tables for a set of sizes."""
    for size in sizes:
        table_for(size)


def is_cached(size: int) -> bool:
    return size in _CACHE


def cache_stats() -> str:
    """Human-readable summary of cached tables."""
    with _lock:
        tables = list(_CACHE.values())
    factors = sum(len(t) for t in tables)
    kib = factors * 16 / 1024.0
    return f"TwiddleCache: {len(tables)} sizes cached, {factors} twiddle factors, ~{kib:.1f} KiB"


def clear_cache() -> None:
    """Drop every cached table. Intended for tests."""
    with _lock:
        _CACHE.clear()
