"""Bit-reversal helpers shared by every radix-2 implementation.

The reorder pass of a decimation-in-frequency FFT swaps each index with its
bit-reversed counterpart. Two cached forms are provided:

- ``bit_reversal_table(n)``: r(i) for every index (used by the reference)
- ``swap_pairs(n)``: only the (i, j) pairs with j > i, each swapped once
  (used by the table-driven variants)
"""

from __future__ import annotations

import logging
import threading

import numpy as np

from fftengine.typing import NDArrayInt

logger = logging.getLogger(__name__)

_TABLES: dict[int, NDArrayInt] = {}
_PAIRS: dict[int, tuple[NDArrayInt, NDArrayInt]] = {}
_lock = threading.Lock()


def is_power_of_two(n: int) -> bool:
    """Return True for 1, 2, 4, 8, ..."""
    return isinstance(n, (int, np.integer)) and n > 0 and (n & (n - 1)) == 0


def log2_size(n: int) -> int:
    """Number of radix-2 stages for a power-of-two size."""
    return int(n).bit_length() - 1


def bit_reverse(index, width: int):
    """Reverse the low ``width`` bits of ``index``.

    Works on plain ints and element-wise on numpy integer arrays. The input
    is never modified.
    """
    result = index & 0
    for _ in range(width):
        result = (result << 1) | (index & 1)
        index = index >> 1
    return result


def _compute_table(n: int) -> NDArrayInt:
    table = bit_reverse(np.arange(n, dtype=np.int64), log2_size(n))
    table.flags.writeable = False
    return table


def bit_reversal_table(n: int) -> NDArrayInt:
    """Return r(i) for i in [0, n), cached per size."""
    table = _TABLES.get(n)
    if table is None:
        table = _compute_table(n)
        with _lock:
            table = _TABLES.setdefault(n, table)
    return table


def swap_pairs(n: int) -> tuple[NDArrayInt, NDArrayInt]:
    """Return the (i, j) swap pairs with j > i for a size-n reorder."""
    pairs = _PAIRS.get(n)
    if pairs is None:
        table = bit_reversal_table(n)
        lower = np.flatnonzero(table > np.arange(n))
        upper = table[lower].copy()
        lower.flags.writeable = False
        upper.flags.writeable = False
        logger.debug(f"Computed {lower.size} bit-reversal swap pairs for size {n}")
        with _lock:
            pairs = _PAIRS.setdefault(n, (lower, upper))
    return pairs
