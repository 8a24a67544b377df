"""Table-driven FFTs for mid-range sizes (32 .. 4096).

The generic stage loop is kept, but everything the reference derives per
call is resolved once at construction:

- each stage's twiddle column (one cos/sin per block, already indexed by
  the bit-reversed block number), for both transform directions
- the reorder pass, as a list of (i, j) swap pairs with j > i

so a call does no bit reversal and no table indexing of its own.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from functools import partial

import numpy as np

from fftengine.core.base import FFTImplementation, CheckpointHook, REORDER_CHECKPOINT, stage_checkpoint
from fftengine.core.bitreverse import bit_reverse, is_power_of_two, log2_size, swap_pairs
from fftengine.core.twiddle import table_for
from fftengine.errors import InvalidSizeError
from fftengine.registry import declare
from fftengine.typing import NDArrayFloat

logger = logging.getLogger(__name__)

TABLE_DRIVEN_SIZES = (32, 64, 128, 256, 512, 1024, 2048, 4096)


@dataclass(frozen=True)
class StagePlan:
    """Precomputed butterfly layout and twiddles for one stage."""

    blocks: int
    half: int
    cos: NDArrayFloat
    sin_forward: NDArrayFloat
    sin_inverse: NDArrayFloat


def build_stage_plans(size: int) -> tuple[StagePlan, ...]:
    """Resolve the per-stage twiddle columns for a transform size."""
    nu = log2_size(size)
    table = table_for(size)
    plans = []
    half = size // 2
    for stage in range(1, nu + 1):
        blocks = size // (2 * half)
        first_k = np.arange(blocks, dtype=np.int64) * (2 * half)
        p = bit_reverse(first_k >> (nu - stage), nu)
        cos = table.cos[p][:, np.newaxis]
        sin = table.sin[p][:, np.newaxis]
        for column in (cos, sin):
            column.flags.writeable = False
        neg_sin = -sin
        neg_sin.flags.writeable = False
        plans.append(StagePlan(blocks, half, cos, neg_sin, sin))
        half //= 2
    return tuple(plans)


class TableDrivenFFT(FFTImplementation):
    """FFT driven by precomputed twiddle columns and swap-pair tables."""

    characteristics = ("stage-optimized", "precomputed-trig", "swap-pair-reorder")

    def __init__(self, size: int) -> None:
        if not is_power_of_two(size):
            raise InvalidSizeError(f"Array length must be a power of 2, got: {size}", size=size)
        self.fixed_size = size
        self._plans = build_stage_plans(size)
        self._swap_i, self._swap_j = swap_pairs(size)
        self._norm = 1.0 / math.sqrt(size)
        logger.debug(
            f"Table-driven FFT ready for size {size} "
            f"({len(self._plans)} stages, {self._swap_i.size} swaps)"
        )

    def _execute(
        self,
        re: NDArrayFloat,
        im: NDArrayFloat,
        forward: bool,
        hook: CheckpointHook | None,
    ) -> tuple[NDArrayFloat, NDArrayFloat]:
        for stage, plan in enumerate(self._plans, start=1):
            c = plan.cos
            s = plan.sin_forward if forward else plan.sin_inverse
            pairs_re = re.reshape(plan.blocks, 2, plan.half)
            pairs_im = im.reshape(plan.blocks, 2, plan.half)
            lo_re, hi_re = pairs_re[:, 0, :], pairs_re[:, 1, :]
            lo_im, hi_im = pairs_im[:, 0, :], pairs_im[:, 1, :]

            t_re = hi_re * c + hi_im * s
            t_im = hi_im * c - hi_re * s
            hi_re[...] = lo_re - t_re
            hi_im[...] = lo_im - t_im
            lo_re += t_re
            lo_im += t_im
            if hook is not None:
                hook(stage_checkpoint(stage), re, im)

        i, j = self._swap_i, self._swap_j
        re[i], re[j] = re[j], re[i]
        im[i], im[j] = im[j], im[i]
        if hook is not None:
            hook(REORDER_CHECKPOINT, re, im)

        re *= self._norm
        im *= self._norm
        return re, im

    @property
    def name(self) -> str:
        return f"table-driven-{self.fixed_size}"


for _size in TABLE_DRIVEN_SIZES:
    declare(
        size=_size,
        factory=partial(TableDrivenFFT, _size),
        priority=50,
        name=f"table-driven-{_size}",
        description=f"Table-driven FFT with precomputed twiddles and swap pairs (size {_size})",
        characteristics=TableDrivenFFT.characteristics,
    )
