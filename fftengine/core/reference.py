"""Generic radix-2 Cooley-Tukey FFT - the reference implementation.

Decimation in frequency, iterative, in place on a private copy:

1. For stage l = 1..log2(N) the signal is split into blocks of width
   2*n2 (n2 = N / 2**l). Butterfly (k, k + n2) rotates the upper operand
   by the twiddle with index p = bitreverse(k >> nu1, nu) and combines
   ``upper = lower - rotated``, ``lower = lower + rotated``.
2. Every index i is swapped with its bit reversal r(i) when r(i) > i.
3. The output is scaled by 1/sqrt(N).

All butterflies of a block share one twiddle index, so each block is
processed as a single numpy slice operation.

Forward uses the kernel exp(+2j*pi*k*n/N), so the upper operand is rotated
by exp(+i*angle); inverse uses exp(-2j*pi*k*n/N). In numpy terms forward
equals ``numpy.fft.ifft(x, norm="ortho")`` and inverse equals
``numpy.fft.fft(x, norm="ortho")``.

Every size-specialized variant must agree with this module to within
1e-9 at every checkpoint.
"""

from __future__ import annotations

import math

import numpy as np

from fftengine.core.base import FFTImplementation, CheckpointHook, REORDER_CHECKPOINT, stage_checkpoint
from fftengine.core.bitreverse import bit_reverse, log2_size
from fftengine.core.twiddle import table_for
from fftengine.typing import NDArrayFloat


def dif_fft(
    re: NDArrayFloat,
    im: NDArrayFloat,
    forward: bool,
    hook: CheckpointHook | None = None,
) -> tuple[NDArrayFloat, NDArrayFloat]:
    """Reference kernel. Transforms ``re``/``im`` in place and returns them.

    The buffers must be contiguous float64 arrays of the same power-of-two
    length; callers are expected to have validated and copied them.
    """
    n = re.size
    nu = log2_size(n)
    table = table_for(n)
    sign = -1.0 if forward else 1.0

    n2 = n // 2
    nu1 = nu - 1
    for stage in range(1, nu + 1):
        blocks = n // (2 * n2)
        first_k = np.arange(blocks, dtype=np.int64) * (2 * n2)
        p = bit_reverse(first_k >> nu1, nu)
        c = table.cos[p][:, np.newaxis]
        s = sign * table.sin[p][:, np.newaxis]

        pairs_re = re.reshape(blocks, 2, n2)
        pairs_im = im.reshape(blocks, 2, n2)
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
        nu1 -= 1
        n2 //= 2

    index = np.arange(n, dtype=np.int64)
    reversed_index = bit_reverse(index, nu)
    swap = reversed_index > index
    i, j = index[swap], reversed_index[swap]
    re[i], re[j] = re[j], re[i]
    im[i], im[j] = im[j], im[i]
    if hook is not None:
        hook(REORDER_CHECKPOINT, re, im)

    scale = 1.0 / math.sqrt(n)
    re *= scale
    im *= scale
    return re, im


class ReferenceFFT(FFTImplementation):
    """Generic FFT implementation (Cooley-Tukey algorithm)."""

    characteristics = ("generic", "reference-implementation", "fallback", "cooley-tukey")

    def _execute(
        self,
        re: NDArrayFloat,
        im: NDArrayFloat,
        forward: bool,
        hook: CheckpointHook | None,
    ) -> tuple[NDArrayFloat, NDArrayFloat]:
        return dif_fft(re, im, forward, hook)

    @property
    def name(self) -> str:
        return "reference"
