"""Fully unrolled FFTs for the smallest sizes (2, 4, 8, 16).

Every stage, butterfly and twiddle constant is written out; the final
bit-reversal is an explicit list of swaps. The kernels work on Python
floats held in lists, which beats numpy's per-call overhead at these sizes.

Twiddle rotation used throughout, with sg = -1 forward and +1 inverse:

    t_re = x_re * cos + sg * sin * x_im
    t_im = x_im * cos - sg * sin * x_re

The stage layout is identical to the reference, so the ``staged()``
checkpoints of both can be compared one to one.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from fftengine.core.base import FFTImplementation, CheckpointHook
from fftengine.registry import register
from fftengine.typing import NDArrayFloat

# cos/sin of pi/4, pi/8 and 3*pi/8
H = 0.7071067811865476
C1 = 0.9238795325112867
S1 = 0.3826834323650898


def _fft2(re: list[float], im: list[float], forward: bool, hook: CheckpointHook | None) -> None:
    tr = re[1]; ti = im[1]
    re[1] = re[0] - tr; im[1] = im[0] - ti
    re[0] += tr; im[0] += ti
    if hook is not None:
        hook("stage 1", re, im)
        hook("reorder", re, im)


def _fft4(re: list[float], im: list[float], forward: bool, hook: CheckpointHook | None) -> None:
    sg = -1.0 if forward else 1.0

    # Stage 1: span 2, W^0
    tr = re[2]; ti = im[2]
    re[2] = re[0] - tr; im[2] = im[0] - ti
    re[0] += tr; im[0] += ti
    tr = re[3]; ti = im[3]
    re[3] = re[1] - tr; im[3] = im[1] - ti
    re[1] += tr; im[1] += ti
    if hook is not None:
        hook("stage 1", re, im)

    # Stage 2: span 1, W^0 then W^1 (pi/2)
    tr = re[1]; ti = im[1]
    re[1] = re[0] - tr; im[1] = im[0] - ti
    re[0] += tr; im[0] += ti
    tr = sg * im[3]; ti = -sg * re[3]
    re[3] = re[2] - tr; im[3] = im[2] - ti
    re[2] += tr; im[2] += ti
    if hook is not None:
        hook("stage 2", re, im)

    re[1], re[2] = re[2], re[1]
    im[1], im[2] = im[2], im[1]
    if hook is not None:
        hook("reorder", re, im)


def _fft8(re: list[float], im: list[float], forward: bool, hook: CheckpointHook | None) -> None:
    sg = -1.0 if forward else 1.0
    sh = sg * H

    # Stage 1: span 4, W^0
    tr = re[4]; ti = im[4]
    re[4] = re[0] - tr; im[4] = im[0] - ti
    re[0] += tr; im[0] += ti
    tr = re[5]; ti = im[5]
    re[5] = re[1] - tr; im[5] = im[1] - ti
    re[1] += tr; im[1] += ti
    tr = re[6]; ti = im[6]
    re[6] = re[2] - tr; im[6] = im[2] - ti
    re[2] += tr; im[2] += ti
    tr = re[7]; ti = im[7]
    re[7] = re[3] - tr; im[7] = im[3] - ti
    re[3] += tr; im[3] += ti
    if hook is not None:
        hook("stage 1", re, im)

    # Stage 2: span 2, W^0 for block 0, pi/2 for block 1
    tr = re[2]; ti = im[2]
    re[2] = re[0] - tr; im[2] = im[0] - ti
    re[0] += tr; im[0] += ti
    tr = re[3]; ti = im[3]
    re[3] = re[1] - tr; im[3] = im[1] - ti
    re[1] += tr; im[1] += ti
    tr = sg * im[6]; ti = -sg * re[6]
    re[6] = re[4] - tr; im[6] = im[4] - ti
    re[4] += tr; im[4] += ti
    tr = sg * im[7]; ti = -sg * re[7]
    re[7] = re[5] - tr; im[7] = im[5] - ti
    re[5] += tr; im[5] += ti
    if hook is not None:
        hook("stage 2", re, im)

    # Stage 3: span 1, angles 0, pi/2, pi/4, 3pi/4
    tr = re[1]; ti = im[1]
    re[1] = re[0] - tr; im[1] = im[0] - ti
    re[0] += tr; im[0] += ti
    tr = sg * im[3]; ti = -sg * re[3]
    re[3] = re[2] - tr; im[3] = im[2] - ti
    re[2] += tr; im[2] += ti
    tr = H * re[5] + sh * im[5]; ti = H * im[5] - sh * re[5]
    re[5] = re[4] - tr; im[5] = im[4] - ti
    re[4] += tr; im[4] += ti
    tr = sh * im[7] - H * re[7]; ti = -H * im[7] - sh * re[7]
    re[7] = re[6] - tr; im[7] = im[6] - ti
    re[6] += tr; im[6] += ti
    if hook is not None:
        hook("stage 3", re, im)

    re[1], re[4] = re[4], re[1]
    im[1], im[4] = im[4], im[1]
    re[3], re[6] = re[6], re[3]
    im[3], im[6] = im[6], im[3]
    if hook is not None:
        hook("reorder", re, im)


def _fft16(re: list[float], im: list[float], forward: bool, hook: CheckpointHook | None) -> None:
    sg = -1.0 if forward else 1.0
    sh = sg * H
    sc1 = sg * C1
    ss1 = sg * S1

    # Stage 1: span 8, W^0
    tr = re[8]; ti = im[8]
    re[8] = re[0] - tr; im[8] = im[0] - ti
    re[0] += tr; im[0] += ti
    tr = re[9]; ti = im[9]
    re[9] = re[1] - tr; im[9] = im[1] - ti
    re[1] += tr; im[1] += ti
    tr = re[10]; ti = im[10]
    re[10] = re[2] - tr; im[10] = im[2] - ti
    re[2] += tr; im[2] += ti
    tr = re[11]; ti = im[11]
    re[11] = re[3] - tr; im[11] = im[3] - ti
    re[3] += tr; im[3] += ti
    tr = re[12]; ti = im[12]
    re[12] = re[4] - tr; im[12] = im[4] - ti
    re[4] += tr; im[4] += ti
    tr = re[13]; ti = im[13]
    re[13] = re[5] - tr; im[13] = im[5] - ti
    re[5] += tr; im[5] += ti
    tr = re[14]; ti = im[14]
    re[14] = re[6] - tr; im[14] = im[6] - ti
    re[6] += tr; im[6] += ti
    tr = re[15]; ti = im[15]
    re[15] = re[7] - tr; im[15] = im[7] - ti
    re[7] += tr; im[7] += ti
    if hook is not None:
        hook("stage 1", re, im)

    # Stage 2: span 4, W^0 for block 0, pi/2 for block 1
    tr = re[4]; ti = im[4]
    re[4] = re[0] - tr; im[4] = im[0] - ti
    re[0] += tr; im[0] += ti
    tr = re[5]; ti = im[5]
    re[5] = re[1] - tr; im[5] = im[1] - ti
    re[1] += tr; im[1] += ti
    tr = re[6]; ti = im[6]
    re[6] = re[2] - tr; im[6] = im[2] - ti
    re[2] += tr; im[2] += ti
    tr = re[7]; ti = im[7]
    re[7] = re[3] - tr; im[7] = im[3] - ti
    re[3] += tr; im[3] += ti
    tr = sg * im[12]; ti = -sg * re[12]
    re[12] = re[8] - tr; im[12] = im[8] - ti
    re[8] += tr; im[8] += ti
    tr = sg * im[13]; ti = -sg * re[13]
    re[13] = re[9] - tr; im[13] = im[9] - ti
    re[9] += tr; im[9] += ti
    tr = sg * im[14]; ti = -sg * re[14]
    re[14] = re[10] - tr; im[14] = im[10] - ti
    re[10] += tr; im[10] += ti
    tr = sg * im[15]; ti = -sg * re[15]
    re[15] = re[11] - tr; im[15] = im[11] - ti
    re[11] += tr; im[11] += ti
    if hook is not None:
        hook("stage 2", re, im)

    # Stage 3: span 2, angles 0, pi/2, pi/4, 3pi/4
    tr = re[2]; ti = im[2]
    re[2] = re[0] - tr; im[2] = im[0] - ti
    re[0] += tr; im[0] += ti
    tr = re[3]; ti = im[3]
    re[3] = re[1] - tr; im[3] = im[1] - ti
    re[1] += tr; im[1] += ti
    tr = sg * im[6]; ti = -sg * re[6]
    re[6] = re[4] - tr; im[6] = im[4] - ti
    re[4] += tr; im[4] += ti
    tr = sg * im[7]; ti = -sg * re[7]
    re[7] = re[5] - tr; im[7] = im[5] - ti
    re[5] += tr; im[5] += ti
    tr = H * re[10] + sh * im[10]; ti = H * im[10] - sh * re[10]
    re[10] = re[8] - tr; im[10] = im[8] - ti
    re[8] += tr; im[8] += ti
    tr = H * re[11] + sh * im[11]; ti = H * im[11] - sh * re[11]
    re[11] = re[9] - tr; im[11] = im[9] - ti
    re[9] += tr; im[9] += ti
    tr = sh * im[14] - H * re[14]; ti = -H * im[14] - sh * re[14]
    re[14] = re[12] - tr; im[14] = im[12] - ti
    re[12] += tr; im[12] += ti
    tr = sh * im[15] - H * re[15]; ti = -H * im[15] - sh * re[15]
    re[15] = re[13] - tr; im[15] = im[13] - ti
    re[13] += tr; im[13] += ti
    if hook is not None:
        hook("stage 3", re, im)

    # Stage 4: span 1, angles 0, pi/2, pi/4, 3pi/4, pi/8, 5pi/8, 3pi/8, 7pi/8
    tr = re[1]; ti = im[1]
    re[1] = re[0] - tr; im[1] = im[0] - ti
    re[0] += tr; im[0] += ti
    tr = sg * im[3]; ti = -sg * re[3]
    re[3] = re[2] - tr; im[3] = im[2] - ti
    re[2] += tr; im[2] += ti
    tr = H * re[5] + sh * im[5]; ti = H * im[5] - sh * re[5]
    re[5] = re[4] - tr; im[5] = im[4] - ti
    re[4] += tr; im[4] += ti
    tr = sh * im[7] - H * re[7]; ti = -H * im[7] - sh * re[7]
    re[7] = re[6] - tr; im[7] = im[6] - ti
    re[6] += tr; im[6] += ti
    tr = C1 * re[9] + ss1 * im[9]; ti = C1 * im[9] - ss1 * re[9]
    re[9] = re[8] - tr; im[9] = im[8] - ti
    re[8] += tr; im[8] += ti
    tr = sc1 * im[11] - S1 * re[11]; ti = -S1 * im[11] - sc1 * re[11]
    re[11] = re[10] - tr; im[11] = im[10] - ti
    re[10] += tr; im[10] += ti
    tr = S1 * re[13] + sc1 * im[13]; ti = S1 * im[13] - sc1 * re[13]
    re[13] = re[12] - tr; im[13] = im[12] - ti
    re[12] += tr; im[12] += ti
    tr = ss1 * im[15] - C1 * re[15]; ti = -C1 * im[15] - ss1 * re[15]
    re[15] = re[14] - tr; im[15] = im[14] - ti
    re[14] += tr; im[14] += ti
    if hook is not None:
        hook("stage 4", re, im)

    re[1], re[8] = re[8], re[1]
    im[1], im[8] = im[8], im[1]
    re[2], re[4] = re[4], re[2]
    im[2], im[4] = im[4], im[2]
    re[3], re[12] = re[12], re[3]
    im[3], im[12] = im[12], im[3]
    re[5], re[10] = re[10], re[5]
    im[5], im[10] = im[10], im[5]
    re[7], re[14] = re[14], re[7]
    im[7], im[14] = im[14], im[7]
    re[11], re[13] = re[13], re[11]
    im[11], im[13] = im[13], im[11]
    if hook is not None:
        hook("reorder", re, im)


class UnrolledFFT(FFTImplementation):
    """Fully unrolled FFT with hardcoded twiddles and inline bit reversal."""

    characteristics = ("complete-unrolling", "hardcoded-twiddles", "inline-bit-reversal")
    _kernel: Any = None

    def __init__(self) -> None:
        self._norm = 1.0 / math.sqrt(self.fixed_size)

    def _execute(
        self,
        re: NDArrayFloat,
        im: NDArrayFloat,
        forward: bool,
        hook: CheckpointHook | None,
    ) -> tuple[NDArrayFloat, NDArrayFloat]:
        re_list = re.tolist()
        im_list = im.tolist()
        self._kernel(re_list, im_list, forward, hook)
        return np.array(re_list) * self._norm, np.array(im_list) * self._norm

    @property
    def name(self) -> str:
        return f"unrolled-{self.fixed_size}"


@register(size=2, priority=50, name="unrolled-2")
class UnrolledFFT2(UnrolledFFT):
    """Unrolled 2-point FFT (single butterfly)."""

    fixed_size = 2
    _kernel = staticmethod(_fft2)


@register(size=4, priority=50, name="unrolled-4")
class UnrolledFFT4(UnrolledFFT):
    """Unrolled 4-point FFT (2 stages, one swap)."""

    fixed_size = 4
    _kernel = staticmethod(_fft4)


@register(size=8, priority=50, name="unrolled-8")
class UnrolledFFT8(UnrolledFFT):
    """Unrolled 8-point FFT (3 stages, swaps (1,4) and (3,6))."""

    fixed_size = 8
    _kernel = staticmethod(_fft8)


@register(size=16, priority=50, name="unrolled-16")
class UnrolledFFT16(UnrolledFFT):
    """Unrolled 16-point FFT (4 stages, six swaps)."""

    fixed_size = 16
    _kernel = staticmethod(_fft16)
