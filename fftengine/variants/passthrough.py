"""Pass-through variants for the largest sizes (8192 .. 65536).

No specialization beats the vectorised reference stage loop at these sizes
yet, so these variants call the reference kernel directly. They exist so
each size has a declared owner that later work can replace.
"""

from __future__ import annotations

from functools import partial

from fftengine.core.base import FFTImplementation, CheckpointHook
from fftengine.core.reference import dif_fft
from fftengine.registry import declare
from fftengine.typing import NDArrayFloat

PASS_THROUGH_SIZES = (8192, 16384, 32768, 65536)


class PassThroughFFT(FFTImplementation):
    """Fixed-size FFT that delegates straight to the reference kernel."""

    characteristics = ("pass-through", "reference-kernel")

    def __init__(self, size: int) -> None:
        self.fixed_size = size

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
        return f"pass-through-{self.fixed_size}"


for _size in PASS_THROUGH_SIZES:
    declare(
        size=_size,
        factory=partial(PassThroughFFT, _size),
        priority=10,
        name=f"pass-through-{_size}",
        description=f"Delegates to the reference kernel (size {_size})",
        characteristics=PassThroughFFT.characteristics,
    )
