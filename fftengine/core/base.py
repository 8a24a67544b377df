"""Base class for FFT implementations.

Every implementation (the generic reference and each size-specialized
variant) exposes the same two entry points:

- ``transform(real, imag, forward)``: compute the unitary DFT, return a Spectrum
- ``staged(real, imag, forward)``: the same computation, returning the
  intermediate state after each stage for differential validation

Subclasses only provide ``_execute``, which works in place on its own copy
of the input and reports intermediate states through an optional hook.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Sequence

import numpy as np

from fftengine.core.bitreverse import is_power_of_two
from fftengine.core.spectrum import Spectrum
from fftengine.errors import InvalidSizeError, UnsupportedSizeError
from fftengine.typing import NDArrayFloat, SignalLike

# (checkpoint name, real parts, imaginary parts)
Checkpoint = tuple[str, NDArrayFloat, NDArrayFloat]
CheckpointHook = Callable[[str, Any, Any], None]

FINAL_CHECKPOINT = "final"
REORDER_CHECKPOINT = "reorder"


def stage_checkpoint(stage: int) -> str:
    return f"stage {stage}"


def prepare_signal(
    real: SignalLike,
    imag: SignalLike | None = None,
) -> tuple[NDArrayFloat, NDArrayFloat]:
    """Copy a signal into fresh float64 work buffers.

    Raises:
        InvalidSizeError: If the buffers are not 1-D, differ in length, or
            the length is not a power of two
    """
    re = np.array(real, dtype=np.float64, copy=True)
    if re.ndim != 1:
        raise InvalidSizeError(f"Signal must be 1-dimensional, got shape {re.shape}", size=re.size)
    if imag is None:
        im = np.zeros_like(re)
    else:
        im = np.array(imag, dtype=np.float64, copy=True)
        if im.ndim != 1 or im.size != re.size:
            raise InvalidSizeError(
                f"Real and imaginary arrays must have same length ({re.size} != {im.size})",
                size=re.size,
                imag_size=im.size,
            )
    if not is_power_of_two(re.size):
        raise InvalidSizeError(f"Array length must be a power of 2, got: {re.size}", size=re.size)
    return re, im


class FFTImplementation(ABC):
    """Abstract base class for radix-2 FFT implementations.

    Attributes:
        fixed_size: The only size this implementation accepts, or None if it
            handles any power of two
        characteristics: Short tags describing the optimization strategy
    """

    fixed_size: int | None = None
    characteristics: tuple[str, ...] = ()

    def transform(
        self,
        real: SignalLike,
        imag: SignalLike | None = None,
        forward: bool = True,
    ) -> Spectrum:
        """Compute the forward or inverse unitary DFT.

        Args:
            real: Real parts of the signal (length N, a power of two)
            imag: Imaginary parts, or None for a purely real signal
            forward: True for time -> frequency, False for the inverse

        Returns:
            Spectrum with N bins, scaled by 1/sqrt(N)

        Raises:
            InvalidSizeError: If N is not a power of two or lengths differ
            UnsupportedSizeError: If a fixed-size implementation gets another N
        """
        re, im = self._prepare(real, imag)
        re, im = self._execute(re, im, forward, None)
        return Spectrum(re, im)

    def staged(
        self,
        real: SignalLike,
        imag: SignalLike | None = None,
        forward: bool = True,
    ) -> list[Checkpoint]:
        """Run the transform and capture every intermediate checkpoint.

        Checkpoints are named ``"stage 1"`` .. ``"stage log2(N)"``,
        ``"reorder"`` and ``"final"``, in that order.
        """
        checkpoints: list[Checkpoint] = []

        def hook(name: str, re: Any, im: Any) -> None:
            checkpoints.append(
                (name, np.array(re, dtype=np.float64), np.array(im, dtype=np.float64))
            )

        re, im = self._prepare(real, imag)
        re, im = self._execute(re, im, forward, hook)
        hook(FINAL_CHECKPOINT, re, im)
        return checkpoints

    def supports_size(self, size: int) -> bool:
        if self.fixed_size is None:
            return is_power_of_two(size)
        return size == self.fixed_size

    def _prepare(
        self, real: SignalLike, imag: SignalLike | None
    ) -> tuple[NDArrayFloat, NDArrayFloat]:
        if self.fixed_size is not None:
            n_real = len(real)
            if imag is not None and len(imag) != n_real:
                raise InvalidSizeError(
                    f"Real and imaginary arrays must have same length ({n_real} != {len(imag)})",
                    size=n_real,
                    imag_size=len(imag),
                )
            if n_real != self.fixed_size:
                raise UnsupportedSizeError(self.fixed_size, n_real)
        return prepare_signal(real, imag)

    @abstractmethod
    def _execute(
        self,
        re: NDArrayFloat,
        im: NDArrayFloat,
        forward: bool,
        hook: CheckpointHook | None,
    ) -> tuple[Sequence[float] | NDArrayFloat, Sequence[float] | NDArrayFloat]:
        """Transform the work buffers and return the scaled result.

        The buffers are private copies and may be modified in place. When
        ``hook`` is given it must be called after every stage and after the
        reorder pass, before scaling.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return implementation identifier (e.g. 'reference', 'unrolled-8')."""

    @property
    def description(self) -> str:
        return self.__class__.__doc__.strip().splitlines()[0] if self.__class__.__doc__ else self.name

    def __repr__(self) -> str:
        size = self.fixed_size if self.fixed_size is not None else "any"
        return f"{self.__class__.__name__}(size={size})"
