"""Immutable transform result."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from fftengine.typing import NDArrayComplex, NDArrayFloat, SignalLike


def _frozen_copy(values: SignalLike) -> NDArrayFloat:
    arr = np.array(values, dtype=np.float64, copy=True).reshape(-1)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class Spectrum:
    """N complex frequency bins produced by a transform.

    Bins are stored as two read-only float64 arrays. Magnitude, phase and
    power views are recomputed on every call.

    Attributes:
        real: Real part of each bin
        imag: Imaginary part of each bin
    """

    real: NDArrayFloat
    imag: NDArrayFloat

    def __init__(self, real: SignalLike, imag: SignalLike) -> None:
        real_arr = _frozen_copy(real)
        imag_arr = _frozen_copy(imag)
        if real_arr.size != imag_arr.size:
            raise ValueError(
                f"Real and imaginary parts must have the same length "
                f"({real_arr.size} != {imag_arr.size})"
            )
        object.__setattr__(self, "real", real_arr)
        object.__setattr__(self, "imag", imag_arr)

    @classmethod
    def from_interleaved(cls, values: SignalLike) -> Spectrum:
        """Build a spectrum from [re0, im0, re1, im1, ...]."""
        flat = np.asarray(values, dtype=np.float64).reshape(-1)
        if flat.size % 2 != 0:
            raise ValueError("Interleaved result array length must be even")
        return cls(flat[0::2], flat[1::2])

    @classmethod
    def from_complex(cls, values: NDArrayComplex) -> Spectrum:
        arr = np.asarray(values, dtype=np.complex128).reshape(-1)
        return cls(arr.real, arr.imag)

    @property
    def size(self) -> int:
        return int(self.real.size)

    def __len__(self) -> int:
        return self.size

    def __getitem__(self, index: int) -> complex:
        return complex(self.real[index], self.imag[index])

    def interleaved(self) -> NDArrayFloat:
        out = np.empty(2 * self.size, dtype=np.float64)
        out[0::2] = self.real
        out[1::2] = self.imag
        return out

    def to_complex(self) -> NDArrayComplex:
        return self.real + 1j * self.imag

    def magnitudes(self) -> NDArrayFloat:
        return np.sqrt(self.real * self.real + self.imag * self.imag)

    def phases(self) -> NDArrayFloat:
        """Phase of each bin in radians, in (-pi, pi]."""
        # Adding 0.0 turns -0.0 into +0.0 so a negative real bin maps to pi
        return np.arctan2(self.imag + 0.0, self.real)

    def power_spectrum(self) -> NDArrayFloat:
        return self.real * self.real + self.imag * self.imag

    def real_at(self, index: int) -> float:
        return float(self.real[self._check_index(index)])

    def imag_at(self, index: int) -> float:
        return float(self.imag[self._check_index(index)])

    def magnitude_at(self, index: int) -> float:
        i = self._check_index(index)
        re, im = float(self.real[i]), float(self.imag[i])
        return math.sqrt(re * re + im * im)

    def phase_at(self, index: int) -> float:
        i = self._check_index(index)
        return float(np.arctan2(self.imag[i] + 0.0, self.real[i]))

    def _check_index(self, index: int) -> int:
        if index < 0 or index >= self.size:
            raise IndexError(f"Index {index} out of bounds for size {self.size}")
        return index

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Spectrum):
            return NotImplemented
        return bool(np.array_equal(self.real, other.real) and np.array_equal(self.imag, other.imag))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        first = self.magnitude_at(0) if self.size else 0.0
        return f"Spectrum(size={self.size}, first_magnitude={first:.3f})"
