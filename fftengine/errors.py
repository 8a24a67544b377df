"""Exception types raised by the transform engine."""

from __future__ import annotations


class FFTError(Exception):
    """Base class for every error raised by fftengine."""


class InvalidSizeError(FFTError, ValueError):
    """Input length is not a power of two, or real/imag lengths differ."""

    def __init__(self, message: str, *, size: int | None = None, imag_size: int | None = None):
        super().__init__(message)
        self.size = size
        self.imag_size = imag_size


class UnsupportedSizeError(FFTError, ValueError):
    """A fixed-size implementation was handed a signal of another length."""

    def __init__(self, supported: int, got: int):
        super().__init__(f"Implementation supports size {supported} only, got {got}")
        self.supported = supported
        self.got = got


class ValidationFailure(FFTError, AssertionError):
    """A candidate implementation diverged from the reference."""

    def __init__(self, implementation: str, checkpoint: str, error: float, tolerance: float):
        super().__init__(
            f"{implementation} diverged at '{checkpoint}': "
            f"max error {error:.3e} exceeds tolerance {tolerance:.1e}"
        )
        self.implementation = implementation
        self.checkpoint = checkpoint
        self.error = error
        self.tolerance = tolerance
