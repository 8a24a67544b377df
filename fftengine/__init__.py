"""fftengine - radix-2 FFT with size-specialized implementations.

Usage:
    import fftengine

    spectrum = fftengine.transform([1, 2, 3, 4, 5, 6, 7, 8])
    spectrum.magnitudes()
    fftengine.resolve(8).name        # 'unrolled-8'

    x = fftengine.ifft(fftengine.fft(samples))

Every implementation computes the unitary DFT (scaled by 1/sqrt(N)) and
agrees with the generic reference to within 1e-9.
"""

from fftengine.config import EngineConfig, get_config, load_config, set_config
from fftengine.core.spectrum import Spectrum
from fftengine.errors import FFTError, InvalidSizeError, UnsupportedSizeError, ValidationFailure
from fftengine.registry import (
    ImplementationDescriptor,
    ImplementationRegistry,
    fft,
    get_registry,
    ifft,
    resolve,
    transform,
)
from fftengine.utils.log_levels import configure_logging

__version__ = "0.1.0"

__all__ = [
    "EngineConfig",
    "FFTError",
    "ImplementationDescriptor",
    "ImplementationRegistry",
    "InvalidSizeError",
    "Spectrum",
    "UnsupportedSizeError",
    "ValidationFailure",
    "configure_logging",
    "fft",
    "get_config",
    "get_registry",
    "ifft",
    "load_config",
    "resolve",
    "set_config",
    "transform",
]
