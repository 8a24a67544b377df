"""Transform building blocks: bit reversal, twiddle cache, result type, reference."""

from fftengine.core.base import FFTImplementation, prepare_signal
from fftengine.core.reference import ReferenceFFT, dif_fft
from fftengine.core.spectrum import Spectrum
from fftengine.core.twiddle import TwiddleTable, table_for

__all__ = [
    "FFTImplementation",
    "ReferenceFFT",
    "Spectrum",
    "TwiddleTable",
    "dif_fft",
    "prepare_signal",
    "table_for",
]
