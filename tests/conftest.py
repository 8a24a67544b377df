"""Shared pytest fixtures for fftengine tests."""

import numpy as np
import pytest

from fftengine.config import EngineConfig, set_config
from fftengine.registry import reset_registry


@pytest.fixture(autouse=True)
def isolated_engine():
    """Run every test against default config and a freshly built registry."""
    set_config(EngineConfig())
    reset_registry()
    yield
    set_config(None)
    reset_registry()


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator."""
    return np.random.default_rng(1234)


@pytest.fixture
def random_signal(rng):
    """Factory for complex random signals as (real, imag) pairs."""
    def _generate(size: int) -> tuple[np.ndarray, np.ndarray]:
        return rng.standard_normal(size), rng.standard_normal(size)

    return _generate


@pytest.fixture
def oracle():
    """Unitary DFT computed by scipy, used as an independent check.

    Forward transforms use the exp(+2j*pi*k*n/N) kernel, which is scipy's
    ifft under norm="ortho".
    """
    from scipy import fft as sp_fft

    def _transform(real, imag, forward: bool = True) -> np.ndarray:
        x = np.asarray(real, dtype=np.float64) + 1j * np.asarray(imag, dtype=np.float64)
        if forward:
            return sp_fft.ifft(x, norm="ortho")
        return sp_fft.fft(x, norm="ortho")

    return _transform
