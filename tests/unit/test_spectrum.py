"""Unit tests for the Spectrum result type."""

import math

import numpy as np
import pytest

from fftengine.core.spectrum import Spectrum


@pytest.fixture
def spectrum() -> Spectrum:
    return Spectrum([3.0, 0.0, -1.0, 0.0], [4.0, 2.0, 0.0, -1.0])


class TestSpectrum:
    """Tests for Spectrum construction and views."""

    def test_magnitudes_and_power(self, spectrum):
        np.testing.assert_allclose(spectrum.magnitudes(), [5.0, 2.0, 1.0, 1.0])
        np.testing.assert_allclose(spectrum.power_spectrum(), [25.0, 4.0, 1.0, 1.0])
        assert spectrum.magnitude_at(0) == 5.0

    def test_phases(self, spectrum):
        np.testing.assert_allclose(
            spectrum.phases(), [math.atan2(4, 3), math.pi / 2, math.pi, -math.pi / 2]
        )
        assert spectrum.phase_at(1) == pytest.approx(math.pi / 2)

    def test_negative_zero_imag_phase_is_pi(self):
        """Test a negative real bin with -0.0 imaginary part reports +pi."""
        spectrum = Spectrum([-1.0, -2.0], [-0.0, 0.0])

        np.testing.assert_array_equal(spectrum.phases(), [math.pi, math.pi])
        assert spectrum.phase_at(0) == math.pi

    def test_per_bin_accessors(self, spectrum):
        assert spectrum.real_at(2) == -1.0
        assert spectrum.imag_at(3) == -1.0
        assert spectrum[0] == complex(3.0, 4.0)
        assert len(spectrum) == 4

    @pytest.mark.parametrize("index", [-1, 4])
    def test_index_out_of_range(self, spectrum, index):
        with pytest.raises(IndexError):
            spectrum.magnitude_at(index)

    def test_interleaved_round_trip(self, spectrum):
        flat = spectrum.interleaved()
        np.testing.assert_array_equal(flat[:4], [3.0, 4.0, 0.0, 2.0])
        assert Spectrum.from_interleaved(flat) == spectrum

    def test_from_interleaved_rejects_odd_length(self):
        with pytest.raises(ValueError):
            Spectrum.from_interleaved([1.0, 2.0, 3.0])

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            Spectrum([1.0, 2.0], [1.0])

    def test_immutable(self, spectrum):
        """Test bins cannot be changed after construction."""
        with pytest.raises(ValueError):
            spectrum.real[0] = 0.0
        with pytest.raises(AttributeError):
            spectrum.real = np.zeros(4)

    def test_copies_input(self):
        re = np.array([1.0, 2.0])
        spectrum = Spectrum(re, np.zeros(2))
        re[0] = 100.0
        assert spectrum.real_at(0) == 1.0

    def test_complex_conversion(self, spectrum):
        values = spectrum.to_complex()
        assert values.dtype == np.complex128
        assert Spectrum.from_complex(values) == spectrum

    def test_repr(self, spectrum):
        assert repr(spectrum) == "Spectrum(size=4, first_magnitude=5.000)"

    def test_unhashable(self, spectrum):
        with pytest.raises(TypeError):
            hash(spectrum)
