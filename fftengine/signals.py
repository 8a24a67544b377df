"""Signal generation and padding helpers.

Used by the validation battery and handy for callers that need to bring
arbitrary-length data to a power-of-two size before transforming it.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from fftengine.core.bitreverse import is_power_of_two
from fftengine.typing import NDArrayFloat, SignalLike

SIGNAL_KINDS = ("impulse", "dc", "sine", "cosine", "mixed", "random")

__all__ = [
    "SIGNAL_KINDS",
    "generate_multi_tone",
    "generate_sine_wave",
    "generate_test_signal",
    "is_power_of_two",
    "next_power_of_two",
    "zero_pad_to_power_of_two",
]


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 0)."""
    if n <= 1:
        return 1
    return 1 << (int(n) - 1).bit_length()


def zero_pad_to_power_of_two(signal: SignalLike) -> NDArrayFloat:
    """Copy ``signal`` into a zero-filled buffer of the next power-of-two length."""
    data = np.asarray(signal, dtype=np.float64)
    if data.ndim != 1:
        raise ValueError(f"Signal must be 1-dimensional, got shape {data.shape}")
    padded = np.zeros(next_power_of_two(data.size), dtype=np.float64)
    padded[: data.size] = data
    return padded


def generate_multi_tone(
    size: int,
    sample_rate: float,
    frequencies: Sequence[float],
    amplitudes: Sequence[float] | None = None,
) -> NDArrayFloat:
    """Sum of sines sampled at ``sample_rate``.

    Args:
        size: Number of samples
        sample_rate: Sample rate in Hz
        frequencies: Tone frequencies in Hz
        amplitudes: Per-tone amplitudes (default 1.0 each)
    """
    if amplitudes is None:
        amplitudes = [1.0] * len(frequencies)
    if len(amplitudes) != len(frequencies):
        raise ValueError(
            f"Got {len(frequencies)} frequencies but {len(amplitudes)} amplitudes"
        )
    t = np.arange(size, dtype=np.float64) / sample_rate
    signal = np.zeros(size, dtype=np.float64)
    for freq, amp in zip(frequencies, amplitudes):
        signal += amp * np.sin(2 * np.pi * freq * t)
    return signal


def generate_sine_wave(size: int, frequency: float, sample_rate: float) -> NDArrayFloat:
    return generate_multi_tone(size, sample_rate, [frequency], [1.0])


def generate_test_signal(size: int, kind: str, seed: int = 42) -> NDArrayFloat:
    """Generate one of the standard test signals.

    Kinds: impulse (1 at index 0), dc (all ones), sine (5 cycles),
    cosine (3 cycles), mixed (5, 10 and 15 cycles at 1, 0.5, 0.25) and
    random (seeded standard normal).

    Raises:
        ValueError: For an unknown kind
    """
    n = np.arange(size, dtype=np.float64)
    key = kind.lower()
    if key == "impulse":
        signal = np.zeros(size, dtype=np.float64)
        if size > 0:
            signal[0] = 1.0
        return signal
    if key == "dc":
        return np.ones(size, dtype=np.float64)
    if key == "sine":
        return np.sin(2.0 * np.pi * 5 * n / size)
    if key == "cosine":
        return np.cos(2.0 * np.pi * 3 * n / size)
    if key == "mixed":
        return (
            np.sin(2.0 * np.pi * 5 * n / size)
            + 0.5 * np.cos(2.0 * np.pi * 10 * n / size)
            + 0.25 * np.sin(2.0 * np.pi * 15 * n / size)
        )
    if key == "random":
        return np.random.default_rng(seed).standard_normal(size)
    raise ValueError(f"Unknown signal type: {kind}")
