"""Magnitude spectra for diagnostic reporting."""

from __future__ import annotations

from typing import Dict, Iterator, Mapping, Tuple

import numpy as np
from numpy.typing import ArrayLike

Spectrum = Tuple[np.ndarray, np.ndarray]


def compute_spectrum(signal: ArrayLike, sample_rate_hz: float) -> Spectrum:
    """
    Compute the one-sided magnitude spectrum of a real 1-D signal.

    Parameters
    ----------
    signal:
        1-D array-like input signal.
    sample_rate_hz:
        Sampling rate in Hz. Must be > 0.

    Returns
    -------
    freqs : np.ndarray
        Frequency of each bin in Hz.
    magnitude : np.ndarray
        Absolute value of the rFFT at each bin.
    """
    if not np.isfinite(sample_rate_hz) or sample_rate_hz <= 0:
        raise ValueError(f"sample_rate_hz must be a finite value > 0, got {sample_rate_hz}")

    arr = np.asarray(signal, dtype=float).reshape(-1)
    if arr.size == 0:
        raise ValueError("signal must contain at least one sample")

    magnitude = np.abs(np.fft.rfft(arr))
    freqs = np.fft.rfftfreq(arr.size, d=1.0 / float(sample_rate_hz))
    return freqs, magnitude


def axis_spectra(axes: Mapping[str, ArrayLike], sample_rate_hz: float) -> Dict[str, Spectrum]:
    """Return ``{axis: (freqs, magnitude)}`` for every axis in ``axes``."""
    return {name: compute_spectrum(values, sample_rate_hz) for name, values in axes.items()}


def iter_bins(spectra: Mapping[str, Spectrum]) -> Iterator[Tuple[str, int, float, float]]:
    """Flatten spectra into ``(axis, bin_index, frequency, magnitude)`` rows."""
    for name, (freqs, magnitude) in spectra.items():
        for index in range(freqs.size):
            yield name, index, float(freqs[index]), float(magnitude[index])
