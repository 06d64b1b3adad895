"""Filtering and smoothing helpers."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike
from scipy import signal

SMOOTHING_MODES = ("rectangular", "triangular")


def _check_rate(sample_rate_hz: float) -> float:
    rate = float(sample_rate_hz)
    if not np.isfinite(rate) or rate <= 0:
        raise ValueError(f"sample_rate_hz must be a finite value > 0, got {sample_rate_hz}")
    return rate


def _check_cutoff(cutoff_hz: float, nyquist: float, name: str = "cutoff_hz") -> float:
    cutoff = float(cutoff_hz)
    if cutoff <= 0:
        raise ValueError(f"{name} must be > 0, got {cutoff_hz}")
    if cutoff >= nyquist:
        raise ValueError(f"{name} must be < Nyquist ({nyquist:.3f} Hz), got {cutoff_hz}")
    return cutoff


def _apply_sos(sos: np.ndarray, data: ArrayLike, axis: int) -> np.ndarray:
    data_arr = np.asarray(data, dtype=float)
    return signal.sosfilt(sos, data_arr, axis=axis)


def butter_lowpass(
    data: ArrayLike,
    cutoff_hz: float,
    sample_rate_hz: float,
    order: int = 4,
    *,
    axis: int = -1,
) -> np.ndarray:
    """
    Apply a causal Butterworth low-pass filter.

    Parameters
    ----------
    data:
        Input data (array-like). Filtering is applied along `axis`.
    cutoff_hz:
        Cutoff frequency in Hz (0 < cutoff_hz < sample_rate_hz / 2).
    sample_rate_hz:
        Sampling rate in Hz. Must be > 0.
    order:
        Filter order (default: 4).
    axis:
        Axis along which to filter (default: last axis).

    Returns
    -------
    np.ndarray
        Filtered data with the same shape as the input.
    """
    nyquist = 0.5 * _check_rate(sample_rate_hz)
    cutoff = _check_cutoff(cutoff_hz, nyquist)
    sos = signal.butter(order, cutoff / nyquist, btype="low", output="sos")
    return _apply_sos(sos, data, axis)


def butter_highpass(
    data: ArrayLike,
    cutoff_hz: float,
    sample_rate_hz: float,
    order: int = 4,
    *,
    axis: int = -1,
) -> np.ndarray:
    """
    Apply a causal Butterworth high-pass filter.

    Frequencies below ``cutoff_hz`` are attenuated. Arguments follow
    :func:`butter_lowpass`.
    """
    nyquist = 0.5 * _check_rate(sample_rate_hz)
    cutoff = _check_cutoff(cutoff_hz, nyquist)
    sos = signal.butter(order, cutoff / nyquist, btype="high", output="sos")
    return _apply_sos(sos, data, axis)


def butter_bandpass(
    data: ArrayLike,
    low_hz: float,
    high_hz: float,
    sample_rate_hz: float,
    order: int = 4,
    *,
    axis: int = -1,
) -> np.ndarray:
    """
    Apply a causal Butterworth band-pass filter keeping ``low_hz``..``high_hz``.
    """
    nyquist = 0.5 * _check_rate(sample_rate_hz)
    low = _check_cutoff(low_hz, nyquist, "low_hz")
    high = _check_cutoff(high_hz, nyquist, "high_hz")
    if low >= high:
        raise ValueError(f"low_hz must be < high_hz, got {low_hz} >= {high_hz}")
    sos = signal.butter(order, [low / nyquist, high / nyquist], btype="band", output="sos")
    return _apply_sos(sos, data, axis)


def moving_average(data: ArrayLike, window: int = 7, mode: str = "rectangular") -> np.ndarray:
    """
    Smooth a 1-D signal with a moving average over fully covered windows only.

    ``"rectangular"`` is a simple moving average of ``window`` points.
    ``"triangular"`` runs two moving averages of ``(window + 1) // 2`` points
    back to back. Either way the output is ``window - 1`` samples shorter than
    the input for odd windows.
    """
    arr = np.asarray(data, dtype=float).reshape(-1)
    window = int(window)
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")
    if mode == "rectangular":
        passes = [window]
    elif mode == "triangular":
        half = (window + 1) // 2
        passes = [half, half]
    else:
        raise ValueError(f"mode must be one of {SMOOTHING_MODES}, got {mode!r}")

    out = arr
    for width in passes:
        if out.size < width:
            return np.empty(0, dtype=float)
        kernel = np.full(width, 1.0 / width)
        out = np.convolve(out, kernel, mode="valid")
    return out
