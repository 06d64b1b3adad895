"""Cubic-spline resampling of 3-axis readings onto a new time grid."""

from __future__ import annotations

from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike
from scipy.interpolate import CubicSpline


def resample_axis(target_t: ArrayLike, source_t: ArrayLike, values: ArrayLike) -> np.ndarray:
    """
    Evaluate a natural cubic spline through ``(source_t, values)`` at ``target_t``.

    Targets before the first source timestamp take the first value and targets
    after the last take the last value; the spline is never extrapolated.
    """
    src_t = np.asarray(source_t, dtype=np.float64).reshape(-1)
    src_v = np.asarray(values, dtype=np.float64).reshape(-1)
    dst_t = np.asarray(target_t, dtype=np.float64).reshape(-1)
    if src_t.size != src_v.size:
        raise ValueError("source_t and values must have the same length")
    if src_t.size == 0:
        raise ValueError("source must contain at least one sample")

    if src_t.size < 3 or np.any(np.diff(src_t) <= 0):
        # Spline needs >= 3 strictly increasing knots; fall back to linear.
        spline = None
    else:
        spline = CubicSpline(src_t, src_v, bc_type="natural", extrapolate=False)

    out = np.empty(dst_t.size, dtype=np.float64)
    below = dst_t < src_t[0]
    above = dst_t > src_t[-1]
    inside = ~(below | above)
    out[below] = src_v[0]
    out[above] = src_v[-1]
    if np.any(inside):
        if spline is not None:
            out[inside] = spline(dst_t[inside])
        else:
            out[inside] = np.interp(dst_t[inside], src_t, src_v)
    return out


def sync_to_time(
    target_t: ArrayLike,
    source_t: ArrayLike,
    x: ArrayLike,
    y: ArrayLike,
    z: ArrayLike,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Resample ``x``, ``y``, and ``z`` sampled at ``source_t`` onto ``target_t``.

    Returns
    -------
    tuple of np.ndarray
        The resampled x, y, and z arrays, each the length of ``target_t``.
    """
    return (
        resample_axis(target_t, source_t, x),
        resample_axis(target_t, source_t, y),
        resample_axis(target_t, source_t, z),
    )


def even_grid(min_t: float, max_t: float, count: int) -> np.ndarray:
    """Return ``count`` evenly spaced points spanning ``[min_t, max_t]`` inclusive."""
    if count < 2:
        raise ValueError(f"count must be >= 2, got {count}")
    step = (max_t - min_t) / (count - 1)
    return min_t + np.arange(count, dtype=np.float64) * step


__all__ = ["resample_axis", "sync_to_time", "even_grid"]
