"""Descriptive-statistics features of sensor frames."""

from __future__ import annotations

import math
from functools import cached_property

import numpy as np
from numpy.typing import ArrayLike
from scipy import stats


def magnitude(x: ArrayLike, y: ArrayLike, z: ArrayLike) -> np.ndarray:
    """Per-sample Euclidean norm of the three axes."""
    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    zs = np.asarray(z, dtype=float)
    return np.sqrt(xs * xs + ys * ys + zs * zs)


class DescriptiveStats:
    """
    Lazily computed statistics of a 1-D array.

    Each statistic is computed on first access and cached. Variance and
    standard deviation are sample statistics (``ddof=1``); skewness and
    kurtosis are the bias-corrected sample estimators, kurtosis reported as
    excess kurtosis. Percentiles use linear interpolation between ranks.

    Empty arrays report ``nan`` for every statistic except ``sum`` (0.0).
    Skewness and kurtosis are ``nan`` when the variance is zero.
    """

    def __init__(self, values: ArrayLike) -> None:
        self.values = np.array(values, dtype=float).reshape(-1)
        self.values.setflags(write=False)

    def __len__(self) -> int:
        return int(self.values.size)

    def _percentile(self, q: float) -> float:
        if self.values.size == 0:
            return math.nan
        return float(np.percentile(self.values, q))

    @cached_property
    def mean(self) -> float:
        if self.values.size == 0:
            return math.nan
        return float(np.mean(self.values))

    @cached_property
    def median(self) -> float:
        return self._percentile(50.0)

    @cached_property
    def variance(self) -> float:
        if self.values.size == 0:
            return math.nan
        if self.values.size == 1:
            return 0.0
        return float(np.var(self.values, ddof=1))

    @cached_property
    def standard_deviation(self) -> float:
        return math.sqrt(self.variance)

    @cached_property
    def min(self) -> float:
        if self.values.size == 0:
            return math.nan
        return float(np.min(self.values))

    @cached_property
    def max(self) -> float:
        if self.values.size == 0:
            return math.nan
        return float(np.max(self.values))

    @cached_property
    def range(self) -> float:
        return self.max - self.min

    @cached_property
    def iqr(self) -> float:
        return self._percentile(75.0) - self._percentile(25.0)

    @cached_property
    def skewness(self) -> float:
        if self.values.size < 3 or not self.variance > 0:
            return math.nan
        return float(stats.skew(self.values, bias=False))

    @cached_property
    def kurtosis(self) -> float:
        if self.values.size < 4 or not self.variance > 0:
            return math.nan
        return float(stats.kurtosis(self.values, fisher=True, bias=False))

    @cached_property
    def sum(self) -> float:
        return float(np.sum(self.values))


class FrameFeatures:
    """
    Statistics of one frame: per axis (``x``, ``y``, ``z``, ``t``) and of the
    per-sample vector ``magnitude``.
    """

    def __init__(self, t: ArrayLike, x: ArrayLike, y: ArrayLike, z: ArrayLike) -> None:
        self.t = DescriptiveStats(t)
        self.x = DescriptiveStats(x)
        self.y = DescriptiveStats(y)
        self.z = DescriptiveStats(z)
        self.magnitude = DescriptiveStats(magnitude(x, y, z))

    @classmethod
    def from_content(cls, content) -> FrameFeatures:
        """Build features from a :class:`~sensetone.core.frame.FrameContent`."""
        return cls(content.t, content.x, content.y, content.z)

    @property
    def time_span_ns(self) -> float:
        """Difference between the latest and earliest timestamp."""
        return self.t.range

    def summarize(self) -> str:
        """Multi-line summary of the magnitude statistics."""
        m = self.magnitude
        lines = [
            "Magnitude statistics summary:",
            f"Mean:                {m.mean}",
            f"Median:              {m.median}",
            f"Standard Deviation:  {m.standard_deviation}",
            f"Skewness:            {m.skewness}",
            f"Kurtosis:            {m.kurtosis}",
        ]
        return "\n".join(lines) + "\n"


__all__ = ["DescriptiveStats", "FrameFeatures", "magnitude"]
