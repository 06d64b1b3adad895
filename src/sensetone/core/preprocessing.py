"""Filtering, smoothing, and spectrum diagnostics for synchronized frames."""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

import numpy as np

from ..analysis import filters
from ..analysis.fft import axis_spectra, iter_bins
from .frame import FrameContent, SensorFrame
from .models import SampleWriter, SpectrumWriter

logger = logging.getLogger(__name__)

NS_PER_SECOND = 1_000_000_000


class FramePreprocessor:
    """
    Wraps one synchronized :class:`SensorFrame` and transforms its content.

    Every step replaces ``frame.content`` with a new :class:`FrameContent`;
    filters keep the timestamps, smoothing trims them to the shorter output.
    A filter that cannot be designed for the frame (zero time span, cutoff at
    or above Nyquist) is skipped with a warning so the frame passes through
    unchanged.
    """

    def __init__(self, frame: SensorFrame, *, name: str = "frame") -> None:
        self.frame = frame
        self.name = name

    @property
    def content(self) -> FrameContent:
        return self.frame.content

    def frame_frequency(self) -> float:
        """
        Sampling frequency in Hz: ``width / (t_last - t_first)`` with the span
        converted from nanoseconds to seconds.

        Returns ``nan`` when the frame spans no time.
        """
        t = self.content.t
        span_ns = float(t[-1] - t[0])
        if span_ns <= 0:
            return math.nan
        freq_per_ns = self.content.frame_width / span_ns
        logger.debug("%s: time between samples %.1f ns", self.name, 1.0 / freq_per_ns)
        return freq_per_ns * NS_PER_SECOND

    def _filter_axes(self, label: str, apply: Callable[[np.ndarray, float], np.ndarray]) -> None:
        rate = self.frame_frequency()
        c = self.content
        try:
            new_x = apply(c.x, rate)
            new_y = apply(c.y, rate)
            new_z = apply(c.z, rate)
        except ValueError as exc:
            logger.warning("%s: skipping %s filter (%s)", self.name, label, exc)
            return
        self.frame.content = FrameContent(c.frame_width, c.t, new_x, new_y, new_z)

    def low_pass(self, cutoff_hz: float, order: int = 4) -> None:
        """Butterworth low-pass: frequencies above ``cutoff_hz`` are attenuated."""
        self._filter_axes(
            "low-pass",
            lambda values, rate: filters.butter_lowpass(values, cutoff_hz, rate, order),
        )

    def high_pass(self, cutoff_min_hz: float, order: int = 4) -> None:
        """Butterworth high-pass: frequencies below ``cutoff_min_hz`` are attenuated."""
        self._filter_axes(
            "high-pass",
            lambda values, rate: filters.butter_highpass(values, cutoff_min_hz, rate, order),
        )

    def band_pass(self, low_hz: float, high_hz: float, order: int = 4) -> None:
        """Butterworth band-pass keeping ``low_hz``..``high_hz``."""
        self._filter_axes(
            "band-pass",
            lambda values, rate: filters.butter_bandpass(values, low_hz, high_hz, rate, order),
        )

    def smooth_by_moving_average(self, window: int = 7, mode: str = "rectangular") -> None:
        """
        Moving-average smoothing of every axis.

        The output loses the boundary samples; the timestamps kept are the
        centered subsequence, trimming the extra sample from the tail when the
        trim is uneven.
        """
        c = self.content
        new_x = filters.moving_average(c.x, window, mode)
        new_y = filters.moving_average(c.y, window, mode)
        new_z = filters.moving_average(c.z, window, mode)

        new_count = new_x.size
        start = (c.frame_width - new_count) // 2
        new_t = c.t[start : start + new_count]

        self.frame.content = FrameContent(new_count, new_t, new_x, new_y, new_z)
        self.frame.frame_width = new_count

    def fourier_transform(self, sink: Optional[SpectrumWriter]) -> None:
        """
        Report the magnitude spectrum of every axis to ``sink`` as
        ``(axis, bin_index, frequency, magnitude)`` rows. Frame content is
        left untouched. Does nothing without a sink.
        """
        if sink is None:
            return
        rate = self.frame_frequency()
        if not math.isfinite(rate):
            logger.warning("%s: skipping spectrum for frame without time span", self.name)
            return
        c = self.content
        # Bins are labelled using the rate rounded to whole Hz.
        spectra = axis_spectra({"x": c.x, "y": c.y, "z": c.z}, float(round(rate)) or rate)
        for axis, index, freq, mag in iter_bins(spectra):
            sink(axis, index, freq, mag)

    def for_each(self, fn: SampleWriter) -> None:
        """Call ``fn(t_ns, x, y, z)`` for every sample of the current content."""
        for t, x, y, z in self.content.samples():
            fn(t, x, y, z)


__all__ = ["FramePreprocessor", "NS_PER_SECOND"]
