from __future__ import annotations

import logging
from typing import List, Tuple

import numpy as np
import pytest

from sensetone.analysis.filters import moving_average
from sensetone.core.frame import SensorFrame
from sensetone.core.preprocessing import FramePreprocessor


def _frame(t_ns: np.ndarray, x: np.ndarray, y=None, z=None) -> SensorFrame:
    y = np.zeros_like(x) if y is None else y
    z = np.zeros_like(x) if z is None else z
    frame = SensorFrame(t_ns.size)
    for values in zip(t_ns, x, y, z):
        frame.append(*map(float, values))
    return frame


def _timestamps(n: int, step_ms: float, start_ns: float = 5_000_000_000.0) -> np.ndarray:
    return start_ns + np.arange(n) * step_ms * 1_000_000.0


def test_frame_frequency_uses_width_over_span() -> None:
    t = _timestamps(20, 20.0)
    pre = FramePreprocessor(_frame(t, np.zeros(20)))

    # 20 samples over 380 ms
    assert pre.frame_frequency() == pytest.approx(20 / 0.38)


def test_frame_frequency_of_zero_span_is_nan() -> None:
    pre = FramePreprocessor(SensorFrame(10))
    assert np.isnan(pre.frame_frequency())


def test_low_pass_removes_fast_oscillation_and_keeps_timestamps() -> None:
    n = 64
    t = _timestamps(n, 10.0)
    seconds = (t - t[0]) / 1e9
    x = np.sin(2 * np.pi * 40.0 * seconds)
    frame = _frame(t, x, y=x.copy(), z=x.copy())
    pre = FramePreprocessor(frame)

    pre.low_pass(5.0)

    np.testing.assert_array_equal(pre.content.t, t)
    assert np.max(np.abs(pre.content.x[n // 2 :])) < 0.05
    np.testing.assert_allclose(pre.content.x, pre.content.y)


def test_high_pass_keeps_fast_oscillation() -> None:
    n = 64
    t = _timestamps(n, 10.0)
    seconds = (t - t[0]) / 1e9
    x = np.sin(2 * np.pi * 40.0 * seconds)
    pre = FramePreprocessor(_frame(t, x))

    pre.high_pass(5.0)

    assert np.max(np.abs(pre.content.x[n // 2 :])) > 0.8
    assert pre.content.frame_width == n


def test_band_pass_preserves_shape() -> None:
    t = _timestamps(20, 10.0)
    pre = FramePreprocessor(_frame(t, np.random.default_rng(3).normal(size=20)))

    pre.band_pass(5.0, 20.0)

    assert pre.content.x.shape == (20,)
    assert np.all(np.isfinite(pre.content.x))


def test_filters_skip_degenerate_frames(caplog: pytest.LogCaptureFixture) -> None:
    frame = SensorFrame(20)
    frame.zero_fill()
    before = frame.content.copy()
    pre = FramePreprocessor(frame, name="accel")

    with caplog.at_level(logging.WARNING):
        pre.high_pass(5.0)
        pre.low_pass(10.0)

    assert pre.content == before
    assert "skipping high-pass" in caplog.text


def test_cutoff_above_nyquist_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    t = _timestamps(20, 20.0)  # ~52 Hz, Nyquist ~26 Hz
    x = np.arange(20, dtype=float)
    pre = FramePreprocessor(_frame(t, x))

    with caplog.at_level(logging.WARNING):
        pre.low_pass(40.0)

    np.testing.assert_array_equal(pre.content.x, x)
    assert "Nyquist" in caplog.text


def test_rectangular_smoothing_trims_centered_timestamps() -> None:
    t = _timestamps(20, 20.0)
    x = np.arange(20, dtype=float)
    pre = FramePreprocessor(_frame(t, x, y=np.full(20, 2.0)))

    pre.smooth_by_moving_average(7)

    assert pre.content.frame_width == 14
    assert pre.frame.frame_width == 14
    np.testing.assert_array_equal(pre.content.t, t[3:17])
    np.testing.assert_allclose(pre.content.x, np.arange(3, 17, dtype=float))
    np.testing.assert_allclose(pre.content.y, 2.0)


def test_triangular_smoothing_has_same_footprint() -> None:
    t = _timestamps(20, 20.0)
    x = np.arange(20, dtype=float)
    pre = FramePreprocessor(_frame(t, x))

    pre.smooth_by_moving_average(7, mode="triangular")

    assert pre.content.frame_width == 14
    np.testing.assert_allclose(pre.content.x, np.arange(3, 17, dtype=float))


def test_uneven_trim_drops_extra_sample_from_tail() -> None:
    t = _timestamps(20, 20.0)
    pre = FramePreprocessor(_frame(t, np.arange(20, dtype=float)))

    pre.smooth_by_moving_average(6)

    assert pre.content.frame_width == 15
    np.testing.assert_array_equal(pre.content.t, t[2:17])


def test_moving_average_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError):
        moving_average(np.arange(10.0), 3, mode="gaussian")


def test_fourier_transform_reports_every_bin_without_changing_frame() -> None:
    t = _timestamps(20, 10.0)
    frame = _frame(t, np.ones(20), y=np.zeros(20), z=np.zeros(20))
    before = frame.content.copy()
    rows: List[Tuple[str, int, float, float]] = []

    FramePreprocessor(frame).fourier_transform(lambda *row: rows.append(row))

    assert frame.content == before
    assert len(rows) == 3 * 11
    assert [r[0] for r in rows[:11]] == ["x"] * 11
    axis, index, freq, magnitude = rows[0]
    assert (axis, index, freq) == ("x", 0, 0.0)
    assert magnitude == pytest.approx(20.0)
    # 20 samples over 190 ms -> 105.26 Hz, labelled with the rounded rate
    assert rows[1][2] == pytest.approx(105.0 / 20)


def test_fourier_transform_without_sink_is_a_no_op() -> None:
    FramePreprocessor(SensorFrame(4)).fourier_transform(None)


def test_for_each_yields_integer_timestamps() -> None:
    t = _timestamps(3, 10.0)
    frame = _frame(t, np.array([1.0, 2.0, 3.0]))
    seen: List[Tuple[int, float, float, float]] = []

    FramePreprocessor(frame).for_each(lambda *s: seen.append(s))

    assert [s[0] for s in seen] == [int(v) for v in t]
    assert all(isinstance(s[0], int) for s in seen)
    assert [s[1] for s in seen] == [1.0, 2.0, 3.0]
