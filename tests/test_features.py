from __future__ import annotations

import math

import numpy as np
import pytest
from scipy import stats

from sensetone.analysis.features import DescriptiveStats, FrameFeatures, magnitude
from sensetone.core.frame import FrameContent


def test_basic_statistics_use_sample_conventions() -> None:
    s = DescriptiveStats([1.0, 2.0, 3.0, 4.0, 5.0])

    assert s.mean == 3.0
    assert s.median == 3.0
    assert s.variance == pytest.approx(2.5)
    assert s.standard_deviation == pytest.approx(math.sqrt(2.5))
    assert (s.min, s.max, s.range) == (1.0, 5.0, 4.0)
    assert s.iqr == pytest.approx(2.0)
    assert s.sum == 15.0
    assert s.skewness == pytest.approx(0.0, abs=1e-12)
    assert s.kurtosis == pytest.approx(-1.2)


def test_percentiles_interpolate_linearly() -> None:
    s = DescriptiveStats([1.0, 2.0, 3.0, 4.0])
    assert s.median == pytest.approx(2.5)
    # P25 = 1.75, P75 = 3.25
    assert s.iqr == pytest.approx(1.5)


def test_higher_moments_match_bias_corrected_estimators() -> None:
    values = np.array([1.0, 2.0, 2.5, 7.0, 11.0, 0.5])
    s = DescriptiveStats(values)
    assert s.skewness == pytest.approx(stats.skew(values, bias=False))
    assert s.kurtosis == pytest.approx(stats.kurtosis(values, bias=False))


def test_constant_and_empty_inputs_do_not_raise() -> None:
    constant = DescriptiveStats([2.0, 2.0, 2.0, 2.0])
    assert constant.variance == 0.0
    assert math.isnan(constant.skewness)
    assert math.isnan(constant.kurtosis)

    empty = DescriptiveStats([])
    assert math.isnan(empty.mean)
    assert math.isnan(empty.median)
    assert empty.sum == 0.0


def test_statistics_are_cached_after_first_access() -> None:
    s = DescriptiveStats([1.0, 2.0, 3.0])
    assert "mean" not in vars(s)
    first = s.mean
    assert vars(s)["mean"] == first
    assert s.mean is first


def test_input_array_is_copied() -> None:
    source = np.array([1.0, 2.0, 3.0])
    s = DescriptiveStats(source)
    source[0] = 100.0
    assert s.max == 3.0
    # the caller's array stays writable
    source[1] = 5.0


def test_magnitude_is_euclidean_norm() -> None:
    np.testing.assert_allclose(magnitude([3.0, 0.0], [4.0, 0.0], [0.0, 2.0]), [5.0, 2.0])


def test_frame_features_cover_axes_and_magnitude() -> None:
    content = FrameContent(
        3,
        t=[1_000.0, 2_000.0, 4_000.0],
        x=[3.0, 0.0, 1.0],
        y=[4.0, 0.0, 2.0],
        z=[0.0, 2.0, 2.0],
    )
    features = FrameFeatures.from_content(content)

    assert features.x.sum == 4.0
    assert features.z.max == 2.0
    assert features.magnitude.mean == pytest.approx((5.0 + 2.0 + 3.0) / 3)
    assert features.time_span_ns == 3_000.0


def test_summary_lists_magnitude_statistics() -> None:
    features = FrameFeatures([0.0, 1.0, 2.0], [1.0, 2.0, 3.0], [0.0, 0.0, 0.0], [0.0, 0.0, 0.0])
    lines = features.summarize().splitlines()

    assert lines[0] == "Magnitude statistics summary:"
    assert [line.split(":")[0] for line in lines[1:]] == [
        "Mean",
        "Median",
        "Standard Deviation",
        "Skewness",
        "Kurtosis",
    ]
    assert lines[1].endswith("2.0")
