from __future__ import annotations

import threading
import time
from typing import List, Tuple

import numpy as np
import pytest

from sensetone.core.frame import SensorFrame
from sensetone.core.sync import FrameSync, frames_disjoint, synchronize_frames


def _frame(t_values, scale: float = 1.0) -> SensorFrame:
    frame = SensorFrame(len(t_values))
    for i, t in enumerate(t_values):
        frame.append(float(t), scale * i, -scale * i, 1.0)
    return frame


class _Collector:
    def __init__(self) -> None:
        self.pairs: List[Tuple[SensorFrame, SensorFrame]] = []
        self.lock = threading.Lock()

    def __call__(self, left: SensorFrame, right: SensorFrame) -> None:
        with self.lock:
            self.pairs.append((left, right))


def test_synchronize_frames_builds_shared_grid_over_overlap() -> None:
    left = _frame(np.arange(10) * 10.0)  # 0..90
    right = _frame(5.0 + np.arange(10) * 10.0)  # 5..95

    left, right = synchronize_frames(left, right)

    np.testing.assert_array_equal(left.content.t, right.content.t)
    grid = left.content.t
    assert grid.size == 10
    assert grid[0] == 5.0
    assert grid[-1] == pytest.approx(90.0)
    assert np.all(np.diff(grid) > 0)
    # x is linear in t on the left frame: x = t / 10
    np.testing.assert_allclose(left.content.x, grid / 10.0, atol=1e-5)


def test_identical_time_bases_are_left_unchanged() -> None:
    t = 1_000_000_000 + np.arange(20) * 20_000_000.0
    left = _frame(t)
    right = _frame(t, scale=2.0)
    expected_right_x = right.content.x.copy()

    synchronize_frames(left, right)

    np.testing.assert_allclose(left.content.t, t)
    np.testing.assert_allclose(right.content.x, expected_right_x, atol=1e-5)


def test_disjoint_frames_are_zero_filled_and_still_emitted() -> None:
    collector = _Collector()
    sync = FrameSync(collector)

    sync.left.deposit(_frame(np.linspace(0.0, 100.0, 8)))
    sync.right.deposit(_frame(np.linspace(200.0, 300.0, 8)))

    assert len(collector.pairs) == 1
    left, right = collector.pairs[0]
    for frame in (left, right):
        assert frame.frame_width == 8
        assert not np.any(frame.content.t)
        assert not np.any(frame.content.x)
        assert not np.any(frame.content.y)
        assert not np.any(frame.content.z)


def test_frames_disjoint_checks_both_orders() -> None:
    early = _frame([0.0, 50.0, 100.0])
    late = _frame([200.0, 250.0, 300.0])
    assert frames_disjoint(early, late)
    assert frames_disjoint(late, early)
    assert not frames_disjoint(early, _frame([90.0, 150.0, 210.0]))


def test_callback_waits_for_both_sides() -> None:
    collector = _Collector()
    sync = FrameSync(collector)

    sync.right.deposit(_frame([0.0, 1.0, 2.0]))
    assert collector.pairs == []
    assert sync.right.pending
    assert not sync.left.pending

    sync.left.deposit(_frame([0.0, 1.0, 2.0]))
    assert len(collector.pairs) == 1
    assert sync.pairs_emitted == 1
    assert not sync.left.pending
    assert not sync.right.pending


def test_deposit_blocks_while_slot_is_occupied() -> None:
    collector = _Collector()
    sync = FrameSync(collector, poll_interval_s=0.01)
    first = _frame([0.0, 1.0, 2.0])
    second = _frame([3.0, 4.0, 5.0])

    sync.left.deposit(first)
    producer = threading.Thread(target=sync.left.deposit, args=(second,), daemon=True)
    producer.start()
    time.sleep(0.1)
    assert producer.is_alive()

    sync.right.deposit(_frame([0.0, 1.0, 2.0]))
    producer.join(timeout=1.0)
    assert not producer.is_alive()

    assert len(collector.pairs) == 1
    # the blocked frame now occupies the freed slot
    assert sync.left.pending
    sync.right.deposit(_frame([3.0, 4.0, 5.0]))
    assert len(collector.pairs) == 2
    np.testing.assert_allclose(collector.pairs[1][0].content.t, [3.0, 4.0, 5.0])


def test_close_releases_blocked_producer_and_drops_pending_frames() -> None:
    collector = _Collector()
    sync = FrameSync(collector, poll_interval_s=0.01)
    sync.left.deposit(_frame([0.0, 1.0, 2.0]))

    results: List[bool] = []
    producer = threading.Thread(
        target=lambda: results.append(sync.left.deposit(_frame([3.0, 4.0, 5.0]))),
        daemon=True,
    )
    producer.start()
    time.sleep(0.05)
    sync.close()
    producer.join(timeout=1.0)

    assert results == [False]
    assert not sync.left.pending
    assert sync.right.deposit(_frame([0.0, 1.0, 2.0])) is False
    assert collector.pairs == []


def test_concurrent_producers_pair_every_frame_once_in_order() -> None:
    collector = _Collector()
    sync = FrameSync(collector, poll_interval_s=0.01)
    n_frames = 25

    def produce(connector, offset: float) -> None:
        for k in range(n_frames):
            start = k * 100.0 + offset
            connector.deposit(_frame(start + np.arange(10) * 10.0))

    threads = [
        threading.Thread(target=produce, args=(sync.left, 0.0), daemon=True),
        threading.Thread(target=produce, args=(sync.right, 3.0), daemon=True),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5.0)

    assert len(collector.pairs) == n_frames
    starts = [left.content.t[0] for left, _ in collector.pairs]
    np.testing.assert_allclose(starts, np.arange(n_frames) * 100.0 + 3.0)
    for left, right in collector.pairs:
        np.testing.assert_array_equal(left.content.t, right.content.t)


def test_finished_partner_releases_blocked_producer() -> None:
    collector = _Collector()
    sync = FrameSync(collector, poll_interval_s=0.01)
    sync.left.deposit(_frame([0.0, 1.0, 2.0]))

    results: List[bool] = []
    producer = threading.Thread(
        target=lambda: results.append(sync.left.deposit(_frame([3.0, 4.0, 5.0]))),
        daemon=True,
    )
    producer.start()
    time.sleep(0.05)
    assert producer.is_alive()

    sync.right.finish()
    producer.join(timeout=1.0)

    assert results == [False]
    assert sync.left.pending
    assert collector.pairs == []
    assert not sync.closed


def test_finished_partner_still_pairs_its_waiting_frame() -> None:
    collector = _Collector()
    sync = FrameSync(collector, poll_interval_s=0.01)
    sync.right.deposit(_frame([0.0, 1.0, 2.0]))
    sync.right.finish()

    assert sync.left.deposit(_frame([0.0, 1.0, 2.0])) is True
    assert len(collector.pairs) == 1

    sync.right.restart()
    assert not sync.right.finished


def test_try_sync_without_both_frames_emits_nothing() -> None:
    collector = _Collector()
    sync = FrameSync(collector)
    assert sync.try_sync() is False
    sync.left.deposit(_frame([0.0, 1.0, 2.0]))
    assert sync.try_sync() is False
    assert sync.left.pending
    assert collector.pairs == []
