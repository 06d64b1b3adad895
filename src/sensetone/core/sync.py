"""Pairing and time alignment of frames from two independently clocked sensors.

Each side owns a single-slot :class:`queue.Queue`. A producer that completes
a frame puts a copy into its slot, blocking while the slot still holds the
previous frame, so an unconsumed frame is never overwritten. Whichever
producer fills the second slot takes both frames, aligns them onto a shared
time grid, and invokes the ``on_sync`` callback in its own thread.
"""

from __future__ import annotations

import logging
import threading
from queue import Empty, Full, Queue
from typing import Callable, Optional, Tuple

from ..analysis.interpolation import even_grid
from .frame import SensorFrame

logger = logging.getLogger(__name__)

SyncCallback = Callable[[SensorFrame, SensorFrame], None]

DEFAULT_POLL_INTERVAL_S = 0.05


def frames_disjoint(left: SensorFrame, right: SensorFrame) -> bool:
    """True when the two frames' time ranges do not overlap at all."""
    lt = left.content.t
    rt = right.content.t
    return lt[-1] < rt[0] or rt[-1] < lt[0]


def synchronize_frames(left: SensorFrame, right: SensorFrame) -> Tuple[SensorFrame, SensorFrame]:
    """
    Resample ``left`` and ``right`` in place onto one evenly spaced grid.

    The grid has ``left.frame_width`` points spanning the overlap of both
    frames' time ranges. Disjoint frames are replaced by all-zero content of
    their own capacity instead.
    """
    if frames_disjoint(left, right):
        logger.debug("left and right frames have no overlap: filling with zeroes")
        left.zero_fill()
        right.zero_fill()
        return left, right

    lt = left.content.t
    rt = right.content.t
    min_t = max(lt[0], rt[0])
    max_t = min(lt[-1], rt[-1])
    grid = even_grid(float(min_t), float(max_t), left.frame_width)

    left.sync_to_time(grid)
    right.sync_to_time(grid)
    return left, right


class FrameSyncConnector:
    """Producer-side handle of a :class:`FrameSync`; one per sensor."""

    def __init__(self, frame_sync: FrameSync, name: str) -> None:
        self.name = name
        self._frame_sync = frame_sync
        self._slot: Queue[SensorFrame] = Queue(maxsize=1)
        self._finished = threading.Event()

    @property
    def pending(self) -> bool:
        """True while a deposited frame is waiting for its partner."""
        return not self._slot.empty()

    @property
    def finished(self) -> bool:
        """True once this side's producer announced it will deposit no more frames."""
        return self._finished.is_set()

    def finish(self) -> None:
        """Mark the end of this side's stream; a frame still waiting here stays pending."""
        self._finished.set()

    def restart(self) -> None:
        self._finished.clear()

    def _partner(self) -> FrameSyncConnector:
        sync = self._frame_sync
        return sync.right if self is sync.left else sync.left

    def deposit(self, frame: SensorFrame) -> bool:
        """
        Hand a completed frame to the synchronizer.

        Blocks while this side's previous frame has not been paired yet.
        Returns ``False`` without depositing if the synchronizer was closed,
        or if the partner stream has finished and can never free the slot.
        """
        sync = self._frame_sync
        partner = self._partner()
        while True:
            if sync.closed:
                return False
            try:
                self._slot.put(frame, timeout=sync.poll_interval_s)
                break
            except Full:
                if partner.finished and not partner.pending:
                    # partner's last pairing happened before it finished
                    try:
                        self._slot.put_nowait(frame)
                        break
                    except Full:
                        pass
                    logger.debug(
                        "%s: partner stream finished; dropping frame that cannot be paired",
                        self.name,
                    )
                    return False
        if sync.closed:
            # closed while we were waiting; the frame is abandoned
            self._take()
            return False
        sync.try_sync()
        return True

    def _take(self) -> Optional[SensorFrame]:
        try:
            return self._slot.get_nowait()
        except Empty:
            return None


class FrameSync:
    """
    Combine one frame from ``left`` and one from ``right`` whenever both exist.

    Example::

        frame_sync = FrameSync(lambda accel, gyro: handle(accel, gyro))
        accel_view = SensorView(connector=frame_sync.left)
        gyro_view = SensorView(connector=frame_sync.right)
    """

    def __init__(
        self,
        on_sync: SyncCallback,
        *,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    ) -> None:
        self.on_sync = on_sync
        self.poll_interval_s = float(poll_interval_s)
        self._lock = threading.Lock()
        self._closed = threading.Event()
        self.pairs_emitted = 0
        self.left = FrameSyncConnector(self, "left")
        self.right = FrameSyncConnector(self, "right")

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def try_sync(self) -> bool:
        """
        Pair and emit frames if both sides are waiting.

        The callback runs while the pairing lock is held so pairs are emitted
        one at a time, in the order their second frame arrived.
        """
        with self._lock:
            if self.closed:
                return False
            if not (self.left.pending and self.right.pending):
                return False
            left = self.left._take()
            right = self.right._take()
            if left is None or right is None:
                return False
            left, right = synchronize_frames(left, right)
            self.pairs_emitted += 1
            self.on_sync(left, right)
            return True

    def close(self) -> None:
        """
        Stop pairing. Blocked producers return and waiting frames are dropped.
        """
        self._closed.set()
        with self._lock:
            abandoned = [side.name for side in (self.left, self.right) if side._take() is not None]
        if abandoned:
            logger.debug("FrameSync closed with unpaired frames from %s", ", ".join(abandoned))


__all__ = [
    "FrameSync",
    "FrameSyncConnector",
    "SyncCallback",
    "frames_disjoint",
    "synchronize_frames",
]
