"""Per-sensor ingestion state: current frame, raw sink, and display values."""

from __future__ import annotations

import threading
from typing import List, Optional, Tuple

from ..errors import check_overlap
from .frame import SensorFrame
from .models import SampleWriter, SensorState
from .ringbuffer import RingBuffer
from .sync import FrameSyncConnector

DEFAULT_HISTORY_SIZE = 10


class SensorView:
    """
    Collects readings of one sensor into frames.

    When a frame fills up, a copy is handed to ``connector`` (or, without a
    connector, its averages become the displayed :attr:`state`), and the frame
    is cleared keeping ``overlap`` of its most recent entries.

    Each view is fed by a single producer thread; :attr:`state` and
    :attr:`history` may be read from any thread.
    """

    def __init__(
        self,
        frame_width: int = 20,
        overlap: float = 0.0,
        connector: Optional[FrameSyncConnector] = None,
        on_write: Optional[SampleWriter] = None,
        history_size: int = DEFAULT_HISTORY_SIZE,
    ) -> None:
        self.overlap = check_overlap(overlap)
        self._frame = SensorFrame(frame_width)
        self._connector = connector
        self._on_write = on_write
        self._state = SensorState()
        self._history: RingBuffer[SensorState] = RingBuffer(history_size)
        self._state_lock = threading.Lock()

    @property
    def frame(self) -> SensorFrame:
        return self._frame

    @property
    def state(self) -> SensorState:
        with self._state_lock:
            return self._state

    @property
    def history(self) -> List[SensorState]:
        """Recently displayed states, oldest first."""
        with self._state_lock:
            return list(self._history)

    def append_reading(self, t: int, x: float, y: float, z: float) -> bool:
        """
        Add one reading. Returns ``True`` if it completed a frame.

        With a connector this may block until the previous frame was paired.
        """
        if self._on_write is not None:
            self._on_write(int(t), float(x), float(y), float(z))

        if not self._frame.append(float(t), float(x), float(y), float(z)):
            return False

        if self._connector is None:
            self.update_readings(self._frame.average())
        else:
            self._connector.deposit(SensorFrame.from_frame(self._frame))
        self._frame.clear(self.overlap)
        return True

    def update_readings(self, readings: SensorState | Tuple[float, float, float]) -> None:
        """Publish new display values."""
        if not isinstance(readings, SensorState):
            x, y, z = readings
            readings = SensorState(float(x), float(y), float(z))
        with self._state_lock:
            self._state = readings
            self._history.append(readings)


__all__ = ["SensorView", "DEFAULT_HISTORY_SIZE"]
