"""Fixed-capacity frames of timestamped 3-axis sensor readings."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator, Tuple

import numpy as np

from ..analysis.interpolation import sync_to_time
from ..errors import ConfigError, check_overlap


def _zeros(width: int) -> np.ndarray:
    return np.zeros(width, dtype=np.float64)


@dataclass(eq=False)
class FrameContent:
    """
    Raw ``t``/``x``/``y``/``z`` arrays of a frame.

    ``t`` holds nanosecond timestamps as ``float64``. Equality compares every
    array elementwise; it exists for tests and caching only.
    """

    frame_width: int
    t: np.ndarray = None  # type: ignore[assignment]
    x: np.ndarray = None  # type: ignore[assignment]
    y: np.ndarray = None  # type: ignore[assignment]
    z: np.ndarray = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        for name in ("t", "x", "y", "z"):
            value = getattr(self, name)
            if value is None:
                arr = _zeros(self.frame_width)
            else:
                arr = np.asarray(value, dtype=np.float64).reshape(-1)
            if arr.size != self.frame_width:
                raise ValueError(
                    f"{name} has {arr.size} entries, expected frame_width={self.frame_width}"
                )
            setattr(self, name, arr)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, FrameContent):
            return NotImplemented
        return (
            self.frame_width == other.frame_width
            and np.array_equal(self.t, other.t)
            and np.array_equal(self.x, other.x)
            and np.array_equal(self.y, other.y)
            and np.array_equal(self.z, other.z)
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.frame_width,
                self.t.tobytes(),
                self.x.tobytes(),
                self.y.tobytes(),
                self.z.tobytes(),
            )
        )

    def copy(self) -> FrameContent:
        return FrameContent(
            self.frame_width, self.t.copy(), self.x.copy(), self.y.copy(), self.z.copy()
        )

    def samples(self) -> Iterator[Tuple[int, float, float, float]]:
        """Yield ``(t_ns, x, y, z)`` for every entry."""
        for i in range(self.frame_width):
            yield int(self.t[i]), float(self.x[i]), float(self.y[i]), float(self.z[i])


@dataclass
class SensorFrame:
    """
    Accumulates readings until ``frame_width`` samples are held.

    Samples are stored in arrival order; no reordering is performed.
    """

    frame_width: int
    content: FrameContent = field(init=False)
    _size: int = field(init=False, default=0, repr=False)

    def __post_init__(self) -> None:
        if int(self.frame_width) < 1:
            raise ConfigError(f"frame_width must be positive, got {self.frame_width}")
        self.frame_width = int(self.frame_width)
        self.content = FrameContent(self.frame_width)

    @classmethod
    def from_frame(cls, other: SensorFrame) -> SensorFrame:
        """Return an independent copy of ``other``."""
        frame = cls(other.frame_width)
        frame.content = other.content.copy()
        frame._size = other._size
        return frame

    @property
    def size(self) -> int:
        return self._size

    def is_full(self) -> bool:
        return self._size == self.frame_width

    def append(self, t: float, x: float, y: float, z: float) -> bool:
        """
        Append one reading.

        Returns ``True`` if the frame is at capacity after the call. Appends to
        a full frame are ignored and also return ``True``.
        """
        if self._size == self.frame_width:
            return True
        idx = self._size
        self.content.t[idx] = t
        self.content.x[idx] = x
        self.content.y[idx] = y
        self.content.z[idx] = z
        self._size += 1
        return self._size == self.frame_width

    def clear(self, overlap: float = 0.0) -> None:
        """
        Reset the frame, carrying over the most recent ``round(width * overlap)``
        entries as the prefix of the next frame. The remainder is zero.
        """
        overlap = check_overlap(overlap)
        width = self.frame_width
        keep = int(math.floor(width * overlap + 0.5))
        start = width - keep
        fresh = FrameContent(width)
        for name in ("t", "x", "y", "z"):
            getattr(fresh, name)[:keep] = getattr(self.content, name)[start:]
        self.content = fresh
        self._size = keep

    def average(self) -> Tuple[float, float, float]:
        """Mean of each axis over the current logical size."""
        n = self._size
        if n == 0:
            return 0.0, 0.0, 0.0
        c = self.content
        return float(np.mean(c.x[:n])), float(np.mean(c.y[:n])), float(np.mean(c.z[:n]))

    def sync_to_time(self, t: np.ndarray) -> None:
        """Resample this frame's content onto the time grid ``t``."""
        new_t = np.asarray(t, dtype=np.float64).reshape(-1)
        x, y, z = sync_to_time(new_t, self.content.t, self.content.x, self.content.y, self.content.z)
        self.content = FrameContent(new_t.size, new_t, x, y, z)
        self.frame_width = new_t.size
        self._size = new_t.size

    def zero_fill(self) -> None:
        """Replace the content with all zeros of the same capacity."""
        self.content = FrameContent(self.frame_width)
        self._size = self.frame_width


__all__ = ["FrameContent", "SensorFrame"]
