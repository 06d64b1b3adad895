"""Shared dataclasses for sensor kinds, display state, and control output."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable


class SensorKind(str, Enum):
    ACCEL = "accel"
    GYRO = "gyro"

    @classmethod
    def parse(cls, value: "SensorKind | str") -> "SensorKind":
        """Accept a member, its value, or its name in any case."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass(frozen=True)
class SensorState:
    """Per-axis averages of one frame, for display."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class ControlSignal:
    frequency_hz: float
    amplitude: float


# (t_ns, x, y, z) -> None
SampleWriter = Callable[[int, float, float, float], None]
# (axis, bin_index, frequency, magnitude) -> None
SpectrumWriter = Callable[[str, int, float, float], None]


def null_writer(t_ns: int, x: float, y: float, z: float) -> None:  # pragma: no cover - trivial
    return
