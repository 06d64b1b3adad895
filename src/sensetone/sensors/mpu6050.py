"""
Recorded MPU6050 streams are text lines carrying one accelerometer and one
gyroscope reading taken at the same instant:

  - timestamp_ns : int   monotonic time in nanoseconds
  - ax, ay, az   : float linear acceleration in m/s²
  - gx, gy, gz   : float angular rate in rad/s

``parse_line()`` accepts JSON lines with those keys and the comma-separated
form "timestamp_ns,ax,ay,az,gx,gy,gz".
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

_AXES = ("ax", "ay", "az", "gx", "gy", "gz")


@dataclass(frozen=True)
class MpuSample:
    timestamp_ns: int
    ax: float
    ay: float
    az: float
    gx: float
    gy: float
    gz: float
    sensor_id: Optional[int] = None

    @property
    def accel(self) -> tuple[float, float, float]:
        return self.ax, self.ay, self.az

    @property
    def gyro(self) -> tuple[float, float, float]:
        return self.gx, self.gy, self.gz


def _parse_json_line(text: str) -> MpuSample | None:
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Bad JSON in sensor log: %r (%s)", text, exc)
        return None
    if not isinstance(obj, dict):
        logger.warning("Expected a JSON object in sensor log, got %r", obj)
        return None

    missing = [name for name in ("timestamp_ns",) + _AXES if obj.get(name) is None]
    if missing:
        logger.warning("Missing field(s) %s in sensor line: %r", ", ".join(missing), obj)
        return None

    try:
        sensor_id = obj.get("sensor_id")
        return MpuSample(
            int(obj["timestamp_ns"]),
            *(float(obj[name]) for name in _AXES),
            sensor_id=int(sensor_id) if sensor_id is not None else None,
        )
    except (TypeError, ValueError) as exc:
        logger.warning("Bad field value in sensor line %r (%s)", obj, exc)
        return None


def _parse_csv_line(text: str) -> MpuSample | None:
    parts: Sequence[str] = text.split(",")
    if len(parts) < 7:
        logger.warning(
            "Expected 7 comma-separated values for MPU6050 CSV, got %d: %r",
            len(parts),
            text,
        )
        return None
    try:
        ts = int(float(parts[0]))
        ax, ay, az, gx, gy, gz = map(float, parts[1:7])
    except ValueError as exc:
        logger.warning("Bad CSV field in sensor line %r (%s)", text, exc)
        return None
    return MpuSample(ts, ax, ay, az, gx, gy, gz)


def parse_line(line: str) -> MpuSample | None:
    """
    Parse one log line into an :class:`MpuSample`.

    Blank lines and header rows return ``None`` silently; malformed lines
    return ``None`` after logging a warning.
    """
    text = line.strip()
    if not text:
        return None
    if text[0] == "{":
        return _parse_json_line(text)
    if text.lower().startswith("timestamp"):
        return None
    return _parse_csv_line(text)
