"""Map frame features to a tone: gyroscope twist sets volume, acceleration sets pitch."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Protocol

from ..analysis.features import FrameFeatures
from .models import ControlSignal
from .playback import ToneSink

logger = logging.getLogger(__name__)

NS_PER_SECOND = 1_000_000_000

ACCEL_FREQ_CORRELATION = 750.0
GYRO_VOLUME_CORRELATION = 0.02
MIN_GYRO_VOLUME_DELTA = 0.005
SILENCE_THRESHOLD_HZ = 90
DEFAULT_VOLUME = 0.5
FREQUENCY_STEP_HZ = 10


class Classifier(Protocol):
    volume: float

    def classify(self, accel: FrameFeatures, gyro: FrameFeatures) -> ControlSignal:  # pragma: no cover - protocol
        ...

    def start_playback(self) -> None:  # pragma: no cover - protocol
        ...

    def stop_playback(self) -> None:  # pragma: no cover - protocol
        ...


@dataclass
class ControllerState:
    volume: float = DEFAULT_VOLUME
    frequency: float = 0.0
    amplitude: float = 0.0


def quantize_frequency(raw_hz: float, step: int = FREQUENCY_STEP_HZ) -> int:
    """Round to the nearest integer (halves up), then floor to a multiple of ``step``."""
    if not math.isfinite(raw_hz):
        return 0
    rounded = int(math.floor(raw_hz + 0.5))
    return (rounded // step) * step


class SimpleClassifier:
    """
    Integrates gyroscope rotation into a volume and maps mean acceleration
    magnitude onto a quantized frequency, then drives ``synthesizer``.

    Rotation about z counts positive counter-clockwise, so the volume change
    is subtracted: turning the device clockwise makes it louder. A quantized
    frequency at or below ``silence_threshold_hz`` means the device is at
    rest and silences the tone regardless of volume.
    """

    def __init__(
        self,
        synthesizer: ToneSink,
        *,
        accel_freq_correlation: float = ACCEL_FREQ_CORRELATION,
        gyro_volume_correlation: float = GYRO_VOLUME_CORRELATION,
        min_gyro_volume_delta: float = MIN_GYRO_VOLUME_DELTA,
        silence_threshold_hz: int = SILENCE_THRESHOLD_HZ,
        initial_volume: float = DEFAULT_VOLUME,
    ) -> None:
        self.synthesizer = synthesizer
        self.accel_freq_correlation = float(accel_freq_correlation)
        self.gyro_volume_correlation = float(gyro_volume_correlation)
        self.min_gyro_volume_delta = float(min_gyro_volume_delta)
        self.silence_threshold_hz = int(silence_threshold_hz)
        self.state = ControllerState(volume=min(1.0, max(0.0, float(initial_volume))))

    @property
    def volume(self) -> float:
        return self.state.volume

    @volume.setter
    def volume(self, value: float) -> None:
        self.state.volume = min(1.0, max(0.0, float(value)))

    def volume_delta(self, gyro: FrameFeatures) -> float:
        """Half-rotations turned during the frame, scaled by the volume correlation."""
        span_ns = gyro.t.max - gyro.t.min
        delta = gyro.z.sum * span_ns / NS_PER_SECOND / math.pi * self.gyro_volume_correlation
        return delta if math.isfinite(delta) else 0.0

    def classify(self, accel: FrameFeatures, gyro: FrameFeatures) -> ControlSignal:
        """Update the volume, pick a frequency, and send both to the synthesizer."""
        delta_volume = self.volume_delta(gyro)
        volume = self.state.volume
        if abs(delta_volume) > self.min_gyro_volume_delta:
            volume -= delta_volume
        self.state.volume = min(1.0, max(0.0, volume))

        freq_raw = accel.magnitude.mean * self.accel_freq_correlation
        freq = quantize_frequency(freq_raw)

        logger.debug(
            "classifier volume=%.3f delta=%.4f freq_raw=%.2f freq=%d",
            self.state.volume,
            delta_volume,
            freq_raw,
            freq,
        )

        if freq <= self.silence_threshold_hz:
            signal = ControlSignal(0.0, 0.0)
        else:
            signal = ControlSignal(float(freq), self.state.volume)

        self.state.frequency = signal.frequency_hz
        self.state.amplitude = signal.amplitude
        self.synthesizer.adjust_playback(signal.frequency_hz, signal.amplitude)
        return signal

    def start_playback(self) -> None:
        self.synthesizer.start_playback()

    def stop_playback(self) -> None:
        self.synthesizer.stop_playback()


__all__ = [
    "Classifier",
    "ControllerState",
    "SimpleClassifier",
    "quantize_frequency",
    "ACCEL_FREQ_CORRELATION",
    "GYRO_VOLUME_CORRELATION",
    "MIN_GYRO_VOLUME_DELTA",
    "SILENCE_THRESHOLD_HZ",
    "DEFAULT_VOLUME",
]
