"""Tone sinks: the boundary between the classifier and an audio backend."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Protocol, Tuple

logger = logging.getLogger(__name__)

OscillatorSetter = Callable[[float, float], None]


class ToneSink(Protocol):
    """Anything that can play a tone of a given frequency and amplitude."""

    def adjust_playback(self, frequency: float, amplitude: float) -> None:  # pragma: no cover - protocol
        ...

    def start_playback(self) -> None:  # pragma: no cover - protocol
        ...

    def stop_playback(self) -> None:  # pragma: no cover - protocol
        ...


@dataclass(slots=True)
class CallbackToneSink:
    """Forward every playback change straight to ``callback``."""

    callback: OscillatorSetter

    def adjust_playback(self, frequency: float, amplitude: float) -> None:
        self.callback(float(frequency), float(amplitude))

    def start_playback(self) -> None:  # pragma: no cover - trivial
        return

    def stop_playback(self) -> None:  # pragma: no cover - trivial
        return


@dataclass(slots=True)
class RecordingToneSink:
    """Test double that records every playback change."""

    calls: List[Tuple[float, float]] = field(default_factory=list)
    playing: bool = False

    def adjust_playback(self, frequency: float, amplitude: float) -> None:
        self.calls.append((float(frequency), float(amplitude)))

    def start_playback(self) -> None:
        self.playing = True

    def stop_playback(self) -> None:
        self.playing = False

    @property
    def last(self) -> Tuple[float, float] | None:
        return self.calls[-1] if self.calls else None


@dataclass(slots=True)
class RampingToneSink:
    """
    Move an oscillator to a new frequency/amplitude in ``steps`` equal
    increments, sleeping ``interval_s`` between them, so changes are not
    heard as clicks.

    The oscillator starts silent at 0 Hz. While stopped, targets are still
    tracked but ``oscillator`` is not called.
    """

    oscillator: OscillatorSetter
    steps: int = 10
    interval_s: float = 0.01
    sleep: Callable[[float], None] = time.sleep

    frequency: float = field(init=False, default=0.0)
    amplitude: float = field(init=False, default=0.0)
    _playing: bool = field(init=False, default=False, repr=False)
    _lock: threading.Lock = field(init=False, default_factory=threading.Lock, repr=False)

    def __post_init__(self) -> None:
        if self.steps < 1:
            raise ValueError("steps must be >= 1")
        if self.interval_s < 0:
            raise ValueError("interval_s must be >= 0")

    @property
    def playing(self) -> bool:
        return self._playing

    def adjust_playback(self, frequency: float, amplitude: float) -> None:
        with self._lock:
            delta_freq = (float(frequency) - self.frequency) / self.steps
            delta_amp = (float(amplitude) - self.amplitude) / self.steps
            for step in range(self.steps):
                if step == self.steps - 1:
                    # land exactly on the target
                    self.frequency = float(frequency)
                    self.amplitude = float(amplitude)
                else:
                    self.frequency += delta_freq
                    self.amplitude += delta_amp
                if self._playing:
                    self.oscillator(self.frequency, self.amplitude)
                if self.interval_s > 0:
                    self.sleep(self.interval_s)

    def start_playback(self) -> None:
        with self._lock:
            self._playing = True
            self.oscillator(self.frequency, self.amplitude)
        logger.info("Playback started")

    def stop_playback(self) -> None:
        with self._lock:
            self._playing = False
            self.oscillator(0.0, 0.0)
        logger.info("Playback stopped")


__all__ = [
    "ToneSink",
    "CallbackToneSink",
    "RecordingToneSink",
    "RampingToneSink",
    "OscillatorSetter",
]
