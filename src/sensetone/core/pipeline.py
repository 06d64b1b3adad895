"""Sensor event pipeline: framing, synchronization, preprocessing, features, tone."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..analysis.features import FrameFeatures
from ..config import SensetoneConfig
from ..tools.debug import time_block
from .classifier import Classifier
from .frame import SensorFrame
from .models import ControlSignal, SampleWriter, SensorKind, SpectrumWriter, null_writer
from .preprocessing import FramePreprocessor
from .sensor_view import SensorView
from .sync import FrameSync, FrameSyncConnector

logger = logging.getLogger(__name__)

__all__ = ["FeatureCallback", "Pipeline", "PipelineSinks"]

FeatureCallback = Callable[[FrameFeatures, FrameFeatures], Any]


@dataclass(slots=True)
class PipelineSinks:
    """
    Outbound hooks. Each sample sink receives ``(t_ns, x, y, z)`` for every
    sample of its stage; spectrum sinks receive
    ``(axis, bin_index, frequency, magnitude)`` and are only used when
    diagnostics are enabled.
    """

    accel_raw: SampleWriter = null_writer
    accel_post_filter: SampleWriter = null_writer
    accel_post_smooth: SampleWriter = null_writer
    gyro_raw: SampleWriter = null_writer
    gyro_post_filter: SampleWriter = null_writer
    gyro_post_smooth: SampleWriter = null_writer
    accel_spectrum: Optional[SpectrumWriter] = None
    gyro_spectrum: Optional[SpectrumWriter] = None


class Pipeline:
    """
    Drives the processing chain from raw sensor events.

    ``on_sample`` may be called concurrently from one thread per sensor kind.
    All processing of a synchronized frame pair runs inline in the thread
    that completed the pair.
    """

    def __init__(
        self,
        cfg: SensetoneConfig | None = None,
        *,
        classifier: Optional[Classifier] = None,
        sinks: Optional[PipelineSinks] = None,
        on_features: Optional[FeatureCallback] = None,
    ) -> None:
        self.cfg = (cfg or SensetoneConfig()).validated()
        self.sinks = sinks or PipelineSinks()
        self.classifier = classifier
        if on_features is None and classifier is not None:
            on_features = classifier.classify
        self.on_features = on_features
        self.last_signal: Optional[ControlSignal] = None
        self.frames_processed = 0
        self._stopped = threading.Event()

        self.frame_sync = FrameSync(self._on_synced)
        self.accel = SensorView(
            frame_width=self.cfg.accel_frame_width,
            overlap=self.cfg.overlap,
            connector=self.frame_sync.left,
            on_write=self.sinks.accel_raw,
            history_size=self.cfg.history_size,
        )
        self.gyro = SensorView(
            frame_width=self.cfg.gyro_frame_width,
            overlap=self.cfg.overlap,
            connector=self.frame_sync.right,
            on_write=self.sinks.gyro_raw,
            history_size=self.cfg.history_size,
        )

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def view(self, kind: SensorKind | str) -> SensorView:
        """
        View for ``kind``: a :class:`SensorKind` or its name in any case.

        Raises ``ValueError`` for an unknown kind.
        """
        return self.accel if SensorKind.parse(kind) is SensorKind.ACCEL else self.gyro

    def _connector(self, kind: SensorKind | str) -> FrameSyncConnector:
        if SensorKind.parse(kind) is SensorKind.ACCEL:
            return self.frame_sync.left
        return self.frame_sync.right

    def on_sample(self, kind: SensorKind | str, t_ns: int, x: float, y: float, z: float) -> None:
        """Route one sensor event to its frame. Ignored after :meth:`stop`."""
        if self._stopped.is_set():
            return
        try:
            view = self.view(kind)
        except ValueError:
            logger.warning("Ignoring sample from unknown sensor kind %r", kind)
            return
        view.append_reading(t_ns, x, y, z)

    def end_of_stream(self, kind: SensorKind | str) -> None:
        """
        Announce that ``kind`` will deliver no more samples.

        The other sensor then drops frames that could only be paired with a
        frame that will never arrive, instead of blocking on them.
        """
        self._connector(kind).finish()

    def resume_streams(self) -> None:
        """Undo :meth:`end_of_stream` for both sensors before feeding again."""
        self.frame_sync.left.restart()
        self.frame_sync.right.restart()

    def start(self) -> None:
        if self.classifier is not None:
            self.classifier.start_playback()

    def stop(self) -> None:
        """Stop accepting samples; unpaired frames are abandoned."""
        self._stopped.set()
        self.frame_sync.close()
        if self.classifier is not None:
            self.classifier.stop_playback()

    def _preprocess(
        self,
        pre: FramePreprocessor,
        apply_filter: Callable[[FramePreprocessor], None],
        spectrum_sink: Optional[SpectrumWriter],
        post_filter: SampleWriter,
        post_smooth: SampleWriter,
    ) -> FrameFeatures:
        cfg = self.cfg
        if cfg.diagnostics_enabled:
            pre.fourier_transform(spectrum_sink)

        apply_filter(pre)
        pre.for_each(post_filter)

        pre.smooth_by_moving_average(cfg.smoothing_window, cfg.smoothing_mode)
        pre.for_each(post_smooth)

        features = FrameFeatures.from_content(pre.content)
        if cfg.log_statistics:
            logger.debug("%s features:\n%s", pre.name, features.summarize())
        return features

    def _on_synced(self, accel_frame: SensorFrame, gyro_frame: SensorFrame) -> None:
        cfg = self.cfg
        sinks = self.sinks
        with time_block("synchronized frame processing"):
            self.accel.update_readings(accel_frame.average())
            self.gyro.update_readings(gyro_frame.average())

            accel_features = self._preprocess(
                FramePreprocessor(accel_frame, name="accel"),
                lambda pre: pre.high_pass(cfg.accel_high_pass_hz, cfg.filter_order),
                sinks.accel_spectrum,
                sinks.accel_post_filter,
                sinks.accel_post_smooth,
            )
            gyro_features = self._preprocess(
                FramePreprocessor(gyro_frame, name="gyro"),
                lambda pre: pre.low_pass(cfg.gyro_low_pass_hz, cfg.filter_order),
                sinks.gyro_spectrum,
                sinks.gyro_post_filter,
                sinks.gyro_post_smooth,
            )
            self.frames_processed += 1

            if self.on_features is not None:
                result = self.on_features(accel_features, gyro_features)
                if isinstance(result, ControlSignal):
                    self.last_signal = result
