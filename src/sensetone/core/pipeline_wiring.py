"""Factory helpers that wire a :class:`Pipeline` from configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import SensetoneConfig
from .classifier import SimpleClassifier
from .pipeline import Pipeline, PipelineSinks
from .playback import OscillatorSetter, RampingToneSink, RecordingToneSink, ToneSink

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PipelineHandles:
    """Return value from :func:`build_pipeline` containing ready-to-use pieces."""

    pipeline: Pipeline
    classifier: SimpleClassifier
    tone_sink: ToneSink


def build_pipeline(
    cfg: SensetoneConfig | None = None,
    *,
    oscillator: Optional[OscillatorSetter] = None,
    tone_sink: Optional[ToneSink] = None,
    sinks: Optional[PipelineSinks] = None,
) -> PipelineHandles:
    """
    Build a :class:`Pipeline` feeding a :class:`SimpleClassifier`.

    Parameters
    ----------
    cfg:
        Pipeline configuration; defaults to :class:`SensetoneConfig`.
    oscillator:
        ``(frequency, amplitude)`` setter of an audio backend. It is wrapped in
        a :class:`RampingToneSink` using the configured ramp.
    tone_sink:
        Ready-made :class:`ToneSink`; takes precedence over ``oscillator``.
        When neither is given, a :class:`RecordingToneSink` collects the
        emitted control values.
    sinks:
        Sample and spectrum hooks for each processing stage.
    """
    normalized = (cfg or SensetoneConfig()).validated()

    if tone_sink is None:
        if oscillator is not None:
            tone_sink = RampingToneSink(
                oscillator,
                steps=normalized.playback_ramp_steps,
                interval_s=normalized.playback_ramp_interval_s,
            )
        else:
            tone_sink = RecordingToneSink()

    classifier = SimpleClassifier(
        tone_sink,
        accel_freq_correlation=normalized.accel_freq_correlation,
        gyro_volume_correlation=normalized.gyro_volume_correlation,
        min_gyro_volume_delta=normalized.min_gyro_volume_delta,
        silence_threshold_hz=normalized.silence_threshold_hz,
        initial_volume=normalized.initial_volume,
    )
    pipeline = Pipeline(normalized, classifier=classifier, sinks=sinks)
    logger.info(
        "Pipeline built: accel frame %d, gyro frame %d, overlap %.2f",
        normalized.accel_frame_width,
        normalized.gyro_frame_width,
        normalized.overlap,
    )
    return PipelineHandles(pipeline=pipeline, classifier=classifier, tone_sink=tone_sink)


__all__ = ["PipelineHandles", "build_pipeline"]
