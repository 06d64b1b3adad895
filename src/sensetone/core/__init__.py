"""Core streaming pipeline: frames, synchronization, preprocessing, and control.

Raw sensor events enter through :class:`Pipeline.on_sample`, accumulate in
per-sensor frames, get paired and time-aligned by :class:`FrameSync`, and are
filtered, smoothed, and summarized before the classifier turns them into a
tone.
"""

from .frame import FrameContent, SensorFrame
from .ringbuffer import RingBuffer
from .sync import FrameSync, FrameSyncConnector, synchronize_frames

from .classifier import Classifier, ControllerState, SimpleClassifier
from .models import ControlSignal, SensorKind, SensorState
from .pipeline import Pipeline, PipelineSinks
from .pipeline_wiring import PipelineHandles, build_pipeline
from .playback import CallbackToneSink, RampingToneSink, RecordingToneSink, ToneSink
from .preprocessing import FramePreprocessor
from .sensor_view import SensorView

__all__ = [
    "FrameContent",
    "SensorFrame",
    "RingBuffer",
    "FrameSync",
    "FrameSyncConnector",
    "synchronize_frames",
    "Classifier",
    "ControllerState",
    "SimpleClassifier",
    "ControlSignal",
    "SensorKind",
    "SensorState",
    "Pipeline",
    "PipelineSinks",
    "PipelineHandles",
    "build_pipeline",
    "CallbackToneSink",
    "RampingToneSink",
    "RecordingToneSink",
    "ToneSink",
    "FramePreprocessor",
    "SensorView",
]
