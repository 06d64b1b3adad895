from __future__ import annotations

"""
Replay recorded MPU6050 logs through a :class:`Pipeline`.

Each parsed line produces one accelerometer and one gyroscope event with the
line's timestamp. The two kinds are fed from separate threads, as live
sensor callbacks are.
"""

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from queue import Queue
from typing import Callable, Optional, Tuple

from ..sensors.mpu6050 import MpuSample, parse_line
from .models import SensorKind
from .pipeline import Pipeline

logger = logging.getLogger(__name__)

Parser = Callable[[str], Optional[MpuSample]]
# (t_ns, x, y, z) for one sensor kind; ``None`` ends the stream
_Event = Optional[Tuple[int, float, float, float]]


def _drain_kind(
    kind: SensorKind,
    events: Queue[_Event],
    pipeline: Pipeline,
    stop_event: threading.Event,
) -> None:
    """Feed one sensor kind's events to ``pipeline`` as its own producer."""
    try:
        while True:
            event = events.get()
            if event is None or stop_event.is_set() or pipeline.stopped:
                break
            try:
                pipeline.on_sample(kind, *event)
            except Exception:
                logger.exception("Failed to process %s sample: %r", kind.value, event)
    finally:
        pipeline.end_of_stream(kind)


def replay_lines(
    lines: Iterable[str],
    pipeline: Pipeline,
    *,
    parser: Parser = parse_line,
    stop_event: Optional[threading.Event] = None,
) -> int:
    """
    Parse ``lines`` and feed every sample to ``pipeline``.

    Accelerometer and gyroscope events are delivered by one producer thread
    each, as live sensor callbacks are, so a sensor waiting for its partner's
    frame never starves the partner. Returns once both producers are done.

    Malformed lines are skipped. Stops early when ``stop_event`` is set or
    the pipeline was stopped. Returns the number of samples read.
    """
    stop_event = stop_event or threading.Event()
    queues: dict[SensorKind, Queue[_Event]] = {kind: Queue() for kind in SensorKind}
    pipeline.resume_streams()
    workers = [
        threading.Thread(
            target=_drain_kind,
            args=(kind, queues[kind], pipeline, stop_event),
            name=f"SensetoneReplay-{kind.value}",
            daemon=True,
        )
        for kind in SensorKind
    ]
    for worker in workers:
        worker.start()

    count = 0
    try:
        for raw_line in lines:
            if stop_event.is_set() or pipeline.stopped:
                break
            sample = parser(raw_line)
            if sample is None:
                continue
            queues[SensorKind.ACCEL].put((sample.timestamp_ns, *sample.accel))
            queues[SensorKind.GYRO].put((sample.timestamp_ns, *sample.gyro))
            count += 1
    finally:
        for events in queues.values():
            events.put(None)
        for worker in workers:
            worker.join()
    return count


@dataclass
class ReplayHandle:
    thread: threading.Thread
    stop_event: threading.Event
    pipeline: Pipeline

    def stop(self, *, join: bool = False, timeout: Optional[float] = None) -> None:
        self.stop_event.set()
        if join:
            self.thread.join(timeout)

    def is_alive(self) -> bool:
        return self.thread.is_alive()


def start_replay(
    lines: Iterable[str],
    pipeline: Pipeline,
    *,
    parser: Parser = parse_line,
    thread_name: Optional[str] = None,
) -> ReplayHandle:
    """Run :func:`replay_lines` in a background daemon thread."""
    stop_event = threading.Event()

    def _target() -> None:
        count = replay_lines(lines, pipeline, parser=parser, stop_event=stop_event)
        logger.info("Replay finished after %d samples", count)

    thread = threading.Thread(
        target=_target,
        name=thread_name or "SensetoneReplay",
        daemon=True,
    )
    thread.start()
    return ReplayHandle(thread=thread, stop_event=stop_event, pipeline=pipeline)


__all__ = ["ReplayHandle", "replay_lines", "start_replay"]
