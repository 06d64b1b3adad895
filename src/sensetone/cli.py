"""Command-line entry point: replay a recorded MPU6050 log through the pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Sequence

from .config import load_config
from .core.pipeline import PipelineSinks
from .core.pipeline_wiring import build_pipeline
from .core.playback import CallbackToneSink
from .core.stream_reader import replay_lines
from .dataio.csv_writer import CsvSampleSink
from .errors import ConfigError

logger = logging.getLogger("sensetone")

_SAMPLE_STAGES = (
    "accel_raw",
    "accel_post_filter",
    "accel_post_smooth",
    "gyro_raw",
    "gyro_post_filter",
    "gyro_post_smooth",
)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sensetone", description="Gesture-to-tone pipeline")
    sub = parser.add_subparsers(dest="command", required=True)

    replay = sub.add_parser("replay", help="Replay a recorded sensor log")
    replay.add_argument("log", type=Path, help="JSONL or CSV MPU6050 recording")
    replay.add_argument(
        "--config",
        type=Path,
        help="Optional YAML file with SensetoneConfig overrides",
    )
    replay.add_argument(
        "--overlap",
        type=float,
        help="Override the frame overlap fraction without editing the YAML",
    )
    replay.add_argument(
        "--csv-dir",
        type=Path,
        help="Write every processing stage to <dir>/<stage>.csv",
    )
    replay.add_argument(
        "--diagnostics",
        action="store_true",
        help="Log the per-frame magnitude spectrum at debug level",
    )
    replay.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _log_tone(frequency: float, amplitude: float) -> None:
    logger.info("tone %.0f Hz amplitude %.3f", frequency, amplitude)


def _log_spectrum(stream: str):
    def _write(axis: str, index: int, frequency: float, magnitude: float) -> None:
        logger.debug("%s spectrum %s[%d] %.2f Hz -> %.4f", stream, axis, index, frequency, magnitude)

    return _write


def _run_replay(args: argparse.Namespace) -> int:
    try:
        cfg = load_config(args.config)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    if args.overlap is not None:
        cfg.overlap = args.overlap
    if args.diagnostics:
        cfg.diagnostics_enabled = True
    if args.verbose:
        cfg.log_statistics = True

    if not args.log.exists():
        logger.error("Recording %s does not exist", args.log)
        return 2

    with ExitStack() as stack:
        sink_kwargs = {}
        if args.csv_dir is not None:
            for stage in _SAMPLE_STAGES:
                sink = stack.enter_context(CsvSampleSink(args.csv_dir / f"{stage}.csv"))
                sink_kwargs[stage] = sink
        sinks = PipelineSinks(
            **sink_kwargs,
            accel_spectrum=_log_spectrum("accel"),
            gyro_spectrum=_log_spectrum("gyro"),
        )

        try:
            handles = build_pipeline(cfg, tone_sink=CallbackToneSink(_log_tone), sinks=sinks)
        except ConfigError as exc:
            logger.error("Invalid configuration: %s", exc)
            return 2

        pipeline = handles.pipeline
        pipeline.start()
        logger.info("Replaying %s", args.log)
        with args.log.open("r", encoding="utf-8") as fh:
            count = replay_lines(fh, pipeline)
        pipeline.stop()

    logger.info(
        "Replayed %d samples into %d frame pairs; final volume %.3f",
        count,
        pipeline.frames_processed,
        handles.classifier.volume,
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "replay":
        return _run_replay(args)
    parser.error(f"unknown command {args.command!r}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
