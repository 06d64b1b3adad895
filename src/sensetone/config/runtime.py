"""Runtime configuration helpers for the sensor-to-tone pipeline."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from ..errors import ConfigError, check_overlap

SMOOTHING_MODES = ("rectangular", "triangular")


@dataclass(slots=True)
class SensetoneConfig:
    """
    Fixed parameters for framing, filtering, and classification.

    The defaults are the values the instrument was calibrated with: 20-sample
    frames from sensors running at roughly 50 Hz, a 5 Hz high-pass on the
    accelerometer and a 10 Hz low-pass on the gyroscope.
    """

    accel_frame_width: int = 20
    gyro_frame_width: int = 20
    overlap: float = 0.0

    accel_high_pass_hz: float = 5.0
    gyro_low_pass_hz: float = 10.0
    filter_order: int = 4
    smoothing_window: int = 7
    smoothing_mode: str = "rectangular"

    diagnostics_enabled: bool = False
    log_statistics: bool = False

    # Empirically tuned; recalibrate per device rather than re-deriving.
    accel_freq_correlation: float = 750.0
    gyro_volume_correlation: float = 0.02
    min_gyro_volume_delta: float = 0.005
    silence_threshold_hz: int = 90
    initial_volume: float = 0.5

    playback_ramp_steps: int = 10
    playback_ramp_interval_s: float = 0.01
    history_size: int = 10

    def validated(self) -> SensetoneConfig:
        """
        Return a copy with types coerced.

        Raises
        ------
        ConfigError
            If any value is outside its allowed range. Values are never
            clamped into range.
        """
        cfg = replace(
            self,
            accel_frame_width=int(self.accel_frame_width),
            gyro_frame_width=int(self.gyro_frame_width),
            overlap=check_overlap(self.overlap),
            accel_high_pass_hz=float(self.accel_high_pass_hz),
            gyro_low_pass_hz=float(self.gyro_low_pass_hz),
            filter_order=int(self.filter_order),
            smoothing_window=int(self.smoothing_window),
            smoothing_mode=str(self.smoothing_mode).strip().lower(),
            diagnostics_enabled=bool(self.diagnostics_enabled),
            log_statistics=bool(self.log_statistics),
            accel_freq_correlation=float(self.accel_freq_correlation),
            gyro_volume_correlation=float(self.gyro_volume_correlation),
            min_gyro_volume_delta=float(self.min_gyro_volume_delta),
            silence_threshold_hz=int(self.silence_threshold_hz),
            initial_volume=float(self.initial_volume),
            playback_ramp_steps=int(self.playback_ramp_steps),
            playback_ramp_interval_s=float(self.playback_ramp_interval_s),
            history_size=int(self.history_size),
        )
        if cfg.accel_frame_width < 2 or cfg.gyro_frame_width < 2:
            raise ConfigError("frame widths must be at least 2 samples")
        if cfg.smoothing_window < 1:
            raise ConfigError(f"smoothing_window must be >= 1, got {cfg.smoothing_window}")
        if cfg.smoothing_mode not in SMOOTHING_MODES:
            raise ConfigError(
                f"smoothing_mode must be one of {SMOOTHING_MODES}, got {cfg.smoothing_mode!r}"
            )
        if cfg.filter_order < 1:
            raise ConfigError(f"filter_order must be >= 1, got {cfg.filter_order}")
        if cfg.accel_high_pass_hz <= 0 or cfg.gyro_low_pass_hz <= 0:
            raise ConfigError("filter cutoffs must be positive")
        if not 0.0 <= cfg.initial_volume <= 1.0:
            raise ConfigError(f"initial_volume must be within [0, 1], got {cfg.initial_volume}")
        if cfg.min_gyro_volume_delta < 0:
            raise ConfigError("min_gyro_volume_delta must be >= 0")
        if cfg.playback_ramp_steps < 1:
            raise ConfigError("playback_ramp_steps must be >= 1")
        if cfg.playback_ramp_interval_s < 0:
            raise ConfigError("playback_ramp_interval_s must be >= 0")
        if cfg.history_size < 1:
            raise ConfigError("history_size must be >= 1")
        return cfg


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`SensetoneConfig`."""
    return {f.name for f in fields(SensetoneConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten a top-level ``pipeline`` block into the root mapping."""
    if "pipeline" in data and isinstance(data["pipeline"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "pipeline":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> SensetoneConfig:
    """Build :class:`SensetoneConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return SensetoneConfig()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    return SensetoneConfig(**payload).validated()


def load_config(path: str | Path | None) -> SensetoneConfig:
    """
    Load configuration from ``path``.

    Missing files fall back to default :class:`SensetoneConfig`.
    """
    if path is None:
        return SensetoneConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return SensetoneConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    return config_from_mapping(raw)


__all__ = ["SensetoneConfig", "SMOOTHING_MODES", "config_from_mapping", "load_config"]
