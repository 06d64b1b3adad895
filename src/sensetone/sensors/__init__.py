"""Parsers for recorded sensor logs."""

from .mpu6050 import MpuSample, parse_line

__all__ = ["MpuSample", "parse_line"]
