"""Exception types raised by sensetone components."""

from __future__ import annotations


class SensetoneError(Exception):
    """Base class for all sensetone errors."""


class ConfigError(SensetoneError, ValueError):
    """A component was constructed with an invalid configuration value."""


class OverlapValueError(ConfigError):
    """Overlap fraction outside the closed interval ``[0, 1]``."""

    def __init__(self, overlap: float) -> None:
        self.overlap = overlap
        super().__init__(
            f"overlap has invalid value {overlap!r}; overlap must fall between 0.0 and 1.0"
        )


def check_overlap(overlap: float) -> float:
    """Return ``overlap`` as a float, raising :class:`OverlapValueError` if out of range."""
    value = float(overlap)
    if not 0.0 <= value <= 1.0:
        raise OverlapValueError(overlap)
    return value


__all__ = ["SensetoneError", "ConfigError", "OverlapValueError", "check_overlap"]
