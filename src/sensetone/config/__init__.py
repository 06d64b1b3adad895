"""Configuration objects and helpers for sensetone.

The pipeline parameters (frame widths, overlap, filter cutoffs and the
classifier's calibration constants) are fixed application values. They live
in one typed dataclass (see :mod:`runtime`) that can optionally be loaded
from a YAML file so a recording can be replayed with different settings.
"""

from .runtime import SensetoneConfig, config_from_mapping, load_config

__all__ = ["SensetoneConfig", "config_from_mapping", "load_config"]
