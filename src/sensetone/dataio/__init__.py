"""File-backed sinks for processed sensor samples.

:mod:`csv_writer` turns any of the pipeline's per-stage sample hooks into a
CSV log so recordings can be inspected offline.
"""

from .csv_writer import CsvSampleSink

__all__ = ["CsvSampleSink"]
