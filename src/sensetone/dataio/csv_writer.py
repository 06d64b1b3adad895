"""CSV writing helpers for sensor samples."""

from __future__ import annotations

import csv
import threading
from pathlib import Path

SAMPLE_HEADERS = ("t_ns", "x", "y", "z")


class CsvSampleSink:
    """
    Append ``(t_ns, x, y, z)`` rows to a CSV file.

    Instances are callable so they plug directly into a pipeline sample hook.
    Use as a context manager or call :meth:`close` when done.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._fh)
        self._writer.writerow(SAMPLE_HEADERS)
        self._lock = threading.Lock()
        self.rows_written = 0

    def __call__(self, t_ns: int, x: float, y: float, z: float) -> None:
        with self._lock:
            self._writer.writerow((int(t_ns), x, y, z))
            self.rows_written += 1

    def close(self) -> None:
        with self._lock:
            if not self._fh.closed:
                self._fh.close()

    def __enter__(self) -> CsvSampleSink:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
