"""
Error taxonomy for dataset loading and normalization.

File access problems surface as the built-in OSError (IOError).
"""
from __future__ import annotations

from pathlib import Path


class EmptyDatasetError(ValueError):
    """No usable rows to load or normalize."""


class MalformedRowError(ValueError):
    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line_no: int | None = None,
        column: int | None = None,
    ):
        self.path = path
        self.line_no = line_no
        self.column = column
        location = []
        if path is not None:
            location.append(str(path))
        if line_no is not None:
            location.append(f"line {line_no}")
        if column is not None:
            location.append(f"column {column}")
        prefix = ":".join(location)
        super().__init__(f"{prefix}: {message}" if prefix else message)


class DegenerateVarianceError(ValueError):
    """Standard deviation is zero, so z-scores are undefined.

    `columns` lists every offending column index (empty for a vector).
    """

    def __init__(self, message: str, columns: tuple[int, ...] = ()):
        self.columns = tuple(columns)
        super().__init__(message)
